"""
Database entity models.

This package contains all database entity models organized by business domain.
Importing it registers every table on ``Base.metadata``.

Modules:
- tenants: licensee accounts
- profiles: user profiles and athletes
- camps: camp sessions and the add-on catalogue
- registrations: registrations and purchased add-ons
- promo_codes: tenant discount codes
- royalties: royalty invoices and line items
- settings: platform settings and their audit log
- email_templates: customized email templates
- curriculum: templates, blocks, days and camp assignments
- staffing: CIT applications, volunteer certifications, job postings
"""

from .camps import Addon, AddonVariant, Camp, CampBase
from .curriculum import (
    CampSessionCurriculum,
    CurriculumBlock,
    CurriculumDayBlock,
    CurriculumTemplate,
    CurriculumTemplateDay,
)
from .email_templates import EmailTemplate
from .profiles import Athlete, Profile
from .promo_codes import PromoCode
from .registrations import Registration, RegistrationAddon
from .royalties import RoyaltyInvoice, RoyaltyLineItem
from .settings import Setting, SettingsAuditLog
from .staffing import CitApplication, CitProgressEvent, JobPosting, VolunteerCertification
from .tenants import Tenant, TenantBase

__all__ = [
    "Addon",
    "AddonVariant",
    "Athlete",
    "Camp",
    "CampBase",
    "CampSessionCurriculum",
    "CitApplication",
    "CitProgressEvent",
    "CurriculumBlock",
    "CurriculumDayBlock",
    "CurriculumTemplate",
    "CurriculumTemplateDay",
    "EmailTemplate",
    "JobPosting",
    "Profile",
    "PromoCode",
    "Registration",
    "RegistrationAddon",
    "RoyaltyInvoice",
    "RoyaltyLineItem",
    "Setting",
    "SettingsAuditLog",
    "Tenant",
    "TenantBase",
    "VolunteerCertification",
]
