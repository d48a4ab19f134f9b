"""
Repository layer: one repository per table group, all built on
``SQLModelRepository``.
"""

from .base import AsyncBaseRepository, QueryBuilder, SQLModelRepository
from .camps import AddonRepository, CampRepository
from .curriculum import CampCurriculumRepository, CurriculumBlockRepository, CurriculumTemplateRepository
from .email_templates import EmailTemplateRepository
from .promo_codes import PromoCodeRepository
from .registrations import RegistrationRepository
from .royalties import RoyaltyInvoiceRepository
from .settings import SettingRepository
from .staffing import CertificationRepository, CitApplicationRepository, JobPostingRepository
from .tenants import AthleteRepository, ProfileRepository, TenantRepository

__all__ = [
    "AddonRepository",
    "AsyncBaseRepository",
    "AthleteRepository",
    "CampCurriculumRepository",
    "CampRepository",
    "CertificationRepository",
    "CitApplicationRepository",
    "CurriculumBlockRepository",
    "CurriculumTemplateRepository",
    "EmailTemplateRepository",
    "JobPostingRepository",
    "ProfileRepository",
    "PromoCodeRepository",
    "QueryBuilder",
    "RegistrationRepository",
    "RoyaltyInvoiceRepository",
    "SettingRepository",
    "SQLModelRepository",
    "TenantRepository",
]
