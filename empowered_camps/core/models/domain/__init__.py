"""Domain enums and role helpers."""

from .enums import (
    BlockCategory,
    CampStatus,
    CertificationStatus,
    CitApplicationStatus,
    CitProgressEventType,
    DifficultyLevel,
    DiscountType,
    EmailType,
    EmploymentType,
    IntensityLevel,
    JobStatus,
    LicenseStatus,
    PaymentStatus,
    PromoAppliesTo,
    RegistrationStatus,
    RoyaltyInvoiceStatus,
    SettingAuditSource,
    SettingScope,
    SettingValueType,
    SportType,
    UserRole,
)
from .roles import ADMIN_ROLES, role_in

__all__ = [
    "ADMIN_ROLES",
    "BlockCategory",
    "CampStatus",
    "CertificationStatus",
    "CitApplicationStatus",
    "CitProgressEventType",
    "DifficultyLevel",
    "DiscountType",
    "EmailType",
    "EmploymentType",
    "IntensityLevel",
    "JobStatus",
    "LicenseStatus",
    "PaymentStatus",
    "PromoAppliesTo",
    "RegistrationStatus",
    "RoyaltyInvoiceStatus",
    "SettingAuditSource",
    "SettingScope",
    "SettingValueType",
    "SportType",
    "UserRole",
    "role_in",
]
