"""Domain enums shared by entities, services and API schemas."""

from __future__ import annotations

from enum import Enum


class UserRole(str, Enum):
    """Platform roles, declared from lowest to highest privilege."""

    parent = "parent"
    cit_volunteer = "cit_volunteer"
    coach = "coach"
    director = "director"
    licensee_owner = "licensee_owner"
    hq_admin = "hq_admin"


class LicenseStatus(str, Enum):
    active = "active"
    suspended = "suspended"
    terminated = "terminated"


class CampStatus(str, Enum):
    draft = "draft"
    published = "published"
    registration_open = "registration_open"
    registration_closed = "registration_closed"
    in_progress = "in_progress"
    completed = "completed"
    cancelled = "cancelled"


class PaymentStatus(str, Enum):
    pending = "pending"
    partial = "partial"
    paid = "paid"
    refunded = "refunded"
    failed = "failed"


class RegistrationStatus(str, Enum):
    pending = "pending"
    confirmed = "confirmed"
    waitlisted = "waitlisted"
    cancelled = "cancelled"
    refunded = "refunded"


class DiscountType(str, Enum):
    percentage = "percentage"
    fixed = "fixed"


class PromoAppliesTo(str, Enum):
    registration = "registration"
    addons = "addons"
    both = "both"


class RoyaltyInvoiceStatus(str, Enum):
    """Lifecycle of a royalty invoice. ``paid`` and ``waived`` are terminal."""

    pending = "pending"
    invoiced = "invoiced"
    paid = "paid"
    overdue = "overdue"
    disputed = "disputed"
    waived = "waived"


class SettingScope(str, Enum):
    GLOBAL = "GLOBAL"
    TENANT = "TENANT"


class SettingValueType(str, Enum):
    STRING = "STRING"
    NUMBER = "NUMBER"
    BOOLEAN = "BOOLEAN"
    JSON = "JSON"


class SettingAuditSource(str, Enum):
    ADMIN_UI = "ADMIN_UI"
    LICENSEE_UI = "LICENSEE_UI"
    API = "API"
    SYSTEM = "SYSTEM"


class EmailType(str, Enum):
    registration_confirmation = "registration_confirmation"
    camp_two_weeks_out = "camp_two_weeks_out"
    camp_two_days_before = "camp_two_days_before"
    camp_daily_recap = "camp_daily_recap"
    camp_session_recap = "camp_session_recap"
    season_followup_jan = "season_followup_jan"
    season_followup_feb = "season_followup_feb"
    season_followup_mar = "season_followup_mar"
    season_followup_apr = "season_followup_apr"
    season_followup_may = "season_followup_may"
    payment_receipt = "payment_receipt"
    payment_failed = "payment_failed"
    cit_status_update = "cit_status_update"
    royalty_invoice = "royalty_invoice"
    royalty_status_update = "royalty_status_update"


class SportType(str, Enum):
    multi_sport = "multi_sport"
    basketball = "basketball"
    soccer = "soccer"
    volleyball = "volleyball"
    softball = "softball"
    flag_football = "flag_football"
    lacrosse = "lacrosse"
    field_hockey = "field_hockey"
    track_field = "track_field"
    speed_agility = "speed_agility"


class DifficultyLevel(str, Enum):
    intro = "intro"
    beginner = "beginner"
    intermediate = "intermediate"
    advanced = "advanced"


class BlockCategory(str, Enum):
    warmup = "warmup"
    drill = "drill"
    skill_station = "skill_station"
    scrimmage = "scrimmage"
    game = "game"
    mindset = "mindset"
    leadership = "leadership"
    team_building = "team_building"
    cooldown = "cooldown"
    water_break = "water_break"
    transition = "transition"
    other = "other"


class IntensityLevel(str, Enum):
    low = "low"
    moderate = "moderate"
    high = "high"
    variable = "variable"


class CertificationStatus(str, Enum):
    pending_review = "pending_review"
    approved = "approved"
    rejected = "rejected"
    expired = "expired"


class CitApplicationStatus(str, Enum):
    applied = "applied"
    under_review = "under_review"
    interview_scheduled = "interview_scheduled"
    interview_completed = "interview_completed"
    training_pending = "training_pending"
    training_complete = "training_complete"
    approved = "approved"
    assigned_first_camp = "assigned_first_camp"
    rejected = "rejected"
    on_hold = "on_hold"
    withdrawn = "withdrawn"


class CitProgressEventType(str, Enum):
    status_change = "status_change"
    note_added = "note_added"
    interview_scheduled = "interview_scheduled"
    interview_completed = "interview_completed"
    training_started = "training_started"
    training_completed = "training_completed"
    camp_assigned = "camp_assigned"
    document_uploaded = "document_uploaded"
    application_submitted = "application_submitted"


class JobStatus(str, Enum):
    draft = "draft"
    open = "open"
    closed = "closed"
    archived = "archived"


class EmploymentType(str, Enum):
    seasonal = "seasonal"
    part_time = "part_time"
    full_time = "full_time"
    internship = "internship"
    contract = "contract"
