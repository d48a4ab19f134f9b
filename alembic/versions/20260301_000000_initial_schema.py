"""Initial schema for the Empowered Camps platform

Revision ID: 20260301_000000
Revises: None
Create Date: 2026-03-01 00:00:00.000000

Creates every table of the platform:
- Tenancy and people (tenants, profiles, athletes)
- Camps, add-ons, registrations and promo codes
- Royalty invoices and line items
- Platform settings with their audit log, and email templates
- Curriculum templates, blocks, days and camp assignments
- CIT applications, volunteer certifications and job postings

Enum columns use native PostgreSQL enum types named after the enum class in
lower case, which is how SQLModel maps them.

Revision format: YYYYMMDD_HHMMSS_description

"""

from typing import Dict, Sequence, Type, Union

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import ENUM

from alembic import op

from empowered_camps.core.models.domain import enums

# revision identifiers, used by Alembic.
revision: str = "20260301_000000"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ENUM_CLASSES: Sequence[Type] = (
    enums.UserRole,
    enums.LicenseStatus,
    enums.CampStatus,
    enums.PaymentStatus,
    enums.RegistrationStatus,
    enums.DiscountType,
    enums.PromoAppliesTo,
    enums.RoyaltyInvoiceStatus,
    enums.SettingScope,
    enums.SettingValueType,
    enums.SettingAuditSource,
    enums.EmailType,
    enums.SportType,
    enums.DifficultyLevel,
    enums.BlockCategory,
    enums.IntensityLevel,
    enums.CertificationStatus,
    enums.CitApplicationStatus,
    enums.CitProgressEventType,
    enums.JobStatus,
    enums.EmploymentType,
)

TABLES: Sequence[str] = (
    "job_postings",
    "volunteer_certifications",
    "cit_progress_events",
    "cit_applications",
    "camp_session_curriculum",
    "curriculum_day_blocks",
    "curriculum_template_days",
    "curriculum_blocks",
    "curriculum_templates",
    "email_templates",
    "settings_audit_log",
    "settings",
    "royalty_line_items",
    "royalty_invoices",
    "registration_addons",
    "registrations",
    "promo_codes",
    "addon_variants",
    "addons",
    "camps",
    "athletes",
    "profiles",
    "tenants",
)


def _enum_name(enum_class: Type) -> str:
    return enum_class.__name__.lower()


def _types() -> Dict[Type, ENUM]:
    return {
        enum_class: ENUM(*[member.value for member in enum_class], name=_enum_name(enum_class), create_type=False)
        for enum_class in ENUM_CLASSES
    }


def _id() -> sa.Column:
    return sa.Column("id", sa.String(36), nullable=False)


def _timestamps() -> list:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def _cents(name: str, nullable: bool = False) -> sa.Column:
    if nullable:
        return sa.Column(name, sa.Integer(), nullable=True)
    return sa.Column(name, sa.Integer(), nullable=False, server_default="0")


def upgrade() -> None:
    """Create enum types and all tables."""
    bind = op.get_bind()
    types = _types()
    for enum_class in ENUM_CLASSES:
        ENUM(*[member.value for member in enum_class], name=_enum_name(enum_class)).create(bind, checkfirst=True)

    # Tenancy and people
    op.create_table(
        "tenants",
        _id(),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("slug", sa.String(), nullable=False),
        sa.Column("contact_email", sa.String(), nullable=True),
        sa.Column("contact_phone", sa.String(), nullable=True),
        sa.Column("city", sa.String(), nullable=True),
        sa.Column("state", sa.String(), nullable=True),
        sa.Column("territory_name", sa.String(), nullable=True),
        sa.Column("license_status", types[enums.LicenseStatus], nullable=False),
        sa.Column("royalty_rate", sa.Float(), nullable=True),
        sa.Column("tax_rate_percent", sa.Float(), nullable=True),
        sa.Column("stripe_account_id", sa.String(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_tenants_slug", "tenants", ["slug"], unique=True)

    op.create_table(
        "profiles",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("first_name", sa.String(), nullable=True),
        sa.Column("last_name", sa.String(), nullable=True),
        sa.Column("phone", sa.String(), nullable=True),
        sa.Column("address_line1", sa.String(), nullable=True),
        sa.Column("address_line2", sa.String(), nullable=True),
        sa.Column("city", sa.String(), nullable=True),
        sa.Column("state", sa.String(), nullable=True),
        sa.Column("zip_code", sa.String(), nullable=True),
        sa.Column("emergency_contact_name", sa.String(), nullable=True),
        sa.Column("emergency_contact_phone", sa.String(), nullable=True),
        sa.Column("emergency_contact_relationship", sa.String(), nullable=True),
        sa.Column("role", types[enums.UserRole], nullable=False),
        sa.Column("tenant_id", sa.String(36), sa.ForeignKey("tenants.id"), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_profiles_email", "profiles", ["email"])
    op.create_index("ix_profiles_tenant_id", "profiles", ["tenant_id"])

    op.create_table(
        "athletes",
        _id(),
        sa.Column("parent_id", sa.String(64), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("first_name", sa.String(), nullable=False),
        sa.Column("last_name", sa.String(), nullable=False),
        sa.Column("date_of_birth", sa.Date(), nullable=False),
        sa.Column("grade", sa.String(), nullable=True),
        sa.Column("t_shirt_size", sa.String(), nullable=True),
        sa.Column("medical_notes", sa.String(), nullable=True),
        sa.Column("allergies", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_athletes_parent_id", "athletes", ["parent_id"])

    # Camps and add-ons
    op.create_table(
        "camps",
        _id(),
        sa.Column("tenant_id", sa.String(36), sa.ForeignKey("tenants.id"), nullable=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("program_type", sa.String(), nullable=False, server_default="sports_camp"),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("daily_start_time", sa.String(), nullable=True),
        sa.Column("daily_end_time", sa.String(), nullable=True),
        sa.Column("location_name", sa.String(), nullable=True),
        sa.Column("capacity", sa.Integer(), nullable=True),
        _cents("price_cents"),
        _cents("early_bird_price_cents", nullable=True),
        sa.Column("early_bird_deadline", sa.Date(), nullable=True),
        sa.Column("min_age", sa.Integer(), nullable=True),
        sa.Column("max_age", sa.Integer(), nullable=True),
        sa.Column("status", types[enums.CampStatus], nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_camps_tenant_id", "camps", ["tenant_id"])

    op.create_table(
        "addons",
        _id(),
        sa.Column("tenant_id", sa.String(36), sa.ForeignKey("tenants.id"), nullable=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.String(), nullable=True),
        _cents("price_cents"),
        sa.Column("is_taxable", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_addons_tenant_id", "addons", ["tenant_id"])

    op.create_table(
        "addon_variants",
        _id(),
        sa.Column("addon_id", sa.String(36), sa.ForeignKey("addons.id"), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        _cents("price_override_cents", nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_addon_variants_addon_id", "addon_variants", ["addon_id"])

    # Promo codes and registrations
    op.create_table(
        "promo_codes",
        _id(),
        sa.Column("tenant_id", sa.String(36), sa.ForeignKey("tenants.id"), nullable=False),
        sa.Column("code", sa.String(), nullable=False),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("discount_type", types[enums.DiscountType], nullable=False),
        sa.Column("discount_value", sa.Integer(), nullable=False),
        sa.Column("applies_to", types[enums.PromoAppliesTo], nullable=False),
        sa.Column("max_uses", sa.Integer(), nullable=True),
        sa.Column("valid_from", sa.DateTime(timezone=True), nullable=True),
        sa.Column("valid_until", sa.DateTime(timezone=True), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("tenant_id", "code", name="uq_promo_codes_tenant_code"),
    )
    op.create_index("ix_promo_codes_tenant_id", "promo_codes", ["tenant_id"])
    op.create_index("ix_promo_codes_code", "promo_codes", ["code"])

    op.create_table(
        "registrations",
        _id(),
        sa.Column("tenant_id", sa.String(36), sa.ForeignKey("tenants.id"), nullable=False),
        sa.Column("camp_id", sa.String(36), sa.ForeignKey("camps.id"), nullable=False),
        sa.Column("athlete_id", sa.String(36), sa.ForeignKey("athletes.id"), nullable=False),
        sa.Column("parent_id", sa.String(64), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("status", types[enums.RegistrationStatus], nullable=False),
        sa.Column("payment_status", types[enums.PaymentStatus], nullable=False),
        _cents("base_price_cents"),
        _cents("discount_cents"),
        _cents("promo_discount_cents"),
        _cents("addons_total_cents"),
        _cents("tax_cents"),
        _cents("total_price_cents"),
        sa.Column("promo_code_id", sa.String(36), sa.ForeignKey("promo_codes.id"), nullable=True),
        sa.Column("payment_method", sa.String(), nullable=True),
        sa.Column("stripe_payment_intent_id", sa.String(), nullable=True),
        sa.Column("stripe_checkout_session_id", sa.String(), nullable=True),
        sa.Column("paid_at", sa.DateTime(timezone=True), nullable=True),
        _cents("refund_amount_cents"),
        sa.Column("refunded_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("cancellation_reason", sa.String(), nullable=True),
        sa.Column("shirt_size", sa.String(), nullable=True),
        sa.Column("special_considerations", sa.String(), nullable=True),
        sa.Column("waitlist_position", sa.Integer(), nullable=True),
        sa.Column("waitlist_joined_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("waitlist_offer_token", sa.String(), nullable=True),
        sa.Column("waitlist_offer_sent_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("waitlist_offer_expires_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    for column in (
        "tenant_id",
        "camp_id",
        "athlete_id",
        "parent_id",
        "promo_code_id",
        "stripe_payment_intent_id",
        "stripe_checkout_session_id",
        "waitlist_offer_token",
    ):
        op.create_index(f"ix_registrations_{column}", "registrations", [column])

    op.create_table(
        "registration_addons",
        _id(),
        sa.Column("registration_id", sa.String(36), sa.ForeignKey("registrations.id"), nullable=False),
        sa.Column("addon_id", sa.String(36), sa.ForeignKey("addons.id"), nullable=False),
        sa.Column("variant_id", sa.String(36), sa.ForeignKey("addon_variants.id"), nullable=True),
        sa.Column("quantity", sa.Integer(), nullable=False, server_default="1"),
        _cents("price_cents"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_registration_addons_registration_id", "registration_addons", ["registration_id"])

    # Royalties
    op.create_table(
        "royalty_invoices",
        _id(),
        sa.Column("tenant_id", sa.String(36), sa.ForeignKey("tenants.id"), nullable=False),
        sa.Column("camp_id", sa.String(36), sa.ForeignKey("camps.id"), nullable=True),
        sa.Column("invoice_number", sa.String(), nullable=False),
        sa.Column("period_start", sa.Date(), nullable=False),
        sa.Column("period_end", sa.Date(), nullable=False),
        sa.Column("period_type", sa.String(), nullable=False, server_default="camp_session"),
        _cents("registration_revenue_cents"),
        _cents("addon_revenue_cents"),
        _cents("gross_revenue_cents"),
        _cents("refunds_cents"),
        _cents("net_revenue_cents"),
        sa.Column("royalty_rate_bps", sa.Integer(), nullable=False, server_default="1000"),
        _cents("royalty_due_cents"),
        _cents("adjustment_cents"),
        _cents("total_due_cents"),
        sa.Column("status", types[enums.RoyaltyInvoiceStatus], nullable=False),
        sa.Column("generated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("generated_by_user_id", sa.String(), nullable=True),
        sa.Column("due_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("paid_at", sa.DateTime(timezone=True), nullable=True),
        _cents("paid_amount_cents", nullable=True),
        sa.Column("paid_by_user_id", sa.String(), nullable=True),
        sa.Column("payment_method", sa.String(), nullable=True),
        sa.Column("payment_reference", sa.String(), nullable=True),
        sa.Column("dispute_reason", sa.String(), nullable=True),
        sa.Column("disputed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("resolved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("notes", sa.String(), nullable=True),
        sa.Column("adjustment_notes", sa.String(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_royalty_invoices_tenant_id", "royalty_invoices", ["tenant_id"])
    op.create_index("ix_royalty_invoices_camp_id", "royalty_invoices", ["camp_id"])
    op.create_index("ix_royalty_invoices_invoice_number", "royalty_invoices", ["invoice_number"], unique=True)

    op.create_table(
        "royalty_line_items",
        _id(),
        sa.Column("invoice_id", sa.String(36), sa.ForeignKey("royalty_invoices.id"), nullable=False),
        sa.Column("registration_id", sa.String(), nullable=True),
        sa.Column("item_type", sa.String(), nullable=False, server_default="registration"),
        sa.Column("description", sa.String(), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False, server_default="1"),
        _cents("unit_price_cents"),
        _cents("total_cents"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_royalty_line_items_invoice_id", "royalty_line_items", ["invoice_id"])

    # Settings and email templates
    op.create_table(
        "settings",
        _id(),
        sa.Column("scope", types[enums.SettingScope], nullable=False),
        sa.Column("tenant_id", sa.String(36), sa.ForeignKey("tenants.id"), nullable=True),
        sa.Column("key", sa.String(), nullable=False),
        sa.Column("value_json", sa.JSON(), nullable=True),
        sa.Column("value_type", types[enums.SettingValueType], nullable=False),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_by_user_id", sa.String(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_settings_scope", "settings", ["scope"])
    op.create_index("ix_settings_tenant_id", "settings", ["tenant_id"])
    op.create_index("ix_settings_key", "settings", ["key"])

    op.create_table(
        "settings_audit_log",
        _id(),
        sa.Column("setting_id", sa.String(), nullable=True),
        sa.Column("scope", types[enums.SettingScope], nullable=False),
        sa.Column("tenant_id", sa.String(), nullable=True),
        sa.Column("key", sa.String(), nullable=False),
        sa.Column("old_value", sa.JSON(), nullable=True),
        sa.Column("new_value", sa.JSON(), nullable=True),
        sa.Column("changed_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("changed_by_user_id", sa.String(), nullable=True),
        sa.Column("source", types[enums.SettingAuditSource], nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_settings_audit_log_tenant_id", "settings_audit_log", ["tenant_id"])
    op.create_index("ix_settings_audit_log_changed_at", "settings_audit_log", ["changed_at"])

    op.create_table(
        "email_templates",
        _id(),
        sa.Column("tenant_id", sa.String(36), sa.ForeignKey("tenants.id"), nullable=True),
        sa.Column("email_type", types[enums.EmailType], nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("subject", sa.String(), nullable=False),
        sa.Column("body_html", sa.String(), nullable=False),
        sa.Column("body_text", sa.String(), nullable=True),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("available_vars", sa.JSON(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_by", sa.String(), nullable=True),
        sa.Column("updated_by", sa.String(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_email_templates_tenant_id", "email_templates", ["tenant_id"])
    op.create_index("ix_email_templates_email_type", "email_templates", ["email_type"])

    # Curriculum
    op.create_table(
        "curriculum_templates",
        _id(),
        sa.Column("licensee_id", sa.String(36), sa.ForeignKey("tenants.id"), nullable=True),
        sa.Column("sport", types[enums.SportType], nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("age_min", sa.Integer(), nullable=True),
        sa.Column("age_max", sa.Integer(), nullable=True),
        sa.Column("difficulty", types[enums.DifficultyLevel], nullable=False),
        sa.Column("is_global", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("total_days", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("is_published", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_by", sa.String(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_curriculum_templates_licensee_id", "curriculum_templates", ["licensee_id"])

    op.create_table(
        "curriculum_blocks",
        _id(),
        sa.Column("licensee_id", sa.String(36), sa.ForeignKey("tenants.id"), nullable=True),
        sa.Column("sport", types[enums.SportType], nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("duration_minutes", sa.Integer(), nullable=False, server_default="15"),
        sa.Column("category", types[enums.BlockCategory], nullable=False),
        sa.Column("intensity", types[enums.IntensityLevel], nullable=False),
        sa.Column("equipment_needed", sa.String(), nullable=True),
        sa.Column("is_global", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_by", sa.String(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_curriculum_blocks_licensee_id", "curriculum_blocks", ["licensee_id"])

    op.create_table(
        "curriculum_template_days",
        _id(),
        sa.Column("template_id", sa.String(36), sa.ForeignKey("curriculum_templates.id"), nullable=False),
        sa.Column("day_number", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("theme", sa.String(), nullable=True),
        sa.Column("notes", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_curriculum_template_days_template_id", "curriculum_template_days", ["template_id"])

    op.create_table(
        "curriculum_day_blocks",
        _id(),
        sa.Column("day_id", sa.String(36), sa.ForeignKey("curriculum_template_days.id"), nullable=False),
        sa.Column("block_id", sa.String(36), sa.ForeignKey("curriculum_blocks.id"), nullable=False),
        sa.Column("order_index", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("custom_title", sa.String(), nullable=True),
        sa.Column("custom_duration_minutes", sa.Integer(), nullable=True),
        sa.Column("notes", sa.String(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_curriculum_day_blocks_day_id", "curriculum_day_blocks", ["day_id"])
    op.create_index("ix_curriculum_day_blocks_block_id", "curriculum_day_blocks", ["block_id"])

    op.create_table(
        "camp_session_curriculum",
        _id(),
        sa.Column("camp_id", sa.String(36), sa.ForeignKey("camps.id"), nullable=False),
        sa.Column("template_id", sa.String(36), sa.ForeignKey("curriculum_templates.id"), nullable=False),
        sa.Column("assigned_by", sa.String(), nullable=True),
        sa.Column("assigned_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("notes", sa.String(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_camp_session_curriculum_camp_id", "camp_session_curriculum", ["camp_id"], unique=True)
    op.create_index("ix_camp_session_curriculum_template_id", "camp_session_curriculum", ["template_id"])

    # Staffing
    op.create_table(
        "cit_applications",
        _id(),
        sa.Column("user_id", sa.String(), nullable=True),
        sa.Column("first_name", sa.String(), nullable=False),
        sa.Column("last_name", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        *[
            sa.Column(name, sa.String(), nullable=True)
            for name in (
                "phone",
                "city",
                "state",
                "school_name",
                "grade_level",
                "graduation_year",
                "sports_played",
                "experience_summary",
                "why_cit",
                "leadership_experience",
                "availability_notes",
                "parent_name",
                "parent_email",
                "parent_phone",
                "how_heard",
            )
        ],
        sa.Column("status", types[enums.CitApplicationStatus], nullable=False),
        sa.Column("assigned_licensee_id", sa.String(36), sa.ForeignKey("tenants.id"), nullable=True),
        sa.Column("assigned_director_id", sa.String(), nullable=True),
        sa.Column("notes_internal", sa.String(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_cit_applications_user_id", "cit_applications", ["user_id"])
    op.create_index("ix_cit_applications_email", "cit_applications", ["email"])
    op.create_index("ix_cit_applications_status", "cit_applications", ["status"])

    op.create_table(
        "cit_progress_events",
        _id(),
        sa.Column("cit_application_id", sa.String(36), sa.ForeignKey("cit_applications.id"), nullable=False),
        sa.Column("type", types[enums.CitProgressEventType], nullable=False),
        sa.Column("from_status", types[enums.CitApplicationStatus], nullable=True),
        sa.Column("to_status", types[enums.CitApplicationStatus], nullable=True),
        sa.Column("details", sa.String(), nullable=True),
        sa.Column("changed_by_user_id", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_cit_progress_events_cit_application_id", "cit_progress_events", ["cit_application_id"])

    op.create_table(
        "volunteer_certifications",
        _id(),
        sa.Column("profile_id", sa.String(64), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("tenant_id", sa.String(36), sa.ForeignKey("tenants.id"), nullable=True),
        sa.Column("document_url", sa.String(), nullable=False),
        sa.Column("document_type", sa.String(), nullable=False),
        sa.Column("document_name", sa.String(), nullable=True),
        sa.Column("status", types[enums.CertificationStatus], nullable=False),
        sa.Column("submitted_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("reviewed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("reviewed_by_profile_id", sa.String(), nullable=True),
        sa.Column("notes", sa.String(), nullable=True),
        sa.Column("reviewer_notes", sa.String(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_volunteer_certifications_profile_id", "volunteer_certifications", ["profile_id"])
    op.create_index("ix_volunteer_certifications_tenant_id", "volunteer_certifications", ["tenant_id"])
    op.create_index("ix_volunteer_certifications_status", "volunteer_certifications", ["status"])

    op.create_table(
        "job_postings",
        _id(),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("slug", sa.String(), nullable=False),
        sa.Column("short_description", sa.String(), nullable=False),
        sa.Column("full_description", sa.String(), nullable=False),
        sa.Column("location_label", sa.String(), nullable=False),
        sa.Column("employment_type", types[enums.EmploymentType], nullable=False),
        sa.Column("is_remote_friendly", sa.Boolean(), nullable=False, server_default=sa.false()),
        _cents("min_comp_cents", nullable=True),
        _cents("max_comp_cents", nullable=True),
        sa.Column("comp_frequency", sa.String(), nullable=True),
        sa.Column("application_instructions", sa.String(), nullable=True),
        sa.Column("application_email", sa.String(), nullable=True),
        sa.Column("application_url", sa.String(), nullable=True),
        sa.Column("status", types[enums.JobStatus], nullable=False),
        sa.Column("priority", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("tenant_id", sa.String(36), sa.ForeignKey("tenants.id"), nullable=True),
        sa.Column("created_by_user_id", sa.String(), nullable=False),
        sa.Column("published_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_job_postings_slug", "job_postings", ["slug"], unique=True)
    op.create_index("ix_job_postings_status", "job_postings", ["status"])
    op.create_index("ix_job_postings_tenant_id", "job_postings", ["tenant_id"])


def downgrade() -> None:
    """Drop all tables and enum types."""
    for table in TABLES:
        op.drop_table(table)
    bind = op.get_bind()
    for enum_class in reversed(ENUM_CLASSES):
        ENUM(name=_enum_name(enum_class)).drop(bind, checkfirst=True)
