"""
Platform settings catalogue.

Every supported key with its category, display metadata, value type, default
and validation. Values are validated with pydantic ``TypeAdapter`` in strict
mode, so ``"5"`` is not accepted where a number is expected.
"""

from __future__ import annotations

from typing import Annotated, Any, Dict, List, Literal

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, TypeAdapter, ValidationError

from .enums import SettingValueType

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"

SETTINGS_CATEGORIES: Dict[str, str] = {
    "platform": "Platform",
    "tenancy": "Tenancy",
    "camps": "Camps & Registrations",
    "venues": "Venues",
    "athletes": "Athletes",
    "friend_pairing": "Friend Pairing & Grouping",
    "notifications": "Notifications & Email",
    "storage": "Storage & Media",
    "payments": "Payments",
    "developer": "Developer Mode",
}

Email = Annotated[str, StringConstraints(pattern=EMAIL_PATTERN)]


def _bounded_str(min_length: int = 0, max_length: int = 10_000) -> Any:
    return Annotated[str, StringConstraints(min_length=min_length, max_length=max_length)]


def _bounded_int(ge: int, le: int) -> Any:
    return Annotated[int, Field(ge=ge, le=le)]


class SettingDefinition(BaseModel):
    """Schema entry of one setting key."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    key: str
    category: str
    label: str
    description: str
    value_type: SettingValueType
    default: Any
    tenant_overridable: bool = False
    rule: Any = Field(default=None, exclude=True)

    def validate_value(self, value: Any) -> bool:
        try:
            TypeAdapter(self.rule).validate_python(value, strict=True)
        except ValidationError:
            return False
        return True

    def describe(self) -> Dict[str, Any]:
        return self.model_dump(exclude={"rule"}, mode="json")


def _setting(
    key: str,
    category: str,
    label: str,
    description: str,
    value_type: SettingValueType,
    default: Any,
    rule: Any,
    tenant_overridable: bool = False,
) -> SettingDefinition:
    return SettingDefinition(
        key=key,
        category=category,
        label=label,
        description=description,
        value_type=value_type,
        default=default,
        rule=rule,
        tenant_overridable=tenant_overridable,
    )


STRING = SettingValueType.STRING
NUMBER = SettingValueType.NUMBER
BOOLEAN = SettingValueType.BOOLEAN
JSON = SettingValueType.JSON

_DEFINITIONS: List[SettingDefinition] = [
    # Platform
    _setting("platform_name", "platform", "Platform Name", "The name of the platform displayed to users",
             STRING, "Empowered Sports Camp", _bounded_str(1, 100)),
    _setting("support_email", "platform", "Support Email", "Primary support email address",
             STRING, "support@empoweredsportscamp.com", Email, tenant_overridable=True),
    _setting("default_timezone", "platform", "Default Timezone", "Default timezone for new camps and events",
             STRING, "America/New_York", str, tenant_overridable=True),
    _setting("maintenance_mode_enabled", "platform", "Maintenance Mode",
             "When enabled, blocks non-admin access to the platform", BOOLEAN, False, bool),
    _setting("legal_terms_url", "platform", "Terms of Service URL", "Link to terms of service page",
             STRING, "/terms", str),
    _setting("legal_privacy_url", "platform", "Privacy Policy URL", "Link to privacy policy page",
             STRING, "/privacy", str),
    # Tenancy
    _setting("tenant_default_config_template", "tenancy", "Default Tenant Config",
             "JSON template for new tenant configuration", JSON, {}, Dict[str, Any]),
    _setting("allow_tenant_overrides_by_category", "tenancy", "Tenant Override Permissions",
             "Which setting categories tenants can override", JSON,
             {"camps": True, "venues": True, "athletes": True, "friend_pairing": True, "notifications": True,
              "storage": True, "payments": False, "developer": False},
             Dict[str, bool]),
    # Camps & registrations
    _setting("default_camp_status_on_create", "camps", "Default Camp Status",
             "Initial status when a new camp is created", STRING, "draft",
             Literal["draft", "published", "registration_open", "registration_closed"], tenant_overridable=True),
    _setting("max_athletes_per_registration", "camps", "Max Athletes Per Registration",
             "Maximum number of athletes a parent can register at once", NUMBER, 5, _bounded_int(1, 20),
             tenant_overridable=True),
    _setting("registration_close_hours_before_start", "camps", "Registration Cutoff (Hours)",
             "Hours before camp start when registration closes", NUMBER, 24, _bounded_int(0, 168),
             tenant_overridable=True),
    _setting("waitlist_enabled", "camps", "Waitlist Enabled", "Allow waitlist signups when camps are full",
             BOOLEAN, True, bool, tenant_overridable=True),
    _setting("refund_window_days", "camps", "Refund Window (Days)",
             "Days before camp start when refunds are allowed", NUMBER, 7, _bounded_int(0, 90),
             tenant_overridable=True),
    _setting("refund_policy_text", "camps", "Refund Policy Text", "Displayed refund policy during registration",
             STRING,
             "Full refunds are available up to 7 days before camp starts. After that, a 50% refund is available "
             "up to 48 hours before camp. No refunds within 48 hours of camp start.",
             _bounded_str(0, 1000), tenant_overridable=True),
    # Venues
    _setting("venue_approval_required", "venues", "Venue Approval Required",
             "Whether new venues require HQ approval", BOOLEAN, False, bool),
    _setting("default_venue_visibility", "venues", "Default Venue Visibility",
             "Default visibility setting for new venues", STRING, "tenant",
             Literal["public", "tenant", "private"], tenant_overridable=True),
    # Athletes
    _setting("athlete_required_fields", "athletes", "Required Athlete Fields",
             "Fields required when registering an athlete", JSON,
             ["first_name", "last_name", "date_of_birth", "grade", "emergency_contact_name",
              "emergency_contact_phone"],
             List[str], tenant_overridable=True),
    _setting("athlete_medical_info_required", "athletes", "Medical Info Required",
             "Whether medical information is required for registration", BOOLEAN, True, bool,
             tenant_overridable=True),
    _setting("athlete_photo_required", "athletes", "Photo Required",
             "Whether athlete photo is required for registration", BOOLEAN, False, bool, tenant_overridable=True),
    # Friend pairing
    _setting("friend_pairing_enabled", "friend_pairing", "Friend Pairing Enabled",
             "Allow parents to request friend groupings", BOOLEAN, True, bool, tenant_overridable=True),
    _setting("friend_pairing_label", "friend_pairing", "Friend Pairing Label",
             "Branded label for friend pairing feature", STRING, "Build Her Squad", _bounded_str(1, 50),
             tenant_overridable=True),
    _setting("friend_pairing_request_expiration_hours", "friend_pairing", "Request Expiration (Hours)",
             "Hours until friend pairing requests expire", NUMBER, 72, _bounded_int(1, 720),
             tenant_overridable=True),
    _setting("friend_pairing_max_requests_per_registration", "friend_pairing", "Max Requests Per Registration",
             "Maximum friend pairing requests per registration", NUMBER, 3, _bounded_int(1, 10),
             tenant_overridable=True),
    # Notifications
    _setting("notifications_email_enabled", "notifications", "Email Notifications Enabled",
             "Master toggle for email notifications", BOOLEAN, True, bool, tenant_overridable=True),
    _setting("email_sender_name", "notifications", "Email Sender Name", "Name shown as email sender",
             STRING, "Empowered Sports Camp", _bounded_str(1, 100), tenant_overridable=True),
    _setting("email_sender_address", "notifications", "Email Sender Address", "Email address used as sender",
             STRING, "noreply@empoweredsportscamp.com", Email, tenant_overridable=True),
    _setting("notifications_in_app_enabled", "notifications", "In-App Notifications Enabled",
             "Master toggle for in-app notifications", BOOLEAN, True, bool, tenant_overridable=True),
    # Storage
    _setting("s3_uploads_enabled", "storage", "S3 Uploads Enabled", "Enable file uploads to S3",
             BOOLEAN, True, bool),
    _setting("allowed_upload_mime_types", "storage", "Allowed Upload Types",
             "List of allowed MIME types for uploads", JSON,
             ["image/jpeg", "image/png", "image/gif", "image/webp", "application/pdf", "application/msword",
              "application/vnd.openxmlformats-officedocument.wordprocessingml.document"],
             List[str], tenant_overridable=True),
    _setting("max_upload_size_mb", "storage", "Max Upload Size (MB)", "Maximum file upload size in megabytes",
             NUMBER, 10, Annotated[float, Field(ge=1, le=100)], tenant_overridable=True),
    _setting("signed_url_expiration_seconds", "storage", "Signed URL Expiration (Seconds)",
             "How long S3 signed URLs remain valid", NUMBER, 3600, _bounded_int(60, 86400)),
    # Payments
    _setting("payments_enabled", "payments", "Payments Enabled", "Master toggle for payment processing",
             BOOLEAN, True, bool),
    _setting("payments_currency", "payments", "Currency", "Default currency for payments",
             STRING, "USD", Literal["USD", "CAD"]),
    _setting("stripe_mode", "payments", "Stripe Mode", "Live or simulated Stripe integration",
             STRING, "LIVE", Literal["LIVE", "SIMULATED"]),
    _setting("stripe_publishable_key", "payments", "Stripe Publishable Key",
             "Stripe publishable API key (safe to expose)", STRING, "", str),
    _setting("show_webhook_health_status", "payments", "Show Webhook Health",
             "Display webhook health status in admin", BOOLEAN, True, bool),
    # Developer mode
    _setting("developer_mode_enabled", "developer", "Developer Mode", "Master toggle for developer/testing mode",
             BOOLEAN, False, bool),
    _setting("simulated_payments_default_outcome", "developer", "Simulated Payment Outcome",
             "Default outcome for simulated payments", STRING, "SUCCESS",
             Literal["SUCCESS", "DECLINED", "REQUIRES_ACTION_THEN_SUCCESS"]),
    _setting("developer_mode_banner_enabled", "developer", "Show Developer Banner",
             "Show developer mode banner in admin dashboards", BOOLEAN, True, bool),
]

SETTINGS_SCHEMA: Dict[str, SettingDefinition] = {definition.key: definition for definition in _DEFINITIONS}


def get_definition(key: str) -> SettingDefinition | None:
    return SETTINGS_SCHEMA.get(key)


def default_values() -> Dict[str, Any]:
    return {key: definition.default for key, definition in SETTINGS_SCHEMA.items()}
