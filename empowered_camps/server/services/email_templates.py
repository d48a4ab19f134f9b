"""
Email Template Service.

Built-in defaults exist for every email type; stored templates override
them globally or per tenant. Bodies use ``{{variable}}`` placeholders.
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Mapping, NamedTuple, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from empowered_camps.core.database.entities.email_templates import EmailTemplate
from empowered_camps.core.database.repositories import EmailTemplateRepository, TenantRepository
from empowered_camps.core.errors import BadRequestError, NotFoundError
from empowered_camps.core.logging_config import get_logger
from empowered_camps.core.models.domain.enums import EmailType
from empowered_camps.core.models.io.settings import EmailTemplateUpsert

logger = get_logger(__name__)

PLACEHOLDER = re.compile(r"\{\{\s*(\w+)\s*\}\}")


class TemplateDefault(NamedTuple):
    name: str
    description: str
    variables: Tuple[str, ...]
    subject: str
    body_html: str


def _body(*paragraphs: str) -> str:
    return "".join(f"<p>{paragraph}</p>" for paragraph in ("Hi {{parent_name}},",) + paragraphs)


_CAMP_VARS = ("parent_name", "athlete_name", "camp_name", "camp_dates", "camp_location")
_SEASON_VARS = ("parent_name", "year", "registration_url")

DEFAULT_TEMPLATES: Dict[EmailType, TemplateDefault] = {
    EmailType.registration_confirmation: TemplateDefault(
        "Registration Confirmation",
        "Sent after successful payment to confirm camp registration",
        _CAMP_VARS + ("camp_time", "total_paid"),
        "You're Registered! {{athlete_name}} is Going to {{camp_name}}",
        _body(
            "{{athlete_name}} is registered for {{camp_name}} ({{camp_dates}}) at {{camp_location}}.",
            "Daily schedule: {{camp_time}}. Total paid: {{total_paid}}.",
        ),
    ),
    EmailType.camp_two_weeks_out: TemplateDefault(
        "2 Weeks Out Reminder",
        "Sent 2 weeks before camp starts with preparation tips",
        _CAMP_VARS + ("days_until_camp",),
        "2 Weeks Until {{camp_name}}! Let's Get Ready",
        _body("{{camp_name}} starts in {{days_until_camp}} days at {{camp_location}}."),
    ),
    EmailType.camp_two_days_before: TemplateDefault(
        "2 Days Before Reminder",
        "Sent 2 days before camp with final checklist",
        _CAMP_VARS + ("camp_time", "check_in_info"),
        "{{camp_name}} Starts in 2 Days! Here's Your Checklist",
        _body("{{athlete_name}} starts {{camp_name}} in two days.", "Check-in: {{check_in_info}}"),
    ),
    EmailType.camp_daily_recap: TemplateDefault(
        "Daily Recap",
        "Sent at end of each camp day with highlights",
        ("parent_name", "athlete_name", "camp_name", "day_number", "day_theme", "word_of_the_day",
         "primary_sport", "secondary_sport", "guest_speaker", "tomorrow_preview"),
        "Day {{day_number}} Recap: {{athlete_name}} at {{camp_name}}",
        _body(
            "Today's theme was {{day_theme}} and the word of the day was {{word_of_the_day}}.",
            "Tomorrow: {{tomorrow_preview}}",
        ),
    ),
    EmailType.camp_session_recap: TemplateDefault(
        "Session Recap",
        "Sent after camp week ends with full summary",
        ("parent_name", "athlete_name", "camp_name", "camp_dates", "total_days", "sports_learned", "feedback_url"),
        "What an Amazing Week! {{athlete_name}}'s {{camp_name}} Journey",
        _body(
            "Over {{total_days}} days {{athlete_name}} played {{sports_learned}}.",
            "Tell us how it went: {{feedback_url}}",
        ),
    ),
    EmailType.season_followup_jan: TemplateDefault(
        "January Follow-up",
        "New year re-engagement campaign",
        _SEASON_VARS + ("early_bird_code",),
        "New Year, New Goals - Camp Registration Opens Soon!",
        _body("Registration for {{year}} opens soon: {{registration_url}}", "Use {{early_bird_code}} to save."),
    ),
    EmailType.season_followup_feb: TemplateDefault(
        "February Follow-up",
        "Valentine's Day themed sibling referral",
        _SEASON_VARS + ("referral_code",),
        "Share the Love - Bring a Friend to Camp!",
        _body("Bring a friend to camp in {{year}} with code {{referral_code}}: {{registration_url}}"),
    ),
    EmailType.season_followup_mar: TemplateDefault(
        "March Follow-up",
        "Spring training / early bird deadline",
        _SEASON_VARS + ("early_bird_deadline", "early_bird_code"),
        "Spring Training Starts Here - Early Bird Deadline Approaching!",
        _body("Early bird pricing ends {{early_bird_deadline}}. Code: {{early_bird_code}}", "{{registration_url}}"),
    ),
    EmailType.season_followup_apr: TemplateDefault(
        "April Follow-up",
        "Earth day / outdoor camp highlights",
        _SEASON_VARS + ("camp_highlights",),
        "Get Outside This Summer - Camp Spots Filling Up!",
        _body("{{camp_highlights}}", "Reserve a spot: {{registration_url}}"),
    ),
    EmailType.season_followup_may: TemplateDefault(
        "May Follow-up",
        "Final countdown / last chance to register",
        _SEASON_VARS + ("spots_remaining",),
        "Last Chance! Summer Camp Registration Closes Soon",
        _body("Only {{spots_remaining}} spots remain for {{year}}: {{registration_url}}"),
    ),
    EmailType.payment_receipt: TemplateDefault(
        "Payment Receipt",
        "Receipt sent when a payment is captured",
        ("parent_name", "camp_name", "amount_paid", "payment_date", "receipt_url"),
        "Payment Received - {{camp_name}}",
        _body("We received {{amount_paid}} on {{payment_date}} for {{camp_name}}.", "Receipt: {{receipt_url}}"),
    ),
    EmailType.payment_failed: TemplateDefault(
        "Payment Failed",
        "Sent when a checkout payment fails",
        ("parent_name", "camp_name", "retry_url"),
        "Action Needed: Payment for {{camp_name}} Failed",
        _body("Your payment for {{camp_name}} did not go through.", "Try again: {{retry_url}}"),
    ),
    EmailType.cit_status_update: TemplateDefault(
        "CIT Status Update",
        "Sent to CIT applicants when their application status changes",
        ("applicant_name", "status", "next_steps"),
        "Your CIT Application: {{status}}",
        "<p>Hi {{applicant_name}},</p><p>Your application status is now {{status}}.</p><p>{{next_steps}}</p>",
    ),
    EmailType.royalty_invoice: TemplateDefault(
        "Royalty Invoice",
        "Sent to licensees when a royalty invoice is generated",
        ("licensee_name", "invoice_number", "camp_name", "amount_due", "due_date"),
        "Royalty Invoice {{invoice_number}} - {{camp_name}}",
        "<p>Hi {{licensee_name}},</p><p>Invoice {{invoice_number}} for {{camp_name}}: {{amount_due}} "
        "due {{due_date}}.</p>",
    ),
    EmailType.royalty_status_update: TemplateDefault(
        "Royalty Status Update",
        "Sent to licensees when a royalty invoice changes status",
        ("licensee_name", "invoice_number", "status"),
        "Invoice {{invoice_number}} is now {{status}}",
        "<p>Hi {{licensee_name}},</p><p>Invoice {{invoice_number}} is now {{status}}.</p>",
    ),
}


def render(template: str, variables: Mapping[str, Any]) -> str:
    """Substitute ``{{name}}`` placeholders; unknown names are left as written."""

    def _replace(match: "re.Match[str]") -> str:
        name = match.group(1)
        if name not in variables or variables[name] is None:
            return match.group(0)
        return str(variables[name])

    return PLACEHOLDER.sub(_replace, template)


def describe_template(
    email_type: EmailType, stored: Optional[EmailTemplate], tenant_names: Dict[str, str]
) -> Dict[str, Any]:
    default = DEFAULT_TEMPLATES[email_type]
    return {
        "id": stored.id if stored else None,
        "email_type": email_type.value,
        "name": stored.name if stored else default.name,
        "description": (stored.description if stored and stored.description else default.description),
        "available_vars": list(default.variables),
        "default_subject": default.subject,
        "subject": stored.subject if stored else default.subject,
        "body_html": stored.body_html if stored else default.body_html,
        "body_text": stored.body_text if stored else None,
        "is_active": stored.is_active if stored else True,
        "tenant_id": stored.tenant_id if stored else None,
        "tenant_name": tenant_names.get(stored.tenant_id) if stored and stored.tenant_id else None,
        "is_customized": stored is not None,
        "updated_at": stored.updated_at.isoformat() if stored else None,
    }


class EmailTemplateService:
    """Template catalogue, overrides and rendering."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.templates = EmailTemplateRepository(session)
        self.tenants = TenantRepository(session)

    async def list_templates(self, tenant_id: Optional[str] = None) -> List[Dict[str, Any]]:
        """Every email type, with the tenant override winning over the global one and both over the default."""
        stored: Dict[EmailType, EmailTemplate] = {}
        for template in await self.templates.list_scope(tenant_id):
            current = stored.get(template.email_type)
            if current is None or (template.tenant_id and not current.tenant_id):
                stored[template.email_type] = template
        tenant_ids = [t.tenant_id for t in stored.values() if t.tenant_id]
        tenant_names = {t.id: t.name for t in await self.tenants.get_many(tenant_ids)}
        return [describe_template(email_type, stored.get(email_type), tenant_names) for email_type in DEFAULT_TEMPLATES]

    async def resolve(self, email_type: EmailType, tenant_id: Optional[str] = None) -> Tuple[str, str]:
        """Active ``(subject, body_html)`` for a tenant: its override, else global, else the default."""
        for scope in ([tenant_id] if tenant_id else []) + [None]:
            stored = await self.templates.get_for(email_type, scope)
            if stored is not None and stored.is_active:
                return stored.subject, stored.body_html
        default = DEFAULT_TEMPLATES[email_type]
        return default.subject, default.body_html

    async def upsert(self, payload: EmailTemplateUpsert, user_id: Optional[str] = None) -> EmailTemplate:
        if not payload.email_type or not payload.subject or not payload.body_html:
            raise BadRequestError("email_type, subject, and body_html are required")
        if payload.tenant_id and await self.tenants.get_by_id(payload.tenant_id) is None:
            raise NotFoundError("Licensee not found")

        default = DEFAULT_TEMPLATES[payload.email_type]
        template = await self.templates.get_for(payload.email_type, payload.tenant_id)
        if template is None:
            template = EmailTemplate(
                email_type=payload.email_type,
                tenant_id=payload.tenant_id,
                name=payload.name or default.name,
                subject=payload.subject,
                body_html=payload.body_html,
                available_vars=list(default.variables),
                created_by=user_id,
            )
        template.name = payload.name or template.name
        template.subject = payload.subject
        template.body_html = payload.body_html
        template.body_text = payload.body_text
        template.description = payload.description
        template.is_active = payload.is_active
        template.updated_by = user_id
        template = await self.templates.update(template)
        logger.info(f"Saved {payload.email_type.value} template (tenant={payload.tenant_id or 'global'})")
        return template

    async def reset(self, email_type: EmailType, tenant_id: Optional[str] = None) -> bool:
        """Delete the stored override so the next level applies again."""
        template = await self.templates.get_for(email_type, tenant_id)
        if template is None:
            return False
        return await self.templates.delete(template.id)

    async def preview(
        self, email_type: EmailType, variables: Mapping[str, Any], tenant_id: Optional[str] = None
    ) -> Dict[str, str]:
        subject, body_html = await self.resolve(email_type, tenant_id)
        return {"subject": render(subject, variables), "body_html": render(body_html, variables)}
