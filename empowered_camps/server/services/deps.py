"""
Service Dependencies.

Request-scoped service instances for API endpoints, each bound to the
request's database session.
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from empowered_camps.core.database import get_session

from .analytics import AnalyticsService
from .camps import CampService
from .certifications import CertificationService
from .checkout import CheckoutService
from .cit import CitApplicationService
from .curriculum import CurriculumService
from .email_templates import EmailTemplateService
from .jobs import JobPostingService
from .licensees import LicenseeService
from .payments import PaymentService
from .platform_settings import PlatformSettingsService
from .promo_codes import PromoCodeService
from .reconciliation import ReconciliationService
from .royalties import RoyaltyService
from .stripe_gateway import StripeGateway, get_stripe_gateway
from .waitlist import WaitlistService

SessionDep = Annotated[AsyncSession, Depends(get_session)]
StripeGatewayDep = Annotated[StripeGateway, Depends(get_stripe_gateway)]


def get_checkout_service(session: SessionDep, gateway: StripeGatewayDep) -> CheckoutService:
    return CheckoutService(session, gateway)


def get_payment_service(session: SessionDep, gateway: StripeGatewayDep) -> PaymentService:
    return PaymentService(session, gateway)


def get_reconciliation_service(session: SessionDep, gateway: StripeGatewayDep) -> ReconciliationService:
    return ReconciliationService(session, gateway)


def get_royalty_service(session: SessionDep) -> RoyaltyService:
    return RoyaltyService(session)


def get_analytics_service(session: SessionDep) -> AnalyticsService:
    return AnalyticsService(session)


def get_settings_service(session: SessionDep) -> PlatformSettingsService:
    return PlatformSettingsService(session)


def get_email_template_service(session: SessionDep) -> EmailTemplateService:
    return EmailTemplateService(session)


def get_curriculum_service(session: SessionDep) -> CurriculumService:
    return CurriculumService(session)


def get_cit_service(session: SessionDep) -> CitApplicationService:
    return CitApplicationService(session)


def get_certification_service(session: SessionDep) -> CertificationService:
    return CertificationService(session)


def get_job_service(session: SessionDep) -> JobPostingService:
    return JobPostingService(session)


def get_licensee_service(session: SessionDep) -> LicenseeService:
    return LicenseeService(session)


def get_camp_service(session: SessionDep) -> CampService:
    return CampService(session)


def get_promo_code_service(session: SessionDep) -> PromoCodeService:
    return PromoCodeService(session)


def get_waitlist_service(session: SessionDep) -> WaitlistService:
    return WaitlistService(session)


CheckoutDep = Annotated[CheckoutService, Depends(get_checkout_service)]
PaymentDep = Annotated[PaymentService, Depends(get_payment_service)]
ReconciliationDep = Annotated[ReconciliationService, Depends(get_reconciliation_service)]
RoyaltyDep = Annotated[RoyaltyService, Depends(get_royalty_service)]
AnalyticsDep = Annotated[AnalyticsService, Depends(get_analytics_service)]
SettingsDep = Annotated[PlatformSettingsService, Depends(get_settings_service)]
EmailTemplateDep = Annotated[EmailTemplateService, Depends(get_email_template_service)]
CurriculumDep = Annotated[CurriculumService, Depends(get_curriculum_service)]
CitDep = Annotated[CitApplicationService, Depends(get_cit_service)]
CertificationDep = Annotated[CertificationService, Depends(get_certification_service)]
JobDep = Annotated[JobPostingService, Depends(get_job_service)]
LicenseeDep = Annotated[LicenseeService, Depends(get_licensee_service)]
CampDep = Annotated[CampService, Depends(get_camp_service)]
PromoCodeDep = Annotated[PromoCodeService, Depends(get_promo_code_service)]
WaitlistDep = Annotated[WaitlistService, Depends(get_waitlist_service)]
