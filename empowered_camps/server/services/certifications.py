"""
Volunteer Certification Service.

Volunteers upload background checks, CPR cards and similar documents;
admins approve or reject them.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from empowered_camps.core.database.base import utc_now
from empowered_camps.core.database.entities.staffing import VolunteerCertification
from empowered_camps.core.database.repositories import CertificationRepository
from empowered_camps.core.errors import BadRequestError, NotFoundError
from empowered_camps.core.logging_config import get_logger
from empowered_camps.core.models.domain.enums import CertificationStatus
from empowered_camps.core.models.io.staffing import CertificationCreate, CertificationRead, CertificationReview
from empowered_camps.server.auth.models import AuthUser

logger = get_logger(__name__)

REVIEW_OUTCOMES = (CertificationStatus.approved, CertificationStatus.rejected)


class CertificationService:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.certifications = CertificationRepository(session)

    async def submit(self, user: AuthUser, payload: CertificationCreate) -> CertificationRead:
        certification = VolunteerCertification(
            **payload.model_dump(),
            profile_id=user.id,
            tenant_id=user.tenant_id,
            status=CertificationStatus.pending_review,
            submitted_at=utc_now(),
        )
        certification = await self.certifications.create(certification)
        logger.info(f"Certification {certification.id} submitted by {user.id}")
        return CertificationRead.model_validate(certification)

    async def list_own(self, user: AuthUser) -> List[CertificationRead]:
        rows = await self.certifications.search(profile_id=user.id)
        return [CertificationRead.model_validate(row) for row in rows]

    async def delete_own(self, user: AuthUser, certification_id: str) -> None:
        """Volunteers may withdraw a document only while it awaits review."""
        certification = await self.certifications.get_by_id(certification_id)
        if certification is None or certification.profile_id != user.id:
            raise NotFoundError("Certification not found")
        if certification.status != CertificationStatus.pending_review:
            raise BadRequestError("Only pending certifications can be deleted")
        await self.certifications.delete(certification.id)

    async def list_all(
        self, tenant_id: Optional[str] = None, status: Optional[CertificationStatus] = None
    ) -> List[CertificationRead]:
        rows = await self.certifications.search(tenant_id=tenant_id, status=status)
        return [CertificationRead.model_validate(row) for row in rows]

    async def review(
        self, user: AuthUser, certification_id: str, payload: CertificationReview, tenant_id: Optional[str] = None
    ) -> CertificationRead:
        if payload.status not in REVIEW_OUTCOMES:
            raise BadRequestError("Review status must be approved or rejected")
        certification = await self.certifications.get_by_id(certification_id)
        if certification is None or (tenant_id is not None and certification.tenant_id != tenant_id):
            raise NotFoundError("Certification not found")
        certification.status = payload.status
        certification.reviewer_notes = payload.reviewer_notes
        if payload.expires_at is not None:
            certification.expires_at = payload.expires_at
        certification.reviewed_at = utc_now()
        certification.reviewed_by_profile_id = user.id
        certification = await self.certifications.update(certification)
        logger.info(f"Certification {certification.id} {payload.status.value} by {user.id}")
        return CertificationRead.model_validate(certification)
