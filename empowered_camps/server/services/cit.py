"""
CIT Application Service.

Counselor-in-training applications and their progress timeline. Every status
change and internal note is recorded as a progress event.
"""

from __future__ import annotations

import math
from typing import Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from empowered_camps.core.database.entities.staffing import CitApplication, CitProgressEvent
from empowered_camps.core.database.repositories import CitApplicationRepository
from empowered_camps.core.errors import NotFoundError
from empowered_camps.core.logging_config import get_logger
from empowered_camps.core.models.domain.enums import CitApplicationStatus, CitProgressEventType
from empowered_camps.core.models.io.staffing import (
    CitApplicationCreate,
    CitApplicationPage,
    CitApplicationRead,
    CitProgressEventRead,
    CitStatusUpdate,
)

logger = get_logger(__name__)

DEFAULT_PAGE_SIZE = 20


class CitApplicationService:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.applications = CitApplicationRepository(session)

    async def submit(self, payload: CitApplicationCreate, user_id: Optional[str] = None) -> CitApplicationRead:
        """Store a new application and its ``application_submitted`` event."""
        data = payload.model_dump()
        data["email"] = payload.email.strip().lower()
        application = await self.applications.create(
            CitApplication(**data, user_id=user_id, status=CitApplicationStatus.applied), commit=False
        )
        await self.applications.add_event(
            CitProgressEvent(
                cit_application_id=application.id,
                type=CitProgressEventType.application_submitted,
                to_status=CitApplicationStatus.applied,
                details="Application submitted",
                changed_by_user_id=user_id,
            )
        )
        await self.session.commit()
        await self.session.refresh(application)
        logger.info(f"CIT application {application.id} submitted")
        return await self.get(application.id)

    async def list(
        self,
        status: Optional[CitApplicationStatus] = None,
        search: Optional[str] = None,
        page: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> CitApplicationPage:
        page = max(page, 1)
        rows, total = await self.applications.search(status, search, limit=page_size, offset=(page - 1) * page_size)
        return CitApplicationPage(
            applications=[CitApplicationRead.model_validate(row) for row in rows],
            total=total,
            page=page,
            page_size=page_size,
            total_pages=math.ceil(total / page_size) if page_size else 0,
        )

    async def _get(self, application_id: str) -> CitApplication:
        application = await self.applications.get_by_id(application_id)
        if application is None:
            raise NotFoundError("Application not found")
        return application

    async def get(self, application_id: str) -> CitApplicationRead:
        application = await self._get(application_id)
        events = await self.applications.events_for(application.id)
        return CitApplicationRead.model_validate(application).model_copy(
            update={"progress_events": [CitProgressEventRead.model_validate(event) for event in events]}
        )

    async def update_status(
        self, application_id: str, payload: CitStatusUpdate, user_id: Optional[str] = None
    ) -> CitApplicationRead:
        application = await self._get(application_id)
        previous = application.status
        application.status = payload.status
        if payload.assigned_licensee_id is not None:
            application.assigned_licensee_id = payload.assigned_licensee_id
        if payload.assigned_director_id is not None:
            application.assigned_director_id = payload.assigned_director_id
        await self.applications.update(application, commit=False)
        await self.applications.add_event(
            CitProgressEvent(
                cit_application_id=application.id,
                type=CitProgressEventType.status_change,
                from_status=previous,
                to_status=payload.status,
                details=payload.details or f"Status changed from {previous.value} to {payload.status.value}",
                changed_by_user_id=user_id,
            )
        )
        await self.session.commit()
        logger.info(f"CIT application {application.id}: {previous.value} -> {payload.status.value}")
        return await self.get(application.id)

    async def add_note(self, application_id: str, note: str, user_id: Optional[str] = None) -> CitProgressEventRead:
        application = await self._get(application_id)
        event = await self.applications.add_event(
            CitProgressEvent(
                cit_application_id=application.id,
                type=CitProgressEventType.note_added,
                details=note,
                changed_by_user_id=user_id,
            )
        )
        await self.session.commit()
        await self.session.refresh(event)
        return CitProgressEventRead.model_validate(event)

    async def status_counts(self) -> Dict[str, int]:
        counts = {status.value: 0 for status in CitApplicationStatus}
        for status, total in (await self.applications.count_by("status")).items():
            counts[CitApplicationStatus(status).value] = total
        counts["total"] = sum(counts.values())
        return counts
