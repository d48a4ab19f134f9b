"""
Platform Settings Service.

Resolves effective setting values (default, then the global row, then the
tenant row for tenant-overridable keys) and applies audited updates.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from empowered_camps.core.database.base import utc_now
from empowered_camps.core.database.entities.settings import Setting, SettingsAuditLog
from empowered_camps.core.database.repositories import SettingRepository, TenantRepository
from empowered_camps.core.errors import NotFoundError
from empowered_camps.core.logging_config import get_logger
from empowered_camps.core.models.domain.enums import SettingAuditSource, SettingScope
from empowered_camps.core.models.domain.settings_schema import (
    SETTINGS_CATEGORIES,
    SETTINGS_SCHEMA,
    default_values,
    get_definition,
)
from empowered_camps.core.models.io.settings import SettingUpdate, SettingsUpdateResult

logger = get_logger(__name__)


def serialize_setting(row: Setting) -> Dict[str, Any]:
    return {
        "id": row.id,
        "scope": row.scope.value,
        "tenant_id": row.tenant_id,
        "key": row.key,
        "value": row.value_json,
        "value_type": row.value_type.value,
        "description": row.description,
        "updated_at": row.updated_at.isoformat(),
        "updated_by_user_id": row.updated_by_user_id,
    }


def serialize_audit(entry: SettingsAuditLog) -> Dict[str, Any]:
    return {
        "id": entry.id,
        "setting_id": entry.setting_id,
        "scope": entry.scope.value,
        "tenant_id": entry.tenant_id,
        "key": entry.key,
        "old_value": entry.old_value,
        "new_value": entry.new_value,
        "changed_at": entry.changed_at.isoformat(),
        "changed_by_user_id": entry.changed_by_user_id,
        "source": entry.source.value,
    }


def schema_description() -> Dict[str, Any]:
    return {key: definition.describe() for key, definition in SETTINGS_SCHEMA.items()}


def categories_description() -> Dict[str, str]:
    return dict(SETTINGS_CATEGORIES)


class PlatformSettingsService:
    """Read and write global and tenant-scoped platform settings."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.settings = SettingRepository(session)
        self.tenants = TenantRepository(session)

    async def global_settings(self) -> List[Dict[str, Any]]:
        return [serialize_setting(row) for row in await self.settings.list_scope(SettingScope.GLOBAL)]

    async def tenant_settings(self, tenant_id: str) -> List[Dict[str, Any]]:
        await self._require_tenant(tenant_id)
        return [serialize_setting(row) for row in await self.settings.list_scope(SettingScope.TENANT, tenant_id)]

    async def effective_settings(self, tenant_id: Optional[str] = None) -> Dict[str, Any]:
        """Every known key with its resolved value."""
        values = default_values()
        for row in await self.settings.list_scope(SettingScope.GLOBAL):
            if row.key in values:
                values[row.key] = row.value_json
        if tenant_id:
            for row in await self.settings.list_scope(SettingScope.TENANT, tenant_id):
                definition = get_definition(row.key)
                if definition is not None and definition.tenant_overridable:
                    values[row.key] = row.value_json
        return values

    async def get_value(self, key: str, tenant_id: Optional[str] = None) -> Any:
        definition = get_definition(key)
        if definition is None:
            raise NotFoundError(f"Unknown setting: {key}")
        if tenant_id and definition.tenant_overridable:
            row = await self.settings.get_value_row(SettingScope.TENANT, key, tenant_id)
            if row is not None:
                return row.value_json
        row = await self.settings.get_value_row(SettingScope.GLOBAL, key)
        return row.value_json if row is not None else definition.default

    async def update(
        self,
        updates: Sequence[SettingUpdate],
        tenant_id: Optional[str] = None,
        user_id: Optional[str] = None,
        source: SettingAuditSource = SettingAuditSource.ADMIN_UI,
    ) -> SettingsUpdateResult:
        """
        Upsert ``updates`` at global scope, or as overrides of ``tenant_id``.

        Unknown keys, values failing validation and non-overridable keys at
        tenant scope are skipped rather than rejected.
        """
        scope = SettingScope.TENANT if tenant_id else SettingScope.GLOBAL
        if tenant_id:
            await self._require_tenant(tenant_id)

        updated = 0
        skipped: List[str] = []
        for item in updates:
            definition = get_definition(item.key)
            if definition is None:
                logger.warning(f"Skipping unknown setting key: {item.key}")
                skipped.append(item.key)
                continue
            if tenant_id and not definition.tenant_overridable:
                logger.warning(f"Setting {item.key} cannot be overridden by tenants")
                skipped.append(item.key)
                continue
            if not definition.validate_value(item.value):
                logger.warning(f"Invalid value for setting {item.key}")
                skipped.append(item.key)
                continue

            row = await self.settings.get_value_row(scope, item.key, tenant_id)
            old_value = row.value_json if row is not None else None
            if row is None:
                row = Setting(
                    scope=scope,
                    tenant_id=tenant_id,
                    key=item.key,
                    value_type=definition.value_type,
                    description=definition.description,
                )
            row.value_json = item.value
            row.updated_at = utc_now()
            row.updated_by_user_id = user_id
            row = await self.settings.create(row, commit=False)

            await self.settings.add_audit(
                SettingsAuditLog(
                    setting_id=row.id,
                    scope=scope,
                    tenant_id=tenant_id,
                    key=item.key,
                    old_value=old_value,
                    new_value=item.value,
                    changed_by_user_id=user_id,
                    source=source,
                )
            )
            updated += 1

        await self.session.commit()
        logger.info(f"Updated {updated} {scope.value.lower()} settings ({len(skipped)} skipped)")
        return SettingsUpdateResult(updated=updated, skipped=skipped)

    async def reset_tenant_setting(
        self,
        tenant_id: str,
        key: str,
        user_id: Optional[str] = None,
        source: SettingAuditSource = SettingAuditSource.ADMIN_UI,
    ) -> bool:
        """Drop a tenant override so the global value applies again."""
        row = await self.settings.get_value_row(SettingScope.TENANT, key, tenant_id)
        if row is None:
            return False
        await self.settings.add_audit(
            SettingsAuditLog(
                setting_id=row.id,
                scope=SettingScope.TENANT,
                tenant_id=tenant_id,
                key=key,
                old_value=row.value_json,
                new_value=None,
                changed_by_user_id=user_id,
                source=source,
            )
        )
        await self.settings.delete(row.id, commit=False)
        await self.session.commit()
        return True

    async def audit_log(
        self, tenant_id: Optional[str] = None, key: Optional[str] = None, limit: int = 50
    ) -> List[Dict[str, Any]]:
        return [serialize_audit(entry) for entry in await self.settings.audit_log(tenant_id, key, limit)]

    async def _require_tenant(self, tenant_id: str) -> None:
        if await self.tenants.get_by_id(tenant_id) is None:
            raise NotFoundError("Licensee not found")
