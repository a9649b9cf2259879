"""
Rate configuration service.

One ``SystemConfig`` row per organization, created with defaults the first
time it is read.
"""

from typing import Any, Dict, Optional, Tuple

from sqlalchemy.orm import Session

from staysync.config.settings import Settings
from staysync.models import SystemConfig
from staysync.repositories.system import SystemConfigRepository
from staysync.schemas.system import SystemConfigUpdate
from staysync.services.base import BaseService


class SystemConfigService(BaseService):
    def __init__(self, db_session: Session, settings: Settings):
        super().__init__(db_session)
        self.settings = settings
        self.configs = SystemConfigRepository(db_session)

    def default_config(self, organization_id: str, dorm_name: Optional[str] = None) -> SystemConfig:
        return SystemConfig(
            organization_id=organization_id,
            dorm_name=dorm_name or "My Dormitory",
            water_rate=self.settings.DEFAULT_WATER_RATE,
            electric_rate=self.settings.DEFAULT_ELECTRIC_RATE,
            trash_fee=self.settings.DEFAULT_TRASH_FEE,
            enable_auto_reminders=True,
        )

    def find(self, organization_id: str) -> Optional[SystemConfig]:
        return self.configs.get_for_org(organization_id)

    def get_or_create(self, organization_id: str) -> SystemConfig:
        """
        Return the organization's configuration, seeding defaults if absent.
        """
        config = self.configs.get_for_org(organization_id)
        if config is not None:
            return config
        with self.transaction():
            config = self.configs.create(self.default_config(organization_id))
        self._logger.info("Seeded default configuration", extra={"organization_id": organization_id})
        return config

    def update(self, organization_id: str, data: SystemConfigUpdate) -> Tuple[SystemConfig, Dict[str, Any]]:
        """
        Apply a partial update.

        Returns:
            The updated configuration and a ``{field: {"from", "to"}}`` diff
        """
        config = self.get_or_create(organization_id)
        changes = data.model_dump(exclude_unset=True)
        diff = {
            field: {"from": getattr(config, field), "to": value}
            for field, value in changes.items()
            if getattr(config, field) != value
        }
        with self.transaction():
            self.configs.update(config, changes)
        self._logger.info(
            "Configuration updated",
            extra={"organization_id": organization_id, "fields": sorted(diff)},
        )
        return config, diff
