from staysync.services.system.system_config_service import SystemConfigService

__all__ = ["SystemConfigService"]
