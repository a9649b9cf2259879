from staysync.models.system.system_config import SystemConfig

__all__ = ["SystemConfig"]
