from staysync.models.base.base_model import Base, BaseModel, enum_column, generate_uuid
from staysync.models.base.enums import *  # noqa: F401,F403
from staysync.models.base.mixins import OrganizationScopedMixin, TimestampMixin

__all__ = [
    "Base",
    "BaseModel",
    "enum_column",
    "generate_uuid",
    "OrganizationScopedMixin",
    "TimestampMixin",
]
