from staysync.models.organization.organization import Organization

__all__ = ["Organization"]
