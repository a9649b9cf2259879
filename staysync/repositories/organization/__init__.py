from staysync.repositories.organization.organization_repository import OrganizationRepository

__all__ = ["OrganizationRepository"]
