from staysync.repositories.resident.resident_repository import ResidentRepository

__all__ = ["ResidentRepository"]
