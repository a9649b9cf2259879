from staysync.models.resident.resident import Resident

__all__ = ["Resident"]
