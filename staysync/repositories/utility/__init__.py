from staysync.repositories.utility.central_meter_repository import CentralMeterRepository

__all__ = ["CentralMeterRepository"]
