from staysync.services.utility.central_meter_service import CentralMeterService

__all__ = ["CentralMeterService"]
