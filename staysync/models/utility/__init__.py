from staysync.models.utility.central_meter import CentralMeter

__all__ = ["CentralMeter"]
