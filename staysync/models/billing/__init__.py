from staysync.models.billing.billing import Billing

__all__ = ["Billing"]
