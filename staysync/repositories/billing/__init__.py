from staysync.repositories.billing.billing_repository import BillingRepository

__all__ = ["BillingRepository"]
