from staysync.services.tenancy.tenancy_service import (
    CheckoutOutcome,
    TenancyService,
    classify_checkout,
    resolve_contract_months,
)

__all__ = ["TenancyService", "CheckoutOutcome", "classify_checkout", "resolve_contract_months"]
