from staysync.services.billing.bill_assembler import BillAssemblerService
from staysync.services.billing.meter_calculator import MeterCharge, calculate_meter_charge
from staysync.services.billing.overdue_service import OverdueService, is_overdue
from staysync.services.billing.payment_service import PaymentService, next_payment_status
from staysync.services.billing.slip_storage import SlipStorage

__all__ = [
    "BillAssemblerService",
    "MeterCharge",
    "calculate_meter_charge",
    "OverdueService",
    "is_overdue",
    "PaymentService",
    "next_payment_status",
    "SlipStorage",
]
