"""
Chat message texts sent to residents and admins.
"""

from decimal import Decimal
from typing import Optional

from staysync.models import Billing, Issue, SystemConfig
from staysync.models.base.enums import PaymentStatus
from staysync.utils.date_utils import format_month


def _baht(amount: Decimal) -> str:
    return f"{Decimal(amount):,.2f} THB"


def pay_url(public_url: str, bill_id: str) -> str:
    return f"{public_url.rstrip('/')}/pay/{bill_id}"


def invoice(bill: Billing, room_number: str, config: Optional[SystemConfig], link: str) -> str:
    lines = [
        f"Invoice for room {room_number} ({format_month(bill.billing_month)})",
        f"Rent: {_baht(bill.room_price)}",
        f"Water: {bill.water_units} units = {_baht(bill.water_cost)}",
        f"Electricity: {bill.electric_units} units = {_baht(bill.electric_cost)}",
    ]
    for label, amount in (
        ("Trash", bill.trash_fee),
        ("Internet", bill.internet_fee),
        ("Common area", bill.common_fee),
        ("Other", bill.other_fees),
    ):
        if amount:
            lines.append(f"{label}: {_baht(amount)}")
    lines.append(f"Total: {_baht(bill.total_amount)}")
    if config and config.bank_account_number:
        lines.append(
            f"Transfer to {config.bank_name or ''} {config.bank_account_number} "
            f"({config.bank_account_name or ''})".strip()
        )
    lines.append(f"Pay and upload your slip: {link}")
    return "\n".join(lines)


def slip_received(bill: Billing, room_number: str) -> str:
    return (
        f"New payment slip for room {room_number} ({format_month(bill.billing_month)}), "
        f"amount {_baht(bill.total_amount)}. Please review."
    )


def payment_approved(bill: Billing) -> str:
    return f"Payment of {_baht(bill.total_amount)} for {format_month(bill.billing_month)} has been confirmed. Thank you!"


def payment_rejected(bill: Billing, note: Optional[str]) -> str:
    text = f"Your payment slip for {format_month(bill.billing_month)} was rejected."
    if note:
        text += f" Reason: {note}"
    return text + " Please upload a new slip."


def cash_received(bill: Billing) -> str:
    return f"Cash payment of {_baht(bill.total_amount)} for {format_month(bill.billing_month)} received. Thank you!"


def overdue_reminder(bill: Billing, room_number: str, link: str) -> str:
    return (
        f"Reminder: the bill for room {room_number} ({format_month(bill.billing_month)}) "
        f"of {_baht(bill.total_amount)} is overdue. Please pay here: {link}"
    )


def repair_reported(issue: Issue, room_number: Optional[str], reporter: str) -> str:
    where = f"room {room_number}" if room_number else "a guest"
    return f"New repair request from {reporter} ({where}): {issue.description}"


def announcement(message: str) -> str:
    return f"Announcement\n\n{message}"


# Chat-bot replies

WELCOME = (
    "Welcome! Send your link code (for example #1234) to connect your room, "
    "or use the menu for bills, wifi, rules and repairs."
)
REPAIR_PROMPT = "Please describe the problem that needs repair."
REPAIR_RECEIVED = "Thank you, your repair request has been recorded. Our staff will contact you soon."
LINK_PROMPT = "Your LINE account is not linked yet. Please send the link code from the office (for example #1234)."
LINK_FAILED = "This link code is invalid or has already been used."
NO_BILLS = "You have no outstanding bills."
GUEST_MENU = (
    "This menu is for residents. If you live here, send your link code (for example #1234); "
    "to rent a room, contact the office through the Contact menu."
)


def link_success(full_name: str, room_number: Optional[str]) -> str:
    suffix = f" (room {room_number})" if room_number else ""
    return f"Linked successfully. Hello {full_name}{suffix}!"


def bill_status(bill: Billing, config: Optional[SystemConfig], link: str) -> str:
    status = PaymentStatus(bill.payment_status)
    if status == PaymentStatus.PAID:
        return f"Your bill for {format_month(bill.billing_month)} has been paid. Thank you!"
    if status == PaymentStatus.REVIEW:
        return "Your payment slip is waiting for review. We will let you know soon."
    lines = [f"Latest bill ({format_month(bill.billing_month)}): {_baht(bill.total_amount)}"]
    if config and config.bank_account_number:
        lines.append(f"{config.bank_name or ''} {config.bank_account_number} ({config.bank_account_name or ''})".strip())
    lines.append(f"Upload your slip: {link}")
    return "\n".join(lines)


def wifi_info(config: Optional[SystemConfig]) -> str:
    if not config or not config.wifi_ssid:
        return "Wifi details have not been set up yet."
    return f"Wifi: {config.wifi_ssid}\nPassword: {config.wifi_password or '-'}"


def rules_info(config: Optional[SystemConfig]) -> str:
    if not config or not config.rules_text:
        return "Dormitory rules have not been published yet."
    return config.rules_text


def contact_info(config: Optional[SystemConfig]) -> str:
    if not config:
        return "Please contact the dormitory office."
    parts = [f"Office phone: {config.admin_phone or '-'}"]
    if config.admin_line_id_display:
        parts.append(f"LINE: {config.admin_line_id_display}")
    if config.emergency_phone:
        parts.append(f"Emergency: {config.emergency_phone}")
    return "\n".join(parts)
