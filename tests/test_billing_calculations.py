from datetime import date
from decimal import Decimal

import pytest

from staysync.core.exceptions import InvalidStateTransitionError
from staysync.models import Room, SystemConfig
from staysync.models.base.enums import PaymentStatus
from staysync.services.billing.bill_assembler import MeterReadings, build_bill, compute_total
from staysync.services.billing.meter_calculator import calculate_meter_charge
from staysync.services.billing.overdue_service import is_overdue
from staysync.services.billing.payment_service import PaymentEvent, next_payment_status
from staysync.services.billing.rates import RateSet


def _config(**overrides) -> SystemConfig:
    values = dict(
        water_rate=Decimal("18"),
        electric_rate=Decimal("7"),
        trash_fee=Decimal("30"),
        internet_fee=Decimal("0"),
        other_fees=Decimal("0"),
        common_area_fee=Decimal("100"),
    )
    values.update(overrides)
    return SystemConfig(organization_id="org-1", **values)


class TestMeterCalculator:
    def test_units_and_cost(self):
        charge = calculate_meter_charge(Decimal("110"), Decimal("120"), Decimal("18"))
        assert charge.units == Decimal("10")
        assert charge.cost == Decimal("180")

    def test_reading_below_previous_is_clamped(self):
        charge = calculate_meter_charge(500, 480, 7)
        assert charge.units == 0
        assert charge.cost == 0

    def test_fractional_readings(self):
        charge = calculate_meter_charge("10.5", "12", "7")
        assert charge.units == Decimal("1.5")
        assert charge.cost == Decimal("10.5")


class TestRateSet:
    def test_common_fee_only_for_flagged_rooms(self):
        config = _config()
        assert RateSet.from_config(config, Room(number="1", price=Decimal("1"), charge_common_area=False)).common_fee == 0
        flagged = Room(number="2", price=Decimal("1"), charge_common_area=True)
        assert RateSet.from_config(config, flagged).common_fee == Decimal("100")

    def test_overrides_ignore_none(self):
        rates = RateSet.from_config(_config()).with_overrides(trash_fee=Decimal("0"), water_rate=None)
        assert rates.trash_fee == Decimal("0")
        assert rates.water_rate == Decimal("18")


class TestBuildBill:
    def test_total_includes_every_component(self):
        rates = RateSet(
            water_rate=Decimal("18"),
            electric_rate=Decimal("7"),
            trash_fee=Decimal("30"),
            internet_fee=Decimal("200"),
            other_fees=Decimal("50"),
            common_fee=Decimal("100"),
        )
        total = compute_total(Decimal("3500"), Decimal("180"), Decimal("350"), rates)
        assert total == Decimal("4410")

    def test_build_bill_snapshots_values(self):
        room = Room(id="room-1", number="101", price=Decimal("3500"), charge_common_area=False)
        rates = RateSet.from_config(_config(), room).with_overrides(trash_fee=Decimal("0"))
        readings = MeterReadings(
            water_last=Decimal("110"),
            water_current=Decimal("120"),
            electric_last=Decimal("500"),
            electric_current=Decimal("550"),
        )

        bill = build_bill("org-1", room, None, date(2024, 5, 1), readings, rates)

        assert bill.room_price == Decimal("3500")
        assert bill.water_units == Decimal("10")
        assert bill.water_cost == Decimal("180")
        assert bill.electric_units == Decimal("50")
        assert bill.electric_cost == Decimal("350")
        assert bill.total_amount == Decimal("4030")
        assert bill.payment_status == PaymentStatus.PENDING
        assert bill.resident_id is None


class TestPaymentTransitions:
    @pytest.mark.parametrize("current", list(PaymentStatus))
    def test_upload_slip_from_any_state(self, current):
        assert next_payment_status(current, PaymentEvent.UPLOAD_SLIP) == PaymentStatus.REVIEW

    def test_review_outcomes(self):
        assert next_payment_status(PaymentStatus.REVIEW, PaymentEvent.APPROVE) == PaymentStatus.PAID
        assert next_payment_status(PaymentStatus.REVIEW, PaymentEvent.REJECT) == PaymentStatus.PENDING

    @pytest.mark.parametrize("current", [PaymentStatus.PENDING, PaymentStatus.PAID])
    @pytest.mark.parametrize("event", [PaymentEvent.APPROVE, PaymentEvent.REJECT])
    def test_review_requires_review_state(self, current, event):
        with pytest.raises(InvalidStateTransitionError):
            next_payment_status(current, event)

    def test_cash_payment(self):
        assert next_payment_status(PaymentStatus.PENDING, PaymentEvent.PAY_CASH) == PaymentStatus.PAID
        assert next_payment_status(PaymentStatus.REVIEW, PaymentEvent.PAY_CASH) == PaymentStatus.PAID
        with pytest.raises(InvalidStateTransitionError):
            next_payment_status(PaymentStatus.PAID, PaymentEvent.PAY_CASH)


class TestOverdue:
    def test_past_month_is_overdue(self):
        assert is_overdue(date(2024, 4, 1), date(2024, 5, 1), 5)
        assert is_overdue(date(2023, 12, 1), date(2024, 1, 2), 5)

    def test_current_month_after_due_day(self):
        assert is_overdue(date(2024, 5, 1), date(2024, 5, 6), 5)
        assert not is_overdue(date(2024, 5, 1), date(2024, 5, 5), 5)

    def test_future_month_is_not_overdue(self):
        assert not is_overdue(date(2024, 6, 1), date(2024, 5, 20), 5)
