from datetime import date, datetime
from decimal import Decimal

import pytest

from nemt_fares.engine import compute_pricing
from nemt_fares.geo.counties import classify_counties
from nemt_fares.models import LineItem, LineItemKind
from nemt_fares.rules import (
    RULES,
    RuleContext,
    additional_passenger_rule,
    county_crossing_rule,
    distance_rule,
    emergency_rule,
    holiday_name,
    holiday_rule,
    is_off_hours,
    off_hours_rule,
    round_trip_leg_rule,
    veteran_discount_rule,
    wheelchair_rule,
)
from nemt_fares.settings import PricingConfig
from tests.factories import SATURDAY_10AM, SUNDAY_10AM, WEEKDAY_10AM, build_request


def _context(pickup="Franklin", destination="Franklin", miles=10.0, items=None):
    return RuleContext(
        counties=classify_counties(pickup, destination, "Franklin"),
        effective_distance_miles=miles,
        line_items=list(items or []),
    )


class TestRuleOrder:
    """Fixed rule sequence."""

    def test_veteran_discount_runs_last(self):
        assert RULES[-1] is veteran_discount_rule

    def test_base_fare_runs_first(self):
        assert RULES[0].__name__ == "base_fare_rule"


class TestDistanceRule:
    """Per-mile charge by county tier."""

    def test_home_county_rate(self, config):
        item = distance_rule(build_request(), _context(), config)
        assert item.amount_cents == 3000
        assert item.kind == LineItemKind.SURCHARGE

    def test_cross_county_rate(self, config):
        item = distance_rule(build_request(), _context(destination="Delaware"), config)
        assert item.amount_cents == 4000
        assert "cross-county" in item.label

    def test_uses_effective_distance_from_context(self, config):
        item = distance_rule(build_request(), _context(miles=20.0), config)
        assert item.amount_cents == 6000


class TestCountyCrossingRule:
    """Fee for each non-home county beyond the first."""

    @pytest.mark.parametrize(
        ("pickup", "destination", "expected"),
        [
            ("Franklin", "Franklin", None),
            ("Franklin", "Delaware", None),
            ("Delaware", "Delaware", None),
            ("Delaware", "Licking", 5000),
        ],
    )
    def test_fee_only_beyond_first_county(self, config, pickup, destination, expected):
        """0 or 1 non-home counties add nothing; 2 add one fee."""
        item = county_crossing_rule(build_request(), _context(pickup, destination), config)
        if expected is None:
            assert item is None
        else:
            assert item.amount_cents == expected

    def test_fee_follows_config(self):
        config = PricingConfig(per_county_fee=Decimal("35.50"))
        item = county_crossing_rule(build_request(), _context("Delaware", "Licking"), config)
        assert item.amount_cents == 3550


class TestOffHoursRule:
    """Weekend and outside-office-hours surcharge."""

    @pytest.mark.parametrize(
        ("pickup", "expected"),
        [
            (WEEKDAY_10AM, False),
            (WEEKDAY_10AM.replace(hour=8), False),
            (WEEKDAY_10AM.replace(hour=17, minute=59), False),
            (WEEKDAY_10AM.replace(hour=7, minute=59), True),
            (WEEKDAY_10AM.replace(hour=18), True),
            (WEEKDAY_10AM.replace(hour=23), True),
            (SATURDAY_10AM, True),
            (SUNDAY_10AM, True),
        ],
    )
    def test_window(self, config, pickup, expected):
        assert is_off_hours(pickup, config) is expected

    def test_weekend_night_fires_once(self, config):
        """Weekend and late pickup share one surcharge."""
        request = build_request(pickup_datetime=SATURDAY_10AM.replace(hour=21))
        item = off_hours_rule(request, _context(), config)

        assert item.amount_cents == 4000

    def test_weekend_night_priced_once_by_engine(self, config):
        request = build_request(pickup_datetime=SATURDAY_10AM.replace(hour=21))
        result = compute_pricing(request, config)

        matches = [i for i in result.line_items if i.label == "Off-hours/weekend surcharge"]
        assert len(matches) == 1
        assert result.total_cents == 12000

    def test_custom_office_hours(self):
        config = PricingConfig(office_hours_start=6, office_hours_end=20)
        assert is_off_hours(WEEKDAY_10AM.replace(hour=7), config) is False
        assert is_off_hours(WEEKDAY_10AM.replace(hour=20), config) is True


class TestHolidayRule:
    """Holiday calendar and surcharge."""

    @pytest.mark.parametrize(
        ("day", "name"),
        [
            (date(2025, 1, 1), "New Year's Day"),
            (date(2025, 7, 4), "Independence Day"),
            (date(2025, 11, 27), "Thanksgiving"),
            (date(2024, 11, 28), "Thanksgiving"),
            (date(2025, 12, 25), "Christmas Day"),
            (date(2025, 11, 20), None),
            (date(2025, 3, 12), None),
        ],
    )
    def test_holiday_name(self, day, name):
        assert holiday_name(day) == name

    def test_holiday_surcharge(self, config):
        request = build_request(pickup_datetime=datetime(2025, 12, 25, 10, 0))
        item = holiday_rule(request, _context(), config)
        assert item.amount_cents == 10000
        assert item.label == "Holiday surcharge (Christmas Day)"

    def test_disabled_when_zero(self):
        config = PricingConfig(holiday_surcharge=Decimal("0"))
        request = build_request(pickup_datetime=datetime(2025, 12, 25, 10, 0))
        assert holiday_rule(request, _context(), config) is None


class TestFlagRules:
    """Rules driven by a single request flag."""

    def test_emergency(self, config):
        assert emergency_rule(build_request(), _context(), config) is None
        item = emergency_rule(build_request(is_emergency=True), _context(), config)
        assert item.amount_cents == 4000

    def test_round_trip_leg(self, config):
        assert round_trip_leg_rule(build_request(), _context(), config) is None
        item = round_trip_leg_rule(build_request(is_round_trip=True), _context(), config)
        assert item.kind == LineItemKind.BASE
        assert item.amount_cents == 5000

    @pytest.mark.parametrize("wheelchair", ["none", "manual", "power"])
    def test_no_wheelchair_fee_for_own_equipment(self, config, wheelchair):
        request = build_request(wheelchair_type=wheelchair)
        assert wheelchair_rule(request, _context(), config) is None


class TestAdditionalPassengerRule:
    """Per-passenger fee, free unless configured."""

    def test_free_by_default(self, config):
        request = build_request(additional_passengers=2)
        assert additional_passenger_rule(request, _context(), config) is None

    def test_per_passenger_fee(self):
        config = PricingConfig(per_passenger_fee=Decimal("10"))
        item = additional_passenger_rule(
            build_request(additional_passengers=3), _context(), config
        )
        assert item.amount_cents == 3000


class TestVeteranDiscountRule:
    """Discount computed from the line items emitted so far."""

    def test_discounts_sum_so_far(self, config):
        items = [
            LineItem(label="a", amount_cents=10000, kind=LineItemKind.BASE),
            LineItem(label="b", amount_cents=2550, kind=LineItemKind.SURCHARGE),
        ]
        item = veteran_discount_rule(build_request(is_veteran=True), _context(items=items), config)

        assert item.kind == LineItemKind.DISCOUNT
        assert item.amount_cents == -2510
        assert item.label == "Veteran discount (20%)"

    def test_ignores_prior_discounts(self, config):
        """Only positive base and surcharge items count toward the subtotal."""
        items = [
            LineItem(label="a", amount_cents=10000, kind=LineItemKind.BASE),
            LineItem(label="promo", amount_cents=-1000, kind=LineItemKind.DISCOUNT),
        ]
        item = veteran_discount_rule(build_request(is_veteran=True), _context(items=items), config)
        assert item.amount_cents == -2000

    def test_not_veteran(self, config):
        assert veteran_discount_rule(build_request(), _context(), config) is None
