"""Surcharge rules.

Each rule inspects the request and the running context and returns at most
one line item. The engine applies them in ``RULES`` order; the veteran
discount must stay last because it prices off whatever was emitted before it.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal

from nemt_fares.geo.counties import CountyClassification
from nemt_fares.models import (
    LineItem,
    LineItemKind,
    PricingRequest,
    WheelchairType,
)
from nemt_fares.money import to_cents, to_decimal
from nemt_fares.settings import PricingConfig

SATURDAY = 5
SUNDAY = 6


@dataclass
class RuleContext:
    """Running state shared across one pricing call."""

    counties: CountyClassification
    effective_distance_miles: float
    line_items: list[LineItem] = field(default_factory=list)

    @property
    def positive_subtotal_cents(self) -> int:
        return sum(
            item.amount_cents
            for item in self.line_items
            if item.amount_cents > 0 and item.kind in (LineItemKind.BASE, LineItemKind.SURCHARGE)
        )


Rule = Callable[[PricingRequest, RuleContext, PricingConfig], LineItem | None]


def _surcharge(label: str, amount: Decimal) -> LineItem:
    return LineItem(label=label, amount_cents=to_cents(amount), kind=LineItemKind.SURCHARGE)


def base_fare_rule(
    request: PricingRequest, context: RuleContext, config: PricingConfig
) -> LineItem | None:
    return LineItem(
        label="Base fare", amount_cents=to_cents(config.base_fare), kind=LineItemKind.BASE
    )


def round_trip_leg_rule(
    request: PricingRequest, context: RuleContext, config: PricingConfig
) -> LineItem | None:
    if not request.is_round_trip:
        return None
    return LineItem(
        label="Additional leg for round trip",
        amount_cents=to_cents(config.base_fare),
        kind=LineItemKind.BASE,
    )


def distance_rule(
    request: PricingRequest, context: RuleContext, config: PricingConfig
) -> LineItem | None:
    if context.counties.is_home_county_trip:
        rate = config.home_county_rate_per_mile
        area = "home county"
    else:
        rate = config.cross_county_rate_per_mile
        area = "cross-county"

    miles = to_decimal(context.effective_distance_miles)
    return _surcharge(
        f"Distance ({miles.normalize():f} mi @ ${rate:.2f}/mi {area})",
        miles * rate,
    )


def county_crossing_rule(
    request: PricingRequest, context: RuleContext, config: PricingConfig
) -> LineItem | None:
    # One non-home county is covered by the cross-county mileage rate
    extra_counties = context.counties.counties_crossed - 1
    if extra_counties < 1:
        return None
    return _surcharge(
        f"County crossing surcharge ({context.counties.counties_crossed} counties)",
        extra_counties * config.per_county_fee,
    )


def is_off_hours(pickup: datetime, config: PricingConfig) -> bool:
    if pickup.weekday() in (SATURDAY, SUNDAY):
        return True
    return pickup.hour < config.office_hours_start or pickup.hour >= config.office_hours_end


def off_hours_rule(
    request: PricingRequest, context: RuleContext, config: PricingConfig
) -> LineItem | None:
    if not is_off_hours(request.pickup_datetime, config):
        return None
    return _surcharge("Off-hours/weekend surcharge", config.off_hours_surcharge)


def _thanksgiving(year: int) -> date:
    november_first = date(year, 11, 1)
    # weekday() == 3 is Thursday
    first_thursday = 1 + (3 - november_first.weekday()) % 7
    return date(year, 11, first_thursday + 21)


def holiday_name(day: date) -> str | None:
    fixed = {
        (1, 1): "New Year's Day",
        (7, 4): "Independence Day",
        (12, 25): "Christmas Day",
    }
    if (day.month, day.day) in fixed:
        return fixed[(day.month, day.day)]
    if day == _thanksgiving(day.year):
        return "Thanksgiving"
    return None


def holiday_rule(
    request: PricingRequest, context: RuleContext, config: PricingConfig
) -> LineItem | None:
    if not config.holiday_surcharge:
        return None
    holiday = holiday_name(request.pickup_datetime.date())
    if holiday is None:
        return None
    return _surcharge(f"Holiday surcharge ({holiday})", config.holiday_surcharge)


def emergency_rule(
    request: PricingRequest, context: RuleContext, config: PricingConfig
) -> LineItem | None:
    if not request.is_emergency:
        return None
    return _surcharge("Emergency fee", config.emergency_surcharge)


def wheelchair_rule(
    request: PricingRequest, context: RuleContext, config: PricingConfig
) -> LineItem | None:
    # Client-owned manual and power chairs ride free
    if request.wheelchair_type != WheelchairType.RENTAL:
        return None
    if request.client_type in config.wheelchair_fee_waived_client_types:
        return _surcharge(
            f"Wheelchair rental (waived for {request.client_type.value} clients)",
            Decimal("0"),
        )
    return _surcharge("Wheelchair rental", config.wheelchair_rental_fee)


def additional_passenger_rule(
    request: PricingRequest, context: RuleContext, config: PricingConfig
) -> LineItem | None:
    if request.additional_passengers < 1 or not config.per_passenger_fee:
        return None
    return _surcharge(
        f"Additional passengers ({request.additional_passengers})",
        request.additional_passengers * config.per_passenger_fee,
    )


def veteran_discount_rule(
    request: PricingRequest, context: RuleContext, config: PricingConfig
) -> LineItem | None:
    if not request.is_veteran or not config.veteran_discount_rate:
        return None

    subtotal = context.positive_subtotal_cents
    discount = (Decimal(subtotal) * config.veteran_discount_rate).quantize(
        Decimal("1"), rounding=ROUND_HALF_UP
    )
    # Never discount past zero
    discount_cents = min(int(discount), subtotal)
    percent = (config.veteran_discount_rate * 100).normalize()

    return LineItem(
        label=f"Veteran discount ({percent:f}%)",
        amount_cents=-discount_cents,
        kind=LineItemKind.DISCOUNT,
    )


RULES: tuple[Rule, ...] = (
    base_fare_rule,
    round_trip_leg_rule,
    distance_rule,
    county_crossing_rule,
    off_hours_rule,
    holiday_rule,
    emergency_rule,
    wheelchair_rule,
    additional_passenger_rule,
    veteran_discount_rule,
)
