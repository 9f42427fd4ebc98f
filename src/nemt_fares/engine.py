import logging
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict

from nemt_fares.core.exceptions import InvalidInput
from nemt_fares.geo.counties import classify_counties
from nemt_fares.models import (
    LineItem,
    LineItemKind,
    PricingRequest,
    PricingResult,
    parse_request,
)
from nemt_fares.money import format_cents
from nemt_fares.rules import RULES, Rule, RuleContext
from nemt_fares.settings import PricingConfig

logger = logging.getLogger(__name__)


class BreakdownEntry(BaseModel):
    """One display row of a pricing breakdown."""

    label: str
    amount: str
    kind: LineItemKind

    model_config = ConfigDict(frozen=True)


def compute_pricing(
    request: PricingRequest,
    config: PricingConfig | None = None,
    rules: tuple[Rule, ...] = RULES,
) -> PricingResult:
    """Price a trip.

    Rules run in order and each may add one line item. A ``subtotal`` row is
    inserted ahead of the first discount and a ``total`` row closes the
    breakdown; neither counts toward ``total_cents``.

    Raises:
        InvalidInput: distance is negative
    """
    config = config or PricingConfig()

    # Requests built with model_construct skip validation
    if request.distance_miles < 0:
        raise InvalidInput(f"Distance must be non-negative, got {request.distance_miles}")

    counties = classify_counties(
        request.pickup_county, request.destination_county, config.home_county
    )
    effective_distance = request.distance_miles * (2 if request.is_round_trip else 1)
    context = RuleContext(counties=counties, effective_distance_miles=effective_distance)

    display_items: list[LineItem] = []
    for rule in rules:
        item = rule(request, context, config)
        if item is None:
            continue
        if item.kind == LineItemKind.DISCOUNT and not any(
            i.kind == LineItemKind.SUBTOTAL for i in display_items
        ):
            display_items.append(
                LineItem(
                    label="Subtotal",
                    amount_cents=sum(i.amount_cents for i in context.line_items),
                    kind=LineItemKind.SUBTOTAL,
                )
            )
        context.line_items.append(item)
        display_items.append(item)

    total_cents = sum(i.amount_cents for i in context.line_items)
    display_items.append(LineItem(label="Total", amount_cents=total_cents, kind=LineItemKind.TOTAL))

    result = PricingResult(
        line_items=tuple(display_items),
        total_cents=total_cents,
        distance_miles=request.distance_miles,
        effective_distance_miles=effective_distance,
        is_round_trip=request.is_round_trip,
        counties_crossed=counties.counties_crossed,
        is_home_county_trip=counties.is_home_county_trip,
        is_estimated=request.is_estimated,
        pickup_county=counties.pickup_county,
        destination_county=counties.destination_county,
    )

    logger.debug(
        f"Priced trip at {format_cents(total_cents)} ({len(context.line_items)} line items)",
        extra={
            "client_type": str(request.client_type),
            "pickup_county": counties.pickup_county,
            "destination_county": counties.destination_county,
            "total_cents": total_cents,
        },
    )

    return result


def format_breakdown(result: PricingResult) -> list[BreakdownEntry]:
    """Render a result's line items in order for display."""
    return [
        BreakdownEntry(label=item.label, amount=format_cents(item.amount_cents), kind=item.kind)
        for item in result.line_items
    ]


def resolve_distance(
    measured_miles: float | None, config: PricingConfig | None = None
) -> tuple[float, bool]:
    """Pick the distance to price when the distance matrix may have failed.

    Returns the measured one-way distance, or the configured fallback estimate
    flagged as estimated when nothing was measured.
    """
    config = config or PricingConfig()
    if measured_miles is None:
        logger.info(f"Distance unavailable, using {config.fallback_distance_miles} mi estimate")
        return config.fallback_distance_miles, True
    return measured_miles, False


def price_trip(
    payload: Mapping[str, Any], config: PricingConfig | None = None
) -> PricingResult:
    """Validate a raw trip payload and price it.

    A missing or null ``distance_miles`` is replaced by the fallback estimate.
    """
    config = config or PricingConfig()
    data = dict(payload)

    measured = data.pop("distance_miles", data.pop("distanceMiles", None))
    distance, estimated = resolve_distance(measured, config)
    data["distance_miles"] = distance
    if estimated:
        data.pop("isEstimated", None)
        data["is_estimated"] = True

    return compute_pricing(parse_request(data), config)
