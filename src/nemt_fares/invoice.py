"""Monthly facility invoice totals built from priced trips."""

import re
from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict, Field

from nemt_fares.core.exceptions import InvalidInput
from nemt_fares.models import PricingResult
from nemt_fares.money import cents_to_dollars

BILLING_MONTH_PATTERN = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")


class FacilityInvoice(BaseModel):
    facility_id: str
    billing_month: str
    trip_count: int = Field(ge=0)
    round_trip_count: int = Field(ge=0)
    estimated_trip_count: int = Field(ge=0)
    billed_miles: float = Field(ge=0.0)
    total_cents: int = Field(ge=0)

    model_config = ConfigDict(frozen=True)

    @property
    def total(self):
        return cents_to_dollars(self.total_cents)


def build_facility_invoice(
    facility_id: str, billing_month: str, results: Iterable[PricingResult]
) -> FacilityInvoice:
    """Sum one facility's priced trips for a billing month (``YYYY-MM``)."""
    if not facility_id:
        raise InvalidInput("facility_id is required")
    if not BILLING_MONTH_PATTERN.match(billing_month):
        raise InvalidInput(f"Billing month must be YYYY-MM, got {billing_month!r}")

    trips = list(results)

    return FacilityInvoice(
        facility_id=facility_id,
        billing_month=billing_month,
        trip_count=len(trips),
        round_trip_count=sum(1 for t in trips if t.is_round_trip),
        estimated_trip_count=sum(1 for t in trips if t.is_estimated),
        billed_miles=round(sum(t.effective_distance_miles for t in trips), 2),
        total_cents=sum(t.total_cents for t in trips),
    )
