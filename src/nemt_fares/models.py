"""Immutable request/result types for fare computation."""

from collections.abc import Mapping
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator
from pydantic.alias_generators import to_camel

from nemt_fares.core.exceptions import InvalidInput
from nemt_fares.money import cents_to_dollars


class WheelchairType(str, Enum):
    """Wheelchair needs for a trip.

    Transport chairs are rejected before pricing and have no member here.
    """

    NONE = "none"
    MANUAL = "manual"
    POWER = "power"
    RENTAL = "rental"

    def __str__(self):
        return self.value


class ClientType(str, Enum):
    INDIVIDUAL = "individual"
    FACILITY = "facility"

    def __str__(self):
        return self.value


class LineItemKind(str, Enum):
    BASE = "base"
    SURCHARGE = "surcharge"
    DISCOUNT = "discount"
    SUBTOTAL = "subtotal"
    TOTAL = "total"

    def __str__(self):
        return self.value


# Kinds that are display conveniences and never part of the billed sum
DISPLAY_ONLY_KINDS = frozenset({LineItemKind.SUBTOTAL, LineItemKind.TOTAL})


class PricingRequest(BaseModel):
    """Trip attributes the engine prices.

    ``distance_miles`` is always the one-way distance. Accepts snake_case
    field names or the camelCase keys the dispatcher forms send.
    """

    pickup_address: str = ""
    destination_address: str = ""
    distance_miles: float = Field(ge=0.0, allow_inf_nan=False)
    pickup_datetime: datetime = Field(alias="pickupDateTime")
    is_round_trip: bool = False
    is_emergency: bool = False
    wheelchair_type: WheelchairType = WheelchairType.NONE
    client_type: ClientType = ClientType.INDIVIDUAL
    is_veteran: bool = False
    additional_passengers: int = Field(default=0, ge=0)
    pickup_county: str | None = None
    destination_county: str | None = None
    is_estimated: bool = False

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    def __init__(self, **data: Any):
        try:
            super().__init__(**data)
        except ValidationError as e:
            raise _as_invalid_input(e) from e

    @classmethod
    def model_validate(cls, obj: Any, **kwargs: Any) -> "PricingRequest":
        try:
            return super().model_validate(obj, **kwargs)
        except ValidationError as e:
            raise _as_invalid_input(e) from e

    @classmethod
    def model_validate_json(cls, json_data: str | bytes, **kwargs: Any) -> "PricingRequest":
        try:
            return super().model_validate_json(json_data, **kwargs)
        except ValidationError as e:
            raise _as_invalid_input(e) from e


def _as_invalid_input(error: ValidationError) -> InvalidInput:
    # model_validate runs __init__, so its InvalidInput arrives wrapped as a value_error
    for err in error.errors():
        original = (err.get("ctx") or {}).get("error")
        if isinstance(original, InvalidInput):
            return original

    fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in error.errors())
    return InvalidInput(
        f"Invalid pricing request ({fields})",
        errors=error.errors(include_url=False),
    )


def parse_request(data: Mapping[str, Any]) -> PricingRequest:
    """Build a request from a raw payload, raising InvalidInput on bad data."""
    return PricingRequest(**dict(data))


class LineItem(BaseModel):
    label: str
    amount_cents: int
    kind: LineItemKind

    model_config = ConfigDict(frozen=True)

    @property
    def amount(self) -> Decimal:
        return cents_to_dollars(self.amount_cents)


class PricingResult(BaseModel):
    """Priced breakdown of a single trip."""

    line_items: tuple[LineItem, ...]
    total_cents: int = Field(ge=0)

    # Echoed for invoicing so consumers don't re-derive them
    distance_miles: float
    effective_distance_miles: float
    is_round_trip: bool
    counties_crossed: int = Field(ge=0)
    is_home_county_trip: bool
    is_estimated: bool = False
    pickup_county: str | None = None
    destination_county: str | None = None

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def validate_total(self) -> "PricingResult":
        billed = sum(
            item.amount_cents for item in self.line_items if item.kind not in DISPLAY_ONLY_KINDS
        )
        if billed != self.total_cents:
            raise ValueError(f"total_cents {self.total_cents} != sum of line items {billed}")
        return self

    @property
    def total(self) -> Decimal:
        return cents_to_dollars(self.total_cents)

    def items_of_kind(self, kind: LineItemKind) -> list[LineItem]:
        return [item for item in self.line_items if item.kind == kind]

    def item(self, label: str) -> LineItem | None:
        for line_item in self.line_items:
            if line_item.label == label:
                return line_item
        return None
