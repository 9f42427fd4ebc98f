"""Fare engine for non-emergency medical transportation trips."""

from nemt_fares.core.exceptions import FareEngineError, InvalidInput, UnsupportedConfiguration
from nemt_fares.engine import (
    BreakdownEntry,
    compute_pricing,
    format_breakdown,
    price_trip,
    resolve_distance,
)
from nemt_fares.geo import (
    CountyClassification,
    CountyLocator,
    classify_counties,
    county_from_address_components,
    normalize_county_name,
)
from nemt_fares.invoice import FacilityInvoice, build_facility_invoice
from nemt_fares.models import (
    ClientType,
    LineItem,
    LineItemKind,
    PricingRequest,
    PricingResult,
    WheelchairType,
    parse_request,
)
from nemt_fares.settings import PricingConfig

__all__ = [
    "BreakdownEntry",
    "ClientType",
    "CountyClassification",
    "CountyLocator",
    "FacilityInvoice",
    "FareEngineError",
    "InvalidInput",
    "LineItem",
    "LineItemKind",
    "PricingConfig",
    "PricingRequest",
    "PricingResult",
    "UnsupportedConfiguration",
    "WheelchairType",
    "build_facility_invoice",
    "classify_counties",
    "compute_pricing",
    "county_from_address_components",
    "format_breakdown",
    "normalize_county_name",
    "parse_request",
    "price_trip",
    "resolve_distance",
]
