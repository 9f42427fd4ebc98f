"""County classification of trip endpoints."""

from .counties import (
    CountyClassification,
    classify_counties,
    county_from_address_components,
    normalize_county_name,
)
from .locator import CountyLocator

__all__ = [
    "CountyClassification",
    "CountyLocator",
    "classify_counties",
    "county_from_address_components",
    "normalize_county_name",
]
