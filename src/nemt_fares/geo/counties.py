import logging
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

COUNTY_SUFFIX = " county"
COUNTY_COMPONENT_TYPE = "administrative_area_level_2"


class CountyClassification(BaseModel):
    """County facts about a trip's two endpoints."""

    pickup_county: str | None
    destination_county: str | None
    is_home_county_trip: bool
    counties_crossed: int = Field(ge=0, le=2)
    is_unknown: bool = False

    model_config = ConfigDict(frozen=True)


def normalize_county_name(name: str | None) -> str | None:
    """Strip whitespace and a trailing ``" County"``; empty input gives None."""
    if not name or not isinstance(name, str):
        return None

    county = name.strip()
    if county.lower().endswith(COUNTY_SUFFIX):
        county = county[: -len(COUNTY_SUFFIX)].rstrip()

    return county or None


def county_from_address_components(components: Iterable[Mapping[str, Any]] | None) -> str | None:
    """Pull the county out of a geocoder result's ``address_components``.

    Returns None when the geocoder gave nothing usable.
    """
    if not components:
        return None

    try:
        for component in components:
            types = component.get("types") or []
            if COUNTY_COMPONENT_TYPE in types:
                return normalize_county_name(component.get("long_name"))
    except (AttributeError, TypeError) as e:
        logger.warning(f"Malformed address components: {e}")

    return None


def _same_county(a: str, b: str) -> bool:
    return a.casefold() == b.casefold()


def classify_counties(
    pickup_county: str | None,
    destination_county: str | None,
    home_county: str,
) -> CountyClassification:
    """Classify a trip by its endpoint counties.

    Counting is endpoint-based: counties the route passes through between
    pickup and destination are not considered. When either endpoint is
    unknown the trip is priced as a home-county trip.
    """
    pickup = normalize_county_name(pickup_county)
    destination = normalize_county_name(destination_county)
    home = normalize_county_name(home_county) or home_county

    if pickup is None or destination is None:
        logger.info(
            "County unresolved, pricing as home-county trip",
            extra={"pickup_county": pickup, "destination_county": destination},
        )
        return CountyClassification(
            pickup_county=pickup,
            destination_county=destination,
            is_home_county_trip=True,
            counties_crossed=0,
            is_unknown=True,
        )

    non_home = {c.casefold() for c in (pickup, destination) if not _same_county(c, home)}

    return CountyClassification(
        pickup_county=pickup,
        destination_county=destination,
        is_home_county_trip=not non_home,
        counties_crossed=len(non_home),
    )
