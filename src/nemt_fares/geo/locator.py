import json
import logging
from pathlib import Path

from shapely.geometry import Point, shape
from shapely.geometry.base import BaseGeometry
from shapely.ops import unary_union

from .counties import CountyClassification, classify_counties, normalize_county_name

logger = logging.getLogger(__name__)

SUPPORTED_GEOMETRIES = ("Polygon", "MultiPolygon")


class CountyLocator:
    """Resolves coordinates to county names using boundary polygons from GeoJSON."""

    def __init__(self, geojson_path: Path | str):
        self.geojson_path = Path(geojson_path)
        self._boundaries: dict[str, BaseGeometry] = {}
        self._load_boundaries()

    def _load_boundaries(self) -> None:
        with open(self.geojson_path) as f:
            geojson = json.load(f)

        if geojson.get("type") != "FeatureCollection":
            logger.warning(f"Expected FeatureCollection, got {geojson.get('type')}")
            return

        for feature in geojson.get("features", []):
            parsed = self._parse_feature(feature)
            if parsed:
                county, geometry = parsed
                # Counties split across features (islands, exclaves) merge into one shape
                existing = self._boundaries.get(county)
                if existing is not None:
                    geometry = unary_union([existing, geometry])
                self._boundaries[county] = geometry

        logger.info(f"Loaded {len(self._boundaries)} county boundaries from {self.geojson_path}")

    @staticmethod
    def _parse_feature(feature: dict) -> tuple[str, BaseGeometry] | None:
        try:
            properties = feature.get("properties") or {}
            geometry = feature.get("geometry") or {}

            county = normalize_county_name(properties.get("name"))
            if not county:
                logger.warning("Skipping feature with missing county name")
                return None

            if geometry.get("type") not in SUPPORTED_GEOMETRIES:
                logger.warning(
                    f"Skipping county {county}: unsupported geometry type {geometry.get('type')}"
                )
                return None

            boundary = shape(geometry)
            if boundary.is_empty:
                logger.warning(f"Skipping county {county}: empty coordinates")
                return None

            return county, boundary

        except Exception as e:
            logger.warning(f"Error parsing feature: {e}")
            return None

    @property
    def counties(self) -> list[str]:
        return list(self._boundaries)

    def find_county(self, lat: float | None, lon: float | None) -> str | None:
        """Find the county containing a location, or None when unresolved.

        Points on a shared border resolve to whichever county was loaded first.
        """
        if lat is None or lon is None:
            return None

        point = Point(lon, lat)  # Shapely uses (x, y) = (lon, lat)

        for county, boundary in self._boundaries.items():
            if boundary.covers(point):
                return county

        return None

    def classify_coordinates(
        self,
        pickup: tuple[float, float] | None,
        destination: tuple[float, float] | None,
        home_county: str,
    ) -> CountyClassification:
        """Classify a trip from (lat, lon) endpoints."""
        pickup_county = self.find_county(*pickup) if pickup else None
        destination_county = self.find_county(*destination) if destination else None
        return classify_counties(pickup_county, destination_county, home_county)
