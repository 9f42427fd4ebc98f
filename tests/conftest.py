import os
from pathlib import Path

import pytest

from nemt_fares.settings import PricingConfig


@pytest.fixture(autouse=True)
def clean_pricing_env(monkeypatch):
    """Keep developer PRICING_* variables out of config defaults."""
    for key in list(os.environ):
        if key.upper().startswith("PRICING_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def config() -> PricingConfig:
    return PricingConfig()


@pytest.fixture
def counties_geojson_path() -> Path:
    return Path(__file__).parent / "fixtures" / "counties.geojson"
