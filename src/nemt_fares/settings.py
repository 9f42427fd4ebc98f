from decimal import Decimal
from typing import Literal

from pydantic import Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from nemt_fares.core.exceptions import UnsupportedConfiguration
from nemt_fares.geo.counties import normalize_county_name
from nemt_fares.models import ClientType


class PricingConfig(BaseSettings):
    """Every tunable fare constant, loaded once and injected into the engine."""

    base_fare: Decimal = Field(default=Decimal("50.00"), ge=0, description="Flat fee per leg")
    home_county_rate_per_mile: Decimal = Field(default=Decimal("3.00"), ge=0)
    cross_county_rate_per_mile: Decimal = Field(
        default=Decimal("4.00"),
        ge=0,
        description="Per-mile rate when either endpoint is outside the home county",
    )
    per_county_fee: Decimal = Field(
        default=Decimal("50.00"),
        ge=0,
        description="Charged for each non-home county beyond the first",
    )
    off_hours_surcharge: Decimal = Field(default=Decimal("40.00"), ge=0)
    holiday_surcharge: Decimal = Field(default=Decimal("100.00"), ge=0)
    emergency_surcharge: Decimal = Field(default=Decimal("40.00"), ge=0)
    wheelchair_rental_fee: Decimal = Field(default=Decimal("25.00"), ge=0)
    wheelchair_fee_waived_client_types: frozenset[ClientType] = Field(default_factory=frozenset)
    per_passenger_fee: Decimal = Field(default=Decimal("0.00"), ge=0)
    veteran_discount_rate: Decimal = Field(default=Decimal("0.20"), ge=0)

    home_county: str = "Franklin"
    office_hours_start: int = Field(default=8, ge=0, le=23)
    office_hours_end: int = Field(default=18, ge=1, le=24)

    # Caller-side estimate when the distance matrix is unavailable
    fallback_distance_miles: float = Field(default=15.0, ge=0.0)

    model_config = SettingsConfigDict(env_prefix="PRICING_", frozen=True)

    def __init__(self, **data):
        try:
            super().__init__(**data)
        except ValidationError as e:
            raise UnsupportedConfiguration(
                f"Invalid pricing configuration: {e.error_count()} error(s)",
                errors=e.errors(include_url=False),
            ) from e

    @field_validator("home_county")
    @classmethod
    def validate_home_county(cls, v: str) -> str:
        county = normalize_county_name(v)
        if county is None:
            raise ValueError("home_county is required")
        return county

    @model_validator(mode="after")
    def validate_consistency(self) -> "PricingConfig":
        if self.cross_county_rate_per_mile <= self.home_county_rate_per_mile:
            raise ValueError(
                f"cross_county_rate_per_mile ({self.cross_county_rate_per_mile}) must be "
                f"greater than home_county_rate_per_mile ({self.home_county_rate_per_mile})"
            )
        if self.office_hours_start >= self.office_hours_end:
            raise ValueError(
                f"Office hours start ({self.office_hours_start}) must be before "
                f"end ({self.office_hours_end})"
            )
        return self


class LoggingSettings(BaseSettings):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    format: Literal["text", "json"] = "text"
    environment: str = "development"

    model_config = SettingsConfigDict(env_prefix="PRICING_LOG_")


class Settings(BaseSettings):
    pricing: PricingConfig = Field(default_factory=PricingConfig)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    model_config = SettingsConfigDict(
        env_nested_delimiter="__",
        case_sensitive=False,
    )


def get_settings() -> Settings:
    """Load and validate settings from environment variables."""
    return Settings()
