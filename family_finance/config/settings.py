"""
Configuration Management for Family Finance

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All tunable constants of the calculation core live here.
Engines never read the environment themselves; they ask for a settings
group and receive validated values.
"""

from functools import cached_property, lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class CurrencySettings(BaseSettings):
    """Currency conversion configuration."""

    model_config = SettingsConfigDict(
        env_prefix="FINANCE_CURRENCY_",
        extra="ignore"
    )

    rate_overrides: dict[str, float] = Field(
        default_factory=dict,
        description="Currency code -> BRL multiplier, merged over the static table"
    )
    flag_unknown_currencies: bool = Field(
        default=True,
        description="Log unknown currency codes instead of absorbing them silently"
    )

    @field_validator('rate_overrides')
    @classmethod
    def validate_rate_overrides(cls, v: dict[str, float]) -> dict[str, float]:
        """Only positive, finite multipliers make sense as exchange rates."""
        cleaned = {}
        for code, rate in v.items():
            if not (rate > 0 and rate != float("inf")):
                raise ValueError(f"Exchange rate for {code} must be a positive number")
            cleaned[code.strip().upper()] = rate
        return cleaned


class TelemetrySettings(BaseSettings):
    """Error detector configuration."""

    model_config = SettingsConfigDict(
        env_prefix="FINANCE_TELEMETRY_",
        extra="ignore"
    )

    max_errors: int = Field(
        default=1000,
        ge=1,
        le=100000,
        description="Size of the error ring buffer (oldest entries are dropped)"
    )
    max_logged_fields: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Maximum fields/items kept per input when logging"
    )
    health_report_period_hours: float = Field(
        default=24,
        gt=0,
        description="Default window of the health report"
    )
    redacted_placeholder: str = Field(
        default="[REDACTED]",
        description="Replacement for sensitive input fields in logs"
    )


class DashboardSettings(BaseSettings):
    """Dashboard engine configuration."""

    model_config = SettingsConfigDict(
        env_prefix="FINANCE_DASHBOARD_",
        extra="ignore"
    )

    sparkline_days: int = Field(
        default=7,
        ge=1,
        le=366,
        description="Number of days covered by the sparklines"
    )
    upcoming_bills_limit: int = Field(
        default=3,
        ge=1,
        le=50,
        description="How many upcoming bills to surface"
    )
    money_decimal_places: int = Field(
        default=2,
        ge=0,
        le=6,
        description="Decimal places of monetary results"
    )
    split_tolerance: float = Field(
        default=0.01,
        ge=0.0,
        description="Allowed excess of split totals over the amount (rounding)"
    )
    saving_rate_warning_threshold: float = Field(
        default=0.10,
        ge=0.0,
        le=1.0,
        description="Saving rate below which health becomes WARNING"
    )


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access. Each group is read from
    the environment once per Settings instance; get_settings.cache_clear()
    reloads them.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @cached_property
    def currency(self) -> CurrencySettings:
        return CurrencySettings()

    @cached_property
    def telemetry(self) -> TelemetrySettings:
        return TelemetrySettings()

    @cached_property
    def dashboard(self) -> DashboardSettings:
        return DashboardSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings groups load from the current environment.

    Returns a dict of {setting_name: is_valid}, plus "<name>_error"
    entries describing failures.
    """
    results = {}

    settings = get_settings()

    for name in ("currency", "telemetry", "dashboard"):
        try:
            getattr(settings, name)
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
