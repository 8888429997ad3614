"""Configuration package."""

from family_finance.config.settings import (
    CurrencySettings,
    DashboardSettings,
    Settings,
    TelemetrySettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "CurrencySettings",
    "DashboardSettings",
    "Settings",
    "TelemetrySettings",
    "get_settings",
    "validate_all_settings",
]
