"""Calculation error detection and health reporting."""

from family_finance.telemetry.detector import Telemetry, ensure_telemetry

__all__ = ["Telemetry", "ensure_telemetry"]
