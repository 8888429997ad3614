"""Dashboard read-model assembly."""

from family_finance.dashboard.aggregator import DashboardAggregator

__all__ = ["DashboardAggregator"]
