"""
Family Finance - Calculation Core

The defensive calculation layer behind the family finance dashboard.
It turns an untrusted snapshot of accounts and transactions into
dashboard-ready aggregates.

DESIGN PRINCIPLES:
1. Nothing escapes: every public entry point degrades to zero/neutral values
2. No NaN, Infinity or None ever reaches a rendered number
3. Records are never mutated, only derived from
4. Every recovered failure is recorded as telemetry
5. Same inputs, same outputs
"""

__version__ = "1.0.0"
__author__ = "Family Finance Team"
