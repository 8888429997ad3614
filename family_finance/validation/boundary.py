"""
Raw Input Boundary

Turns whatever the persistence layer hands over (dicts with camelCase
keys, dicts with snake_case keys, already-typed models, garbage) into
typed records. Nothing here raises.
"""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

from family_finance.models.domain import Account, Transaction, Trip

_MISSING = object()


def read_field(raw: Any, name: str, default: Any = None) -> Any:
    """
    Raw value of `name` (snake_case) on a mapping or model.

    Mappings are looked up by camelCase key first, then snake_case.
    """
    if isinstance(raw, BaseModel):
        return getattr(raw, name, default)
    if isinstance(raw, Mapping):
        value = raw.get(to_camel(name), _MISSING)
        if value is _MISSING:
            value = raw.get(name, default)
        return value
    return default


def _string_keys(raw: Mapping) -> dict:
    return {key: value for key, value in raw.items() if isinstance(key, str)}


def coerce_account(raw: Any) -> Account:
    """Typed Account for any input; non-mappings become an empty Account."""
    if isinstance(raw, Account):
        return raw
    if isinstance(raw, BaseModel):
        raw = raw.model_dump(by_alias=True)
    if not isinstance(raw, Mapping):
        return Account()
    return Account.model_validate(_string_keys(raw))


def coerce_transaction(raw: Any) -> Transaction:
    """Typed Transaction for any input; non-mappings become an empty Transaction."""
    if isinstance(raw, Transaction):
        return raw
    if isinstance(raw, BaseModel):
        raw = raw.model_dump(by_alias=True)
    if not isinstance(raw, Mapping):
        return Transaction()
    return Transaction.model_validate(_string_keys(raw))


def coerce_trip(raw: Any) -> Trip:
    if isinstance(raw, Trip):
        return raw
    if not isinstance(raw, Mapping):
        return Trip()
    return Trip.model_validate(_string_keys(raw))


def as_record_list(values: Any) -> list:
    """List input as-is, tuples as lists, anything else as empty."""
    if isinstance(values, list):
        return values
    if isinstance(values, tuple):
        return list(values)
    return []
