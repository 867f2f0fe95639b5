"""Typed accessors for loosely-typed request payloads."""

from __future__ import annotations

import math
from collections.abc import Mapping
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from devcaps.core.errors import MalformedRequestError

_TENTH = Decimal("0.1")


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    if isinstance(value, int):
        return True
    return math.isfinite(value)


def _finite_float(value: Any) -> float | None:
    if not _is_number(value):
        return None
    try:
        return float(value)
    except OverflowError:
        return None


def get_int(mapping: Mapping[str, Any], key: str, default: int = 0) -> int:
    value = mapping.get(key)
    if not _is_number(value):
        return default
    return int(value)


def get_float(mapping: Mapping[str, Any], key: str, default: float = 0.0) -> float:
    value = _finite_float(mapping.get(key))
    return default if value is None else value


def get_str(mapping: Mapping[str, Any], key: str, default: str = "") -> str:
    value = mapping.get(key)
    if not isinstance(value, str):
        return default
    return value


def require_int(mapping: Mapping[str, Any], key: str) -> int:
    if key not in mapping:
        raise MalformedRequestError(f"Request is missing required field '{key}'")
    value = mapping[key]
    if not _is_number(value):
        raise MalformedRequestError(
            f"Request field '{key}' must be a finite number, got {value!r}"
        )
    return int(value)


def require_float(mapping: Mapping[str, Any], key: str) -> float:
    if key not in mapping:
        raise MalformedRequestError(f"Request is missing required field '{key}'")
    value = _finite_float(mapping[key])
    if value is None:
        raise MalformedRequestError(
            f"Request field '{key}' must be a finite number, got {mapping[key]!r}"
        )
    return value


def round_tenths(value: float) -> float:
    """Round half away from zero at the tenths digit (21.25 -> 21.3)."""
    if not math.isfinite(value):
        return float(value)
    return float(Decimal(repr(float(value))).quantize(_TENTH, rounding=ROUND_HALF_UP))
