from __future__ import annotations

import pytest

from devcaps.core.errors import MalformedRequestError
from devcaps.core.payload import get_float, get_int, get_str, require_float, require_int, round_tenths


def test_typed_getters_return_defaults_for_missing_or_mismatched() -> None:
    payload = {"n": 3, "f": 2.5, "s": "COOL", "b": True, "numeric_text": "4"}

    assert get_int(payload, "n") == 3
    assert get_int(payload, "f") == 2
    assert get_int(payload, "missing", 7) == 7
    assert get_int(payload, "b", 9) == 9
    assert get_int(payload, "numeric_text", 0) == 0
    assert get_float(payload, "n") == 3.0
    assert get_float(payload, "s", 1.0) == 1.0
    assert get_str(payload, "s") == "COOL"
    assert get_str(payload, "n") == ""


def test_require_float() -> None:
    assert require_float({"temperature": -2}, "temperature") == -2.0
    with pytest.raises(MalformedRequestError):
        require_float({}, "temperature")
    with pytest.raises(MalformedRequestError):
        require_float({"temperature": None}, "temperature")


@pytest.mark.parametrize(
    ("raw", "expected"),
    [(21.27, 21.3), (21.24, 21.2), (21.25, 21.3), (-21.25, -21.3), (20, 20.0), (0.04, 0.0)],
)
def test_round_tenths(raw: float, expected: float) -> None:
    assert round_tenths(raw) == expected


@pytest.mark.parametrize("bad", [float("nan"), float("inf"), float("-inf")])
def test_non_finite_numbers_fall_back_to_defaults(bad: float) -> None:
    payload = {"value": bad}

    assert get_int(payload, "value", 4) == 4
    assert get_float(payload, "value", 1.0) == 1.0
    with pytest.raises(MalformedRequestError):
        require_float(payload, "value")
    with pytest.raises(MalformedRequestError):
        require_int(payload, "value")


def test_int_too_large_for_float_is_not_a_float() -> None:
    payload = {"value": 10**400}

    assert get_int(payload, "value") == 10**400
    assert get_float(payload, "value", 2.0) == 2.0
    with pytest.raises(MalformedRequestError):
        require_float(payload, "value")
