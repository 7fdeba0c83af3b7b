"""Conversion of external vectors to and from a hashmap's bound kinds."""

from __future__ import annotations

import math
import operator
from collections.abc import Iterable
from typing import Any

from typed_hashmap.errors import CoercionError, UnsupportedKindError
from typed_hashmap.kinds import (
    INT64_MAX,
    INT64_MIN,
    INTEGRAL_NARROWINGS,
    ScalarKind,
    infer_kind,
    is_missing,
)


def as_vector(obj: Any) -> list[Any]:
    """Turn a scalar or an iterable of scalars into a list.

    Strings are scalars here, so ``"abc"`` becomes ``["abc"]``.
    """
    if isinstance(obj, (str, bytes)) or not isinstance(obj, Iterable):
        return [obj]
    return list(obj)


def can_coerce(source: ScalarKind, target: ScalarKind) -> bool:
    """Check whether a vector of kind ``source`` may be offered for ``target``.

    Integral narrowings are allowed here; each element is still checked when
    it is converted.
    """
    return source.embeds_into(target) or (source, target) in INTEGRAL_NARROWINGS


def _to_integer(value: Any) -> int:
    if isinstance(value, float):
        if not math.isfinite(value):
            raise CoercionError(f"Value {value!r} is not finite and cannot be an integer")
        if not value.is_integer():
            raise CoercionError(f"Value {value!r} has a fractional part and cannot be an integer")
        value = int(value)
    else:
        value = int(value)
    if value < INT64_MIN or value > INT64_MAX:
        raise CoercionError(f"Integer {value} is outside the signed 64-bit range")
    return value


def _to_float(value: Any) -> float:
    if isinstance(value, float):
        return value
    try:
        result = float(value)
    except OverflowError as e:
        raise CoercionError(f"Integer {value} is too large for a float") from e
    if int(result) != value:
        raise CoercionError(f"Integer {value} cannot be represented exactly as a float")
    return result


def coerce_scalar(value: Any, kind: ScalarKind) -> Any:
    """Convert one non-missing element to the Python representation of ``kind``.

    The element's own kind must already be known to embed (or narrow) into
    ``kind``.
    """
    if kind is ScalarKind.INTEGER:
        return _to_integer(value)
    if kind is ScalarKind.FLOAT:
        return _to_float(value)
    return kind.python_type(value)


def _vector_kind(items: list[Any]) -> ScalarKind | None:
    try:
        return infer_kind(items)
    except UnsupportedKindError as e:
        raise CoercionError(str(e)) from e


def coerce_vector(items: Iterable[Any], kind: ScalarKind, *, allow_missing: bool) -> list[Any]:
    """Convert a whole vector to ``kind``, failing before anything is returned.

    Missing elements become the kind's missing sentinel when
    ``allow_missing`` is set, otherwise they raise CoercionError.
    """
    vector = as_vector(items)
    source = _vector_kind(vector)
    if source is not None and not can_coerce(source, kind):
        raise CoercionError(f"Cannot convert a {source.value} vector to {kind.value}")

    result = []
    for item in vector:
        if is_missing(item):
            if not allow_missing:
                raise CoercionError(f"Missing values are not allowed in a {kind.value} vector here")
            result.append(kind.missing)
        else:
            result.append(coerce_scalar(item, kind))
    return result


def coerce_keys(items: Iterable[Any], kind: ScalarKind) -> list[Any]:
    """Convert a key vector to ``kind``. Keys may never be missing."""
    return coerce_vector(items, kind, allow_missing=False)


def coerce_values(items: Iterable[Any], kind: ScalarKind) -> list[Any]:
    """Convert a value vector to ``kind``.

    Boolean, integer and float values may carry their missing encoding;
    text values may not.
    """
    return coerce_vector(items, kind, allow_missing=kind.accepts_missing)


def coerce_lookup_keys(items: Iterable[Any], kind: ScalarKind) -> list[Any]:
    """Convert a key vector used for lookups.

    Missing elements become the kind's missing sentinel instead of failing;
    they never match a stored key.
    """
    return coerce_vector(items, kind, allow_missing=True)


def coerce_key(key: Any, kind: ScalarKind) -> Any:
    """Convert a single lookup key, also accepting a length-1 vector."""
    vector = as_vector(key)
    if len(vector) != 1:
        raise ValueError(f"Expected a single key, got {len(vector)}")
    return coerce_lookup_keys(vector, kind)[0]


def coerce_count(value: Any) -> int:
    """Convert a count argument such as a bucket count, accepting integral floats."""
    if isinstance(value, float):
        return _to_integer(value)
    return operator.index(value)


def materialize_scalar(value: Any, kind: ScalarKind) -> Any:
    """Map a stored or absent value to the external representation of ``kind``."""
    if is_missing(value):
        return kind.missing
    return value


def materialize(values: Iterable[Any], kind: ScalarKind) -> list[Any]:
    """Build a fresh external vector of ``kind`` from stored values."""
    return [materialize_scalar(value, kind) for value in values]
