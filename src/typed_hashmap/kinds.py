"""Scalar kinds supported by typed_hashmap keys and values."""

from __future__ import annotations

import math
import struct
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterable

from typed_hashmap.errors import UnsupportedKindError


class ScalarKind(Enum):
    """The closed set of scalar kinds a hashmap can bind to."""

    BOOLEAN = "boolean"
    INTEGER = "integer"
    FLOAT = "float"
    TEXT = "text"

    @property
    def python_type(self) -> type:
        """Return the Python type used to store values of this kind."""
        types = {
            ScalarKind.BOOLEAN: bool,
            ScalarKind.INTEGER: int,
            ScalarKind.FLOAT: float,
            ScalarKind.TEXT: str,
        }
        return types[self]

    @property
    def missing(self) -> Any:
        """Return the sentinel produced for an absent key of this value kind."""
        if self is ScalarKind.FLOAT:
            return math.nan
        return None

    @property
    def is_key_kind(self) -> bool:
        """Return whether this kind may be used for keys."""
        return self in KEY_KINDS

    @property
    def is_numeric(self) -> bool:
        """Return whether this kind sits on the boolean -> integer -> float chain."""
        return self in _NUMERIC_RANK

    @property
    def accepts_missing(self) -> bool:
        """Return whether a caller may store the missing encoding as a value."""
        return self is not ScalarKind.TEXT

    def embeds_into(self, target: ScalarKind) -> bool:
        """Check whether every value of this kind is representable in ``target``."""
        return self is target or target in EMBEDDINGS[self]


KEY_KINDS: tuple[ScalarKind, ...] = (ScalarKind.INTEGER, ScalarKind.FLOAT, ScalarKind.TEXT)
VALUE_KINDS: tuple[ScalarKind, ...] = (
    ScalarKind.BOOLEAN,
    ScalarKind.INTEGER,
    ScalarKind.FLOAT,
    ScalarKind.TEXT,
)

# Lossless embeddings (transitively closed): boolean -> integer -> float.
EMBEDDINGS: dict[ScalarKind, frozenset[ScalarKind]] = {
    ScalarKind.BOOLEAN: frozenset({ScalarKind.INTEGER, ScalarKind.FLOAT}),
    ScalarKind.INTEGER: frozenset({ScalarKind.FLOAT}),
    ScalarKind.FLOAT: frozenset(),
    ScalarKind.TEXT: frozenset(),
}

# Narrowings accepted only when every element survives the conversion exactly.
INTEGRAL_NARROWINGS: frozenset[tuple[ScalarKind, ScalarKind]] = frozenset(
    {(ScalarKind.FLOAT, ScalarKind.INTEGER)}
)

_NUMERIC_RANK = {ScalarKind.BOOLEAN: 0, ScalarKind.INTEGER: 1, ScalarKind.FLOAT: 2}

# Mapping from kind names (and common aliases) to ScalarKind values
KIND_NAMES: dict[str, ScalarKind] = {kind.value: kind for kind in ScalarKind}
KIND_NAMES.update(
    {
        "bool": ScalarKind.BOOLEAN,
        "logical": ScalarKind.BOOLEAN,
        "int": ScalarKind.INTEGER,
        "double": ScalarKind.FLOAT,
        "numeric": ScalarKind.FLOAT,
        "str": ScalarKind.TEXT,
        "string": ScalarKind.TEXT,
        "character": ScalarKind.TEXT,
    }
)

# Integers are stored as signed 64-bit values
INT64_MIN = -(1 << 63)
INT64_MAX = (1 << 63) - 1

MASK64 = (1 << 64) - 1

# 64-bit FNV-1a constants for text hashing
FNV1A_OFFSET_BASIS = 0xCBF29CE484222325
FNV1A_PRIME = 0x100000001B3

# FxHash multiplier for integer and float bit-pattern mixing
FXHASH_MULTIPLIER = 0x517CC1B727220A95


def parse_kind(name: str | ScalarKind) -> ScalarKind:
    """Resolve a kind name such as ``"text"`` or ``"numeric"`` to a ScalarKind."""
    if isinstance(name, ScalarKind):
        return name
    kind = KIND_NAMES.get(str(name).lower())
    if kind is None:
        raise UnsupportedKindError(f"Unknown scalar kind '{name}'")
    return kind


def is_missing(value: Any) -> bool:
    """Return whether ``value`` is a missing encoding (None or float NaN)."""
    if value is None:
        return True
    return isinstance(value, float) and math.isnan(value)


def kind_of(value: Any) -> ScalarKind | None:
    """Return the scalar kind of a single element, or None for a bare None.

    NaN is reported as FLOAT: it is the float kind's own missing encoding.
    """
    if value is None:
        return None
    # bool is a subclass of int, so it must be checked first
    if isinstance(value, bool):
        return ScalarKind.BOOLEAN
    if isinstance(value, int):
        return ScalarKind.INTEGER
    if isinstance(value, float):
        return ScalarKind.FLOAT
    if isinstance(value, str):
        return ScalarKind.TEXT
    raise UnsupportedKindError(f"Unsupported scalar type '{type(value).__name__}'")


def join_kinds(left: ScalarKind, right: ScalarKind) -> ScalarKind:
    """Return the narrowest kind both ``left`` and ``right`` embed into."""
    if left is right:
        return left
    if left.is_numeric and right.is_numeric:
        return left if _NUMERIC_RANK[left] > _NUMERIC_RANK[right] else right
    raise UnsupportedKindError(
        f"Vector mixes incompatible kinds '{left.value}' and '{right.value}'"
    )


def infer_kind(items: Iterable[Any]) -> ScalarKind | None:
    """Infer the kind of a vector, or None if it holds no non-None element."""
    result: ScalarKind | None = None
    for item in items:
        kind = kind_of(item)
        if kind is None:
            continue
        result = kind if result is None else join_kinds(result, kind)
    return result


def fxhash(word: int) -> int:
    """Mix a 64-bit word so that its high bits influence the low bits."""
    h = ((word & MASK64) * FXHASH_MULTIPLIER) & MASK64
    return h ^ (h >> 32)


def hash_integer(value: int) -> int:
    return fxhash(value)


def hash_float(value: float) -> int:
    # Adding 0.0 folds -0.0 onto 0.0 so that equal keys hash equally
    bits = struct.unpack("<Q", struct.pack("<d", value + 0.0))[0]
    return fxhash(bits)


def hash_text(value: str) -> int:
    """Hash the full UTF-8 content of a string with 64-bit FNV-1a."""
    h = FNV1A_OFFSET_BASIS
    for byte in value.encode("utf-8", "surrogatepass"):
        h ^= byte
        h = (h * FNV1A_PRIME) & MASK64
    return h


def _scalar_equals(left: Any, right: Any) -> bool:
    return left == right


@dataclass(frozen=True)
class KeyContract:
    """Hash and equality functions a key kind supplies to the table core."""

    kind: ScalarKind
    hash: Callable[[Any], int]
    equals: Callable[[Any, Any], bool]


KEY_CONTRACTS: dict[ScalarKind, KeyContract] = {
    ScalarKind.INTEGER: KeyContract(ScalarKind.INTEGER, hash_integer, _scalar_equals),
    ScalarKind.FLOAT: KeyContract(ScalarKind.FLOAT, hash_float, _scalar_equals),
    ScalarKind.TEXT: KeyContract(ScalarKind.TEXT, hash_text, _scalar_equals),
}


def key_contract(kind: ScalarKind) -> KeyContract:
    """Get the key contract for a kind, raising if the kind cannot hold keys."""
    contract = KEY_CONTRACTS.get(kind)
    if contract is None:
        raise UnsupportedKindError(f"Kind '{kind.value}' cannot be used for keys")
    return contract
