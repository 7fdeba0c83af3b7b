"""The Hashmap handle: binds a key/value kind pair once and routes every call to it."""

from __future__ import annotations

import warnings
from collections.abc import Iterable
from enum import Enum
from typing import Any, Iterator

from typed_hashmap.coercion import (
    as_vector,
    coerce_count,
    coerce_key,
    coerce_keys,
    coerce_lookup_keys,
    coerce_values,
    materialize,
)
from typed_hashmap.display import format_hashmap
from typed_hashmap.errors import (
    CoercionError,
    HandleReleasedError,
    LengthMismatchWarning,
    UnsupportedKindError,
)
from typed_hashmap.kinds import ScalarKind, infer_kind, is_missing, parse_kind
from typed_hashmap.table import HashTable


class Binding(Enum):
    """Every supported (key kind, value kind) pair."""

    INTEGER_BOOLEAN = (ScalarKind.INTEGER, ScalarKind.BOOLEAN)
    INTEGER_INTEGER = (ScalarKind.INTEGER, ScalarKind.INTEGER)
    INTEGER_FLOAT = (ScalarKind.INTEGER, ScalarKind.FLOAT)
    INTEGER_TEXT = (ScalarKind.INTEGER, ScalarKind.TEXT)
    FLOAT_BOOLEAN = (ScalarKind.FLOAT, ScalarKind.BOOLEAN)
    FLOAT_INTEGER = (ScalarKind.FLOAT, ScalarKind.INTEGER)
    FLOAT_FLOAT = (ScalarKind.FLOAT, ScalarKind.FLOAT)
    FLOAT_TEXT = (ScalarKind.FLOAT, ScalarKind.TEXT)
    TEXT_BOOLEAN = (ScalarKind.TEXT, ScalarKind.BOOLEAN)
    TEXT_INTEGER = (ScalarKind.TEXT, ScalarKind.INTEGER)
    TEXT_FLOAT = (ScalarKind.TEXT, ScalarKind.FLOAT)
    TEXT_TEXT = (ScalarKind.TEXT, ScalarKind.TEXT)

    @property
    def key_kind(self) -> ScalarKind:
        return self.value[0]

    @property
    def value_kind(self) -> ScalarKind:
        return self.value[1]

    @classmethod
    def of(cls, key_kind: ScalarKind, value_kind: ScalarKind) -> Binding:
        """Get the binding for a kind pair, raising if the pair is unsupported."""
        if not key_kind.is_key_kind:
            raise UnsupportedKindError(f"Kind '{key_kind.value}' cannot be used for keys")
        return cls((key_kind, value_kind))

    def new_table(self, bucket_count: int = HashTable.INITIAL_BUCKETS) -> HashTable:
        """Create an empty table for this binding."""
        return HashTable(self.key_kind, self.value_kind, bucket_count)


# Methods reachable through Hashmap.invoke(), by exposed name
EXPOSED_METHODS: dict[str, str] = {
    "size": "size",
    "empty": "empty",
    "clear": "clear",
    "set_values": "set_values",
    "[[<-": "set_values",
    "find_values": "find_values",
    "[[": "find_values",
    "has_key": "has_key",
    "all_keys": "all_keys",
    "all_values": "all_values",
    "data": "data",
    "rehash": "rehash",
    "bucket_count": "bucket_count",
}


def _bind_kind(vector: list[Any], explicit: str | ScalarKind | None, role: str) -> ScalarKind:
    """Pick the kind a key or value vector binds to."""
    if explicit is not None:
        return parse_kind(explicit)
    kind = infer_kind(vector)
    if kind is None:
        raise UnsupportedKindError(
            f"Cannot infer the kind of an empty or all-missing {role} vector; pass {role}_kind"
        )
    return kind


def _truncate(keys: list[Any], values: list[Any]) -> tuple[list[Any], list[Any]]:
    """Cut keys and values to a common length, warning when they differ."""
    if len(keys) == len(values):
        return keys, values
    n = min(len(keys), len(values))
    warnings.warn(
        f"{len(keys)} keys but {len(values)} values; using the first {n} of each",
        LengthMismatchWarning,
        stacklevel=3,
    )
    return keys[:n], values[:n]


class Hashmap:
    """A hash map over one of the supported key/value kind pairs.

    The pair is inferred from the first key and value vectors and can never
    change. All operations are vectorized: they take and return lists, and
    a scalar argument is treated as a length-1 vector.

    >>> h = Hashmap(["A", "B"], [1, 2])
    >>> h.set_values(["A"], [10])
    >>> h.find_values(["A", "B", "C"])
    [10, 2, None]
    """

    def __init__(
        self,
        keys: Any,
        values: Any,
        *,
        key_kind: str | ScalarKind | None = None,
        value_kind: str | ScalarKind | None = None,
    ) -> None:
        key_vector = as_vector(keys)
        value_vector = as_vector(values)
        self._binding = Binding.of(
            _bind_kind(key_vector, key_kind, "key"),
            _bind_kind(value_vector, value_kind, "value"),
        )
        key_vector, value_vector = _truncate(key_vector, value_vector)

        table = self._binding.new_table()
        table.set_values(
            coerce_keys(key_vector, self._binding.key_kind),
            coerce_values(value_vector, self._binding.value_kind),
        )
        self._table: HashTable | None = table

    def _require_table(self) -> HashTable:
        if self._table is None:
            raise HandleReleasedError("Hashmap has been closed")
        return self._table

    @property
    def binding(self) -> Binding:
        return self._binding

    @property
    def key_kind(self) -> ScalarKind:
        return self._binding.key_kind

    @property
    def value_kind(self) -> ScalarKind:
        return self._binding.value_kind

    @property
    def closed(self) -> bool:
        return self._table is None

    def size(self) -> int:
        """Return the number of entries."""
        return self._require_table().size()

    def empty(self) -> bool:
        return self._require_table().empty()

    def clear(self) -> None:
        """Remove all entries. The key and value kinds stay bound."""
        self._require_table().clear()

    def set_values(self, keys: Any, values: Any) -> None:
        """Insert or overwrite entries, position by position.

        Both vectors are converted before the table is touched, so a
        CoercionError leaves the hashmap unchanged. Vectors of different
        lengths are truncated to the shorter one with a LengthMismatchWarning.
        """
        table = self._require_table()
        key_vector = coerce_keys(keys, self.key_kind)
        value_vector = coerce_values(values, self.value_kind)
        key_vector, value_vector = _truncate(key_vector, value_vector)
        table.set_values(key_vector, value_vector)

    def find_values(self, keys: Any) -> list[Any]:
        """Return the value for each key, or the value kind's missing sentinel.

        A missing key (None, or NaN for float keys) is never present, so its
        position also gets the missing sentinel.
        """
        table = self._require_table()
        lookup = coerce_lookup_keys(keys, self.key_kind)
        found = iter(table.find_values([key for key in lookup if not is_missing(key)]))
        missing = self.value_kind.missing
        return materialize(
            [missing if is_missing(key) else next(found) for key in lookup], self.value_kind
        )

    def has_key(self, key: Any) -> bool:
        """Check whether a single key is present."""
        table = self._require_table()
        key = coerce_key(key, self.key_kind)
        if is_missing(key):
            return False
        return table.has_key(key)

    def all_keys(self) -> list[Any]:
        return self._require_table().all_keys()

    def all_values(self) -> list[Any]:
        return materialize(self._require_table().all_values(), self.value_kind)

    def data(self) -> dict[Any, Any]:
        """Return all entries as a dict, in the same order as all_keys()."""
        table = self._require_table()
        return dict(zip(table.all_keys(), materialize(table.all_values(), self.value_kind)))

    def rehash(self, bucket_count: int) -> None:
        """Resize to at least ``bucket_count`` buckets. Entries are untouched."""
        self._require_table().rehash(coerce_count(bucket_count))

    def bucket_count(self) -> int:
        return self._require_table().bucket_count

    def invoke(self, name: str, *args: Any) -> Any:
        """Call an exposed method by name, e.g. ``h.invoke("[[", ["A"])``."""
        method_name = EXPOSED_METHODS.get(name)
        if method_name is None:
            raise AttributeError(f"Hashmap has no method '{name}'")
        return getattr(self, method_name)(*args)

    def close(self) -> None:
        """Release the underlying table."""
        self._table = None

    def __enter__(self) -> Hashmap:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def __copy__(self) -> Hashmap:
        raise TypeError("Hashmap handles cannot be copied")

    def __deepcopy__(self, memo: dict[int, Any]) -> Hashmap:
        raise TypeError("Hashmap handles cannot be copied")

    def __len__(self) -> int:
        return self.size()

    def __contains__(self, key: Any) -> bool:
        try:
            return self.has_key(key)
        except CoercionError:
            return False

    def __iter__(self) -> Iterator[Any]:
        return iter(self.all_keys())

    def __getitem__(self, keys: Any) -> Any:
        if isinstance(keys, (str, bytes)) or not isinstance(keys, Iterable):
            return self.find_values([keys])[0]
        return self.find_values(keys)

    def __setitem__(self, keys: Any, values: Any) -> None:
        self.set_values(keys, values)

    def __repr__(self) -> str:
        if self._table is None:
            return f"<Hashmap ({self.key_kind.value}) => ({self.value_kind.value}), closed>"
        return format_hashmap(self)
