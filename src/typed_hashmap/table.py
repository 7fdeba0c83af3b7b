"""Open-addressing hash table storage for typed scalar data."""

from __future__ import annotations

from typing import Any, Iterator, Sequence

from typed_hashmap.kinds import ScalarKind, key_contract


def _next_power_of_two(n: int) -> int:
    """Return the smallest power of two >= n (and >= 1)."""
    if n <= 1:
        return 1
    return 1 << (n - 1).bit_length()


class HashTable:
    """Hash table for a single (key kind, value kind) pair.

    Slots are kept in three parallel lists: the cached key hash (None marks
    an empty slot), the key and the value. Collisions are resolved with
    linear probing over a power-of-two bucket array. Entries are never
    removed individually, so the table needs no tombstones.

    Keys and values must already be coerced to the bound kinds; the
    table only relies on the key kind's hash/equality contract.
    """

    INITIAL_BUCKETS = 16
    GROWTH_FACTOR = 2
    MAX_LOAD_FACTOR = 0.75

    def __init__(
        self,
        key_kind: ScalarKind,
        value_kind: ScalarKind,
        bucket_count: int = INITIAL_BUCKETS,
    ) -> None:
        self.key_kind = key_kind
        self.value_kind = value_kind
        self._contract = key_contract(key_kind)
        self._count = 0
        self._allocate(_next_power_of_two(bucket_count))

    def _allocate(self, bucket_count: int) -> None:
        """Replace the slot arrays with empty ones of the given size."""
        self._hashes: list[int | None] = [None] * bucket_count
        self._keys: list[Any] = [None] * bucket_count
        self._values: list[Any] = [None] * bucket_count
        self._mask = bucket_count - 1

    def _min_buckets_for(self, count: int) -> int:
        """Return the smallest bucket count that holds ``count`` entries under the load limit."""
        buckets = 1
        while count > buckets * self.MAX_LOAD_FACTOR:
            buckets *= self.GROWTH_FACTOR
        return buckets

    def _locate(self, key: Any, key_hash: int) -> tuple[int, bool]:
        """Find the slot for ``key``.

        Returns (slot, found). When the key is absent, slot is the first
        empty slot along its run of occupied slots.
        """
        hashes = self._hashes
        keys = self._keys
        equals = self._contract.equals
        slot = key_hash & self._mask
        while True:
            stored = hashes[slot]
            if stored is None:
                return slot, False
            if stored == key_hash and equals(keys[slot], key):
                return slot, True
            slot = (slot + 1) & self._mask

    def _resize(self, bucket_count: int) -> None:
        """Move every entry into a fresh bucket array of ``bucket_count`` slots."""
        old_entries = list(zip(self._hashes, self._keys, self._values))
        self._allocate(bucket_count)
        for key_hash, key, value in old_entries:
            if key_hash is None:
                continue
            slot, _ = self._locate(key, key_hash)
            self._hashes[slot] = key_hash
            self._keys[slot] = key
            self._values[slot] = value

    def _upsert(self, key: Any, value: Any) -> None:
        key_hash = self._contract.hash(key)
        slot, found = self._locate(key, key_hash)
        if found:
            self._values[slot] = value
            return

        if self._count + 1 > len(self._hashes) * self.MAX_LOAD_FACTOR:
            self._resize(len(self._hashes) * self.GROWTH_FACTOR)
            slot, _ = self._locate(key, key_hash)

        self._hashes[slot] = key_hash
        self._keys[slot] = key
        self._values[slot] = value
        self._count += 1

    @property
    def bucket_count(self) -> int:
        """Return the number of buckets currently allocated."""
        return len(self._hashes)

    @property
    def load_factor(self) -> float:
        """Return entries per bucket."""
        return self._count / len(self._hashes)

    def size(self) -> int:
        """Return the number of entries in the table."""
        return self._count

    def empty(self) -> bool:
        return self._count == 0

    def clear(self) -> None:
        """Remove every entry, keeping the current bucket count."""
        self._allocate(len(self._hashes))
        self._count = 0

    def set_values(self, keys: Sequence[Any], values: Sequence[Any]) -> None:
        """Insert or overwrite each (keys[i], values[i]) pair in order.

        When a key repeats within one call the later position wins.
        """
        for key, value in zip(keys, values):
            self._upsert(key, value)

    def find_values(self, keys: Sequence[Any]) -> list[Any]:
        """Look up each key, yielding the value kind's missing sentinel for absent keys."""
        missing = self.value_kind.missing
        result = []
        for key in keys:
            slot, found = self._locate(key, self._contract.hash(key))
            result.append(self._values[slot] if found else missing)
        return result

    def has_key(self, key: Any) -> bool:
        _, found = self._locate(key, self._contract.hash(key))
        return found

    def items(self) -> Iterator[tuple[Any, Any]]:
        """Iterate over (key, value) pairs in slot order."""
        for key_hash, key, value in zip(self._hashes, self._keys, self._values):
            if key_hash is not None:
                yield key, value

    def all_keys(self) -> list[Any]:
        return [key for key, _ in self.items()]

    def all_values(self) -> list[Any]:
        return [value for _, value in self.items()]

    def data(self) -> dict[Any, Any]:
        """Return every entry as an insertion-ordered dict following slot order."""
        return dict(self.items())

    def rehash(self, bucket_count: int) -> None:
        """Resize the bucket array to at least ``bucket_count`` buckets.

        The result is also large enough to keep the current entries under
        the load limit. Entries are preserved exactly.
        """
        if bucket_count < 0:
            raise ValueError(f"Bucket count must be non-negative, got {bucket_count}")
        target = max(_next_power_of_two(bucket_count), self._min_buckets_for(self._count))
        self._resize(target)
