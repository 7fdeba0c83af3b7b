"""Tests for the open-addressing hash table core."""

import math

import pytest

from typed_hashmap.errors import UnsupportedKindError
from typed_hashmap.kinds import KeyContract, ScalarKind
from typed_hashmap.table import HashTable, _next_power_of_two


def make_table(key_kind=ScalarKind.TEXT, value_kind=ScalarKind.INTEGER, **kwargs):
    return HashTable(key_kind, value_kind, **kwargs)


class TestNextPowerOfTwo:
    """Tests for bucket count rounding."""

    def test_values(self):
        """Bucket counts round up to the next power of two."""
        assert _next_power_of_two(0) == 1
        assert _next_power_of_two(1) == 1
        assert _next_power_of_two(2) == 2
        assert _next_power_of_two(3) == 4
        assert _next_power_of_two(16) == 16
        assert _next_power_of_two(17) == 32


class TestHashTableBasics:
    """Tests for insert, lookup and enumeration."""

    def test_new_table_is_empty(self):
        """A new table has no entries and the initial bucket count."""
        table = make_table()
        assert table.size() == 0
        assert table.empty()
        assert table.bucket_count == HashTable.INITIAL_BUCKETS
        assert table.all_keys() == []
        assert table.data() == {}

    def test_boolean_keys_rejected(self):
        """Boolean is not a key kind."""
        with pytest.raises(UnsupportedKindError):
            HashTable(ScalarKind.BOOLEAN, ScalarKind.INTEGER)

    def test_set_and_find(self):
        """Stored values are found in lookup order."""
        table = make_table()
        table.set_values(["a", "b", "c"], [1, 2, 3])
        assert table.size() == 3
        assert table.find_values(["c", "a", "b"]) == [3, 1, 2]

    def test_overwrite_keeps_size(self):
        """Overwriting a key replaces its value without adding an entry."""
        table = make_table()
        table.set_values(["a"], [1])
        table.set_values(["a"], [5])
        assert table.size() == 1
        assert table.find_values(["a"]) == [5]

    def test_duplicate_in_one_call_later_wins(self):
        """The last occurrence of a key in one batch wins."""
        table = make_table()
        table.set_values(["a", "a"], [1, 2])
        assert table.data() == {"a": 2}

    def test_missing_lookup(self):
        """Absent keys yield the missing sentinel."""
        table = make_table()
        table.set_values(["a"], [1])
        assert table.find_values(["zzz"]) == [None]
        assert table.has_key("a")
        assert not table.has_key("zzz")

    def test_missing_float_value(self):
        """Absent keys yield NaN for float values."""
        table = make_table(value_kind=ScalarKind.FLOAT)
        (value,) = table.find_values(["nope"])
        assert math.isnan(value)

    def test_duplicate_lookups(self):
        """A key looked up twice yields its value twice."""
        table = make_table()
        table.set_values(["a"], [1])
        assert table.find_values(["a", "a", "b"]) == [1, 1, None]

    def test_empty_lookup(self):
        """Looking up no keys yields an empty list."""
        assert make_table().find_values([]) == []

    def test_keys_and_values_aligned(self):
        """all_keys, all_values and data enumerate in the same order."""
        table = make_table()
        table.set_values([f"k{i}" for i in range(20)], list(range(20)))
        keys = table.all_keys()
        values = table.all_values()
        assert sorted(keys) == sorted(f"k{i}" for i in range(20))
        for key, value in zip(keys, values):
            assert key == f"k{value}"
        assert list(table.data().items()) == list(zip(keys, values))

    def test_float_zero_is_one_key(self):
        """0.0 and -0.0 address the same entry."""
        table = make_table(key_kind=ScalarKind.FLOAT)
        table.set_values([0.0], [1])
        table.set_values([-0.0], [2])
        assert table.size() == 1
        assert table.find_values([0.0]) == [2]

    def test_float_keys_compare_exactly(self):
        """Float keys match only on exact equality."""
        table = make_table(key_kind=ScalarKind.FLOAT)
        table.set_values([0.1 + 0.2], [1])
        assert table.find_values([0.3]) == [None]

    def test_integer_keys(self):
        """Integer keys at the 64-bit bounds round-trip."""
        table = make_table(key_kind=ScalarKind.INTEGER, value_kind=ScalarKind.TEXT)
        keys = [-(2**63), -1, 0, 1, 2**63 - 1]
        table.set_values(keys, ["min", "neg", "zero", "one", "max"])
        assert table.find_values(keys) == ["min", "neg", "zero", "one", "max"]


class TestHashTableGrowth:
    """Tests for automatic growth, clear and rehash."""

    def test_grows_past_load_factor(self):
        """The table doubles once the load factor would exceed 0.75."""
        table = make_table(key_kind=ScalarKind.INTEGER)
        table.set_values(list(range(12)), list(range(12)))
        assert table.bucket_count == 16
        table.set_values([12], [12])
        assert table.bucket_count == 32
        assert table.find_values(list(range(13))) == list(range(13))

    def test_load_factor_bounded(self):
        """The load factor stays bounded through many single inserts."""
        table = make_table(key_kind=ScalarKind.INTEGER)
        for i in range(1000):
            table.set_values([i], [i])
            assert table.load_factor <= HashTable.MAX_LOAD_FACTOR
        assert table.size() == 1000
        assert table.find_values([0, 500, 999]) == [0, 500, 999]

    def test_clear_keeps_bucket_count(self):
        """clear drops every entry but keeps the bucket array size."""
        table = make_table(key_kind=ScalarKind.INTEGER)
        table.set_values(list(range(100)), list(range(100)))
        buckets = table.bucket_count
        table.clear()
        assert table.size() == 0
        assert table.empty()
        assert table.bucket_count == buckets
        assert table.find_values([1]) == [None]
        table.set_values([1], [1])
        assert table.find_values([1]) == [1]

    def test_rehash_grows(self):
        """rehash to a larger count keeps every entry."""
        table = make_table()
        table.set_values(["a", "b"], [1, 2])
        before = table.data()
        table.rehash(100)
        assert table.bucket_count == 128
        assert table.data() == before

    def test_rehash_never_below_entry_count(self):
        """rehash never shrinks below what the entries require."""
        table = make_table(key_kind=ScalarKind.INTEGER)
        table.set_values(list(range(13)), list(range(13)))
        table.rehash(1)
        assert table.bucket_count == 32
        assert table.size() == 13
        assert table.find_values(list(range(13))) == list(range(13))

    def test_rehash_empty_to_zero(self):
        """An empty table can shrink to one bucket and grow again."""
        table = make_table()
        table.rehash(0)
        assert table.bucket_count == 1
        table.set_values(["a", "b", "c"], [1, 2, 3])
        assert table.find_values(["a", "b", "c"]) == [1, 2, 3]
        assert table.load_factor <= HashTable.MAX_LOAD_FACTOR

    def test_rehash_negative(self):
        """A negative bucket count is rejected."""
        with pytest.raises(ValueError):
            make_table().rehash(-1)

    def test_initial_bucket_count_rounded(self):
        """An explicit initial bucket count is rounded up."""
        assert make_table(bucket_count=20).bucket_count == 32


class TestHashTableCollisions:
    """Tests for probing when every key shares a hash."""

    def test_all_keys_colliding(self):
        """Lookups and overwrites work when every key shares a hash."""
        table = make_table(key_kind=ScalarKind.INTEGER)
        table._contract = KeyContract(ScalarKind.INTEGER, lambda key: 0, lambda a, b: a == b)
        table.set_values(list(range(50)), [i * 10 for i in range(50)])
        assert table.size() == 50
        assert table.find_values(list(range(50))) == [i * 10 for i in range(50)]
        assert table.find_values([50]) == [None]
        table.set_values([25], [-1])
        assert table.size() == 50
        assert table.find_values([25]) == [-1]

    def test_similar_text_keys(self):
        """Keys sharing long prefixes stay distinct."""
        table = make_table()
        keys = ["key" + "x" * i for i in range(100)]
        table.set_values(keys, list(range(100)))
        assert table.find_values(keys) == list(range(100))
