"""Tests for scalar kinds, inference and key hashing."""

import math

import pytest

from typed_hashmap.errors import UnsupportedKindError
from typed_hashmap.kinds import (
    FNV1A_OFFSET_BASIS,
    KEY_KINDS,
    MASK64,
    VALUE_KINDS,
    ScalarKind,
    hash_float,
    hash_integer,
    hash_text,
    infer_kind,
    is_missing,
    join_kinds,
    key_contract,
    kind_of,
    parse_kind,
)


class TestScalarKind:
    """Tests for the ScalarKind enum."""

    def test_python_types(self):
        """Test the Python type backing each kind."""
        assert ScalarKind.BOOLEAN.python_type is bool
        assert ScalarKind.INTEGER.python_type is int
        assert ScalarKind.FLOAT.python_type is float
        assert ScalarKind.TEXT.python_type is str

    def test_missing_sentinels(self):
        """Float uses NaN as its missing sentinel, the others use None."""
        assert math.isnan(ScalarKind.FLOAT.missing)
        assert ScalarKind.BOOLEAN.missing is None
        assert ScalarKind.INTEGER.missing is None
        assert ScalarKind.TEXT.missing is None

    def test_key_and_value_kinds(self):
        """Test the closed sets of key and value kinds."""
        assert len(KEY_KINDS) == 3
        assert len(VALUE_KINDS) == 4
        assert ScalarKind.BOOLEAN.is_key_kind is False
        assert all(kind.is_key_kind for kind in KEY_KINDS)

    def test_accepts_missing(self):
        """Text values cannot store the missing encoding."""
        assert ScalarKind.TEXT.accepts_missing is False
        assert ScalarKind.INTEGER.accepts_missing is True

    def test_embeddings(self):
        """Test the boolean -> integer -> float embedding chain."""
        assert ScalarKind.BOOLEAN.embeds_into(ScalarKind.INTEGER)
        assert ScalarKind.BOOLEAN.embeds_into(ScalarKind.FLOAT)
        assert ScalarKind.INTEGER.embeds_into(ScalarKind.FLOAT)
        assert ScalarKind.TEXT.embeds_into(ScalarKind.TEXT)
        assert not ScalarKind.FLOAT.embeds_into(ScalarKind.INTEGER)
        assert not ScalarKind.INTEGER.embeds_into(ScalarKind.BOOLEAN)
        assert not ScalarKind.TEXT.embeds_into(ScalarKind.FLOAT)
        assert not ScalarKind.INTEGER.embeds_into(ScalarKind.TEXT)


class TestParseKind:
    """Tests for kind name resolution."""

    def test_canonical_names(self):
        """Every kind resolves from its own name."""
        for kind in ScalarKind:
            assert parse_kind(kind.value) is kind

    def test_aliases(self):
        """R-style and short aliases resolve case-insensitively."""
        assert parse_kind("numeric") is ScalarKind.FLOAT
        assert parse_kind("character") is ScalarKind.TEXT
        assert parse_kind("logical") is ScalarKind.BOOLEAN
        assert parse_kind("INT") is ScalarKind.INTEGER

    def test_passthrough(self):
        """A ScalarKind is returned unchanged."""
        assert parse_kind(ScalarKind.TEXT) is ScalarKind.TEXT

    def test_unknown(self):
        """An unknown kind name is rejected."""
        with pytest.raises(UnsupportedKindError):
            parse_kind("complex")


class TestInference:
    """Tests for element and vector kind inference."""

    def test_kind_of(self):
        """Each Python scalar maps to its kind; None has none."""
        assert kind_of(True) is ScalarKind.BOOLEAN
        assert kind_of(3) is ScalarKind.INTEGER
        assert kind_of(3.0) is ScalarKind.FLOAT
        assert kind_of(float("nan")) is ScalarKind.FLOAT
        assert kind_of("x") is ScalarKind.TEXT
        assert kind_of(None) is None

    def test_kind_of_unsupported(self):
        """Bytes and complex numbers have no kind."""
        with pytest.raises(UnsupportedKindError):
            kind_of(b"bytes")
        with pytest.raises(UnsupportedKindError):
            kind_of(1 + 2j)

    def test_infer_homogeneous(self):
        """A uniform vector infers its element kind."""
        assert infer_kind(["a", "b"]) is ScalarKind.TEXT
        assert infer_kind([1, 2, 3]) is ScalarKind.INTEGER

    def test_infer_numeric_promotion(self):
        """Mixed numeric vectors take the widest kind."""
        assert infer_kind([1, 2.5]) is ScalarKind.FLOAT
        assert infer_kind([True, 2]) is ScalarKind.INTEGER
        assert infer_kind([False, 2, 0.5]) is ScalarKind.FLOAT

    def test_infer_skips_none(self):
        """None elements do not take part in inference."""
        assert infer_kind([None, "a"]) is ScalarKind.TEXT
        assert infer_kind([None, None]) is None
        assert infer_kind([]) is None

    def test_infer_mixed_text(self):
        """Text mixed with numbers cannot be inferred."""
        with pytest.raises(UnsupportedKindError):
            infer_kind(["a", 1])

    def test_join_kinds(self):
        """Numeric kinds join to the wider kind; text joins only with text."""
        assert join_kinds(ScalarKind.INTEGER, ScalarKind.FLOAT) is ScalarKind.FLOAT
        assert join_kinds(ScalarKind.TEXT, ScalarKind.TEXT) is ScalarKind.TEXT
        with pytest.raises(UnsupportedKindError):
            join_kinds(ScalarKind.TEXT, ScalarKind.BOOLEAN)

    def test_is_missing(self):
        """None and NaN are missing; falsy values are not."""
        assert is_missing(None)
        assert is_missing(float("nan"))
        assert not is_missing(0)
        assert not is_missing("")
        assert not is_missing(False)


class TestHashing:
    """Tests for the key hash functions."""

    def test_fnv1a_known_values(self):
        """Test 64-bit FNV-1a against its published test vectors."""
        assert hash_text("") == FNV1A_OFFSET_BASIS
        assert hash_text("a") == 0xAF63DC4C8601EC8C

    def test_text_hash_uses_full_content(self):
        """Strings sharing a long prefix still hash differently."""
        prefix = "x" * 200
        assert hash_text(prefix + "a") != hash_text(prefix + "b")

    def test_text_hash_non_ascii(self):
        """Text is hashed over its UTF-8 bytes."""
        assert hash_text("café") != hash_text("cafe")

    def test_float_zero_signs_hash_equally(self):
        """0.0 and -0.0 share a hash."""
        assert hash_float(0.0) == hash_float(-0.0)

    def test_float_hash_distinguishes_last_bit(self):
        """Floats are hashed by their exact bit pattern, not by tolerance."""
        a = 0.1 + 0.2
        b = 0.3
        assert a != b
        assert hash_float(a) != hash_float(b)

    def test_hashes_fit_in_64_bits(self):
        """Every hash is an unsigned 64-bit value."""
        for value in (0, 1, -1, 2**62, -(2**63)):
            h = hash_integer(value)
            assert 0 <= h <= MASK64
        assert 0 <= hash_float(-1.5) <= MASK64

    def test_integer_hash_is_injective(self):
        """Distinct integers never share a hash."""
        hashes = {hash_integer(i << 20) for i in range(256)}
        assert len(hashes) == 256


class TestKeyContract:
    """Tests for key contracts."""

    def test_contracts_for_key_kinds(self):
        """Each key kind has a contract that compares its own values."""
        for kind in KEY_KINDS:
            contract = key_contract(kind)
            assert contract.kind is kind
            assert contract.equals(contract.kind.python_type(1), contract.kind.python_type(1))

    def test_boolean_has_no_key_contract(self):
        """Boolean has no key contract."""
        with pytest.raises(UnsupportedKindError):
            key_contract(ScalarKind.BOOLEAN)
