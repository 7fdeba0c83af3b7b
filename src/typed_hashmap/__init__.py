"""Typed Hashmap - A vectorized hash map over a closed set of scalar kinds."""

from typed_hashmap.config import get_option, option_context, reset_options, set_option
from typed_hashmap.display import format_hashmap
from typed_hashmap.errors import (
    CoercionError,
    HandleReleasedError,
    HashmapError,
    LengthMismatchWarning,
    UnsupportedKindError,
)
from typed_hashmap.hashmap import Binding, Hashmap
from typed_hashmap.kinds import KEY_KINDS, VALUE_KINDS, ScalarKind
from typed_hashmap.table import HashTable

__all__ = [
    # Main API
    "Hashmap",
    "Binding",
    "format_hashmap",
    # Storage
    "HashTable",
    # Kinds
    "ScalarKind",
    "KEY_KINDS",
    "VALUE_KINDS",
    # Options
    "get_option",
    "set_option",
    "reset_options",
    "option_context",
    # Errors
    "HashmapError",
    "UnsupportedKindError",
    "CoercionError",
    "HandleReleasedError",
    "LengthMismatchWarning",
]

__version__ = "0.1.0"
