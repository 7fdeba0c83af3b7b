"""Process-wide display options."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator

# Default number of entries shown when a hashmap is printed
DEFAULT_MAX_PRINT = 6

_DEFAULTS: dict[str, Any] = {
    "max_print": DEFAULT_MAX_PRINT,
}

_options: dict[str, Any] = dict(_DEFAULTS)


def _validate(name: str, value: Any) -> Any:
    if name not in _DEFAULTS:
        raise KeyError(f"Unknown option '{name}'")
    if name == "max_print":
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            raise ValueError(f"Option 'max_print' must be a positive integer, got {value!r}")
    return value


def get_option(name: str) -> Any:
    """Get the current value of an option."""
    if name not in _options:
        raise KeyError(f"Unknown option '{name}'")
    return _options[name]


def set_option(name: str, value: Any) -> Any:
    """Set an option and return its previous value."""
    previous = get_option(name)
    _options[name] = _validate(name, value)
    return previous


def reset_options() -> None:
    """Restore every option to its default."""
    _options.clear()
    _options.update(_DEFAULTS)


@contextmanager
def option_context(**overrides: Any) -> Iterator[None]:
    """Temporarily override options inside a ``with`` block."""
    for name, value in overrides.items():
        _validate(name, value)
    saved = {name: get_option(name) for name in overrides}
    try:
        for name, value in overrides.items():
            _options[name] = value
        yield
    finally:
        _options.update(saved)
