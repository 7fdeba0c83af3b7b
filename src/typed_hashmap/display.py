"""Text rendering of hashmaps and result vectors."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from typed_hashmap.config import get_option
from typed_hashmap.kinds import is_missing

if TYPE_CHECKING:
    from typed_hashmap.hashmap import Hashmap


def format_scalar(value: Any) -> str:
    """Format one scalar the way it appears inside ``[ ]`` in a hashmap listing."""
    if is_missing(value):
        return "NA"
    elif isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    elif isinstance(value, float):
        return f"{value:.6g}"
    return str(value)


def format_element(value: Any) -> str:
    """Format one scalar as a literal: strings are quoted."""
    if isinstance(value, str):
        escaped = value.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    return format_scalar(value)


def format_vector(values: list[Any], max_items: int | None = None) -> str:
    """Format a result vector such as ``[10, 2, NA]``.

    Args:
        values: The elements to format
        max_items: Maximum number of elements to show before eliding
    """
    formatted = []
    for i, value in enumerate(values):
        if max_items is not None and i >= max_items:
            formatted.append(f"...+{len(values) - max_items} more")
            break
        formatted.append(format_element(value))
    return "[" + ", ".join(formatted) + "]"


def format_mapping(data: dict[Any, Any]) -> str:
    """Format a key -> value mapping such as the result of ``data()``."""
    pairs = [f"{format_element(k)}: {format_element(v)}" for k, v in data.items()]
    return "{" + ", ".join(pairs) + "}"


def format_hashmap(hashmap: Hashmap, max_print: int | None = None) -> str:
    """Render a hashmap as a header plus one ``[key] => [value]`` line per entry.

    At most ``max_print`` entries are listed (the ``max_print`` option when
    not given); a ``[...] => [...]`` line marks the rest.
    """
    if max_print is None:
        max_print = get_option("max_print")

    left = f"({hashmap.key_kind.value})"
    lines = [f"{left} => ({hashmap.value_kind.value})"]
    width = len(left)

    keys = hashmap.all_keys()
    values = hashmap.all_values()
    for key, value in list(zip(keys, values))[:max_print]:
        lines.append(f"{'[' + format_scalar(key) + ']':>{width}} => [{format_scalar(value)}]")
    if hashmap.size() > max_print:
        lines.append(f"{'[...]':>{width}} => [...]")

    return "\n".join(lines)


def format_value(value: Any) -> str:
    """Format any console result for display."""
    from typed_hashmap.hashmap import Hashmap

    if isinstance(value, Hashmap):
        return repr(value)
    elif isinstance(value, list):
        return format_vector(value)
    elif isinstance(value, dict):
        return format_mapping(value)
    return format_element(value)
