"""Recursive flattening of collections into plain lists and dicts."""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum, auto
from typing import TYPE_CHECKING, Any


if TYPE_CHECKING:
    from collections.abc import Iterable

    from kv_collection._types import Converter, Key


PRIMITIVE_TYPES = (type(None), bool, int, float, complex, str, bytes)
PLAIN_SEQUENCE_TYPES = (list, tuple)


class ValueKind(Enum):
    """Export category of a value, listed in precedence order."""

    SEQUENCE = auto()
    MAPPING = auto()
    PRIMITIVE = auto()
    HANDLED = auto()
    CONTAINER = auto()
    STRINGABLE = auto()
    OPAQUE = auto()


def classify(value: Any, handlers: Mapping[type, Converter], container_type: type) -> ValueKind:
    """Return the first category ``value`` belongs to.

    Parameters
    ----------
    value
        The value being exported.
    handlers
        Converters keyed by exact runtime type. Only consulted after plain
        containers and primitives have been ruled out.
    container_type
        The collection class doing the export. Its instances are recursed into
        as collections.

    Only exact ``list``, ``tuple`` and ``dict`` count as plain containers, so
    handlers also apply to their subclasses and to other mapping types.
    """
    if type(value) in PLAIN_SEQUENCE_TYPES:
        return ValueKind.SEQUENCE
    if type(value) is dict:
        return ValueKind.MAPPING
    if isinstance(value, PRIMITIVE_TYPES):
        return ValueKind.PRIMITIVE
    if type(value) in handlers:
        return ValueKind.HANDLED
    if isinstance(value, container_type):
        return ValueKind.CONTAINER
    if type(value).__str__ is not object.__str__:
        return ValueKind.STRINGABLE
    return ValueKind.OPAQUE


def iter_entries(data: Any) -> Iterable[tuple[Key, Any]]:
    """Yield ``(key, value)`` pairs of a mapping, or ``(index, value)`` pairs of a sequence."""
    if isinstance(data, Mapping):
        return list(data.items())
    return enumerate(data)


def shape(entries: dict[Key, Any]) -> list[Any] | dict[Key, Any]:
    """Return a list when keys are exactly ``0..n-1`` in order, else the dict itself."""
    if list(entries) == list(range(len(entries))):
        return list(entries.values())
    return entries


def export_value(value: Any, handlers: Mapping[type, Converter], container_type: type) -> Any:
    """Convert one value according to its ``ValueKind``."""
    kind = classify(value, handlers, container_type)
    if kind is ValueKind.SEQUENCE:
        converted = [export_value(item, handlers, container_type) for item in value]
        return tuple(converted) if isinstance(value, tuple) else converted
    if kind is ValueKind.MAPPING:
        return {key: export_value(item, handlers, container_type) for key, item in value.items()}
    if kind is ValueKind.HANDLED:
        return handlers[type(value)](value)
    if kind is ValueKind.CONTAINER:
        return shape(export_entries(value, handlers, container_type))
    if kind is ValueKind.STRINGABLE:
        return str(value)
    return value


def export_entries(data: Any, handlers: Mapping[type, Converter], container_type: type) -> dict[Key, Any]:
    return {key: export_value(value, handlers, container_type) for key, value in iter_entries(data)}


def to_array(data: Any, options: Mapping[str, Any] | None, container_type: type) -> list[Any] | dict[Key, Any]:
    """Flatten ``data`` into plain lists and dicts.

    Options
    -------
    key
        Keep keys at the top level (default ``True``). Collections with keys
        ``0..n-1`` still come out as lists. When ``False`` the top level is
        always the list of converted values.
    handlers
        Mapping of exact type to a one-argument converter.
    """
    settings: dict[str, Any] = {"key": True, "handlers": {}} | dict(options or {})
    entries = export_entries(data, settings["handlers"], container_type)
    if not settings["key"]:
        return list(entries.values())
    if isinstance(data, container_type):
        return shape(entries)
    if isinstance(data, Mapping):
        return entries
    return list(entries.values())
