"""Type aliases shared across kv-collection modules."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from typing import Any


Key = int | str
Comparator = Callable[[Any, Any], int]
SortStrategy = Callable[[dict[Key, Any], Comparator | None], Mapping[Key, Any] | Iterable[tuple[Key, Any]]]
Converter = Callable[[Any], Any]
FormatHandler = Callable[[Any, Mapping[str, Any]], Any]
