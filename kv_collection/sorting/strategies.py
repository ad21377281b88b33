"""Named sort strategies used by ``Collection.sort``.

A strategy receives a copy of the collection entries and an optional
two-argument comparator, and returns the reordered entries as a mapping or
as an iterable of ``(key, value)`` pairs.
"""

from __future__ import annotations

import locale
import logging
import re
from functools import cmp_to_key
from operator import itemgetter
from typing import TYPE_CHECKING, Any

from kv_collection.exceptions import InvalidSortStrategy


if TYPE_CHECKING:
    from collections.abc import Callable

    from kv_collection._types import Comparator, Key, SortStrategy


logger = logging.getLogger(__name__)

_DIGITS = re.compile(r"(\d+)")
_INVALID_STRATEGY_MSG = "The passed parameter is not a valid sort function."


def scalar_key(value: Any) -> tuple[int, Any]:
    """Rank numbers before strings before anything else, so mixed keys and values still sort."""
    if isinstance(value, (int, float)):
        return (0, value)
    if isinstance(value, str):
        return (1, value)
    return (2, value)


def _item_key(comparator: Comparator | None, position: int) -> Callable[[tuple[Key, Any]], Any]:
    """Build a sort key over ``(key, value)`` pairs, comparing one side of the pair."""
    if comparator is None:
        pick = itemgetter(position)
        return lambda item: scalar_key(pick(item))
    return cmp_to_key(lambda left, right: comparator(left[position], right[position]))


def natural_key(value: Any, *, casefold: bool = False) -> tuple[str | int, ...]:
    """Split ``str(value)`` into text and integer chunks so ``"img10"`` sorts after ``"img9"``.

    ``re.split`` with a capturing group alternates text and digit chunks, so two
    keys always compare text with text and integers with integers.
    """
    text = str(value)
    if casefold:
        text = text.casefold()
    return tuple(int(chunk) if index % 2 else chunk for index, chunk in enumerate(_DIGITS.split(text)))


def by_value(entries: dict[Key, Any], comparator: Comparator | None) -> dict[Key, Any]:
    """Sort by value ascending and re-key densely from 0."""
    ordered = sorted(entries.items(), key=_item_key(comparator, 1))
    return {index: value for index, (_, value) in enumerate(ordered)}


def by_value_reversed(entries: dict[Key, Any], comparator: Comparator | None) -> dict[Key, Any]:
    """Sort by value descending and re-key densely from 0."""
    ordered = sorted(entries.items(), key=_item_key(comparator, 1), reverse=True)
    return {index: value for index, (_, value) in enumerate(ordered)}


def by_value_keep_keys(entries: dict[Key, Any], comparator: Comparator | None) -> dict[Key, Any]:
    """Sort by value ascending, keeping each value under its key."""
    return dict(sorted(entries.items(), key=_item_key(comparator, 1)))


def by_key(entries: dict[Key, Any], comparator: Comparator | None) -> dict[Key, Any]:
    """Sort by key ascending."""
    return dict(sorted(entries.items(), key=_item_key(comparator, 0)))


def natural(entries: dict[Key, Any], _comparator: Comparator | None) -> dict[Key, Any]:
    """Natural order of the values' string forms, keeping keys."""
    return dict(sorted(entries.items(), key=lambda item: natural_key(item[1])))


def natural_casefold(entries: dict[Key, Any], _comparator: Comparator | None) -> dict[Key, Any]:
    """Case-insensitive natural order of the values' string forms, keeping keys."""
    return dict(sorted(entries.items(), key=lambda item: natural_key(item[1], casefold=True)))


def by_locale(entries: dict[Key, Any], _comparator: Comparator | None) -> dict[Key, Any]:
    """Order values by the current ``LC_COLLATE`` locale and re-key densely from 0."""
    ordered = sorted(entries.values(), key=lambda value: locale.strxfrm(str(value)))
    return dict(enumerate(ordered))


SORT_STRATEGIES: dict[str, SortStrategy] = {
    "values": by_value,
    "reverse": by_value_reversed,
    "assoc": by_value_keep_keys,
    "keys": by_key,
    "natural": natural,
    "natural_ci": natural_casefold,
    "locale": by_locale,
}


def resolve_strategy(strategy: str | SortStrategy | None) -> SortStrategy:
    """Return the strategy callable for a name, a callable, or ``None`` (``"values"``)."""
    if strategy is None:
        return by_value
    if isinstance(strategy, str):
        try:
            resolved = SORT_STRATEGIES[strategy]
        except KeyError:
            raise InvalidSortStrategy(_INVALID_STRATEGY_MSG) from None
        logger.debug("resolved sort strategy %r to %s", strategy, resolved.__name__)
        return resolved
    if callable(strategy):
        return strategy
    raise InvalidSortStrategy(_INVALID_STRATEGY_MSG)


def apply_strategy(
    strategy: str | SortStrategy | None,
    entries: dict[Key, Any],
    comparator: Comparator | None = None,
) -> dict[Key, Any]:
    """Run a strategy over a copy of ``entries`` and return the reordered entries as a dict."""
    sorter = resolve_strategy(strategy)
    return dict(sorter(dict(entries), comparator))
