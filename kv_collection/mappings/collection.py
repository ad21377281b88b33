"""Ordered keyed collection with a stateful cursor and functional helpers.

``Collection`` behaves like an insertion-ordered dict whose keys are integers
or strings, plus:

- a single external cursor (``rewind``/``next``/``prev``/``end``/``current``)
  that survives deletion of the entry it points at;
- functional helpers (``map``, ``filter``, ``reduce``, ``slice``, ``sort``,
  ``merge``, ``append``, ``invoke``);
- a per-type export registry used by ``to``.

Example::

    coll = Collection([0, 1, 2, 3, 4])
    coll.first()    # 0
    coll.next()     # 1
    coll.prev()     # 0

    for key in coll:
        if coll[key] % 2:
            del coll[key]
    coll.values()   # [0, 2, 4]
"""

from __future__ import annotations

import functools
from collections.abc import Callable, Iterable, Iterator, Mapping, MutableMapping, Sequence
from typing import TYPE_CHECKING, Any, ClassVar, Literal, Self, override

from kv_collection._types import Key
from kv_collection.exceptions import KeyNotFound, UnsupportedFormat, UnsupportedOperation
from kv_collection.export.flatten import to_array as flatten_to_array
from kv_collection.export.registry import FormatRegistry
from kv_collection.sorting import apply_strategy


if TYPE_CHECKING:
    from kv_collection._types import Comparator, FormatHandler, SortStrategy


_MISSING: Any = object()


def _array_handler(collection: Collection, options: Mapping[str, Any] | None) -> Any:
    return type(collection).to_array(collection, options)


def _is_index(key: object) -> bool:
    return isinstance(key, int) and not isinstance(key, bool)


def _source_items(source: Mapping[Key, Any] | Iterable[Any]) -> list[tuple[Key, Any]]:
    if isinstance(source, Mapping):
        return list(source.items())
    return list(enumerate(source))


def _field_matcher(conditions: Mapping[str, Any]) -> Callable[[Any], bool]:
    """Build a predicate requiring every ``field == expected`` pair to hold."""

    def matches(value: Any) -> bool:
        for field, expected in conditions.items():
            if isinstance(value, Mapping):
                actual = value.get(field, _MISSING)
            else:
                actual = getattr(value, field, _MISSING)
            if actual is _MISSING or actual != expected:
                return False
        return True

    return matches


class Collection(MutableMapping[Key, Any]):
    """Insertion-ordered mapping with cursor iteration and chainable operations."""

    _formats: ClassVar[FormatRegistry] = FormatRegistry({"array": _array_handler})

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        cls._formats = FormatRegistry({"array": _array_handler})

    def __init__(self, data: Mapping[Key, Any] | Iterable[Any] | None = None) -> None:
        """Create a collection from a mapping (keys kept) or an iterable (keyed ``0..n-1``)."""
        super().__init__()
        self._data: dict[Key, Any] = {}
        self._order: list[Key] = []
        self._next_index = 0
        self._position: int | None = None
        self._skip_next = False
        if data is not None:
            for key, value in _source_items(data):
                self._store(key, value)

    def _store(self, key: Key, value: Any) -> None:
        if key not in self._data:
            self._order.append(key)
        self._data[key] = value
        if _is_index(key) and key >= self._next_index:
            self._next_index = key + 1

    def _remove(self, key: Key) -> bool:
        if key not in self._data:
            return False
        index = self._order.index(key)
        del self._order[index]
        del self._data[key]
        if self._position is not None:
            if index < self._position:
                self._position -= 1
            elif index == self._position:
                # The following entry now sits at the cursor index.
                self._skip_next = True
                if self._position >= len(self._order):
                    self._position = None
        return True

    def _snapshot(self) -> list[tuple[Key, Any]]:
        return [(key, self._data[key]) for key in self._order]

    def _derive(self, data: Mapping[Key, Any] | Iterable[Any]) -> Self:
        return type(self)(data)

    # Access

    def has(self, key: Key) -> bool:
        return key in self._data

    @override
    def __contains__(self, key: object) -> bool:
        return key in self._data

    @override
    def __getitem__(self, key: Key) -> Any:
        try:
            return self._data[key]
        except KeyError:
            raise KeyNotFound(key) from None

    @override
    def get(self, key: Key, default: Any = _MISSING) -> Any:
        """Return the value at ``key``.

        Raises ``KeyNotFound`` when the key is absent and no default is given.
        """
        if key in self._data:
            return self._data[key]
        if default is _MISSING:
            raise KeyNotFound(key)
        return default

    def set(self, key: Key | None, value: Any) -> Any:
        """Store ``value`` at ``key``, or append it when ``key`` is ``None``. Returns ``value``."""
        self._store(self._next_index if key is None else key, value)
        return value

    @override
    def __setitem__(self, key: Key | None, value: Any) -> None:
        _ = self.set(key, value)

    def delete(self, key: Key) -> None:
        """Remove ``key`` if present; a missing key is ignored."""
        _ = self._remove(key)

    @override
    def __delitem__(self, key: Key) -> None:
        if not self._remove(key):
            raise KeyNotFound(key)

    @override
    def __len__(self) -> int:
        return len(self._order)

    def count(self) -> int:
        return len(self._order)

    @override
    def keys(self) -> list[Key]:  # type: ignore[override]
        """Return the keys in order."""
        return list(self._order)

    @override
    def values(self) -> list[Any]:  # type: ignore[override]
        """Return the values in order."""
        return [self._data[key] for key in self._order]

    @override
    def items(self) -> list[tuple[Key, Any]]:  # type: ignore[override]
        """Return ``(key, value)`` pairs in order."""
        return self._snapshot()

    def raw(self) -> dict[Key, Any]:
        """Return the backing dict itself. Treat it as read-only."""
        return self._data

    def plain(self) -> dict[Key, Any]:
        """Return a detached shallow copy of the entries."""
        return dict(self._data)

    def data(self, options: Mapping[str, Any] | None = None) -> list[Any] | dict[Key, Any]:
        """Shorthand for ``to_array(self, options)``."""
        return self.to_array(self, options)

    # Cursor

    def current(self) -> Any:
        """Return the value under the cursor, or ``None`` when the cursor is invalid."""
        if self._position is None:
            return None
        return self._data[self._order[self._position]]

    def key(self) -> Key | None:
        """Return the key under the cursor, or ``None`` when the cursor is invalid."""
        if self._position is None:
            return None
        return self._order[self._position]

    def valid(self) -> bool:
        return self._position is not None

    def rewind(self) -> Any:
        """Move the cursor to the first entry and return its value."""
        self._skip_next = False
        self._position = 0 if self._order else None
        return self.current()

    def first(self) -> Any:
        """Alias of ``rewind``."""
        return self.rewind()

    def end(self) -> Any:
        """Move the cursor to the last entry and return its value."""
        self._skip_next = False
        self._position = len(self._order) - 1 if self._order else None
        return self.current()

    def next(self) -> Any:
        """Advance the cursor and return the value it lands on.

        Right after the entry under the cursor was deleted, the cursor already
        sits on the following entry, so this call stays in place instead.
        """
        if not self._skip_next and self._position is not None:
            self._position += 1
            if self._position >= len(self._order):
                self._position = None
        self._skip_next = False
        return self.current()

    def prev(self) -> Any:
        """Move the cursor back one entry and return the value it lands on."""
        if self._position is not None:
            self._position = self._position - 1 if self._position > 0 else None
        return self.current()

    @override
    def __iter__(self) -> Iterator[Key]:
        """Iterate keys with the collection cursor.

        Deleting the current key inside the loop does not skip the entry after it.
        """
        self.rewind()
        while self._position is not None:
            yield self._order[self._position]
            _ = self.next()

    # Functional operations

    def each(self, callback: Callable[[Any, Key, Self], Any]) -> Self:
        """Replace every value with ``callback(value, key, self)`` in place."""
        for key in list(self._order):
            if key in self._data:
                self._data[key] = callback(self._data[key], key, self)
        return self

    def map(self, callback: Callable[[Any], Any]) -> Self:
        """Return a new collection with ``callback`` applied to every value."""
        return self._derive({key: callback(value) for key, value in self._snapshot()})

    def filter(
        self,
        predicate: Callable[..., Any] | Mapping[str, Any] | None = None,
        *,
        with_key: bool = False,
    ) -> Self:
        """Return a new collection with the entries matching ``predicate``.

        Parameters
        ----------
        predicate
            A callable, a mapping of ``field: expected`` pairs that every kept
            entry must match, or ``None`` to keep truthy values.
        with_key
            Call a callable predicate as ``predicate(value, key, self)``
            instead of ``predicate(value)``.
        """
        if isinstance(predicate, Mapping):
            predicate, with_key = _field_matcher(predicate), False
        elif predicate is None:
            predicate, with_key = bool, False

        kept: dict[Key, Any] = {}
        for key, value in self._snapshot():
            matched = predicate(value, key, self) if with_key else predicate(value)
            if matched:
                kept[key] = value
        return self._derive(kept)

    find = filter

    def reduce(self, callback: Callable[[Any, Any], Any], initial: Any = None) -> Any:
        """Fold the values from the left, starting from ``initial``.

        Every value is passed to ``callback``; an empty collection reduces to ``initial``.
        """
        return functools.reduce(callback, self.values(), initial)

    def slice(self, offset: int, length: int | None = None, preserve_keys: bool = True) -> Self:
        """Return a new collection over ``length`` entries starting at ordinal ``offset``.

        A negative ``offset`` counts from the end. ``length=None`` runs to the
        end and a negative ``length`` stops that many entries before it.
        """
        items = self._snapshot()
        start = offset if offset >= 0 else max(len(items) + offset, 0)
        if length is None:
            stop = len(items)
        elif length >= 0:
            stop = start + length
        else:
            stop = max(len(items) + length, 0)
        selected = items[start:stop]
        if preserve_keys:
            return self._derive(dict(selected))
        return self._derive([value for _, value in selected])

    def sort(self, comparator: Comparator | None = None, strategy: str | SortStrategy | None = None) -> Self:
        """Return a sorted copy; the receiver is left untouched.

        ``comparator`` takes two values and returns a negative, zero or
        positive integer. ``strategy`` names an entry of
        ``kv_collection.sorting.SORT_STRATEGIES`` or is a callable taking
        ``(entries, comparator)``. Unknown strategies raise
        ``InvalidSortStrategy``.
        """
        return self._derive(apply_strategy(strategy, self._data, comparator))

    def merge(self, other: Mapping[Key, Any] | Iterable[Any], preserve_keys: bool = False) -> Self:
        """Copy the entries of ``other`` into this collection.

        With ``preserve_keys`` each value is stored under its own key.
        Otherwise the values of ``other`` are keyed ``0..n-1``, overwriting
        entries with the same keys.
        """
        items = _source_items(other)
        if preserve_keys:
            for key, value in items:
                self._store(key, value)
        else:
            for index, (_, value) in enumerate(items):
                self._store(index, value)
        return self

    def append(self, other: Mapping[Key, Any] | Iterable[Any]) -> Self:
        """Append the values of ``other`` under fresh integer keys."""
        for _, value in _source_items(other):
            self._store(self._next_index, value)
        return self

    @override
    def clear(self) -> Self:  # type: ignore[override]
        """Remove every entry and invalidate the cursor."""
        self._data.clear()
        self._order.clear()
        self._next_index = 0
        self._position = None
        self._skip_next = False
        return self

    def invoke(
        self,
        method: str,
        params: Sequence[Any] | Callable[[Any, Key, Self], Sequence[Any]] = (),
    ) -> Self:
        """Call ``method`` on every value and collect the results under the same keys.

        ``params`` is either the argument list used for every call or a
        callable building it from ``(value, key, self)``. Every value must
        expose the method; otherwise ``UnsupportedOperation`` is raised before
        any call is made.
        """
        targets: list[tuple[Key, Any, Callable[..., Any]]] = []
        for key, value in self._snapshot():
            bound = getattr(value, method, None)
            if not callable(bound):
                msg = f"{type(value).__name__} object at key {key!r} has no callable `{method}`"
                raise UnsupportedOperation(msg)
            targets.append((key, value, bound))

        results: dict[Key, Any] = {}
        for key, value, bound in targets:
            args = params(value, key, self) if callable(params) else params
            results[key] = bound(*args)
        return self._derive(results)

    # Export

    @classmethod
    def formats(
        cls,
        name: str | Literal[False] | None = None,
        handler: FormatHandler | Literal[False] | None = None,
    ) -> dict[str, FormatHandler] | FormatHandler | None:
        """Read or change the export formats of this collection type.

        - ``formats()`` returns a copy of the registry;
        - ``formats(name)`` returns the handler for ``name`` or ``None``;
        - ``formats(name, handler)`` registers ``handler``;
        - ``formats(name, False)`` removes ``name``;
        - ``formats(False)`` resets to the default ``"array"`` format only.
        """
        if name is False:
            cls._formats.reset()
            return None
        if name is None:
            return cls._formats.snapshot()
        if handler is False:
            cls._formats.remove(name)
            return None
        if handler is None:
            return cls._formats.get(name)
        cls._formats.register(name, handler)
        return None

    def to(self, target: str | FormatHandler, options: Mapping[str, Any] | None = None) -> Any:
        """Export with a registered format name or a ``(collection, options)`` callable."""
        handler = self._formats.get(target) if isinstance(target, str) else target
        if not callable(handler):
            msg = f"Unsupported format `{target}`."
            raise UnsupportedFormat(msg)
        return handler(self, dict(options or {}))

    @classmethod
    def to_array(cls, data: Any, options: Mapping[str, Any] | None = None) -> list[Any] | dict[Key, Any]:
        """Recursively convert ``data`` into plain lists and dicts.

        ``data`` may be a collection, a list/tuple or a mapping. See
        ``kv_collection.export.flatten.to_array`` for the options.
        """
        return flatten_to_array(data, options, cls)

    @override
    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._data!r})"
