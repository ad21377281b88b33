"""Exceptions raised by kv-collection."""

from __future__ import annotations


class CollectionError(Exception):
    """Base exception for all kv-collection errors."""


class KeyNotFound(CollectionError, KeyError):
    """Raised when reading or deleting a key that is not in the collection."""


class InvalidSortStrategy(CollectionError, ValueError):
    """Raised when a sort strategy is neither a known name nor callable."""


class UnsupportedFormat(CollectionError, ValueError):
    """Raised when exporting to a format that is not registered."""


class UnsupportedOperation(CollectionError, TypeError):
    """Raised when an element does not expose the method being invoked."""
