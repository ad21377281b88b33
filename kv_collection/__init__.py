"""kv-collection - ordered keyed collection with cursor iteration and pluggable exports"""

from ._version import version as __version__
from .exceptions import CollectionError, InvalidSortStrategy, KeyNotFound, UnsupportedFormat, UnsupportedOperation
from .export import FormatRegistry, ValueKind, json_handler
from .mappings import Collection
from .sorting import SORT_STRATEGIES


__all__ = [
    "SORT_STRATEGIES",
    "Collection",
    "CollectionError",
    "FormatRegistry",
    "InvalidSortStrategy",
    "KeyNotFound",
    "UnsupportedFormat",
    "UnsupportedOperation",
    "ValueKind",
    "__version__",
    "json_handler",
]
