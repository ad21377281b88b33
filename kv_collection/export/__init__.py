"""Export registry and converters."""

from .flatten import ValueKind, classify, to_array
from .json_format import json_handler
from .registry import FormatRegistry


__all__ = ["FormatRegistry", "ValueKind", "classify", "json_handler", "to_array"]
