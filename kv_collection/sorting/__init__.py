"""Sort strategies for collections."""

from .strategies import SORT_STRATEGIES, apply_strategy, natural_key, resolve_strategy


__all__ = ["SORT_STRATEGIES", "apply_strategy", "natural_key", "resolve_strategy"]
