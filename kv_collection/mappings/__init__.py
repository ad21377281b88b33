"""Collection mapping implementations."""

from .collection import Collection


__all__ = ["Collection"]
