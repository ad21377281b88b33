"""Registry of named export handlers."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from collections.abc import Mapping

    from kv_collection._types import FormatHandler


logger = logging.getLogger(__name__)


class FormatRegistry:
    """Map format names to ``(collection, options)`` handlers.

    The registry starts with ``defaults`` and can always be reset back to them.
    """

    def __init__(self, defaults: Mapping[str, FormatHandler]) -> None:
        super().__init__()
        self._defaults = dict(defaults)
        self._handlers = dict(defaults)

    def register(self, name: str, handler: FormatHandler) -> None:
        """Install ``handler`` under ``name``, replacing any existing one."""
        if not name:
            msg = "format name must not be empty"
            raise ValueError(msg)
        if not callable(handler):
            msg = f"handler for format `{name}` must be callable"
            raise TypeError(msg)
        self._handlers[name] = handler
        logger.debug("registered export format %r", name)

    def remove(self, name: str) -> None:
        """Remove ``name`` if present."""
        if self._handlers.pop(name, None) is not None:
            logger.debug("removed export format %r", name)

    def reset(self) -> None:
        """Restore the default handlers only."""
        self._handlers = dict(self._defaults)
        logger.debug("reset export formats to %s", sorted(self._defaults))

    def get(self, name: str) -> FormatHandler | None:
        return self._handlers.get(name)

    def snapshot(self) -> dict[str, FormatHandler]:
        """Return a detached copy of the current registry."""
        return dict(self._handlers)

    def __contains__(self, name: object) -> bool:
        return name in self._handlers

    def __repr__(self) -> str:
        return f"{type(self).__name__}({sorted(self._handlers)!r})"
