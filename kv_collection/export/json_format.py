"""JSON text export handler.

Not registered by default. Enable it with::

    Collection.formats("json", json_handler)
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any


if TYPE_CHECKING:
    from collections.abc import Callable, Mapping


def json_handler(collection: Any, options: Mapping[str, Any] | None = None) -> str:
    """Encode ``collection.to_array(...)`` as JSON text.

    ``options["encoder"]`` replaces ``json.dumps``; the remaining options are
    passed to ``to_array``.
    """
    settings = dict(options or {})
    encoder: Callable[[Any], str] = settings.pop("encoder", json.dumps)
    return encoder(collection.to_array(collection, settings))
