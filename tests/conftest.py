from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from kv_collection import Collection


if TYPE_CHECKING:
    from collections.abc import Generator


@pytest.fixture(autouse=True)
def _reset_formats() -> Generator[None]:
    yield
    _ = Collection.formats(False)
