from __future__ import annotations

from pathlib import Path

import pytest

_DIRECTORY_MARKERS = {
    "/tests/unit/": "unit",
    "/tests/smoke/": "smoke",
    "/tests/e2e/": "e2e",
}


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    """Mark tests by the suite directory they live in (unit, smoke, e2e)."""
    for item in items:
        path = f"/{Path(str(item.fspath)).as_posix()}"
        for fragment, marker in _DIRECTORY_MARKERS.items():
            if fragment in path:
                item.add_marker(getattr(pytest.mark, marker))
