"""Shared test fixtures."""

from unittest.mock import MagicMock

import pytest


@pytest.fixture
def people_rows():
    """A small table with a header row, mirroring a typical spreadsheet."""
    return [
        ["name", "age", "member"],
        ["Ada", "36", "Y"],
        ["Grace", "N/A", "N"],
        ["Linus", "21", "Y"],
    ]


@pytest.fixture
def tool_context():
    ctx = MagicMock()
    ctx.state = {}
    return ctx


@pytest.fixture(autouse=True)
def reset_store():
    """Reset the module-level table store between tests."""
    import table_refine.tools.refining as refining_module
    refining_module._store = None
    yield
    if refining_module._store is not None:
        refining_module._store.close()
        refining_module._store = None
