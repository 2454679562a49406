"""
Shared fixtures.

No test talks to Google Sheets: storage is either the in-memory store
or a fake worksheet.
"""

import pytest

from journal_drill.catalog import build_catalog, load_default_catalog
from journal_drill.services.storage import InMemoryProgressStorage

from tests.factories import raw_scenario


@pytest.fixture
def catalog():
    """The built-in eight-scenario catalog."""
    return load_default_catalog()


@pytest.fixture
def sparse_catalog():
    """Three scenarios with gaps between their ids."""
    return build_catalog([raw_scenario(7), raw_scenario(1), raw_scenario(3)])


@pytest.fixture
def storage():
    return InMemoryProgressStorage()
