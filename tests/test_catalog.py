"""Tests for loading and navigating the scenario catalog."""

import json

import pytest

from journal_drill.catalog import (
    CatalogError,
    UnknownScenarioError,
    build_catalog,
    get_catalog,
    load_catalog_from_file,
)
from journal_drill.config import get_settings
from journal_drill.models.scenario import BondType

from tests.factories import raw_scenario


class TestDefaultCatalog:
    """Tests for the built-in scenarios."""

    def test_has_eight_scenarios(self, catalog):
        """Test the built-in catalog size and order."""
        assert len(catalog) == 8
        assert catalog.ids == (1, 2, 3, 4, 5, 6, 7, 8)

    def test_covers_every_bond_type(self, catalog):
        """Test that face, premium and discount bonds all appear."""
        assert {scenario.bond_type for scenario in catalog} == set(BondType)

    def test_every_scenario_has_calculations(self, catalog):
        """Test that each scenario explains its numbers."""
        for scenario in catalog:
            assert scenario.key_calculations


class TestScenarioCatalog:
    """Tests for catalog ordering and lookup."""

    def test_sorted_by_id(self, sparse_catalog):
        """Test that scenarios are ordered by id regardless of input order."""
        assert [s.id for s in sparse_catalog] == [1, 3, 7]
        assert sparse_catalog.first_id == 1
        assert sparse_catalog.last_id == 7

    def test_next_id_skips_gaps(self, sparse_catalog):
        """Test that next means the smallest larger id."""
        assert sparse_catalog.next_id(1) == 3
        assert sparse_catalog.next_id(3) == 7
        assert sparse_catalog.next_id(7) is None
        assert sparse_catalog.next_id(4) == 7

    def test_contains_and_get(self, sparse_catalog):
        """Test membership and lookup."""
        assert 3 in sparse_catalog
        assert 2 not in sparse_catalog
        assert sparse_catalog.get(2) is None
        assert sparse_catalog.get(3).id == 3

    def test_require_unknown_raises(self, sparse_catalog):
        """Test that a missing id raises UnknownScenarioError."""
        with pytest.raises(UnknownScenarioError) as exc_info:
            sparse_catalog.require(2)
        assert exc_info.value.scenario_id == 2

    def test_position_is_one_based(self, sparse_catalog):
        """Test display position."""
        assert sparse_catalog.position(1) == 1
        assert sparse_catalog.position(7) == 3

    def test_duplicate_ids_rejected(self):
        """Test that two scenarios may not share an id."""
        with pytest.raises(CatalogError):
            build_catalog([raw_scenario(1), raw_scenario(1)])

    def test_malformed_scenario_rejected(self):
        """Test that invalid content is a CatalogError."""
        bad = raw_scenario(1, solution=[{"account": "Cash", "debit": 5}])
        with pytest.raises(CatalogError):
            build_catalog([bad])

    def test_empty_catalog(self):
        """Test that an empty catalog has no first id."""
        empty = build_catalog([])
        assert len(empty) == 0
        assert empty.first_id is None


class TestCatalogFile:
    """Tests for loading a catalog from JSON."""

    def test_load_list(self, tmp_path):
        """Test a file holding a plain list."""
        path = tmp_path / "scenarios.json"
        path.write_text(json.dumps([raw_scenario(2), raw_scenario(5)]))
        loaded = load_catalog_from_file(path)
        assert loaded.ids == (2, 5)

    def test_load_wrapped_list(self, tmp_path):
        """Test a file holding {"scenarios": [...]}."""
        path = tmp_path / "scenarios.json"
        path.write_text(json.dumps({"scenarios": [raw_scenario(4)]}))
        assert load_catalog_from_file(path).ids == (4,)

    def test_missing_file(self, tmp_path):
        """Test that a missing file is a CatalogError."""
        with pytest.raises(CatalogError):
            load_catalog_from_file(tmp_path / "nope.json")

    def test_invalid_json(self, tmp_path):
        """Test that broken JSON is a CatalogError."""
        path = tmp_path / "scenarios.json"
        path.write_text("{not json")
        with pytest.raises(CatalogError):
            load_catalog_from_file(path)

    def test_wrong_shape(self, tmp_path):
        """Test that a JSON object without a scenario list is rejected."""
        path = tmp_path / "scenarios.json"
        path.write_text(json.dumps({"items": []}))
        with pytest.raises(CatalogError):
            load_catalog_from_file(path)

    def test_get_catalog_uses_configured_path(self, tmp_path, monkeypatch):
        """Test that DRILL_CATALOG_PATH replaces the built-in catalog."""
        path = tmp_path / "scenarios.json"
        path.write_text(json.dumps([raw_scenario(9)]))
        monkeypatch.setenv("DRILL_CATALOG_PATH", str(path))
        get_settings.cache_clear()
        get_catalog.cache_clear()
        try:
            assert get_catalog().ids == (9,)
        finally:
            get_catalog.cache_clear()
