"""Scenario catalog package."""

from journal_drill.catalog.loader import (
    CatalogError,
    ScenarioCatalog,
    UnknownScenarioError,
    build_catalog,
    get_catalog,
    load_catalog_from_file,
    load_default_catalog,
)

__all__ = [
    "CatalogError",
    "ScenarioCatalog",
    "UnknownScenarioError",
    "build_catalog",
    "get_catalog",
    "load_catalog_from_file",
    "load_default_catalog",
]
