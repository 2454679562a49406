"""
Scenario Catalog

The catalog is loaded once at startup and never mutated.
Scenarios are kept sorted by id; "next scenario" always means the
smallest id strictly greater than the current one, so ids do not
need to be contiguous.
"""

import json
from bisect import bisect_right
from functools import lru_cache
from pathlib import Path
from typing import Iterable, Iterator, Optional, Union

from pydantic import TypeAdapter, ValidationError

from journal_drill.catalog.scenario_data import SCENARIOS
from journal_drill.config import get_settings
from journal_drill.models.scenario import Scenario


class CatalogError(Exception):
    """Scenario content could not be loaded."""
    pass


class UnknownScenarioError(CatalogError):
    """A scenario id that is not in the catalog."""

    def __init__(self, scenario_id: int):
        self.scenario_id = scenario_id
        super().__init__(f"Scenario {scenario_id} is not in the catalog")


_SCENARIO_LIST = TypeAdapter(list[Scenario])


class ScenarioCatalog:
    """
    Ordered, read-only collection of scenarios.

    Iteration yields scenarios in ascending id order.
    """

    def __init__(self, scenarios: Iterable[Scenario]):
        ordered = sorted(scenarios, key=lambda s: s.id)
        by_id: dict[int, Scenario] = {}
        for scenario in ordered:
            if scenario.id in by_id:
                raise CatalogError(f"Duplicate scenario id: {scenario.id}")
            by_id[scenario.id] = scenario

        self._scenarios = tuple(ordered)
        self._by_id = by_id
        self._ids = tuple(s.id for s in ordered)

    def __len__(self) -> int:
        return len(self._scenarios)

    def __iter__(self) -> Iterator[Scenario]:
        return iter(self._scenarios)

    def __contains__(self, scenario_id: object) -> bool:
        return scenario_id in self._by_id

    @property
    def ids(self) -> tuple[int, ...]:
        return self._ids

    @property
    def first_id(self) -> Optional[int]:
        """Smallest scenario id, None for an empty catalog."""
        return self._ids[0] if self._ids else None

    @property
    def last_id(self) -> Optional[int]:
        return self._ids[-1] if self._ids else None

    def get(self, scenario_id: int) -> Optional[Scenario]:
        return self._by_id.get(scenario_id)

    def require(self, scenario_id: int) -> Scenario:
        """Get a scenario or raise UnknownScenarioError."""
        scenario = self._by_id.get(scenario_id)
        if scenario is None:
            raise UnknownScenarioError(scenario_id)
        return scenario

    def next_id(self, after: int) -> Optional[int]:
        """Smallest id strictly greater than `after`, None if there is none."""
        index = bisect_right(self._ids, after)
        if index < len(self._ids):
            return self._ids[index]
        return None

    def position(self, scenario_id: int) -> int:
        """1-based position of a scenario in catalog order."""
        if scenario_id not in self._by_id:
            raise UnknownScenarioError(scenario_id)
        return self._ids.index(scenario_id) + 1


def build_catalog(raw_scenarios: list) -> ScenarioCatalog:
    """
    Validate raw scenario dicts and build a catalog.

    Raises:
        CatalogError: If any scenario is malformed or unbalanced,
                      or two scenarios share an id
    """
    try:
        scenarios = _SCENARIO_LIST.validate_python(raw_scenarios)
    except ValidationError as e:
        raise CatalogError(f"Invalid scenario content: {e}") from e
    return ScenarioCatalog(scenarios)


def load_default_catalog() -> ScenarioCatalog:
    """Catalog built from the scenarios shipped with the package."""
    return build_catalog(SCENARIOS)


def load_catalog_from_file(path: Union[str, Path]) -> ScenarioCatalog:
    """
    Load a catalog from a JSON file.

    The file holds either a list of scenarios or an object with a
    "scenarios" list.
    """
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise CatalogError(f"Scenario catalog not found: {path}") from e
    except json.JSONDecodeError as e:
        raise CatalogError(f"Scenario catalog is not valid JSON: {e}") from e

    if isinstance(data, dict):
        data = data.get("scenarios")
    if not isinstance(data, list):
        raise CatalogError("Scenario catalog must be a list of scenarios")

    return build_catalog(data)


@lru_cache()
def get_catalog() -> ScenarioCatalog:
    """
    Get the configured catalog (cached).

    Uses DRILL_CATALOG_PATH when set, the built-in scenarios otherwise.
    """
    catalog_path = get_settings().drill.catalog_path
    if catalog_path:
        return load_catalog_from_file(catalog_path)
    return load_default_catalog()
