"""Name-keyed lookup of layout strategies."""

import logging
from typing import Iterable, Protocol

from errors import StrategyNotFoundError
from models import LayoutOptions, LayoutResult, Person, Relationship
from pedigree import OrthogonalPedigreeStrategy, PedigreeStrategy
from strategies import (
    FanChartStrategy,
    HorizontalAncestorStrategy,
    TimelineStrategy,
    VerticalTreeStrategy,
)

logger = logging.getLogger(__name__)


class LayoutStrategy(Protocol):
    name: str

    def calculate(
        self,
        persons: Iterable[Person],
        relationships: Iterable[Relationship],
        options: LayoutOptions,
    ) -> LayoutResult: ...


class StrategyRegistry:
    def __init__(self):
        self._strategies: dict[str, LayoutStrategy] = {}

    def register(self, strategy: LayoutStrategy, name: str | None = None):
        """Register `strategy` under `name` (defaults to `strategy.name`), replacing any previous one."""
        key = name if name is not None else strategy.name
        if key in self._strategies:
            logger.debug("Replacing layout strategy '%s'", key)
        self._strategies[key] = strategy

    def get(self, name: str) -> LayoutStrategy:
        try:
            return self._strategies[name]
        except KeyError:
            raise StrategyNotFoundError(name) from None

    def get_all(self) -> list[LayoutStrategy]:
        return list(self._strategies.values())

    def names(self) -> list[str]:
        return list(self._strategies)

    def __contains__(self, name: str) -> bool:
        return name in self._strategies


def default_registry() -> StrategyRegistry:
    registry = StrategyRegistry()
    for strategy in (
        VerticalTreeStrategy(),
        HorizontalAncestorStrategy(),
        FanChartStrategy(),
        TimelineStrategy(),
        PedigreeStrategy(),
        OrthogonalPedigreeStrategy(),
    ):
        registry.register(strategy)
    return registry


# Built once at import, read-only afterwards
DEFAULT_REGISTRY = default_registry()


def calculate_layout(
    strategy_name: str,
    persons: Iterable[Person],
    relationships: Iterable[Relationship],
    options: LayoutOptions,
) -> LayoutResult:
    """Run the named strategy from the default registry."""
    return DEFAULT_REGISTRY.get(strategy_name).calculate(persons, relationships, options)
