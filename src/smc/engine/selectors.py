"""
Selectors: pluggable policies for choosing the next edge of a walk.

A selector weighs every candidate edge leaving (or entering) the current
textlet, and declares how those weights are to be read:

  - HIGHEST / LOWEST: take the single extremal edge; ties go to the
    edge stored first.
  - WEIGHTED_RANDOM: treat weights as probability mass.

reset() is called before each traversal step so a selector can drop any
per-step state. The built-in selectors keep none.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum

from ..core.textlet import Textlet


class Direction(Enum):
    FORWARD = "forward"
    REVERSE = "reverse"


class SelectionKind(Enum):
    HIGHEST = "highest"
    LOWEST = "lowest"
    WEIGHTED_RANDOM = "weighted_random"


class Selector(ABC):
    """Interface for edge selection policies."""

    def reset(self, direction: Direction) -> None:
        """Clear any per-traversal state before a new step."""

    @abstractmethod
    def weight(self, src: Textlet, dst: Textlet, punct: Textlet, hits: int) -> float:
        """Score one candidate edge. Called once per candidate."""

    @abstractmethod
    def selection_kind(self) -> SelectionKind:
        """How the collected weights should be interpreted."""


class WeightedRandomSelector(Selector):
    """Pick edges at random, in proportion to how often they were seen."""

    def weight(self, src, dst, punct, hits):
        return float(hits)

    def selection_kind(self):
        return SelectionKind.WEIGHTED_RANDOM


class HighestSelector(Selector):
    """Always take the most frequently observed edge. Deterministic."""

    def weight(self, src, dst, punct, hits):
        return float(hits)

    def selection_kind(self):
        return SelectionKind.HIGHEST


class LowestSelector(Selector):
    """Always take the least frequently observed edge. Deterministic."""

    def weight(self, src, dst, punct, hits):
        return float(hits)

    def selection_kind(self):
        return SelectionKind.LOWEST


class NaiveRandomSelector(Selector):
    """Pick uniformly among candidate edges, ignoring hit counts."""

    def weight(self, src, dst, punct, hits):
        return 1.0

    def selection_kind(self):
        return SelectionKind.WEIGHTED_RANDOM


SELECTORS: dict[str, type[Selector]] = {
    "weighted": WeightedRandomSelector,
    "highest": HighestSelector,
    "lowest": LowestSelector,
    "naive": NaiveRandomSelector,
}


def get_selector(name: str) -> Selector:
    """Instantiate a built-in selector by name."""
    try:
        return SELECTORS[name]()
    except KeyError:
        raise ValueError(
            f"Unknown selector {name!r}; expected one of {sorted(SELECTORS)}"
        ) from None
