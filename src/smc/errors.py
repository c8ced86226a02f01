"""Recoverable failures reported by chain traversal and composition."""
from __future__ import annotations


class ChainError(ValueError):
    """Base class for chain lookup and traversal failures."""


class SeedNotFoundError(ChainError):
    """The requested seed does not name any textlet in the chain."""

    def __init__(self, seed) -> None:
        self.seed = seed
        super().__init__(f"Seed {seed!r} not found in this Markov chain!")


class DeadEndError(ChainError):
    """A textlet has no edges in the requested traversal direction."""

    def __init__(self, textlet_id: int, textlet, direction) -> None:
        self.textlet_id = textlet_id
        self.direction = direction
        super().__init__(
            f"Textlet {textlet!r} (id {textlet_id}) is not connected to "
            f"anything in the {direction.value} direction in this Markov chain!"
        )


class EmptyChainError(ChainError):
    """Composition was attempted before any edge was registered."""

    def __init__(self) -> None:
        super().__init__("Cannot compose from an empty Markov chain!")
