"""Subjacent Markov Chain: word/punctuation graph and sentence composition."""

from .engine.chain import MarkovChain, Seed
from .engine.compose import TokenList
from .engine.lexer import Lexer
from .engine.selectors import (
    HighestSelector,
    LowestSelector,
    NaiveRandomSelector,
    WeightedRandomSelector,
)

__version__ = "0.1.0"
__all__ = [
    "MarkovChain",
    "Seed",
    "TokenList",
    "Lexer",
    "WeightedRandomSelector",
    "HighestSelector",
    "LowestSelector",
    "NaiveRandomSelector",
]
