"""
Markov chain: a weighted directed multigraph of textlets.

Each edge records that one textlet was followed by another, which
punctuation run sat between them, and how often that exact triple was
observed. Edges live once in a flat list; the forward index (src → edge
positions) and reverse index (dst → edge positions) point into it.

The chain is a plain single-owner structure: parse_sentence needs
exclusive access, traversal only reads. Callers that ingest from several
threads must serialize access themselves.
"""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Iterator

from ..core.textlet import Textlet, TextletBag
from ..errors import DeadEndError, EmptyChainError, SeedNotFoundError
from .lexer import Lexer
from .selectors import Direction, SelectionKind, Selector

if TYPE_CHECKING:
    from .compose import TokenList

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = 1


@dataclass(slots=True)
class Edge:
    """
    A directed transition src → dst, separated by the punct textlet.

    hits counts how many times this exact (src, dst, punct) was observed.
    """
    src: int
    dst: int
    punct: int
    hits: int = 1

    def increment(self, by: int = 1) -> None:
        self.hits += by

    def __str__(self) -> str:
        return f"({self.src} -[{self.punct}]-> {self.dst}) x{self.hits}"


class SeedKind(Enum):
    WORD = "word"
    INDEX = "index"
    RANDOM = "random"


@dataclass(frozen=True, slots=True)
class Seed:
    """Where a walk starts: a known word, a textlet id, or anywhere."""
    kind: SeedKind
    text: str | None = None
    textlet_id: int | None = None

    @classmethod
    def word(cls, text: str) -> Seed:
        return cls(SeedKind.WORD, text=text)

    @classmethod
    def index(cls, textlet_id: int) -> Seed:
        return cls(SeedKind.INDEX, textlet_id=textlet_id)

    @classmethod
    def random(cls) -> Seed:
        return cls(SeedKind.RANDOM)

    @classmethod
    def coerce(cls, value: Seed | str | int | None) -> Seed:
        """Accept a Seed, a word, a textlet id, or None for random."""
        if isinstance(value, Seed):
            return value
        if value is None:
            return cls.random()
        if isinstance(value, bool):
            raise TypeError(f"Cannot use {value!r} as a seed")
        if isinstance(value, int):
            return cls.index(value)
        if isinstance(value, str):
            return cls.word(value)
        raise TypeError(f"Cannot use {value!r} as a seed")


class MarkovChain:
    """
    Graph of interned textlets joined by counted, punctuated edges.

    A new chain holds only the Begin and End sentinels. parse_sentence is
    the only mutator; it accumulates edges for the life of the object.
    """

    def __init__(self, rng: random.Random | None = None) -> None:
        self._textlets = TextletBag()
        self._edges: list[Edge] = []
        # src id -> positions in self._edges
        self._forward: dict[int, list[int]] = {}
        # dst id -> positions in self._edges
        self._reverse: dict[int, list[int]] = {}
        # (src, dst, punct) -> position in self._edges
        self._by_key: dict[tuple[int, int, int], int] = {}
        # ids with at least one outgoing edge, in first-seen order
        self._seeds: list[int] = []
        self._seed_set: set[int] = set()
        self._rng = rng or random.Random()

    # ------------------------------------------------------------------
    # Textlets
    # ------------------------------------------------------------------

    def ensure_textlet_index(self, word: str) -> int:
        """Get the id of a textlet, registering it if it is new."""
        return self._textlets.ensure(word)

    def try_get_textlet_index(self, word: str) -> int | None:
        return self._textlets.lookup(word)

    def get_textlet(self, index: int) -> Textlet | None:
        return self._textlets.get(index)

    def textlets(self) -> Iterator[Textlet]:
        return iter(self._textlets)

    # ------------------------------------------------------------------
    # Edges
    # ------------------------------------------------------------------

    def register_edge(self, src: int, dst: int, punct: int) -> Edge:
        """Record one observation of src -[punct]-> dst."""
        return self._add_edge(src, dst, punct, 1)

    def _add_edge(self, src: int, dst: int, punct: int, hits: int) -> Edge:
        if src not in self._seed_set:
            self._seed_set.add(src)
            self._seeds.append(src)

        key = (src, dst, punct)
        pos = self._by_key.get(key)
        if pos is not None:
            edge = self._edges[pos]
            edge.increment(hits)
            return edge

        pos = len(self._edges)
        edge = Edge(src, dst, punct, hits)
        self._edges.append(edge)
        self._by_key[key] = pos
        self._forward.setdefault(src, []).append(pos)
        # A new triple is also a new (src, punct) pair for dst.
        self._reverse.setdefault(dst, []).append(pos)

        return edge

    def get_edge(self, src: int, dst: int, punct: int) -> Edge | None:
        pos = self._by_key.get((src, dst, punct))
        return None if pos is None else self._edges[pos]

    def edges(self) -> Iterator[Edge]:
        return iter(self._edges)

    def forward_edges(self, index: int) -> list[Edge]:
        """Edges leaving a textlet, in storage order."""
        return [self._edges[p] for p in self._forward.get(index, ())]

    def reverse_edges(self, index: int) -> list[Edge]:
        """Edges entering a textlet, in storage order."""
        return [self._edges[p] for p in self._reverse.get(index, ())]

    def seeds(self) -> list[int]:
        """Ids that have at least one outgoing edge."""
        return list(self._seeds)

    # ------------------------------------------------------------------
    # Ingestion
    # ------------------------------------------------------------------

    def parse_sentence(self, text: str) -> None:
        """
        Tokenize a sentence and register an edge for every
        (word, punct, next word) triple in it, End included.
        """
        if not text:
            return

        lexer = Lexer(text)
        current = next(lexer, None)

        while current is not None:
            punct = next(lexer, None)
            following = next(lexer, None)

            if punct is None or following is None:
                logger.debug("Token stream for %r ended mid-triple; stopping early", text)
                return

            src = self._textlets.ensure_token(current)
            pct = self._textlets.ensure_token(punct)
            dst = self._textlets.ensure_token(following)
            self.register_edge(src, dst, pct)

            if following.is_end():
                return

            current = following

    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------

    def resolve_seed(self, seed: Seed | str | int | None) -> int:
        """Turn a seed into a textlet id."""
        seed = Seed.coerce(seed)

        if seed.kind is SeedKind.WORD:
            idx = self.try_get_textlet_index(seed.text)
            if idx is None:
                raise SeedNotFoundError(seed.text)
            return idx

        if seed.kind is SeedKind.INDEX:
            if self.get_textlet(seed.textlet_id) is None:
                raise SeedNotFoundError(seed.textlet_id)
            return seed.textlet_id

        if not self._seeds:
            raise EmptyChainError()
        return self._rng.choice(self._seeds)

    def select_next_word(
        self,
        seed: Seed | str | int | None,
        selector: Selector,
        direction: Direction = Direction.FORWARD,
    ) -> tuple[Textlet, Textlet, int, int]:
        """
        Step once from seed along an edge chosen by selector.

        Returns (dest, punct, dest_id, punct_id). In the reverse direction
        dest is the textlet preceding the seed; either way the visible
        text is the seed and dest joined by punct in reading order.
        """
        origin = self.resolve_seed(seed)

        if direction is Direction.FORWARD:
            positions = self._forward.get(origin)
        else:
            positions = self._reverse.get(origin)

        if not positions:
            raise DeadEndError(origin, self.get_textlet(origin), direction)

        candidates = [self._edges[p] for p in positions]

        selector.reset(direction)
        weights = [
            selector.weight(
                self._textlets.get(e.src),
                self._textlets.get(e.dst),
                self._textlets.get(e.punct),
                e.hits,
            )
            for e in candidates
        ]

        edge = self._pick(candidates, weights, selector.selection_kind())
        dest_id = edge.dst if direction is Direction.FORWARD else edge.src

        return (
            self._textlets.get(dest_id),
            self._textlets.get(edge.punct),
            dest_id,
            edge.punct,
        )

    def _pick(self, candidates: list[Edge], weights: list[float], kind: SelectionKind) -> Edge:
        if kind is SelectionKind.HIGHEST:
            best = 0
            for i in range(1, len(weights)):
                if weights[i] > weights[best]:
                    best = i
            return candidates[best]

        if kind is SelectionKind.LOWEST:
            best = 0
            for i in range(1, len(weights)):
                if weights[i] < weights[best]:
                    best = i
            return candidates[best]

        total = sum(weights)
        if total <= 0:
            return self._rng.choice(candidates)

        pick = self._rng.random() * total
        running = 0.0
        for edge, weight in zip(candidates, weights):
            running += weight
            if running >= pick:
                return edge
        # Float rounding can leave the running sum a hair under the draw.
        return candidates[-1]

    def compose_sentence(
        self,
        seed: Seed | str | int | None,
        selector: Selector,
        max_len: int | None = None,
    ) -> TokenList:
        """
        Walk backward and forward from seed to build a sentence.

        See smc.engine.compose.compose_sentence. With max_len=None the walk
        only stops at Begin/End, so a cyclic corpus may never terminate.
        """
        from .compose import compose_sentence

        return compose_sentence(self, seed, selector, max_len)

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def num_textlets(self) -> int:
        return len(self._textlets)

    def num_edges(self) -> int:
        return len(self._edges)

    def is_empty(self) -> bool:
        """True until the first edge is registered."""
        return not self._edges

    def total_hits(self) -> int:
        return sum(e.hits for e in self._edges)

    def top_edges(self, n: int = 10) -> list[Edge]:
        """The n most observed edges, ties in storage order."""
        return sorted(self._edges, key=lambda e: -e.hits)[:n]

    def describe_edge(self, edge: Edge) -> str:
        src = self._textlets.get(edge.src)
        dst = self._textlets.get(edge.dst)
        pct = self._textlets.get(edge.punct)
        return f"{src!r} -[{pct.text!r}]-> {dst!r} x{edge.hits}"

    def __len__(self) -> int:
        return self.num_textlets()

    def __str__(self) -> str:
        lines = [f"MarkovChain({self.num_textlets()} textlets, {self.num_edges()} edges):"]
        for edge in self.top_edges(10):
            lines.append(f"  {self.describe_edge(edge)}")
        if self.num_edges() > 10:
            lines.append(f"  ... and {self.num_edges() - 10} more")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"MarkovChain(textlets={self.num_textlets()}, edges={self.num_edges()})"

    # ------------------------------------------------------------------
    # Rebuild
    # ------------------------------------------------------------------

    def to_dict(self) -> dict:
        """Everything needed to rebuild this chain, as plain data."""
        return {
            "version": SNAPSHOT_VERSION,
            "textlets": self._textlets.strings(),
            "edges": [[e.src, e.dst, e.punct, e.hits] for e in self._edges],
        }

    @classmethod
    def from_dict(cls, data: dict, rng: random.Random | None = None) -> MarkovChain:
        """Rebuild a chain; ids, edge order and hit counts are preserved."""
        version = data.get("version", SNAPSHOT_VERSION)
        if version != SNAPSHOT_VERSION:
            raise ValueError(f"Unsupported chain snapshot version: {version}")

        chain = cls(rng=rng)
        for text in data.get("textlets", []):
            chain.ensure_textlet_index(text)

        limit = chain.num_textlets()
        for src, dst, punct, hits in data.get("edges", []):
            for idx in (src, dst, punct):
                if not 0 <= idx < limit:
                    raise ValueError(f"Edge refers to unknown textlet id {idx}")
            chain._add_edge(src, dst, punct, hits)
        return chain
