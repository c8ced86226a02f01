"""
Sentence composition: a bidirectional walk outward from a seed.

The walk first extends the sentence backward from the seed until it
reaches Begin or would grow past half of max_len, then extends it forward
until it reaches End or would grow past max_len. Both phases measure the
same running length, so the forward phase may use whatever budget the
backward phase left over.

Begin and End themselves never appear in the result; only the
punctuation leading up to them does.

With max_len=None nothing but the sentinels stops the walk. A corpus
whose graph has a cycle that never reaches a sentinel along the chosen
edges can then walk forever; callers asking for an unbounded sentence
must trust their corpus.
"""
from __future__ import annotations

from collections import deque
from typing import TYPE_CHECKING, Iterable, Iterator

from ..core.textlet import BEGIN_ID, END_ID, Textlet
from ..errors import EmptyChainError
from .selectors import Direction, Selector

if TYPE_CHECKING:
    from .chain import MarkovChain, Seed


class TokenList:
    """An ordered run of textlets making up a composed sentence."""

    def __init__(self, textlets: Iterable[Textlet] = ()) -> None:
        self._items: deque[Textlet] = deque(textlets)

    def appendleft(self, textlet: Textlet) -> None:
        self._items.appendleft(textlet)

    def append(self, textlet: Textlet) -> None:
        self._items.append(textlet)

    def char_length(self) -> int:
        """Total characters of the recomposed text."""
        return sum(len(t) for t in self._items)

    def texts(self) -> list[str]:
        return [t.text for t in self._items]

    def __iter__(self) -> Iterator[Textlet]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __str__(self) -> str:
        return "".join(t.text for t in self._items)

    def __repr__(self) -> str:
        return f"TokenList({self.texts()!r})"


def compose_sentence(
    chain: MarkovChain,
    seed: Seed | str | int | None,
    selector: Selector,
    max_len: int | None = None,
) -> TokenList:
    """
    Compose a sentence around seed, choosing each step with selector.

    Raises:
        SeedNotFoundError: seed names no textlet in the chain.
        EmptyChainError: the chain has no edges.
        DeadEndError: a step found no edge to follow.
    """
    if max_len is not None and max_len <= 0:
        raise ValueError(f"max_len must be positive, got {max_len}")

    origin = chain.resolve_seed(seed)
    if chain.is_empty():
        raise EmptyChainError()

    seed_textlet = chain.get_textlet(origin)
    sentence = TokenList()
    if not seed_textlet.is_sentinel():
        sentence.append(seed_textlet)
    length = len(seed_textlet)

    # Backward: prepend punct then the preceding textlet, up to half the budget.
    cursor = origin
    while cursor != BEGIN_ID:
        prev, punct, prev_id, _ = chain.select_next_word(cursor, selector, Direction.REVERSE)

        new_length = length + len(punct) + len(prev)
        if max_len is not None and new_length > max_len / 2:
            break

        sentence.appendleft(punct)
        length = new_length
        if prev_id == BEGIN_ID:
            break
        sentence.appendleft(prev)
        cursor = prev_id

    # Forward: append punct then the next textlet, up to the whole budget.
    cursor = origin
    while cursor != END_ID:
        nxt, punct, nxt_id, _ = chain.select_next_word(cursor, selector, Direction.FORWARD)

        new_length = length + len(punct) + len(nxt)
        if max_len is not None and new_length > max_len:
            break

        sentence.append(punct)
        length = new_length
        if nxt_id == END_ID:
            break
        sentence.append(nxt)
        cursor = nxt_id

    return sentence
