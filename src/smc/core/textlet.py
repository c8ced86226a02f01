"""
Textlet bag: interning of words and punctuation runs.

Every distinct string seen by a chain is stored once and addressed by a
dense integer id. Ids 0 and 1 are reserved for the Begin and End
sentinels; strings get ids from 2 upward in first-seen order. Ids are
never reused or removed.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator

from .token import Token

BEGIN_ID = 0
END_ID = 1


class TextletKind(Enum):
    BEGIN = "begin"
    END = "end"
    TEXT = "text"


@dataclass(frozen=True, slots=True)
class Textlet:
    """An interned unit of text, or one of the two sentinels."""
    kind: TextletKind
    text: str = ""

    @classmethod
    def of(cls, text: str) -> Textlet:
        return cls(TextletKind.TEXT, text)

    def is_sentinel(self) -> bool:
        return self.kind is not TextletKind.TEXT

    def __len__(self) -> int:
        return len(self.text)

    def __str__(self) -> str:
        return self.text

    def __repr__(self) -> str:
        if self.kind is TextletKind.TEXT:
            return f"Textlet({self.text!r})"
        return f"Textlet.{self.kind.name}"


BEGIN = Textlet(TextletKind.BEGIN)
END = Textlet(TextletKind.END)


class TextletBag:
    """
    Growable table of textlets with a string -> id side index.

    The bag list owns the textlets; the index only maps their strings back
    to positions in it.
    """

    def __init__(self) -> None:
        self._bag: list[Textlet] = [BEGIN, END]
        self._index: dict[str, int] = {}

    def ensure(self, text: str) -> int:
        """Return the id of text, allocating the next id if it is new."""
        idx = self._index.get(text)
        if idx is None:
            idx = len(self._bag)
            self._bag.append(Textlet.of(text))
            self._index[text] = idx
        return idx

    def ensure_token(self, token: Token) -> int:
        """Intern a lexed token; sentinels map to their reserved ids."""
        if token.is_begin():
            return BEGIN_ID
        if token.is_end():
            return END_ID
        return self.ensure(token.text)

    def lookup(self, text: str) -> int | None:
        return self._index.get(text)

    def get(self, idx: int) -> Textlet | None:
        if 0 <= idx < len(self._bag):
            return self._bag[idx]
        return None

    def strings(self) -> list[str]:
        """The interned strings in id order, excluding the sentinels."""
        return [t.text for t in self._bag[2:]]

    def __contains__(self, text: object) -> bool:
        return text in self._index

    def __iter__(self) -> Iterator[Textlet]:
        return iter(self._bag)

    def __len__(self) -> int:
        return len(self._bag)
