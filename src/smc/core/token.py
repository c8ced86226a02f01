"""
Lexed tokens: words, punctuation runs, and the two sentence boundaries.

A token stream produced for some text recomposes into exactly that text.
Begin and End are zero-width.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable


class TokenKind(Enum):
    BEGIN = "begin"
    END = "end"
    WORD = "word"
    PUNCT = "punct"


@dataclass(frozen=True, slots=True)
class Token:
    """
    One lexed unit of a sentence.

    PUNCT covers any run of punctuation and/or whitespace, and may be the
    empty string at sentence boundaries.
    """
    kind: TokenKind
    text: str = ""

    @classmethod
    def begin(cls) -> Token:
        return cls(TokenKind.BEGIN)

    @classmethod
    def end(cls) -> Token:
        return cls(TokenKind.END)

    @classmethod
    def word(cls, text: str) -> Token:
        return cls(TokenKind.WORD, text)

    @classmethod
    def punct(cls, text: str) -> Token:
        return cls(TokenKind.PUNCT, text)

    def is_begin(self) -> bool:
        return self.kind is TokenKind.BEGIN

    def is_end(self) -> bool:
        return self.kind is TokenKind.END

    def is_word(self) -> bool:
        return self.kind is TokenKind.WORD

    def is_punct(self) -> bool:
        return self.kind is TokenKind.PUNCT

    def is_sentinel(self) -> bool:
        return self.kind in (TokenKind.BEGIN, TokenKind.END)

    def __str__(self) -> str:
        return self.text

    def __repr__(self) -> str:
        if self.is_sentinel():
            return f"Token.{self.kind.value}()"
        return f"Token.{self.kind.value}({self.text!r})"


def recompose(tokens: Iterable[Token]) -> str:
    """Concatenate the string views of tokens back into text."""
    return "".join(str(t) for t in tokens)
