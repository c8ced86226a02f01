"""Lexer: text to Begin/Punct/Word/.../Punct/End token stream.

Characters fall into two classes:
  - ASCII punctuation or whitespace → punct
  - anything else → word

Runs of same-class characters become one token. The stream always starts
with Begin and ends with End, and a Punct token (possibly empty) always
sits between two words or between a word and a boundary:

    "Nice tea, mate."  →  Begin, "", Nice, " ", tea, ", ", mate, ".", End
    "lamb"             →  Begin, "", lamb, "", End
    ""                 →  Begin, "", End

Concatenating every token in order reproduces the input exactly.
"""
from __future__ import annotations

import string
from enum import Enum
from typing import Iterator

from ..core.token import Token

_ASCII_PUNCT = frozenset(string.punctuation)
# str.isspace() accepts these; they are not Unicode White_Space.
_SEPARATORS = frozenset("\x1c\x1d\x1e\x1f")


class LexState(Enum):
    BEGIN = "begin"
    PUNCT = "punct"
    WORD = "word"
    PRE_END = "pre_end"
    END = "end"
    EMPTY = "empty"


def is_punct_char(ch: str) -> bool:
    return ch in _ASCII_PUNCT or (ch.isspace() and ch not in _SEPARATORS)


class Lexer:
    """
    Forward-only token iterator over a string.

    Once End has been produced the lexer is exhausted for good; build a
    new Lexer to tokenize the same text again.
    """

    def __init__(self, text: str) -> None:
        self._text = text
        self._start = 0
        self._head = 0
        self._state = LexState.BEGIN

    def __iter__(self) -> Iterator[Token]:
        return self

    def _classify(self, ch: str | None) -> LexState:
        if ch is None:
            # Input ended: a word run still needs its trailing empty punct.
            if self._state is LexState.PUNCT:
                return LexState.END
            return LexState.PRE_END
        if is_punct_char(ch):
            return LexState.PUNCT
        return LexState.WORD

    def _emit_run(self) -> Token:
        run = self._text[self._start:self._head]
        if self._state is LexState.WORD:
            return Token.word(run)
        return Token.punct(run)

    def __next__(self) -> Token:
        state = self._state

        if state is LexState.EMPTY:
            raise StopIteration

        if state is LexState.BEGIN:
            # The first run is always read in a punct context, so text that
            # opens with a word yields an empty leading punct.
            self._state = LexState.PUNCT
            return Token.begin()

        if state is LexState.END:
            self._state = LexState.EMPTY
            return Token.end()

        if state is LexState.PRE_END:
            self._state = LexState.END
            return Token.punct("")

        text = self._text
        while True:
            ch = text[self._head] if self._head < len(text) else None
            ctype = self._classify(ch)

            if ctype is not self._state:
                token = self._emit_run()
                self._state = ctype
                self._start = self._head
                return token

            self._head += 1


def tokenize(text: str) -> list[Token]:
    """Tokenize text into a complete list of tokens, Begin to End."""
    return list(Lexer(text))


def words(text: str) -> list[str]:
    """The word tokens of text, in order."""
    return [t.text for t in Lexer(text) if t.is_word()]
