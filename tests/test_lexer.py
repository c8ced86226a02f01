"""Tests for smc.engine.lexer."""
import pytest

from smc.core.token import Token, TokenKind, recompose
from smc.engine.lexer import Lexer, is_punct_char, tokenize, words

SAMPLES = [
    "",
    "a",
    ".",
    "Nice tea, mate.",
    "[ITEM] Avocado - sweet",
    "  leading and trailing  ",
    "Mary had a little lamb",
    "What?!  Really...",
    "tabs\tand\nnewlines",
    "café au lait — s'il vous plaît",
    "123 go-go 4.5",
    "!!!",
]


class TestLexer:
    def test_split_sentence(self):
        lexer = Lexer("Nice tea, mate.")
        assert next(lexer) == Token.begin()
        assert next(lexer) == Token.punct("")
        assert next(lexer) == Token.word("Nice")
        assert next(lexer) == Token.punct(" ")
        assert next(lexer) == Token.word("tea")
        assert next(lexer) == Token.punct(", ")
        assert next(lexer) == Token.word("mate")
        assert next(lexer) == Token.punct(".")
        assert next(lexer) == Token.end()
        assert next(lexer, None) is None
        assert next(lexer, None) is None

    def test_split_sentence_ending_in_word(self):
        assert tokenize("[ITEM] Avocado - sweet") == [
            Token.begin(),
            Token.punct("["),
            Token.word("ITEM"),
            Token.punct("] "),
            Token.word("Avocado"),
            Token.punct(" - "),
            Token.word("sweet"),
            Token.punct(""),
            Token.end(),
        ]

    def test_empty_input(self):
        assert tokenize("") == [Token.begin(), Token.punct(""), Token.end()]

    def test_single_word(self):
        assert tokenize("lamb") == [
            Token.begin(), Token.punct(""), Token.word("lamb"), Token.punct(""), Token.end(),
        ]

    def test_only_punctuation(self):
        assert tokenize("!!!") == [Token.begin(), Token.punct("!!!"), Token.end()]

    def test_exhausted_after_end(self):
        lexer = Lexer("hi")
        assert list(lexer)[-1] == Token.end()
        with pytest.raises(StopIteration):
            next(lexer)
        assert list(lexer) == []

    def test_non_ascii_punctuation_is_word(self):
        # Only ASCII punctuation and whitespace separate words.
        assert words("a—b «c»") == ["a—b", "«c»"]

    def test_unicode_whitespace_separates(self):
        assert words("a b") == ["a", "b"]

    @pytest.mark.parametrize("sep", ["\x1c", "\x1d", "\x1e", "\x1f"])
    def test_information_separators_are_word_chars(self, sep):
        assert words(f"a{sep}b") == [f"a{sep}b"]

    @pytest.mark.parametrize("text", SAMPLES)
    def test_round_trip(self, text):
        assert recompose(Lexer(text)) == text

    @pytest.mark.parametrize("text", SAMPLES)
    def test_alternation(self, text):
        tokens = tokenize(text)
        assert tokens[0] == Token.begin()
        assert tokens[-1] == Token.end()
        inner = tokens[1:-1]
        assert len(inner) % 2 == 1
        for i, token in enumerate(inner):
            expected = TokenKind.PUNCT if i % 2 == 0 else TokenKind.WORD
            assert token.kind is expected

    @pytest.mark.parametrize("text", SAMPLES)
    def test_no_empty_words(self, text):
        assert all(t.text for t in tokenize(text) if t.is_word())


class TestHelpers:
    def test_is_punct_char(self):
        assert is_punct_char(",")
        assert is_punct_char(" ")
        assert is_punct_char("\n")
        assert not is_punct_char("a")
        assert not is_punct_char("é")
        assert not is_punct_char("\x1f")
        assert is_punct_char("\x85")

    def test_words(self):
        assert words("Nice tea, mate.") == ["Nice", "tea", "mate"]
        assert words("") == []
        assert words("... ,") == []
