"""Tests for smc.core.textlet."""
from smc.core.textlet import BEGIN, BEGIN_ID, END, END_ID, Textlet, TextletBag, TextletKind
from smc.core.token import Token


class TestTextletBag:
    def test_starts_with_sentinels(self):
        bag = TextletBag()
        assert len(bag) == 2
        assert bag.get(BEGIN_ID) == BEGIN
        assert bag.get(END_ID) == END
        assert bag.strings() == []

    def test_ids_in_first_seen_order(self):
        bag = TextletBag()
        assert bag.ensure("") == 2
        assert bag.ensure("Mary") == 3
        assert bag.ensure(" ") == 4

    def test_ensure_is_stable(self):
        bag = TextletBag()
        first = bag.ensure("lamb")
        assert bag.ensure("lamb") == first
        assert bag.ensure("ewe") != first
        assert len(bag) == 4

    def test_lookup_does_not_insert(self):
        bag = TextletBag()
        assert bag.lookup("missing") is None
        assert "missing" not in bag
        assert len(bag) == 2

    def test_get_out_of_range(self):
        bag = TextletBag()
        assert bag.get(2) is None
        assert bag.get(-1) is None

    def test_ensure_token(self):
        bag = TextletBag()
        assert bag.ensure_token(Token.begin()) == BEGIN_ID
        assert bag.ensure_token(Token.end()) == END_ID
        idx = bag.ensure_token(Token.word("hat"))
        assert bag.ensure_token(Token.word("hat")) == idx
        assert bag.get(idx) == Textlet.of("hat")


class TestTextlet:
    def test_length_and_text(self):
        t = Textlet.of("tea")
        assert len(t) == 3
        assert str(t) == "tea"
        assert t.kind is TextletKind.TEXT
        assert not t.is_sentinel()

    def test_sentinels(self):
        assert BEGIN.is_sentinel()
        assert END.is_sentinel()
        assert len(BEGIN) == 0
        assert str(END) == ""
