"""
Tests for token lists.
"""

import pytest

from opexpr import (
    ARGUMENT_SEPARATOR,
    BUILTIN_TOKENS,
    CLOSE_BRACKET,
    OPEN_BRACKET,
    Token,
    TokenList,
    tokenize,
)

PLUS = Token("+")
QUESTION = Token("?")
COLON = Token(":")


def token_list_of(source: str, *extra: str) -> TokenList:
    """Helper to tokenize with extra fixed tokens."""
    return tokenize(source, tuple(Token(t) for t in extra) + BUILTIN_TOKENS)


class TestConstruction:
    """Tests for token list construction."""

    def test_requires_one_more_spacing_than_tokens(self):
        with pytest.raises(ValueError):
            TokenList("x", (Token("x"),), (0,))

    def test_empty(self):
        empty = TokenList.empty()
        assert empty.is_empty()
        assert len(empty) == 0
        assert empty.first() is None
        assert empty.last() is None


class TestPositions:
    """Tests for positions within the full expression."""

    def test_token_positions(self):
        token_list = token_list_of("(1 + 2) , 3", "+")
        assert token_list.token_position(0) == 0
        assert token_list.token_position(2) == 3
        assert token_list.token_position(6) == 10

    def test_position_skips_leading_spaces(self):
        token_list = token_list_of("   5")
        assert token_list.position == 3


class TestBrackets:
    """Tests for bracket detection."""

    def test_in_brackets(self):
        assert token_list_of("(1 + 2)", "+").is_in_brackets()

    def test_nested_brackets(self):
        assert token_list_of("((1) + (2))", "+").is_in_brackets()

    def test_separate_bracket_pairs(self):
        assert not token_list_of("(1) + (2)", "+").is_in_brackets()

    def test_no_brackets(self):
        assert not token_list_of("1 + 2", "+").is_in_brackets()


class TestSubLists:
    """Tests for slicing token lists."""

    def test_sub_list_keeps_text_and_offset(self):
        token_list = token_list_of("(1 + 2) , 3", "+")
        sub = token_list.sub_list(1, 4)
        assert list(sub) == list(token_list.tokens[1:4])
        assert sub.text == "1 + 2"
        assert sub.offset == 1
        assert sub.token_position(1) == 3

    def test_sub_list_rejects_bad_ranges(self):
        token_list = token_list_of("1 + 2", "+")
        with pytest.raises(IndexError):
            token_list.sub_list(-1, 2)
        with pytest.raises(IndexError):
            token_list.sub_list(0, 4)
        with pytest.raises(IndexError):
            token_list.sub_list(2, 1)

    def test_without_first_and_last(self):
        token_list = token_list_of("(1 + 2)", "+")
        inner = token_list.without_first_and_last()
        assert inner.trimmed_text == "1 + 2"
        assert token_list.without_first().first() == token_list[1]
        assert token_list.without_last().last() == token_list[-2]

    def test_queries(self):
        token_list = token_list_of("(1 + 2)", "+")
        assert token_list.starts_with(OPEN_BRACKET)
        assert token_list.ends_with(CLOSE_BRACKET)
        assert token_list.contains_any_of({PLUS})
        assert not token_list.contains_any_of({QUESTION})


class TestSplitBy:
    """Tests for splitting by a single token."""

    def test_splits_outside_brackets(self):
        token_list = token_list_of("(1 , 2) , 3", "+")
        parts = token_list.split_by(ARGUMENT_SEPARATOR)
        assert [part.trimmed_text for part in parts] == ["(1 , 2)", "3"]

    def test_keeps_spacing_text(self):
        token_list = token_list_of("(1 + 2) , 3", "+")
        parts = token_list.split_by(ARGUMENT_SEPARATOR)
        assert parts[0].text == "(1 + 2) "
        assert parts[1].text == " 3"
        assert parts[1].position == 10

    def test_allows_empty_parts(self):
        token_list = token_list_of("1,,2")
        parts = token_list.split_by(ARGUMENT_SEPARATOR)
        assert len(parts) == 3
        assert parts[1].is_empty()

    def test_no_occurrence(self):
        token_list = token_list_of("1 + 2", "+")
        parts = token_list.split_by(ARGUMENT_SEPARATOR)
        assert len(parts) == 1
        assert parts[0].text == "1 + 2"


class TestSplitBySequence:
    """Tests for splitting by a sequence of tokens."""

    def test_forward(self):
        token_list = token_list_of("1 ? 2 : 3 ? 4 : 5", "?", ":")
        parts = token_list.split_by_sequence([QUESTION, COLON])
        assert [part.trimmed_text for part in parts] == ["1", "2", "3 ? 4 : 5"]

    def test_reverse(self):
        token_list = token_list_of("1 ? 2 : 3 ? 4 : 5", "?", ":")
        parts = token_list.split_by_sequence_in_reverse([QUESTION, COLON])
        assert [part.trimmed_text for part in parts] == ["1 ? 2 : 3", "4", "5"]

    def test_ignores_bracketed_tokens(self):
        token_list = token_list_of("(1 ? 2 : 3) ? 4 : 5", "?", ":")
        parts = token_list.split_by_sequence([QUESTION, COLON])
        assert [part.trimmed_text for part in parts] == ["(1 ? 2 : 3)", "4", "5"]

    def test_missing_token(self):
        token_list = token_list_of("1 ? 2", "?", ":")
        assert token_list.split_by_sequence([QUESTION, COLON]) is None
        assert token_list.split_by_sequence_in_reverse([QUESTION, COLON]) is None


class TestSplitAtPoints:
    """Tests for splitting at token indices."""

    def test_splits_around_points(self):
        token_list = token_list_of("1 ? 2 : 3", "?", ":")
        parts = token_list.split_at_points([3, 1])
        assert [part.trimmed_text for part in parts] == ["1", "2", "3"]

    def test_duplicate_points(self):
        token_list = token_list_of("1 + 2", "+")
        parts = token_list.split_at_points([1, 1])
        assert [part.trimmed_text for part in parts] == ["1", "2"]

    def test_ignores_boundary_points(self):
        token_list = token_list_of("1 + 2", "+")
        parts = token_list.split_at_points([-1, 3])
        assert parts == [token_list]

    def test_rejects_out_of_range_points(self):
        token_list = token_list_of("1 + 2", "+")
        with pytest.raises(IndexError):
            token_list.split_at_points([5])
        with pytest.raises(IndexError):
            token_list.split_at_points([-3])
