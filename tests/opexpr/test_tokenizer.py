"""
Tests for the expression tokenizer.
"""

import math

import pytest

from opexpr import (
    BUILTIN_TOKENS,
    CLOSE_BRACKET,
    OPEN_BRACKET,
    ExpressionLimits,
    LimitExceededError,
    NumberToken,
    Token,
    Tokenizer,
    UntokenizedString,
    count_spaces_at_end,
    count_spaces_at_start,
    parse_number,
    tokenize,
    tokenize_numbers,
    tokenize_with_single_token,
)

PLUS = Token("+")


class TestSpaceCounting:
    """Tests for the spacing helpers."""

    def test_counts_leading_spaces(self):
        assert count_spaces_at_start("  a ") == 2

    def test_counts_trailing_spaces(self):
        assert count_spaces_at_end("  a ") == 1

    def test_only_spaces_count(self):
        assert count_spaces_at_start("\ta") == 0

    def test_empty_string(self):
        assert count_spaces_at_start("") == 0
        assert count_spaces_at_end("") == 0


class TestParseNumber:
    """Tests for number literal recognition."""

    def test_integer(self):
        assert parse_number("42") == 42.0

    def test_decimal(self):
        assert parse_number("2.5") == 2.5

    def test_leading_point(self):
        assert parse_number(".5") == 0.5

    def test_trailing_point(self):
        assert parse_number("5.") == 5.0

    def test_exponent(self):
        assert parse_number("1e3") == 1000.0
        assert parse_number("2.5E-1") == 0.25

    def test_signed(self):
        assert parse_number("-3") == -3.0

    def test_surrounding_whitespace_ignored(self):
        assert parse_number(" 7 ") == 7.0

    def test_special_values(self):
        assert math.isnan(parse_number("NaN"))
        assert parse_number("Infinity") == math.inf

    def test_rejects_non_numbers(self):
        assert parse_number("abc") is None
        assert parse_number("1.2.3") is None
        assert parse_number("") is None
        assert parse_number("inf") is None


class TestTokenizeWithSingleToken:
    """Tests for splitting by a single token."""

    def test_splits_around_token(self):
        tokens, spacings = tokenize_with_single_token("a+b", PLUS)
        assert tokens == [UntokenizedString("a"), PLUS, UntokenizedString("b")]
        assert spacings == [0, 0, 0, 0]

    def test_tracks_spacing(self):
        tokens, spacings = tokenize_with_single_token("a  + b", PLUS)
        assert tokens == [UntokenizedString("a"), PLUS, UntokenizedString("b")]
        assert spacings == [0, 2, 1, 0]

    def test_token_alone(self):
        tokens, spacings = tokenize_with_single_token("+", PLUS)
        assert tokens == [PLUS]
        assert spacings == [0, 0]

    def test_adjacent_tokens(self):
        tokens, spacings = tokenize_with_single_token("+ +", PLUS)
        assert tokens == [PLUS, PLUS]
        assert spacings == [0, 1, 0]

    def test_no_occurrence(self):
        tokens, spacings = tokenize_with_single_token("abc", PLUS)
        assert tokens == [UntokenizedString("abc")]
        assert spacings == [0, 0]


class TestTokenizeNumbers:
    """Tests for converting untokenized strings to number tokens."""

    def test_converts_numbers_in_place(self):
        tokens = [UntokenizedString("5"), PLUS, UntokenizedString("x")]
        tokenize_numbers(tokens)
        assert tokens == [NumberToken("5", 5.0), PLUS, UntokenizedString("x")]

    def test_leaves_fixed_tokens_alone(self):
        tokens = [Token("5")]
        tokenize_numbers(tokens)
        assert tokens == [Token("5")]


class TestTokenizer:
    """Tests for the tokenizer."""

    def test_tokenizes_simple_expression(self):
        token_list = tokenize("5 + 3", (PLUS,) + BUILTIN_TOKENS)
        assert list(token_list) == [NumberToken("5", 5.0), PLUS, NumberToken("3", 3.0)]

    def test_records_spacing(self):
        token_list = tokenize("  5 +  3 ", (PLUS,) + BUILTIN_TOKENS)
        assert token_list.spacings == (2, 1, 2, 1)

    def test_reproduces_source(self):
        sources = [
            "  5 +  3 ",
            "(1 + 2) , 3",
            "foo( a,b )+(  c)",
            "+",
            "++  +",
        ]
        for source in sources:
            token_list = tokenize(source, (PLUS,) + BUILTIN_TOKENS)
            assert token_list.reconstruct_text() == source
            assert token_list.text == source

    def test_brackets_and_separators(self):
        token_list = tokenize("f(1,2)")
        assert list(token_list) == [
            UntokenizedString("f"),
            OPEN_BRACKET,
            NumberToken("1", 1.0),
            Token(","),
            NumberToken("2", 2.0),
            CLOSE_BRACKET,
        ]

    def test_blank_source(self):
        token_list = tokenize("   ")
        assert len(token_list) == 0
        assert token_list.spacings == (3,)

    def test_empty_source(self):
        token_list = tokenize("")
        assert len(token_list) == 0
        assert token_list.spacings == (0,)

    def test_earlier_token_wins(self):
        token_list = tokenize("5+-3", (Token("+-"), PLUS))
        assert list(token_list) == [NumberToken("5", 5.0), Token("+-"), NumberToken("3", 3.0)]

    def test_later_token_loses(self):
        token_list = tokenize("5+-3", (PLUS, Token("+-")))
        assert len(token_list) == 3
        assert token_list[1] == PLUS
        assert token_list[2] == NumberToken("-3", -3.0)

    def test_multi_character_tokens(self):
        token_list = tokenize("a and b", (Token("and"),))
        assert list(token_list) == [
            UntokenizedString("a"),
            Token("and"),
            UntokenizedString("b"),
        ]

    def test_empty_tokens_ignored(self):
        tokenizer = Tokenizer((Token(""), PLUS))
        assert tokenizer.tokens == (PLUS,)

    def test_rejects_overlong_source(self):
        limits = ExpressionLimits(max_expression_length=5)
        with pytest.raises(LimitExceededError) as exc_info:
            tokenize("1 + 2 + 3", limits=limits)
        assert exc_info.value.limit_name == "max_expression_length"
        assert exc_info.value.actual == 9
