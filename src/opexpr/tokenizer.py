"""
Tokenizer (lexer) for expressions.

Splits an expression string by a configurable set of fixed tokens. Text left
over between fixed tokens is kept as untokenized strings, or converted to
number tokens where it reads as a number literal.
"""

import re
from typing import List, Optional, Sequence, Tuple

from .limits import ExpressionLimits, check_expression_length
from .tokens import BUILTIN_TOKENS, NumberToken, Token, TokenList, UntokenizedString

# Decimal float literals, plus the special values NaN and Infinity.
_NUMBER_PATTERN = re.compile(
    r"[+-]?(?:NaN|Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)"
)


def count_spaces_at_start(text: str) -> int:
    """Counts the spaces at the start of a string."""
    return len(text) - len(text.lstrip(" "))


def count_spaces_at_end(text: str) -> int:
    """Counts the spaces at the end of a string."""
    return len(text) - len(text.rstrip(" "))


def parse_number(text: str) -> Optional[float]:
    """Parses text as a number literal, or returns None if it isn't one."""
    stripped = text.strip()
    if not _NUMBER_PATTERN.fullmatch(stripped):
        return None
    return float(stripped)


def tokenize_with_single_token(text: str, splitter: Token) -> Tuple[List[Token], List[int]]:
    """
    Splits text by every occurrence of a single token.

    Returns the resulting tokens (untokenized strings and the splitter) and the
    spacings around them; the spacings list is one longer than the tokens list.
    """
    tokens: List[Token] = []
    spacings: List[int] = []

    def add_portion(portion: str) -> None:
        trimmed = portion.strip(" ")
        if not trimmed:
            spacings.append(len(portion))
            return
        spacings.append(count_spaces_at_start(portion))
        tokens.append(UntokenizedString(trimmed))
        spacings.append(count_spaces_at_end(portion))

    next_portion = 0
    index = text.find(splitter.text)

    while index != -1:
        add_portion(text[next_portion:index])
        tokens.append(splitter)
        next_portion = index + len(splitter.text)
        index = text.find(splitter.text, next_portion)

    add_portion(text[next_portion:])
    return tokens, spacings


def tokenize_numbers(tokens: List[Token]) -> None:
    """Replaces, in place, untokenized strings that read as numbers with number tokens."""
    for i, token in enumerate(tokens):
        if not isinstance(token, UntokenizedString):
            continue
        value = parse_number(token.text)
        if value is not None:
            tokens[i] = NumberToken(token.text, value)


class Tokenizer:
    """
    Tokenizer for expression strings.

    Fixed tokens are split in the order given. A token split earlier claims its
    text first, so where the text of one token contains another, the one that
    should win must come first.
    """

    def __init__(
        self,
        tokens: Sequence[Token] = BUILTIN_TOKENS,
        limits: Optional[ExpressionLimits] = None,
    ):
        self._tokens = tuple(token for token in tokens if token.text)
        self._limits = limits

    @property
    def tokens(self) -> Tuple[Token, ...]:
        return self._tokens

    def tokenize(self, source: str) -> TokenList:
        """Tokenizes the source expression."""
        check_expression_length(source, self._limits)

        trimmed = source.strip(" ")
        if not trimmed:
            return TokenList(source, (), (len(source),))

        tokens: List[Token] = [UntokenizedString(trimmed)]
        spacings: List[int] = [count_spaces_at_start(source), count_spaces_at_end(source)]

        for splitter in self._tokens:
            new_tokens: List[Token] = []
            new_spacings: List[int] = [spacings[0]]

            for token, spacing_after in zip(tokens, spacings[1:]):
                if isinstance(token, UntokenizedString):
                    split_tokens, split_spacings = tokenize_with_single_token(
                        token.text, splitter
                    )
                    # Untokenized strings are already trimmed, so the outer
                    # spacings of the split are always zero.
                    new_tokens.extend(split_tokens)
                    new_spacings.extend(split_spacings[1:-1])
                else:
                    new_tokens.append(token)
                new_spacings.append(spacing_after)

            tokens, spacings = new_tokens, new_spacings

        tokenize_numbers(tokens)
        return TokenList(source, tuple(tokens), tuple(spacings))


def tokenize(
    source: str,
    tokens: Sequence[Token] = BUILTIN_TOKENS,
    limits: Optional[ExpressionLimits] = None,
) -> TokenList:
    """
    Tokenizes an expression string into a token list.

    Args:
        source: The expression string to tokenize
        tokens: The fixed tokens to split by, in the order to split by them
        limits: Optional expression limits

    Returns:
        The token list covering the whole source

    Raises:
        LimitExceededError: If the expression is too long
    """
    tokenizer = Tokenizer(tokens, limits)
    return tokenizer.tokenize(source)
