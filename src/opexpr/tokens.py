"""
Token types and the token list produced by the tokenizer.

A TokenList pairs a sequence of tokens with the number of spaces before each
token (plus the trailing spaces), and the exact text it was produced from, so
that any slice of it can reproduce its original text for diagnostics.
"""

from dataclasses import dataclass, field
from typing import Collection, Iterator, List, Optional, Sequence, Tuple


@dataclass(frozen=True)
class Token:
    """A fixed token: an operator, a bracket, or other registered punctuation."""

    text: str

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class UntokenizedString(Token):
    """Raw text that hasn't been split by any fixed token."""


@dataclass(frozen=True)
class NumberToken(Token):
    """Raw text that parsed as a number literal."""

    value: float


OPEN_BRACKET = Token("(")
CLOSE_BRACKET = Token(")")
ARGUMENT_SEPARATOR = Token(",")

# Tokens present in every tokenizer, in registration order.
BUILTIN_TOKENS: Tuple[Token, ...] = (OPEN_BRACKET, CLOSE_BRACKET, ARGUMENT_SEPARATOR)


@dataclass(frozen=True)
class TokenList:
    """
    An immutable, sliceable sequence of tokens with spacing information.

    ``spacings[i]`` is the number of spaces immediately before ``tokens[i]``;
    the final element is the number of trailing spaces, so there is always
    one more spacing than there are tokens.
    """

    text: str
    """The exact text this token list covers."""

    tokens: Tuple[Token, ...]

    spacings: Tuple[int, ...]

    offset: int = 0
    """Character index of ``text`` within the full expression."""

    _boundaries: Tuple[int, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if len(self.spacings) != len(self.tokens) + 1:
            raise ValueError(
                f"Token list requires {len(self.tokens) + 1} spacings, got {len(self.spacings)}"
            )

        # boundaries[i] is the character index where spacings[i] begins.
        boundaries = [0]
        for spacing, token in zip(self.spacings, self.tokens):
            boundaries.append(boundaries[-1] + spacing + len(token.text))
        object.__setattr__(self, "_boundaries", tuple(boundaries))

    @classmethod
    def empty(cls, offset: int = 0) -> "TokenList":
        return cls("", (), (0,), offset)

    # ============================================================
    # State
    # ============================================================

    def __len__(self) -> int:
        return len(self.tokens)

    def __getitem__(self, index: int) -> Token:
        return self.tokens[index]

    def __iter__(self) -> Iterator[Token]:
        return iter(self.tokens)

    def is_empty(self) -> bool:
        return not self.tokens

    @property
    def trimmed_text(self) -> str:
        return self.text.strip()

    @property
    def position(self) -> int:
        """Character index in the full expression of the first non-space character."""
        return self.offset + self.spacings[0]

    def token_position(self, index: int) -> int:
        """Character index in the full expression of the token at ``index``."""
        return self.offset + self._boundaries[index] + self.spacings[index]

    def first(self) -> Optional[Token]:
        return self.tokens[0] if self.tokens else None

    def last(self) -> Optional[Token]:
        return self.tokens[-1] if self.tokens else None

    def starts_with(self, token: Token) -> bool:
        return self.first() == token

    def ends_with(self, token: Token) -> bool:
        return self.last() == token

    def contains_any_of(self, tokens: Collection[Token]) -> bool:
        return any(token in tokens for token in self.tokens)

    def is_in_brackets(self) -> bool:
        """
        Checks whether the first and last tokens are a matching pair of brackets.

        Assumes the token list contains no bracket mismatches.
        """
        if not self.tokens:
            return False

        if self.tokens[0] != OPEN_BRACKET or self.tokens[-1] != CLOSE_BRACKET:
            return False

        depth = 1
        for token in self.tokens[1:-1]:
            if token == OPEN_BRACKET:
                depth += 1
            elif token == CLOSE_BRACKET:
                depth -= 1
                if depth == 0:
                    return False

        return True

    def reconstruct_text(self) -> str:
        """Rebuilds the covered text from the tokens and spacings alone."""
        parts = []
        for spacing, token in zip(self.spacings, self.tokens):
            parts.append(" " * spacing)
            parts.append(token.text)
        parts.append(" " * self.spacings[-1])
        return "".join(parts)

    # ============================================================
    # Sub-lists
    # ============================================================

    def sub_list(self, start: int, end: int) -> "TokenList":
        """
        Returns the tokens from ``start`` (inclusive) to ``end`` (exclusive).

        The result keeps the spaces before its first token and after its last.
        """
        if start < 0:
            raise IndexError("start < 0")
        if end > len(self.tokens):
            raise IndexError("end > size")
        if start > end:
            raise IndexError("start > end")

        text_start = self._boundaries[start]
        text_end = self._boundaries[end] + self.spacings[end]
        return TokenList(
            self.text[text_start:text_end],
            self.tokens[start:end],
            self.spacings[start : end + 1],
            self.offset + text_start,
        )

    def without_first(self) -> "TokenList":
        if not self.tokens:
            return TokenList.empty(self.offset)
        return self.sub_list(1, len(self.tokens))

    def without_last(self) -> "TokenList":
        if not self.tokens:
            return TokenList.empty(self.offset)
        return self.sub_list(0, len(self.tokens) - 1)

    def without_first_and_last(self) -> "TokenList":
        if len(self.tokens) <= 1:
            return TokenList.empty(self.offset)
        return self.sub_list(1, len(self.tokens) - 1)

    # ============================================================
    # Splitting
    # ============================================================

    def split_by(self, token: Token) -> List["TokenList"]:
        """Splits at every occurrence of ``token`` outside of brackets."""
        parts: List[TokenList] = []
        last_match = -1
        depth = 0

        for i, current in enumerate(self.tokens):
            if current == OPEN_BRACKET:
                depth += 1
            elif current == CLOSE_BRACKET:
                depth -= 1
            elif depth == 0 and current == token:
                parts.append(self.sub_list(last_match + 1, i))
                last_match = i

        parts.append(self.sub_list(last_match + 1, len(self.tokens)))
        return parts

    def split_by_sequence(self, sequence: Sequence[Token]) -> Optional[List["TokenList"]]:
        """
        Splits at the first occurrences of the given tokens, in order, outside of brackets.

        Returns None if not every token of the sequence is found.
        """
        parts: List[TokenList] = []
        sequence_index = 0
        previous_split = -1
        depth = 0

        for i, current in enumerate(self.tokens):
            if current == OPEN_BRACKET:
                depth += 1
            elif current == CLOSE_BRACKET:
                depth -= 1
            elif depth == 0 and current == sequence[sequence_index]:
                parts.append(self.sub_list(previous_split + 1, i))
                previous_split = i
                sequence_index += 1
                if sequence_index == len(sequence):
                    break

        if sequence_index < len(sequence):
            return None

        parts.append(self.sub_list(previous_split + 1, len(self.tokens)))
        return parts

    def split_by_sequence_in_reverse(
        self, sequence: Sequence[Token]
    ) -> Optional[List["TokenList"]]:
        """
        Splits at the last occurrences of the given tokens, searching backwards.

        The tokens must still appear in the given order. Returns None if not
        every token of the sequence is found.
        """
        parts: List[TokenList] = []
        sequence_index = len(sequence) - 1
        previous_split = len(self.tokens)
        depth = 0

        for i in range(len(self.tokens) - 1, -1, -1):
            current = self.tokens[i]
            if current == CLOSE_BRACKET:
                depth += 1
            elif current == OPEN_BRACKET:
                depth -= 1
            elif depth == 0 and current == sequence[sequence_index]:
                parts.append(self.sub_list(i + 1, previous_split))
                previous_split = i
                sequence_index -= 1
                if sequence_index < 0:
                    break

        if sequence_index >= 0:
            return None

        parts.append(self.sub_list(0, previous_split))
        parts.reverse()
        return parts

    def split_at_points(self, points: Collection[int]) -> List["TokenList"]:
        """
        Splits around the tokens at the given indices, dropping those tokens.

        Points of -1 and ``len(self)`` are ignored; any other point outside
        that range raises IndexError.
        """
        cleaned = sorted(set(points) - {-1, len(self.tokens)})

        if not cleaned:
            return [self]

        if cleaned[0] < 0:
            raise IndexError("Split points must be between -1 and the token count")
        if cleaned[-1] > len(self.tokens):
            raise IndexError("Split points must be between -1 and the token count")

        parts: List[TokenList] = []
        previous = -1
        for point in cleaned:
            parts.append(self.sub_list(previous + 1, point))
            previous = point

        parts.append(self.sub_list(previous + 1, len(self.tokens)))
        return parts
