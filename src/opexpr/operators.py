"""
Operator definitions and the lookup structures used to match them.

Operators are grouped by priority. Each OperatorPriorityGroup holds its prefix
and postfix operators by token, and its infix operators in token tries, one
per associativity, so that partially-matched multi-token operators can be
followed while scanning a token list.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Iterator, List, Optional, Sequence, Set, Tuple

from .tokens import BUILTIN_TOKENS, Token

logger = logging.getLogger("opexpr.operators")

# Signature of an operator action. Operands are passed positionally.
OperatorAction = Callable[..., float]

DEFAULT_PRIORITY = 0.0


class Associativity(Enum):
    """Grouping of repeated infix operators of the same priority."""

    LEFT = "LEFT"
    RIGHT = "RIGHT"


# ============================================================
# Operators
# ============================================================


@dataclass(frozen=True)
class Operator:
    """Base class for all operators."""

    tokens: Tuple[Token, ...]
    priority: float
    action: OperatorAction

    @property
    def operand_count(self) -> int:
        return 1

    def apply(self, operands: Sequence[float]) -> float:
        return self.action(*operands)

    def describe(self) -> str:
        return " ".join(token.text for token in self.tokens)


@dataclass(frozen=True)
class PrefixOperator(Operator):
    """Unary operator written before its operand."""

    @property
    def token(self) -> Token:
        return self.tokens[0]

    def describe(self) -> str:
        return f"{self.token.text}x"


@dataclass(frozen=True)
class PostfixOperator(Operator):
    """Unary operator written after its operand."""

    @property
    def token(self) -> Token:
        return self.tokens[0]

    def describe(self) -> str:
        return f"x{self.token.text}"


@dataclass(frozen=True)
class InfixOperator(Operator):
    """
    Operator written between its operands.

    An infix operator with N tokens takes N + 1 operands, so a single token
    makes a binary operator and two tokens make a ternary operator.
    """

    associativity: Associativity = Associativity.LEFT

    @property
    def operand_count(self) -> int:
        return len(self.tokens) + 1

    @property
    def is_left_associative(self) -> bool:
        return self.associativity is Associativity.LEFT

    def describe(self) -> str:
        parts = ["x"]
        for token in self.tokens:
            parts.extend((token.text, "x"))
        return " ".join(parts)


# ============================================================
# Token Trie
# ============================================================


class TokenTrie:
    """Prefix tree of infix operators, keyed by their token sequences."""

    def __init__(self) -> None:
        self.item: Optional[InfixOperator] = None
        self.children: Dict[Token, "TokenTrie"] = {}

    def set_at(self, tokens: Sequence[Token], item: InfixOperator) -> None:
        node = self
        for token in tokens:
            node = node.children.setdefault(token, TokenTrie())
        node.item = item

    def get_at(self, tokens: Sequence[Token]) -> Optional[InfixOperator]:
        node: Optional[TokenTrie] = self
        for token in tokens:
            node = node.children.get(token)
            if node is None:
                return None
        return node.item

    def has_root_item(self) -> bool:
        return self.item is not None

    def is_empty(self) -> bool:
        return self.item is None and all(c.is_empty() for c in self.children.values())

    def has_items_at_or_under(self, token: Token) -> bool:
        child = self.children.get(token)
        return child is not None and not child.is_empty()

    def get_branch(self, token: Token) -> "TokenTrie":
        return self.children[token]

    def items(self) -> Iterator[Tuple[Tuple[Token, ...], InfixOperator]]:
        """Yields every (token path, operator) pair in the trie."""
        if self.item is not None:
            yield (), self.item
        for token, child in self.children.items():
            for path, item in child.items():
                yield (token,) + path, item

    def with_reversed_keys(self) -> "TokenTrie":
        """Returns a new trie holding the same operators, keyed by their reversed token paths."""
        reversed_trie = TokenTrie()
        for path, item in self.items():
            reversed_trie.set_at(tuple(reversed(path)), item)
        return reversed_trie


# ============================================================
# Priority Groups
# ============================================================


class OperatorPriorityGroup:
    """All operators sharing a single priority."""

    def __init__(self, priority: float):
        self.priority = priority
        self.prefix_operators: Dict[Token, PrefixOperator] = {}
        self.postfix_operators: Dict[Token, PostfixOperator] = {}
        self.left_associative: TokenTrie = TokenTrie()
        self.right_associative: TokenTrie = TokenTrie()
        self._left_associative_reversed: Optional[TokenTrie] = None

    @property
    def left_associative_reversed(self) -> TokenTrie:
        """The left-associative trie keyed by reversed token paths, for backward scans."""
        if self._left_associative_reversed is None:
            self._left_associative_reversed = self.left_associative.with_reversed_keys()
        return self._left_associative_reversed

    def add(self, operator: Operator) -> None:
        if isinstance(operator, PrefixOperator):
            self.prefix_operators[operator.token] = operator
        elif isinstance(operator, PostfixOperator):
            self.postfix_operators[operator.token] = operator
        elif isinstance(operator, InfixOperator):
            trie = self.left_associative if operator.is_left_associative else self.right_associative
            trie.set_at(operator.tokens, operator)
            self._left_associative_reversed = None
        else:
            raise TypeError(f"Unrecognised operator type: {type(operator).__name__}")


class OperatorRegistry:
    """
    Registered operators and tokens, with lazily rebuilt priority groups.

    Registering an operator marks the priority groups stale; they are rebuilt
    the next time they're requested.
    """

    def __init__(self) -> None:
        self._tokens_in_order: List[Token] = list(BUILTIN_TOKENS)
        self._known_tokens: Set[Token] = set(BUILTIN_TOKENS)
        self.operator_tokens: Set[Token] = set()
        self.infix_operator_tokens: Set[Token] = set()
        self.prefix_operators: Dict[Token, PrefixOperator] = {}
        self.postfix_operators: Dict[Token, PostfixOperator] = {}
        self.infix_operators: Dict[Tuple[Token, ...], InfixOperator] = {}
        self._groups: Optional[List[OperatorPriorityGroup]] = None

    @property
    def tokens(self) -> Tuple[Token, ...]:
        """Every registered token, in registration order."""
        return tuple(self._tokens_in_order)

    @property
    def is_stale(self) -> bool:
        return self._groups is None

    def add_token(self, token: Token) -> None:
        if token not in self._known_tokens:
            self._known_tokens.add(token)
            self._tokens_in_order.append(token)
            self.operator_tokens.add(token)

    def add(self, operator: Operator) -> None:
        self._groups = None

        if isinstance(operator, PrefixOperator):
            self.prefix_operators[operator.token] = operator
        elif isinstance(operator, PostfixOperator):
            self.postfix_operators[operator.token] = operator
        elif isinstance(operator, InfixOperator):
            self.infix_operators[operator.tokens] = operator
            self.infix_operator_tokens.update(operator.tokens)
        else:
            raise TypeError(f"Unrecognised operator type: {type(operator).__name__}")

        for token in operator.tokens:
            self.add_token(token)

    def groups(self) -> List[OperatorPriorityGroup]:
        """Returns the priority groups in ascending priority order, rebuilding them if stale."""
        if self._groups is None:
            by_priority: Dict[float, OperatorPriorityGroup] = {}
            operators: List[Operator] = [
                *self.prefix_operators.values(),
                *self.postfix_operators.values(),
                *self.infix_operators.values(),
            ]
            for operator in operators:
                group = by_priority.get(operator.priority)
                if group is None:
                    group = by_priority[operator.priority] = OperatorPriorityGroup(operator.priority)
                group.add(operator)

            self._groups = [by_priority[p] for p in sorted(by_priority)]
            logger.debug(
                "operator_groups_rebuilt",
                extra={"group_count": len(self._groups), "operator_count": len(operators)},
            )
        return self._groups
