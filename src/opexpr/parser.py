"""
Parser for expressions.

Parses a token list into an Abstract Syntax Tree (AST) by recursive descent.
Each section of the token list is tried, in order, as a variable reference, a
function call, an operation, and a number literal; the first that matches wins.

Operations are matched by priority group, lowest priority first, so that the
loosest-binding operator ends up at the root of the tree. Within a group,
right-associative infix operators are tried before left-associative ones,
then prefix, then postfix operators.
"""

from typing import Collection, List, Optional, Tuple

from .ast import (
    AstNode,
    FunctionCallNode,
    NumberLiteralNode,
    OperationNode,
    VariableReferenceNode,
    count_ast_nodes,
)
from .errors import (
    EmptyFunctionArgumentError,
    LeadingArgumentSeparatorError,
    LeadingNonPrefixOperatorError,
    TrailingArgumentSeparatorError,
    TrailingNonPostfixOperatorError,
    UnparsableExpressionError,
    UnrecognisedFunctionError,
)
from .limits import (
    DEFAULT_EXPRESSION_LIMITS,
    ExpressionLimits,
    check_ast_depth,
    check_ast_node_count,
    check_function_arg_count,
)
from .operators import InfixOperator, OperatorPriorityGroup, OperatorRegistry, TokenTrie
from .tokenizer import parse_number
from .tokens import ARGUMENT_SEPARATOR, CLOSE_BRACKET, OPEN_BRACKET, TokenList


class Parser:
    """Parser for tokenized expressions."""

    def __init__(
        self,
        operators: OperatorRegistry,
        variables: Collection[str],
        functions: Collection[str],
        source: str,
        limits: ExpressionLimits = DEFAULT_EXPRESSION_LIMITS,
    ):
        self._operators = operators
        self._groups: List[OperatorPriorityGroup] = operators.groups()
        self._variables = variables
        self._functions = functions
        self._source = source
        self._limits = limits
        self._depth = 0

    def parse(self, token_list: TokenList) -> AstNode:
        """Parses a token list covering the whole source into an AST."""
        ast = self._parse(token_list)
        check_ast_node_count(
            count_ast_nodes(ast), self._limits, token_list.position, self._source
        )
        return ast

    def _parse(self, token_list: TokenList) -> AstNode:
        self._depth += 1
        try:
            check_ast_depth(self._depth, self._limits, token_list.position, self._source)
            return self._parse_section(token_list)
        finally:
            self._depth -= 1

    def _parse_section(self, token_list: TokenList) -> AstNode:
        first = token_list.first()
        if (
            first in self._operators.operator_tokens
            and first not in self._operators.prefix_operators
        ):
            raise LeadingNonPrefixOperatorError(
                first.text, self._source, token_list.token_position(0)
            )

        last = token_list.last()
        if (
            last in self._operators.operator_tokens
            and last not in self._operators.postfix_operators
        ):
            raise TrailingNonPostfixOperatorError(
                last.text, self._source, token_list.token_position(len(token_list) - 1)
            )

        if token_list.is_in_brackets():
            return self._parse(token_list.without_first_and_last())

        node = (
            self._try_parse_variable(token_list)
            or self._try_parse_function_call(token_list)
            or self._try_parse_operation(token_list)
            or self._try_parse_number(token_list)
        )

        if node is None:
            raise UnparsableExpressionError(
                self._source, token_list.text, token_list.position
            )

        return node

    # ============================================================
    # Operator Token Helpers
    # ============================================================

    def _operator_run(self, token_list: TokenList, index: int) -> Tuple[int, int]:
        """Returns the first and last index of the run of operator tokens around ``index``."""
        operator_tokens = self._operators.operator_tokens

        start = index
        while start > 0 and token_list[start - 1] in operator_tokens:
            start -= 1

        end = index
        while end < len(token_list) - 1 and token_list[end + 1] in operator_tokens:
            end += 1

        return start, end

    def _can_be_infix_operator_token(self, token_list: TokenList, index: int) -> bool:
        """
        Checks whether the token at ``index`` may be read as (part of) an infix operator.

        It may where there are operands on both sides of its run of operator
        tokens, every token before it in that run can be a postfix operator, and
        every token after it can be a prefix operator.
        """
        if index == 0 or index == len(token_list) - 1:
            return False

        start, end = self._operator_run(token_list, index)
        if start == 0 or end == len(token_list) - 1:
            return False

        for i in range(start, index):
            if token_list[i] not in self._operators.postfix_operators:
                return False

        for i in range(index + 1, end + 1):
            if token_list[i] not in self._operators.prefix_operators:
                return False

        return True

    def _is_infix_candidate(self, token_list: TokenList, index: int) -> bool:
        return token_list[index] in self._operators.infix_operator_tokens and (
            self._can_be_infix_operator_token(token_list, index)
        )

    # ============================================================
    # Variables and Functions
    # ============================================================

    def _try_parse_variable(self, token_list: TokenList) -> Optional[AstNode]:
        name = token_list.trimmed_text
        if name not in self._variables:
            return None
        return VariableReferenceNode(position=token_list.position, name=name)

    def _try_parse_function_call(self, token_list: TokenList) -> Optional[AstNode]:
        # Needs at least a name, "(" and ")".
        if len(token_list) < 3 or token_list.last() != CLOSE_BRACKET:
            return None

        open_index = None
        for i in range(1, len(token_list) - 1):
            if token_list[i] == OPEN_BRACKET:
                open_index = i
                break

        if open_index is None:
            return None

        # The first open bracket must be the one closed by the last token.
        if not token_list.sub_list(open_index, len(token_list)).is_in_brackets():
            return None

        name = token_list.sub_list(0, open_index).trimmed_text
        if name not in self._functions:
            if token_list.contains_any_of(self._operators.operator_tokens):
                return None
            raise UnrecognisedFunctionError(
                name, self._source, token_list.text, token_list.position
            )

        arg_list = token_list.sub_list(open_index + 1, len(token_list) - 1)
        args: List[AstNode] = []

        if not arg_list.is_empty():
            if arg_list.starts_with(ARGUMENT_SEPARATOR):
                raise LeadingArgumentSeparatorError(
                    name, self._source, token_list.text, arg_list.token_position(0)
                )

            if arg_list.ends_with(ARGUMENT_SEPARATOR):
                raise TrailingArgumentSeparatorError(
                    name,
                    self._source,
                    token_list.text,
                    arg_list.token_position(len(arg_list) - 1),
                )

            arg_token_lists = arg_list.split_by(ARGUMENT_SEPARATOR)
            check_function_arg_count(
                len(arg_token_lists), self._limits, token_list.position, self._source
            )

            for arg_token_list in arg_token_lists:
                if arg_token_list.is_empty():
                    raise EmptyFunctionArgumentError(
                        name, self._source, token_list.text, arg_token_list.offset
                    )
                args.append(self._parse(arg_token_list))

        return FunctionCallNode(position=token_list.position, name=name, args=tuple(args))

    # ============================================================
    # Operations
    # ============================================================

    def _try_parse_operation(self, token_list: TokenList) -> Optional[AstNode]:
        for group_index, group in enumerate(self._groups):
            node = (
                self._try_parse_right_associative(token_list, group, group_index)
                or self._try_parse_left_associative(token_list, group, group_index)
                or self._try_parse_prefix(token_list, group)
                or self._try_parse_postfix(token_list, group)
            )
            if node is not None:
                return node
        return None

    def _try_parse_right_associative(
        self, token_list: TokenList, group: OperatorPriorityGroup, group_index: int
    ) -> Optional[AstNode]:
        trie = group.right_associative
        if trie.is_empty():
            return None

        points = self._find_right_associative_points(token_list, trie, 0)
        if points is None:
            return None

        if self._is_nested_in_enclosing_operation(token_list, points, group_index, True):
            return None

        operator = trie.get_at([token_list[p] for p in points])
        return self._build_infix_operation(token_list, operator, points)

    def _try_parse_left_associative(
        self, token_list: TokenList, group: OperatorPriorityGroup, group_index: int
    ) -> Optional[AstNode]:
        trie = group.left_associative
        if trie.is_empty():
            return None

        points = self._find_left_associative_points(
            token_list, group.left_associative_reversed, len(token_list) - 1
        )
        if points is None:
            return None

        if self._is_nested_in_enclosing_operation(token_list, points, group_index, False):
            return None

        operator = trie.get_at([token_list[p] for p in points])
        return self._build_infix_operation(token_list, operator, points)

    def _try_parse_prefix(
        self, token_list: TokenList, group: OperatorPriorityGroup
    ) -> Optional[AstNode]:
        operator = group.prefix_operators.get(token_list.first())
        if operator is None or len(token_list) < 2:
            return None

        operand = self._parse(token_list.without_first())
        return OperationNode(
            position=token_list.position, operator=operator, operands=(operand,)
        )

    def _try_parse_postfix(
        self, token_list: TokenList, group: OperatorPriorityGroup
    ) -> Optional[AstNode]:
        operator = group.postfix_operators.get(token_list.last())
        if operator is None or len(token_list) < 2:
            return None

        operand = self._parse(token_list.without_last())
        return OperationNode(
            position=token_list.token_position(len(token_list) - 1),
            operator=operator,
            operands=(operand,),
        )

    def _build_infix_operation(
        self, token_list: TokenList, operator: InfixOperator, points: List[int]
    ) -> AstNode:
        operands = [self._parse(part) for part in token_list.split_at_points(points)]
        return OperationNode(
            position=token_list.token_position(points[0]),
            operator=operator,
            operands=tuple(operands),
        )

    # ============================================================
    # Infix Operator Scanning
    # ============================================================

    def _find_right_associative_points(
        self,
        token_list: TokenList,
        trie: TokenTrie,
        start: int,
        skip_from: int = 0,
        skip_to: int = 0,
    ) -> Optional[List[int]]:
        """
        Scans forwards for the leftmost complete match of an operator in ``trie``.

        Returns the indices of the matched operator's tokens, or None. Complete
        matches of other operators from the same trie found along the way are
        skipped over whole, as they're nested within the operator being matched.
        Indices in ``[skip_from, skip_to)`` are ignored.
        """
        branch = trie
        depth = 0
        points: List[int] = []
        i = start

        while i < len(token_list):
            if skip_from <= i < skip_to:
                i += 1
                continue

            token = token_list[i]

            if token == OPEN_BRACKET:
                depth += 1
            elif token == CLOSE_BRACKET:
                depth -= 1
            elif depth == 0 and self._is_infix_candidate(token_list, i):
                if branch.has_items_at_or_under(token):
                    points.append(i)
                    branch = branch.get_branch(token)

                    if branch.has_root_item():
                        rest = self._find_right_associative_points(
                            token_list, branch, i + 1, skip_from, skip_to
                        )
                        if rest is not None:
                            points.extend(rest)
                        return points

                elif trie.has_items_at_or_under(token):
                    nested = self._find_right_associative_points(
                        token_list, trie, i, skip_from, skip_to
                    )
                    if nested is not None:
                        i = nested[-1]

            i += 1

        return None

    def _find_left_associative_points(
        self,
        token_list: TokenList,
        reversed_trie: TokenTrie,
        start: int,
        skip_from: int = 0,
        skip_to: int = 0,
    ) -> Optional[List[int]]:
        """
        Scans backwards for the rightmost complete match of an operator.

        ``reversed_trie`` is keyed by each operator's tokens in reverse order.
        Otherwise this mirrors ``_find_right_associative_points``.
        """
        branch = reversed_trie
        depth = 0
        points: List[int] = []
        i = start

        while i >= 0:
            if skip_from <= i < skip_to:
                i -= 1
                continue

            token = token_list[i]

            if token == CLOSE_BRACKET:
                depth += 1
            elif token == OPEN_BRACKET:
                depth -= 1
            elif depth == 0 and self._is_infix_candidate(token_list, i):
                if branch.has_items_at_or_under(token):
                    points.insert(0, i)
                    branch = branch.get_branch(token)

                    if branch.has_root_item():
                        rest = self._find_left_associative_points(
                            token_list, branch, i - 1, skip_from, skip_to
                        )
                        if rest is not None:
                            points[0:0] = rest
                        return points

                elif reversed_trie.has_items_at_or_under(token):
                    nested = self._find_left_associative_points(
                        token_list, reversed_trie, i, skip_from, skip_to
                    )
                    if nested is not None:
                        i = nested[0]

            i -= 1

        return None

    def _is_nested_in_enclosing_operation(
        self,
        token_list: TokenList,
        points: List[int],
        group_index: int,
        check_left_associative_of_same_group: bool,
    ) -> bool:
        """
        Checks whether a matched infix operator sits inside one that binds tighter.

        Looks outside the matched operator's tokens for an operator of a higher
        priority group, or for a right-associative match a left-associative
        operator of the same group, whose tokens fall on both sides of it.
        """
        first_point = points[0]
        last_point = points[-1]
        skip_from = self._operator_run(token_list, first_point)[0]
        skip_to = self._operator_run(token_list, last_point)[1] + 1
        last_index = len(token_list) - 1

        def encloses(candidate: Optional[List[int]]) -> bool:
            return (
                candidate is not None
                and candidate[0] < first_point
                and candidate[-1] > last_point
            )

        # Operators of the same group and associativity never need checking:
        # the outer one of a nested pair is always matched first.
        if check_left_associative_of_same_group:
            group = self._groups[group_index]
            if not group.left_associative.is_empty() and encloses(
                self._find_left_associative_points(
                    token_list, group.left_associative_reversed, last_index, skip_from, skip_to
                )
            ):
                return True

        for group in self._groups[group_index + 1 :]:
            if not group.right_associative.is_empty() and encloses(
                self._find_right_associative_points(
                    token_list, group.right_associative, 0, skip_from, skip_to
                )
            ):
                return True

            if not group.left_associative.is_empty() and encloses(
                self._find_left_associative_points(
                    token_list, group.left_associative_reversed, last_index, skip_from, skip_to
                )
            ):
                return True

        return False

    # ============================================================
    # Numbers
    # ============================================================

    def _try_parse_number(self, token_list: TokenList) -> Optional[AstNode]:
        value = parse_number(token_list.text)
        if value is None:
            return None
        return NumberLiteralNode(position=token_list.position, value=value)
