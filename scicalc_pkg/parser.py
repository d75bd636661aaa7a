"""Recursive-descent parser producing the calculator AST.

Precedence, lowest to highest::

    statement      := VAR '=' expression | expression ['→' VAR] | expression
    expression     := multiplicative (('+' | '-') multiplicative)*
    multiplicative := unary (('×' | '÷') unary)*
    unary          := ('-' | '+') unary | power
    power          := postfix ['^' unary]            (right-associative)
    postfix        := primary ('!' | '²' | '³' | '⁻¹' | '%')*
    primary        := NUMBER | CONSTANT | VAR | FUNC '(' args ')'
                    | '(' expression ')' | ('√' | '∛') ('-' | '+')* postfix

The parser only checks shape and arity. Domain problems such as the square
root of a negative number are left to the evaluator.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from .config import ANS_IDENTIFIER
from .config import MAX_NESTING_DEPTH
from .logging_config import get_logger
from .tokenizer import Token
from .tokenizer import TokenKind
from .tokenizer import tokenize
from .types import CalcSyntaxError
from .types import SyntaxReason

logger = get_logger("parser")


class UnaryKind(Enum):
    NEGATE = "neg"
    FACTORIAL = "!"
    SQUARE = "²"
    CUBE = "³"
    RECIPROCAL = "⁻¹"
    PERCENT = "%"
    SQRT = "√"
    CBRT = "∛"


class BinaryKind(Enum):
    ADD = "+"
    SUB = "-"
    MUL = "×"
    DIV = "÷"
    POW = "^"


@dataclass(frozen=True)
class Literal:
    value: float


@dataclass(frozen=True)
class VariableRef:
    name: str


@dataclass(frozen=True)
class UnaryOp:
    kind: UnaryKind
    operand: "Node"


@dataclass(frozen=True)
class BinaryOp:
    kind: BinaryKind
    left: "Node"
    right: "Node"


@dataclass(frozen=True)
class FunctionCall:
    name: str
    args: tuple["Node", ...]


@dataclass(frozen=True)
class Assignment:
    """STO: evaluate ``value`` and write it into register ``target``."""

    target: str
    value: "Node"


Node = Union[Literal, VariableRef, UnaryOp, BinaryOp, FunctionCall, Assignment]

_POSTFIX_KINDS = {
    "!": UnaryKind.FACTORIAL,
    "²": UnaryKind.SQUARE,
    "³": UnaryKind.CUBE,
    "⁻¹": UnaryKind.RECIPROCAL,
    "%": UnaryKind.PERCENT,
}
_PREFIX_KINDS = {"√": UnaryKind.SQRT, "∛": UnaryKind.CBRT}
_ADDITIVE = {"+": BinaryKind.ADD, "-": BinaryKind.SUB}
_MULTIPLICATIVE = {"×": BinaryKind.MUL, "÷": BinaryKind.DIV}


class Parser:
    """Parses one token sequence. Instances are single-use."""

    def __init__(self, tokens: list[Token], max_depth: int | None = None):
        self.tokens = tokens
        self.pos = 0
        self.max_depth = MAX_NESTING_DEPTH if max_depth is None else max_depth
        self._depth = 0
        self._open_parens = 0

    # -- token helpers -------------------------------------------------

    def _peek(self, offset: int = 0) -> Token | None:
        index = self.pos + offset
        if index < len(self.tokens):
            return self.tokens[index]
        return None

    def _advance(self) -> Token:
        token = self.tokens[self.pos]
        self.pos += 1
        return token

    def _at_operator(self, symbols) -> bool:
        token = self._peek()
        return (
            token is not None
            and token.kind == TokenKind.OPERATOR
            and token.value in symbols
        )

    def _error(self, reason: SyntaxReason, message: str) -> CalcSyntaxError:
        token = self._peek()
        position = token.position if token is not None else None
        return CalcSyntaxError(reason, message, position=position)

    def _end_of_input_error(self) -> CalcSyntaxError:
        if self._open_parens > 0:
            return self._error(
                SyntaxReason.UNTERMINATED_PAREN, "Missing closing parenthesis"
            )
        return self._error(SyntaxReason.MISSING_OPERAND, "Expression ends early")

    def _enter(self) -> None:
        self._depth += 1
        if self._depth > self.max_depth:
            raise self._error(
                SyntaxReason.NESTING_TOO_DEEP,
                f"Expression nested deeper than {self.max_depth} levels",
            )

    def _leave(self) -> None:
        self._depth -= 1

    # -- grammar -------------------------------------------------------

    def parse(self) -> Node:
        """Parse the whole token sequence as a single statement."""
        if not self.tokens:
            raise self._error(SyntaxReason.MISSING_OPERAND, "Empty expression")

        first, second = self._peek(), self._peek(1)
        if (
            first.kind == TokenKind.VARIABLE
            and first.value != ANS_IDENTIFIER
            and second is not None
            and second.kind == TokenKind.ASSIGN
        ):
            self.pos = 2
            node: Node = Assignment(first.value, self._parse_expression())
        else:
            node = self._parse_expression()
            node = self._parse_store_suffix(node)

        if self._peek() is not None:
            token = self._peek()
            raise self._error(
                SyntaxReason.TRAILING_INPUT,
                f"Unexpected {token.text or token.value!r} at position {token.position}",
            )
        return node

    def _parse_store_suffix(self, node: Node) -> Node:
        arrow, target = self._peek(), self._peek(1)
        if arrow is None or arrow.kind != TokenKind.ASSIGN:
            return node
        if target is None:
            self._advance()
            raise self._error(SyntaxReason.MISSING_OPERAND, "STO needs a register")
        if target.kind == TokenKind.VARIABLE and target.value != ANS_IDENTIFIER:
            self.pos += 2
            return Assignment(target.value, node)
        return node

    def _parse_expression(self) -> Node:
        self._enter()
        try:
            node = self._parse_multiplicative()
            while self._at_operator(_ADDITIVE):
                kind = _ADDITIVE[self._advance().value]
                node = BinaryOp(kind, node, self._parse_multiplicative())
            return node
        finally:
            self._leave()

    def _parse_multiplicative(self) -> Node:
        node = self._parse_unary()
        while self._at_operator(_MULTIPLICATIVE):
            kind = _MULTIPLICATIVE[self._advance().value]
            node = BinaryOp(kind, node, self._parse_unary())
        return node

    def _parse_unary(self) -> Node:
        if self._at_operator(_ADDITIVE):
            sign = self._advance().value
            self._enter()
            try:
                operand = self._parse_unary()
            finally:
                self._leave()
            if sign == "-":
                return UnaryOp(UnaryKind.NEGATE, operand)
            return operand
        return self._parse_power()

    def _parse_power(self) -> Node:
        base = self._parse_postfix()
        if self._at_operator({"^"}):
            self._advance()
            self._enter()
            try:
                exponent = self._parse_unary()
            finally:
                self._leave()
            return BinaryOp(BinaryKind.POW, base, exponent)
        return base

    def _parse_postfix(self) -> Node:
        node = self._parse_primary()
        while self._at_operator(_POSTFIX_KINDS):
            node = UnaryOp(_POSTFIX_KINDS[self._advance().value], node)
        return node

    def _parse_primary(self) -> Node:
        token = self._peek()
        if token is None:
            raise self._end_of_input_error()

        if token.kind in (TokenKind.NUMBER, TokenKind.CONSTANT):
            self._advance()
            return Literal(token.value)

        if token.kind == TokenKind.VARIABLE:
            self._advance()
            return VariableRef(token.value)

        if token.kind == TokenKind.LPAREN:
            self._advance()
            node = self._parse_group()
            return node

        if token.kind == TokenKind.FUNCTION:
            return self._parse_call()

        if token.kind == TokenKind.OPERATOR and token.value in _PREFIX_KINDS:
            self._advance()
            self._enter()
            try:
                operand = self._parse_root_operand()
            finally:
                self._leave()
            return UnaryOp(_PREFIX_KINDS[token.value], operand)

        raise self._error(
            SyntaxReason.MISSING_OPERAND,
            f"Expected a value before {token.text or token.value!r}",
        )

    def _parse_root_operand(self) -> Node:
        """Operand of √/∛: an optionally signed postfix, so √-4 reaches the evaluator."""
        if self._at_operator(_ADDITIVE):
            sign = self._advance().value
            self._enter()
            try:
                operand = self._parse_root_operand()
            finally:
                self._leave()
            if sign == "-":
                return UnaryOp(UnaryKind.NEGATE, operand)
            return operand
        return self._parse_postfix()

    def _parse_group(self) -> Node:
        self._open_parens += 1
        node = self._parse_expression()
        self._expect_close()
        self._open_parens -= 1
        return node

    def _expect_close(self) -> None:
        token = self._peek()
        if token is None:
            raise self._end_of_input_error()
        if token.kind != TokenKind.RPAREN:
            raise self._error(
                SyntaxReason.TRAILING_INPUT,
                f"Expected ')' but found {token.text!r} at position {token.position}",
            )
        self._advance()

    def _parse_call(self) -> FunctionCall:
        func = self._advance()
        opener = self._peek()
        if opener is None or opener.kind != TokenKind.LPAREN:
            raise self._error(
                SyntaxReason.MISSING_OPERAND, f"{func.text} must be followed by '('"
            )
        self._advance()
        self._open_parens += 1

        args: list[Node] = []
        closer = self._peek()
        if closer is None or closer.kind != TokenKind.RPAREN:
            args.append(self._parse_expression())
            while self._peek() is not None and self._peek().kind == TokenKind.COMMA:
                self._advance()
                args.append(self._parse_expression())
        self._expect_close()
        self._open_parens -= 1

        if len(args) != func.arity:
            raise CalcSyntaxError(
                SyntaxReason.ARITY_MISMATCH,
                f"{func.value} takes {func.arity} argument(s), got {len(args)}",
                position=func.position,
            )
        return FunctionCall(func.value, tuple(args))


def parse(tokens: list[Token]) -> Node:
    """Build an AST from ``tokens``.

    Raises:
        CalcSyntaxError: on any malformed input
    """
    return Parser(tokens).parse()


def parse_expression(text: str) -> Node:
    """Tokenize and parse ``text`` in one step."""
    return parse(tokenize(text))
