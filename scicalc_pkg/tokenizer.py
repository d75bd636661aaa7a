"""Tokenizer: turns a calculator input line into typed tokens.

The scanner works left to right and never produces a partial token: any
character outside the calculator alphabet raises ``CalcSyntaxError``
straight away. Calculator-style implicit multiplication ("2π", "3(4+5)",
"2sin(30)") is made explicit here so the parser only ever sees ``×``.
"""

from __future__ import annotations

import math
import string
from dataclasses import dataclass
from enum import Enum
from enum import auto
from typing import Any

from .config import ANS_IDENTIFIER
from .config import BINARY_FUNCTIONS
from .config import CONSTANT_NAMES
from .config import FUNCTION_ALIASES
from .config import MAX_INPUT_LENGTH
from .config import MEMORY_IDENTIFIER
from .config import NUMBER_RE
from .config import STORE_IDENTIFIERS
from .config import UNARY_FUNCTIONS
from .logging_config import get_logger
from .types import CalcSyntaxError
from .types import SyntaxReason

logger = get_logger("tokenizer")


class TokenKind(Enum):
    NUMBER = auto()
    OPERATOR = auto()
    FUNCTION = auto()
    CONSTANT = auto()
    VARIABLE = auto()
    LPAREN = auto()
    RPAREN = auto()
    COMMA = auto()
    ASSIGN = auto()  # STO: "=" or "→"


@dataclass(frozen=True)
class Token:
    """A single lexical unit.

    Attributes:
        kind: Token category
        text: Exact slice of the input this token was read from
        position: Offset of ``text`` in the input
        value: float for NUMBER/CONSTANT, canonical symbol or name otherwise
        arity: Declared argument count for FUNCTION tokens
        implicit: True for a multiplication the tokenizer inserted
    """

    kind: TokenKind
    text: str
    position: int
    value: Any = None
    arity: int = 0
    implicit: bool = False


CONSTANT_VALUES = {"pi": math.pi, "e": math.e}

# Symbol spellings accepted on input, mapped to the canonical operator
OPERATOR_SPELLINGS = {
    "⁻¹": "⁻¹",
    "+": "+",
    "-": "-",
    "−": "-",
    "*": "×",
    "×": "×",
    "·": "×",
    "/": "÷",
    "÷": "÷",
    "^": "^",
    "%": "%",
    "!": "!",
    "²": "²",
    "³": "³",
    "√": "√",
    "∛": "∛",
}

POSTFIX_OPERATORS = frozenset({"!", "²", "³", "⁻¹", "%"})
PREFIX_OPERATORS = frozenset({"√", "∛"})

_OPERATOR_SPELLINGS_LONGEST_FIRST = sorted(OPERATOR_SPELLINGS, key=len, reverse=True)

PUNCTUATION = {
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    ",": TokenKind.COMMA,
    "=": TokenKind.ASSIGN,
    "→": TokenKind.ASSIGN,
}


def _build_word_table() -> list[tuple[str, TokenKind, str, int]]:
    """All multi-letter words plus the register letters, longest first."""
    words: list[tuple[str, TokenKind, str, int]] = []
    for name in UNARY_FUNCTIONS:
        words.append((name, TokenKind.FUNCTION, name, 1))
    for name in BINARY_FUNCTIONS:
        words.append((name, TokenKind.FUNCTION, name, 2))
    for alias, canonical in FUNCTION_ALIASES.items():
        arity = 2 if canonical in BINARY_FUNCTIONS else 1
        words.append((alias, TokenKind.FUNCTION, canonical, arity))
    for spelling, canonical in CONSTANT_NAMES.items():
        words.append((spelling, TokenKind.CONSTANT, canonical, 0))
    words.append((ANS_IDENTIFIER, TokenKind.VARIABLE, ANS_IDENTIFIER, 0))
    for letter in STORE_IDENTIFIERS + (MEMORY_IDENTIFIER,):
        words.append((letter, TokenKind.VARIABLE, letter, 0))
    words.sort(key=lambda w: len(w[0]), reverse=True)
    return words


_WORDS = _build_word_table()


def _operator_at(text: str, i: int) -> tuple[str, str] | None:
    for spelling in _OPERATOR_SPELLINGS_LONGEST_FIRST:
        if text.startswith(spelling, i):
            return spelling, OPERATOR_SPELLINGS[spelling]
    return None


def _ends_operand(token: Token) -> bool:
    if token.kind in (TokenKind.NUMBER, TokenKind.RPAREN, TokenKind.CONSTANT):
        return True
    if token.kind == TokenKind.VARIABLE:
        return True
    return token.kind == TokenKind.OPERATOR and token.value in POSTFIX_OPERATORS


def _starts_operand(token: Token) -> bool:
    if token.kind in (
        TokenKind.VARIABLE,
        TokenKind.CONSTANT,
        TokenKind.FUNCTION,
        TokenKind.LPAREN,
    ):
        return True
    return token.kind == TokenKind.OPERATOR and token.value in PREFIX_OPERATORS


def _parse_number(literal: str) -> float:
    normalized = literal.replace("ᴇ", "e").replace("−", "-")
    return float(normalized)


def tokenize(text: str) -> list[Token]:
    """Split ``text`` into tokens, inserting implicit multiplications.

    Raises:
        CalcSyntaxError: UNRECOGNIZED_CHARACTER for a character outside the
            calculator alphabet, INPUT_TOO_LONG for an over-long line
    """
    if len(text) > MAX_INPUT_LENGTH:
        raise CalcSyntaxError(
            SyntaxReason.INPUT_TOO_LONG,
            f"Input exceeds {MAX_INPUT_LENGTH} characters",
        )

    tokens: list[Token] = []

    def emit(token: Token) -> None:
        if tokens and _ends_operand(tokens[-1]) and _starts_operand(token):
            tokens.append(
                Token(
                    TokenKind.OPERATOR,
                    "",
                    token.position,
                    value="×",
                    implicit=True,
                )
            )
        tokens.append(token)

    i = 0
    n = len(text)
    while i < n:
        ch = text[i]

        if ch.isspace():
            i += 1
            continue

        if ch in string.digits or (
            ch == "." and i + 1 < n and text[i + 1] in string.digits
        ):
            match = NUMBER_RE.match(text, i)
            literal = match.group(0)
            emit(Token(TokenKind.NUMBER, literal, i, value=_parse_number(literal)))
            i = match.end()
            continue

        word = next((w for w in _WORDS if text.startswith(w[0], i)), None)
        if word is not None:
            spelling, kind, canonical, arity = word
            value: Any = canonical
            if kind == TokenKind.CONSTANT:
                value = CONSTANT_VALUES[canonical]
            emit(Token(kind, spelling, i, value=value, arity=arity))
            i += len(spelling)
            continue

        if ch in PUNCTUATION:
            emit(Token(PUNCTUATION[ch], ch, i, value=ch))
            i += 1
            continue

        op = _operator_at(text, i)
        if op is not None:
            spelling, canonical = op
            emit(Token(TokenKind.OPERATOR, spelling, i, value=canonical))
            i += len(spelling)
            continue

        logger.debug("Unrecognized character %r at %d in %r", ch, i, text)
        raise CalcSyntaxError(
            SyntaxReason.UNRECOGNIZED_CHARACTER,
            f"Unrecognized character {ch!r} at position {i}",
            position=i,
        )

    return tokens
