"""Token types, data structures, and character classification helpers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class TokenType(Enum):
    # Identifiers
    MODULE = auto()  # ident_char+ (letters, digits, _ and -)

    # Brackets
    OPEN_SQUARE = auto()  # [
    CLOSE_SQUARE = auto()  # ]
    OPEN_CURLY = auto()  # {
    CLOSE_CURLY = auto()  # }
    OPEN_ANGLE = auto()  # <
    CLOSE_ANGLE = auto()  # >

    # Separators
    COMMA = auto()  # ,
    COLON = auto()  # :

    # Numbers
    MULTIPLIER = auto()  # *, + or a digit run
    WEIGHT = auto()  # digit run following a colon

    ERROR = auto()  # one unrecognized character


@dataclass(frozen=True, slots=True)
class Token:
    """A single lexer token with its source text and starting offset."""

    type: TokenType
    value: str
    offset: int

    @property
    def end(self) -> int:
        return self.offset + len(self.value)


# Single-character tokens
SIMPLE_TOKENS: dict[str, TokenType] = {
    "[": TokenType.OPEN_SQUARE,
    "]": TokenType.CLOSE_SQUARE,
    "{": TokenType.OPEN_CURLY,
    "}": TokenType.CLOSE_CURLY,
    "<": TokenType.OPEN_ANGLE,
    ">": TokenType.CLOSE_ANGLE,
    ",": TokenType.COMMA,
    ":": TokenType.COLON,
}

OPENING = frozenset({TokenType.OPEN_SQUARE, TokenType.OPEN_CURLY, TokenType.OPEN_ANGLE})
CLOSING = frozenset({TokenType.CLOSE_SQUARE, TokenType.CLOSE_CURLY, TokenType.CLOSE_ANGLE})

# Opening bracket type -> matching closing bracket type
MATCHING: dict[TokenType, TokenType] = {
    TokenType.OPEN_SQUARE: TokenType.CLOSE_SQUARE,
    TokenType.OPEN_CURLY: TokenType.CLOSE_CURLY,
    TokenType.OPEN_ANGLE: TokenType.CLOSE_ANGLE,
}

# Human-readable bracket family names used in diagnostics
BRACKET_NAMES: dict[TokenType, str] = {
    TokenType.OPEN_SQUARE: "square",
    TokenType.CLOSE_SQUARE: "square",
    TokenType.OPEN_CURLY: "curly",
    TokenType.CLOSE_CURLY: "curly",
    TokenType.OPEN_ANGLE: "angle",
    TokenType.CLOSE_ANGLE: "angle",
}

_ASCII_LETTERS = frozenset("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ")
_DIGITS = frozenset("0123456789")
_IDENT_SPECIAL = frozenset("_-")
_MULTIPLIER_SYMBOLS = frozenset("*+")


def is_digit(ch: str) -> bool:
    """Return True if ch is an ASCII decimal digit."""
    return ch in _DIGITS


def is_ident_char(ch: str) -> bool:
    """Return True if ch may appear in a module identifier."""
    return ch in _ASCII_LETTERS or ch in _DIGITS or ch in _IDENT_SPECIAL


def is_multiplier_char(ch: str) -> bool:
    """Return True if ch may appear in a multiplier run after a closing bracket."""
    return ch in _MULTIPLIER_SYMBOLS or ch in _DIGITS


def is_whitespace(ch: str) -> bool:
    return ch.isspace()


def is_digits(text: str) -> bool:
    """Return True if text is a non-empty run of ASCII digits."""
    return bool(text) and all(is_digit(ch) for ch in text)
