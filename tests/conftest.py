"""Shared test fixtures and helpers."""

from __future__ import annotations

import pytest

from pcgfmt.errors import Diagnostic
from pcgfmt.lexer import tokenize
from pcgfmt.tokens import Token, TokenType
from pcgfmt.validator import validate


@pytest.fixture
def lex():
    """Return a helper that tokenizes source and returns tokens (ignoring lex errors)."""

    def _lex(source: str) -> list[Token]:
        tokens, _ = tokenize(source)
        return tokens

    return _lex


@pytest.fixture
def check():
    """Return a helper that tokenizes and validates source, returning validator diagnostics."""

    def _check(source: str) -> list[Diagnostic]:
        tokens, _ = tokenize(source)
        return validate(tokens)

    return _check


def assert_types(tokens: list[Token], expected: list[TokenType]) -> None:
    """Assert that the token types match the expected list."""
    actual = [t.type for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def assert_values(tokens: list[Token], expected: list[str]) -> None:
    """Assert that the token values match the expected list."""
    actual = [t.value for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def messages(diagnostics: list[Diagnostic]) -> list[str]:
    """Return the diagnostic messages in order."""
    return [d.message for d in diagnostics]


def assert_single(diagnostics: list[Diagnostic], fragment: str) -> Diagnostic:
    """Assert there is exactly one diagnostic and that it mentions *fragment*."""
    assert len(diagnostics) == 1, f"Expected one diagnostic, got {messages(diagnostics)}"
    assert fragment.lower() in diagnostics[0].message.lower(), diagnostics[0].message
    return diagnostics[0]
