"""Grammar lexer — converts source text into a flat token stream."""

from __future__ import annotations

from pcgfmt.errors import Diagnostic, DiagnosticKind
from pcgfmt.tokens import (
    SIMPLE_TOKENS,
    Token,
    TokenType,
    is_digit,
    is_digits,
    is_ident_char,
    is_multiplier_char,
    is_whitespace,
)

# Closing brackets that may carry an attached multiplier run, e.g. ]3 or }*
_MULTIPLIER_HOSTS = frozenset({TokenType.CLOSE_SQUARE, TokenType.CLOSE_CURLY, TokenType.CLOSE_ANGLE})


class Lexer:
    """Tokenize grammar source into Token objects, recovering from bad characters.

    Unrecognized characters never stop the scan: each one becomes an ERROR
    token plus a diagnostic in :attr:`errors`.
    """

    def __init__(self, source: str) -> None:
        self._source = source
        self._pos = 0
        self._tokens: list[Token] = []
        self.errors: list[Diagnostic] = []

    def tokenize(self) -> list[Token]:
        """Tokenize the full source and return the token list."""
        while self._pos < len(self._source):
            ch = self._peek()

            if is_whitespace(ch):
                self._pos += 1
                continue

            tt = SIMPLE_TOKENS.get(ch)
            if tt is not None:
                self._emit(tt, ch, self._pos)
                self._pos += 1
                if tt in _MULTIPLIER_HOSTS:
                    self._lex_attached_multiplier()
                continue

            if ch in "*+":
                self._emit(TokenType.MULTIPLIER, ch, self._pos)
                self._pos += 1
                continue

            if is_ident_char(ch):
                self._lex_identifier()
                continue

            self._lex_error()

        return self._tokens

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _peek(self, offset: int = 0) -> str:
        idx = self._pos + offset
        if idx < len(self._source):
            return self._source[idx]
        return ""

    def _emit(self, tt: TokenType, value: str, start: int) -> Token:
        tok = Token(tt, value, start)
        self._tokens.append(tok)
        return tok

    def _next_significant(self) -> str:
        """Return the next non-whitespace character without consuming it."""
        idx = self._pos
        while idx < len(self._source) and is_whitespace(self._source[idx]):
            idx += 1
        if idx < len(self._source):
            return self._source[idx]
        return ""

    def _previous_type(self) -> TokenType | None:
        if self._tokens:
            return self._tokens[-1].type
        return None

    # ------------------------------------------------------------------
    # Token scanners
    # ------------------------------------------------------------------

    def _lex_attached_multiplier(self) -> None:
        start = self._pos
        while self._pos < len(self._source) and is_multiplier_char(self._peek()):
            self._pos += 1
        if self._pos > start:
            self._emit(TokenType.MULTIPLIER, self._source[start : self._pos], start)

    def _lex_identifier(self) -> None:
        start = self._pos
        while self._pos < len(self._source) and is_ident_char(self._peek()):
            self._pos += 1
        text = self._source[start : self._pos]

        if is_digits(text):
            # A bare number is a weight only directly after a colon
            if self._previous_type() == TokenType.COLON:
                self._emit(TokenType.WEIGHT, text, start)
            else:
                self._emit(TokenType.MODULE, text, start)
            return

        # A name before ':' is a choice entry and keeps its digits: {Room1: 5}
        if self._next_significant() == ":":
            self._emit(TokenType.MODULE, text, start)
            return

        # Otherwise trailing digits on a name are a repeat count: ModuleA3 -> ModuleA x3
        split = len(text)
        while split > 0 and is_digit(text[split - 1]):
            split -= 1
        self._emit(TokenType.MODULE, text[:split], start)
        if split < len(text):
            self._emit(TokenType.MULTIPLIER, text[split:], start + split)

    def _lex_error(self) -> None:
        ch = self._peek()
        self._emit(TokenType.ERROR, ch, self._pos)
        self.errors.append(
            Diagnostic(f"Unexpected character: '{ch}'", self._pos, DiagnosticKind.LEX)
        )
        self._pos += 1


def tokenize(source: str) -> tuple[list[Token], list[Diagnostic]]:
    """Convenience function: tokenize source text, returning tokens and lex errors."""
    lexer = Lexer(source)
    tokens = lexer.tokenize()
    return tokens, lexer.errors


def extract_identifiers(source: str) -> dict[str, str]:
    """Collect every non-numeric identifier run in *source*, mapped to itself.

    Runs are found with the identifier charset directly on the raw text,
    independent of how the lexer classifies them.
    """
    found: dict[str, str] = {}
    pos = 0
    while pos < len(source):
        if not is_ident_char(source[pos]):
            pos += 1
            continue
        start = pos
        while pos < len(source) and is_ident_char(source[pos]):
            pos += 1
        word = source[start:pos]
        if not is_digits(word):
            found[word] = word
    return found
