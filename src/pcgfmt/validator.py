"""Grammar validator — checks a token stream against the composition rules.

The checks are a single forward scan over the flat token list. Context is
limited to a bracket stack and an ``in_choice`` flag:

1. Bracket balance: mismatched, unexpected and unclosed brackets
2. Choice context: ``{`` sets the flag, any ``}`` clears it
3. Multipliers follow a module or closing bracket and are ``*``, ``+`` or >= 1
4. Inside a choice, entries have the shape ``Module: Weight``
5. Priority selections ``<...>`` hold at least two comma-separated entries
6. Groups are never empty
7. Commas sit between two elements
8. Colons only appear inside a stochastic choice

Every rule runs for every token; the scan never stops at the first problem.
"""

from __future__ import annotations

from dataclasses import dataclass

from pcgfmt.errors import Diagnostic, DiagnosticKind
from pcgfmt.tokens import BRACKET_NAMES, CLOSING, MATCHING, OPENING, Token, TokenType, is_digits

_MODULE_SUCCESSORS = CLOSING | {TokenType.COLON, TokenType.COMMA, TokenType.WEIGHT}
_MULTIPLIER_HOSTS = CLOSING | {TokenType.MODULE}


@dataclass(slots=True)
class _BracketFrame:
    type: TokenType
    value: str
    offset: int
    commas: int = 0


class Validator:
    """Validate a token stream, collecting every rule violation.

    Example:
        tokens, _ = tokenize("<ModuleA>")
        for diag in Validator(tokens).validate():
            print(diag.message)
    """

    def __init__(self, tokens: list[Token]) -> None:
        self._tokens = tokens
        self._stack: list[_BracketFrame] = []
        self._in_choice = False
        self._diagnostics: list[Diagnostic] = []

    def validate(self) -> list[Diagnostic]:
        """Run all checks and return the diagnostics in scan order."""
        for i, tok in enumerate(self._tokens):
            if tok.type in OPENING:
                self._check_open(i, tok)
            elif tok.type in CLOSING:
                self._check_close(tok)
            elif tok.type == TokenType.MULTIPLIER:
                self._check_multiplier(i, tok)
            elif tok.type == TokenType.COMMA:
                self._check_comma(i, tok)
            elif tok.type == TokenType.COLON:
                self._check_colon(i, tok)
            elif tok.type == TokenType.MODULE:
                self._check_module(i, tok)
            elif tok.type == TokenType.WEIGHT:
                self._check_weight(i, tok)

        for frame in self._stack:
            self._report(
                f"Unclosed {BRACKET_NAMES[frame.type]} bracket",
                frame.offset,
                DiagnosticKind.STRUCTURE,
            )
        return self._diagnostics

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _prev(self, i: int) -> Token | None:
        if i > 0:
            return self._tokens[i - 1]
        return None

    def _next(self, i: int) -> Token | None:
        if i + 1 < len(self._tokens):
            return self._tokens[i + 1]
        return None

    def _report(self, message: str, offset: int, kind: DiagnosticKind, length: int = 1) -> None:
        self._diagnostics.append(Diagnostic(message, offset, kind, length))

    # ------------------------------------------------------------------
    # Brackets
    # ------------------------------------------------------------------

    def _check_open(self, i: int, tok: Token) -> None:
        self._stack.append(_BracketFrame(tok.type, tok.value, tok.offset))
        if tok.type == TokenType.OPEN_CURLY:
            self._in_choice = True

        nxt = self._next(i)
        if nxt is not None and nxt.type in CLOSING:
            self._report("Empty module group is not allowed", tok.offset, DiagnosticKind.STRUCTURE)

    def _check_close(self, tok: Token) -> None:
        if not self._stack:
            self._report(
                f"Unexpected closing bracket '{tok.value}'", tok.offset, DiagnosticKind.STRUCTURE
            )
        else:
            frame = self._stack.pop()
            if MATCHING[frame.type] != tok.type:
                self._report(
                    f"Mismatched brackets: '{frame.value}' closed by '{tok.value}'",
                    tok.offset,
                    DiagnosticKind.STRUCTURE,
                )
            elif tok.type == TokenType.CLOSE_ANGLE and frame.commas == 0:
                self._report(
                    "Priority selection must contain multiple modules separated by commas",
                    frame.offset,
                    DiagnosticKind.SEMANTIC,
                )

        # Any closing curly ends the choice context, even a nested one
        if tok.type == TokenType.CLOSE_CURLY:
            self._in_choice = False

    # ------------------------------------------------------------------
    # Multipliers
    # ------------------------------------------------------------------

    def _check_multiplier(self, i: int, tok: Token) -> None:
        prev = self._prev(i)
        if prev is None or prev.type not in _MULTIPLIER_HOSTS:
            self._report(
                "Multiplier must follow a module or closing bracket",
                tok.offset,
                DiagnosticKind.PLACEMENT,
                len(tok.value),
            )

        if tok.value in ("*", "+"):
            return
        # Zero check on the text itself; int() refuses very long digit runs
        if not is_digits(tok.value) or tok.value.strip("0") == "":
            self._report(
                f"Invalid multiplier value: '{tok.value}'",
                tok.offset,
                DiagnosticKind.SEMANTIC,
                len(tok.value),
            )

    # ------------------------------------------------------------------
    # Separators
    # ------------------------------------------------------------------

    def _check_comma(self, i: int, tok: Token) -> None:
        if self._stack:
            self._stack[-1].commas += 1

        prev = self._prev(i)
        nxt = self._next(i)
        if prev is None:
            self._report("Comma cannot start the grammar", tok.offset, DiagnosticKind.PLACEMENT)
        elif prev.type == TokenType.COMMA:
            self._report("Consecutive commas are not allowed", tok.offset, DiagnosticKind.PLACEMENT)
        elif prev.type in OPENING:
            self._report(
                "Comma cannot follow an opening bracket", tok.offset, DiagnosticKind.PLACEMENT
            )

        if nxt is None:
            self._report("Comma cannot end the grammar", tok.offset, DiagnosticKind.PLACEMENT)
        elif nxt.type in CLOSING:
            self._report(
                "Comma cannot precede a closing bracket", tok.offset, DiagnosticKind.PLACEMENT
            )

    def _check_colon(self, i: int, tok: Token) -> None:
        if not self._in_choice:
            # Also covers a colon at index 0: no choice can be open yet
            self._report(
                "Colon can only be used in stochastic choice syntax",
                tok.offset,
                DiagnosticKind.PLACEMENT,
            )
            return

        prev = self._prev(i)
        if prev is None or prev.type != TokenType.MODULE:
            self._report("Colon must follow a module name", tok.offset, DiagnosticKind.PLACEMENT)

        nxt = self._next(i)
        if nxt is None or nxt.type != TokenType.WEIGHT:
            self._report(
                "Colon must be followed by a weight value", tok.offset, DiagnosticKind.PLACEMENT
            )

    # ------------------------------------------------------------------
    # Choice entries
    # ------------------------------------------------------------------

    def _check_module(self, i: int, tok: Token) -> None:
        if not self._in_choice:
            return
        nxt = self._next(i)
        if nxt is None or nxt.type not in _MODULE_SUCCESSORS:
            self._report(
                "Module must be followed by colon, comma or closing bracket",
                tok.offset,
                DiagnosticKind.PLACEMENT,
                len(tok.value),
            )

    def _check_weight(self, i: int, tok: Token) -> None:
        if not self._in_choice:
            return
        prev = self._prev(i)
        if prev is None or prev.type != TokenType.COLON:
            self._report(
                "Weight value must follow a colon",
                tok.offset,
                DiagnosticKind.PLACEMENT,
                len(tok.value),
            )


def validate(tokens: list[Token]) -> list[Diagnostic]:
    """Convenience function: validate a token stream and return diagnostics."""
    return Validator(tokens).validate()
