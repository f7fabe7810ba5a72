"""PCG module grammar formatter and validator."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pcgfmt.errors import Diagnostic
    from pcgfmt.formatter import FormatOptions

__version__ = "0.1.0"


@dataclass(frozen=True, slots=True)
class FormatResult:
    """Formatted text plus every diagnostic found in the source."""

    text: str
    diagnostics: list[Diagnostic]


def format(source: str, options: FormatOptions | None = None) -> FormatResult:
    """Tokenize, validate, and re-indent grammar source.

    Never raises on bad input: problems are reported as diagnostics and the
    text is formatted on a best-effort basis.
    """
    from pcgfmt.formatter import cleanup, render
    from pcgfmt.lexer import tokenize
    from pcgfmt.validator import validate

    tokens, lex_errors = tokenize(source)
    diagnostics = lex_errors + validate(tokens)
    text = cleanup(render(tokens, options), options)
    return FormatResult(text, diagnostics)


def extract_identifiers(source: str) -> dict[str, str]:
    """Return every non-numeric identifier in *source*, mapped to itself."""
    from pcgfmt.lexer import extract_identifiers as _extract

    return _extract(source)
