"""Diagnostic records, position resolution, and formatted source context."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class DiagnosticKind(Enum):
    LEX = "lex"  # unrecognized character
    STRUCTURE = "structure"  # bracket imbalance, mismatch, empty group
    PLACEMENT = "placement"  # misplaced comma, colon, multiplier or weight
    SEMANTIC = "semantic"  # bad multiplier value, single-entry priority group


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """An advisory finding anchored at a 0-based character offset."""

    message: str
    offset: int
    kind: DiagnosticKind
    length: int = 1


@dataclass(frozen=True, slots=True)
class Position:
    """Source position, 1-based line and column, 0-based character offset."""

    line: int
    column: int
    offset: int


class ConfigError(Exception):
    """Raised when a formatter option has an unusable value."""

    def __init__(self, key: str, message: str) -> None:
        self.key = key
        self.message = message
        super().__init__(f"invalid option '{key}': {message}")


def resolve_position(source: str, offset: int) -> Position | None:
    """Map *offset* to a line/column position, or None if it lies outside *source*.

    An offset equal to ``len(source)`` (end of input) is accepted.
    """
    if offset < 0 or offset > len(source):
        return None
    line = source.count("\n", 0, offset) + 1
    line_start = source.rfind("\n", 0, offset) + 1
    return Position(line, offset - line_start + 1, offset)


def format_diagnostic(diag: Diagnostic, source: str, filename: str = "input.pcg") -> str:
    """Render a diagnostic with the offending source line and a caret underline."""
    pos = resolve_position(source, diag.offset)
    if pos is None:
        return f"error: {diag.message}\n --> {filename}: offset {diag.offset}"

    lines = source.splitlines(keepends=True)
    line_idx = pos.line - 1
    col = pos.column

    # Build the source line (strip trailing newline for display)
    if 0 <= line_idx < len(lines):
        source_line = lines[line_idx].rstrip("\n").rstrip("\r")
    else:
        source_line = ""

    # Underline the token, at least 1 char, but stay within the line
    underline_len = max(1, min(diag.length, len(source_line) - col + 1))

    pad = " " * (col - 1)
    carets = "^" * underline_len

    line_num = str(pos.line)
    gutter_width = len(line_num) + 1

    blank_gutter = " " * gutter_width + "|"
    line_gutter = f"{line_num:>{gutter_width - 1}} |"

    return (
        f"error: {diag.message}\n"
        f"{' ' * gutter_width}--> {filename}:{pos.line}:{col}\n"
        f"{blank_gutter}\n"
        f"{line_gutter} {source_line}\n"
        f"{blank_gutter} {pad}{carets}"
    )
