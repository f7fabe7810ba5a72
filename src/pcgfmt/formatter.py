"""Grammar formatter — re-indents a token stream into canonical layout."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, fields, replace
from typing import Any

from pcgfmt.errors import ConfigError
from pcgfmt.tokens import CLOSING, Token, TokenType

_BLANK_LINES = re.compile(r"\n{2,}")

# Tokens that attach to the end of the current line instead of starting a new one
_ATTACHED = frozenset({TokenType.MULTIPLIER, TokenType.COLON, TokenType.COMMA})


@dataclass(frozen=True, slots=True)
class FormatOptions:
    """Layout options for :func:`render` and :func:`cleanup`.

    ``max_line_length``, ``enabled`` and ``format_on_save`` are carried for
    editor integrations; they do not change the rendered text.
    """

    indent_size: int = 2
    use_tabs: bool = False
    insert_newline_after_brackets: bool = True
    insert_newline_before_brackets: bool = True
    insert_final_newline: bool = True
    trim_trailing_whitespace: bool = True
    max_line_length: int = 80
    enabled: bool = True
    format_on_save: bool = False

    @property
    def indent_unit(self) -> str:
        if self.use_tabs:
            return "\t"
        return " " * self.indent_size

    @classmethod
    def from_mapping(
        cls, mapping: Mapping[str, Any], base: FormatOptions | None = None
    ) -> FormatOptions:
        """Build options from a config table, layered over *base* (or the defaults).

        Keys may be snake_case (``indent_size``) or editor-style camelCase
        (``indentSize``). Unknown keys are ignored.
        """
        base = base if base is not None else cls()
        changes: dict[str, Any] = {}
        for key, value in mapping.items():
            name = _OPTION_NAMES.get(key)
            if name is None:
                continue
            expected = _OPTION_TYPES[name]
            # bool is an int subclass; keep them apart
            if expected is int and (isinstance(value, bool) or not isinstance(value, int)):
                raise ConfigError(key, f"expected an integer, got {value!r}")
            if expected is bool and not isinstance(value, bool):
                raise ConfigError(key, f"expected true or false, got {value!r}")
            if expected is int and value < 0:
                raise ConfigError(key, f"must not be negative, got {value}")
            changes[name] = value
        return replace(base, **changes)


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


_OPTION_TYPES: dict[str, type] = {
    f.name: int if f.type in ("int", int) else bool for f in fields(FormatOptions)
}
_OPTION_NAMES: dict[str, str] = {
    alias: name for name in _OPTION_TYPES for alias in (name, _camel(name))
}


class Formatter:
    """Render tokens one by one, tracking the bracket nesting level."""

    def __init__(self, tokens: list[Token], options: FormatOptions | None = None) -> None:
        self._tokens = tokens
        self._options = options if options is not None else FormatOptions()
        self._unit = self._options.indent_unit
        self._level = 0
        self._parts: list[str] = []

    def render(self) -> str:
        """Render the token stream. The result has not been cleaned up yet."""
        for i, tok in enumerate(self._tokens):
            nxt = self._tokens[i + 1] if i + 1 < len(self._tokens) else None
            next_type = nxt.type if nxt is not None else None
            tt = tok.type

            if tt in (TokenType.OPEN_SQUARE, TokenType.OPEN_ANGLE):
                self._open(tok, self._options.insert_newline_after_brackets)
            elif tt == TokenType.OPEN_CURLY:
                self._open(tok, self._options.insert_newline_before_brackets)
            elif tt in CLOSING:
                self._level = max(0, self._level - 1)
                self._parts.append(self._indent() + tok.value)
                if next_type not in _ATTACHED:
                    self._parts.append("\n")
            elif tt == TokenType.MULTIPLIER:
                self._parts.append(tok.value)
                if next_type != TokenType.COMMA:
                    self._parts.append("\n")
            elif tt == TokenType.COMMA:
                self._parts.append(",\n")
            elif tt == TokenType.COLON:
                self._parts.append(": ")
            elif tt == TokenType.WEIGHT:
                self._parts.append(tok.value)
                if next_type != TokenType.COMMA:
                    self._parts.append("\n")
            elif tt == TokenType.MODULE:
                self._parts.append(self._indent() + tok.value)
                if next_type not in _ATTACHED:
                    self._parts.append("\n")
            else:
                # ERROR tokens pass through untouched
                self._parts.append(tok.value)

        return "".join(self._parts)

    def _indent(self) -> str:
        return self._unit * self._level

    def _open(self, tok: Token, newline: bool) -> None:
        self._parts.append(self._indent() + tok.value)
        if newline:
            self._parts.append("\n")
        self._level += 1


def render(tokens: list[Token], options: FormatOptions | None = None) -> str:
    """Convenience function: render tokens without the cleanup pass."""
    return Formatter(tokens, options).render()


def cleanup(text: str, options: FormatOptions | None = None) -> str:
    """Collapse blank lines, then trim trailing whitespace or ensure a final newline.

    Trimming wins when both options are enabled.
    """
    options = options if options is not None else FormatOptions()
    text = _BLANK_LINES.sub("\n", text)
    if options.trim_trailing_whitespace:
        return "\n".join(line.rstrip() for line in text.split("\n")).rstrip()
    if options.insert_final_newline and text:
        return text.rstrip("\n") + "\n"
    return text
