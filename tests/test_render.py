"""Formatter unit tests: per-token layout rules, options, and cleanup."""

from __future__ import annotations

from pcgfmt.formatter import FormatOptions, cleanup, render
from pcgfmt.lexer import tokenize


def _render(source: str, **options: object) -> str:
    tokens, _ = tokenize(source)
    return render(tokens, FormatOptions(**options))


class TestLayout:
    def test_sequence(self) -> None:
        assert _render("[ModuleA, ModuleB]") == "[\n  ModuleA,\n  ModuleB\n]\n"

    def test_choice(self) -> None:
        assert _render("{ModuleA:1, ModuleB:2}") == "{\n  ModuleA: 1,\n  ModuleB: 2\n}\n"

    def test_nested_groups(self) -> None:
        assert _render("[a, [b]]") == "[\n  a,\n  [\n    b\n  ]\n]\n"

    def test_multiplier_attaches_to_bracket(self) -> None:
        assert _render("[a]3") == "[\n  a\n]3\n"

    def test_multiplier_then_comma(self) -> None:
        assert _render("[a]3, b") == "[\n  a\n]3,\nb\n"

    def test_multiplier_attaches_to_module(self) -> None:
        assert _render("a *") == "a*\n"

    def test_comma_attaches_to_bracket(self) -> None:
        assert _render("<a, b>, c") == "<\n  a,\n  b\n>,\nc\n"

    def test_colon_attaches_to_bracket(self) -> None:
        assert _render("{[a]:1}") == "{\n  [\n    a\n  ]: 1\n}\n"

    def test_error_token_verbatim(self) -> None:
        assert _render("[a$]") == "[\n  a\n$]\n"

    def test_stray_closing_bracket_clamps_level(self) -> None:
        assert _render("]a") == "]\na\n"

    def test_unclosed_group_still_rendered(self) -> None:
        assert _render("[ModuleA") == "[\n  ModuleA\n"

    def test_empty(self) -> None:
        assert _render("") == ""


class TestIndentOptions:
    def test_indent_size(self) -> None:
        assert _render("[a]", indent_size=4) == "[\n    a\n]\n"

    def test_zero_indent(self) -> None:
        assert _render("[a]", indent_size=0) == "[\na\n]\n"

    def test_tabs_override_size(self) -> None:
        assert _render("[<a,b>]", use_tabs=True, indent_size=8) == (
            "[\n\t<\n\t\ta,\n\t\tb\n\t>\n]\n"
        )

    def test_indent_unit(self) -> None:
        assert FormatOptions(indent_size=3).indent_unit == "   "
        assert FormatOptions(use_tabs=True).indent_unit == "\t"


class TestBracketNewlineOptions:
    def test_no_newline_after_square(self) -> None:
        assert _render("[a]", insert_newline_after_brackets=False) == "[  a\n]\n"

    def test_no_newline_after_angle(self) -> None:
        assert _render("<a,b>", insert_newline_after_brackets=False) == "<  a,\n  b\n>\n"

    def test_curly_uses_its_own_option(self) -> None:
        result = _render("{a:1}", insert_newline_after_brackets=False)
        assert result == "{\n  a: 1\n}\n"
        result = _render("{a:1}", insert_newline_before_brackets=False)
        assert result == "{  a: 1\n}\n"

    def test_reserved_options_do_not_change_output(self) -> None:
        source = "[alpha, beta, {gamma:1, delta:2}]"
        baseline = _render(source)
        assert _render(source, max_line_length=5) == baseline
        assert _render(source, enabled=False) == baseline
        assert _render(source, format_on_save=True) == baseline


class TestCleanup:
    def test_collapses_blank_lines(self) -> None:
        assert cleanup("a\n\n\nb\n") == "a\nb"

    def test_trims_every_line(self) -> None:
        assert cleanup("a  \nb: \n") == "a\nb:"

    def test_trim_wins_over_final_newline(self) -> None:
        options = FormatOptions(trim_trailing_whitespace=True, insert_final_newline=True)
        assert cleanup("[\n  a\n]\n", options) == "[\n  a\n]"

    def test_final_newline_added(self) -> None:
        options = FormatOptions(trim_trailing_whitespace=False)
        assert cleanup("a", options) == "a\n"

    def test_final_newline_exactly_one(self) -> None:
        options = FormatOptions(trim_trailing_whitespace=False)
        assert cleanup("a\n\n", options) == "a\n"

    def test_final_newline_keeps_line_whitespace(self) -> None:
        options = FormatOptions(trim_trailing_whitespace=False)
        assert cleanup("a: \n", options) == "a: \n"

    def test_neither_option(self) -> None:
        options = FormatOptions(trim_trailing_whitespace=False, insert_final_newline=False)
        assert cleanup("a\n", options) == "a\n"
        assert cleanup("a", options) == "a"

    def test_empty_stays_empty(self) -> None:
        options = FormatOptions(trim_trailing_whitespace=False)
        assert cleanup("", options) == ""
