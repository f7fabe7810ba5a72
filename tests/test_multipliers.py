"""Test multiplier lexing after closing brackets, modules, and on their own."""

from pcgfmt.tokens import TokenType

from tests.conftest import assert_types, assert_values


class TestAttachedMultiplier:
    def test_count_after_square(self, lex):
        tokens = lex("[a]3")
        assert_types(
            tokens,
            [TokenType.OPEN_SQUARE, TokenType.MODULE, TokenType.CLOSE_SQUARE, TokenType.MULTIPLIER],
        )
        assert tokens[3].value == "3"

    def test_offset_points_at_run(self, lex):
        tokens = lex("[a]12")
        assert tokens[3].offset == 3

    def test_star_after_curly(self, lex):
        tokens = lex("{a:1}*")
        assert tokens[-1].type == TokenType.MULTIPLIER
        assert tokens[-1].value == "*"

    def test_plus_after_angle(self, lex):
        tokens = lex("<a,b>+")
        assert tokens[-1].value == "+"

    def test_greedy_mixed_run(self, lex):
        tokens = lex("[a]*+2")
        assert_values(tokens, ["[", "a", "]", "*+2"])

    def test_whitespace_breaks_run(self, lex):
        tokens = lex("[a] 3")
        assert tokens[3].type == TokenType.MODULE

    def test_run_stops_at_letter(self, lex):
        tokens = lex("[a]2b")
        assert_values(tokens, ["[", "a", "]", "2", "b"])
        assert tokens[3].type == TokenType.MULTIPLIER
        assert tokens[4].type == TokenType.MODULE


class TestStandaloneMultiplier:
    def test_star_after_module(self, lex):
        tokens = lex("a*")
        assert_types(tokens, [TokenType.MODULE, TokenType.MULTIPLIER])

    def test_plus_after_space(self, lex):
        tokens = lex("a +")
        assert_types(tokens, [TokenType.MODULE, TokenType.MULTIPLIER])
        assert tokens[1].offset == 2

    def test_each_symbol_is_own_token(self, lex):
        tokens = lex("**")
        assert_types(tokens, [TokenType.MULTIPLIER, TokenType.MULTIPLIER])

    def test_leading_star(self, lex):
        tokens = lex("*a")
        assert_types(tokens, [TokenType.MULTIPLIER, TokenType.MODULE])
