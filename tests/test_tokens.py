"""Test structural tokens: [ ] { } < > , :"""

from pcgfmt.tokens import TokenType

from tests.conftest import assert_types, assert_values


class TestSquare:
    def test_open(self, lex):
        assert_types(lex("["), [TokenType.OPEN_SQUARE])

    def test_close(self, lex):
        assert_types(lex("]"), [TokenType.CLOSE_SQUARE])

    def test_pair(self, lex):
        assert_types(lex("[]"), [TokenType.OPEN_SQUARE, TokenType.CLOSE_SQUARE])


class TestCurly:
    def test_pair(self, lex):
        assert_types(lex("{}"), [TokenType.OPEN_CURLY, TokenType.CLOSE_CURLY])

    def test_values(self, lex):
        assert_values(lex("{}"), ["{", "}"])


class TestAngle:
    def test_pair(self, lex):
        assert_types(lex("<>"), [TokenType.OPEN_ANGLE, TokenType.CLOSE_ANGLE])

    def test_nested_in_square(self, lex):
        tokens = lex("[<a,b>]")
        assert_types(
            tokens,
            [
                TokenType.OPEN_SQUARE,
                TokenType.OPEN_ANGLE,
                TokenType.MODULE,
                TokenType.COMMA,
                TokenType.MODULE,
                TokenType.CLOSE_ANGLE,
                TokenType.CLOSE_SQUARE,
            ],
        )


class TestSeparators:
    def test_comma(self, lex):
        tokens = lex(",")
        assert_types(tokens, [TokenType.COMMA])
        assert tokens[0].value == ","

    def test_colon(self, lex):
        tokens = lex(":")
        assert_types(tokens, [TokenType.COLON])
        assert tokens[0].value == ":"


class TestOffsets:
    def test_offsets_follow_input(self, lex):
        tokens = lex("[a, b]")
        assert [t.offset for t in tokens] == [0, 1, 2, 4, 5]

    def test_end_property(self, lex):
        tokens = lex("  Module")
        assert tokens[0].offset == 2
        assert tokens[0].end == 8

    def test_order_is_stable(self, lex):
        tokens = lex("{a:1,b:2}*")
        offsets = [t.offset for t in tokens]
        assert offsets == sorted(offsets)
