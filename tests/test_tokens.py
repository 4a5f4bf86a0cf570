"""Tests for the tokenizer."""

from __future__ import annotations

from lambda_morph.core.tokens import TokenKind, join_normalized, significant, tokenize


class TestTokenize:
    def test_covers_source_exactly(self, comparator_players: str) -> None:
        tokens = tokenize(comparator_players)
        assert "".join(t.text for t in tokens) == comparator_players
        for prev, nxt in zip(tokens, tokens[1:]):
            assert prev.end == nxt.start

    def test_string_literal_is_one_token(self) -> None:
        tokens = significant(tokenize('print("} };")'))
        kinds = [t.kind for t in tokens]
        assert kinds == [TokenKind.IDENT, TokenKind.LPAREN, TokenKind.STRING, TokenKind.RPAREN]

    def test_escaped_quote_in_string(self) -> None:
        tokens = significant(tokenize(r'"a\"b" x'))
        assert tokens[0].text == r'"a\"b"'
        assert tokens[1].is_word("x")

    def test_comments_are_trivia(self) -> None:
        tokens = tokenize("a // trailing }\n/* block { */ b")
        assert [t.text for t in significant(tokens)] == ["a", "b"]

    def test_annotation(self) -> None:
        tokens = significant(tokenize("@Override public"))
        assert tokens[0].kind == TokenKind.ANNOTATION
        assert tokens[0].text == "@Override"

    def test_nested_generics_split_angles(self) -> None:
        tokens = significant(tokenize("Map<String, List<Integer>>"))
        kinds = [t.kind for t in tokens]
        assert kinds.count(TokenKind.LANGLE) == 2
        assert kinds.count(TokenKind.RANGLE) == 2

    def test_is_word(self) -> None:
        (tok,) = significant(tokenize("return"))
        assert tok.is_word("return")
        assert not tok.is_word("new")


class TestJoinNormalized:
    def test_collapses_whitespace(self) -> None:
        assert join_normalized(tokenize("  a  +\n\t b  ")) == "a + b"

    def test_preserves_string_contents(self) -> None:
        assert join_normalized(tokenize('f("a   b")')) == 'f("a   b")'
