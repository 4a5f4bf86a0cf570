"""Tokenizer for the Java-like surface syntax the matchers work on.

Not a Java lexer. It only separates what the structural matchers need
to see: identifiers, annotations, literals, brackets and terminators.
Whitespace and comments are kept as tokens so any span of tokens maps
back to the exact source slice it came from.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass


class TokenKind(str, enum.Enum):
    WHITESPACE = "whitespace"
    COMMENT = "comment"
    IDENT = "ident"
    ANNOTATION = "annotation"
    STRING = "string"
    CHAR = "char"
    NUMBER = "number"
    LBRACE = "lbrace"
    RBRACE = "rbrace"
    LPAREN = "lparen"
    RPAREN = "rparen"
    LANGLE = "langle"
    RANGLE = "rangle"
    COMMA = "comma"
    SEMI = "semi"
    PUNCT = "punct"


_TOKEN_RE = re.compile(
    r"""
    (?P<WHITESPACE>\s+)
  | (?P<COMMENT>//[^\n]*|/\*.*?(?:\*/|\Z))
  | (?P<STRING>"(?:[^"\\\n]|\\.)*"?)
  | (?P<CHAR>'(?:[^'\\\n]|\\.)*'?)
  | (?P<ANNOTATION>@[A-Za-z_$][\w$.]*)
  | (?P<IDENT>[A-Za-z_$][\w$]*)
  | (?P<NUMBER>\d[\w.]*)
  | (?P<LBRACE>\{)
  | (?P<RBRACE>\})
  | (?P<LPAREN>\()
  | (?P<RPAREN>\))
  | (?P<LANGLE><)
  | (?P<RANGLE>>)
  | (?P<COMMA>,)
  | (?P<SEMI>;)
  | (?P<PUNCT>.)
    """,
    re.VERBOSE | re.DOTALL,
)

TRIVIA = frozenset({TokenKind.WHITESPACE, TokenKind.COMMENT})


@dataclass(frozen=True)
class Token:
    """One lexical token with its half-open source span."""

    kind: TokenKind
    text: str
    start: int
    end: int

    @property
    def is_trivia(self) -> bool:
        return self.kind in TRIVIA

    def is_word(self, word: str) -> bool:
        return self.kind == TokenKind.IDENT and self.text == word


def tokenize(source: str) -> list[Token]:
    """Split source text into tokens covering every character exactly once."""
    tokens: list[Token] = []
    for m in _TOKEN_RE.finditer(source):
        kind = TokenKind[m.lastgroup]
        tokens.append(Token(kind=kind, text=m.group(), start=m.start(), end=m.end()))
    return tokens


def significant(tokens: list[Token]) -> list[Token]:
    """Tokens with whitespace and comments removed."""
    return [t for t in tokens if not t.is_trivia]


def join_normalized(tokens: list[Token]) -> str:
    """Rejoin tokens, collapsing every whitespace run to one space.

    Literals are single tokens, so whitespace inside strings survives.
    """
    parts: list[str] = []
    for t in tokens:
        parts.append(" " if t.kind == TokenKind.WHITESPACE else t.text)
    return "".join(parts).strip()
