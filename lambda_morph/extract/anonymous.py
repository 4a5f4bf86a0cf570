"""Structural scan for anonymous implementations in token streams.

Recognizes the shared skeleton of every supported idiom:

  new <Interface><TypeArgs?>() { [@Annotation] [modifiers] <ReturnType>
      <method>(<params>) { <body> } };

and records where each part sits in the source. Idiom matchers then
decide whether the parts fit their particular shape.

The body ends at the first closing brace that is followed (trivia
ignored) by another closing brace and a terminator. One level of nested
braces inside the body is fine; a body that itself contains ``} };``
ends early. That heuristic is a known limitation, not something the
scanner tries to disambiguate.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from lambda_morph.core.ir import Parameter
from lambda_morph.core.tokens import Token, TokenKind, significant, tokenize

logger = logging.getLogger(__name__)

MODIFIERS = frozenset({
    "public", "protected", "private", "final", "synchronized", "strictfp", "abstract",
})


@dataclass(frozen=True)
class AnonymousClass:
    """Source spans of one anonymous implementation."""

    source: str
    interface: str
    type_args: str
    annotations: tuple[str, ...]
    return_type: str
    method_name: str
    new_start: int
    params_start: int  # offset of "("
    params_text: str  # text between the parentheses
    body_start: int
    body_end: int
    class_end: int  # just past the class's closing brace
    terminator_start: int  # offset of the ";" after the class

    @property
    def body(self) -> str:
        return self.source[self.body_start:self.body_end]

    @property
    def boilerplate_start(self) -> str:
        return self.source[self.new_start:self.params_start].rstrip()

    @property
    def boilerplate_end(self) -> str:
        return self.source[self.body_end:self.class_end]

    @property
    def prefix(self) -> str:
        return self.source[:self.new_start]

    @property
    def suffix(self) -> str:
        """Everything from the terminator on, terminator included."""
        return self.source[self.terminator_start:]


class _Cursor:
    """Forward-only reader over significant tokens."""

    def __init__(self, tokens: list[Token], pos: int = 0) -> None:
        self.tokens = tokens
        self.pos = pos

    def peek(self, offset: int = 0) -> Token | None:
        i = self.pos + offset
        return self.tokens[i] if i < len(self.tokens) else None

    def take(self) -> Token | None:
        tok = self.peek()
        if tok is not None:
            self.pos += 1
        return tok

    def take_kind(self, kind: TokenKind) -> Token | None:
        tok = self.peek()
        if tok is not None and tok.kind == kind:
            self.pos += 1
            return tok
        return None

    def take_word(self, word: str | None = None) -> Token | None:
        tok = self.peek()
        if tok is not None and tok.kind == TokenKind.IDENT and (word is None or tok.text == word):
            self.pos += 1
            return tok
        return None


def _take_qualified_name(cur: _Cursor) -> list[Token] | None:
    first = cur.take_word()
    if first is None:
        return None
    parts = [first]
    while True:
        dot, nxt = cur.peek(), cur.peek(1)
        if dot is None or dot.text != "." or nxt is None or nxt.kind != TokenKind.IDENT:
            return parts
        cur.pos += 2
        parts.extend([dot, nxt])


def _take_type_args(cur: _Cursor) -> list[Token] | None:
    """Balanced ``<...>`` run, or [] when absent. None if unbalanced."""
    if cur.peek() is None or cur.peek().kind != TokenKind.LANGLE:
        return []
    depth = 0
    taken: list[Token] = []
    while cur.peek() is not None:
        tok = cur.take()
        taken.append(tok)
        if tok.kind == TokenKind.LANGLE:
            depth += 1
        elif tok.kind == TokenKind.RANGLE:
            depth -= 1
            if depth == 0:
                return taken
        elif tok.kind in (TokenKind.LBRACE, TokenKind.SEMI, TokenKind.LPAREN):
            return None
    return None


def _take_type(cur: _Cursor) -> list[Token] | None:
    name = _take_qualified_name(cur)
    if name is None:
        return None
    args = _take_type_args(cur)
    if args is None:
        return None
    taken = name + args
    while (
        cur.peek() is not None and cur.peek().text == "["
        and cur.peek(1) is not None and cur.peek(1).text == "]"
    ):
        taken.extend([cur.take(), cur.take()])
    return taken


def _span(source: str, tokens: list[Token]) -> str:
    if not tokens:
        return ""
    return source[tokens[0].start:tokens[-1].end]


def _scan_from(source: str, sig: list[Token], index: int) -> AnonymousClass | None:
    cur = _Cursor(sig, index)
    new_tok = cur.take_word("new")
    if new_tok is None:
        return None

    iface = _take_qualified_name(cur)
    if iface is None:
        return None
    type_args = _take_type_args(cur)
    if type_args is None:
        return None
    if cur.take_kind(TokenKind.LPAREN) is None or cur.take_kind(TokenKind.RPAREN) is None:
        return None
    if cur.take_kind(TokenKind.LBRACE) is None:
        return None

    annotations: list[str] = []
    while cur.peek() is not None and cur.peek().kind == TokenKind.ANNOTATION:
        annotations.append(cur.take().text)
    while cur.peek() is not None and cur.peek().kind == TokenKind.IDENT and cur.peek().text in MODIFIERS:
        cur.take()

    return_type = _take_type(cur)
    if return_type is None:
        return None
    method = cur.take_word()
    if method is None:
        return None

    lparen = cur.take_kind(TokenKind.LPAREN)
    if lparen is None:
        return None
    while cur.peek() is not None and cur.peek().kind != TokenKind.RPAREN:
        if cur.peek().kind in (TokenKind.LPAREN, TokenKind.LBRACE, TokenKind.SEMI):
            return None
        cur.take()
    rparen = cur.take_kind(TokenKind.RPAREN)
    if rparen is None:
        return None

    body_open = cur.take_kind(TokenKind.LBRACE)
    if body_open is None:
        return None

    # First "}" followed by "}" and ";" closes both the body and the class
    for i in range(cur.pos, len(sig) - 2):
        if (
            sig[i].kind == TokenKind.RBRACE
            and sig[i + 1].kind == TokenKind.RBRACE
            and sig[i + 2].kind == TokenKind.SEMI
        ):
            return AnonymousClass(
                source=source,
                interface="".join(t.text for t in iface),
                type_args=_span(source, type_args),
                annotations=tuple(annotations),
                return_type=_span(source, return_type),
                method_name=method.text,
                new_start=new_tok.start,
                params_start=lparen.start,
                params_text=source[lparen.end:rparen.start],
                body_start=body_open.start,
                body_end=sig[i].end,
                class_end=sig[i + 1].end,
                terminator_start=sig[i + 2].start,
            )
    return None


def find_anonymous_classes(source: str) -> list[AnonymousClass]:
    """All anonymous implementations in source order.

    Each ``new`` token is tried as a starting point, mirroring a
    leftmost match over the text.
    """
    sig = significant(tokenize(source))
    found: list[AnonymousClass] = []
    for i, tok in enumerate(sig):
        if tok.is_word("new"):
            anon = _scan_from(source, sig, i)
            if anon is not None:
                found.append(anon)
    logger.debug("found %d anonymous implementation(s)", len(found))
    return found


def parse_parameters(params_text: str) -> list[Parameter] | None:
    """Split ``Type a, Type b`` into parameters.

    Returns None when an entry is not exactly two whitespace-separated
    tokens or a name repeats. An empty list is a valid niladic list.
    """
    if not params_text.strip():
        return []
    params: list[Parameter] = []
    for entry in params_text.split(","):
        parts = entry.split()
        if len(parts) != 2:
            return None
        params.append(Parameter(type=parts[0], name=parts[1]))
    names = [p.name for p in params]
    if len(set(names)) != len(names):
        return None
    return params
