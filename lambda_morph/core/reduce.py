"""Body reducibility: can a method body collapse to a bare lambda expression?

Two rules, chosen by the idiom:
  RETURN    value-returning methods. The inner body is a single
            ``return <expr>;``: exactly one terminator, at the very end,
            and the statement starts with ``return``.
  STATEMENT void methods. The inner body holds exactly one non-empty
            statement once split on terminators.

Either rule refuses bodies with nested braces or a leading control-flow
keyword, since those cannot stand alone after the arrow.
"""

from __future__ import annotations

import enum

from lambda_morph.core.ir import Reduction
from lambda_morph.core.tokens import Token, TokenKind, join_normalized, significant, tokenize

CONTROL_KEYWORDS = frozenset({
    "if", "else", "for", "while", "do", "switch", "try", "catch",
    "finally", "synchronized", "throw",
})


class ReductionRule(str, enum.Enum):
    RETURN = "return"
    STATEMENT = "statement"


def inner_tokens(body: str) -> list[Token]:
    """Tokens between the body's outer braces (trivia included)."""
    tokens = tokenize(body.strip())
    sig = significant(tokens)
    if len(sig) < 2 or sig[0].kind != TokenKind.LBRACE or sig[-1].kind != TokenKind.RBRACE:
        return tokens
    first = tokens.index(sig[0])
    last = len(tokens) - 1 - tokens[::-1].index(sig[-1])
    return tokens[first + 1:last]


def split_statements(tokens: list[Token]) -> list[list[Token]]:
    """Split on terminators, dropping empty statements.

    A statement is empty when nothing but trivia precedes its
    terminator, so ``go();;`` holds one statement and ``;`` none.
    """
    statements: list[list[Token]] = []
    current: list[Token] = []
    for t in tokens:
        if t.kind == TokenKind.SEMI:
            current.append(t)
            statements.append(current)
            current = []
        else:
            current.append(t)
    statements.append(current)
    return [s for s in statements if any(t.kind != TokenKind.SEMI for t in significant(s))]


def _is_simple(sig: list[Token]) -> bool:
    if not sig:
        return False
    if any(t.kind in (TokenKind.LBRACE, TokenKind.RBRACE) for t in sig):
        return False
    return not (sig[0].kind == TokenKind.IDENT and sig[0].text in CONTROL_KEYWORDS)


def is_reducible(body: str, rule: ReductionRule) -> bool:
    """Decide whether ``body`` can become a bare expression under ``rule``."""
    sig = significant(inner_tokens(body))
    if not _is_simple(sig):
        return False

    if rule == ReductionRule.RETURN:
        semis = [t for t in sig if t.kind == TokenKind.SEMI]
        return (
            len(semis) <= 1
            and (not semis or sig[-1] is semis[0])
            and sig[0].is_word("return")
            and len(sig) > (2 if semis else 1)
        )

    return len(split_statements(sig)) == 1


def reduce_body(body: str) -> str:
    """Strip braces, a leading ``return`` and the trailing terminators.

    Whitespace runs are collapsed to single spaces.
    """
    tokens = inner_tokens(body)
    sig = significant(tokens)
    while sig and sig[-1].kind == TokenKind.SEMI:
        tokens = tokens[:tokens.index(sig[-1])]
        sig = sig[:-1]
    if sig and sig[0].is_word("return"):
        tokens = tokens[tokens.index(sig[0]) + 1:]
    return join_normalized(tokens)


def reduction_for(body: str, rule: ReductionRule) -> Reduction:
    """Build the ``final`` part of a unit from its body."""
    body = body.strip()
    if is_reducible(body, rule):
        expression = reduce_body(body)
        if expression:
            return Reduction(reduced_expression=expression, can_reduce=True)
    return Reduction(reduced_expression=body, can_reduce=False)
