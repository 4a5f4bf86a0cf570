"""Shared fixtures for lambda-morph tests."""

from __future__ import annotations

import asyncio

import pytest

from lambda_morph.core.ir import (
    Boilerplate,
    CoreLogic,
    IdiomKind,
    Parameter,
    Reduction,
    TransformationUnit,
)

RUNNABLE_HI = 'new Runnable() { public void run() { System.out.println("hi"); } };'

COMPARATOR_TWO_STATEMENTS = """Comparator<Integer> cmp = new Comparator<Integer>() {
    @Override
    public int compare(Integer a, Integer b) {
        int c = a - b;
        return c;
    }
};"""

COMPARATOR_PLAYERS = """Comparator<Player> byScore = new Comparator<Player>() {
    @Override
    public int compare(Player p1, Player p2) {
        return Integer.compare(p2.getScore(), p1.getScore());
    }
};"""

RUNNABLE_TWO_STATEMENTS = """Runnable task = new Runnable() {
    public void run() {
        prepare();
        execute();
    }
};"""

CONSUMER_PRINT = """Consumer<String> printer = new Consumer<String>() {
    @Override
    public void accept(String s) {
        System.out.println(s);
    }
};"""

PREDICATE_SHORT = """Predicate<String> isShort = new Predicate<String>() {
    public boolean test(String s) {
        return s.length() < 5;
    }
};"""

SUPPLIER_GREETING = """Supplier<String> greeting = new Supplier<String>() {
    public String get() {
        return "hello";
    }
};"""


@pytest.fixture
def runnable_hi() -> str:
    return RUNNABLE_HI


@pytest.fixture
def comparator_two_statements() -> str:
    return COMPARATOR_TWO_STATEMENTS


@pytest.fixture
def comparator_players() -> str:
    return COMPARATOR_PLAYERS


@pytest.fixture
def runnable_two_statements() -> str:
    return RUNNABLE_TWO_STATEMENTS


@pytest.fixture
def consumer_print() -> str:
    return CONSUMER_PRINT


@pytest.fixture
def predicate_short() -> str:
    return PREDICATE_SHORT


@pytest.fixture
def supplier_greeting() -> str:
    return SUPPLIER_GREETING


@pytest.fixture
def comparator_unit() -> TransformationUnit:
    """A hand-built reducible comparator unit."""
    return TransformationUnit(
        kind=IdiomKind.COMPARATOR,
        description="Sort strings by their length",
        context_before="words.sort(",
        context_after=");",
        boilerplate=Boilerplate(
            start="new Comparator<String>() {\n    public int compare",
            end="\n}",
        ),
        core=CoreLogic(
            params=[Parameter(type="String", name="a"), Parameter(type="String", name="b")],
            body="{ return a.length() - b.length(); }",
        ),
        final=Reduction(reduced_expression="a.length() - b.length()", can_reduce=True),
    )


@pytest.fixture
def irreducible_unit() -> TransformationUnit:
    """A hand-built runnable whose two-statement body keeps its braces."""
    body = "{ prepare(); execute(); }"
    return TransformationUnit(
        kind=IdiomKind.RUNNABLE,
        context_before="executor.submit(",
        context_after=");",
        boilerplate=Boilerplate(start="new Runnable() {\n    public void run", end="\n}"),
        core=CoreLogic(params=[], body=body),
        final=Reduction(reduced_expression=body, can_reduce=False),
    )


class RecordingSleep:
    """Stand-in for asyncio.sleep that records durations and only yields."""

    def __init__(self) -> None:
        self.durations: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.durations.append(seconds)
        await asyncio.sleep(0)


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()
