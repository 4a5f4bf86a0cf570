"""Curated library of pre-built transformation units.

These are hand-written rather than extracted: most sit inside call
arguments (``users.sort(new Comparator<User>() {...})``), a shape the
extractor does not recognize. Every entry is checked against the unit
invariants when the module loads.
"""

from __future__ import annotations

import logging
import random
from collections import defaultdict

from lambda_morph.core.invariants import validate_unit
from lambda_morph.core.ir import (
    Boilerplate,
    CoreLogic,
    IdiomKind,
    Parameter,
    Reduction,
    TransformationUnit,
)
from lambda_morph.core.reduce import reduce_body
from lambda_morph.exceptions import ExampleNotFoundError, UnitInvariantViolation

logger = logging.getLogger(__name__)

DEFAULT_WORKBENCH_SNIPPET = """Runnable myTask = new Runnable() {
    @Override
    public void run() {
        System.out.println("Executing a background task...");
    }
};"""


def curated(
    kind: IdiomKind,
    description: str,
    context_before: str,
    context_after: str,
    start: str,
    params: list[tuple[str, str]],
    body: str,
    can_reduce: bool,
    end: str = "\n}",
) -> TransformationUnit:
    """Build and check one library unit."""
    unit = TransformationUnit(
        kind=kind,
        description=description,
        context_before=context_before,
        context_after=context_after,
        boilerplate=Boilerplate(start=start, end=end),
        core=CoreLogic(
            params=[Parameter(type=t, name=n) for t, n in params],
            body=body,
        ),
        final=Reduction(
            reduced_expression=reduce_body(body) if can_reduce else body,
            can_reduce=can_reduce,
        ),
    )
    violations = validate_unit(unit)
    if violations:
        raise UnitInvariantViolation(violations)
    return unit


ALL_EXAMPLES: tuple[TransformationUnit, ...] = (
    curated(
        IdiomKind.COMPARATOR,
        "Sort players by score in descending order",
        "Collections.sort(players, ", ");",
        "new Comparator<Player>() {\n    @Override\n    public int compare",
        [("Player", "p1"), ("Player", "p2")],
        "{\n        return Integer.compare(p2.getScore(), p1.getScore());\n    }",
        can_reduce=True,
    ),
    curated(
        IdiomKind.RUNNABLE,
        "Create a simple task to run on a new thread",
        "Thread t = new Thread(", ");",
        "new Runnable() {\n    @Override\n    public void run",
        [],
        '{\n        System.out.println("Hello from another thread!");\n    }',
        can_reduce=True,
    ),
    curated(
        IdiomKind.COMPARATOR,
        "Sort strings by their length",
        "words.sort(", ");",
        "new Comparator<String>() {\n    public int compare",
        [("String", "a"), ("String", "b")],
        "{\n        return a.length() - b.length();\n    }",
        can_reduce=True,
    ),
    curated(
        IdiomKind.PREDICATE,
        "Filter a list to find all words shorter than 5 letters",
        "shortWords = allWords.stream().filter(", ").collect(Collectors.toList());",
        "new Predicate<String>() {\n    public boolean test",
        [("String", "s")],
        "{\n        return s.length() < 5;\n    }",
        can_reduce=True,
    ),
    curated(
        IdiomKind.FUNCTION,
        "Map a list of words to a list of their lengths",
        "wordLengths = words.stream().map(", ").collect(Collectors.toList());",
        "new Function<String, Integer>() {\n    public Integer apply",
        [("String", "s")],
        "{\n        return s.length();\n    }",
        can_reduce=True,
    ),
    curated(
        IdiomKind.CONSUMER,
        "Iterate over a list and print each item",
        "numbers.forEach(", ");",
        "new Consumer<Integer>() {\n    public void accept",
        [("Integer", "n")],
        "{\n        System.out.println(n);\n    }",
        can_reduce=True,
    ),
    curated(
        IdiomKind.RUNNABLE,
        "A task with multiple steps that requires braces",
        "executor.submit(", ");",
        "new Runnable() {\n    public void run",
        [],
        '{\n        System.out.println("Starting complex task...");\n'
        "        longRunningOperation();\n"
        '        System.out.println("Task finished.");\n    }',
        can_reduce=False,
    ),
    curated(
        IdiomKind.PREDICATE,
        "Filter out empty strings from a list",
        "nonEmpty = strings.stream().filter(", ").collect(Collectors.toList());",
        "new Predicate<String>() {\n    public boolean test",
        [("String", "str")],
        "{\n        return !str.isEmpty();\n    }",
        can_reduce=True,
    ),
    curated(
        IdiomKind.FUNCTION,
        "Map a list of numbers to their squares",
        "squares = numbers.stream().map(", ").collect(Collectors.toList());",
        "new Function<Integer, Integer>() {\n    public Integer apply",
        [("Integer", "x")],
        "{\n        return x * x;\n    }",
        can_reduce=True,
    ),
    curated(
        IdiomKind.COMPARATOR,
        "Sort users by role, then by name",
        "users.sort(", ");",
        "new Comparator<User>() {\n    @Override\n    public int compare",
        [("User", "u1"), ("User", "u2")],
        "{\n        int roleCompare = u1.getRole().compareTo(u2.getRole());\n"
        "        if (roleCompare != 0) {\n"
        "            return roleCompare;\n"
        "        }\n"
        "        return u1.getName().compareTo(u2.getName());\n    }",
        can_reduce=False,
    ),
)


def examples_by_kind(
    examples: tuple[TransformationUnit, ...] = ALL_EXAMPLES,
) -> dict[IdiomKind, list[TransformationUnit]]:
    """Group examples by idiom kind, keeping library order within each kind."""
    grouped: dict[IdiomKind, list[TransformationUnit]] = defaultdict(list)
    for unit in examples:
        grouped[unit.kind].append(unit)
    return dict(grouped)


class ExamplePicker:
    """Random example selection that never returns the same entry twice in a row."""

    def __init__(
        self,
        examples: tuple[TransformationUnit, ...] = ALL_EXAMPLES,
        seed: int | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.examples = tuple(examples)
        self._rng = rng or random.Random(seed)
        self._last_index: int | None = None

    @property
    def last(self) -> TransformationUnit | None:
        if self._last_index is None:
            return None
        return self.examples[self._last_index]

    def pick(self, kind: IdiomKind | None = None) -> TransformationUnit:
        """Choose an example, optionally restricted to one kind.

        The previous pick is excluded whenever another candidate exists.
        """
        candidates = [
            i for i, unit in enumerate(self.examples)
            if kind is None or unit.kind == kind
        ]
        if not candidates:
            raise ExampleNotFoundError(kind.value if kind is not None else "any")
        if len(candidates) > 1 and self._last_index in candidates:
            candidates.remove(self._last_index)
        index = self._rng.choice(candidates)
        self._last_index = index
        logger.debug("picked example %d: %s", index, self.examples[index].description)
        return self.examples[index]
