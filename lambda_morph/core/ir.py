"""Core IR types for the lambda morph framework.

A TransformationUnit splits one anonymous implementation into the
ceremony that disappears (boilerplate), the essential logic that
survives (parameters and body), and the reduced lambda form.

All objects are frozen Pydantic models, immutable after construction.
"""

from __future__ import annotations

import enum

from pydantic import BaseModel, model_validator


class IdiomKind(str, enum.Enum):
    """The anonymous-implementation shapes the extractor knows about."""

    COMPARATOR = "Comparator"
    RUNNABLE = "Runnable"
    SUPPLIER = "Supplier"
    PREDICATE = "Predicate"
    FUNCTION = "Function"
    CONSUMER = "Consumer"


# Number of parameters each idiom's single abstract method takes
IDIOM_ARITY: dict[IdiomKind, int] = {
    IdiomKind.COMPARATOR: 2,
    IdiomKind.RUNNABLE: 0,
    IdiomKind.SUPPLIER: 0,
    IdiomKind.PREDICATE: 1,
    IdiomKind.FUNCTION: 1,
    IdiomKind.CONSUMER: 1,
}


class Boilerplate(BaseModel):
    """Ceremony text around the essential logic.

    ``start`` runs from ``new`` up to the method name; ``end`` runs from
    the body's closing brace to the class's closing brace.
    """

    model_config = {"frozen": True}

    start: str
    end: str


class Parameter(BaseModel):
    """One declared parameter. The type is display-only."""

    model_config = {"frozen": True}

    type: str = ""
    name: str

    def __str__(self) -> str:
        return f"{self.type} {self.name}" if self.type else self.name


class CoreLogic(BaseModel):
    """Parameters and body: everything the lambda keeps."""

    model_config = {"frozen": True}

    params: tuple[Parameter, ...] = ()
    body: str

    @property
    def names(self) -> list[str]:
        return [p.name for p in self.params]

    @property
    def types(self) -> list[str]:
        return [p.type for p in self.params]

    @property
    def typed_params(self) -> str:
        """Parameter list as declared, e.g. ``(Player p1, Player p2)``."""
        return "(" + ", ".join(str(p) for p in self.params) + ")"

    @property
    def lambda_head(self) -> str:
        """Parameter list of the lambda: ``()``, ``x`` or ``(a, b)``."""
        if len(self.params) == 1:
            return self.params[0].name
        return "(" + ", ".join(self.names) + ")"


class Reduction(BaseModel):
    """Outcome of trying to collapse the body into a bare expression."""

    model_config = {"frozen": True}

    reduced_expression: str
    can_reduce: bool


class TransformationUnit(BaseModel):
    """Decomposition of one recognized snippet.

    Frozen after construction; the sequencer renders every stage from
    the same unit.
    """

    model_config = {"frozen": True}

    kind: IdiomKind
    description: str = ""
    context_before: str = ""
    context_after: str = ""
    boilerplate: Boilerplate
    core: CoreLogic
    final: Reduction

    @model_validator(mode="after")
    def _validate_params(self) -> "TransformationUnit":
        expected = IDIOM_ARITY[self.kind]
        if len(self.core.params) != expected:
            raise ValueError(
                f"{self.kind.value} takes {expected} parameter(s), "
                f"got {len(self.core.params)}"
            )
        names = self.core.names
        if len(set(names)) != len(names):
            raise ValueError(f"Duplicate parameter names: {names}")
        return self

    @property
    def arity(self) -> int:
        return IDIOM_ARITY[self.kind]

    @property
    def lambda_expression(self) -> str:
        """The simplified form, e.g. ``(a, b) -> a.length() - b.length()``."""
        return f"{self.core.lambda_head} -> {self.final.reduced_expression}"

    @property
    def anonymous_source(self) -> str:
        """The idiom as written, rebuilt from its parts."""
        return (
            f"{self.boilerplate.start}{self.core.typed_params} "
            f"{self.core.body}{self.boilerplate.end}"
        )

    def render_source(self) -> str:
        """Context plus the anonymous implementation."""
        return f"{self.context_before}{self.anonymous_source}{self.context_after}"

    def render_lambda(self) -> str:
        """Context plus the lambda that replaces the anonymous implementation."""
        return f"{self.context_before}{self.lambda_expression}{self.context_after}"
