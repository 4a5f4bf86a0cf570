"""Exception hierarchy for lambda-morph."""

from __future__ import annotations


class LambdaMorphError(Exception):
    """Base exception for all lambda-morph errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert exception to dictionary for JSON output."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class StageTableError(LambdaMorphError):
    """The static stage table is incomplete or inconsistent."""

    def __init__(self, message: str, stages: list[str] | None = None):
        super().__init__(message, details={"stages": stages or []})
        self.stages = stages or []


class UnitInvariantViolation(LambdaMorphError):
    """A TransformationUnit breaks one of its structural invariants."""

    def __init__(self, violations: list[str]):
        msg = "Invalid transformation unit:\n" + "\n".join(violations)
        super().__init__(msg, details={"violations": violations})
        self.violations = violations


class UnrecognizedSnippetError(LambdaMorphError):
    """No registered idiom matched the snippet."""

    def __init__(self, source: str):
        super().__init__(
            "Snippet does not contain a supported anonymous implementation",
            details={"source": source[:200]},
        )
        self.source = source


class ExampleNotFoundError(LambdaMorphError):
    """The curated library has no example for the requested kind."""

    def __init__(self, kind: str):
        super().__init__(f"No curated example of kind '{kind}'", details={"kind": kind})
        self.kind = kind
