"""
Exception hierarchy for partial type generation.

Every error is fatal for the source unit being generated; the driver decides
whether a failure aborts the remaining files.
"""

from __future__ import annotations


class GenerationError(Exception):
    """
    Base exception for all generation errors.

    Carries the offending declaration and field (when known) so the message
    identifies where generation failed.
    """

    kind = "GenerationError"

    def __init__(
        self,
        message: str,
        declaration: str | None = None,
        field: str | None = None,
        line: int | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.declaration = declaration
        self.field = field
        self.line = line

    def with_context(
        self,
        declaration: str | None = None,
        field: str | None = None,
        line: int | None = None,
    ) -> GenerationError:
        """Fill in location details not known where the error was raised."""
        if self.declaration is None:
            self.declaration = declaration
        if self.field is None:
            self.field = field
        if not self.line:
            self.line = line
        return self

    @property
    def details(self) -> dict[str, object]:
        details: dict[str, object] = {}
        if self.declaration is not None:
            details["declaration"] = self.declaration
        if self.field is not None:
            details["field"] = self.field
        if self.line:
            details["line"] = self.line
        return details

    def __str__(self) -> str:
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.kind}: {self.message} ({detail_str})"
        return f"{self.kind}: {self.message}"


class ParseFailure(GenerationError):
    """Raised when source text cannot be turned into a SourceUnit."""

    kind = "ParseFailure"

    def __init__(self, message: str, line: int | None = None, position: int | None = None):
        super().__init__(message, line=line)
        self.position = position

    def __str__(self) -> str:
        return f"{self.kind}: {self.message}"


class UnsupportedTypeShape(GenerationError):
    """Raised for a non-struct declaration where a struct is required, or a
    field type outside the set the translator understands."""

    kind = "UnsupportedTypeShape"


class MissingFieldName(GenerationError):
    """Raised for embedded or anonymous fields."""

    kind = "MissingFieldName"


class UnresolvedImport(GenerationError):
    """Raised when a qualified type's package alias matches no import."""

    kind = "UnresolvedImport"

    def __init__(self, alias: str, **kwargs):
        super().__init__(f"No import matches package alias '{alias}'", **kwargs)
        self.alias = alias
