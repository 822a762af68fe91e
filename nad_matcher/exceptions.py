"""
Exceptions raised by the NAD matcher.

Scoring, aggregation, ranking and combination search never raise for
well-typed input; empty collections produce degenerate results.  The
exceptions below cover caller misuse, catalog access, and cancellation.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class EmptyCountrySelectionError(ValueError):
    """Raised when a workflow that needs target countries receives none."""

    def __init__(self) -> None:
        super().__init__("At least one country must be selected.")


class CatalogLoadError(RuntimeError):
    """Raised when a catalog file cannot be read, parsed, or validated.

    Attributes:
        path: The catalog file involved, if known.
    """

    def __init__(self, message: str, path: Optional[Path] = None) -> None:
        self.path = path
        if path is not None:
            message = f"{message} (catalog: {path})"
        super().__init__(message)


class CatalogLookupError(KeyError):
    """Raised when a module id or country ISO code is not in the catalog.

    Attributes:
        kind:       ``"module"`` or ``"country"``.
        identifier: The identifier that was not found.
    """

    def __init__(self, kind: str, identifier: str) -> None:
        self.kind       = kind
        self.identifier = identifier
        super().__init__(f"Unknown {kind} '{identifier}'.")

    def __str__(self) -> str:
        return str(self.args[0])


class OperationCancelledError(RuntimeError):
    """Raised when a ranking or combination search is cancelled between modules."""

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(f"{operation} was cancelled.")
