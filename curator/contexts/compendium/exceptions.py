"""Custom exceptions for the compendium context."""

from pathlib import Path
from typing import Optional


class InvalidCompendiumError(ValueError):
    """
    Raised when compendium data doesn't conform to the expected structure.

    Examples: a company without an id, a bullet without a description,
    a role profile with negative scoring weights.
    """

    pass


class CompendiumUnavailableError(Exception):
    """
    Raised when the compendium could not be loaded at all.

    Distinct from selection failures: callers should report "data unavailable"
    rather than a provider or validation problem.

    Attributes:
        message: Error description
        path: Path that was being loaded (if any)
        original_error: Underlying I/O or parse error
    """

    def __init__(
        self,
        message: str,
        path: Optional[Path] = None,
        original_error: Optional[Exception] = None,
    ):
        self.message = message
        self.path = path
        self.original_error = original_error

        parts = [message]
        if path:
            parts.append(f"Path: {path}")
        if original_error:
            parts.append(f"Original error: {original_error}")

        super().__init__("\n".join(parts))
