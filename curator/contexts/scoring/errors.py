"""
Selection error taxonomy.

Two renderings of every failure:
1. Verbose, compiler-style text - fed back to the model as retry context so it
   can correct its own output
2. Simplified text - user-safe, one sentence, never contains vendor error text
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional


class ErrorCode(str, Enum):
    """Per-attempt failure codes."""

    PROVIDER_ERROR = "E000_PROVIDER_ERROR"
    NO_JSON_FOUND = "E001_NO_JSON_FOUND"
    INVALID_JSON = "E002_INVALID_JSON"
    MISSING_BULLET_IDS = "E003_MISSING_BULLET_IDS"
    WRONG_BULLET_COUNT = "E004_WRONG_BULLET_COUNT"
    INVALID_BULLET_ID = "E005_INVALID_BULLET_ID"
    DUPLICATE_BULLET_ID = "E006_DUPLICATE_BULLET_ID"
    DIVERSITY_VIOLATION = "E007_DIVERSITY_VIOLATION"
    MISSING_REASONING = "E008_MISSING_REASONING"
    INVALID_SCORE = "E009_INVALID_SCORE"
    INVALID_SALARY = "E010_INVALID_SALARY"
    PROVIDER_DOWN = "E011_PROVIDER_DOWN"

    def __str__(self) -> str:
        return self.value


# Malformed response family (unparsable output)
MALFORMED_CODES = frozenset(
    {ErrorCode.NO_JSON_FOUND, ErrorCode.INVALID_JSON, ErrorCode.MISSING_BULLET_IDS}
)

# Correctable by re-prompting the same model with the error as context.
# E007 is absent: diversity is enforced server-side, never by the model.
OUTPUT_FORMAT_CODES = MALFORMED_CODES | {
    ErrorCode.WRONG_BULLET_COUNT,
    ErrorCode.INVALID_BULLET_ID,
    ErrorCode.DUPLICATE_BULLET_ID,
    ErrorCode.MISSING_REASONING,
    ErrorCode.INVALID_SCORE,
}

SIMPLIFIED_MESSAGES = {
    ErrorCode.PROVIDER_ERROR: "The AI service encountered an issue. Please try again.",
    ErrorCode.NO_JSON_FOUND: "The AI response was unclear. Retrying with a different approach...",
    ErrorCode.INVALID_JSON: "The AI response was malformed. Retrying with a different approach...",
    ErrorCode.MISSING_BULLET_IDS: "The AI did not select any experience. Retrying...",
    ErrorCode.WRONG_BULLET_COUNT: "The AI selected the wrong number of experiences. Retrying...",
    ErrorCode.INVALID_BULLET_ID: "The AI referenced unknown experiences. Retrying with corrections...",
    ErrorCode.DUPLICATE_BULLET_ID: "The AI selected duplicate experiences. Retrying...",
    ErrorCode.DIVERSITY_VIOLATION: "The AI selection needs more variety. Retrying with constraints...",
    ErrorCode.MISSING_REASONING: "The AI did not explain its selection. Retrying...",
    ErrorCode.INVALID_SCORE: "The AI provided invalid relevance scores. Retrying...",
    ErrorCode.INVALID_SALARY: "The AI salary extraction was malformed. Continuing without salary...",
    ErrorCode.PROVIDER_DOWN: "The AI service is temporarily unavailable. Trying alternative...",
}


@dataclass(frozen=True)
class ErrorSpan:
    """Location of the offending fragment within the raw model response."""

    start: int
    end: int
    content: str


@dataclass(frozen=True)
class ParseError:
    """
    A single attempt's failure.

    Attributes:
        code: Taxonomy code
        message: One-line description
        help: Multi-line guidance (what was expected, what was received)
        provider: Provider id the attempt ran against (None until attributed)
        span: Optional pointer into the raw response
    """

    code: ErrorCode
    message: str
    help: str = ""
    provider: Optional[str] = None
    span: Optional[ErrorSpan] = None

    def to_dict(self) -> dict:
        """Serializable form for event logs."""
        return {"code": self.code.value, "provider": self.provider, "message": self.message}


def format_verbose_error(error: ParseError) -> str:
    """
    Format an error in compiler style, used as retry context for the model.

    Example output:
        error[E004_WRONG_BULLET_COUNT]: Expected 34 bullets, got 25

          The AI must score exactly 34 bullets.
    """
    lines = [f"error[{error.code.value}]: {error.message}", ""]

    for line in error.help.split("\n"):
        lines.append(f"  {line}")

    if error.span:
        lines.append("")
        lines.append(f"  --> AI response:{error.span.start}")
        lines.append("   |")
        lines.append(f"   | {error.span.content}")
        lines.append(f"   | {'~' * min(len(error.span.content), 60)}")

    return "\n".join(lines)


def format_simplified_error(error: ParseError) -> str:
    """Format an error for end users: short, actionable, no vendor text."""
    return SIMPLIFIED_MESSAGES.get(error.code, "An unexpected error occurred. Please try again.")


class AttemptError(Exception):
    """
    One provider attempt failed (validation failure or classified vendor failure).

    Raised by provider adapters and the response validator; consumed by the
    orchestrator, which decides between retrying and falling back.
    """

    def __init__(self, error: ParseError):
        self.error = error
        super().__init__(f"{error.code.value}: {error.message}")

    @property
    def code(self) -> ErrorCode:
        return self.error.code

    def is_provider_down(self) -> bool:
        return self.error.code == ErrorCode.PROVIDER_DOWN

    def is_output_format_error(self) -> bool:
        return self.error.code in OUTPUT_FORMAT_CODES


class SelectionError(Exception):
    """
    Aggregate failure after every provider and retry was exhausted.

    Attributes:
        message: Internal summary (not for end users)
        errors: Every attempt's failure, in the order they happened
        provider: Last provider attempted
        retries_attempted: Total vendor calls made across all providers
    """

    def __init__(
        self,
        message: str,
        errors: List[ParseError],
        provider: str,
        retries_attempted: int = 0,
    ):
        self.message = message
        self.errors = list(errors)
        self.provider = provider
        self.retries_attempted = retries_attempted
        super().__init__(message)

    def verbose_log(self) -> str:
        """Full compiler-style log of every attempt, for debugging."""
        return "\n\n---\n\n".join(format_verbose_error(e) for e in self.errors)

    def simplified_message(self) -> str:
        """User-safe message derived from the last failure."""
        if self.errors:
            return format_simplified_error(self.errors[-1])
        return (
            f"AI selection failed after {self.retries_attempted} attempts. "
            "Please try again or use a different AI model."
        )

    def is_provider_down(self) -> bool:
        return any(e.code == ErrorCode.PROVIDER_DOWN for e in self.errors)

    def is_output_format_error(self) -> bool:
        return any(e.code in OUTPUT_FORMAT_CODES for e in self.errors)

    def to_dict(self) -> dict:
        """External-display payload: user-safe message, last provider, retry count."""
        return {
            "error": "AI selection failed",
            "userMessage": self.simplified_message(),
            "provider": self.provider,
            "retriesAttempted": self.retries_attempted,
        }


class UnknownProviderError(ValueError):
    """Raised when a provider id is not in the closed provider enumeration."""

    pass
