"""
Scoring context logger.

Provides logging interface for the scoring context with automatic [score] prefix.
All scoring modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path
from typing import Optional, TextIO

from loguru import logger

from curator.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[score]"


def setup_scoring_logger(
    log_dir: Optional[Path],
    provider: str,
    console_sink: Optional[TextIO] = None,
) -> Optional[Path]:
    """
    Setup logger for scoring context.

    Args:
        log_dir: Directory for this scoring session (None = console only)
        provider: Initially requested provider, recorded in the provenance header
        console_sink: Console stream (default: stdout)

    Returns:
        Path to log file (None when console only)
    """
    return _setup_logger(
        context_name="score",
        log_dir=log_dir,
        extra_provenance={"Provider": provider},
        console_sink=console_sink,
    )


# Wrapper functions with automatic [score] prefix


def _log_info(message: str) -> None:
    """Log info message with [score] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [score] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [score] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [score] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [score] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level scoring-specific logging helpers


def log_attempt_start(provider: str, attempt: int, max_retries: int) -> None:
    _log_info(f"Attempt {attempt}/{max_retries} with {provider}")


def log_provider_call(provider: str, model: str) -> None:
    _log_debug(f"Calling {provider} ({model})")


def log_raw_response(provider: str, raw: str) -> None:
    """Raw model output goes to the DEBUG file sink only."""
    # opt(raw=True) keeps multi-line output from being prefixed on every line
    logger.opt(raw=True).debug(
        f"\n{'=' * 80}\n{provider} RAW RESPONSE:\n{'=' * 80}\n{raw}\n"
    )


def log_attempt_failure(provider: str, attempt: int, code: str, message: str) -> None:
    _log_warning(f"{provider} attempt {attempt} failed: {code} - {message}")


def log_provider_unavailable(provider: str) -> None:
    _log_warning(f"Provider {provider} not available (credentials not configured)")


def log_provider_down(provider: str) -> None:
    _log_warning(f"Provider {provider} is DOWN, trying fallback")


def log_fallback(from_provider: str, to_provider: str) -> None:
    _log_info(f"Falling back from {from_provider} to {to_provider}")


def log_retries_exhausted(provider: str, max_retries: int) -> None:
    _log_error(f"All {max_retries} retries exhausted for {provider}")


def log_selection_success(provider: str, attempt: int, tokens_used: int) -> None:
    _log_success(f"Success with {provider} after {attempt} attempt(s) ({tokens_used} tokens)")


def log_selection_failure(message: str, retries_attempted: int) -> None:
    _log_error(f"{message} ({retries_attempted} vendor calls)")
