"""
Targeting context logger.

Provides logging interface for the targeting context with automatic [target] prefix.
All targeting modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path
from typing import Optional, TextIO

from loguru import logger

from curator.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[target]"


def setup_targeting_logger(
    log_dir: Optional[Path],
    extra_provenance: Optional[dict] = None,
    console_sink: Optional[TextIO] = None,
) -> Optional[Path]:
    """
    Setup logger for targeting context.

    Args:
        log_dir: Directory for this selection session (None = console only)
        extra_provenance: Additional provenance fields (role profile, ...)
        console_sink: Console stream (default: stdout)

    Returns:
        Path to log file (None when console only)
    """
    return _setup_logger(
        context_name="target",
        log_dir=log_dir,
        extra_provenance=extra_provenance,
        console_sink=console_sink,
    )


# Wrapper functions with automatic [target] prefix


def _log_info(message: str) -> None:
    """Log info message with [target] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [target] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [target] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [target] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [target] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level targeting-specific logging helpers


def log_backfill(company_id: str, before: int, after: int) -> None:
    _log_debug(f"Backfilled {company_id}: {before} -> {after} bullets")


def log_unmet_minimum(company_id: str, selected: int, minimum: int) -> None:
    _log_warning(f"{company_id} left at {selected}/{minimum} bullets (no valid backfill)")


def log_curation_start(provider: str, max_bullets: int, total_bullets: int) -> None:
    _log_info(f"Curating up to {max_bullets} of {total_bullets} bullets (provider: {provider})")


def log_curation_complete(count: int, provider: str, attempt_count: int) -> None:
    _log_success(f"Selected {count} bullets via {provider} (attempt {attempt_count})")


def log_curation_failed(message: str) -> None:
    _log_error(f"Curation failed: {message}")


def log_role_scoring(role_profile_id: str, scored: int) -> None:
    _log_info(f"Scored {scored} bullets against role profile {role_profile_id}")
