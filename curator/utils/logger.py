"""
Generic logger setup utilities for detailed (Tier 1) logging.

Provides reusable loguru configuration with provenance tracking.
Context-specific wrappers live in contexts/{context}/logger.py.
"""

import os
import sys
from pathlib import Path
from typing import Optional, TextIO

from dotenv import load_dotenv
from loguru import logger

load_dotenv()

LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))

# Default level colors for console output
LEVEL_COLORS = {
    "WARNING": "<yellow>",
    "ERROR": "<red>",
    "CRITICAL": "<bold><red>",
}

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <7} | {message}"
CONSOLE_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss} | <level>{level: <7}</level> | <level>{message}</level>"
)


def setup_logger(
    context_name: str,
    log_dir: Optional[Path] = None,
    extra_provenance: Optional[dict] = None,
    level_colors: Optional[dict] = None,
    console_level: str = "INFO",
    console_sink: Optional[TextIO] = None,
) -> Optional[Path]:
    """
    Configure loguru for a context with provenance tracking.

    Sets up a colorized console sink and, when log_dir is given, a DEBUG-level
    file sink. Logs execution provenance (script, command, working directory,
    Python version) followed by any extra context.

    Args:
        context_name: Context identifier (e.g., "score", "target")
        log_dir: Directory for this logging session (None = console only)
        extra_provenance: Additional key-value pairs for provenance header
        level_colors: Override default level colors (e.g., {"INFO": "<cyan>"})
        console_level: Minimum level written to the console
        console_sink: Console stream (default: stdout). Scripts printing JSON pass
            sys.stderr so stdout carries only the payload.

    Returns:
        Path to log file, or None when logging to console only

    Example:
        from curator.utils.logger import setup_logger

        log_file = setup_logger(
            context_name="score",
            log_dir=Path("outs/logs/curate_20251114_123456"),
            extra_provenance={"Provider": "cerebras-gpt"},
        )
    """
    logger.remove()

    colors = {**LEVEL_COLORS, **(level_colors or {})}
    for level_name, color in colors.items():
        logger.level(level_name, color=color)

    log_file = None
    if log_dir is not None:
        log_dir.mkdir(exist_ok=True, parents=True)
        log_file = log_dir / f"{context_name}.log"
        # File handler captures everything, including raw vendor responses
        logger.add(log_file, format=FILE_FORMAT, level="DEBUG")

    logger.add(console_sink or sys.stdout, format=CONSOLE_FORMAT, level=console_level, colorize=True)

    log_provenance(extra_provenance)

    return log_file


def log_provenance(extra_context: Optional[dict] = None) -> None:
    """
    Log execution provenance to current logger.

    Args:
        extra_context: Additional key-value pairs to log
    """
    logger.info("=" * 80)
    logger.info(f"Script: {sys.argv[0]}")
    logger.info(f"Command: {' '.join(sys.argv)}")
    logger.info(f"Working directory: {Path.cwd()}")
    logger.info(f"Python: {sys.version.split()[0]}")

    if extra_context:
        for key, value in extra_context.items():
            logger.info(f"{key}: {value}")

    logger.info("=" * 80)
