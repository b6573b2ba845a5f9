"""
Shared utilities for CURATOR.

Common functionality used across contexts:
- LLM vendor clients
- Logging (detailed loguru logs and the JSON Lines selection event log)
- Timestamps
"""

from curator.utils.timestamp import format_timestamp, now, now_exact

__all__ = ["format_timestamp", "now", "now_exact"]
