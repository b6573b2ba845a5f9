"""
Selection configuration: defaults, YAML overrides and validation.

Resolution order (later wins):
1. DEFAULT_SELECTION_CONFIG
2. `selection:` block of the YAML file at CURATOR_CONFIG_PATH (or an explicit path)
3. Per-call overrides (None values are ignored)

The merged result is validated and never clamped: an inconsistent configuration
is an error for the caller to fix.

Examples:
    >>> load_selection_config(overrides={"maxBullets": 12})
    SelectionConfig(max_bullets=12, max_per_company=6, max_per_position=4, min_per_company=2)
"""

import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from dotenv import load_dotenv
from omegaconf import OmegaConf

load_dotenv()

# camelCase (request envelope / JSON) -> field name
_FIELD_ALIASES = {
    "maxBullets": "max_bullets",
    "maxPerCompany": "max_per_company",
    "maxPerPosition": "max_per_position",
    "minPerCompany": "min_per_company",
}


class SelectionConfigError(ValueError):
    """Raised when a selection configuration violates its invariants."""

    pass


@dataclass(frozen=True)
class SelectionConfig:
    """
    Diversity constraints for bullet selection.

    Attributes:
        max_bullets: Ceiling on total selected bullets (may select fewer)
        max_per_company: Ceiling per company
        max_per_position: Ceiling per position
        min_per_company: Floor per represented company, met by backfill where possible
    """

    max_bullets: int = 28
    max_per_company: int = 6
    max_per_position: int = 4
    min_per_company: int = 2

    def __post_init__(self):
        for name, value in asdict(self).items():
            if not isinstance(value, int) or isinstance(value, bool) or value < 1:
                raise SelectionConfigError(f"{name} must be a positive integer, got {value!r}")

        if self.min_per_company > self.max_per_company:
            raise SelectionConfigError(
                f"min_per_company ({self.min_per_company}) cannot exceed "
                f"max_per_company ({self.max_per_company})"
            )
        if self.max_per_company > self.max_bullets:
            raise SelectionConfigError(
                f"max_per_company ({self.max_per_company}) cannot exceed "
                f"max_bullets ({self.max_bullets})"
            )

    def to_dict(self) -> Dict[str, int]:
        """camelCase form for responses and event logs."""
        return {
            "maxBullets": self.max_bullets,
            "maxPerCompany": self.max_per_company,
            "maxPerPosition": self.max_per_position,
            "minPerCompany": self.min_per_company,
        }


DEFAULT_SELECTION_CONFIG = SelectionConfig()


def normalize_config_keys(data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Map camelCase/snake_case keys to field names, dropping None values.

    Raises:
        SelectionConfigError: On unknown keys
    """
    valid_fields = set(_FIELD_ALIASES.values())
    normalized = {}
    for key, value in data.items():
        field_name = _FIELD_ALIASES.get(key, key)
        if field_name not in valid_fields:
            raise SelectionConfigError(
                f"Unknown selection config key: {key!r}. Valid keys: {sorted(_FIELD_ALIASES)}"
            )
        if value is not None:
            normalized[field_name] = value
    return normalized


def load_selection_config(
    config_path: Optional[Path] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> SelectionConfig:
    """
    Resolve the effective selection configuration.

    Args:
        config_path: YAML file with a `selection:` block (defaults to CURATOR_CONFIG_PATH)
        overrides: Per-call values (camelCase or snake_case keys)

    Returns:
        Validated SelectionConfig

    Raises:
        SelectionConfigError: On unknown keys or violated invariants
    """
    merged = OmegaConf.create(asdict(DEFAULT_SELECTION_CONFIG))

    if config_path is None and os.getenv("CURATOR_CONFIG_PATH"):
        config_path = Path(os.getenv("CURATOR_CONFIG_PATH"))

    if config_path is not None:
        file_config = OmegaConf.to_container(OmegaConf.load(config_path), resolve=True) or {}
        section = file_config.get("selection") or {}
        merged = OmegaConf.merge(merged, normalize_config_keys(section))

    if overrides:
        merged = OmegaConf.merge(merged, normalize_config_keys(overrides))

    return SelectionConfig(**OmegaConf.to_container(merged, resolve=True))
