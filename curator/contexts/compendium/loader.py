"""
Compendium loading and validation.

Loads the resume corpus from the JSON export (camelCase) or a hand-written YAML
file. Every loading failure surfaces as CompendiumUnavailableError so callers can
report "data unavailable" distinctly from selection failures.
"""

import json
import os
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from omegaconf import OmegaConf
from yaml import YAMLError

from curator.contexts.compendium.compendium_data_structure import Compendium
from curator.contexts.compendium.exceptions import (
    CompendiumUnavailableError,
    InvalidCompendiumError,
)

load_dotenv()

YAML_SUFFIXES = {".yaml", ".yml"}


def load_compendium(path: Optional[Path] = None) -> Compendium:
    """
    Load the compendium snapshot.

    Args:
        path: JSON or YAML file (defaults to COMPENDIUM_PATH env variable)

    Returns:
        Parsed, read-only Compendium

    Raises:
        CompendiumUnavailableError: If no path is configured, the file is missing,
            unparsable, or structurally invalid
    """
    if path is None:
        env_path = os.getenv("COMPENDIUM_PATH")
        if not env_path:
            raise CompendiumUnavailableError("COMPENDIUM_PATH environment variable not set")
        path = Path(env_path)

    path = Path(path)
    if not path.exists():
        raise CompendiumUnavailableError("Compendium file not found", path=path)

    try:
        if path.suffix.lower() in YAML_SUFFIXES:
            # resolve=False: bullet text may legitimately contain "${...}"
            data = OmegaConf.to_container(OmegaConf.load(path), resolve=False)
        else:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        return Compendium.from_dict(data)
    except (OSError, ValueError, YAMLError, InvalidCompendiumError) as e:
        raise CompendiumUnavailableError(
            "Compendium could not be parsed", path=path, original_error=e
        ) from e


def validate_compendium(compendium: Compendium) -> List[str]:
    """
    Check structural invariants that parsing alone does not enforce.

    Returns:
        List of human-readable problems (empty when the compendium is valid)
    """
    problems = []

    for duplicate in compendium.find_duplicate_ids():
        problems.append(f"Duplicate id: {duplicate}")

    for company in compendium.experience:
        nodes = [("Company", company)]
        for position in company.children:
            nodes.append(("Position", position))
            nodes.extend(("Bullet", bullet) for bullet in position.children)
        for kind, node in nodes:
            if not 1 <= node.priority <= 10:
                problems.append(f"{kind} {node.id}: priority {node.priority} outside 1-10")

    for profile in compendium.role_profiles:
        try:
            profile.scoring_weights.validate()
        except InvalidCompendiumError as e:
            problems.append(f"RoleProfile {profile.id}: {e}")

    if compendium.total_bullets == 0:
        problems.append("Compendium contains no bullets")

    return problems
