"""
Compendium Context

Responsibilities:
- Represents the full resume corpus (companies -> positions -> bullets)
- Loads the corpus from its JSON export or a YAML file
- Provides read-only traversal helpers (ids, ancestry, resume order)

Owns: Corpus data model, corpus loading and structural validation
Never: Scores, selects, or reorders bullets
"""

from curator.contexts.compendium.compendium_data_structure import (
    Bullet,
    BulletEntry,
    Company,
    Compendium,
    Position,
    RoleProfile,
    ScoringWeights,
)
from curator.contexts.compendium.exceptions import (
    CompendiumUnavailableError,
    InvalidCompendiumError,
)
from curator.contexts.compendium.loader import load_compendium, validate_compendium

__all__ = [
    # Data structure classes
    "Bullet",
    "BulletEntry",
    "Company",
    "Compendium",
    "Position",
    "RoleProfile",
    "ScoringWeights",
    # Loading
    "load_compendium",
    "validate_compendium",
    # Errors
    "CompendiumUnavailableError",
    "InvalidCompendiumError",
]
