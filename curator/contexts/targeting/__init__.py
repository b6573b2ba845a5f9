"""
Targeting Context

Responsibilities:
- Decides the final bullet set from a score map under diversity constraints
- Orders the selection for presentation (companies in resume order)
- Scores bullets heuristically against compendium role profiles
- Runs the end-to-end curation pipeline (AI or heuristic scoring -> selection)

Owns: Selection configuration, selection engine, chronological reorder, curation pipeline
Never: Calls LLM vendors directly or parses model output
"""

from curator.contexts.targeting.chronology import reorder_by_company_chronology
from curator.contexts.targeting.heuristic_scoring import (
    calculate_tag_relevance,
    company_multiplier,
    position_multiplier,
    score_bullet,
    score_compendium,
)
from curator.contexts.targeting.pipeline import (
    MIN_JOB_DESCRIPTION_LENGTH,
    CurationResult,
    JobDescriptionTooShortError,
    curate,
    curate_for_role,
    resolve_config,
    resolve_provider,
)
from curator.contexts.targeting.selection import (
    SelectedBullet,
    SelectionReport,
    build_candidates,
    ranking_key,
    select_bullets_with_constraints,
    select_bullets_with_report,
)
from curator.contexts.targeting.selection_config import (
    DEFAULT_SELECTION_CONFIG,
    SelectionConfig,
    SelectionConfigError,
    load_selection_config,
)

__all__ = [
    # Pipeline
    "curate",
    "curate_for_role",
    "CurationResult",
    "JobDescriptionTooShortError",
    "MIN_JOB_DESCRIPTION_LENGTH",
    "resolve_config",
    "resolve_provider",
    # Selection
    "SelectedBullet",
    "SelectionReport",
    "build_candidates",
    "ranking_key",
    "select_bullets_with_constraints",
    "select_bullets_with_report",
    "reorder_by_company_chronology",
    # Configuration
    "DEFAULT_SELECTION_CONFIG",
    "SelectionConfig",
    "SelectionConfigError",
    "load_selection_config",
    # Heuristic scoring
    "calculate_tag_relevance",
    "company_multiplier",
    "position_multiplier",
    "score_bullet",
    "score_compendium",
]
