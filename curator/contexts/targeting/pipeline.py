"""
End-to-end curation pipeline.

AI path (curate):
    job description -> scoring orchestrator -> score map -> selection engine
    -> chronological reorder -> CurationResult

Heuristic path (curate_for_role):
    role profile -> heuristic score map -> selection engine -> chronological reorder

Inputs are validated before any provider is invoked: an unknown provider, an
inconsistent SelectionConfig or a too-short job description fails fast.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from dotenv import load_dotenv

from curator.contexts.compendium import Compendium
from curator.contexts.scoring import (
    DEFAULT_PROVIDER,
    SalaryInfo,
    SelectionError,
    SelectionOptions,
    SelectionProvider,
    SelectionRequest,
    get_provider,
    select_bullets_with_ai,
    validate_provider_id,
)
from curator.contexts.scoring.prompts import system_prompt_hash
from curator.contexts.targeting.chronology import reorder_by_company_chronology
from curator.contexts.targeting.heuristic_scoring import score_compendium
from curator.contexts.targeting.logger import (
    log_curation_complete,
    log_curation_failed,
    log_curation_start,
    log_role_scoring,
)
from curator.contexts.targeting.selection import SelectedBullet, select_bullets_with_report
from curator.contexts.targeting.selection_config import SelectionConfig, load_selection_config
from curator.utils.event_logging import log_selection_event

load_dotenv()

MIN_JOB_DESCRIPTION_LENGTH = 50

ConfigInput = Union[SelectionConfig, Mapping[str, Any], None]


class JobDescriptionTooShortError(ValueError):
    """Raised when a job description is too short to score against."""

    pass


@dataclass
class CurationResult:
    """
    Final, presentation-ordered bullet selection with metadata.

    Attributes:
        selected: Bullets grouped by company in resume order
        reasoning: Model (or heuristic) explanation of the scoring
        provider: Provider that produced the scores (None for heuristic scoring)
        config: Effective selection constraints
        job_title: Job title extracted by the model, if any
        salary: Salary extracted by the model, if valid
        tokens_used: Tokens consumed by the successful call
        attempt_count: Attempts consumed on the successful provider
        unmet_minimums: Companies left below min_per_company -> their count
        role_profile_id: Role profile used for heuristic scoring
    """

    selected: List[SelectedBullet]
    reasoning: str
    provider: Optional[str]
    config: SelectionConfig
    job_title: Optional[str] = None
    salary: Optional[SalaryInfo] = None
    tokens_used: int = 0
    attempt_count: int = 0
    unmet_minimums: Dict[str, int] = field(default_factory=dict)
    role_profile_id: Optional[str] = None

    @property
    def bullet_ids(self) -> List[str]:
        return [s.bullet.id for s in self.selected]

    def to_dict(self) -> dict:
        """camelCase payload for callers and analytics."""
        return {
            "selected": [s.to_dict() for s in self.selected],
            "reasoning": self.reasoning,
            "jobTitle": self.job_title,
            "salary": self.salary.to_dict() if self.salary else None,
            "provider": self.provider,
            "tokensUsed": self.tokens_used,
            "attemptCount": self.attempt_count,
            "unmetMinimums": dict(self.unmet_minimums),
            "config": self.config.to_dict(),
            "roleProfileId": self.role_profile_id,
        }


def resolve_config(config: ConfigInput = None) -> SelectionConfig:
    """
    Resolve a SelectionConfig from an instance, an override mapping or the defaults.

    Raises:
        SelectionConfigError: On unknown keys or violated invariants
    """
    if isinstance(config, SelectionConfig):
        return config
    return load_selection_config(overrides=config)


def resolve_provider(provider: Optional[str] = None) -> str:
    """
    Resolve the initial provider (argument, then CURATOR_PROVIDER, then default).

    Raises:
        UnknownProviderError: If the provider id is not recognized
    """
    return validate_provider_id(provider or os.getenv("CURATOR_PROVIDER") or DEFAULT_PROVIDER)


def validate_job_description(job_description: str) -> str:
    stripped = (job_description or "").strip()
    if len(stripped) < MIN_JOB_DESCRIPTION_LENGTH:
        raise JobDescriptionTooShortError(
            f"Job description must be at least {MIN_JOB_DESCRIPTION_LENGTH} characters "
            f"(got {len(stripped)})"
        )
    return stripped


async def curate(
    job_description: str,
    compendium: Compendium,
    provider: Optional[str] = None,
    config: ConfigInput = None,
    options: Optional[SelectionOptions] = None,
    provider_factory: Callable[[str], SelectionProvider] = get_provider,
    events_file: Optional[Path] = None,
) -> CurationResult:
    """
    Select and order resume bullets for a job description using AI scoring.

    Args:
        job_description: Job posting text (at least MIN_JOB_DESCRIPTION_LENGTH chars)
        compendium: Full compendium
        provider: Initial provider id (default: CURATOR_PROVIDER or first in fallback order)
        config: SelectionConfig, override mapping (camelCase or snake_case), or None
        options: Retry, timeout and fallback settings
        provider_factory: Builds a provider from its id
        events_file: JSON Lines event log (defaults to SELECTION_EVENTS_FILE)

    Returns:
        CurationResult with bullets grouped by company in resume order

    Raises:
        JobDescriptionTooShortError: Before any provider call
        UnknownProviderError: Before any provider call
        SelectionConfigError: Before any provider call
        SelectionError: When every provider and retry was exhausted
    """
    job_description = validate_job_description(job_description)
    provider_name = resolve_provider(provider)
    selection_config = resolve_config(config)
    options = options or SelectionOptions()

    log_curation_start(provider_name, selection_config.max_bullets, compendium.total_bullets)

    request = SelectionRequest(
        job_description=job_description,
        compendium=compendium,
        max_bullets=selection_config.max_bullets,
    )

    try:
        scored = await select_bullets_with_ai(
            request,
            provider_name=provider_name,
            options=options,
            provider_factory=provider_factory,
        )
    except SelectionError as e:
        log_curation_failed(e.message)
        log_selection_event(
            event_type="selection_failed",
            source="targeting",
            events_file=events_file,
            requested_provider=provider_name,
            provider=e.provider,
            retries_attempted=e.retries_attempted,
            user_message=e.simplified_message(),
            errors=[error.to_dict() for error in e.errors],
            config=selection_config.to_dict(),
        )
        raise

    report = select_bullets_with_report(compendium, scored.score_map(), selection_config)
    ordered = reorder_by_company_chronology(report.selected, compendium)

    result = CurationResult(
        selected=ordered,
        reasoning=scored.reasoning,
        provider=scored.provider,
        config=selection_config,
        job_title=scored.job_title,
        salary=scored.salary,
        tokens_used=scored.tokens_used,
        attempt_count=scored.attempt_count,
        unmet_minimums=report.unmet_minimums,
    )

    log_curation_complete(len(ordered), scored.provider, scored.attempt_count)
    log_selection_event(
        event_type="selection_completed",
        source="targeting",
        events_file=events_file,
        requested_provider=provider_name,
        provider=scored.provider,
        attempt_count=scored.attempt_count,
        tokens_used=scored.tokens_used,
        bullet_count=len(ordered),
        bullet_ids=result.bullet_ids,
        job_title=scored.job_title,
        salary=scored.salary.to_dict() if scored.salary else None,
        unmet_minimums=report.unmet_minimums,
        config=selection_config.to_dict(),
        system_prompt_hash=system_prompt_hash(),
    )

    return result


def curate_for_role(
    compendium: Compendium,
    role_profile_id: str,
    config: ConfigInput = None,
) -> CurationResult:
    """
    Select and order resume bullets using a compendium role profile (no AI).

    Raises:
        KeyError: If the role profile does not exist
        InvalidCompendiumError: If the profile's scoring weights are invalid
        SelectionConfigError: On an inconsistent configuration
    """
    selection_config = resolve_config(config)
    profile = compendium.get_role_profile(role_profile_id)

    score_map = score_compendium(compendium, profile)
    log_role_scoring(profile.id, len(score_map))

    report = select_bullets_with_report(compendium, score_map, selection_config)
    ordered = reorder_by_company_chronology(report.selected, compendium)

    return CurationResult(
        selected=ordered,
        reasoning=f"Heuristic scoring against role profile '{profile.name}'",
        provider=None,
        config=selection_config,
        unmet_minimums=report.unmet_minimums,
        role_profile_id=profile.id,
    )
