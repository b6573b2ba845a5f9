"""
Constraint-based bullet selection.

Given a score for each bullet and a SelectionConfig, deterministically picks the
final bullet set:

1. Flatten the compendium into candidates (bullets missing from the score map are
   excluded)
2. Rank by score desc, then author priority desc, then resume order
3. Greedy pass admitting candidates within the global, per-company and
   per-position ceilings
4. Backfill companies below min_per_company, displacing the lowest-ranked bullets
   of companies above their own minimum when the global ceiling is reached

Selection is a pure function of (compendium, score map, config).
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from curator.contexts.compendium import Bullet, Compendium
from curator.contexts.targeting.logger import log_backfill, log_unmet_minimum
from curator.contexts.targeting.selection_config import DEFAULT_SELECTION_CONFIG, SelectionConfig


@dataclass(frozen=True)
class SelectedBullet:
    """
    A bullet joined with its score and ancestry.

    Attributes:
        bullet: The compendium bullet
        company_id: Owning company
        position_id: Owning position
        score: Relevance score from the score map
        index: Position of the bullet in resume order (tie-break)
    """

    bullet: Bullet
    company_id: str
    position_id: str
    score: float
    index: int

    def to_dict(self) -> dict:
        return {
            "id": self.bullet.id,
            "description": self.bullet.description,
            "tags": list(self.bullet.tags),
            "priority": self.bullet.priority,
            "companyId": self.company_id,
            "positionId": self.position_id,
            "score": self.score,
        }


@dataclass(frozen=True)
class SelectionReport:
    """
    Selection outcome with constraint diagnostics.

    Attributes:
        selected: Selected bullets, ranked best first
        unmet_minimums: Company id -> selected count, for companies left below
            min_per_company because no backfill satisfied every constraint
    """

    selected: List[SelectedBullet]
    unmet_minimums: Dict[str, int] = field(default_factory=dict)


def ranking_key(candidate: SelectedBullet) -> Tuple[float, int, int]:
    """Score desc, then author priority desc, then resume order."""
    return (-candidate.score, -candidate.bullet.priority, candidate.index)


def build_candidates(compendium: Compendium, score_map: Mapping[str, float]) -> List[SelectedBullet]:
    """Join scored bullets with their ancestry, ranked best first."""
    candidates = [
        SelectedBullet(
            bullet=entry.bullet,
            company_id=entry.company.id,
            position_id=entry.position.id,
            score=score_map[entry.bullet.id],
            index=entry.index,
        )
        for entry in compendium.iter_bullets()
        if entry.bullet.id in score_map
    ]
    return sorted(candidates, key=ranking_key)


class _SelectionState:
    """Admitted bullets plus per-company/per-position counters."""

    def __init__(self):
        self.admitted: Dict[int, SelectedBullet] = {}
        self.company_count: Counter = Counter()
        self.position_count: Counter = Counter()

    def copy(self) -> "_SelectionState":
        clone = _SelectionState()
        clone.admitted = dict(self.admitted)
        clone.company_count = self.company_count.copy()
        clone.position_count = self.position_count.copy()
        return clone

    def __len__(self) -> int:
        return len(self.admitted)

    def __contains__(self, candidate: SelectedBullet) -> bool:
        return candidate.index in self.admitted

    def admit(self, candidate: SelectedBullet) -> None:
        self.admitted[candidate.index] = candidate
        self.company_count[candidate.company_id] += 1
        self.position_count[candidate.position_id] += 1

    def evict(self, candidate: SelectedBullet) -> None:
        del self.admitted[candidate.index]
        self.company_count[candidate.company_id] -= 1
        self.position_count[candidate.position_id] -= 1

    def fits(self, candidate: SelectedBullet, config: SelectionConfig) -> bool:
        return (
            len(self.admitted) < config.max_bullets
            and self.company_count[candidate.company_id] < config.max_per_company
            and self.position_count[candidate.position_id] < config.max_per_position
        )


def _lowest_displaceable(
    state: _SelectionState, company_id: str, config: SelectionConfig
) -> Optional[SelectedBullet]:
    """Lowest-ranked admitted bullet of another company that is above its own minimum."""
    eligible = [
        candidate
        for candidate in state.admitted.values()
        if candidate.company_id != company_id
        and state.company_count[candidate.company_id] > config.min_per_company
    ]
    return max(eligible, key=ranking_key) if eligible else None


def _plan_backfill(
    state: _SelectionState,
    company_id: str,
    pool: Iterable[SelectedBullet],
    config: SelectionConfig,
) -> Optional[_SelectionState]:
    """
    Raise one company to min_per_company on a copy of the state.

    Returns:
        The new state, or None when the minimum cannot be met without breaking
        another constraint (the original state is then kept unchanged)
    """
    planned = state.copy()

    for candidate in pool:
        if planned.company_count[company_id] >= config.min_per_company:
            break
        if candidate in planned:
            continue
        if planned.position_count[candidate.position_id] >= config.max_per_position:
            continue
        if len(planned) >= config.max_bullets:
            victim = _lowest_displaceable(planned, company_id, config)
            if victim is None:
                return None
            planned.evict(victim)
        planned.admit(candidate)

    if planned.company_count[company_id] < config.min_per_company:
        return None
    return planned


def select_bullets_with_report(
    compendium: Compendium,
    score_map: Mapping[str, float],
    config: SelectionConfig = DEFAULT_SELECTION_CONFIG,
) -> SelectionReport:
    """
    Select bullets under diversity constraints and report unmet minimums.

    Companies are backfilled in resume order, so when several companies compete
    for the same displaceable slots the more recent company wins.

    Args:
        compendium: Full compendium
        score_map: Bullet id -> score (unscored bullets are never selected)
        config: Selection constraints

    Returns:
        SelectionReport with bullets ranked best first
    """
    candidates = build_candidates(compendium, score_map)

    # Greedy pass
    state = _SelectionState()
    for candidate in candidates:
        if len(state) >= config.max_bullets:
            break
        if state.fits(candidate, config):
            state.admit(candidate)

    # Backfill pass
    by_company: Dict[str, List[SelectedBullet]] = {}
    for candidate in candidates:
        by_company.setdefault(candidate.company_id, []).append(candidate)

    unmet_minimums = {}
    for company in compendium.experience:
        pool = by_company.get(company.id)
        if not pool or state.company_count[company.id] >= config.min_per_company:
            continue

        before = state.company_count[company.id]
        planned = _plan_backfill(state, company.id, pool, config)
        if planned is None:
            unmet_minimums[company.id] = before
            log_unmet_minimum(company.id, before, config.min_per_company)
            continue

        log_backfill(company.id, before, planned.company_count[company.id])
        state = planned

    selected = sorted(state.admitted.values(), key=ranking_key)
    return SelectionReport(selected=selected, unmet_minimums=unmet_minimums)


def select_bullets_with_constraints(
    compendium: Compendium,
    score_map: Mapping[str, float],
    config: SelectionConfig = DEFAULT_SELECTION_CONFIG,
) -> List[SelectedBullet]:
    """Select bullets under diversity constraints, ranked best first."""
    return select_bullets_with_report(compendium, score_map, config).selected
