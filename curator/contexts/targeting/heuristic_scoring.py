"""
Heuristic bullet scoring against a role profile.

Deterministic, provider-free alternative to AI scoring. Each bullet is scored as:

    (tag_score * w_tag + priority/10 * w_priority) * company_mult * position_mult

where
- tag_score is the mean weight of the bullet's tags found in the profile (0 if none)
- company_mult maps company priority 1-10 onto 0.8-1.2
- position_mult is the same priority mapping times a 0.9-1.1 tag factor
  (1.0 when the position carries no tags)

The resulting score map feeds the same selection engine as AI scores.
"""

from typing import Dict, Iterable, Mapping

from curator.contexts.compendium import Bullet, Company, Compendium, Position, RoleProfile, ScoringWeights


def calculate_tag_relevance(tags: Iterable[str], tag_weights: Mapping[str, float]) -> float:
    """Average weight of the tags that appear in tag_weights (0.0 when none match)."""
    matched = [tag_weights[tag] for tag in tags if tag in tag_weights]
    if not matched:
        return 0.0
    return sum(matched) / len(matched)


def _priority_multiplier(priority: int) -> float:
    return 0.8 + (priority / 10.0) * 0.4


def company_multiplier(company: Company) -> float:
    """Company priority mapped onto 0.8-1.2."""
    return _priority_multiplier(company.priority)


def position_multiplier(position: Position, tag_weights: Mapping[str, float]) -> float:
    """Position priority multiplier times a 0.9-1.1 tag relevance factor."""
    if position.tags:
        tag_factor = 0.9 + calculate_tag_relevance(position.tags, tag_weights) * 0.2
    else:
        tag_factor = 1.0
    return _priority_multiplier(position.priority) * tag_factor


def score_bullet(
    bullet: Bullet,
    position: Position,
    company: Company,
    tag_weights: Mapping[str, float],
    weights: ScoringWeights,
) -> float:
    """
    Score one bullet in its company/position context.

    weights must already be normalized (see ScoringWeights.normalize).
    """
    tag_score = calculate_tag_relevance(bullet.tags, tag_weights)
    priority_score = bullet.priority / 10.0
    base = tag_score * weights.tag_relevance + priority_score * weights.priority

    return base * company_multiplier(company) * position_multiplier(position, tag_weights)


def score_compendium(compendium: Compendium, profile: RoleProfile) -> Dict[str, float]:
    """
    Score every bullet in the compendium against a role profile.

    Returns:
        Bullet id -> score

    Raises:
        InvalidCompendiumError: If the profile's scoring weights are negative or all zero
    """
    weights = profile.scoring_weights.normalize()

    return {
        entry.bullet.id: score_bullet(entry.bullet, entry.position, entry.company, profile.tag_weights, weights)
        for entry in compendium.iter_bullets()
    }
