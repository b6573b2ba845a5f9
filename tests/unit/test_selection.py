"""Unit tests for the constraint-based selection engine."""

from collections import Counter

import pytest

from curator.contexts.targeting import (
    SelectionConfig,
    select_bullets_with_constraints,
    select_bullets_with_report,
)
from conftest import SAMPLE_BULLET_IDS, build_compendium


def ids(selected):
    return [s.bullet.id for s in selected]


@pytest.mark.unit
def test_caps_respected(compendium):
    """Test global, per-company and per-position ceilings hold."""
    scores = {bullet_id: 0.5 for bullet_id in SAMPLE_BULLET_IDS}
    config = SelectionConfig(max_bullets=6, max_per_company=3, max_per_position=2, min_per_company=1)

    selected = select_bullets_with_constraints(compendium, scores, config)

    assert len(selected) == 6
    assert max(Counter(s.company_id for s in selected).values()) <= 3
    assert max(Counter(s.position_id for s in selected).values()) <= 2
    assert len(set(ids(selected))) == len(selected)


@pytest.mark.unit
def test_ranked_by_score(compendium):
    scores = {bullet_id: i / 20 for i, bullet_id in enumerate(SAMPLE_BULLET_IDS)}
    config = SelectionConfig(max_bullets=3, max_per_company=3, max_per_position=3, min_per_company=1)

    report = select_bullets_with_report(compendium, scores, config)

    # Greedy takes i2, i1, g3; acme then displaces initech's weaker bullet
    assert ids(report.selected) == ["i2", "g3", "a6"]
    assert report.unmet_minimums == {}


@pytest.mark.unit
def test_tie_break_priority_then_resume_order():
    """Test equal scores fall back to author priority, then resume order."""
    compendium = build_compendium(
        {"c": {"p": ["b1", "b2", "b3", "b4"]}},
        priorities={"b1": 3, "b2": 8, "b3": 8, "b4": 5},
    )
    scores = {"b1": 0.7, "b2": 0.7, "b3": 0.7, "b4": 0.7}
    config = SelectionConfig(max_bullets=4, max_per_company=4, max_per_position=4, min_per_company=1)

    assert ids(select_bullets_with_constraints(compendium, scores, config)) == ["b2", "b3", "b4", "b1"]


@pytest.mark.unit
def test_unscored_bullets_excluded(compendium):
    scores = {"a1": 0.9, "g1": 0.8}

    selected = select_bullets_with_constraints(compendium, scores)

    assert ids(selected) == ["a1", "g1"]


@pytest.mark.unit
def test_fewer_bullets_than_max():
    """Test a corpus smaller than max_bullets returns every bullet, no error."""
    compendium = build_compendium({"a": {"a-1": ["a1", "a2"]}, "b": {"b-1": ["b1", "b2"]}})
    scores = {"a1": 0.9, "a2": 0.8, "b1": 0.7, "b2": 0.6}
    config = SelectionConfig(max_bullets=5, max_per_company=3, max_per_position=3, min_per_company=1)

    selected = select_bullets_with_constraints(compendium, scores, config)

    assert len(selected) == 4


@pytest.mark.unit
def test_greedy_fills_second_company():
    """Test company caps leave room for a lower-scored company."""
    compendium = build_compendium({"a": {"a-1": ["a1", "a2", "a3"]}, "b": {"b-1": ["b1", "b2"]}})
    scores = {"a1": 0.9, "a2": 0.8, "a3": 0.7, "b1": 0.2, "b2": 0.1}
    config = SelectionConfig(max_bullets=3, max_per_company=2, max_per_position=2, min_per_company=1)

    selected = select_bullets_with_constraints(compendium, scores, config)

    assert len(selected) == 3
    assert [s.company_id for s in selected].count("b") == 1


@pytest.mark.unit
def test_backfill_displaces_lowest_ranked():
    """Test a company below its minimum displaces the weakest bullet of a company above it."""
    compendium = build_compendium({"a": {"a-1": ["a1", "a2", "a3"]}, "b": {"b-1": ["b1", "b2"]}})
    scores = {"a1": 0.9, "a2": 0.8, "a3": 0.7, "b1": 0.2, "b2": 0.1}
    config = SelectionConfig(max_bullets=3, max_per_company=3, max_per_position=3, min_per_company=1)

    report = select_bullets_with_report(compendium, scores, config)

    assert ids(report.selected) == ["a1", "a2", "b1"]
    assert report.unmet_minimums == {}


@pytest.mark.unit
def test_unmet_minimum_reported_and_state_kept():
    """Test a minimum that cannot be met leaves the greedy selection untouched."""
    compendium = build_compendium({"a": {"a-1": ["a1", "a2"]}, "b": {"b-1": ["b1", "b2"]}})
    scores = {"a1": 0.9, "a2": 0.8, "b1": 0.2, "b2": 0.1}
    config = SelectionConfig(max_bullets=2, max_per_company=2, max_per_position=2, min_per_company=2)

    report = select_bullets_with_report(compendium, scores, config)

    assert ids(report.selected) == ["a1", "a2"]
    assert report.unmet_minimums == {"b": 0}


@pytest.mark.unit
def test_backfill_precedence_follows_resume_order():
    """Test earlier companies win when displaceable slots run out."""
    compendium = build_compendium(
        {
            "a": {"a-1": ["a1", "a2", "a3", "a4"]},
            "b": {"b-1": ["b1", "b2"]},
            "c": {"c-1": ["c1", "c2"]},
        }
    )
    scores = {"a1": 0.9, "a2": 0.8, "a3": 0.7, "a4": 0.6, "b1": 0.2, "b2": 0.1, "c1": 0.3, "c2": 0.25}
    config = SelectionConfig(max_bullets=4, max_per_company=4, max_per_position=4, min_per_company=2)

    report = select_bullets_with_report(compendium, scores, config)

    assert sorted(ids(report.selected)) == ["a1", "a2", "b1", "b2"]
    assert report.unmet_minimums == {"c": 0}


@pytest.mark.unit
def test_backfill_respects_position_cap():
    """Test backfill skips candidates whose position is already full."""
    compendium = build_compendium({"a": {"a-1": ["a1", "a2", "a3"]}, "b": {"b-1": ["b1", "b2"], "b-2": ["b3"]}})
    scores = {"a1": 0.9, "a2": 0.8, "a3": 0.7, "b1": 0.3, "b2": 0.2, "b3": 0.1}
    config = SelectionConfig(max_bullets=4, max_per_company=3, max_per_position=1, min_per_company=2)

    report = select_bullets_with_report(compendium, scores, config)

    # Greedy: a1, b1, b3; every other "a" bullet shares the full a-1 position
    assert sorted(ids(report.selected)) == ["a1", "b1", "b3"]
    assert report.unmet_minimums == {"a": 1}


@pytest.mark.unit
def test_selection_is_pure(compendium):
    """Test identical inputs give identical outputs and inputs are not mutated."""
    scores = {bullet_id: 0.5 + (i % 3) / 10 for i, bullet_id in enumerate(SAMPLE_BULLET_IDS)}
    snapshot = dict(scores)

    first = select_bullets_with_constraints(compendium, scores)
    second = select_bullets_with_constraints(compendium, scores)

    assert first == second
    assert scores == snapshot


@pytest.mark.unit
def test_selected_bullet_to_dict(compendium):
    selected = select_bullets_with_constraints(compendium, {"a1": 0.9})
    assert selected[0].to_dict() == {
        "id": "a1",
        "description": "Rebuilt the billing API in Python",
        "tags": ["python", "backend"],
        "priority": 9,
        "companyId": "acme",
        "positionId": "acme-staff",
        "score": 0.9,
    }
