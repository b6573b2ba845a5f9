"""Unit tests for the compendium data structure and validation."""

import pytest

from curator.contexts.compendium import (
    Compendium,
    InvalidCompendiumError,
    ScoringWeights,
    validate_compendium,
)
from conftest import SAMPLE_BULLET_IDS


@pytest.mark.unit
def test_iter_bullets_resume_order(compendium):
    """Test bullets are yielded in resume order with ancestry and index."""
    entries = list(compendium.iter_bullets())

    assert [e.bullet.id for e in entries] == SAMPLE_BULLET_IDS
    assert [e.index for e in entries] == list(range(len(SAMPLE_BULLET_IDS)))
    assert entries[4].company.id == "acme"
    assert entries[4].position.id == "acme-senior"


@pytest.mark.unit
def test_camel_case_fields(compendium):
    """Test JSON export keys (dateStart, roleProfiles) are read."""
    acme = compendium.experience[0]
    assert acme.date_start == "2021-03"
    assert acme.children[1].date_end == "2022-12"
    assert acme.display_name == "Acme Corp"
    assert compendium.personal == {"name": "Alex Example"}
    assert [p.id for p in compendium.role_profiles] == ["backend", "unnormalized"]


@pytest.mark.unit
def test_snake_case_fields():
    """Test hand-written YAML keys (date_start, role_profiles) are read."""
    compendium = Compendium.from_dict(
        {
            "experience": [
                {
                    "id": "c",
                    "date_start": "2020",
                    "children": [
                        {
                            "id": "p",
                            "name": "Engineer",
                            "date_start": "2020",
                            "date_end": "2021",
                            "children": [{"id": "b", "description": "Did things"}],
                        }
                    ],
                }
            ],
            "role_profiles": [
                {"id": "r", "name": "Role", "tag_weights": {"x": 1}, "scoring_weights": {"tag_relevance": 1, "priority": 0}}
            ],
        }
    )

    position = compendium.experience[0].children[0]
    assert position.date_end == "2021"
    assert position.children[0].priority == 5
    assert compendium.role_profiles[0].scoring_weights == ScoringWeights(1.0, 0.0)


@pytest.mark.unit
def test_hierarchy_and_indexes(compendium):
    """Test traversal helpers."""
    assert compendium.total_bullets == 11
    assert compendium.bullet_ids() == set(SAMPLE_BULLET_IDS)
    assert compendium.bullet_hierarchy()["g2"] == ("globex", "globex-eng")
    assert compendium.company_index() == {"acme": 0, "globex": 1, "initech": 2}


@pytest.mark.unit
def test_get_role_profile(compendium):
    """Test role profile lookup and the missing-profile error."""
    assert compendium.get_role_profile("backend").name == "Backend Engineer"

    with pytest.raises(KeyError, match="nonexistent"):
        compendium.get_role_profile("nonexistent")


@pytest.mark.unit
@pytest.mark.parametrize(
    "data",
    [
        [],
        {"personal": {}},
        {"experience": [{"name": "No id", "children": []}]},
        {"experience": [{"id": "c", "children": [{"id": "p", "name": "P", "children": [{"id": "b"}]}]}]},
    ],
)
def test_malformed_compendium_rejected(data):
    """Test structural problems raise InvalidCompendiumError."""
    with pytest.raises(InvalidCompendiumError):
        Compendium.from_dict(data)


@pytest.mark.unit
def test_validate_compendium_clean(compendium):
    """Test the sample compendium has no problems."""
    assert validate_compendium(compendium) == []


@pytest.mark.unit
def test_validate_compendium_reports_problems(compendium_data):
    """Test duplicate ids, out-of-range priorities and bad weights are reported."""
    bullets = compendium_data["experience"][0]["children"][0]["children"]
    bullets[1]["id"] = "a1"
    bullets[2]["priority"] = 11
    compendium_data["roleProfiles"][0]["scoringWeights"]["priority"] = -0.4

    problems = validate_compendium(Compendium.from_dict(compendium_data))

    assert "Duplicate id: a1" in problems
    assert any("a3" in p and "priority 11" in p for p in problems)
    assert any(p.startswith("RoleProfile backend") for p in problems)


@pytest.mark.unit
def test_validate_compendium_empty():
    """Test an empty corpus is reported."""
    problems = validate_compendium(Compendium.from_dict({"experience": []}))
    assert problems == ["Compendium contains no bullets"]


@pytest.mark.unit
def test_scoring_weights_normalize():
    """Test weights are scaled to sum to 1.0."""
    normalized = ScoringWeights(tag_relevance=3.0, priority=1.0).normalize()
    assert normalized.tag_relevance == pytest.approx(0.75)
    assert normalized.priority == pytest.approx(0.25)

    already = ScoringWeights(tag_relevance=0.6, priority=0.4)
    assert already.normalize() is already


@pytest.mark.unit
@pytest.mark.parametrize("weights", [(-0.1, 1.1), (0.0, 0.0)])
def test_scoring_weights_invalid(weights):
    """Test negative or all-zero weights are rejected."""
    with pytest.raises(InvalidCompendiumError):
        ScoringWeights(*weights).validate()
