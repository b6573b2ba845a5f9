"""
Integration tests for loading compendium files from disk.

Covers both supported formats (JSON export, hand-written YAML) and the
"data unavailable" failure surface.
"""

import json
from pathlib import Path

import pytest

from curator.contexts.compendium import (
    CompendiumUnavailableError,
    load_compendium,
    validate_compendium,
)

FIXTURES_PATH = Path(__file__).parent.parent / "fixtures"


@pytest.mark.integration
def test_load_yaml_fixture():
    """Test YAML loading keeps text verbatim (no interpolation)."""
    compendium = load_compendium(FIXTURES_PATH / "compendium.yaml")

    assert [c.id for c in compendium.experience] == ["northwind", "contoso"]
    assert compendium.total_bullets == 3
    assert compendium.experience[0].location == "Seattle, WA"
    assert compendium.experience[1].priority == 5
    assert "${LATENCY}" in compendium.experience[0].children[0].children[0].description
    assert compendium.get_role_profile("data").scoring_weights.tag_relevance == pytest.approx(0.7)
    assert validate_compendium(compendium) == []


@pytest.mark.integration
def test_load_json_export(tmp_path, compendium_data):
    path = tmp_path / "compendium.json"
    path.write_text(json.dumps(compendium_data))

    compendium = load_compendium(path)

    assert compendium.total_bullets == 11
    assert compendium.experience[0].children[1].date_end == "2022-12"


@pytest.mark.integration
def test_load_from_environment(monkeypatch):
    monkeypatch.setenv("COMPENDIUM_PATH", str(FIXTURES_PATH / "compendium.yaml"))
    assert load_compendium().total_bullets == 3


@pytest.mark.integration
def test_no_path_configured():
    with pytest.raises(CompendiumUnavailableError, match="COMPENDIUM_PATH"):
        load_compendium()


@pytest.mark.integration
def test_missing_file(tmp_path):
    with pytest.raises(CompendiumUnavailableError) as exc_info:
        load_compendium(tmp_path / "nope.json")
    assert exc_info.value.path == tmp_path / "nope.json"


@pytest.mark.integration
@pytest.mark.parametrize(
    "filename, content",
    [
        ("broken.json", '{"experience": ['),
        ("broken.yaml", "experience: [unclosed"),
        ("wrong_shape.json", '{"experience": {"id": "x"}}'),
        ("missing_id.json", '{"experience": [{"name": "No id"}]}'),
    ],
)
def test_unparsable_files(tmp_path, filename, content):
    """Test parse and structure errors surface as data unavailable."""
    path = tmp_path / filename
    path.write_text(content)

    with pytest.raises(CompendiumUnavailableError) as exc_info:
        load_compendium(path)

    assert exc_info.value.original_error is not None
