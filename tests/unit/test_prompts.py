"""Unit tests for scoring prompt construction."""

import pytest

from curator.contexts.scoring.prompts import (
    AI_BULLET_BUFFER,
    SYSTEM_PROMPT,
    build_user_prompt,
    expected_bullet_count,
    format_bullets_for_prompt,
    format_date_range,
    format_prompt_for_analytics,
    get_min_bullets,
    system_prompt_hash,
)
from conftest import JOB_DESCRIPTION, SAMPLE_BULLET_IDS


@pytest.mark.unit
def test_min_bullets_adds_buffer():
    assert get_min_bullets(28) == 28 + AI_BULLET_BUFFER


@pytest.mark.unit
def test_expected_count_bounded_by_corpus(compendium):
    """Test the model is never asked for more bullets than exist."""
    assert expected_bullet_count(compendium, 38) == 11
    assert expected_bullet_count(compendium, 5) == 5


@pytest.mark.unit
def test_bullets_section_contents(compendium):
    """Test ids, text and tags are embedded but priorities are not."""
    section = format_bullets_for_prompt(compendium)

    for bullet_id in SAMPLE_BULLET_IDS:
        assert f"[{bullet_id}]" in section
    assert "### Acme Corp (2021-Present)" in section
    assert "#### Senior Engineer (2021-2022)" in section
    assert "tags: python, backend" in section
    assert "priority" not in section.lower()


@pytest.mark.unit
def test_user_prompt(compendium):
    prompt = build_user_prompt(JOB_DESCRIPTION, compendium, expected_count=11)

    assert "Score EXACTLY 11 bullets" in prompt
    assert JOB_DESCRIPTION in prompt
    assert "PREVIOUS RESPONSE HAD ERRORS" not in prompt


@pytest.mark.unit
def test_user_prompt_with_retry_context(compendium):
    """Test the previous failure is prepended on retries."""
    context = "error[E004_WRONG_BULLET_COUNT]: Expected 11 bullets, got 9"
    prompt = build_user_prompt(JOB_DESCRIPTION, compendium, 11, retry_context=context)

    assert prompt.startswith("## PREVIOUS RESPONSE HAD ERRORS")
    assert context in prompt


@pytest.mark.unit
def test_job_description_with_braces(compendium):
    """Test literal braces in caller text survive templating."""
    description = JOB_DESCRIPTION + " Experience with {templating} and ${vars}."
    assert description in build_user_prompt(description, compendium, 11)


@pytest.mark.unit
@pytest.mark.parametrize(
    "start, end, expected",
    [("2020-03", "2023-01", "2020-2023"), ("2022", None, "2022-Present"), (None, None, "?-Present")],
)
def test_format_date_range(start, end, expected):
    assert format_date_range(start, end) == expected


@pytest.mark.unit
def test_prompt_analytics(compendium):
    """Test analytics form replaces the system prompt and job description."""
    prompt = build_user_prompt(JOB_DESCRIPTION, compendium, 11)

    compact = format_prompt_for_analytics(prompt, JOB_DESCRIPTION)

    assert len(system_prompt_hash()) == 8
    assert compact.startswith(f"[SYSTEM_PROMPT:{system_prompt_hash()}]")
    assert "[JOB_DESCRIPTION]" in compact
    assert JOB_DESCRIPTION not in compact
    assert SYSTEM_PROMPT not in compact
