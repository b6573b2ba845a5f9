"""
Prompt templates for LLM bullet scoring.

The system prompt sets the role, scoring scale and output format. The user prompt
embeds the job description and the compendium (ids, tags and text; author
priorities are withheld so the model scores on relevance alone). On retries the
previous failure is prepended so the model can correct itself.
"""

import hashlib
from typing import Optional

from curator.contexts.compendium import Compendium

# Extra bullets the model scores beyond max_bullets, giving the selection engine
# room to enforce diversity
AI_BULLET_BUFFER = 10

# =============================================================================
# PROMPT TEMPLATES
# =============================================================================

SYSTEM_PROMPT = """\
# Resume Bullet Scoring Expert

You are an expert resume curator. Your task is to SCORE bullet points from a \
candidate's experience based on relevance to a job description. The server applies \
final selection and diversity constraints; your job is to score relevance accurately.

## Analysis Process

1. Parse the job description: required skills and technologies, seniority, domain, \
key responsibilities, leadership expectations.
2. Score each bullet against those requirements: direct skill matches, transferable \
experience, quantifiable impact, leadership signals, recency where relevant.

## Scoring Guidelines

- 0.9-1.0: Direct skill match with quantifiable impact relevant to the role
- 0.7-0.9: Strong relevance to job requirements
- 0.5-0.7: Moderate relevance, transferable skills
- 0.3-0.5: Weak relevance but shows breadth or depth
- 0.0-0.3: Minimal relevance to this specific role

## Output Format

Respond with a single JSON object and nothing else:

{
  "bullets": [{"id": "bullet-id-1", "score": 0.95}, {"id": "bullet-id-2", "score": 0.88}],
  "reasoning": "1-3 sentences on what you weighted highly and why",
  "job_title": "Senior Software Engineer",
  "salary": {"min": 120000, "max": 150000, "currency": "USD", "period": "annual"}
}

- bullets: objects with "id" (copied exactly from the compendium) and "score" (0.0-1.0)
- job_title: exact title from the description, or null
- salary: ISO 4217 currency code (USD, GBP, EUR, ...), "k" notation expanded \
(120k -> 120000), period one of annual, monthly, hourly, daily, weekly; null if absent

## Critical Rules

1. EXACT COUNT - Score exactly the number of bullets requested in the task
2. VALID IDs ONLY - Only use bullet IDs from the provided compendium, each once
3. VALID SCORES - All scores between 0.0 and 1.0
4. VALID JSON - JSON only, no markdown, no extra text"""

_USER_PROMPT_TEMPLATE = """\
{retry_context}## YOUR TASK

Score the most relevant bullets from the candidate's experience for this job.

Requirements:
- Score EXACTLY {expected_count} bullets
- Use scores 0.0-1.0 (1.0 = perfect match, 0.0 = irrelevant)
- Only use IDs exactly as shown in brackets [like-this]

---

## Job Description

{job_description}

---

## Available Bullets

Each bullet shows: [ID] Description, followed by its tags

{bullets}

---

## Response Format

Return ONLY a JSON object:
{{"bullets": [{{"id": "bullet-id", "score": 0.95}}], "reasoning": "...", \
"job_title": "... or null", "salary": {{...}} or null}}

NO markdown, NO code blocks, NO extra text."""

_RETRY_CONTEXT_TEMPLATE = """\
## PREVIOUS RESPONSE HAD ERRORS

{error_context}

Please fix the issues above: score exactly the requested number of bullets and \
ensure every ID exists in the list below.

---

"""

# =============================================================================
# BUILDERS
# =============================================================================


def get_min_bullets(max_bullets: int) -> int:
    """Number of bullets the model is asked to score for a given selection ceiling."""
    return max_bullets + AI_BULLET_BUFFER


def expected_bullet_count(compendium: Compendium, min_bullets: int) -> int:
    """Exact count a valid response must contain (bounded by corpus size)."""
    return min(min_bullets, compendium.total_bullets)


def build_user_prompt(
    job_description: str,
    compendium: Compendium,
    expected_count: int,
    retry_context: Optional[str] = None,
) -> str:
    """
    Build the user prompt for a scoring request.

    Args:
        job_description: Job posting text supplied by the caller
        compendium: Corpus to embed
        expected_count: Exact number of bullets the model must score
        retry_context: Verbose description of the previous attempt's failure

    Returns:
        User prompt string for the LLM
    """
    retry_section = (
        _RETRY_CONTEXT_TEMPLATE.format(error_context=retry_context) if retry_context else ""
    )
    return _USER_PROMPT_TEMPLATE.format(
        retry_context=retry_section,
        expected_count=expected_count,
        job_description=job_description,
        bullets=format_bullets_for_prompt(compendium),
    )


def format_bullets_for_prompt(compendium: Compendium) -> str:
    """
    Format all bullets with their company/position headings.

    Output format:
        ### Company Name (2020-2023)
        Location: San Francisco, CA

        #### Position Title (2021-2023)

        - [bullet-id] Description of achievement
          tags: typescript, leadership
    """
    lines = []

    for company in compendium.experience:
        lines.append(
            f"### {company.display_name} ({format_date_range(company.date_start, company.date_end)})"
        )
        if company.location:
            lines.append(f"Location: {company.location}")
        lines.append("")

        for position in company.children:
            lines.append(
                f"#### {position.name} ({format_date_range(position.date_start, position.date_end)})"
            )
            lines.append("")
            for bullet in position.children:
                lines.append(f"- [{bullet.id}] {bullet.description}")
                lines.append(f"  tags: {', '.join(bullet.tags)}")
            lines.append("")

    return "\n".join(lines).rstrip() + "\n"


def format_date_range(start: Optional[str], end: Optional[str] = None) -> str:
    """
    Format "YYYY" / "YYYY-MM" dates as a year range.

    Examples:
        format_date_range("2020-03", "2023-01")  # "2020-2023"
        format_date_range("2022")                # "2022-Present"
    """
    start_year = start.split("-")[0] if start else "?"
    end_year = end.split("-")[0] if end else "Present"
    return f"{start_year}-{end_year}"


# =============================================================================
# ANALYTICS HELPERS
# =============================================================================


def system_prompt_hash() -> str:
    """Short SHA-256 prefix identifying the system prompt version."""
    return hashlib.sha256(SYSTEM_PROMPT.encode("utf-8")).hexdigest()[:8]


def format_prompt_for_analytics(user_prompt: str, job_description: str) -> str:
    """
    Compact a prompt for analytics storage.

    The system prompt is replaced by its hash and the job description by a
    placeholder; both are stored in separate event fields.
    """
    with_placeholder = f"[SYSTEM_PROMPT:{system_prompt_hash()}]\n\n---\n\n{user_prompt}"
    return with_placeholder.replace(job_description, "[JOB_DESCRIPTION]", 1)
