"""
Response validation for LLM scoring output.

Extracts the JSON object from a raw model response and validates it, in order,
against the expected shape, the requested count and the compendium's bullet ids.
The first violation found is raised as an AttemptError so the orchestrator can
feed it back to the model.
"""

import json
import math
import re
from dataclasses import dataclass
from typing import Any, List, Optional

from loguru import logger

from curator.contexts.scoring.errors import AttemptError, ErrorCode, ErrorSpan, ParseError

SALARY_PERIODS = ("annual", "monthly", "hourly", "daily", "weekly")

_CODE_BLOCK_PATTERN = re.compile(r"```(?:json)?\s*(\{[\s\S]*?\})\s*```")
_BULLETS_OBJECT_PATTERN = re.compile(r"\{[\s\S]*\"bullets\"[\s\S]*\}")
_ANY_OBJECT_PATTERN = re.compile(r"\{[\s\S]*\}")


@dataclass(frozen=True)
class ScoredBulletId:
    """A bullet id with its model-assigned relevance score (0.0-1.0)."""

    id: str
    score: float


@dataclass(frozen=True)
class SalaryInfo:
    """Salary extracted from the job description."""

    currency: str
    period: str
    min: Optional[float] = None
    max: Optional[float] = None

    def to_dict(self) -> dict:
        return {"min": self.min, "max": self.max, "currency": self.currency, "period": self.period}


@dataclass(frozen=True)
class ParsedAIResponse:
    """Validated content of a model response."""

    bullets: List[ScoredBulletId]
    reasoning: str
    job_title: Optional[str] = None
    salary: Optional[SalaryInfo] = None


def _fail(code: ErrorCode, message: str, help: str, span: Optional[ErrorSpan] = None):
    raise AttemptError(ParseError(code=code, message=message, help=help, span=span))


def _truncate(text: str, limit: int) -> str:
    return text[:limit] + ("..." if len(text) > limit else "")


def extract_json(raw: str) -> Optional[str]:
    """
    Extract the JSON object from a model response.

    Tries, in order: a fenced markdown code block, an object containing a
    "bullets" key, then any brace-delimited object.
    """
    match = _CODE_BLOCK_PATTERN.search(raw)
    if match:
        return match.group(1)

    for pattern in (_BULLETS_OBJECT_PATTERN, _ANY_OBJECT_PATTERN):
        match = pattern.search(raw)
        if match:
            return match.group(0)

    return None


def _is_number(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and not (isinstance(value, float) and math.isnan(value))
    )


def validate_salary(salary: Any) -> SalaryInfo:
    """
    Validate the optional salary block.

    Raises:
        ValueError: With a description of the first problem found
    """
    if not isinstance(salary, dict):
        raise ValueError("salary must be an object or null")

    currency = salary.get("currency")
    if not isinstance(currency, str) or not currency:
        raise ValueError("salary.currency must be a non-empty string")

    period = salary.get("period")
    if period not in SALARY_PERIODS:
        raise ValueError(f"salary.period must be one of: {', '.join(SALARY_PERIODS)}")

    for bound in ("min", "max"):
        value = salary.get(bound)
        if value is not None and not _is_number(value):
            raise ValueError(f"salary.{bound} must be a number")

    return SalaryInfo(
        currency=currency, period=period, min=salary.get("min"), max=salary.get("max")
    )


def parse_ai_output(raw: str, valid_bullet_ids: set[str], expected_count: int) -> ParsedAIResponse:
    """
    Parse and validate a raw model response.

    Args:
        raw: Raw response text
        valid_bullet_ids: Every bullet id in the compendium
        expected_count: Exact number of scored bullets required

    Returns:
        ParsedAIResponse with scores, reasoning and optional job title/salary

    Raises:
        AttemptError: On the first violation (E001-E006, E008, E009)
    """
    # Step 1: locate JSON
    json_str = extract_json(raw)
    if json_str is None:
        _fail(
            ErrorCode.NO_JSON_FOUND,
            "No JSON object found in AI response",
            'Expected format: {"bullets": [{"id": ..., "score": ...}], "reasoning": "...", '
            '"job_title": "...", "salary": {...}}\n\n'
            f"Got: {_truncate(raw, 200)}",
        )

    # Step 2: parse JSON
    try:
        parsed = json.loads(json_str)
    except json.JSONDecodeError as e:
        _fail(
            ErrorCode.INVALID_JSON,
            f"JSON parse error: {e.msg}",
            f"The AI returned malformed JSON.\n\nAttempted to parse:\n{_truncate(json_str, 300)}",
            span=ErrorSpan(start=e.pos, end=len(json_str), content=json_str[e.pos : e.pos + 60]),
        )

    # Step 3: bullets array
    if not isinstance(parsed, dict) or not isinstance(parsed.get("bullets"), list):
        keys = ", ".join(parsed.keys()) if isinstance(parsed, dict) else type(parsed).__name__
        _fail(
            ErrorCode.MISSING_BULLET_IDS,
            'Response missing "bullets" array',
            'The AI response must contain a "bullets" array with {id, score} objects.\n\n'
            f"Got keys: {keys}\n\nExpected: bullets, reasoning, job_title, salary",
        )

    # Step 4: each entry has a string id and a score in [0, 1]
    bullets = []
    for i, entry in enumerate(parsed["bullets"]):
        bullet_id = entry.get("id") if isinstance(entry, dict) else None
        if not isinstance(bullet_id, str):
            _fail(
                ErrorCode.INVALID_BULLET_ID,
                f'Bullet at index {i} missing valid "id" string',
                f'Each bullet must have an "id" string. Got: {json.dumps(entry)}',
            )
        score = entry.get("score")
        if not _is_number(score) or not 0 <= score <= 1:
            _fail(
                ErrorCode.INVALID_SCORE,
                f'Bullet "{bullet_id}" has invalid score',
                f"Score must be a number between 0.0 and 1.0. Got: {json.dumps(score)}",
            )
        bullets.append(ScoredBulletId(id=bullet_id, score=float(score)))

    # Step 5: exact count
    if len(bullets) != expected_count:
        _fail(
            ErrorCode.WRONG_BULLET_COUNT,
            f"Expected {expected_count} bullets, got {len(bullets)}",
            f"The AI must score exactly {expected_count} bullets.\n\n"
            f"Received {len(bullets)} scored bullets.",
        )

    # Step 6: ids exist in the compendium
    invalid = [b.id for b in bullets if b.id not in valid_bullet_ids]
    if invalid:
        sample_valid = sorted(valid_bullet_ids)[:5]
        _fail(
            ErrorCode.INVALID_BULLET_ID,
            f"{len(invalid)} invalid bullet ID(s) found",
            "These IDs do not exist in the compendium:\n\n"
            + "\n".join(f'  - "{bullet_id}"' for bullet_id in invalid)
            + "\n\nValid IDs look like:\n"
            + "\n".join(f'  - "{bullet_id}"' for bullet_id in sample_valid),
        )

    # Step 7: duplicates
    seen = set()
    duplicates = []
    for bullet in bullets:
        if bullet.id in seen and bullet.id not in duplicates:
            duplicates.append(bullet.id)
        seen.add(bullet.id)
    if duplicates:
        _fail(
            ErrorCode.DUPLICATE_BULLET_ID,
            f"{len(duplicates)} duplicate bullet ID(s)",
            f"Each bullet can only be scored once.\n\nDuplicates: {', '.join(duplicates)}",
        )

    # Step 8: reasoning
    reasoning = parsed.get("reasoning")
    if not isinstance(reasoning, str) or not reasoning:
        _fail(
            ErrorCode.MISSING_REASONING,
            'Response missing "reasoning" field',
            'The AI response must include a "reasoning" string explaining the scores.\n\n'
            f"Got: {'(empty string)' if isinstance(reasoning, str) else type(reasoning).__name__}",
        )

    # Step 9: salary is optional and never fatal
    salary = None
    if parsed.get("salary") is not None:
        try:
            salary = validate_salary(parsed["salary"])
        except ValueError as e:
            logger.warning(f"[score] {ErrorCode.INVALID_SALARY}: {e} (continuing without salary)")

    # Step 10: job title is optional
    job_title = parsed.get("job_title")
    if not isinstance(job_title, str) or not job_title:
        job_title = None

    return ParsedAIResponse(
        bullets=bullets, reasoning=reasoning, job_title=job_title, salary=salary
    )
