"""Shared fixtures: sample compendium, compendium builder and scripted LLM backends."""

import copy
import json

import pytest

from curator.contexts.compendium import Compendium
from curator.utils.llm import LLMResponse

SAMPLE_COMPENDIUM = {
    "personal": {"name": "Alex Example"},
    "experience": [
        {
            "id": "acme",
            "name": "Acme Corp",
            "dateStart": "2021-03",
            "priority": 8,
            "tags": ["backend"],
            "children": [
                {
                    "id": "acme-staff",
                    "name": "Staff Engineer",
                    "dateStart": "2023-01",
                    "priority": 9,
                    "tags": ["backend", "leadership"],
                    "children": [
                        {"id": "a1", "description": "Rebuilt the billing API in Python", "priority": 9, "tags": ["python", "backend"]},
                        {"id": "a2", "description": "Led a team of six engineers", "priority": 7, "tags": ["leadership"]},
                        {"id": "a3", "description": "Cut p99 latency by 40%", "priority": 6, "tags": ["python"]},
                        {"id": "a4", "description": "Shipped the new dashboard", "priority": 5, "tags": ["frontend"]},
                    ],
                },
                {
                    "id": "acme-senior",
                    "name": "Senior Engineer",
                    "dateStart": "2021-03",
                    "dateEnd": "2022-12",
                    "priority": 7,
                    "children": [
                        {"id": "a5", "description": "Migrated services to async workers", "priority": 8, "tags": ["python"]},
                        {"id": "a6", "description": "Introduced contract testing", "priority": 4, "tags": ["testing"]},
                    ],
                },
            ],
        },
        {
            "id": "globex",
            "name": "Globex",
            "dateStart": "2018-06",
            "dateEnd": "2021-02",
            "priority": 6,
            "children": [
                {
                    "id": "globex-eng",
                    "name": "Software Engineer",
                    "dateStart": "2018-06",
                    "dateEnd": "2021-02",
                    "priority": 6,
                    "tags": ["backend"],
                    "children": [
                        {"id": "g1", "description": "Built the ingestion pipeline", "priority": 7, "tags": ["python"]},
                        {"id": "g2", "description": "Designed the reporting warehouse", "priority": 6, "tags": ["data"]},
                        {"id": "g3", "description": "Raised unit test coverage to 90%", "priority": 5, "tags": ["testing"]},
                    ],
                }
            ],
        },
        {
            "id": "initech",
            "name": "Initech",
            "dateStart": "2015-01",
            "dateEnd": "2018-05",
            "priority": 4,
            "children": [
                {
                    "id": "initech-dev",
                    "name": "Developer",
                    "dateStart": "2015-01",
                    "dateEnd": "2018-05",
                    "priority": 5,
                    "children": [
                        {"id": "i1", "description": "Automated nightly reports", "priority": 6, "tags": ["python"]},
                        {"id": "i2", "description": "Handled customer escalations", "priority": 3, "tags": ["support"]},
                    ],
                }
            ],
        },
    ],
    "roleProfiles": [
        {
            "id": "backend",
            "name": "Backend Engineer",
            "tagWeights": {"python": 1.0, "backend": 0.9, "leadership": 0.5, "data": 0.6},
            "scoringWeights": {"tagRelevance": 0.6, "priority": 0.4},
        },
        {
            "id": "unnormalized",
            "name": "Python Generalist",
            "tagWeights": {"python": 1.0},
            "scoringWeights": {"tagRelevance": 3.0, "priority": 1.0},
        },
    ],
}

# Resume order of every bullet in SAMPLE_COMPENDIUM
SAMPLE_BULLET_IDS = ["a1", "a2", "a3", "a4", "a5", "a6", "g1", "g2", "g3", "i1", "i2"]

JOB_DESCRIPTION = (
    "Senior Backend Engineer at Initrode. We need strong Python, async services, "
    "and experience leading small teams. Salary $150k-$180k."
)


def build_compendium(layout, priorities=None):
    """
    Build a compendium from {company_id: {position_id: [bullet_ids]}}.

    Args:
        layout: Nested mapping in resume order
        priorities: Optional bullet id -> priority
    """
    priorities = priorities or {}
    experience = []
    for company_id, positions in layout.items():
        experience.append(
            {
                "id": company_id,
                "dateStart": "2020",
                "children": [
                    {
                        "id": position_id,
                        "name": position_id.title(),
                        "dateStart": "2020",
                        "children": [
                            {
                                "id": bullet_id,
                                "description": f"Achievement {bullet_id}",
                                "priority": priorities.get(bullet_id, 5),
                            }
                            for bullet_id in bullet_ids
                        ],
                    }
                    for position_id, bullet_ids in positions.items()
                ],
            }
        )
    return Compendium.from_dict({"experience": experience})


def ai_response(bullet_ids, reasoning="Python and leadership are central to this role.", **extra):
    """Valid model output scoring bullet_ids in descending order."""
    payload = {
        "bullets": [
            {"id": bullet_id, "score": round(0.95 - i * 0.05, 2)}
            for i, bullet_id in enumerate(bullet_ids)
        ],
        "reasoning": reasoning,
        "job_title": "Senior Backend Engineer",
        **extra,
    }
    return json.dumps(payload)


class ScriptedBackend:
    """
    LLM backend that replays scripted outcomes.

    Each outcome is either response text (str/None) or an exception to raise.
    Every call is recorded in `calls`.
    """

    name = "scripted"
    api_key_env = "SCRIPTED_API_KEY"

    def __init__(self, outcomes=(), configured=True):
        self.outcomes = list(outcomes)
        self.configured = configured
        self.calls = []

    def is_configured(self):
        return self.configured

    async def complete(self, model, system_prompt, user_prompt, max_tokens, timeout):
        self.calls.append(
            {
                "model": model,
                "system_prompt": system_prompt,
                "user_prompt": user_prompt,
                "max_tokens": max_tokens,
                "timeout": timeout,
            }
        )
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return LLMResponse(content=outcome, model=model, input_tokens=100, output_tokens=50)


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch):
    """Keep a developer's .env from leaking into tests."""
    for name in (
        "ANTHROPIC_API_KEY",
        "CEREBRAS_API_KEY",
        "CURATOR_PROVIDER",
        "CURATOR_CONFIG_PATH",
        "COMPENDIUM_PATH",
        "SELECTION_EVENTS_FILE",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def compendium_data():
    return copy.deepcopy(SAMPLE_COMPENDIUM)


@pytest.fixture
def compendium():
    return Compendium.from_dict(SAMPLE_COMPENDIUM)


@pytest.fixture
def provider_factory():
    """
    Build a provider_factory from {provider_id: ScriptedBackend}.

    Providers without a scripted backend are unavailable.
    """
    from curator.contexts.scoring import LLMSelectionProvider

    def make(backends):
        def factory(name):
            return LLMSelectionProvider(name, backend=backends.get(name) or ScriptedBackend(configured=False))

        return factory

    return make
