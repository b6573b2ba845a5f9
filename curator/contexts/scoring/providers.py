"""
AI provider adapters for bullet scoring.

Every provider exposes the same capability set - is_available() and an async
select() - and normalizes vendor output into a ProviderResult. Providers differ
only in their ModelConfig and the vendor backend they delegate to, so a single
adapter class parameterized by backend covers the whole catalogue.
"""

from dataclasses import dataclass, replace
from typing import Dict, List, Optional, Protocol

from curator.contexts.compendium import Compendium
from curator.contexts.scoring.errors import (
    AttemptError,
    ErrorCode,
    ParseError,
    UnknownProviderError,
)
from curator.contexts.scoring.logger import log_provider_call, log_raw_response
from curator.contexts.scoring.output_parser import SalaryInfo, ScoredBulletId, parse_ai_output
from curator.contexts.scoring.prompts import (
    SYSTEM_PROMPT,
    build_user_prompt,
    expected_bullet_count,
    get_min_bullets,
)
from curator.utils.llm import LLMBackend, ProviderCallError, get_backend

DEFAULT_TIMEOUT_S = 30.0


@dataclass(frozen=True)
class ModelConfig:
    """Static description of one provider/model pairing."""

    backend: str
    model: str
    label: str
    cost: str
    context_window: int
    max_output_tokens: int


AI_MODELS: Dict[str, ModelConfig] = {
    "cerebras-gpt": ModelConfig(
        backend="cerebras",
        model="gpt-oss-120b",
        label="GPT OSS 120B (Fast)",
        cost="free",
        context_window=128000,
        max_output_tokens=4096,
    ),
    "cerebras-llama": ModelConfig(
        backend="cerebras",
        model="llama-3.3-70b",
        label="Llama 3.3 70B",
        cost="free",
        context_window=128000,
        max_output_tokens=4096,
    ),
    "claude-sonnet": ModelConfig(
        backend="anthropic",
        model="claude-sonnet-4-20250514",
        label="Claude Sonnet 4",
        cost="paid",
        context_window=200000,
        max_output_tokens=8192,
    ),
    "claude-haiku": ModelConfig(
        backend="anthropic",
        model="claude-3-5-haiku-20241022",
        label="Claude Haiku 3.5",
        cost="paid",
        context_window=200000,
        max_output_tokens=8192,
    ),
}

# Tried in this order when a provider is down or exhausted: free first, then paid
FALLBACK_ORDER = ("cerebras-gpt", "claude-haiku", "cerebras-llama", "claude-sonnet")
DEFAULT_PROVIDER = FALLBACK_ORDER[0]


def validate_provider_id(name: str) -> str:
    """
    Check a provider id against the closed enumeration.

    Raises:
        UnknownProviderError: If name is not a known provider
    """
    if name not in AI_MODELS:
        raise UnknownProviderError(
            f"Invalid provider: {name!r}. Must be one of: {', '.join(FALLBACK_ORDER)}"
        )
    return name


def get_next_fallback(current: str) -> Optional[str]:
    """Provider after current in the fallback order (None at the end)."""
    index = FALLBACK_ORDER.index(validate_provider_id(current))
    return FALLBACK_ORDER[index + 1] if index + 1 < len(FALLBACK_ORDER) else None


# =============================================================================
# REQUEST / RESULT
# =============================================================================


@dataclass(frozen=True)
class SelectionRequest:
    """
    Scoring request sent to a provider.

    Attributes:
        job_description: Job posting text
        compendium: Corpus to score
        max_bullets: Selection ceiling used downstream
        min_bullets: Bullets the model must score (default: max_bullets + buffer)
        retry_context: Verbose description of the previous attempt's failure
    """

    job_description: str
    compendium: Compendium
    max_bullets: int
    min_bullets: Optional[int] = None
    retry_context: Optional[str] = None

    @property
    def expected_count(self) -> int:
        min_bullets = self.min_bullets or get_min_bullets(self.max_bullets)
        return expected_bullet_count(self.compendium, min_bullets)


@dataclass(frozen=True)
class ProviderResult:
    """Validated, provider-agnostic scoring result."""

    bullets: List[ScoredBulletId]
    reasoning: str
    provider: str
    job_title: Optional[str] = None
    salary: Optional[SalaryInfo] = None
    tokens_used: int = 0
    attempt_count: int = 1

    def score_map(self) -> Dict[str, float]:
        """Bullet id -> relevance score."""
        return {bullet.id: bullet.score for bullet in self.bullets}


class SelectionProvider(Protocol):
    """Capability set every provider offers to the orchestrator."""

    name: str
    config: ModelConfig

    def is_available(self) -> bool: ...

    async def select(
        self, request: SelectionRequest, timeout: float = DEFAULT_TIMEOUT_S
    ) -> ProviderResult: ...


# =============================================================================
# ADAPTER
# =============================================================================


class LLMSelectionProvider:
    """
    Scores compendium bullets with one catalogue model.

    Builds the prompt, calls the vendor backend with a bounded token and time
    budget, classifies vendor failures (E011 vs E000) and validates the response
    against the compendium. Holds no state between calls beyond the lazily
    created vendor client.
    """

    def __init__(self, name: str, backend: Optional[LLMBackend] = None):
        self.name = validate_provider_id(name)
        self.config = AI_MODELS[name]
        self.backend = backend if backend is not None else get_backend(self.config.backend)

    def __repr__(self) -> str:
        return f"LLMSelectionProvider({self.name!r}, model={self.config.model!r})"

    def is_available(self) -> bool:
        """True iff the backend's credentials are configured."""
        return self.backend.is_configured()

    def _error(self, code: ErrorCode, message: str, help: str = "") -> AttemptError:
        return AttemptError(ParseError(code=code, message=message, help=help, provider=self.name))

    async def select(
        self, request: SelectionRequest, timeout: float = DEFAULT_TIMEOUT_S
    ) -> ProviderResult:
        """
        Score bullets for a job description.

        Raises:
            AttemptError: On vendor failure or invalid response
        """
        if not self.is_available():
            # Missing credentials never reach the network
            raise self._error(
                ErrorCode.PROVIDER_DOWN,
                f"{self.backend.api_key_env} environment variable not set",
                f"Set {self.backend.api_key_env} in .env",
            )

        expected_count = request.expected_count
        user_prompt = build_user_prompt(
            request.job_description,
            request.compendium,
            expected_count,
            retry_context=request.retry_context,
        )

        log_provider_call(self.name, self.config.model)
        try:
            response = await self.backend.complete(
                model=self.config.model,
                system_prompt=SYSTEM_PROMPT,
                user_prompt=user_prompt,
                max_tokens=self.config.max_output_tokens,
                timeout=timeout,
            )
        except ProviderCallError as e:
            code = ErrorCode.PROVIDER_DOWN if e.down else ErrorCode.PROVIDER_ERROR
            raise self._error(
                code, e.message, f"Status: {e.status}, Type: {e.error_type or 'unknown'}"
            ) from e

        if not response.content:
            raise self._error(
                ErrorCode.NO_JSON_FOUND,
                f"{self.config.label} response contained no text content",
                "The AI must return a JSON object as text.",
            )

        log_raw_response(self.name, response.content)

        try:
            parsed = parse_ai_output(response.content, request.compendium.bullet_ids(), expected_count)
        except AttemptError as e:
            raise AttemptError(replace(e.error, provider=self.name)) from e

        return ProviderResult(
            bullets=parsed.bullets,
            reasoning=parsed.reasoning,
            provider=self.name,
            job_title=parsed.job_title,
            salary=parsed.salary,
            tokens_used=response.total_tokens,
        )


# =============================================================================
# FACTORY
# =============================================================================


def get_provider(name: str) -> LLMSelectionProvider:
    """Create a fresh provider instance by id."""
    return LLMSelectionProvider(name)


def get_available_providers() -> List[str]:
    """Provider ids with configured credentials, in fallback order."""
    return [name for name in FALLBACK_ORDER if get_provider(name).is_available()]


def get_first_available_provider() -> Optional[str]:
    available = get_available_providers()
    return available[0] if available else None
