"""
Scoring Context

Responsibilities:
- Builds scoring prompts from a job description and the compendium
- Calls LLM providers through a uniform adapter interface
- Validates raw model output against the compendium
- Retries correctable failures and falls back across providers

Owns: Provider catalogue, prompt templates, response validation, error taxonomy
Never: Applies diversity constraints or decides the final bullet set
"""

from curator.contexts.scoring.errors import (
    AttemptError,
    ErrorCode,
    ParseError,
    SelectionError,
    UnknownProviderError,
    format_simplified_error,
    format_verbose_error,
)
from curator.contexts.scoring.orchestrator import (
    SelectionOptions,
    provider_chain,
    select_bullets_with_ai,
)
from curator.contexts.scoring.output_parser import (
    ParsedAIResponse,
    SalaryInfo,
    ScoredBulletId,
    parse_ai_output,
)
from curator.contexts.scoring.providers import (
    AI_MODELS,
    DEFAULT_PROVIDER,
    FALLBACK_ORDER,
    LLMSelectionProvider,
    ModelConfig,
    ProviderResult,
    SelectionProvider,
    SelectionRequest,
    get_available_providers,
    get_first_available_provider,
    get_next_fallback,
    get_provider,
    validate_provider_id,
)

__all__ = [
    # Orchestration
    "select_bullets_with_ai",
    "SelectionOptions",
    "provider_chain",
    # Providers
    "AI_MODELS",
    "DEFAULT_PROVIDER",
    "FALLBACK_ORDER",
    "LLMSelectionProvider",
    "ModelConfig",
    "ProviderResult",
    "SelectionProvider",
    "SelectionRequest",
    "get_available_providers",
    "get_first_available_provider",
    "get_next_fallback",
    "get_provider",
    "validate_provider_id",
    # Response validation
    "parse_ai_output",
    "ParsedAIResponse",
    "SalaryInfo",
    "ScoredBulletId",
    # Errors
    "AttemptError",
    "ErrorCode",
    "ParseError",
    "SelectionError",
    "UnknownProviderError",
    "format_simplified_error",
    "format_verbose_error",
]
