"""
Retry and fallback orchestration across AI providers.

Retry strategy:
- Output format errors (malformed JSON, wrong count, unknown ids, ...) -> retry the
  same provider, feeding the verbose error back as retry context
- Unclassified provider errors (E000) -> retry the same provider without context
- Provider down (E011) -> skip straight to the next provider in fallback order
- Retries exhausted on a provider -> next provider in fallback order

Attempts are strictly sequential. Cancellation of the calling task propagates
into the in-flight vendor call; all retry state is local to the call.
"""

from dataclasses import dataclass, replace
from typing import Callable, List, Optional, Sequence

from curator.contexts.scoring.errors import (
    OUTPUT_FORMAT_CODES,
    AttemptError,
    ErrorCode,
    ParseError,
    SelectionError,
    format_verbose_error,
)
from curator.contexts.scoring.logger import (
    _log_error,
    log_attempt_failure,
    log_attempt_start,
    log_fallback,
    log_provider_down,
    log_provider_unavailable,
    log_retries_exhausted,
    log_selection_failure,
    log_selection_success,
)
from curator.contexts.scoring.providers import (
    DEFAULT_PROVIDER,
    FALLBACK_ORDER,
    ProviderResult,
    SelectionProvider,
    SelectionRequest,
    get_provider,
    validate_provider_id,
)


@dataclass(frozen=True)
class SelectionOptions:
    """
    Orchestration settings.

    Attributes:
        max_retries: Attempts per provider before falling back
        timeout_s: Time budget for each vendor call
        enable_fallback: Try later providers in FALLBACK_ORDER after the first
    """

    max_retries: int = 3
    timeout_s: float = 30.0
    enable_fallback: bool = True

    def __post_init__(self):
        if self.max_retries < 1:
            raise ValueError(f"max_retries must be at least 1, got {self.max_retries}")
        if self.timeout_s <= 0:
            raise ValueError(f"timeout_s must be positive, got {self.timeout_s}")


def provider_chain(provider_name: str, enable_fallback: bool = True) -> List[str]:
    """
    Providers to try, in order, starting from provider_name.

    Providers earlier in FALLBACK_ORDER than the starting one are never tried.
    """
    validate_provider_id(provider_name)
    if not enable_fallback:
        return [provider_name]
    return list(FALLBACK_ORDER[FALLBACK_ORDER.index(provider_name) :])


def _retry_context_for(error: ParseError) -> Optional[str]:
    """Corrective context for the next attempt (None when re-prompting won't help)."""
    if error.code in OUTPUT_FORMAT_CODES:
        return format_verbose_error(error)
    return None


async def select_bullets_with_ai(
    request: SelectionRequest,
    provider_name: Optional[str] = None,
    options: Optional[SelectionOptions] = None,
    provider_factory: Callable[[str], SelectionProvider] = get_provider,
) -> ProviderResult:
    """
    Score bullets with AI, retrying and falling back across providers.

    Args:
        request: Selection parameters
        provider_name: Initial provider (default: first in fallback order)
        options: Retry, timeout and fallback configuration
        provider_factory: Builds a provider from its id

    Returns:
        ProviderResult from the first provider that returned a valid response,
        with attempt_count = attempts consumed on that provider

    Raises:
        UnknownProviderError: If provider_name is not a known provider (before any call)
        SelectionError: If every provider and retry was exhausted
    """
    options = options or SelectionOptions()
    chain: Sequence[str] = provider_chain(provider_name or DEFAULT_PROVIDER, options.enable_fallback)

    errors: List[ParseError] = []
    vendor_calls = 0
    current = chain[0]

    for position, current in enumerate(chain):
        if position > 0:
            log_fallback(chain[position - 1], current)

        provider = provider_factory(current)

        if not provider.is_available():
            log_provider_unavailable(current)
            errors.append(
                ParseError(
                    code=ErrorCode.PROVIDER_DOWN,
                    message=f"{current} credentials not configured",
                    help="Check API keys in environment variables",
                    provider=current,
                )
            )
            continue

        retry_context = None
        for attempt in range(1, options.max_retries + 1):
            vendor_calls += 1
            log_attempt_start(current, attempt, options.max_retries)

            try:
                result = await provider.select(
                    replace(request, retry_context=retry_context), timeout=options.timeout_s
                )
            except AttemptError as e:
                error = e.error if e.error.provider else replace(e.error, provider=current)
            except Exception as e:
                _log_error(f"Unexpected error from {current}: {e!r}")
                error = ParseError(
                    code=ErrorCode.PROVIDER_ERROR,
                    message=str(e),
                    help="Unexpected error during provider call",
                    provider=current,
                )
            else:
                log_selection_success(current, attempt, result.tokens_used)
                return replace(result, provider=current, attempt_count=attempt)

            errors.append(error)
            log_attempt_failure(current, attempt, error.code.value, error.message)

            if error.code == ErrorCode.PROVIDER_DOWN:
                log_provider_down(current)
                break

            retry_context = _retry_context_for(error)
        else:
            log_retries_exhausted(current, options.max_retries)

    if vendor_calls == 0:
        message = "No AI providers available"
    else:
        message = f"Failed after {vendor_calls} attempts; last provider {current}"

    log_selection_failure(message, vendor_calls)
    raise SelectionError(message, errors, provider=current, retries_attempted=vendor_calls)
