"""
LLM vendor client abstraction.

Provides a vendor-agnostic async interface for single chat completions and
classifies vendor failures into "provider down" versus other errors. Retries are
deliberately absent here: the scoring context owns the retry/fallback policy, so
SDK-internal retries are disabled as well.
"""

import os
from dataclasses import dataclass
from typing import Optional, Protocol

from dotenv import load_dotenv

load_dotenv()

CEREBRAS_BASE_URL = "https://api.cerebras.ai/v1"

# 5xx = vendor outage, 429 = rate limited, 401/403 = misconfigured credentials
PROVIDER_DOWN_STATUSES = frozenset({401, 403, 429, 500, 502, 503, 504})


def is_provider_down_status(status: Optional[int]) -> bool:
    """Whether an HTTP status means the backend is unusable for this request."""
    return status in PROVIDER_DOWN_STATUSES


@dataclass
class LLMResponse:
    """Response from an LLM backend."""

    content: Optional[str]
    model: str
    input_tokens: int
    output_tokens: int

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens


class ProviderCallError(Exception):
    """
    Vendor call failed before a usable response was produced.

    Attributes:
        message: Vendor or transport error text (never shown to end users)
        status: HTTP status code, if the vendor answered
        error_type: Vendor/SDK error class name
        down: True when the backend should be considered down for this request
    """

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        error_type: Optional[str] = None,
        down: bool = False,
    ):
        self.message = message
        self.status = status
        self.error_type = error_type
        self.down = down
        super().__init__(message)


class LLMBackend(Protocol):
    """Capability set every vendor backend provides."""

    name: str
    api_key_env: str

    def is_configured(self) -> bool: ...

    async def complete(
        self,
        model: str,
        system_prompt: str,
        user_prompt: str,
        max_tokens: int,
        timeout: float,
    ) -> LLMResponse: ...


class AnthropicBackend:
    """Anthropic Claude backend (official async SDK)."""

    name = "anthropic"
    api_key_env = "ANTHROPIC_API_KEY"

    def __init__(self):
        self._client = None

    def is_configured(self) -> bool:
        return bool(os.getenv(self.api_key_env))

    def _get_client(self):
        if self._client is None:
            # Lazy import - anthropic SDK is heavy, only load if this backend is used
            import anthropic

            api_key = os.getenv(self.api_key_env)
            if not api_key:
                raise ProviderCallError(
                    f"{self.api_key_env} environment variable not set", down=True
                )
            self._client = anthropic.AsyncAnthropic(api_key=api_key, max_retries=0)
        return self._client

    async def complete(
        self,
        model: str,
        system_prompt: str,
        user_prompt: str,
        max_tokens: int,
        timeout: float,
    ) -> LLMResponse:
        import anthropic

        client = self._get_client()
        try:
            response = await client.messages.create(
                model=model,
                max_tokens=max_tokens,
                system=system_prompt,
                messages=[{"role": "user", "content": user_prompt}],
                timeout=timeout,
            )
        except anthropic.APIStatusError as e:
            raise ProviderCallError(
                e.message,
                status=e.status_code,
                error_type=type(e).__name__,
                down=is_provider_down_status(e.status_code),
            ) from e
        except anthropic.APIConnectionError as e:
            # Includes APITimeoutError
            raise ProviderCallError(str(e), error_type=type(e).__name__, down=True) from e

        text = next((block.text for block in response.content if block.type == "text"), None)
        return LLMResponse(
            content=text,
            model=model,
            input_tokens=response.usage.input_tokens,
            output_tokens=response.usage.output_tokens,
        )


class CerebrasBackend:
    """Cerebras backend through its OpenAI-compatible chat completions API."""

    name = "cerebras"
    api_key_env = "CEREBRAS_API_KEY"
    temperature = 0.3

    def __init__(self):
        self._client = None

    def is_configured(self) -> bool:
        return bool(os.getenv(self.api_key_env))

    def _get_client(self):
        if self._client is None:
            # Lazy import - openai SDK is heavy, only load if this backend is used
            import openai

            api_key = os.getenv(self.api_key_env)
            if not api_key:
                raise ProviderCallError(
                    f"{self.api_key_env} environment variable not set", down=True
                )
            self._client = openai.AsyncOpenAI(
                api_key=api_key, base_url=CEREBRAS_BASE_URL, max_retries=0
            )
        return self._client

    async def complete(
        self,
        model: str,
        system_prompt: str,
        user_prompt: str,
        max_tokens: int,
        timeout: float,
    ) -> LLMResponse:
        import openai

        client = self._get_client()
        try:
            response = await client.chat.completions.create(
                model=model,
                max_tokens=max_tokens,
                temperature=self.temperature,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                timeout=timeout,
            )
        except openai.APIStatusError as e:
            raise ProviderCallError(
                e.message,
                status=e.status_code,
                error_type=type(e).__name__,
                down=is_provider_down_status(e.status_code),
            ) from e
        except openai.APIConnectionError as e:
            raise ProviderCallError(str(e), error_type=type(e).__name__, down=True) from e

        content = response.choices[0].message.content if response.choices else None
        usage = response.usage
        return LLMResponse(
            content=content,
            model=model,
            input_tokens=usage.prompt_tokens if usage else 0,
            output_tokens=usage.completion_tokens if usage else 0,
        )


def get_backend(backend_name: str) -> LLMBackend:
    """
    Get a fresh backend instance.

    Args:
        backend_name: "anthropic" or "cerebras"
    """
    if backend_name == "anthropic":
        return AnthropicBackend()
    elif backend_name == "cerebras":
        return CerebrasBackend()
    else:
        raise ValueError(f"Unknown backend: {backend_name}. Use 'anthropic' or 'cerebras'")
