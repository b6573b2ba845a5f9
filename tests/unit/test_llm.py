"""Unit tests for LLM vendor backends (no network)."""

import asyncio

import pytest

from curator.utils.llm import (
    AnthropicBackend,
    CerebrasBackend,
    LLMResponse,
    ProviderCallError,
    get_backend,
    is_provider_down_status,
)


@pytest.mark.unit
@pytest.mark.parametrize("status", [401, 403, 429, 500, 502, 503, 504])
def test_down_statuses(status):
    assert is_provider_down_status(status)


@pytest.mark.unit
@pytest.mark.parametrize("status", [None, 400, 404, 422])
def test_other_statuses(status):
    assert not is_provider_down_status(status)


@pytest.mark.unit
def test_get_backend():
    assert isinstance(get_backend("anthropic"), AnthropicBackend)
    assert isinstance(get_backend("cerebras"), CerebrasBackend)
    with pytest.raises(ValueError):
        get_backend("openai")


@pytest.mark.unit
def test_configured_from_environment(monkeypatch):
    backend = CerebrasBackend()
    assert not backend.is_configured()

    monkeypatch.setenv("CEREBRAS_API_KEY", "test-key")
    assert backend.is_configured()


@pytest.mark.unit
def test_missing_key_is_provider_down():
    """Test a call without credentials fails as 'down' before any request."""
    with pytest.raises(ProviderCallError) as exc_info:
        asyncio.run(
            AnthropicBackend().complete(
                model="claude-3-5-haiku-20241022",
                system_prompt="system",
                user_prompt="user",
                max_tokens=10,
                timeout=1.0,
            )
        )
    assert exc_info.value.down


@pytest.mark.unit
def test_response_total_tokens():
    response = LLMResponse(content="{}", model="m", input_tokens=1200, output_tokens=300)
    assert response.total_tokens == 1500
