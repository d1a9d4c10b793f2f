# tests/test_dispatch.py
import httpx
import pytest
import respx

from anima.providers.base import RequestSpec
from anima.providers.events import Failure, FailureKind, ProviderError, Terminal, Token
from anima.providers.factory import available_providers, dispatch, get_provider
from anima.providers.ollama import OllamaProvider
from anima.providers.openai import OpenAIProvider
from anima.providers.openrouter import OpenRouterProvider


def test_registered_variants():
    assert available_providers() == ["ollama", "openai", "openrouter"]
    assert isinstance(get_provider("openai"), OpenAIProvider)
    assert isinstance(get_provider("openrouter"), OpenRouterProvider)
    assert isinstance(get_provider("ollama"), OllamaProvider)


def test_get_provider_unknown_raises_configuration_error():
    with pytest.raises(ProviderError) as exc:
        get_provider("unknown")
    assert exc.value.kind is FailureKind.CONFIGURATION


@pytest.mark.asyncio
@respx.mock
async def test_unknown_provider_yields_single_failure_without_network(transcript):
    events = [e async for e in dispatch(transcript, RequestSpec(provider="unknown", model="m"))]
    assert events == [Failure(FailureKind.CONFIGURATION, "Unsupported provider: unknown")]
    assert respx.calls.call_count == 0


@pytest.mark.asyncio
@respx.mock
async def test_dispatch_forwards_selected_provider(transcript, ollama_url):
    ollama = respx.post(ollama_url).mock(
        return_value=httpx.Response(200, content=b'{"message":{"content":"yo"},"done":false}\n{"done":true}\n')
    )
    events = [e async for e in dispatch(transcript, RequestSpec(provider="ollama", model="llama3"))]
    assert events == [Token("yo"), Terminal()]
    assert ollama.call_count == 1
    assert respx.calls.call_count == 1
