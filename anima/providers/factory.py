import logging
from contextlib import aclosing
from typing import AsyncIterator, List

from anima.providers.base import Provider, RequestSpec, registered_providers
from anima.providers.events import FailureKind, NormalizedEvent, ProviderError
from anima.services.prompt import Transcript

# importing the variants registers them
from anima.providers import ollama, openai, openrouter  # noqa: F401

logger = logging.getLogger(__name__)


def available_providers() -> List[str]:
    return sorted(registered_providers())


def get_provider(name: str) -> Provider:
    cls = registered_providers().get(name)
    if cls is None:
        raise ProviderError(f"Unsupported provider: {name}", kind=FailureKind.CONFIGURATION)
    return cls.from_config()


async def dispatch(transcript: Transcript, spec: RequestSpec) -> AsyncIterator[NormalizedEvent]:
    """Route to the provider named by spec.provider; unknown names never touch the network."""
    try:
        provider = get_provider(spec.provider)
    except ProviderError as e:
        logger.warning("dispatch rejected: %s", e)
        yield e.to_failure()
        return

    async with aclosing(provider.stream(transcript, spec)) as events:
        async for event in events:
            yield event
