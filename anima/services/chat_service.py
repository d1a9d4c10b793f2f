import logging
from typing import AsyncGenerator, Tuple

from anima.core import config
from anima.providers.base import RequestSpec
from anima.providers.events import NormalizedEvent
from anima.providers.factory import dispatch, registered_providers
from anima.schemas.chat import ChatRequest
from anima.services.prompt import build_transcript, load_system_prompt

logger = logging.getLogger(__name__)


def default_model(provider: str) -> str:
    cls = registered_providers().get(provider)
    return cls.from_config().default_model if cls is not None else ""


def resolve_spec(req: ChatRequest) -> RequestSpec:
    provider = req.provider or config.PROVIDER
    return RequestSpec(
        provider=provider,
        model=req.model or default_model(provider),
        temperature=req.temperature if req.temperature is not None else config.TEMPERATURE,
        max_tokens=req.max_tokens if req.max_tokens is not None else config.MAX_TOKENS,
        top_p=req.top_p if req.top_p is not None else config.TOP_P,
    )


def prepare_and_generate(req: ChatRequest) -> Tuple[RequestSpec, AsyncGenerator[NormalizedEvent, None]]:
    spec = resolve_spec(req)
    transcript = build_transcript(load_system_prompt(), req.messages)
    logger.info("chat: provider=%s model=%s turns=%d", spec.provider, spec.model, len(transcript) - 1)
    return spec, dispatch(transcript, spec)
