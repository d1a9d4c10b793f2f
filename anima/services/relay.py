"""
Client-facing event stream.

Every normalized event becomes one SSE frame, in the order it was produced:

    data: {"content":"<token>"}     one per Token
    data: [DONE]                    after Terminal
    data: {"error":"<message>"}     after Failure, no [DONE] follows

The stream ends right after the first Terminal or Failure and nothing is
written after it, even if the source keeps producing events. The source is
always closed on the way out so an abandoned upstream request releases its
connection.
"""

import json
import logging
from contextlib import aclosing
from typing import Any, AsyncGenerator, AsyncIterator, Awaitable, Callable, Dict, List, Optional

from anima.providers.events import Failure, FailureKind, NormalizedEvent, ProviderError, Terminal, Token

logger = logging.getLogger(__name__)

DONE_FRAME = b"data: [DONE]\n\n"

EventSource = AsyncGenerator[NormalizedEvent, None]


def encode_frame(payload: Dict[str, Any]) -> bytes:
    body = json.dumps(payload, separators=(",", ":"), ensure_ascii=False)
    return f"data: {body}\n\n".encode("utf-8")


async def relay(
    events: EventSource,
    *,
    is_disconnected: Optional[Callable[[], Awaitable[bool]]] = None,
) -> AsyncIterator[bytes]:
    tokens = 0
    async with aclosing(events) as source:
        async for event in source:
            # stop if client disconnected
            if is_disconnected is not None and await is_disconnected():
                logger.info("client disconnected, stopping stream after %d tokens", tokens)
                return
            if isinstance(event, Token):
                tokens += 1
                if tokens == 1:
                    logger.debug("first token relayed")
                yield encode_frame({"content": event.text})
            elif isinstance(event, Terminal):
                logger.info("stream done: %d tokens", tokens)
                yield DONE_FRAME
                return
            elif isinstance(event, Failure):
                logger.warning("stream failed after %d tokens (%s): %s", tokens, event.kind.value, event.message)
                yield encode_frame({"error": event.message})
                return
    logger.warning("source ended without a terminal event after %d tokens", tokens)
    yield encode_frame({"error": "Stream ended unexpectedly"})


async def collect(events: EventSource) -> str:
    """Drain a stream into the full reply; a Failure is raised as ProviderError."""
    parts: List[str] = []
    async with aclosing(events) as source:
        async for event in source:
            if isinstance(event, Token):
                parts.append(event.text)
            elif isinstance(event, Terminal):
                return "".join(parts)
            elif isinstance(event, Failure):
                raise ProviderError(event.message, kind=event.kind)
    raise ProviderError("Stream ended unexpectedly", kind=FailureKind.STREAM_READ)
