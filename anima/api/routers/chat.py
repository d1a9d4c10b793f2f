import logging
from urllib.parse import quote
from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import StreamingResponse
from anima.schemas.chat import ChatRequest, ChatResponse
from anima.providers.events import FailureKind, ProviderError
from anima.services.chat_service import prepare_and_generate
from anima.services.relay import collect, relay

router = APIRouter(prefix="/api", tags=["chat"])
logger = logging.getLogger(__name__)

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


@router.post("/chat", response_model=ChatResponse)
async def chat(req: ChatRequest, request: Request):
    spec, events = prepare_and_generate(req)

    # Non-stream path
    if not req.stream:
        try:
            reply = await collect(events)
        except ProviderError as e:
            status = 400 if e.kind is FailureKind.CONFIGURATION else 502
            raise HTTPException(status_code=status, detail=str(e))
        return ChatResponse(reply=reply, provider=spec.provider, model=spec.model)

    # Stream path
    # identifiers are opaque client strings; headers must stay latin-1
    headers = {**SSE_HEADERS, "X-Provider": quote(spec.provider, safe="/:"), "X-Model": quote(spec.model, safe="/:")}
    return StreamingResponse(
        relay(events, is_disconnected=request.is_disconnected),
        media_type="text/event-stream",
        headers=headers,
    )
