import time
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

Role = Literal["system", "user", "assistant"]


def _now_ms() -> int:
    return int(time.time() * 1000)


class ChatMessage(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: Role
    content: str
    timestamp: int = Field(default_factory=_now_ms)


class ChatRequest(BaseModel):
    messages: List[ChatMessage]
    provider: Optional[str] = None
    model: Optional[str] = None
    temperature: Optional[float] = Field(default=None, ge=0.0, le=2.0)
    max_tokens: Optional[int] = Field(default=None, gt=0)
    top_p: Optional[float] = Field(default=None, gt=0.0, le=1.0)
    stream: bool = True


class ChatResponse(BaseModel):
    reply: str
    provider: str
    model: str


class ProvidersResponse(BaseModel):
    providers: List[str]
    default_provider: str
    default_models: Dict[str, str]
    models: Dict[str, List[str]]
