# declares the provider contract every backend implements and the http driver they share
# lets us add providers without touching dispatch or endpoint logic

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, AsyncIterator, Callable, Dict, List, Optional, Type, TypeVar

import httpx

from anima.core import config
from anima.providers.decoders import ChunkDecoder
from anima.providers.events import Failure, FailureKind, NormalizedEvent
from anima.services.prompt import Transcript

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RequestSpec:
    provider: str
    model: str
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    top_p: Optional[float] = None


class Provider(ABC):
    name: str = ""
    label: str = ""

    def __init__(
        self,
        *,
        base_url: str,
        api_key: str = "",
        default_model: str = "",
        models: Optional[List[str]] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.default_model = default_model
        # default first, then the configured list without duplicates
        self.models = list(dict.fromkeys([m for m in [default_model, *(models or [])] if m]))

    @classmethod
    @abstractmethod
    def from_config(cls) -> "Provider":
        raise NotImplementedError

    @property
    @abstractmethod
    def url(self) -> str:
        raise NotImplementedError

    @abstractmethod
    def build_payload(self, transcript: Transcript, spec: RequestSpec) -> Dict[str, Any]:
        raise NotImplementedError

    @abstractmethod
    def new_decoder(self) -> ChunkDecoder:
        raise NotImplementedError

    def build_headers(self) -> Dict[str, str]:
        return {"Content-Type": "application/json"}

    def _failure(self, kind: FailureKind, message: str) -> Failure:
        logger.warning("%s stream failed (%s): %s", self.name, kind.value, message)
        return Failure(kind, message)

    async def stream(self, transcript: Transcript, spec: RequestSpec) -> AsyncIterator[NormalizedEvent]:
        """
        Open one streaming POST and yield normalized events until the first
        Terminal or Failure. Upstream problems are yielded as Failure events,
        never raised. Closing the generator closes the upstream connection.
        """
        decoder = self.new_decoder()
        payload = self.build_payload(transcript, spec)
        timeout = httpx.Timeout(config.UPSTREAM_READ_TIMEOUT, connect=config.UPSTREAM_CONNECT_TIMEOUT)
        deadline = time.monotonic() + config.STREAM_MAX_SECONDS if config.STREAM_MAX_SECONDS > 0 else None
        opened = False

        logger.info("%s request: model=%s messages=%d", self.name, payload.get("model"), len(transcript))
        try:
            async with httpx.AsyncClient(timeout=timeout) as client:
                async with client.stream("POST", self.url, headers=self.build_headers(), json=payload) as r:
                    opened = True
                    if not r.is_success:
                        yield self._failure(
                            FailureKind.UPSTREAM_STATUS,
                            f"{self.label} API error: {r.status_code} {r.reason_phrase}".rstrip(),
                        )
                        return
                    async for chunk in r.aiter_bytes():
                        for event in decoder.feed(chunk):
                            yield event
                        if decoder.finished:
                            return
                        if deadline is not None and time.monotonic() > deadline:
                            yield self._failure(
                                FailureKind.TIMEOUT,
                                f"{self.label} stream exceeded {config.STREAM_MAX_SECONDS:g}s",
                            )
                            return
                    for event in decoder.close():
                        yield event
        except httpx.ConnectTimeout as e:
            yield self._failure(FailureKind.CONNECTION, f"{self.label} connection timed out: {e}")
        except httpx.TimeoutException as e:
            kind = FailureKind.TIMEOUT if opened else FailureKind.CONNECTION
            yield self._failure(kind, f"{self.label} request timed out: {e}")
        except httpx.HTTPError as e:
            if opened:
                yield self._failure(FailureKind.STREAM_READ, f"{self.label} stream read error: {e}")
            else:
                yield self._failure(FailureKind.CONNECTION, f"{self.label} connection error: {e}")


ProviderT = TypeVar("ProviderT", bound=Type[Provider])

_REGISTRY: Dict[str, Type[Provider]] = {}


def register_provider(name: str) -> Callable[[ProviderT], ProviderT]:
    def decorator(cls: ProviderT) -> ProviderT:
        if name in _REGISTRY:
            raise ValueError(f"provider already registered: {name}")
        cls.name = name
        _REGISTRY[name] = cls
        return cls
    return decorator


def registered_providers() -> Dict[str, Type[Provider]]:
    return dict(_REGISTRY)


def sampling_options(spec: RequestSpec) -> Dict[str, Any]:
    opts: Dict[str, Any] = {}
    if spec.temperature is not None:
        opts["temperature"] = spec.temperature
    if spec.max_tokens is not None:
        opts["max_tokens"] = spec.max_tokens
    if spec.top_p is not None:
        opts["top_p"] = spec.top_p
    return opts
