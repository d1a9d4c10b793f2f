# OpenAI chat completions over SSE: bearer auth, "data: {...}" lines, "data: [DONE]" at the end

from typing import Any, Dict

from anima.core import config
from anima.providers.base import Provider, RequestSpec, register_provider, sampling_options
from anima.providers.decoders import ChunkDecoder, sentinel_decoder
from anima.services.prompt import Transcript


@register_provider("openai")
class OpenAIProvider(Provider):
    label = "OpenAI"

    @classmethod
    def from_config(cls) -> "OpenAIProvider":
        return cls(
            base_url=config.OPENAI_BASE_URL,
            api_key=config.OPENAI_API_KEY,
            default_model=config.OPENAI_MODEL,
            models=config.OPENAI_MODELS,
        )

    @property
    def url(self) -> str:
        return f"{self.base_url}/chat/completions"

    def build_headers(self) -> Dict[str, str]:
        headers = super().build_headers()
        headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def build_payload(self, transcript: Transcript, spec: RequestSpec) -> Dict[str, Any]:
        return {
            "model": spec.model,
            "messages": transcript.to_wire(),
            "stream": True,
            **sampling_options(spec),
        }

    def new_decoder(self) -> ChunkDecoder:
        return sentinel_decoder(config.MAX_LINE_BYTES)
