# local Ollama /api/chat: no auth, one JSON object per line, "done": true on the last one

from typing import Any, Dict

from anima.core import config
from anima.providers.base import Provider, RequestSpec, register_provider
from anima.providers.decoders import ChunkDecoder, ndjson_decoder
from anima.services.prompt import Transcript


def _apply_defaults(spec: RequestSpec) -> Dict[str, Any]:
    # map request overrides onto Ollama's option names
    opts: Dict[str, Any] = {"num_ctx": config.CTX_TOKENS}
    if spec.temperature is not None:
        opts["temperature"] = spec.temperature
    if spec.max_tokens is not None:
        opts["num_predict"] = spec.max_tokens
    if spec.top_p is not None:
        opts["top_p"] = spec.top_p
    return opts


@register_provider("ollama")
class OllamaProvider(Provider):
    label = "Ollama"

    @classmethod
    def from_config(cls) -> "OllamaProvider":
        return cls(base_url=config.OLLAMA_HOST, default_model=config.OLLAMA_MODEL, models=config.OLLAMA_MODELS)

    @property
    def url(self) -> str:
        return f"{self.base_url}/api/chat"

    def build_payload(self, transcript: Transcript, spec: RequestSpec) -> Dict[str, Any]:
        return {
            "model": spec.model,
            "messages": transcript.to_wire(),
            "stream": True,
            "options": _apply_defaults(spec),
        }

    def new_decoder(self) -> ChunkDecoder:
        return ndjson_decoder(config.MAX_LINE_BYTES)
