# OpenRouter speaks the OpenAI wire format and wants attribution headers on every request

from typing import Dict

from anima.core import config
from anima.providers.base import register_provider
from anima.providers.openai import OpenAIProvider


@register_provider("openrouter")
class OpenRouterProvider(OpenAIProvider):
    label = "OpenRouter"

    def __init__(self, *, referer: str = "", title: str = "", **kwargs) -> None:
        super().__init__(**kwargs)
        self.referer = referer
        self.title = title

    @classmethod
    def from_config(cls) -> "OpenRouterProvider":
        return cls(
            base_url=config.OPENROUTER_BASE_URL,
            api_key=config.OPENROUTER_API_KEY,
            default_model=config.OPENROUTER_MODEL,
            models=config.OPENROUTER_MODELS,
            referer=config.OPENROUTER_REFERER,
            title=config.OPENROUTER_TITLE,
        )

    def build_headers(self) -> Dict[str, str]:
        headers = super().build_headers()
        if self.referer:
            headers["HTTP-Referer"] = self.referer
        if self.title:
            headers["X-Title"] = self.title
        return headers
