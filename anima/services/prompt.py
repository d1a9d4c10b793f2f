# Transcript = synthesized system prompt + prior turns + newest user message

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Tuple

from anima.core import config
from anima.schemas.chat import ChatMessage


def load_system_prompt() -> str:
    if config.SYSTEM_PROMPT_FILE:
        return Path(config.SYSTEM_PROMPT_FILE).expanduser().read_text(encoding="utf-8").strip()
    return config.SYSTEM_PROMPT


@dataclass(frozen=True)
class Transcript:
    messages: Tuple[ChatMessage, ...]

    def __post_init__(self) -> None:
        if not self.messages:
            raise ValueError("transcript must not be empty")
        if self.messages[0].role != "system":
            raise ValueError("transcript must start with the system message")
        if any(m.role == "system" for m in self.messages[1:]):
            raise ValueError("transcript must contain exactly one system message")

    def to_wire(self) -> List[Dict[str, str]]:
        # timestamps are not part of any upstream protocol
        return [{"role": m.role, "content": m.content} for m in self.messages]

    def __len__(self) -> int:
        return len(self.messages)


def build_transcript(system: str, history: Iterable[ChatMessage]) -> Transcript:
    turns = [m for m in history if m.role != "system"]
    return Transcript((ChatMessage(role="system", content=system), *turns))
