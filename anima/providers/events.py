# normalized stream events shared by every provider
# a stream is zero or more Token events followed by exactly one Terminal or Failure

from dataclasses import dataclass
from enum import Enum
from typing import Union


class FailureKind(str, Enum):
    CONFIGURATION = "configuration"
    CONNECTION = "connection"
    UPSTREAM_STATUS = "upstream_status"
    UPSTREAM_PAYLOAD = "upstream_payload"
    STREAM_READ = "stream_read"
    TIMEOUT = "timeout"


@dataclass(frozen=True)
class Token:
    """Incremental fragment of assistant output."""
    text: str


@dataclass(frozen=True)
class Terminal:
    """Ordinary end of generation."""


@dataclass(frozen=True)
class Failure:
    """The stream ended because of an error."""
    kind: FailureKind
    message: str


NormalizedEvent = Union[Token, Terminal, Failure]

TERMINAL = Terminal()


def is_terminal(event: NormalizedEvent) -> bool:
    return isinstance(event, (Terminal, Failure))


# consistent error type for the app layer so the api can tell provider faults from user errors
class ProviderError(Exception):
    def __init__(self, message: str, kind: FailureKind = FailureKind.STREAM_READ) -> None:
        super().__init__(message)
        self.kind = kind

    def to_failure(self) -> Failure:
        return Failure(self.kind, str(self))
