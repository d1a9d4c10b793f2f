"""
Incremental decoders for upstream streaming bodies.

Network reads arrive at arbitrary boundaries: one upstream line can be split
across two reads, or several lines can arrive in one. ChunkDecoder keeps the
bytes after the last newline until the rest of the line shows up, and hands
every complete line to a per-family interpreter:

* sentinel family (OpenAI, OpenRouter): ``data: {json}`` lines ending with
  ``data: [DONE]``
* newline-JSON family (Ollama): one JSON object per line, ``"done": true``
  on the last one

Lines that are not valid JSON are skipped, upstreams interleave keep-alive
and comment lines with the payload.
"""

import json
import logging
from typing import Any, Callable, Dict, List, Optional

from anima.providers.events import (
    TERMINAL,
    Failure,
    FailureKind,
    NormalizedEvent,
    Token,
    is_terminal,
)

logger = logging.getLogger(__name__)

LineInterpreter = Callable[[bytes], List[NormalizedEvent]]

SENTINEL_PREFIX = b"data:"
SENTINEL_DONE = b"[DONE]"

# longest upstream line kept in memory before the stream is abandoned
DEFAULT_MAX_LINE_BYTES = 1024 * 1024


class ChunkDecoder:
    def __init__(self, interpret_line: LineInterpreter, max_line_bytes: int = DEFAULT_MAX_LINE_BYTES) -> None:
        self._interpret_line = interpret_line
        self._max_line_bytes = max_line_bytes
        self._buffer = bytearray()
        self._finished = False

    @property
    def finished(self) -> bool:
        return self._finished

    def feed(self, chunk: bytes) -> List[NormalizedEvent]:
        if self._finished or not chunk:
            return []
        self._buffer += chunk
        if b"\n" not in chunk:
            return self._check_overflow([])
        *lines, rest = bytes(self._buffer).split(b"\n")
        self._buffer = bytearray(rest)
        return self._check_overflow(self._interpret(lines))

    def close(self) -> List[NormalizedEvent]:
        """Flush an unterminated last line and end the stream.

        A body that ends without its family's end marker still counts as an
        ordinary end of generation.
        """
        if self._finished:
            return []
        tail = bytes(self._buffer)
        self._buffer.clear()
        events = self._interpret([tail])
        if not self._finished:
            events.append(TERMINAL)
            self._finished = True
        return events

    def _interpret(self, lines: List[bytes]) -> List[NormalizedEvent]:
        events: List[NormalizedEvent] = []
        for raw in lines:
            if len(raw) > self._max_line_bytes:
                events.append(self._overflow())
                return events
            line = raw.rstrip(b"\r")
            if not line.strip():
                continue
            for event in self._interpret_line(line):
                events.append(event)
                if is_terminal(event):
                    self._finished = True
                    self._buffer.clear()
                    return events
        return events

    def _check_overflow(self, events: List[NormalizedEvent]) -> List[NormalizedEvent]:
        if not self._finished and len(self._buffer) > self._max_line_bytes:
            events.append(self._overflow())
        return events

    def _overflow(self) -> Failure:
        self._finished = True
        self._buffer.clear()
        logger.warning("upstream line exceeded %d bytes", self._max_line_bytes)
        return Failure(FailureKind.STREAM_READ, f"Upstream line exceeded {self._max_line_bytes} bytes")


def _load_json(payload: bytes) -> Optional[Dict[str, Any]]:
    try:
        data = json.loads(payload)
    except (ValueError, RecursionError):
        # JSONDecodeError, UnicodeDecodeError, or nesting too deep to parse
        logger.debug("skipping non-JSON upstream line: %r", payload[:200])
        return None
    if not isinstance(data, dict):
        logger.debug("skipping non-object upstream line: %r", payload[:200])
        return None
    return data


def _error_message(error: Any) -> str:
    if isinstance(error, dict):
        message = error.get("message")
        if isinstance(message, str) and message:
            return message
        return json.dumps(error)
    return str(error)


def _sentinel_content(data: Dict[str, Any]) -> Optional[str]:
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
        return None
    delta = choices[0].get("delta")
    if not isinstance(delta, dict):
        return None
    content = delta.get("content")
    return content if isinstance(content, str) and content else None


def interpret_sentinel_line(line: bytes) -> List[NormalizedEvent]:
    # SSE comments (": PROCESSING") and "event:" lines carry no payload
    if not line.startswith(SENTINEL_PREFIX):
        return []
    payload = line[len(SENTINEL_PREFIX):].strip()
    if payload == SENTINEL_DONE:
        return [TERMINAL]
    data = _load_json(payload)
    if data is None:
        return []
    if data.get("error"):
        return [Failure(FailureKind.UPSTREAM_PAYLOAD, _error_message(data["error"]))]
    content = _sentinel_content(data)
    return [Token(content)] if content else []


def interpret_ndjson_line(line: bytes) -> List[NormalizedEvent]:
    data = _load_json(line)
    if data is None:
        return []
    if data.get("error"):
        return [Failure(FailureKind.UPSTREAM_PAYLOAD, _error_message(data["error"]))]
    events: List[NormalizedEvent] = []
    message = data.get("message")
    if isinstance(message, dict):
        content = message.get("content")
        if isinstance(content, str) and content:
            events.append(Token(content))
    if data.get("done") is True:
        events.append(TERMINAL)
    return events


def sentinel_decoder(max_line_bytes: int = DEFAULT_MAX_LINE_BYTES) -> ChunkDecoder:
    return ChunkDecoder(interpret_sentinel_line, max_line_bytes)


def ndjson_decoder(max_line_bytes: int = DEFAULT_MAX_LINE_BYTES) -> ChunkDecoder:
    return ChunkDecoder(interpret_ndjson_line, max_line_bytes)
