# tests/conftest.py
import os
import logging
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

# Ensure test-friendly env (fixed hosts, no real keys)
os.environ.setdefault("PROVIDER", "ollama")
os.environ.setdefault("OPENAI_BASE_URL", "https://openai.test/v1")
os.environ.setdefault("OPENROUTER_BASE_URL", "https://openrouter.test/api/v1")
os.environ.setdefault("OLLAMA_HOST", "http://ollama.test:11434")
os.environ.setdefault("STREAM_MAX_SECONDS", "30")

# IMPORTANT: import the app after envs are set
from anima.main import app as asgi_app  # noqa: E402
from anima.core import config  # noqa: E402
from anima.schemas.chat import ChatMessage  # noqa: E402
from anima.services.prompt import build_transcript  # noqa: E402


@pytest_asyncio.fixture
async def app():
    return asgi_app


@pytest_asyncio.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def transcript():
    return build_transcript(
        "You are terse.",
        [
            ChatMessage(role="user", content="hi", timestamp=1),
            ChatMessage(role="assistant", content="hello", timestamp=2),
            ChatMessage(role="user", content="how are you?", timestamp=3),
        ],
    )


@pytest.fixture
def ollama_url():
    return f"{config.OLLAMA_HOST}/api/chat"


@pytest.fixture
def openai_url():
    return f"{config.OPENAI_BASE_URL}/chat/completions"


@pytest.fixture
def openrouter_url():
    return f"{config.OPENROUTER_BASE_URL}/chat/completions"


@pytest.fixture
def caplog_info(caplog):
    caplog.set_level(logging.INFO)
    return caplog
