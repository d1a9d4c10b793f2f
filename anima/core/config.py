# centralized configuration loader
# runs load_dotenv() to read .env
# decouples code from environment: providers, keys, models and limits change without code changes

import os
from dotenv import load_dotenv

load_dotenv()


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes", "y"}


def _list(name: str, default: str) -> list[str]:
    return [item.strip() for item in os.getenv(name, default).split(",") if item.strip()]


# Provider selected when a request does not name one
PROVIDER = os.getenv("PROVIDER", "openai")

# *_MODELS are comma separated lists offered to clients; the *_MODEL default is always included
# OpenAI
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")
OPENAI_BASE_URL = os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1")
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-3.5-turbo")
OPENAI_MODELS = _list("OPENAI_MODELS", "gpt-3.5-turbo,gpt-4o-mini,gpt-4o")

# OpenRouter (attribution headers are sent with every request)
OPENROUTER_API_KEY = os.getenv("OPENROUTER_API_KEY", "")
OPENROUTER_BASE_URL = os.getenv("OPENROUTER_BASE_URL", "https://openrouter.ai/api/v1")
OPENROUTER_MODEL = os.getenv("OPENROUTER_MODEL", "openai/gpt-3.5-turbo")
OPENROUTER_MODELS = _list("OPENROUTER_MODELS", "openai/gpt-3.5-turbo")
OPENROUTER_REFERER = os.getenv("OPENROUTER_REFERER", "http://localhost:3000")
OPENROUTER_TITLE = os.getenv("OPENROUTER_TITLE", "Anima")

# Ollama (local, unauthenticated)
OLLAMA_HOST = os.getenv("OLLAMA_HOST", "http://127.0.0.1:11434")
OLLAMA_MODEL = os.getenv("OLLAMA_MODEL", "llama3")
OLLAMA_MODELS = _list("OLLAMA_MODELS", "llama3")

# System prompt; SYSTEM_PROMPT_FILE wins when set
SYSTEM_PROMPT = os.getenv("SYSTEM_PROMPT", "You are a helpful assistant.")
SYSTEM_PROMPT_FILE = os.getenv("SYSTEM_PROMPT_FILE", "")

# Sampling defaults, overridable per request
TEMPERATURE = float(os.getenv("TEMPERATURE", "0.7"))
MAX_TOKENS = int(os.getenv("MAX_TOKENS", "2048"))
TOP_P = float(os.getenv("TOP_P", "1.0"))
CTX_TOKENS = int(os.getenv("CTX_TOKENS", "4096"))

# Upstream timeouts in seconds (STREAM_MAX_SECONDS=0 means no overall deadline)
UPSTREAM_CONNECT_TIMEOUT = float(os.getenv("UPSTREAM_CONNECT_TIMEOUT", "10"))
UPSTREAM_READ_TIMEOUT = float(os.getenv("UPSTREAM_READ_TIMEOUT", "120"))
STREAM_MAX_SECONDS = float(os.getenv("STREAM_MAX_SECONDS", "600"))

# longest single upstream line before the stream fails
MAX_LINE_BYTES = int(os.getenv("MAX_LINE_BYTES", str(1024 * 1024)))

# Server
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
HOST = os.getenv("HOST", "127.0.0.1")
PORT = int(os.getenv("PORT", "8000"))
RELOAD = _flag("RELOAD", "false")
