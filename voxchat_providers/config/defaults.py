"""voxchat_providers.config.defaults
=================================

Central place for small, stable default values used by the gateway, the
HTTP bridge and the CLI. Environment variables or the external config file
override them; these are the fallbacks for local development and tests.

This module imports nothing from the rest of the package so every layer can
depend on it without cycles. Only plain constants live here.
"""

from __future__ import annotations

# ---- Provider addresses ----
OPENAI_DEFAULT_BASE_URL = "https://api.openai.com/v1"
ANTHROPIC_DEFAULT_BASE_URL = "https://api.anthropic.com/v1"
# Loopback address of a local OpenAI-compatible server (Ollama's /v1 surface).
LOCAL_DEFAULT_BASE_URL = "http://localhost:11434/v1"

# ---- Wire protocol constants ----
OPENAI_CHAT_PATH = "/chat/completions"
ANTHROPIC_MESSAGES_PATH = "/messages"
ANTHROPIC_API_VERSION = "2023-06-01"
OPENAI_STREAM_SENTINEL = "[DONE]"
SSE_DATA_PREFIX = "data:"
EVENT_STREAM_MEDIA_TYPE = "text/event-stream"

# ---- Generation defaults (the chat client's advanced settings) ----
DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_OUTPUT_TOKENS = 2000
DEFAULT_STREAMING = True
DEFAULT_MODEL_ID = "gpt-3.5-turbo"

# ---- HTTP bridge service ----
SERVICE_DEFAULT_HOST = "127.0.0.1"
SERVICE_DEFAULT_PORT = 8092
SERVICE_CORS_DEFAULT_ORIGINS = "http://localhost:5173,http://127.0.0.1:5173"

# Longest upstream body excerpt kept on HttpStatusError.detail
ERROR_DETAIL_MAX_CHARS = 500


__all__ = [
    "OPENAI_DEFAULT_BASE_URL",
    "ANTHROPIC_DEFAULT_BASE_URL",
    "LOCAL_DEFAULT_BASE_URL",
    "OPENAI_CHAT_PATH",
    "ANTHROPIC_MESSAGES_PATH",
    "ANTHROPIC_API_VERSION",
    "OPENAI_STREAM_SENTINEL",
    "SSE_DATA_PREFIX",
    "EVENT_STREAM_MEDIA_TYPE",
    "DEFAULT_TEMPERATURE",
    "DEFAULT_MAX_OUTPUT_TOKENS",
    "DEFAULT_STREAMING",
    "DEFAULT_MODEL_ID",
    "SERVICE_DEFAULT_HOST",
    "SERVICE_DEFAULT_PORT",
    "SERVICE_CORS_DEFAULT_ORIGINS",
    "ERROR_DETAIL_MAX_CHARS",
]
