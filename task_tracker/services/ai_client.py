import logging

import httpx
from flask import current_app
from openai import OpenAI

logger = logging.getLogger(__name__)

EXTENSION_KEY = "ai_client"


class AIServiceError(RuntimeError):
    """The external language/speech service failed or returned garbage."""


class AIConfigurationError(AIServiceError):
    """The external service cannot be used with the current settings."""


def build_client(config) -> OpenAI:
    """Create an OpenAI-compatible client from app config.

    Retries are disabled; a failed call is reported to the caller, who may
    try again by hand.
    """
    api_key = (config.get("AI_API_KEY") or "").strip()
    base_url = (config.get("AI_BASE_URL") or "").strip()
    if not api_key:
        raise AIConfigurationError("AI API key is not set. Set AI_API_KEY in your .env.")
    if not base_url:
        raise AIConfigurationError("AI base URL is not set. Set AI_BASE_URL in your .env.")

    connect = float(config.get("AI_CONNECT_TIMEOUT", 5.0))
    read = float(config.get("AI_READ_TIMEOUT", 60.0))
    timeout = httpx.Timeout(connect=connect, read=read, write=30.0, pool=connect)

    logger.info("AI client ready base_url=%s", base_url)
    return OpenAI(base_url=base_url, api_key=api_key, timeout=timeout, max_retries=0)


def get_ai_client():
    """Return the application's AI client, building it on first use."""
    client = current_app.extensions.get(EXTENSION_KEY)
    if client is None:
        client = build_client(current_app.config)
        current_app.extensions[EXTENSION_KEY] = client
    return client
