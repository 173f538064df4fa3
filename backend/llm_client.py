import logging
import os

import anthropic
from dotenv import load_dotenv

from errors import ConfigurationError, classify_upstream_error

load_dotenv()

logger = logging.getLogger(__name__)

ANTHROPIC_API_KEY = os.getenv("ANTHROPIC_API_KEY")
ANTHROPIC_MODEL = os.getenv("ANTHROPIC_MODEL", "claude-sonnet-4-5")
ANTHROPIC_MAX_TOKENS = int(os.getenv("ANTHROPIC_MAX_TOKENS", "512"))
ANTHROPIC_TIMEOUT = float(os.getenv("ANTHROPIC_TIMEOUT", "30"))

PLACEHOLDER_KEY = "your-api-key-here"

_client: anthropic.AsyncAnthropic | None = None


def is_configured() -> bool:
    return bool(ANTHROPIC_API_KEY) and ANTHROPIC_API_KEY != PLACEHOLDER_KEY


def get_client() -> anthropic.AsyncAnthropic:
    """Lazily create the shared async client. Retries are left to the caller."""
    global _client
    if not is_configured():
        logger.error("ANTHROPIC_API_KEY is not set")
        raise ConfigurationError("ANTHROPIC_API_KEY is not set")
    if _client is None:
        _client = anthropic.AsyncAnthropic(
            api_key=ANTHROPIC_API_KEY,
            timeout=ANTHROPIC_TIMEOUT,
            max_retries=0,
        )
    return _client


async def complete(prompt: str) -> str:
    """Send one prompt to the model and return its raw text."""
    client = get_client()
    try:
        response = await client.messages.create(
            model=ANTHROPIC_MODEL,
            max_tokens=ANTHROPIC_MAX_TOKENS,
            messages=[{"role": "user", "content": prompt}],
        )
    except anthropic.APIError as e:
        error = classify_upstream_error(e)
        logger.warning("Model call failed (%s): %s", type(error).__name__, e)
        raise error from e

    text = "".join(block.text for block in response.content if block.type == "text")
    logger.debug("Model response: %s", text)
    return text


def reset_client() -> None:
    global _client
    _client = None
