import logging

import requests
from ..core.config import Settings, settings as default_settings
from ..core.errors import ServiceError

logger = logging.getLogger(__name__)

def ollama_generate(prompt: str, s: Settings = default_settings) -> str:
    r = requests.post(
        f"{s.OLLAMA_HOST}/api/generate",
        json={"model": s.OLLAMA_MODEL, "prompt": prompt, "stream": False},
        timeout=s.LLM_TIMEOUT_SECONDS,
    )
    r.raise_for_status()
    return r.json().get("response", "")

def openai_chat(prompt: str, s: Settings = default_settings, max_tokens: int = 200, temperature: float = 0.5) -> str:
    if not s.OPENAI_API_KEY:
        raise ServiceError("OPENAI_API_KEY is not set")
    r = requests.post(
        f"{s.OPENAI_BASE_URL.rstrip('/')}/chat/completions",
        headers={"Authorization": f"Bearer {s.OPENAI_API_KEY}"},
        json={
            "model": s.OPENAI_MODEL,
            "messages": [{"role": "user", "content": prompt}],
            "max_tokens": max_tokens,
            "temperature": temperature,
        },
        timeout=s.LLM_TIMEOUT_SECONDS,
    )
    r.raise_for_status()
    choices = r.json().get("choices") or []
    if not choices:
        return ""
    return (choices[0].get("message") or {}).get("content") or ""

def complete(prompt: str, s: Settings = default_settings) -> str:
    """Send a prompt to the configured provider and return the raw completion text."""
    provider = s.LLM_PROVIDER.lower()
    if provider not in ("openai", "ollama"):
        raise ServiceError(f"Unknown LLM provider: {s.LLM_PROVIDER}")
    try:
        text = openai_chat(prompt, s) if provider == "openai" else ollama_generate(prompt, s)
        if not isinstance(text, str):
            raise TypeError(f"completion is {type(text).__name__}, not str")
    except requests.RequestException as e:
        logger.warning("LLM provider %s failed: %s", provider, e)
        raise ServiceError(f"LLM provider {provider} failed") from e
    except (ValueError, AttributeError, KeyError, IndexError, TypeError) as e:
        logger.warning("LLM provider %s returned an unexpected response: %r", provider, e)
        raise ServiceError(f"LLM provider {provider} returned an unexpected response") from e
    return text
