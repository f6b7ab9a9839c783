"""Shared LLM helpers (OpenAI-compatible completion client, permissive JSON extraction)."""

import json
import re
from typing import Any, Optional, Protocol

from openai import AsyncOpenAI

from stockresearch.config import Settings
from stockresearch.exceptions import ConfigurationError

_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")


class TextCompleter(Protocol):
    async def complete(
        self,
        system_prompt: str,
        messages: list[dict[str, str]],
        max_output_tokens: int,
        *,
        model: Optional[str] = None,
    ) -> str: ...


class OpenAICompleter:
    """TextCompleter over any OpenAI-compatible chat completions endpoint (Groq by default)."""

    def __init__(self, client: AsyncOpenAI, default_model: str):
        self.client = client
        self.default_model = default_model

    async def complete(
        self,
        system_prompt: str,
        messages: list[dict[str, str]],
        max_output_tokens: int,
        *,
        model: Optional[str] = None,
    ) -> str:
        resp = await self.client.chat.completions.create(
            model=model or self.default_model,
            messages=[{"role": "system", "content": system_prompt}, *messages],
            max_tokens=max_output_tokens,
        )
        return resp.choices[0].message.content or ""


def get_completer(settings: Settings | None = None) -> OpenAICompleter:
    settings = settings or Settings()
    if not settings.llm_api_key:
        raise ConfigurationError("GROQ_API_KEY environment variable is required")
    client = AsyncOpenAI(
        api_key=settings.llm_api_key,
        base_url=settings.llm_base_url,
        timeout=settings.llm_timeout_seconds,
    )
    return OpenAICompleter(client, default_model=settings.model_report)


def extract_json_object(content: str) -> Optional[dict[str, Any]]:
    """
    Decode the first {...} span of a model response (code fences and chatter around it
    are ignored). Returns None instead of raising when there is no usable object.
    """
    match = _JSON_OBJECT.search(content or "")
    if not match:
        return None
    try:
        data = json.loads(match.group(0))
    except json.JSONDecodeError:
        return None
    return data if isinstance(data, dict) else None
