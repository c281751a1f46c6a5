"""Unified LLM provider using direct SDKs (openai, anthropic).

Public API:
    call_llm(model, messages, temperature, **kwargs) -> LLMResponse
    LLMCompletion(...).complete(prompt, system=..., json_mode=...) -> str

Routing:
  - claude-*           -> anthropic SDK  (direct Anthropic API)
  - everything else    -> openai SDK     (OpenAI or an OpenAI-compatible base URL)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

import httpx
from anthropic import AnthropicError, AsyncAnthropic
from openai import AsyncOpenAI, OpenAIError

from ..core.config import Settings, settings as default_settings
from ..core.exceptions import CompletionError

logger = logging.getLogger(__name__)

DEFAULT_SYSTEM_PROMPT = "You are a concise workflow execution assistant."
ANTHROPIC_MAX_TOKENS = 2048


# ---------------------------------------------------------------------------
# Data Classes
# ---------------------------------------------------------------------------


@dataclass
class LLMResponse:
    """Standardized response from call_llm."""

    text: Optional[str] = None
    model: Optional[str] = None


# ---------------------------------------------------------------------------
# Lazy client singletons
# ---------------------------------------------------------------------------

# Keyed by (provider, api key, base url) so each credential set gets its own client
_clients: dict[tuple[str, str | None, str | None], Any] = {}


def _get_openai_client(config: Settings) -> AsyncOpenAI:
    if not config.openai_api_key:
        raise CompletionError("OPENAI_API_KEY is not configured")
    key = ("openai", config.openai_api_key, config.openai_base_url)
    if key not in _clients:
        _clients[key] = AsyncOpenAI(
            api_key=config.openai_api_key,
            base_url=config.openai_base_url,
            http_client=httpx.AsyncClient(timeout=config.llm_timeout_seconds),
        )
    return _clients[key]


def _get_anthropic_client(config: Settings) -> AsyncAnthropic:
    if not config.anthropic_api_key:
        raise CompletionError("ANTHROPIC_API_KEY is not configured")
    key = ("anthropic", config.anthropic_api_key, None)
    if key not in _clients:
        _clients[key] = AsyncAnthropic(
            api_key=config.anthropic_api_key,
            http_client=httpx.AsyncClient(timeout=config.llm_timeout_seconds),
        )
    return _clients[key]


def reset_clients() -> None:
    """Drop cached SDK clients (used after settings change)."""
    _clients.clear()


# ---------------------------------------------------------------------------
# Provider calls
# ---------------------------------------------------------------------------


async def _call_openai_compat(
    client: AsyncOpenAI,
    model: str,
    messages: list[dict],
    temperature: float = 0.2,
    **kwargs: Any,
) -> LLMResponse:
    completion_kwargs: dict[str, Any] = {
        "model": model,
        "messages": messages,
        "temperature": temperature,
    }
    if kwargs.get("max_tokens"):
        completion_kwargs["max_tokens"] = kwargs["max_tokens"]

    rf = kwargs.get("response_format")
    if rf and rf.get("type") == "json_object":
        completion_kwargs["response_format"] = {"type": "json_object"}

    completion = await client.chat.completions.create(**completion_kwargs)

    choice = completion.choices[0] if completion.choices else None
    if not choice:
        return LLMResponse(model=model)
    return LLMResponse(text=choice.message.content, model=model)


async def _call_anthropic(
    client: AsyncAnthropic,
    model: str,
    messages: list[dict],
    temperature: float = 0.2,
    **kwargs: Any,
) -> LLMResponse:
    # Anthropic takes the system prompt separately
    system_parts = [m["content"] for m in messages if m["role"] == "system"]
    chat = [m for m in messages if m["role"] != "system"]

    rf = kwargs.get("response_format")
    if rf and rf.get("type") == "json_object":
        system_parts.append("Respond with a single JSON object and nothing else.")

    response = await client.messages.create(
        model=model,
        system="\n\n".join(system_parts),
        messages=chat,
        temperature=temperature,
        max_tokens=kwargs.get("max_tokens") or ANTHROPIC_MAX_TOKENS,
    )
    text = "".join(block.text for block in response.content if getattr(block, "type", None) == "text")
    return LLMResponse(text=text or None, model=model)


async def call_llm(
    model: str,
    messages: list[dict],
    temperature: float = 0.2,
    config: Settings | None = None,
    **kwargs: Any,
) -> LLMResponse:
    """Unified function to call an LLM.

    Args:
        model: Model identifier (e.g. "gpt-4.1-mini", "claude-sonnet-4-5").
        messages: Conversation as OpenAI-format dicts.
        temperature: Sampling temperature.
        config: Settings providing credentials; defaults to the global settings.
        **kwargs: Extra options forwarded to the backend:
            max_tokens (int), response_format (dict).

    Raises:
        CompletionError: on missing credentials or any transport/API failure.
    """
    config = config or default_settings
    try:
        if model.startswith("claude-"):
            return await _call_anthropic(
                _get_anthropic_client(config), model, messages, temperature, **kwargs,
            )
        return await _call_openai_compat(
            _get_openai_client(config), model, messages, temperature, **kwargs,
        )
    except (OpenAIError, AnthropicError, httpx.HTTPError) as exc:
        raise CompletionError(f"LLM request failed: {exc}", model=model) from exc


class LLMCompletion:
    """Completion backend for live runs: one prompt in, response text out."""

    def __init__(
        self,
        model: str | None = None,
        temperature: float | None = None,
        config: Settings | None = None,
    ) -> None:
        self._config = config or default_settings
        self.model = model or self._config.llm_model
        self.temperature = self._config.llm_temperature if temperature is None else temperature

    async def complete(
        self,
        prompt: str,
        *,
        system: str | None = None,
        json_mode: bool = False,
    ) -> str:
        messages = [
            {"role": "system", "content": system or DEFAULT_SYSTEM_PROMPT},
            {"role": "user", "content": prompt},
        ]
        kwargs: dict[str, Any] = {}
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        response = await call_llm(
            self.model, messages, self.temperature, config=self._config, **kwargs,
        )
        if not response.text or not response.text.strip():
            raise CompletionError("LLM response missing message content", model=self.model)
        return response.text.strip()
