"""Tests for the completion backend, with the SDK clients replaced by fakes."""

from types import SimpleNamespace

import pytest

from vyntra.core.config import Settings
from vyntra.core.exceptions import CompletionError
from vyntra.engine import llm_provider
from vyntra.engine.llm_provider import LLMCompletion, reset_clients


class FakeOpenAI:
    def __init__(self, content):
        self.requests = []
        self.chat = SimpleNamespace(completions=SimpleNamespace(create=self._create))
        self._content = content

    async def _create(self, **kwargs):
        self.requests.append(kwargs)
        message = SimpleNamespace(content=self._content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class FakeAnthropic:
    def __init__(self, text):
        self.requests = []
        self.messages = SimpleNamespace(create=self._create)
        self._text = text

    async def _create(self, **kwargs):
        self.requests.append(kwargs)
        return SimpleNamespace(content=[SimpleNamespace(type="text", text=self._text)])


@pytest.fixture(autouse=True)
def clean_clients():
    reset_clients()
    yield
    reset_clients()


async def test_missing_openai_key():
    completion = LLMCompletion(model="gpt-4.1-mini", config=Settings(openai_api_key=None))

    with pytest.raises(CompletionError, match="OPENAI_API_KEY is not configured"):
        await completion.complete("hi")


async def test_claude_models_need_an_anthropic_key():
    completion = LLMCompletion(model="claude-sonnet-4-5", config=Settings(anthropic_api_key=None))

    with pytest.raises(CompletionError, match="ANTHROPIC_API_KEY is not configured"):
        await completion.complete("hi")


async def test_openai_json_mode(monkeypatch):
    client = FakeOpenAI('  {"ok": true}\n')
    monkeypatch.setattr(llm_provider, "_get_openai_client", lambda config: client)

    text = await LLMCompletion(model="gpt-4.1-mini", temperature=0.0).complete(
        "prompt", system="be strict", json_mode=True,
    )

    assert text == '{"ok": true}'
    request = client.requests[0]
    assert request["response_format"] == {"type": "json_object"}
    assert request["temperature"] == 0.0
    assert request["messages"] == [
        {"role": "system", "content": "be strict"},
        {"role": "user", "content": "prompt"},
    ]


async def test_empty_content_is_an_error(monkeypatch):
    client = FakeOpenAI("   ")
    monkeypatch.setattr(llm_provider, "_get_openai_client", lambda config: client)

    with pytest.raises(CompletionError, match="missing message content"):
        await LLMCompletion(model="gpt-4.1-mini").complete("prompt")


async def test_anthropic_system_prompt_is_separate(monkeypatch):
    client = FakeAnthropic("A summary.")
    monkeypatch.setattr(llm_provider, "_get_anthropic_client", lambda config: client)

    text = await LLMCompletion(model="claude-sonnet-4-5").complete("prompt", json_mode=True)

    assert text == "A summary."
    request = client.requests[0]
    assert request["messages"] == [{"role": "user", "content": "prompt"}]
    assert request["system"].startswith(llm_provider.DEFAULT_SYSTEM_PROMPT)
    assert request["system"].endswith("Respond with a single JSON object and nothing else.")


def test_clients_are_cached_per_credentials():
    first = Settings(openai_api_key="sk-first")
    second = Settings(openai_api_key="sk-second")

    client = llm_provider._get_openai_client(first)

    assert llm_provider._get_openai_client(first) is client
    assert llm_provider._get_openai_client(second) is not client
    assert llm_provider._get_openai_client(
        Settings(openai_api_key="sk-first", openai_base_url="http://localhost:8080/v1")
    ) is not client


def test_anthropic_clients_are_cached_per_key():
    client = llm_provider._get_anthropic_client(Settings(anthropic_api_key="sk-ant-a"))

    assert llm_provider._get_anthropic_client(Settings(anthropic_api_key="sk-ant-a")) is client
    assert llm_provider._get_anthropic_client(Settings(anthropic_api_key="sk-ant-b")) is not client
