"""Tests for p5studio.engines (base, registry, gemini, langchain)."""
import asyncio
from types import SimpleNamespace

import pytest
from langchain_core.messages import AIMessage, HumanMessage, SystemMessage

from p5studio.config import ConfigError, Settings
from p5studio.engines import registry
from p5studio.engines.base import EngineResponse, GenerationEngine, Turn
from p5studio.engines.gemini_engine import GeminiEngine
from p5studio.engines.langchain_engine import _get_model, _to_messages
from p5studio.engines.prompts import SYSTEM_INSTRUCTION


class FakeChat:
    def __init__(self, reply):
        self.reply = reply
        self.sent = []

    async def send_message(self, message):
        self.sent.append(message)
        return SimpleNamespace(text=self.reply)


class FakeChats:
    def __init__(self, reply):
        self.reply = reply
        self.created = []

    def create(self, model, config, history):
        chat = FakeChat(self.reply)
        self.created.append({"model": model, "config": config, "history": history, "chat": chat})
        return chat


def _fake_client(reply):
    chats = FakeChats(reply)
    return SimpleNamespace(aio=SimpleNamespace(chats=chats)), chats


def test_engine_response_dataclass():
    r = EngineResponse(text="hi", model="gemini-2.0-flash")
    assert r.text == "hi"
    assert r.model == "gemini-2.0-flash"


def test_registry_list_engines():
    engines = registry.list_engines()
    assert isinstance(engines, list)
    ids = [e["id"] for e in engines]
    assert "gemini" in ids
    for e in engines:
        assert "id" in e
        assert "name" in e
        assert "supports_models" in e


def test_registry_get_engine_caches_instance():
    engine = registry.get_engine("mock")
    assert isinstance(engine, GenerationEngine)
    assert registry.get_engine("mock") is engine


def test_registry_unknown_engine():
    with pytest.raises(ValueError, match="Unknown engine"):
        registry.get_engine("nonexistent_engine_xyz")


def test_gemini_engine_builds_chat_session():
    client, chats = _fake_client("```javascript\nfoo()\n```")
    engine = GeminiEngine(client=client)
    history = [Turn(role="user", text="draw a circle"), Turn(role="model", text="circle(1, 1, 1);")]

    response = asyncio.run(engine.generate("make it red", "gemini-2.0-flash", 0.7, history=history))

    assert response.text == "```javascript\nfoo()\n```"
    assert response.model == "gemini-2.0-flash"
    created = chats.created[0]
    assert created["model"] == "gemini-2.0-flash"
    config = created["config"]
    assert config.system_instruction == SYSTEM_INSTRUCTION
    assert config.temperature == 0.7
    assert config.top_p == 0.95
    assert config.top_k == 40
    assert config.max_output_tokens == 8192
    assert config.response_mime_type == "text/plain"
    assert [c.role for c in created["history"]] == ["user", "model"]
    assert created["history"][0].parts[0].text == "draw a circle"
    assert created["chat"].sent == ["make it red"]


def test_gemini_engine_empty_reply():
    client, _ = _fake_client(None)
    response = asyncio.run(GeminiEngine(client=client).generate("x", "gemini-2.0-flash", 1.0))
    assert response.text == ""


def test_gemini_engine_requires_key():
    engine = GeminiEngine(settings=Settings(gemini_api_key=None))
    with pytest.raises(ConfigError):
        engine.client


def test_langchain_messages_from_history():
    history = [Turn(role="user", text="a"), Turn(role="model", text="b")]
    messages = _to_messages("c", history)
    assert isinstance(messages[0], SystemMessage)
    assert messages[0].content == SYSTEM_INSTRUCTION
    assert isinstance(messages[1], HumanMessage)
    assert isinstance(messages[2], AIMessage)
    assert messages[-1].content == "c"


def test_langchain_gemini_requires_key():
    with pytest.raises(ConfigError):
        _get_model("gemini-2.0-flash", 1.0, Settings(gemini_api_key=None))
