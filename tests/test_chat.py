import asyncio

import pytest

from careerflow.ai_processing import LLMError, collect_reply, stream_chat_message
from careerflow.ai_processing.chat import CHAT_SYSTEM_PROMPT
from careerflow.models import Message

from conftest import ScriptedProvider, make_llm

HISTORY = [
    Message(id="1", role="model", content="Hello!"),
    {"id": "2", "role": "user", "content": "How do I negotiate?"},
]


def test_reply_is_streamed_in_chunks():
    provider = ScriptedProvider("Anchor ", "high, ", "then listen.")
    seen = []

    async def scenario():
        stream = stream_chat_message(HISTORY, "Any tips?", llm=make_llm(provider))
        return await collect_reply(stream, on_chunk=seen.append)

    reply = asyncio.run(scenario())

    assert reply.ok
    assert reply.text == "Anchor high, then listen."
    assert seen == ["Anchor ", "Anchor high, ", "Anchor high, then listen."]
    call = provider.calls[0]
    assert call["history"] == [
        {"role": "model", "content": "Hello!"},
        {"role": "user", "content": "How do I negotiate?"},
    ]
    assert call["message"] == "Any tips?"
    assert call["system_prompt"] == CHAT_SYSTEM_PROMPT
    assert "delve" in call["system_prompt"]


def test_partial_reply_is_kept_when_stream_breaks():
    provider = ScriptedProvider("Start with ", LLMError("stream reset"))

    async def scenario():
        return await collect_reply(stream_chat_message(HISTORY, "Any tips?", llm=make_llm(provider)))

    reply = asyncio.run(scenario())

    assert not reply.ok
    assert reply.text == "Start with "
    assert isinstance(reply.error, LLMError)


def test_missing_provider_surfaces_from_iteration():
    llm = make_llm(ScriptedProvider())
    llm.providers.clear()

    async def scenario():
        async for _ in stream_chat_message(HISTORY, "Any tips?", llm=llm):
            pass

    with pytest.raises(LLMError):
        asyncio.run(scenario())


def test_empty_chunks_are_ignored():
    provider = ScriptedProvider("", "Hi", "")
    seen = []

    async def scenario():
        return await collect_reply(stream_chat_message([], "Hello", llm=make_llm(provider)), seen.append)

    reply = asyncio.run(scenario())

    assert reply.text == "Hi"
    assert seen == ["Hi"]
