import asyncio

import pytest

from assistant_core.agents.assistant import WELCOME_MESSAGE, AssistantService
from assistant_core.agents.context_builder import ContextBuilder
from assistant_core.agents.pipeline import ResponsePipeline
from assistant_core.domain.exceptions import AssistantBusyError, ValidationError
from assistant_core.infrastructure.metrics.source import StaticMetricsSource
from assistant_core.infrastructure.storage.memory_store import InMemoryConversationStore
from assistant_core.providers.local_client import LocalRuleProvider
from assistant_core.providers.registry import ProviderRegistry


class ReentrantProvider:
    """在 generate 内再次提交，用于检查忙碌标志。"""

    name = "probe"
    display_name = "Probe"
    is_available = True

    def __init__(self):
        self.assistant = None
        self.busy_seen = None
        self.error = None

    async def generate(self, prompt, context):
        self.busy_seen = self.assistant.is_processing
        try:
            await self.assistant.send_message("second")
        except AssistantBusyError as e:
            self.error = e
        return "done"


def _assistant(providers=None, cpu=25.0, memory=50.0):
    registry = ProviderRegistry(providers or [LocalRuleProvider()])
    return AssistantService(
        store=InMemoryConversationStore(),
        context_builder=ContextBuilder(StaticMetricsSource(cpu=cpu, memory=memory)),
        pipeline=ResponsePipeline(registry),
    )


def test_welcome_message_seeded():
    assistant = _assistant()
    msgs = assistant.messages
    assert len(msgs) == 1
    assert msgs[0].content == WELCOME_MESSAGE
    assert not msgs[0].is_user
    assert assistant.current_provider == "Local AI"


def test_turn_appends_user_then_assistant():
    assistant = _assistant(cpu=85.3)
    reply = asyncio.run(assistant.send_message("  What's my CPU usage?  "))
    msgs = assistant.messages
    assert [m.role for m in msgs] == ["assistant", "user", "assistant"]
    assert msgs[1].content == "What's my CPU usage?"
    assert msgs[1].context is None
    assert msgs[2] is reply
    assert "85.3%" in reply.content

    data = reply.context.relevant_data
    assert data["message_count"] == "1"
    assert data["last_user_query"] == "What's my CPU usage?"
    assert data["user_intent"] == "question"
    assert data["topics"] == "system_performance"
    assert reply.context.system_state.memory_usage == 50.0
    assert assistant.last_result.provider == "local"


def test_one_assistant_message_per_turn():
    assistant = _assistant()
    for text in ("hello", "memory", "thanks"):
        asyncio.run(assistant.send_message(text))
    roles = [m.role for m in assistant.messages]
    assert roles.count("user") == 3
    assert roles.count("assistant") == 4


def test_empty_input_rejected():
    assistant = _assistant()
    with pytest.raises(ValidationError):
        asyncio.run(assistant.send_message("   "))
    assert len(assistant.messages) == 1


def test_busy_flag_rejects_concurrent_submission():
    probe = ReentrantProvider()
    assistant = _assistant(providers=[probe])
    probe.assistant = assistant
    reply = asyncio.run(assistant.send_message("first"))
    assert reply.content == "done"
    assert probe.busy_seen is True
    assert isinstance(probe.error, AssistantBusyError)
    assert not assistant.is_processing
    assert [m.content for m in assistant.messages if m.is_user] == ["first"]


def test_replace_pipeline_keeps_history():
    assistant = _assistant()
    asyncio.run(assistant.send_message("hello"))
    assistant.replace_pipeline(ResponsePipeline(ProviderRegistry([])))
    reply = asyncio.run(assistant.send_message("hello again"))
    assert "unable to respond" in reply.content
    assert len(assistant.messages) == 5


def test_welcome_message_stays_out_of_context():
    assistant = _assistant()
    reply = asyncio.run(assistant.send_message("ok"))
    data = reply.context.relevant_data
    assert data["topics"] == ""
    assert data["message_count"] == "1"
    assert assistant.messages[0].content == WELCOME_MESSAGE


def test_no_welcome_when_disabled():
    assistant = AssistantService(
        store=InMemoryConversationStore(),
        context_builder=ContextBuilder(StaticMetricsSource()),
        pipeline=ResponsePipeline(ProviderRegistry([LocalRuleProvider()])),
        welcome=None,
    )
    assert assistant.messages == []
