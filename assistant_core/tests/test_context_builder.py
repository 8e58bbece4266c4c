from datetime import datetime, timezone

import pytest

from assistant_core.agents.context_builder import ContextBuilder, determine_intent, extract_keywords
from assistant_core.domain.models import Message
from assistant_core.infrastructure.metrics.source import StaticMetricsSource

FIXED_NOW = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


def _builder(cpu=10.0, memory=20.0, window=5):
    metrics = StaticMetricsSource(cpu=cpu, memory=memory)
    return ContextBuilder(metrics, window=window, clock=lambda: FIXED_NOW), metrics


def test_empty_history():
    builder, _ = _builder()
    ctx = builder.build_context([])
    data = ctx.relevant_data
    assert data["message_count"] == "0"
    assert data["topics"] == ""
    assert data["timestamp"] == "2024-01-02T03:04:05Z"
    assert "last_user_query" not in data
    assert "user_intent" not in data


def test_metrics_sampled_every_call():
    builder, metrics = _builder(cpu=42.0, memory=120.0)
    first = builder.build_context([])
    metrics.cpu = 55.0
    second = builder.build_context([])
    assert metrics.samples == 2
    assert first.system_state.cpu_usage == 42.0
    assert first.system_state.memory_usage == 100.0
    assert second.system_state.cpu_usage == 55.0


def test_topics_follow_bucket_order_without_duplicates():
    builder, _ = _builder()
    history = [
        Message(content="Can you help me?", is_user=True),
        Message(content="Sure", is_user=False),
        Message(content="my CPU and RAM", is_user=True),
        Message(content="processor again", is_user=True),
    ]
    ctx = builder.build_context(history)
    assert ctx.relevant_data["topics"] == "system_performance, memory_usage, assistance"


def test_topics_only_scan_last_five_messages():
    builder, _ = _builder()
    history = [Message(content="tell me about the intel architecture", is_user=True)]
    history += [Message(content=f"msg {i}", is_user=i % 2 == 0) for i in range(5)]
    ctx = builder.build_context(history)
    assert ctx.relevant_data["topics"] == ""
    assert ctx.relevant_data["message_count"] == "6"


def test_last_user_query_and_intent():
    builder, _ = _builder()
    history = [
        Message(content="tell me memory", is_user=True),
        Message(content="Your memory usage is at 20.0%.", is_user=False),
    ]
    ctx = builder.build_context(history)
    assert ctx.relevant_data["last_user_query"] == "tell me memory"
    assert ctx.relevant_data["user_intent"] == "information_request"


@pytest.mark.parametrize(
    "query,intent",
    [
        ("How do I help? ", "question"),
        ("HELP me", "assistance_request"),
        ("how is it going", "assistance_request"),
        # "show" 含子串 "how"
        ("show me", "assistance_request"),
        ("tell me the status", "information_request"),
        ("What is running", "information_request"),
        ("thanks a lot", "acknowledgment"),
        ("ok", "general"),
    ],
)
def test_intent_precedence(query, intent):
    assert determine_intent(query) == intent


def test_extract_keywords():
    assert extract_keywords("What about this Processor load which seems high") == ["processor", "load", "seems", "high"]
