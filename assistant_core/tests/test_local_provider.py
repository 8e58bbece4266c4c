import asyncio

import pytest

from assistant_core.domain.models import MessageContext, SystemState
from assistant_core.providers.local_client import (
    ARCHITECTURE_BLURB,
    CAPABILITIES,
    GREETING,
    MODEL_HINT,
    LocalRuleProvider,
    local_reply,
)


def _ctx(cpu=0.0, memory=0.0):
    return MessageContext(system_state=SystemState(cpu_usage=cpu, memory_usage=memory), relevant_data={})


def test_cpu_high_usage_example():
    reply = local_reply("What's my CPU usage?", _ctx(cpu=85.3))
    assert "85.3%" in reply
    assert "quite high" in reply


@pytest.mark.parametrize("cpu,clause", [(70.0, "healthy"), (70.1, "quite high"), (0.0, "healthy")])
def test_cpu_threshold(cpu, clause):
    assert clause in local_reply("processor load", _ctx(cpu=cpu))


@pytest.mark.parametrize("memory,clause", [(80.0, "good shape"), (80.5, "running low"), (12.0, "good shape")])
def test_memory_threshold(memory, clause):
    reply = local_reply("how much RAM", _ctx(memory=memory))
    assert f"{memory:.1f}%" in reply
    assert clause in reply


def test_status_block():
    reply = local_reply("system status", _ctx(cpu=12.34, memory=56.78))
    assert reply.startswith("Here's your current system status:")
    assert "• CPU Usage: 12.3%" in reply
    assert "• Memory Usage: 56.8%" in reply


def test_keyword_precedence():
    # cpu 优先于 memory 与 status
    assert "CPU is currently" in local_reply("cpu memory status", _ctx())
    assert local_reply("hello", _ctx()) == GREETING
    assert local_reply("what can you do", _ctx()) == CAPABILITIES
    assert local_reply("Intel", _ctx()) == ARCHITECTURE_BLURB
    assert local_reply("which model", _ctx()) == GREETING  # "which" 含 "hi"
    assert local_reply("model?", _ctx()) == MODEL_HINT


def test_generic_reply_embeds_metrics():
    reply = local_reply("Quantum", _ctx(cpu=5.0, memory=6.25))
    assert "'Quantum'" in reply
    assert "CPU: 5.0%" in reply
    assert "Memory: 6.2%" in reply or "Memory: 6.3%" in reply


def test_missing_system_state_defaults_to_zero():
    reply = local_reply("cpu", MessageContext())
    assert "0.0%" in reply


def test_provider_is_always_available():
    provider = LocalRuleProvider()
    assert provider.is_available
    assert provider.name == "local"
    assert asyncio.run(provider.generate("hello", _ctx())) == GREETING
