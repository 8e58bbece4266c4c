import pytest

from assistant_core.providers import build_registry, create_provider
from assistant_core.providers.anthropic_client import AnthropicClient
from assistant_core.providers.gemini_client import GeminiClient
from assistant_core.providers.grok_client import GrokClient
from assistant_core.providers.local_client import LocalRuleProvider
from assistant_core.providers.openai_client import OpenAIClient
from assistant_core.providers.registry import ProviderRegistry, get_provider_config


class DummySettings:
    openai_api_key = "sk-openai-123456"
    anthropic_api_key = None
    gemini_api_key = ""
    xai_api_key = None
    provider_order = ["openai", "anthropic", "gemini", "grok"]
    local_fallback = True
    http_timeout = 1.0


def test_create_provider_by_name():
    cfg = DummySettings()
    assert isinstance(create_provider("OpenAI", cfg=cfg), OpenAIClient)
    assert isinstance(create_provider("anthropic", cfg=cfg), AnthropicClient)
    assert isinstance(create_provider("gemini", cfg=cfg), GeminiClient)
    assert isinstance(create_provider("grok", cfg=cfg), GrokClient)
    assert isinstance(create_provider("local"), LocalRuleProvider)
    with pytest.raises(KeyError):
        create_provider("nope", cfg=cfg)


def test_availability_follows_credentials():
    cfg = DummySettings()
    assert create_provider("openai", cfg=cfg).is_available
    assert not create_provider("anthropic", cfg=cfg).is_available
    assert not create_provider("gemini", cfg=cfg).is_available
    assert create_provider("grok", api_key="xai-key-123456", cfg=cfg).is_available
    # 显式传入空串时不回退到 settings
    assert not create_provider("openai", api_key="", cfg=cfg).is_available
    assert not create_provider("openai", api_key="   ", cfg=cfg).is_available


def test_build_registry_order_and_local_last():
    registry = build_registry(DummySettings())
    assert [p.name for p in registry.providers] == ["openai", "anthropic", "gemini", "grok", "local"]
    assert registry.available_providers() == ["openai", "local"]
    assert registry.current_provider == "openai"
    assert registry.current_display_name == "OpenAI GPT"


def test_build_registry_with_explicit_keys_and_custom_order():
    registry = build_registry(
        DummySettings(),
        api_keys={"Gemini": "gm-key-123456", "openai": ""},
        order=["gemini", "openai", "local", "gemini"],
    )
    assert [p.name for p in registry.providers] == ["gemini", "openai", "local"]
    assert registry.available_providers() == ["gemini", "local"]


def test_build_registry_without_local():
    registry = build_registry(DummySettings(), api_keys={"openai": ""}, local_fallback=False)
    assert registry.available_providers() == []
    assert registry.current_provider is None
    assert registry.current_display_name == "None"


def test_registry_mark_success():
    registry = ProviderRegistry([create_provider("openai", cfg=DummySettings()), LocalRuleProvider()])
    assert registry.mark_success("openai") is False
    assert registry.mark_success("local") is True
    assert registry.current_provider == "local"
    assert registry.mark_success("local") is False
    with pytest.raises(KeyError):
        registry.mark_success("unknown")


def test_registry_rejects_duplicates():
    with pytest.raises(ValueError):
        ProviderRegistry([LocalRuleProvider(), LocalRuleProvider()])


def test_get_provider_config_case_insensitive():
    assert get_provider_config("GROK").base_url == "https://api.x.ai/v1/chat/completions"
    with pytest.raises(KeyError):
        get_provider_config("mistral")


def test_registry_lookup_and_iteration():
    local = LocalRuleProvider()
    registry = ProviderRegistry([create_provider("grok", cfg=DummySettings()), local])
    assert registry.get("local") is local
    assert [p.name for p in registry] == ["grok", "local"]
    assert len(registry) == 2
    assert registry.current_display_name == "Local AI"
    with pytest.raises(KeyError):
        registry.get("openai")
