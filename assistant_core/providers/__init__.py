"""LLM Provider 集成层。

该包下的模块负责：
- 定义 Provider 抽象接口 (base)。
- 维护 Provider 配置与运行期有序列表 (registry)。
- 提供各厂商的具体实现 (openai_client、anthropic_client、gemini_client、
  grok_client) 以及本地规则兜底 (local_client)。
"""

from typing import Dict, Literal, Optional, Sequence

from assistant_core.config.settings import settings
from assistant_core.providers.anthropic_client import AnthropicClient
from assistant_core.providers.base import ModelProvider
from assistant_core.providers.gemini_client import GeminiClient
from assistant_core.providers.grok_client import GrokClient
from assistant_core.providers.local_client import LocalRuleProvider
from assistant_core.providers.openai_client import OpenAIClient
from assistant_core.providers.registry import LOCAL_PROVIDER_NAME, ProviderRegistry

ProviderName = Literal["openai", "anthropic", "gemini", "grok", "local"]

_REMOTE_FACTORIES = {
    "openai": OpenAIClient,
    "anthropic": AnthropicClient,
    "gemini": GeminiClient,
    "grok": GrokClient,
}


def create_provider(name: str, api_key: Optional[str] = None, cfg=None) -> ModelProvider:
    """根据名称创建 Provider 实例，名称不区分大小写。"""

    provider_name = name.strip().lower()
    if provider_name == LOCAL_PROVIDER_NAME:
        return LocalRuleProvider()
    try:
        factory = _REMOTE_FACTORIES[provider_name]
    except KeyError:
        raise KeyError(f"Unknown provider: {name!r}") from None
    return factory(cfg or settings, api_key=api_key)


def build_registry(
    cfg=None,
    api_keys: Optional[Dict[str, str]] = None,
    order: Optional[Sequence[str]] = None,
    local_fallback: Optional[bool] = None,
) -> ProviderRegistry:
    """按配置顺序构建 ProviderRegistry：远程 Provider 在前，本地规则在最后。

    api_keys 中的值作为对应 Provider 的显式凭证，覆盖 settings 中的值。
    """

    cfg = cfg or settings
    api_keys = {k.lower(): v for k, v in (api_keys or {}).items()}
    names = list(order if order is not None else getattr(cfg, "provider_order", _REMOTE_FACTORIES))
    providers = []
    seen = set()
    for raw in names:
        n = raw.strip().lower()
        if n == LOCAL_PROVIDER_NAME or n in seen:
            continue
        seen.add(n)
        providers.append(create_provider(n, api_key=api_keys.get(n), cfg=cfg))
    use_local = local_fallback if local_fallback is not None else getattr(cfg, "local_fallback", True)
    if use_local:
        providers.append(LocalRuleProvider())
    return ProviderRegistry(providers)


__all__ = ["ProviderName", "ProviderRegistry", "create_provider", "build_registry"]
