"""Provider 与模型配置，以及运行期的有序 Provider 列表。

静态部分（ProviderConfig）集中记录每个厂商的端点、默认模型与凭证环境变量，
上层通过 settings 覆盖模型名或端点即可切换，无需改动客户端代码。

运行期部分（ProviderRegistry）保存构造时固定顺序的 Provider 列表：
远程 Provider 在前，本地规则 Provider 在最后。唯一可变的状态是
"当前 Provider"，只在某个 Provider 成功返回时更新。"""

import threading
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence

from assistant_core.providers.base import ModelProvider


@dataclass
class ModelConfig:
    """单个模型的配置。"""

    provider_model: str
    max_tokens: int = 500
    default_temperature: float = 0.7


@dataclass
class ProviderConfig:
    """某个 Provider 的整体配置。"""

    name: str
    display_name: str
    base_url: str
    env_var: str
    model: ModelConfig


OPENAI_CONFIG = ProviderConfig(
    name="openai",
    display_name="OpenAI GPT",
    base_url="https://api.openai.com/v1/chat/completions",
    env_var="OPENAI_API_KEY",
    model=ModelConfig(provider_model="gpt-4o-mini"),
)

ANTHROPIC_CONFIG = ProviderConfig(
    name="anthropic",
    display_name="Anthropic Claude",
    base_url="https://api.anthropic.com/v1/messages",
    env_var="ANTHROPIC_API_KEY",
    model=ModelConfig(provider_model="claude-3-haiku-20240307"),
)

# Gemini 的模型名拼在 URL 路径上：{base_url}/{model}:generateContent
GEMINI_CONFIG = ProviderConfig(
    name="gemini",
    display_name="Google Gemini",
    base_url="https://generativelanguage.googleapis.com/v1beta/models",
    env_var="GEMINI_API_KEY",
    model=ModelConfig(provider_model="gemini-pro"),
)

# xAI 接口与 OpenAI chat/completions 兼容
GROK_CONFIG = ProviderConfig(
    name="grok",
    display_name="xAI Grok",
    base_url="https://api.x.ai/v1/chat/completions",
    env_var="XAI_API_KEY",
    model=ModelConfig(provider_model="grok-beta"),
)


PROVIDER_CONFIGS: Mapping[str, ProviderConfig] = {
    "openai": OPENAI_CONFIG,
    "anthropic": ANTHROPIC_CONFIG,
    "gemini": GEMINI_CONFIG,
    "grok": GROK_CONFIG,
}

LOCAL_PROVIDER_NAME = "local"


def get_provider_config(name: str) -> ProviderConfig:
    """根据名称获取 ProviderConfig，名称不区分大小写。"""

    key = name.lower()
    for k, cfg in PROVIDER_CONFIGS.items():
        if k.lower() == key:
            return cfg
    raise KeyError(f"Unknown provider: {name!r}")


class ProviderRegistry:
    """有序的 Provider 列表，顺序在构造时确定。"""

    def __init__(self, providers: Sequence[ModelProvider]):
        names = [p.name for p in providers]
        if len(set(names)) != len(names):
            raise ValueError(f"Duplicate provider names: {names}")
        self._providers: List[ModelProvider] = list(providers)
        self._by_name: Dict[str, ModelProvider] = {p.name: p for p in self._providers}
        self._lock = threading.Lock()
        available = self.available_providers()
        self._current: Optional[str] = available[0] if available else None

    @property
    def providers(self) -> List[ModelProvider]:
        return list(self._providers)

    def available_providers(self) -> List[str]:
        return [p.name for p in self._providers if p.is_available]

    def get(self, name: str) -> ModelProvider:
        try:
            return self._by_name[name]
        except KeyError:
            raise KeyError(f"Unknown provider: {name!r}") from None

    @property
    def current_provider(self) -> Optional[str]:
        return self._current

    @property
    def current_display_name(self) -> str:
        if self._current is None:
            return "None"
        return self.get(self._current).display_name

    def mark_success(self, name: str) -> bool:
        """记录 name 成功返回；若因此切换了当前 Provider 则返回 True。"""

        self.get(name)
        with self._lock:
            if self._current == name:
                return False
            self._current = name
            return True

    def __iter__(self):
        return iter(list(self._providers))

    def __len__(self) -> int:
        return len(self._providers)
