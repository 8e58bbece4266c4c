"""Provider 抽象接口。

回退管线不直接依赖具体厂商的 HTTP 细节，而是依赖此协议：

- 每个厂商实现一个 ModelProvider（如 OpenAIClient、LocalRuleProvider）。
- name: 稳定的标识（"openai"、"local" 等），用于日志与当前 Provider 记录。
- display_name: 展示给界面的名称。
- is_available: 构造时是否解析到了非空凭证；本地 Provider 恒为 True。
- generate: 一次异步调用，失败时抛出 ProviderError 的子类。
"""

from typing import Protocol

from assistant_core.domain.models import MessageContext


class ModelProvider(Protocol):
    name: str
    display_name: str

    @property
    def is_available(self) -> bool:
        ...

    async def generate(self, prompt: str, context: MessageContext) -> str:
        ...
