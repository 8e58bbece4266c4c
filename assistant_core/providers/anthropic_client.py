"""Anthropic Claude Provider 适配器。

Messages 端点与 OpenAI 协议的差异：
- 认证使用 x-api-key 头，并且必须携带 anthropic-version。
- system 提示词是顶层字段，而不是一条 system 消息。
- 文本位于 content[0].text。
"""

from typing import Any, Dict, Optional

from assistant_core.config.settings import settings
from assistant_core.domain.exceptions import InvalidCredentialError
from assistant_core.domain.models import MessageContext
from assistant_core.prompts import build_system_prompt
from assistant_core.providers.http import extract_text, post_json
from assistant_core.providers.registry import ANTHROPIC_CONFIG

ANTHROPIC_VERSION = "2023-06-01"


class AnthropicClient:
    """Anthropic 客户端实现。"""

    name = ANTHROPIC_CONFIG.name
    display_name = ANTHROPIC_CONFIG.display_name

    def __init__(self, cfg=settings, api_key: Optional[str] = None, model: Optional[str] = None):
        self._settings = cfg
        resolved = api_key if api_key is not None else getattr(cfg, "anthropic_api_key", None)
        self._api_key = (resolved or "").strip()
        self._model = model or getattr(cfg, "anthropic_model", None) or ANTHROPIC_CONFIG.model.provider_model
        self._url = getattr(cfg, "anthropic_base_url", None) or ANTHROPIC_CONFIG.base_url

    @property
    def is_available(self) -> bool:
        return bool(self._api_key)

    async def generate(self, prompt: str, context: MessageContext) -> str:
        if not self._api_key:
            raise InvalidCredentialError(code="MISSING_API_KEY", message="ANTHROPIC_API_KEY not set", provider=self.name)
        data = await post_json(
            self.name,
            self._url,
            payload=self._build_payload(prompt, context),
            headers={
                "x-api-key": self._api_key,
                "anthropic-version": ANTHROPIC_VERSION,
                "Content-Type": "application/json",
            },
            timeout=getattr(self._settings, "http_timeout", 30.0),
        )
        return extract_text(self.name, data, ("content", 0, "text"))

    def _build_payload(self, prompt: str, context: MessageContext) -> Dict[str, Any]:
        return {
            "model": self._model,
            "max_tokens": getattr(self._settings, "max_tokens", None) or ANTHROPIC_CONFIG.model.max_tokens,
            "temperature": getattr(self._settings, "temperature", ANTHROPIC_CONFIG.model.default_temperature),
            "system": build_system_prompt(context),
            "messages": [{"role": "user", "content": prompt}],
        }
