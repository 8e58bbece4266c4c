"""OpenAI Provider 适配器。

chat/completions 端点：
- URL: https://api.openai.com/v1/chat/completions
- 认证: Authorization: Bearer <api_key>
- 请求: model / messages[system, user] / max_tokens / temperature
- 响应: choices[0].message.content

xAI Grok 使用同一协议，见 grok_client。
"""

from typing import Any, Dict, Optional

from assistant_core.config.settings import settings
from assistant_core.domain.exceptions import InvalidCredentialError
from assistant_core.domain.models import MessageContext
from assistant_core.prompts import build_system_prompt
from assistant_core.providers.http import extract_text, post_json
from assistant_core.providers.registry import OPENAI_CONFIG, ProviderConfig


class OpenAICompatibleClient:
    """OpenAI chat/completions 协议的通用实现。"""

    config: ProviderConfig = OPENAI_CONFIG
    key_setting = "openai_api_key"
    model_setting = "openai_model"
    base_url_setting = "openai_base_url"

    def __init__(self, cfg=settings, api_key: Optional[str] = None, model: Optional[str] = None):
        self._settings = cfg
        # 显式传入的 Key 优先（包括空串），否则取 settings（环境变量 / .env / config.yaml）
        resolved = api_key if api_key is not None else getattr(cfg, self.key_setting, None)
        self._api_key = (resolved or "").strip()
        self._model = model or getattr(cfg, self.model_setting, None) or self.config.model.provider_model
        self._url = getattr(cfg, self.base_url_setting, None) or self.config.base_url

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def display_name(self) -> str:
        return self.config.display_name

    @property
    def model(self) -> str:
        return self._model

    @property
    def is_available(self) -> bool:
        return bool(self._api_key)

    async def generate(self, prompt: str, context: MessageContext) -> str:
        if not self._api_key:
            raise InvalidCredentialError(
                code="MISSING_API_KEY", message=f"{self.config.env_var} not set", provider=self.name
            )
        data = await post_json(
            self.name,
            self._url,
            payload=self._build_payload(prompt, context),
            headers={
                "Authorization": f"Bearer {self._api_key}",
                "Content-Type": "application/json",
            },
            timeout=getattr(self._settings, "http_timeout", 30.0),
        )
        return extract_text(self.name, data, ("choices", 0, "message", "content"))

    def _build_payload(self, prompt: str, context: MessageContext) -> Dict[str, Any]:
        return {
            "model": self._model,
            "messages": [
                {"role": "system", "content": build_system_prompt(context)},
                {"role": "user", "content": prompt},
            ],
            "max_tokens": getattr(self._settings, "max_tokens", None) or self.config.model.max_tokens,
            "temperature": getattr(self._settings, "temperature", self.config.model.default_temperature),
        }


class OpenAIClient(OpenAICompatibleClient):
    """OpenAI GPT 客户端。"""
