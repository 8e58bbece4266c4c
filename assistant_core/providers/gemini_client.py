"""Google Gemini Provider 适配器。

generateContent 端点没有独立的 system 字段，这里把人设、上下文与用户
问题拼成一段完整文本放进 contents[0].parts[0].text；API Key 通过 query
参数 key 传递。文本位于 candidates[0].content.parts[0].text。
"""

from typing import Any, Dict, Optional

from assistant_core.config.settings import settings
from assistant_core.domain.exceptions import InvalidCredentialError
from assistant_core.domain.models import MessageContext
from assistant_core.prompts import build_system_prompt
from assistant_core.providers.http import extract_text, post_json
from assistant_core.providers.registry import GEMINI_CONFIG


class GeminiClient:
    """Gemini 客户端实现。"""

    name = GEMINI_CONFIG.name
    display_name = GEMINI_CONFIG.display_name

    def __init__(self, cfg=settings, api_key: Optional[str] = None, model: Optional[str] = None):
        self._settings = cfg
        resolved = api_key if api_key is not None else getattr(cfg, "gemini_api_key", None)
        self._api_key = (resolved or "").strip()
        self._model = model or getattr(cfg, "gemini_model", None) or GEMINI_CONFIG.model.provider_model
        self._base = (getattr(cfg, "gemini_base_url", None) or GEMINI_CONFIG.base_url).rstrip("/")

    @property
    def is_available(self) -> bool:
        return bool(self._api_key)

    async def generate(self, prompt: str, context: MessageContext) -> str:
        if not self._api_key:
            raise InvalidCredentialError(code="MISSING_API_KEY", message="GEMINI_API_KEY not set", provider=self.name)
        data = await post_json(
            self.name,
            f"{self._base}/{self._model}:generateContent",
            payload=self._build_payload(prompt, context),
            headers={"Content-Type": "application/json"},
            params={"key": self._api_key},
            timeout=getattr(self._settings, "http_timeout", 30.0),
        )
        return extract_text(self.name, data, ("candidates", 0, "content", "parts", 0, "text"))

    def _build_payload(self, prompt: str, context: MessageContext) -> Dict[str, Any]:
        full_prompt = f"{build_system_prompt(context)}\n\nUser: {prompt}\n\nAssistant:"
        return {
            "contents": [{"parts": [{"text": full_prompt}]}],
            "generationConfig": {
                "maxOutputTokens": getattr(self._settings, "max_tokens", None) or GEMINI_CONFIG.model.max_tokens,
                "temperature": getattr(self._settings, "temperature", GEMINI_CONFIG.model.default_temperature),
            },
        }
