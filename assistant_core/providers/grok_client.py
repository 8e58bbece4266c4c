"""xAI Grok Provider 适配器（OpenAI 兼容协议）。"""

from assistant_core.providers.openai_client import OpenAICompatibleClient
from assistant_core.providers.registry import GROK_CONFIG


class GrokClient(OpenAICompatibleClient):
    config = GROK_CONFIG
    key_setting = "xai_api_key"
    model_setting = "grok_model"
    base_url_setting = "grok_base_url"
