"""对外 API 服务模块。

提供简化的函数接口供界面层调用，内部维护一个默认的 AssistantService 单例。
"""

import threading
from typing import Any, Dict, Optional

from assistant_core.agents.assistant import AssistantService
from assistant_core.agents.context_builder import ContextBuilder
from assistant_core.agents.pipeline import ResponsePipeline
from assistant_core.config.settings import settings
from assistant_core.domain.exceptions import ValidationError
from assistant_core.infrastructure.logging.logger import logger
from assistant_core.infrastructure.metrics.source import MetricsSource, PsutilMetricsSource, sample_system_state
from assistant_core.infrastructure.storage.json_store import JsonPreferencesStore, Preferences
from assistant_core.infrastructure.storage.memory_store import InMemoryConversationStore
from assistant_core.providers import build_registry
from assistant_core.providers.registry import LOCAL_PROVIDER_NAME, get_provider_config


_lock = threading.Lock()
_metrics: Optional[MetricsSource] = None
_prefs_store: Optional[JsonPreferencesStore] = None
_assistant: Optional[AssistantService] = None


def _build_pipeline(store: JsonPreferencesStore, prefs: Preferences) -> ResponsePipeline:
    api_keys = {}
    if prefs.provider and prefs.provider != LOCAL_PROVIDER_NAME:
        key = store.explicit_key_for(prefs.provider, prefs)
        if key:
            api_keys[prefs.provider] = key
    return ResponsePipeline(build_registry(settings, api_keys=api_keys))


def get_default_assistant() -> AssistantService:
    """获取默认的 AssistantService 实例（单例）。"""
    global _metrics, _prefs_store, _assistant
    with _lock:
        if _metrics is None:
            _metrics = PsutilMetricsSource()
        if _prefs_store is None:
            _prefs_store = JsonPreferencesStore(root=settings.storage_root)
        if _assistant is None:
            _assistant = AssistantService(
                store=InMemoryConversationStore(),
                context_builder=ContextBuilder(_metrics, window=settings.context_window),
                pipeline=_build_pipeline(_prefs_store, _prefs_store.load()),
            )
            logger.info(
                "Assistant initialised",
                extra={"extra": {"providers": _assistant.pipeline.registry.available_providers()}},
            )
    return _assistant


async def send_message(user_input: str) -> Dict[str, Any]:
    """处理一轮对话。

    Returns:
        包含助手消息、实际应答的 Provider 与各次尝试记录的字典

    Raises:
        ValidationError: 输入为空
        AssistantBusyError: 上一轮尚未结束
    """
    assistant = get_default_assistant()
    try:
        reply = await assistant.send_message(user_input)
    except Exception as e:
        logger.error(f"Chat failed: {e}", extra={"extra": {"error": str(e)}})
        raise
    result = assistant.last_result
    return {
        "assistant_message": reply.to_dict(),
        "provider": result.provider if result else None,
        "fell_back": result.fell_back if result else True,
        "current_provider": assistant.current_provider,
        "attempts": [
            {"provider": a.provider, "outcome": a.outcome, "code": a.code}
            for a in (result.attempts if result else [])
        ],
    }


def list_messages() -> list[Dict[str, Any]]:
    """列出当前会话的全部消息（按收发顺序）。"""
    return [m.to_dict() for m in get_default_assistant().messages]


def system_snapshot() -> Dict[str, Any]:
    """界面头部使用的实时指标与当前 Provider。"""
    assistant = get_default_assistant()
    state = sample_system_state(_metrics)
    return {
        "cpu_usage": state.cpu_usage,
        "memory_usage": state.memory_usage,
        "architecture": _metrics.architecture(),
        "current_provider": assistant.current_provider,
        "is_processing": assistant.is_processing,
    }


def load_preferences() -> Preferences:
    get_default_assistant()
    return _prefs_store.load()


def save_preferences(provider: str, api_key: str) -> Dict[str, Any]:
    """保存 Provider 与 API Key，并用新的凭证重建 Provider 列表。

    会话历史保持不变，只替换回退管线。
    """
    name = (provider or "").strip().lower()
    if name and name != LOCAL_PROVIDER_NAME:
        try:
            get_provider_config(name)
        except KeyError:
            raise ValidationError(code="UNKNOWN_PROVIDER", message=f"Unknown provider: {provider!r}") from None
    assistant = get_default_assistant()
    prefs = Preferences(provider=name, api_key=(api_key or "").strip())
    _prefs_store.save(prefs)
    assistant.replace_pipeline(_build_pipeline(_prefs_store, prefs))
    available = assistant.pipeline.registry.available_providers()
    logger.info("Preferences saved", extra={"extra": {"provider": name, "available": available}})
    return {"provider": name, "available_providers": available}


def reset() -> None:
    """丢弃单例（测试或重新加载配置时使用）。"""
    global _metrics, _prefs_store, _assistant
    with _lock:
        _metrics = None
        _prefs_store = None
        _assistant = None
