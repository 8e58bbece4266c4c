"""Assistant Core 顶层包。

该包提供桌面聊天助手的核心实现，包括配置加载、领域模型、
系统指标采样、会话上下文构建、多 Provider 回退管线与偏好设置存储。
"""

from assistant_core.agents.assistant import AssistantService
from assistant_core.agents.context_builder import ContextBuilder
from assistant_core.agents.pipeline import ResponsePipeline

__all__ = ["AssistantService", "ContextBuilder", "ResponsePipeline"]
