"""统一的对话数据模型。

本模块定义了助手内部在各组件之间共享的标准数据结构：

- SystemState: 一次系统指标采样（CPU / 内存占用百分比）。
- MessageContext: 生成回复时附带的上下文快照。
- Message: 会话中的一条消息（用户或助手）。

所有 Provider 适配器都只依赖这些模型，并负责在各自的 API JSON
和这些模型之间做转换。
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from uuid import uuid4


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def clamp_percent(value: float) -> float:
    """把百分比限制在 [0, 100]，无法解析的值视为 0。"""

    try:
        v = float(value)
    except (TypeError, ValueError):
        return 0.0
    if v != v:  # NaN
        return 0.0
    return min(max(v, 0.0), 100.0)


@dataclass(frozen=True)
class SystemState:
    """一次时间点采样，创建后不可变。cpu/memory 始终被钳制到 [0, 100]。"""

    cpu_usage: float
    memory_usage: float
    timestamp: datetime = field(default_factory=_utcnow)

    def __post_init__(self) -> None:
        object.__setattr__(self, "cpu_usage", clamp_percent(self.cpu_usage))
        object.__setattr__(self, "memory_usage", clamp_percent(self.memory_usage))


@dataclass(frozen=True)
class MessageContext:
    """助手回复时的上下文。

    - system_state: 生成回复时的系统指标。
    - relevant_data: 由 ContextBuilder 提取的会话信息（topics、user_intent 等），
      键和值都是字符串。
    """

    system_state: Optional[SystemState] = None
    relevant_data: Optional[Dict[str, str]] = None


@dataclass(frozen=True)
class Message:
    """会话中的一条消息，创建后不可修改。"""

    content: str
    is_user: bool
    id: str = field(default_factory=lambda: f"m-{uuid4().hex}")
    timestamp: datetime = field(default_factory=_utcnow)
    context: Optional[MessageContext] = None

    @property
    def role(self) -> str:
        return "user" if self.is_user else "assistant"

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "id": self.id,
            "role": self.role,
            "content": self.content,
            "timestamp": self.timestamp.astimezone(timezone.utc).isoformat().replace("+00:00", "Z"),
        }
        if self.context is not None:
            state = self.context.system_state
            payload["context"] = {
                "system_state": None if state is None else {
                    "cpu_usage": state.cpu_usage,
                    "memory_usage": state.memory_usage,
                },
                "relevant_data": dict(self.context.relevant_data or {}),
            }
        return payload
