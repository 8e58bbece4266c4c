"""会话上下文构建。

根据最近几轮对话和一次实时指标采样生成 MessageContext：

- topics: 最近 N 条消息命中的话题桶（按固定桶顺序、去重、以 ", " 连接）。
- message_count: 会话总消息数。
- timestamp: 构建时间（ISO-8601 UTC）。
- last_user_query / user_intent: 最近一条用户消息及其意图（仅当存在用户消息）。
"""

from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from assistant_core.domain.models import Message, MessageContext
from assistant_core.infrastructure.metrics.source import MetricsSource, sample_system_state

DEFAULT_CONTEXT_WINDOW = 5

# (话题标签, 关键词)，顺序即输出顺序
TOPIC_BUCKETS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("system_performance", ("cpu", "processor")),
    ("memory_usage", ("memory", "ram")),
    ("architecture", ("intel", "architecture")),
    ("assistance", ("help", "assist")),
)

# 意图判定按顺序取第一个命中项
INTENT_RULES: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("question", ("?",)),
    ("assistance_request", ("help", "how")),
    ("information_request", ("show", "tell", "what")),
    ("acknowledgment", ("thank",)),
)

STOP_WORDS = frozenset({
    "this", "that", "with", "from", "have", "been", "what", "when",
    "where", "which", "their", "about", "would", "could", "should",
})


def _timestamp(now: datetime) -> str:
    return now.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def detect_topics(messages: Sequence[Message]) -> List[str]:
    texts = [m.content.lower() for m in messages]
    topics: List[str] = []
    for tag, keywords in TOPIC_BUCKETS:
        if any(kw in text for text in texts for kw in keywords):
            topics.append(tag)
    return topics


def determine_intent(query: str) -> str:
    lowered = query.lower()
    for intent, keywords in INTENT_RULES:
        if any(kw in lowered for kw in keywords):
            return intent
    return "general"


def extract_keywords(text: str) -> List[str]:
    """提取关键词：长度大于 3 且不在停用词表中的小写单词。"""

    words = [w for w in text.lower().split() if len(w) > 3]
    return [w for w in words if w not in STOP_WORDS]


class ContextBuilder:
    """从会话历史与 MetricsSource 构建 MessageContext，不会失败。"""

    def __init__(
        self,
        metrics: MetricsSource,
        window: int = DEFAULT_CONTEXT_WINDOW,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._metrics = metrics
        self._window = max(1, window)
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    @property
    def window(self) -> int:
        return self._window

    def build_context(self, history: Sequence[Message]) -> MessageContext:
        # 每次调用都重新采样，不缓存
        state = sample_system_state(self._metrics)

        recent = list(history)[-self._window:]
        data: Dict[str, str] = {
            "topics": ", ".join(detect_topics(recent)),
            "message_count": str(len(history)),
            "timestamp": _timestamp(self._clock()),
        }

        last_user = next((m for m in reversed(history) if m.is_user), None)
        if last_user is not None:
            data["last_user_query"] = last_user.content
            data["user_intent"] = determine_intent(last_user.content)

        return MessageContext(system_state=state, relevant_data=data)
