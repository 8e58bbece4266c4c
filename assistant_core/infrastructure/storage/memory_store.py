import threading
from typing import List, Optional

from assistant_core.domain.conversation import ConversationStore
from assistant_core.domain.exceptions import BusinessError
from assistant_core.domain.models import Message


class InMemoryConversationStore(ConversationStore):
    """进程内的只追加消息列表，生命周期等于一次会话。"""

    def __init__(self, messages: Optional[List[Message]] = None):
        self._messages: List[Message] = list(messages or [])
        self._ids = {m.id for m in self._messages}
        self._lock = threading.Lock()

    def append(self, message: Message) -> None:
        with self._lock:
            if message.id in self._ids:
                raise BusinessError(code="DUPLICATE_MESSAGE", message=message.id)
            self._messages.append(message)
            self._ids.add(message.id)

    def list_messages(self) -> List[Message]:
        with self._lock:
            return list(self._messages)

    def recent(self, limit: int) -> List[Message]:
        if limit <= 0:
            return []
        with self._lock:
            return self._messages[-limit:]

    def last_user_message(self) -> Optional[Message]:
        with self._lock:
            for message in reversed(self._messages):
                if message.is_user:
                    return message
        return None

    def __len__(self) -> int:
        with self._lock:
            return len(self._messages)
