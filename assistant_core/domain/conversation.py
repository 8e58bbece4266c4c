from typing import List, Optional, Protocol

from .models import Message


class ConversationStore(Protocol):
    """会话消息存储：只追加，顺序即收发顺序。"""

    def append(self, message: Message) -> None:
        ...

    def list_messages(self) -> List[Message]:
        ...

    def recent(self, limit: int) -> List[Message]:
        ...

    def last_user_message(self) -> Optional[Message]:
        ...

    def __len__(self) -> int:
        ...
