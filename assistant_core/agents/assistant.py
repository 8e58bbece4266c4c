"""助手服务：串起一次完整的对话轮次。

一轮的顺序固定：
1. 用户消息追加到 ConversationStore。
2. ContextBuilder 基于会话历史与实时指标生成上下文。
3. ResponsePipeline 依次尝试各 Provider 得到回复文本。
4. 附带上下文的助手消息追加到 ConversationStore。

一轮结束前 is_processing 为 True，期间再次提交会抛出 AssistantBusyError。
"""

import logging
import threading
import time
from typing import List, Optional
from uuid import uuid4

from assistant_core.agents.context_builder import ContextBuilder
from assistant_core.agents.pipeline import PipelineResult, ResponsePipeline
from assistant_core.domain.conversation import ConversationStore
from assistant_core.domain.exceptions import AssistantBusyError, ValidationError
from assistant_core.domain.models import Message
from assistant_core.infrastructure.logging.logger import logger

WELCOME_MESSAGE = (
    "Hello! I'm Pownin Assistant, your intelligent desktop companion. I can help you with system "
    "information, answer questions, and provide context-aware assistance. How can I help you today?"
)


class AssistantService:
    def __init__(
        self,
        store: ConversationStore,
        context_builder: ContextBuilder,
        pipeline: ResponsePipeline,
        welcome: Optional[str] = WELCOME_MESSAGE,
    ):
        self._store = store
        self._context_builder = context_builder
        self._pipeline = pipeline
        self._turn_lock = threading.Lock()
        self.last_result: Optional[PipelineResult] = None
        # 欢迎语只用于展示，不进入 ContextBuilder 读取的会话历史
        self._welcome: Optional[Message] = Message(content=welcome, is_user=False) if welcome else None

    @property
    def is_processing(self) -> bool:
        return self._turn_lock.locked()

    @property
    def messages(self) -> List[Message]:
        """展示用的完整消息列表（欢迎语在最前）。"""

        history = self._store.list_messages()
        return [self._welcome] + history if self._welcome else history

    @property
    def pipeline(self) -> ResponsePipeline:
        return self._pipeline

    @property
    def current_provider(self) -> str:
        """当前 Provider 的展示名。"""

        return self._pipeline.registry.current_display_name

    def replace_pipeline(self, pipeline: ResponsePipeline) -> None:
        """替换回退管线（例如保存了新的 API Key），会话历史不变。"""

        self._pipeline = pipeline

    async def send_message(self, user_input: str) -> Message:
        """处理一轮对话，返回本轮的助手消息。"""

        text = (user_input or "").strip()
        if not text:
            raise ValidationError(code="EMPTY_INPUT", message="message is empty")
        if not self._turn_lock.acquire(blocking=False):
            raise AssistantBusyError(code="ASSISTANT_BUSY", message="a previous message is still being processed")

        start_time = time.time()
        log_ctx = {"trace_id": f"tr-{uuid4().hex}"}
        try:
            user_msg = Message(content=text, is_user=True)
            self._store.append(user_msg)

            context = self._context_builder.build_context(self._store.list_messages())
            result = await self._pipeline.run(text, context)
            self.last_result = result

            reply = Message(content=result.text, is_user=False, context=context)
            self._store.append(reply)
        finally:
            self._turn_lock.release()

        elapsed = time.time() - start_time
        self._log(
            logging.INFO,
            "Completed assistant turn",
            log_ctx,
            provider=result.provider,
            attempts=len(result.attempts),
            elapsed_seconds=round(elapsed, 2),
            user_message_id=user_msg.id,
            assistant_message_id=reply.id,
        )
        return reply

    def _log(self, level: int, message: str, ctx: dict, **fields) -> None:
        payload = dict(ctx)
        payload.update(fields)
        logger.log(level, message, extra={"extra": payload})
