"""多 Provider 回退管线。

按 ProviderRegistry 的顺序依次尝试：跳过不可用的 Provider，逐个 await
generate；成功则记录为当前 Provider 并返回去除首尾空白的文本，失败则记录
原因并继续下一个。所有 Provider 都被跳过或失败时返回固定的致歉文本。

尝试之间严格串行，不做并发竞速，也不做重试/退避。
"""

import logging
import time
from dataclasses import dataclass, field
from typing import List, Optional

from assistant_core.domain.exceptions import ProviderError
from assistant_core.domain.models import MessageContext
from assistant_core.infrastructure.logging.logger import logger
from assistant_core.providers.registry import ProviderRegistry

APOLOGY_MESSAGE = (
    "I'm sorry, but I'm unable to respond right now. None of the configured AI providers "
    "produced a reply. Please review your provider configuration and API keys, then try again."
)


@dataclass
class AttemptRecord:
    """单次 Provider 尝试的结果，用于日志与界面诊断。"""

    provider: str
    outcome: str  # "skipped" / "failed" / "ok"
    code: Optional[str] = None
    error: Optional[str] = None
    elapsed_seconds: float = 0.0


@dataclass
class PipelineResult:
    text: str
    provider: Optional[str]
    attempts: List[AttemptRecord] = field(default_factory=list)

    @property
    def fell_back(self) -> bool:
        return self.provider is None


class ResponsePipeline:
    def __init__(self, registry: ProviderRegistry, apology: str = APOLOGY_MESSAGE):
        self._registry = registry
        self._apology = apology

    @property
    def registry(self) -> ProviderRegistry:
        return self._registry

    async def respond(self, user_input: str, context: MessageContext) -> str:
        result = await self.run(user_input, context)
        return result.text

    async def run(self, user_input: str, context: MessageContext) -> PipelineResult:
        attempts: List[AttemptRecord] = []
        for provider in self._registry:
            if not provider.is_available:
                attempts.append(AttemptRecord(provider=provider.name, outcome="skipped"))
                continue

            start = time.monotonic()
            try:
                text = await provider.generate(user_input, context)
            except ProviderError as exc:
                elapsed = time.monotonic() - start
                attempts.append(
                    AttemptRecord(provider.name, "failed", exc.code, exc.message, round(elapsed, 3))
                )
                self._log(logging.WARNING, "provider.failed", provider=provider.name, code=exc.code, error=exc.message)
                continue
            except Exception as exc:
                elapsed = time.monotonic() - start
                attempts.append(
                    AttemptRecord(provider.name, "failed", "UNEXPECTED_ERROR", str(exc), round(elapsed, 3))
                )
                logger.exception(
                    "provider.unexpected_error",
                    extra={"extra": {"provider": provider.name, "error": str(exc)}},
                )
                continue

            text = (text or "").strip()
            elapsed = time.monotonic() - start
            if not text:
                attempts.append(AttemptRecord(provider.name, "failed", "EMPTY_RESPONSE", None, round(elapsed, 3)))
                self._log(logging.WARNING, "provider.empty_response", provider=provider.name)
                continue

            attempts.append(AttemptRecord(provider.name, "ok", elapsed_seconds=round(elapsed, 3)))
            previous = self._registry.current_provider
            if self._registry.mark_success(provider.name):
                self._log(logging.INFO, "provider.switched", previous=previous, current=provider.name)
            return PipelineResult(text=text, provider=provider.name, attempts=attempts)

        self._log(
            logging.ERROR,
            "pipeline.exhausted",
            attempted=[a.provider for a in attempts if a.outcome != "skipped"],
        )
        return PipelineResult(text=self._apology, provider=None, attempts=attempts)

    @staticmethod
    def _log(level: int, message: str, **fields) -> None:
        logger.log(level, message, extra={"extra": fields})
