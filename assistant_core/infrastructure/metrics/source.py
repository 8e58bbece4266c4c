"""系统指标来源。

ContextBuilder 只依赖 MetricsSource 协议，通过构造函数注入，
不使用进程级单例。默认实现基于 psutil；采样失败时返回 0.0，不向上抛错。
"""

from __future__ import annotations

import platform
from typing import Protocol

import psutil

from assistant_core.domain.models import SystemState, clamp_percent
from assistant_core.infrastructure.logging.logger import logger


class MetricsSource(Protocol):
    def sample_cpu_percent(self) -> float:
        ...

    def sample_memory_percent(self) -> float:
        ...

    def architecture(self) -> str:
        ...


def sample_system_state(source: MetricsSource) -> SystemState:
    """从 source 各采样一次，组装为 SystemState。"""

    return SystemState(
        cpu_usage=source.sample_cpu_percent(),
        memory_usage=source.sample_memory_percent(),
    )


class PsutilMetricsSource:
    """基于 psutil 的跨平台实现。"""

    def __init__(self) -> None:
        # 第一次 cpu_percent(interval=None) 固定返回 0.0，先预热一次
        self.sample_cpu_percent()

    def sample_cpu_percent(self) -> float:
        # interval=None 为非阻塞，返回距上次调用以来的平均占用
        try:
            return clamp_percent(psutil.cpu_percent(interval=None))
        except (psutil.Error, OSError) as exc:
            logger.warning("metrics.cpu_sample_failed", extra={"extra": {"error": str(exc)}})
            return 0.0

    def sample_memory_percent(self) -> float:
        try:
            return clamp_percent(psutil.virtual_memory().percent)
        except (psutil.Error, OSError) as exc:
            logger.warning("metrics.memory_sample_failed", extra={"extra": {"error": str(exc)}})
            return 0.0

    @staticmethod
    def architecture() -> str:
        return platform.machine() or "unknown"


class StaticMetricsSource:
    """返回固定读数，用于测试或无界面环境。"""

    def __init__(self, cpu: float = 0.0, memory: float = 0.0):
        self.cpu = cpu
        self.memory = memory
        self.samples = 0

    def sample_cpu_percent(self) -> float:
        self.samples += 1
        return clamp_percent(self.cpu)

    def sample_memory_percent(self) -> float:
        return clamp_percent(self.memory)

    @staticmethod
    def architecture() -> str:
        return "static"
