"""系统提示词加载与拼装。

人设文本按语言(locale) 从 prompts/<locale> 目录读取；build_system_prompt
在人设之后追加当前系统指标与会话上下文，供各远程 Provider 作为
system / preamble 使用。
"""

from functools import lru_cache
from pathlib import Path

from assistant_core.domain.models import MessageContext


PROMPTS_DIR = Path(__file__).resolve().parent

STYLE_GUIDE = (
    "Provide helpful, concise responses. "
    "When discussing system metrics, use the current values provided."
)


@lru_cache(maxsize=None)
def load_system_prompt(locale: str = "en") -> str:
    """读取人设文本。"""

    fname = PROMPTS_DIR / locale / "assistant_system.md"
    return fname.read_text(encoding="utf-8").strip()


def format_relevant_data(data: dict) -> str:
    return "; ".join(f"{k}={v}" for k, v in data.items())


def build_system_prompt(context: MessageContext, locale: str = "en") -> str:
    """人设 + 系统指标（若有）+ 会话上下文（若非空）+ 回复风格要求。"""

    parts = [load_system_prompt(locale)]
    state = context.system_state
    if state is not None:
        parts.append(
            "Current system state:\n"
            f"- CPU Usage: {state.cpu_usage:.1f}%\n"
            f"- Memory Usage: {state.memory_usage:.1f}%"
        )
    if context.relevant_data:
        parts.append(f"Conversation context: {format_relevant_data(context.relevant_data)}")
    parts.append(STYLE_GUIDE)
    return "\n\n".join(parts)
