"""本地规则 Provider。

没有配置任何 API Key 时的兜底实现：按关键词匹配返回固定模板，
模板中嵌入上下文里的实时指标。纯函数、恒可用、不会抛错。

关键词按以下顺序检查，先命中者生效：
cpu/processor → memory/ram → system/status → hello/hi → help/"what can you do"
→ intel/architecture → model/ai → 通用回复。
"""

from assistant_core.domain.models import MessageContext
from assistant_core.providers.registry import LOCAL_PROVIDER_NAME

CPU_WARNING_THRESHOLD = 70.0
MEMORY_WARNING_THRESHOLD = 80.0


def _pct(value: float) -> str:
    return f"{value:.1f}%"


def cpu_reply(cpu: float) -> str:
    if cpu > CPU_WARNING_THRESHOLD:
        verdict = "That's quite high - you might want to check which applications are consuming resources."
    else:
        verdict = "That's a healthy usage level."
    return f"Your CPU is currently at {_pct(cpu)} usage. {verdict}"


def memory_reply(memory: float) -> str:
    if memory > MEMORY_WARNING_THRESHOLD:
        verdict = "You're running low on available memory. Consider closing some applications."
    else:
        verdict = "Your memory usage is in good shape."
    return f"Your memory usage is at {_pct(memory)}. {verdict}"


def status_reply(cpu: float, memory: float) -> str:
    return (
        "Here's your current system status:\n"
        f"• CPU Usage: {_pct(cpu)}\n"
        f"• Memory Usage: {_pct(memory)}\n"
        "• Architecture: Intel x86_64 (Intel Mac compatible)\n"
        "• Status: System running normally"
    )


GREETING = "Hello! I'm here to assist you with your Intel Mac. What would you like to know?"

CAPABILITIES = (
    "I can help you with:\n"
    "• Real-time system monitoring (CPU, Memory)\n"
    "• Intel Mac architecture information\n"
    "• Context-aware assistance based on your system state\n"
    "• General questions and information\n"
    "\n"
    "Just ask me anything, and I'll provide intelligent, data-driven responses!"
)

ARCHITECTURE_BLURB = (
    "This application is optimized for Intel Mac (x86_64 architecture). It's designed to run "
    "efficiently on Intel-based macOS systems with full compatibility and performance optimization."
)

MODEL_HINT = (
    "I'm currently using the local AI model. To use advanced AI models like OpenAI GPT, "
    "Anthropic Claude, Google Gemini or xAI Grok, set up an API key via the environment "
    "variables OPENAI_API_KEY, ANTHROPIC_API_KEY, GEMINI_API_KEY or XAI_API_KEY."
)


def generic_reply(prompt: str, cpu: float, memory: float) -> str:
    return (
        f"I understand you're asking about '{prompt}'. As an AI assistant with real-time context "
        f"awareness, I'm constantly monitoring your system (CPU: {_pct(cpu)}, Memory: {_pct(memory)}) "
        "to provide the most relevant assistance. Could you provide more details about what you'd like to know?"
    )


def local_reply(prompt: str, context: MessageContext) -> str:
    text = prompt.lower()
    state = context.system_state
    cpu = state.cpu_usage if state is not None else 0.0
    memory = state.memory_usage if state is not None else 0.0

    if "cpu" in text or "processor" in text:
        return cpu_reply(cpu)
    if "memory" in text or "ram" in text:
        return memory_reply(memory)
    if "system" in text or "status" in text:
        return status_reply(cpu, memory)
    if "hello" in text or "hi" in text:
        return GREETING
    if "help" in text or "what can you do" in text:
        return CAPABILITIES
    if "intel" in text or "architecture" in text:
        return ARCHITECTURE_BLURB
    if "model" in text or "ai" in text:
        return MODEL_HINT
    return generic_reply(prompt, cpu, memory)


class LocalRuleProvider:
    """恒可用的本地规则 Provider。"""

    name = LOCAL_PROVIDER_NAME
    display_name = "Local AI"

    @property
    def is_available(self) -> bool:
        return True

    async def generate(self, prompt: str, context: MessageContext) -> str:
        return local_reply(prompt, context)
