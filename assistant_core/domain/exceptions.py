"""统一业务异常模型。

所有跨模块抛出的业务级错误都应该继承自 BusinessError，
便于在服务层或 UI 层做统一捕获与用户提示。

Provider 相关的错误统一继承 ProviderError：它们只在单个 Provider
内部产生，回退管线捕获后切换到下一个 Provider，不会抛给用户。
"""


class BusinessError(Exception):
    """业务异常基类。

    Attributes:
        code: 机器可读错误码（如 "STORE_READ_ERROR"）。
        message: 用户可读错误信息。
        http_status: 映射到 HTTP 时可用的状态码，默认 400。
        extra: 其他补充字段（例如 provider 等）。
    """

    def __init__(self, code: str, message: str, http_status: int = 400, **extra):
        self.code = code
        self.message = message
        self.http_status = http_status
        self.extra = extra
        super().__init__(message)


class ValidationError(BusinessError):
    """参数或配置校验失败。"""


class AssistantBusyError(BusinessError):
    """上一轮对话尚未完成时再次提交。"""


class ProviderError(BusinessError):
    """Provider 调用失败的基类，extra["provider"] 记录来源。"""

    @property
    def provider(self) -> str:
        return self.extra.get("provider", "")


class InvalidCredentialError(ProviderError):
    """API Key 缺失或被服务端拒绝（401/403）。"""


class NetworkError(ProviderError):
    """网络层错误，或服务端返回了其他非 2xx 状态。"""


class InvalidResponseError(ProviderError):
    """响应不是 JSON，或缺少预期的文本字段。"""


class ProviderUnavailableError(ProviderError):
    """模型不存在或服务暂不可用（404/503）。"""


class RateLimitError(ProviderError):
    """Provider 限流（429）。"""


class ProviderTimeoutError(ProviderError):
    """请求超时。"""
