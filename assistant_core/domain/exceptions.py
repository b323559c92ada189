"""统一业务异常模型。

所有跨模块抛出的业务级错误都应该继承自 BusinessError，
便于在 UI 层做统一捕获与用户提示（例如 "请稍后重试"）。

错误分两大类：
- ConfigurationError: 凭证缺失等配置问题，进程内无法自行恢复。
- ProviderError: 网络或 Provider 侧失败，直接抛给调用方，不做重试。
"""


class BusinessError(Exception):
    """业务异常基类。

    Attributes:
        code: 机器可读错误码（如 "MISSING_API_KEY"）。
        message: 用户可读错误信息。
        http_status: 映射到 HTTP 时可用的状态码，默认 400。
        extra: 其他补充字段（例如 model、operation 等）。
    """

    def __init__(self, code: str, message: str, http_status: int = 400, **extra):
        self.code = code
        self.message = message
        self.http_status = http_status
        self.extra = extra
        super().__init__(message)


class ConfigurationError(BusinessError):
    """必需配置缺失（如 GEMINI_API_KEY 未设置）。"""


class ProviderError(BusinessError):
    """Provider 调用失败的基类，上层只需捕获这一种即可。"""


class NetworkError(ProviderError):
    """网络层错误，例如连接失败、超时等。"""


class ApiError(ProviderError):
    """第三方 API 返回非 2xx/429 错误，或响应体无法解析时抛出。"""


class RateLimitError(ProviderError):
    """Provider 限流错误（HTTP 429）。本层不重试，由调用方决定。"""


class ValidationError(BusinessError):
    """参数或配置校验失败。"""
