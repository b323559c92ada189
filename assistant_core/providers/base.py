"""Provider 抽象接口。

AI Gateway 不直接依赖具体厂商的 HTTP 细节，而是依赖此协议：

- 每个厂商实现一个 ProviderClient（如 GeminiClient）。
- 负责：将 GenerateContentRequest 转成具体 API 请求，并返回响应 JSON。

响应解析交给 normalizer，这样测试里可以用任意假的 client 替换。
"""

from typing import Any, Dict, Protocol

from assistant_core.domain.models import GenerateContentRequest


class ProviderClient(Protocol):
    """LLM Provider 客户端协议。

    实现者需要提供：
    - name: Provider 名称，用于日志/统计。
    - generate_content(req): 发出一次请求，返回原始响应 JSON。
    - aclose(): 释放底层连接。
    """

    name: str

    async def generate_content(self, req: GenerateContentRequest) -> Dict[str, Any]:
        ...

    async def aclose(self) -> None:
        ...
