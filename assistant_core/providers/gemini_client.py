"""Gemini Provider 适配器。

本模块负责：

1. 接收统一的 GenerateContentRequest。
2. 将其转换为 Generative Language REST API 的请求体：
   URL: {base_url}/models/{model}:generateContent
   认证: x-goog-api-key: <api_key>
3. 调用 HTTP 接口并把网络/API 异常映射为 ProviderError 的子类。

整个进程只持有一个 httpx.AsyncClient，由 AI Gateway 负责创建和关闭。
"""

from typing import Any, Dict, Optional

import httpx

from assistant_core.domain.exceptions import ApiError, NetworkError, RateLimitError
from assistant_core.domain.models import GenerateContentRequest
from assistant_core.providers.registry import GEMINI_CONFIG


class GeminiClient:
    """Gemini 提供方客户端实现。"""

    name = "gemini"

    def __init__(self, api_key: str, cfg: Any = None):
        self._api_key = api_key
        self._settings = cfg
        self._base_url = (getattr(cfg, "gemini_base_url", None) or GEMINI_CONFIG.base_url).rstrip("/")
        timeout: Optional[float] = getattr(cfg, "http_timeout", None)
        self._client = httpx.AsyncClient(
            timeout=timeout,
            headers={
                "x-goog-api-key": api_key,
                "Content-Type": "application/json",
            },
        )

    async def generate_content(self, req: GenerateContentRequest) -> Dict[str, Any]:
        """执行一次 generateContent 调用，返回原始 JSON。

        不重试、不退避：任何失败都直接抛给上层。
        """

        url = f"{self._base_url}/models/{req.model}:generateContent"
        payload = self.build_payload(req)
        try:
            resp = await self._client.post(url, json=payload)
        except httpx.RequestError as e:
            raise NetworkError(code="NETWORK_ERROR", message=str(e) or type(e).__name__, model=req.model)
        except RuntimeError as e:
            # httpx 在 client 已关闭时抛 RuntimeError
            raise NetworkError(code="CLIENT_CLOSED", message=str(e), model=req.model)
        if resp.status_code == 429:
            raise RateLimitError(code="RATE_LIMIT", message="Gemini rate limit", http_status=429, model=req.model)
        if resp.status_code >= 400:
            raise ApiError(code="API_ERROR", message=resp.text, http_status=resp.status_code, model=req.model)
        try:
            data = resp.json()
        except ValueError:
            raise ApiError(code="INVALID_RESPONSE", message="Gemini returned a non-JSON body", http_status=502)
        if not isinstance(data, dict):
            raise ApiError(code="INVALID_RESPONSE", message="Gemini returned an unexpected body", http_status=502)
        return data

    async def aclose(self) -> None:
        await self._client.aclose()

    @staticmethod
    def build_payload(req: GenerateContentRequest) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"contents": req.contents}
        if req.generation_config:
            payload["generationConfig"] = req.generation_config
        if req.tools:
            payload["tools"] = [tool.to_payload() for tool in req.tools]
        if req.tool_config is not None:
            tool_config = req.tool_config.to_payload()
            if tool_config:
                payload["toolConfig"] = tool_config
        return payload
