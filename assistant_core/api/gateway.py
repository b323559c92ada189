"""AI Gateway：对外的三个操作入口。

状态只有两个：UNINITIALIZED -> READY。
第一次调用任意操作时读取凭证并创建唯一的 Provider client；
凭证缺失则抛 ConfigurationError 且保持 UNINITIALIZED，之后每次调用都以同样方式失败，
不会发出任何网络请求。
凭证取自 settings 对象，而 settings 在 import 时已从环境变量加载完毕，
import 之后再 export 的 GEMINI_API_KEY 不会被看到。

client 在进程内最多创建一次；aclose() 之后 Gateway 不会重建 client，
后续调用一律抛 ConfigurationError(code="GATEWAY_CLOSED")。

每个操作只发一次请求：不重试、不批量、不缓存。
"""

import threading
import time
from enum import Enum
from typing import Any, Callable, Optional, Sequence

from assistant_core.config.settings import settings
from assistant_core.domain.exceptions import ConfigurationError, ProviderError
from assistant_core.domain.models import (
    ConversationTurn,
    GenerateContentRequest,
    GenerationResponse,
    GroundingResult,
    InteractionMode,
    Location,
    ModelTier,
)
from assistant_core.infrastructure.logging.logger import logger
from assistant_core.providers import create_provider
from assistant_core.providers.base import ProviderClient
from assistant_core.providers.normalizer import extract_text, normalize_grounding
from assistant_core.providers.payload import assemble_contents, configure_grounding, turn_to_content
from assistant_core.providers.registry import grounded_model, select_model, select_tier_model


ClientFactory = Callable[[str, Any], ProviderClient]


class GatewayState(str, Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"


class AIGateway:
    def __init__(self, cfg: Any = settings, client_factory: Optional[ClientFactory] = None):
        self._settings = cfg
        self._client_factory = client_factory or create_provider
        self._client: Optional[ProviderClient] = None
        self._closed = False
        # 初始化不含 await，这把锁同时挡住多线程和协程的首次竞争
        self._init_lock = threading.Lock()

    @property
    def state(self) -> GatewayState:
        return GatewayState.READY if self._client is not None else GatewayState.UNINITIALIZED

    @property
    def closed(self) -> bool:
        return self._closed

    @staticmethod
    def _closed_error() -> ConfigurationError:
        return ConfigurationError(code="GATEWAY_CLOSED", message="AI gateway has been closed")

    def _get_client(self) -> ProviderClient:
        if self._closed:
            raise self._closed_error()
        if self._client is not None:
            return self._client
        with self._init_lock:
            if self._closed:
                raise self._closed_error()
            if self._client is None:
                api_key = getattr(self._settings, "gemini_api_key", None)
                if not api_key:
                    logger.error("Gateway init failed: credential missing")
                    raise ConfigurationError(
                        code="MISSING_API_KEY",
                        message="GEMINI_API_KEY environment variable not set",
                    )
                self._client = self._client_factory(api_key, self._settings)
                logger.info(
                    "Gateway ready",
                    extra={"extra": {"provider": getattr(self._client, "name", "unknown")}},
                )
        return self._client

    async def _send(self, operation: str, req: GenerateContentRequest) -> dict:
        client = self._get_client()
        started = time.monotonic()
        try:
            data = await client.generate_content(req)
        except ProviderError as e:
            logger.error(
                f"{operation} failed: {e.message}",
                extra={"extra": {"operation": operation, "model": req.model, "code": e.code}},
            )
            raise
        logger.info(
            f"{operation} ok",
            extra={"extra": {
                "operation": operation,
                "model": req.model,
                "duration_ms": int((time.monotonic() - started) * 1000),
            }},
        )
        return data

    async def chat_turn(
        self,
        history: Sequence[ConversationTurn],
        new_message: str,
        mode: Any = InteractionMode.STANDARD,
    ) -> GenerationResponse:
        """带历史的一轮聊天，按 mode 选择模型。"""

        budget = getattr(self._settings, "deep_thought_budget", None)
        model, gen_cfg = select_model(mode, thinking_budget=budget)
        req = GenerateContentRequest(
            model=model,
            contents=assemble_contents(history, new_message),
            generation_config=gen_cfg,
        )
        data = await self._send("chat_turn", req)
        return GenerationResponse(model=model, text=extract_text(data), raw=data)

    async def single_shot(self, prompt_text: str, tier: Any = ModelTier.FAST) -> str:
        """无历史、无工具的单次生成，返回纯文本。"""

        req = GenerateContentRequest(
            model=select_tier_model(tier),
            contents=[turn_to_content("user", prompt_text)],
        )
        data = await self._send("single_shot", req)
        return extract_text(data)

    async def grounded_query(
        self,
        prompt_text: str,
        use_maps_tool: bool = False,
        location: Optional[Location] = None,
    ) -> GroundingResult:
        """挂载搜索（和可选的地图）工具后查询，返回文本与来源。"""

        tools, tool_config = configure_grounding(use_maps_tool, location)
        req = GenerateContentRequest(
            model=grounded_model(),
            contents=[turn_to_content("user", prompt_text)],
            tools=tools,
            tool_config=tool_config,
        )
        data = await self._send("grounded_query", req)
        return normalize_grounding(data)

    async def aclose(self) -> None:
        """关闭底层 client；可重复调用，关闭后不再接受请求。"""

        with self._init_lock:
            if self._closed:
                return
            self._closed = True
            client = self._client
        if client is not None:
            await client.aclose()
            logger.info("Gateway closed")


def create_gateway(cfg: Any = None, client_factory: Optional[ClientFactory] = None) -> AIGateway:
    """构造一个 Gateway；由组合根持有并显式传给各调用方。"""

    return AIGateway(cfg or settings, client_factory=client_factory)
