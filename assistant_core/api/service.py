"""对外 API 服务模块。

提供简化的函数接口供 UI 层调用：聊天窗口、课程内容助手、研究助手。
所有函数都可以显式传入 gateway；不传时使用进程级默认实例。
"""

from dataclasses import asdict
from typing import Any, Dict, List, Optional, Sequence

from assistant_core.api.gateway import AIGateway, create_gateway
from assistant_core.domain.exceptions import BusinessError, ValidationError
from assistant_core.domain.models import (
    ChatMessage,
    ConversationTurn,
    GroundingRequest,
    InteractionMode,
    Location,
    ModelTier,
)
from assistant_core.infrastructure.logging.logger import logger


_gateway: Optional[AIGateway] = None


def get_default_gateway() -> AIGateway:
    """获取默认的 AI Gateway 实例（单例）。"""
    global _gateway
    if _gateway is None:
        _gateway = create_gateway()
    return _gateway


def to_conversation_turns(messages: Sequence[ChatMessage]) -> List[ConversationTurn]:
    """聊天窗口消息 -> 对话历史；bot 对应 model，占位消息跳过。"""

    return [
        ConversationTurn(role="user" if m.sender == "user" else "model", text=m.text)
        for m in messages
        if not m.is_thinking
    ]


def build_assist_prompt(instruction: str, current_content: str) -> str:
    return f"{instruction}:\n\n---\n\n{current_content}"


async def ask_chatbot(
    messages: Sequence[ChatMessage],
    new_message: str,
    mode: Any = InteractionMode.STANDARD,
    gateway: Optional[AIGateway] = None,
) -> str:
    """发送一条聊天消息并返回回复文本。

    Args:
        messages: 当前窗口中已有的消息（不含本条）
        new_message: 用户刚输入的内容，不能是纯空白
        mode: 聊天模式，无法识别时按 Standard 处理
        gateway: 可选，默认使用进程级实例

    Raises:
        ValidationError: new_message 为空或纯空白
        各种 domain.exceptions 中定义的异常
    """
    if not new_message or not new_message.strip():
        raise ValidationError(code="EMPTY_MESSAGE", message="Message must not be empty")
    gw = gateway or get_default_gateway()
    try:
        response = await gw.chat_turn(to_conversation_turns(messages), new_message, mode)
    except BusinessError as e:
        logger.error(f"Chat failed: {e}", extra={"extra": {
            "mode": InteractionMode.parse(mode).value,
            "history_len": len(messages),
            "error": e.code,
        }})
        raise
    return response.text


async def assist_lesson_content(
    instruction: str,
    current_content: str,
    gateway: Optional[AIGateway] = None,
) -> str:
    """按教师的指令改写课程内容，返回新内容。"""
    gw = gateway or get_default_gateway()
    try:
        return await gw.single_shot(build_assist_prompt(instruction, current_content), ModelTier.FAST)
    except BusinessError as e:
        logger.error(f"AI assist failed: {e}", extra={"extra": {"error": e.code}})
        raise


async def research(
    query: str,
    use_maps: bool = False,
    location: Optional[Location] = None,
    gateway: Optional[AIGateway] = None,
) -> Dict[str, Any]:
    """研究助手：检索增强查询。

    Returns:
        {"text": ..., "sources": [{"kind": "web"|"maps", "uri": ..., "title": ..., ...}]}
    """
    if not query or not query.strip():
        raise ValidationError(code="EMPTY_QUERY", message="Query must not be empty")
    request = GroundingRequest(prompt_text=query, use_maps_tool=use_maps, location=location)
    gw = gateway or get_default_gateway()
    try:
        result = await gw.grounded_query(request.prompt_text, request.use_maps_tool, request.location)
    except BusinessError as e:
        logger.error(f"Research query failed: {e}", extra={"extra": {
            "use_maps": use_maps,
            "has_location": location is not None,
            "error": e.code,
        }})
        raise
    return {
        "text": result.text,
        "sources": [asdict(s) for s in result.sources],
    }
