"""请求体组装：对话历史与检索工具。

- assemble_contents: 把历史轮次 + 新消息转成 contents 列表，顺序原样保留。
- configure_grounding: 根据是否启用地图、是否有位置，决定挂哪些工具以及地理偏置。

这里全部是纯函数，不发网络请求，也不读配置。
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Literal, Optional, Sequence, Tuple

from assistant_core.domain.exceptions import ValidationError
from assistant_core.domain.models import ConversationTurn, Location


ToolKind = Literal["google_search", "google_maps"]

_TOOL_WIRE_NAMES: Dict[str, str] = {
    "google_search": "googleSearch",
    "google_maps": "googleMaps",
}


@dataclass(frozen=True)
class GroundingTool:
    """一个检索工具，kind 只能是已知的几种。"""

    kind: ToolKind

    def __post_init__(self) -> None:
        if self.kind not in _TOOL_WIRE_NAMES:
            raise ValidationError(code="UNKNOWN_TOOL", message=f"Unknown grounding tool: {self.kind!r}")

    def to_payload(self) -> Dict[str, Any]:
        return {_TOOL_WIRE_NAMES[self.kind]: {}}


SEARCH_TOOL = GroundingTool(kind="google_search")
MAPS_TOOL = GroundingTool(kind="google_maps")


@dataclass(frozen=True)
class ToolConfig:
    """工具配置；bias 为空时序列化为 {}。"""

    bias: Optional[Location] = None

    def to_payload(self) -> Dict[str, Any]:
        if self.bias is None:
            return {}
        return {
            "retrievalConfig": {
                "latLng": {
                    "latitude": self.bias.latitude,
                    "longitude": self.bias.longitude,
                }
            }
        }


def turn_to_content(role: str, text: str) -> Dict[str, Any]:
    return {"role": role, "parts": [{"text": text}]}


def assemble_contents(history: Sequence[ConversationTurn], new_message: str) -> List[Dict[str, Any]]:
    """历史轮次按原顺序转换，末尾追加一条 user 消息。

    不做去重、不做裁剪，也不校验 new_message 是否为空（由调用方负责）。
    """

    contents = [turn_to_content(turn.role, turn.text) for turn in history]
    contents.append(turn_to_content("user", new_message))
    return contents


def configure_grounding(
    use_maps_tool: bool,
    location: Optional[Location] = None,
) -> Tuple[List[GroundingTool], ToolConfig]:
    """返回 (工具列表, 工具配置)。

    搜索工具始终挂载；开启地图时地图工具排在前面。
    只有同时开启地图且有位置时才带地理偏置，位置尚未拿到时照常查询。
    """

    if use_maps_tool:
        return [MAPS_TOOL, SEARCH_TOOL], ToolConfig(bias=location)
    return [SEARCH_TOOL], ToolConfig()
