"""统一的对话与结果数据模型。

本模块定义了 AI 助手层与 UI 协作方之间共享的标准数据结构：

- ConversationTurn: 一轮对话（user/model）。
- InteractionMode / ModelTier: 选择模型档位的枚举。
- Location: 地理位置，用于地图检索的偏置。
- GenerateContentRequest: 发给底层 Provider 的完整请求。
- GenerationResponse / GroundingResult: 从 Provider 解析后的统一结果。

Provider 适配器（如 GeminiClient）只负责在各自的 API JSON
和这些模型之间做转换，具体厂商类型不会越过这一层。
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Union, TYPE_CHECKING

from assistant_core.domain.exceptions import ValidationError

if TYPE_CHECKING:
    # 仅在类型检查时导入，避免运行时循环依赖
    from assistant_core.providers.payload import GroundingTool, ToolConfig


# 对话角色（与 Generative Language API 的 role 字段对应）
TurnRole = Literal["user", "model"]


@dataclass(frozen=True)
class ConversationTurn:
    """一轮已完成的对话，追加后不可修改。"""

    role: TurnRole
    text: str


class InteractionMode(str, Enum):
    """聊天模式预设：决定模型档位和是否开启扩展推理预算。"""

    FAST = "Fast"
    STANDARD = "Standard"
    DEEP_THOUGHT = "Deep Thought"

    @classmethod
    def parse(cls, value: Any) -> "InteractionMode":
        """把任意输入解析为模式，无法识别时回落到 STANDARD。

        支持枚举本身、枚举值（"Deep Thought"）以及枚举名（"deep_thought"），
        均不区分大小写。
        """

        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower()
            for mode in cls:
                if key in (mode.value.lower(), mode.name.lower()):
                    return mode
        return cls.STANDARD


class ModelTier(str, Enum):
    """单次生成（无历史、无工具）可选的模型档位。"""

    FAST = "fast"
    PRO = "pro"


@dataclass(frozen=True)
class Location:
    """经纬度坐标，构造时即校验取值范围。"""

    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        if not -90.0 <= self.latitude <= 90.0:
            raise ValidationError(
                code="INVALID_LOCATION",
                message=f"latitude out of range: {self.latitude}",
            )
        if not -180.0 <= self.longitude <= 180.0:
            raise ValidationError(
                code="INVALID_LOCATION",
                message=f"longitude out of range: {self.longitude}",
            )


@dataclass
class GroundingRequest:
    """一次带检索工具的查询。

    location 只在 use_maps_tool 为 True 时有意义；
    开启地图但没有位置时，工具照常挂载，只是不带地理偏置。
    """

    prompt_text: str
    use_maps_tool: bool = False
    location: Optional[Location] = None


@dataclass
class GenerateContentRequest:
    """一次完整的 generateContent 请求。

    - model: 具体厂商模型 ID（由 registry 选出）。
    - contents: 已组装好的 [{role, parts:[{text}]}] 列表。
    - generation_config: 例如 thinkingConfig。
    - tools / tool_config: 仅检索查询使用。
    """

    model: str
    contents: List[Dict[str, Any]]
    generation_config: Dict[str, Any] = field(default_factory=dict)
    tools: List["GroundingTool"] = field(default_factory=list)
    tool_config: Optional["ToolConfig"] = None


@dataclass
class GenerationResponse:
    """一次聊天调用的结果，调用方通常只读取 text。

    - raw: 原始响应 JSON，用于调试或日志记录。
    """

    model: str
    text: str
    raw: Optional[dict] = None


@dataclass
class ReviewSnippet:
    """地图地点下附带的一条评论摘录。"""

    uri: str
    text: str


@dataclass
class WebSource:
    """网页检索来源。"""

    uri: str
    title: str
    kind: Literal["web"] = "web"


@dataclass
class MapsSource:
    """地图检索来源，可能带若干评论摘录。"""

    uri: str
    title: str
    review_snippets: List[ReviewSnippet] = field(default_factory=list)
    kind: Literal["maps"] = "maps"


SourceChunk = Union[WebSource, MapsSource]


@dataclass
class GroundingResult:
    """检索增强回答：文本 + 有序的来源列表（可能为空）。"""

    text: str
    sources: List[SourceChunk] = field(default_factory=list)


@dataclass
class ChatMessage:
    """UI 聊天窗口里的一条消息。

    sender 为 "bot" 的消息在发给模型时对应 role="model"；
    is_thinking 标记的是等待中的占位消息，不进入历史。
    """

    sender: Literal["user", "bot"]
    text: str
    is_thinking: bool = False
