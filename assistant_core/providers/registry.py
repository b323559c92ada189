"""Provider 与模型配置。

本模块将“交互模式 / 模型档位”与“具体厂商模型名”解耦：

- InteractionMode：聊天窗口里用户选的模式（Fast / Standard / Deep Thought）。
- ModelTier：单次生成使用的档位（fast / pro）。
- provider_model：厂商实际提供的模型 ID，例如 "gemini-2.5-flash"。

上层只关心模式/档位，具体用哪个底层模型由这里集中配置，便于后续升级或切换。"""

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

from assistant_core.domain.models import InteractionMode, ModelTier


DEFAULT_THINKING_BUDGET = 32768


@dataclass
class ModelConfig:
    """单个逻辑模型的配置。"""

    logical_name: str
    provider_model: str
    generation_config: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ProviderConfig:
    """某个 Provider 的整体配置。"""

    name: str
    base_url: str
    models: Dict[str, ModelConfig]


GEMINI_CONFIG = ProviderConfig(
    name="gemini",
    base_url="https://generativelanguage.googleapis.com/v1beta",
    models={
        "fast": ModelConfig(logical_name="fast", provider_model="gemini-2.5-flash-lite"),
        "standard": ModelConfig(logical_name="standard", provider_model="gemini-2.5-flash"),
        "deep-thought": ModelConfig(
            logical_name="deep-thought",
            provider_model="gemini-2.5-pro",
            generation_config={"thinkingConfig": {"thinkingBudget": DEFAULT_THINKING_BUDGET}},
        ),
        # 单次生成与检索查询
        "single-fast": ModelConfig(logical_name="single-fast", provider_model="gemini-2.5-flash"),
        "single-pro": ModelConfig(logical_name="single-pro", provider_model="gemini-2.5-pro"),
        "grounded": ModelConfig(logical_name="grounded", provider_model="gemini-2.5-flash"),
    },
)


MODE_MODELS: Mapping[InteractionMode, str] = {
    InteractionMode.FAST: "fast",
    InteractionMode.STANDARD: "standard",
    InteractionMode.DEEP_THOUGHT: "deep-thought",
}

TIER_MODELS: Mapping[ModelTier, str] = {
    ModelTier.FAST: "single-fast",
    ModelTier.PRO: "single-pro",
}


def select_model(
    mode: Any,
    thinking_budget: Optional[int] = None,
) -> Tuple[str, Dict[str, Any]]:
    """根据聊天模式返回 (模型 ID, generation_config)。

    无法识别的模式一律按 STANDARD 处理。返回的 config 是副本，调用方可以随意修改。
    thinking_budget 仅覆盖 Deep Thought 的预算，其余模式忽略。
    """

    cfg = GEMINI_CONFIG.models[MODE_MODELS[InteractionMode.parse(mode)]]
    gen_cfg = copy.deepcopy(cfg.generation_config)
    if thinking_budget is not None and "thinkingConfig" in gen_cfg:
        gen_cfg["thinkingConfig"]["thinkingBudget"] = thinking_budget
    return cfg.provider_model, gen_cfg


def select_tier_model(tier: Any) -> str:
    """单次生成档位 -> 模型 ID，未知档位按 fast 处理。"""

    try:
        key = TIER_MODELS[ModelTier(tier)]
    except ValueError:
        key = TIER_MODELS[ModelTier.FAST]
    return GEMINI_CONFIG.models[key].provider_model


def grounded_model() -> str:
    return GEMINI_CONFIG.models["grounded"].provider_model
