"""LLM Provider 集成层。

该包下的模块负责：
- 定义 Provider 抽象接口 (base)。
- 维护模式/档位与模型配置 (registry)。
- 组装请求体、解析响应 (payload、normalizer)。
- 提供具体实现 (gemini_client)。
"""

from typing import Any, Optional

from assistant_core.config.settings import settings
from assistant_core.providers.base import ProviderClient
from assistant_core.providers.gemini_client import GeminiClient


def create_provider(api_key: str, cfg: Optional[Any] = None) -> ProviderClient:
    """用给定凭证创建 Provider 实例，cfg 默认取全局配置。"""

    return GeminiClient(api_key, cfg or settings)
