"""Assistant Core 顶层包。

该包提供教学跟踪应用中 AI 助手的请求编排层，
包括配置加载、领域模型、模型选择、请求组装、响应解析，
以及对 UI 暴露的聊天 / 单次生成 / 检索查询三个操作。
"""

from assistant_core.api.gateway import AIGateway, GatewayState, create_gateway

__all__ = ["AIGateway", "GatewayState", "create_gateway"]
