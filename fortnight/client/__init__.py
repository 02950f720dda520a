# -*- coding: utf-8 -*-
"""
HTTP 客户端模块

- ChatCompletionClient: Chat Completion 接口
- GatewayClient: MultiversX Gateway 只读查询
"""

from .llm_client import (
    ChatCompletionClient,
    LLMClientError,
    LLMConnectionError,
    LLMRequestError,
)

from .gateway_client import (
    GatewayClient,
    GatewayRequestError,
    QueryResult,
)

__all__ = [
    # LLM 客户端
    "ChatCompletionClient",
    "LLMClientError",
    "LLMConnectionError",
    "LLMRequestError",
    # Gateway 客户端
    "GatewayClient",
    "GatewayRequestError",
    "QueryResult",
]
