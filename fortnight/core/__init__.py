# -*- coding: utf-8 -*-
"""
Agent 核心模块

- LLM: 大语言模型调用封装
- Message: 对话消息数据类
- LLMResponse: LLM 响应结果
"""

from .llm import (
    LLM,
    Message,
    LLMResponse,
)

__all__ = [
    "LLM",
    "Message",
    "LLMResponse",
]
