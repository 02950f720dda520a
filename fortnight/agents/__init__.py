# -*- coding: utf-8 -*-
"""
Agents 模块

提供 Agent 基类、交易 Agent、情绪分析 Agent 与注册中心。
"""

from fortnight.agents.base import AgentConfig, BaseAgent
from fortnight.agents.memory import ConversationMemory
from fortnight.agents.trading import TradingAgent, TradingAgentConfig
from fortnight.agents.sentiment import (
    SentimentAgentConfig,
    SentimentAnalysisAgent,
    SentimentResult,
)
from fortnight.agents.registry import AGENT_TYPES, AgentRegistry

__all__ = [
    # 基类
    "AgentConfig",
    "BaseAgent",
    "ConversationMemory",
    # Agent
    "TradingAgent",
    "TradingAgentConfig",
    "SentimentAgentConfig",
    "SentimentAnalysisAgent",
    "SentimentResult",
    # 注册中心
    "AGENT_TYPES",
    "AgentRegistry",
]
