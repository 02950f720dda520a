# -*- coding: utf-8 -*-
"""
Trading Agent 模块

提供代币兑换、流动性操作与市场分析。
"""

from fortnight.agents.trading.config import (
    CONTRACT_CALL_GAS_LIMIT,
    RISK_THRESHOLDS,
    RISK_TOLERANCES,
    TRADING_STRATEGIES,
    TradingAgentConfig,
)
from fortnight.agents.trading.trading_agent import RiskAssessment, TradingAgent, parse_amount

__all__ = [
    # 配置
    "CONTRACT_CALL_GAS_LIMIT",
    "RISK_THRESHOLDS",
    "RISK_TOLERANCES",
    "TRADING_STRATEGIES",
    "TradingAgentConfig",
    # Agent
    "RiskAssessment",
    "TradingAgent",
    "parse_amount",
]
