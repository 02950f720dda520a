# -*- coding: utf-8 -*-
"""
Trading Agent 配置
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from fortnight.agents.base import AgentConfig

# ========== 取值范围 ==========
RISK_TOLERANCES = ("low", "medium", "high")
TRADING_STRATEGIES = ("conservative", "balanced", "aggressive")

# 风险评分阈值：评分严格小于阈值才通过
RISK_THRESHOLDS: Dict[str, float] = {"low": 3.0, "medium": 6.0, "high": 9.0}

# ========== 默认值 ==========
DEFAULT_DESCRIPTION = "A trading agent for MultiversX DeFi"
DEFAULT_GOALS = [
    "Execute trades with optimal timing",
    "Minimize slippage",
    "Maximize returns",
]
DEFAULT_CAPABILITIES = ["Token swaps", "Liquidity provision", "Market analysis"]
DEFAULT_PERSONALITY = "Professional, cautious, and data-driven"
DEFAULT_MAX_SLIPPAGE = 3

# swap / 流动性合约调用的 gas
CONTRACT_CALL_GAS_LIMIT = 60_000_000


@dataclass
class TradingAgentConfig(AgentConfig):
    """Trading Agent 配置"""

    description: str = DEFAULT_DESCRIPTION
    goals: List[str] = field(default_factory=lambda: list(DEFAULT_GOALS))
    capabilities: List[str] = field(default_factory=lambda: list(DEFAULT_CAPABILITIES))
    personality: str = DEFAULT_PERSONALITY

    risk_tolerance: str = "medium"
    trading_strategy: str = "balanced"
    max_slippage: float = DEFAULT_MAX_SLIPPAGE  # 百分比

    def __post_init__(self):
        if self.risk_tolerance not in RISK_TOLERANCES:
            raise ValueError(
                f"Invalid risk tolerance: {self.risk_tolerance}. "
                f"Valid values are: {', '.join(RISK_TOLERANCES)}"
            )
        if self.trading_strategy not in TRADING_STRATEGIES:
            raise ValueError(
                f"Invalid trading strategy: {self.trading_strategy}. "
                f"Valid values are: {', '.join(TRADING_STRATEGIES)}"
            )
        if (
            isinstance(self.max_slippage, bool)
            or not isinstance(self.max_slippage, (int, float))
            or self.max_slippage < 0
        ):
            raise ValueError(f"Invalid max slippage: {self.max_slippage}")

    @classmethod
    def from_dict(cls, name: str, data: Optional[Dict[str, Any]] = None) -> "TradingAgentConfig":
        """由注册中心 / 定义文件的 config 字典构建，缺省字段使用默认值"""
        data = {k: v for k, v in (data or {}).items() if v is not None}
        return cls(
            name=name,
            description=data.get("description", DEFAULT_DESCRIPTION),
            goals=list(data.get("goals", DEFAULT_GOALS)),
            capabilities=list(data.get("capabilities", DEFAULT_CAPABILITIES)),
            personality=data.get("personality", DEFAULT_PERSONALITY),
            risk_tolerance=data.get("risk_tolerance", "medium"),
            trading_strategy=data.get("trading_strategy", "balanced"),
            max_slippage=data.get("max_slippage", DEFAULT_MAX_SLIPPAGE),
        )
