# -*- coding: utf-8 -*-
"""
Sentiment Analysis Agent 配置
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from fortnight.agents.base import AgentConfig

# ========== 默认值 ==========
DEFAULT_DESCRIPTION = "A sentiment analysis agent for MultiversX DeFi"
DEFAULT_GOALS = [
    "Analyze market sentiment",
    "Track social media mentions",
    "Identify market trends",
]
DEFAULT_CAPABILITIES = [
    "Sentiment analysis",
    "Social media tracking",
    "Market mood assessment",
]
DEFAULT_PERSONALITY = "Analytical, objective, and thorough"
DEFAULT_DATA_SOURCES = ["Twitter", "Reddit", "News"]
DEFAULT_UPDATE_FREQUENCY = 30  # 分钟

# 并行分析多个 token 时的最大线程数
MAX_PARALLEL_ANALYSES = 8


@dataclass
class SentimentAgentConfig(AgentConfig):
    """Sentiment Analysis Agent 配置"""

    description: str = DEFAULT_DESCRIPTION
    goals: List[str] = field(default_factory=lambda: list(DEFAULT_GOALS))
    capabilities: List[str] = field(default_factory=lambda: list(DEFAULT_CAPABILITIES))
    personality: str = DEFAULT_PERSONALITY

    data_sources: List[str] = field(default_factory=lambda: list(DEFAULT_DATA_SOURCES))
    update_frequency: float = DEFAULT_UPDATE_FREQUENCY  # 分钟，同时作为缓存 TTL
    auto_refresh: bool = True

    def __post_init__(self):
        if (
            isinstance(self.update_frequency, bool)
            or not isinstance(self.update_frequency, (int, float))
            or self.update_frequency <= 0
        ):
            raise ValueError(f"Invalid update frequency: {self.update_frequency}")
        if not isinstance(self.auto_refresh, bool):
            raise ValueError(f"Invalid auto refresh flag: {self.auto_refresh!r}")

    @property
    def ttl_seconds(self) -> float:
        return self.update_frequency * 60

    @classmethod
    def from_dict(cls, name: str, data: Optional[Dict[str, Any]] = None) -> "SentimentAgentConfig":
        """由注册中心 / 定义文件的 config 字典构建，缺省字段使用默认值"""
        data = {k: v for k, v in (data or {}).items() if v is not None}
        return cls(
            name=name,
            description=data.get("description", DEFAULT_DESCRIPTION),
            goals=list(data.get("goals", DEFAULT_GOALS)),
            capabilities=list(data.get("capabilities", DEFAULT_CAPABILITIES)),
            personality=data.get("personality", DEFAULT_PERSONALITY),
            data_sources=list(data.get("data_sources", DEFAULT_DATA_SOURCES)),
            update_frequency=data.get("update_frequency", DEFAULT_UPDATE_FREQUENCY),
            auto_refresh=data.get("auto_refresh", True),
        )
