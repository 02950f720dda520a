# -*- coding: utf-8 -*-
"""
Sentiment Analysis Agent 模块

提供 token 情绪分析、市场情绪与社交媒体提及追踪。
"""

from fortnight.agents.sentiment.cache import (
    SENTIMENTS,
    SentimentCache,
    SentimentResult,
    SourceSentiment,
)
from fortnight.agents.sentiment.config import SentimentAgentConfig
from fortnight.agents.sentiment.sentiment_agent import (
    SentimentAnalysisAgent,
    parse_sentiment_json,
)

__all__ = [
    # 配置
    "SentimentAgentConfig",
    # 缓存
    "SENTIMENTS",
    "SentimentCache",
    "SentimentResult",
    "SourceSentiment",
    # Agent
    "SentimentAnalysisAgent",
    "parse_sentiment_json",
]
