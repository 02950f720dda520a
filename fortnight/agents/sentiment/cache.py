# -*- coding: utf-8 -*-
"""
情绪分析结果与缓存
"""

import threading
import time
from dataclasses import asdict, dataclass, field
from typing import Any, Callable, Dict, List, Optional

SENTIMENTS = ("positive", "neutral", "negative")


@dataclass
class SourceSentiment:
    """单个数据源的情绪"""

    source: str
    sentiment: str = "neutral"
    score: float = 0.0
    excerpts: List[str] = field(default_factory=list)


@dataclass
class SentimentResult:
    """token 情绪分析结果，timestamp 为 epoch 秒"""

    token: str
    overall_sentiment: str = "neutral"
    score: float = 0.0
    sources: List[SourceSentiment] = field(default_factory=list)
    timestamp: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class SentimentCache:
    """
    按 token 缓存情绪结果

    条目的年龄严格小于 ttl 时视为有效；clock 可注入便于测试。
    """

    def __init__(self, ttl: float, clock: Callable[[], float] = time.time):
        self._ttl = ttl
        self._clock = clock
        self._entries: Dict[str, SentimentResult] = {}
        self._lock = threading.Lock()

    @property
    def ttl(self) -> float:
        return self._ttl

    def now(self) -> float:
        return self._clock()

    def get(self, token: str) -> Optional[SentimentResult]:
        """有效期内的结果，过期或不存在返回 None"""
        with self._lock:
            entry = self._entries.get(token)
        if entry is None:
            return None
        if self._clock() - entry.timestamp < self._ttl:
            return entry
        return None

    def set(self, result: SentimentResult):
        with self._lock:
            self._entries[result.token] = result

    def tokens(self) -> List[str]:
        """缓存中的所有 token（包括已过期的）"""
        with self._lock:
            return list(self._entries.keys())

    def clear(self):
        with self._lock:
            self._entries.clear()

    def __contains__(self, token: str) -> bool:
        return token in self._entries

    def __len__(self) -> int:
        return len(self._entries)
