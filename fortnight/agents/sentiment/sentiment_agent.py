# -*- coding: utf-8 -*-
"""
Sentiment Analysis Agent

按 token 分析社交媒体与新闻情绪，结果按 update_frequency 缓存。
initialize() 后启动后台刷新线程，定期重新分析缓存中的 token；
close() 停止线程。
"""

import json
import logging
import re
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Dict, List, Optional

from fortnight.actions import ActionResult, action
from fortnight.agents.base import BaseAgent
from fortnight.core import LLM

from .cache import SENTIMENTS, SentimentCache, SentimentResult, SourceSentiment
from .config import MAX_PARALLEL_ANALYSES, SentimentAgentConfig

logger = logging.getLogger(__name__)


# ============================================================================
# 数据源（桩数据）
# ============================================================================

SOURCE_TEMPLATES: Dict[str, str] = {
    "Twitter": "{token} is trending with mostly positive comments about its recent partnership.",
    "Reddit": "r/cryptocurrency has mixed feelings about {token}, with concerns about tokenomics but excitement about the technology.",
    "News": "Recent news about {token} includes a major exchange listing and a security audit completion.",
}
GENERIC_SOURCE_TEMPLATE = "Discussion about {token} on {source} shows no clear trend."


# ============================================================================
# Prompt
# ============================================================================

SENTIMENT_SYSTEM_PROMPT = """You are a cryptocurrency sentiment analyst. Analyze the sentiment for {token} based on the provided data.
Return a JSON object with the following structure:
{{
  "overall_sentiment": "positive" | "neutral" | "negative",
  "score": number between -1 and 1,
  "sources": [
    {{
      "source": string,
      "sentiment": "positive" | "neutral" | "negative",
      "score": number between -1 and 1,
      "excerpts": [string]
    }}
  ]
}}"""


# ============================================================================
# 解析辅助函数
# ============================================================================


def _clamp_score(value: Any) -> float:
    """分数限制在 [-1, 1]，非数值按 0 处理"""
    try:
        score = float(value)
    except (TypeError, ValueError):
        return 0.0
    if score != score:  # NaN
        return 0.0
    return max(-1.0, min(1.0, score))


def _normalize_sentiment(value: Any) -> str:
    value = str(value or "").strip().lower()
    return value if value in SENTIMENTS else "neutral"


def parse_sentiment_json(text: str) -> Optional[Dict[str, Any]]:
    """从 LLM 输出中提取 JSON 对象（```json 代码块或第一个 {...}）"""
    fence = re.search(r"```(?:json)?\s*(.*?)```", text, re.DOTALL)
    candidate = fence.group(1) if fence else None
    if candidate is None:
        span = re.search(r"\{.*\}", text, re.DOTALL)
        candidate = span.group(0) if span else text

    try:
        data = json.loads(candidate.strip())
    except json.JSONDecodeError:
        return None
    return data if isinstance(data, dict) else None


class SentimentAnalysisAgent(BaseAgent):
    """MultiversX 情绪分析 Agent"""

    agent_type = "sentiment"

    def __init__(
        self,
        config: SentimentAgentConfig,
        llm: Optional[LLM] = None,
        clock: Callable[[], float] = time.time,
    ):
        super().__init__(config, llm=llm)
        self._cache = SentimentCache(ttl=config.ttl_seconds, clock=clock)
        self._stop_event = threading.Event()
        self._refresh_thread: Optional[threading.Thread] = None

    # ==================== 属性 ====================

    @property
    def data_sources(self) -> List[str]:
        return list(self._config.data_sources)

    @property
    def update_frequency(self) -> float:
        return self._config.update_frequency

    @property
    def cache(self) -> SentimentCache:
        return self._cache

    @property
    def is_refreshing(self) -> bool:
        return self._refresh_thread is not None and self._refresh_thread.is_alive()

    # ==================== 生命周期 ====================

    def initialize(self):
        super().initialize()
        if self._config.auto_refresh and self._refresh_thread is None:
            self._stop_event.clear()
            self._refresh_thread = threading.Thread(
                target=self._refresh_loop,
                name=f"sentiment-refresh-{self.name}",
                daemon=True,
            )
            self._refresh_thread.start()
        self.refresh()

    def close(self):
        """停止刷新线程（可重复调用）"""
        self._stop_event.set()
        thread, self._refresh_thread = self._refresh_thread, None
        if thread is not None and thread is not threading.current_thread():
            thread.join()
            logger.info(f"[{self.name}] 刷新线程已停止")
        super().close()

    def _refresh_loop(self):
        interval = self._config.ttl_seconds
        while not self._stop_event.wait(interval):
            self.refresh()

    def refresh(self) -> int:
        """重新分析缓存中的所有 token，返回成功数量"""
        tokens = self._cache.tokens()
        logger.info(f"[{self.name}] Updating all sentiments... ({len(tokens)} tokens)")

        refreshed = 0
        for token in tokens:
            if self._stop_event.is_set():
                break
            try:
                self.analyze(token, force=True)
                refreshed += 1
            except Exception as e:
                logger.error(f"[{self.name}] 刷新 {token} 情绪失败: {e}", exc_info=True)
        return refreshed

    # ==================== 情绪分析 ====================

    def analyze(self, token: str, force: bool = False) -> SentimentResult:
        """分析 token 情绪；force=False 时优先返回有效缓存"""
        if not force:
            cached = self._cache.get(token)
            if cached is not None:
                logger.debug(f"[{self.name}] 命中缓存: {token}")
                return cached

        data = self.collect_sentiment_data(token)
        result = self._process_sentiment(token, data)
        self._cache.set(result)
        return result

    def collect_sentiment_data(self, token: str) -> List[Dict[str, str]]:
        """每个配置的数据源一条文本（桩数据）"""
        return [
            {
                "source": source,
                "data": SOURCE_TEMPLATES.get(source, GENERIC_SOURCE_TEMPLATE).format(
                    token=token, source=source
                ),
            }
            for source in self._config.data_sources
        ]

    def _process_sentiment(
        self, token: str, sentiment_data: List[Dict[str, str]]
    ) -> SentimentResult:
        formatted = "\n\n".join(
            f"Source: {item['source']}\nData: {item['data']}" for item in sentiment_data
        )
        text = self.ask(
            SENTIMENT_SYSTEM_PROMPT.format(token=token),
            f"Analyze the sentiment for {token} based on the following data:\n\n{formatted}",
            fallback="",
        )

        analysis = parse_sentiment_json(text)
        if analysis is None:
            logger.warning(f"[{self.name}] 无法解析情绪分析结果: {text[:200]}")
            return self._neutral_result(token, sentiment_data)

        sources = []
        for item in analysis.get("sources") or []:
            if not isinstance(item, dict):
                continue
            excerpts = item.get("excerpts") or []
            if not isinstance(excerpts, list):
                excerpts = [excerpts]
            sources.append(
                SourceSentiment(
                    source=str(item.get("source", "")),
                    sentiment=_normalize_sentiment(item.get("sentiment")),
                    score=_clamp_score(item.get("score")),
                    excerpts=[str(e) for e in excerpts],
                )
            )

        overall = analysis.get("overall_sentiment", analysis.get("overallSentiment"))
        return SentimentResult(
            token=token,
            overall_sentiment=_normalize_sentiment(overall),
            score=_clamp_score(analysis.get("score")),
            sources=sources,
            timestamp=self._cache.now(),
        )

    def _neutral_result(
        self, token: str, sentiment_data: List[Dict[str, str]]
    ) -> SentimentResult:
        return SentimentResult(
            token=token,
            overall_sentiment="neutral",
            score=0.0,
            sources=[
                SourceSentiment(
                    source=item["source"], sentiment="neutral", score=0.0, excerpts=[item["data"]]
                )
                for item in sentiment_data
            ],
            timestamp=self._cache.now(),
        )

    # ==================== 动作 ====================

    @action(
        "analyze_sentiment",
        "Analyze social and news sentiment for a token (cached)",
        parameters={
            "type": "object",
            "properties": {"token": {"type": "string"}},
            "required": ["token"],
        },
        error_prefix="Error analyzing sentiment",
    )
    def analyze_sentiment(self, token: str) -> ActionResult:
        return ActionResult.ok(self.analyze(token))

    @action(
        "get_market_mood",
        "Describe the overall cryptocurrency market mood",
        error_prefix="Error analyzing market mood",
    )
    def get_market_mood(self) -> ActionResult:
        analysis = self.ask(
            "You are a cryptocurrency market sentiment analyst. Analyze the current overall market mood and provide insights.",
            "What is the current overall sentiment in the cryptocurrency market? "
            "Consider recent news, social media trends, and market movements.",
            fallback="Could not generate market mood analysis.",
        )
        return ActionResult.ok({"analysis": analysis, "timestamp": self._cache.now()})

    @action(
        "track_social_mentions",
        "Report social media mentions of a token over a timeframe",
        parameters={
            "type": "object",
            "properties": {
                "token": {"type": "string"},
                "timeframe": {"type": "string", "description": "e.g. 24h, 7d"},
            },
            "required": ["token", "timeframe"],
        },
        error_prefix="Error tracking social mentions",
    )
    def track_social_mentions(self, token: str, timeframe: str) -> ActionResult:
        analysis = self.ask(
            f"You are a social media analyst tracking mentions of {token} over the {timeframe} timeframe. "
            "Provide detailed analysis of social mentions.",
            f"Generate a detailed report of social media mentions for {token} over the {timeframe} timeframe. "
            "Include mention count, sentiment trends, and key influencers.",
            fallback="Could not generate social mention analysis.",
        )
        return ActionResult.ok(
            {
                "token": token,
                "timeframe": timeframe,
                "analysis": analysis,
                "timestamp": self._cache.now(),
            }
        )

    @action(
        "compare_token_sentiments",
        "Compare sentiment across several tokens",
        parameters={
            "type": "object",
            "properties": {"tokens": {"type": "array", "items": {"type": "string"}}},
            "required": ["tokens"],
        },
        error_prefix="Error comparing token sentiments",
    )
    def compare_token_sentiments(self, tokens: List[str]) -> ActionResult:
        if not isinstance(tokens, list) or not all(
            isinstance(t, str) and t.strip() for t in tokens
        ):
            raise ValueError("tokens must be a list of token identifiers")
        if not tokens:
            raise ValueError("no tokens to compare")

        # 并行分析，结果保持输入顺序
        with ThreadPoolExecutor(
            max_workers=min(MAX_PARALLEL_ANALYSES, len(tokens))
        ) as executor:
            sentiments = list(executor.map(self.analyze, tokens))

        summary = "\n".join(
            f"{s.token}: {s.overall_sentiment} (score: {s.score})" for s in sentiments
        )
        comparison = self.ask(
            "You are a cryptocurrency sentiment comparison analyst. "
            "Compare the sentiment of different tokens and provide insights.",
            f"Compare the sentiment of the following tokens:\n{summary}\n\n"
            "Provide a detailed comparison and investment recommendations based on sentiment.",
            fallback="Could not generate sentiment comparison.",
        )
        return ActionResult.ok(
            {
                "tokens": list(tokens),
                "individual_sentiments": [s.to_dict() for s in sentiments],
                "comparison": comparison,
                "timestamp": self._cache.now(),
            }
        )
