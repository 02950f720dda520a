# -*- coding: utf-8 -*-
"""
Agent 注册中心

按名称创建、查找、移除 Agent。所有 Agent 共享注册中心的 LLM、
网络配置与交易发送器。create / remove 在锁内完成，可被 API 线程池并发调用。

使用示例：
    registry = AgentRegistry(llm=LLM(api_key="sk-..."))
    trader = registry.create("trading", "Trader", {"risk_tolerance": "low"})
    registry.list()          # [{"name": "Trader", "type": "trading"}]
    registry.remove("Trader")
"""

import json
import logging
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from fortnight.chain import NetworkConfig, TransactionSender, TransactionSessionQueue
from fortnight.core import LLM
from fortnight.errors import AgentExistsError, UnknownAgentTypeError

from .base import BaseAgent
from .sentiment import SentimentAgentConfig, SentimentAnalysisAgent
from .trading import TradingAgent, TradingAgentConfig

logger = logging.getLogger(__name__)

AGENT_TYPES = ("trading", "sentiment")


class AgentRegistry:
    """Agent 注册中心"""

    def __init__(
        self,
        llm: Optional[LLM] = None,
        network: Optional[NetworkConfig] = None,
        sender: Optional[TransactionSender] = None,
    ):
        self._owns_llm = llm is None
        self._llm = llm if llm is not None else LLM()
        self._network = network if network is not None else NetworkConfig()
        self._sender = sender if sender is not None else TransactionSessionQueue()
        self._agents: Dict[str, BaseAgent] = {}
        self._lock = threading.RLock()

    @property
    def llm(self) -> LLM:
        return self._llm

    @property
    def network(self) -> NetworkConfig:
        return self._network

    @property
    def sender(self) -> TransactionSender:
        return self._sender

    # ==================== 创建 ====================

    def create(
        self, agent_type: str, name: str, config: Optional[Dict[str, Any]] = None
    ) -> BaseAgent:
        """
        创建并注册 Agent

        Raises:
            AgentExistsError: 名称已被占用
            UnknownAgentTypeError: 类型不是 trading / sentiment
            ValueError: 配置非法
        """
        # 名称检查到写入之间不能有其他线程插入同名 Agent
        with self._lock:
            if name in self._agents:
                raise AgentExistsError(name)

            agent = self._build(agent_type, name, config or {})
            agent.initialize()
            self._agents[name] = agent

        logger.info(f"[AgentRegistry] 已创建 Agent: {name} ({agent_type})")
        return agent

    def _build(self, agent_type: str, name: str, config: Dict[str, Any]) -> BaseAgent:
        if agent_type == "trading":
            return TradingAgent(
                TradingAgentConfig.from_dict(name, config),
                llm=self._llm,
                network=self._network,
                sender=self._sender,
            )
        if agent_type == "sentiment":
            return SentimentAnalysisAgent(
                SentimentAgentConfig.from_dict(name, config), llm=self._llm
            )
        raise UnknownAgentTypeError(agent_type)

    def load_definitions(self, directory: Union[str, Path]) -> int:
        """
        从目录中的定义文件（{name, type, config}）创建 Agent

        已存在的名称跳过；无法解析的文件记录日志后跳过。

        Returns:
            新创建的 Agent 数量
        """
        directory = Path(directory)
        if not directory.is_dir():
            logger.warning(f"[AgentRegistry] 定义目录不存在: {directory}")
            return 0

        created = 0
        for path in sorted(directory.glob("*.json")):
            try:
                definition = json.loads(path.read_text(encoding="utf-8"))
                name = definition["name"]
                if name in self:
                    logger.info(f"[AgentRegistry] 跳过已存在的 Agent: {name}")
                    continue
                self.create(definition["type"], name, definition.get("config") or {})
                created += 1
            except (OSError, ValueError, KeyError, TypeError, UnknownAgentTypeError) as e:
                logger.error(f"[AgentRegistry] 加载定义失败 {path}: {e}", exc_info=True)

        logger.info(f"[AgentRegistry] 从 {directory} 加载 {created} 个 Agent")
        return created

    # ==================== 查询 / 移除 ====================

    def get(self, name: str) -> Optional[BaseAgent]:
        """按名称获取 Agent"""
        with self._lock:
            return self._agents.get(name)

    def remove(self, name: str) -> bool:
        """移除并关闭 Agent，不存在返回 False"""
        with self._lock:
            agent = self._agents.pop(name, None)
        if agent is None:
            return False
        agent.close()
        logger.info(f"[AgentRegistry] 已移除 Agent: {name}")
        return True

    def list(self) -> List[Dict[str, str]]:
        """[{name, type}]"""
        with self._lock:
            return [
                {"name": name, "type": getattr(agent, "agent_type", "unknown")}
                for name, agent in self._agents.items()
            ]

    def close(self):
        """移除所有 Agent 并释放资源"""
        with self._lock:
            names = list(self._agents.keys())
        for name in names:
            self.remove(name)
        if self._owns_llm:
            self._llm.close()

    def __contains__(self, name: str) -> bool:
        with self._lock:
            return name in self._agents

    def __len__(self) -> int:
        return len(self._agents)
