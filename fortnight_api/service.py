# -*- coding: utf-8 -*-
"""
API 服务层

持有 AgentRegistry、交易会话队列与 Gateway 客户端，提供核心业务逻辑。
"""

import logging
from dataclasses import asdict
from typing import Any, Dict, List, Optional

from fortnight.actions import ActionResult
from fortnight.agents import AgentRegistry, BaseAgent
from fortnight.chain import TransactionSession, TransactionSessionQueue
from fortnight.client import GatewayClient, LLMClientError
from fortnight.core import LLM
from fortnight.errors import AgentNotFoundError

from fortnight_api.config import APIConfig, settings

logger = logging.getLogger(__name__)


class AgentService:
    """
    Agent 服务

    职责：
    1. 初始化共享 LLM、交易会话队列与 AgentRegistry
    2. 按名称管理 Agent 并转发对话 / 动作
    3. 提供只读链上查询
    """

    def __init__(
        self,
        config: Optional[APIConfig] = None,
        llm: Optional[LLM] = None,
        gateway: Optional[GatewayClient] = None,
    ):
        self._config = config or settings
        self._llm = llm
        self._gateway = gateway
        self._queue = TransactionSessionQueue()
        self._registry: Optional[AgentRegistry] = None
        self._initialized = False

    @property
    def config(self) -> APIConfig:
        return self._config

    @property
    def registry(self) -> AgentRegistry:
        if not self._initialized:
            self.initialize()
        return self._registry

    @property
    def queue(self) -> TransactionSessionQueue:
        return self._queue

    def initialize(self):
        """初始化服务"""
        if self._initialized:
            return

        logger.info("[AgentService] 正在初始化...")

        if self._llm is None:
            cfg = self._config.llm
            self._llm = LLM(
                base_url=cfg.base_url, api_key=cfg.api_key, model=cfg.model, timeout=cfg.timeout
            )
        logger.info(f"[AgentService] LLM 客户端已初始化 ({self._llm.model})")

        if self._gateway is None:
            self._gateway = GatewayClient(
                self._config.network.gateway_url, self._config.network.api_url
            )
        logger.info(f"[AgentService] Gateway: {self._gateway.gateway_url}")

        self._registry = AgentRegistry(
            llm=self._llm, network=self._config.network, sender=self._queue
        )
        self._initialized = True

        if self._config.agent_definitions_dir:
            self._registry.load_definitions(self._config.agent_definitions_dir)

        logger.info("[AgentService] 初始化完成")

    def shutdown(self):
        """关闭服务"""
        logger.info("[AgentService] 正在关闭...")

        if self._registry:
            self._registry.close()
            logger.info("[AgentService] 所有 Agent 已关闭")

        if self._llm:
            self._llm.close()
            logger.info("[AgentService] LLM 客户端已关闭")

        if self._gateway:
            self._gateway.close()
            logger.info("[AgentService] Gateway 客户端已关闭")

        self._initialized = False
        logger.info("[AgentService] 关闭完成")

    # ==================== Agent 管理 ====================

    def list_agents(self) -> List[Dict[str, str]]:
        return self.registry.list()

    def create_agent(
        self, agent_type: str, name: str, config: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        agent = self.registry.create(agent_type, name, config or {})
        return self.describe(agent)

    def get_agent(self, name: str) -> BaseAgent:
        agent = self.registry.get(name)
        if agent is None:
            raise AgentNotFoundError(name)
        return agent

    def remove_agent(self, name: str) -> bool:
        return self.registry.remove(name)

    @staticmethod
    def describe(agent: BaseAgent) -> Dict[str, Any]:
        """Agent 详情"""
        return {
            "name": agent.name,
            "type": agent.agent_type,
            "description": agent.description,
            "goals": agent.goals,
            "capabilities": agent.capabilities,
            "personality": agent.personality,
            "actions": agent.actions,
            "message_count": len(agent.memory),
        }

    # ==================== 对话与动作 ====================

    def chat(self, name: str, message: str) -> Dict[str, Any]:
        """
        与 Agent 对话

        Returns:
            Dict: 包含 answer, success, error
        """
        agent = self.get_agent(name)
        try:
            return {"answer": agent.process_message(message), "success": True, "error": None}
        except LLMClientError as e:
            logger.error(f"[AgentService] {name} 对话失败: {e}", exc_info=True)
            return {"answer": "", "success": False, "error": str(e)}

    def get_history(self, name: str) -> List[Dict[str, str]]:
        return self.get_agent(name).memory.to_list()

    def execute_action(
        self, name: str, action: str, params: Optional[Dict[str, Any]] = None
    ) -> ActionResult:
        """执行动作（UnknownActionError / NotImplementedError 由路由层转换）"""
        return self.get_agent(name).execute_action(action, params or {})

    # ==================== 交易会话 ====================

    def list_transactions(self, pending_only: bool = False) -> List[TransactionSession]:
        return self._queue.pending() if pending_only else self._queue.list()

    def get_transaction(self, session_id: str) -> Optional[TransactionSession]:
        return self._queue.get(session_id)

    def mark_transaction(self, session_id: str, status: str) -> bool:
        return self._queue.mark(session_id, status)

    # ==================== 链上查询 ====================

    @property
    def gateway(self) -> GatewayClient:
        if not self._initialized:
            self.initialize()
        return self._gateway

    def get_network(self) -> Dict[str, Any]:
        return {
            "local": asdict(self._config.network),
            "gateway": self.gateway.get_network_config(),
        }

    def get_account(self, address: str) -> Dict[str, Any]:
        return self.gateway.get_account(address)

    def get_token_balance(self, address: str, token_id: str) -> Dict[str, Any]:
        return self.gateway.get_token_balance(address, token_id)

    def get_token_details(self, token_id: str) -> Dict[str, Any]:
        return self.gateway.get_token_details(token_id)


# 全局服务实例
agent_service = AgentService()


def get_agent_service() -> AgentService:
    """FastAPI 依赖（测试中可通过 dependency_overrides 替换）"""
    return agent_service
