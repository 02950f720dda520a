# -*- coding: utf-8 -*-
"""
Agent 基类

所有 MultiversX Agent 的公共部分：
- 角色档案（name / description / goals / capabilities / personality）
- 对话记忆与 process_message
- 通过 @action 声明的动作分发

子类通过 @action 声明动作，通过重写 initialize() / close() 管理后台任务。
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from fortnight.actions import ActionResult, ActionSet
from fortnight.core import LLM, Message
from fortnight.errors import UnknownActionError

from .memory import DEFAULT_CONTEXT_WINDOW, ConversationMemory

logger = logging.getLogger(__name__)

FALLBACK_REPLY = "I could not process your request."

SYSTEM_PROMPT_TEMPLATE = """
You are {name}, an AI agent with the following description:
{description}

Your goals are:
{goals}

Your capabilities include:
{capabilities}

Your personality is:
{personality}

You are an expert in MultiversX blockchain and DeFi operations. You can help users with token transfers, swaps, and market analysis.
Always respond in a helpful, accurate, and concise manner.
"""


@dataclass
class AgentConfig:
    """Agent 角色档案"""

    name: str
    description: str = ""
    goals: List[str] = field(default_factory=list)
    capabilities: List[str] = field(default_factory=list)
    personality: str = ""


def _bullets(items: List[str]) -> str:
    return "\n".join(f"- {item}" for item in items)


class BaseAgent:
    """
    Agent 基类

    使用示例：
        agent = BaseAgent(AgentConfig(name="Helper", description="..."), llm=llm)
        agent.initialize()
        reply = agent.process_message("What is EGLD?")
    """

    # 注册中心中的类型名（子类覆盖）
    agent_type: str = "base"

    def __init__(
        self,
        config: AgentConfig,
        llm: Optional[LLM] = None,
        context_window: int = DEFAULT_CONTEXT_WINDOW,
    ):
        self._config = config
        self._owns_llm = llm is None
        self._llm = llm if llm is not None else LLM()
        self._context_window = context_window
        self._memory = ConversationMemory()
        self._chat_lock = threading.Lock()
        self._actions = ActionSet.from_object(self)

    # ==================== 生命周期 ====================

    def initialize(self):
        """初始化（子类可在此启动后台任务）"""
        logger.info(f"Initializing agent: {self.name}")

    def close(self):
        """释放资源（仅关闭自己创建的 LLM）"""
        if self._owns_llm and self._llm:
            self._llm.close()

    def __enter__(self) -> "BaseAgent":
        return self

    def __exit__(self, *args):
        self.close()

    # ==================== 属性 ====================

    @property
    def config(self) -> AgentConfig:
        return self._config

    @property
    def name(self) -> str:
        return self._config.name

    @property
    def description(self) -> str:
        return self._config.description

    @property
    def goals(self) -> List[str]:
        return list(self._config.goals)

    @property
    def capabilities(self) -> List[str]:
        return list(self._config.capabilities)

    @property
    def personality(self) -> str:
        return self._config.personality

    @property
    def memory(self) -> ConversationMemory:
        return self._memory

    @property
    def llm(self) -> LLM:
        return self._llm

    @property
    def actions(self) -> List[Dict[str, Any]]:
        """已声明的动作（名称、描述、参数 schema）"""
        return self._actions.get_schemas()

    # ==================== 对话 ====================

    def get_system_prompt(self) -> str:
        return SYSTEM_PROMPT_TEMPLATE.format(
            name=self.name,
            description=self.description,
            goals=_bullets(self._config.goals),
            capabilities=_bullets(self._config.capabilities),
            personality=self.personality,
        )

    def process_message(self, message: str) -> str:
        """
        处理一条用户消息

        用户消息先写入记忆；LLM 调用失败时异常向上抛出，
        此时记忆中只有用户消息，没有 assistant 回复。
        同一 Agent 的并发调用串行执行，user / assistant 成对写入。
        """
        with self._chat_lock:
            self._memory.append("user", message)

            messages = [Message.system(self.get_system_prompt())]
            messages.extend(self._memory.window(self._context_window))
            response = self._llm.chat(messages)

            reply = response.content or FALLBACK_REPLY
            self._memory.append("assistant", reply)
            return reply

    def ask(self, system_prompt: str, user_prompt: str, fallback: str) -> str:
        """单次问答（不写入对话记忆），供动作内部使用"""
        response = self._llm.chat(
            [Message.system(system_prompt), Message.user(user_prompt)]
        )
        return response.content or fallback

    # ==================== 动作 ====================

    def execute_action(
        self, action: str, params: Optional[Dict[str, Any]] = None
    ) -> ActionResult:
        """
        按名称执行动作

        Raises:
            NotImplementedError: Agent 未声明任何动作
            UnknownActionError: 动作不存在
        """
        logger.info(f"[{self.name}] Executing action: {action} with params: {params}")
        if not self._actions:
            raise NotImplementedError("Method not implemented")
        if action not in self._actions:
            raise UnknownActionError(action)
        return self._actions.execute(action, params)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"
