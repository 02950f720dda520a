# -*- coding: utf-8 -*-
"""
Fortnight Agent API 模块

提供基于 FastAPI 的 Agent 管理、对话、动作与链上查询接口。
"""

from fortnight_api.config import settings, APIConfig
from fortnight_api.models import (
    ActionRequest,
    AgentInfo,
    AgentListResponse,
    ChatRequest,
    ChatResponse,
    CreateAgentRequest,
    GenericResponse,
    HealthResponse,
    HistoryResponse,
    TransactionListResponse,
)
from fortnight_api.service import AgentService, agent_service, get_agent_service
from fortnight_api.routes import router
from fortnight_api.main import app

__all__ = [
    # 配置
    "settings",
    "APIConfig",
    # 数据模型
    "ActionRequest",
    "AgentInfo",
    "AgentListResponse",
    "ChatRequest",
    "ChatResponse",
    "CreateAgentRequest",
    "GenericResponse",
    "HealthResponse",
    "HistoryResponse",
    "TransactionListResponse",
    # 服务
    "AgentService",
    "agent_service",
    "get_agent_service",
    # FastAPI
    "router",
    "app",
]
