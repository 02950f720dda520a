# -*- coding: utf-8 -*-
"""
API 路由定义

定义所有 API 端点。调用 LLM 或 Gateway 的端点使用同步函数，
由 FastAPI 放入线程池执行。
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Query

from fortnight import __version__
from fortnight.client import GatewayRequestError
from fortnight.errors import (
    AgentExistsError,
    AgentNotFoundError,
    UnknownActionError,
    UnknownAgentTypeError,
)

from fortnight_api.models import (
    ActionRequest,
    AgentInfo,
    AgentListResponse,
    AgentSummary,
    ChatRequest,
    ChatResponse,
    CreateAgentRequest,
    GenericResponse,
    HealthResponse,
    HistoryMessage,
    HistoryResponse,
    MarkTransactionRequest,
    TransactionListResponse,
    TransactionSessionInfo,
)
from fortnight_api.service import AgentService, get_agent_service

logger = logging.getLogger(__name__)

# 创建路由器
router = APIRouter()


def _not_found(name: str) -> HTTPException:
    return HTTPException(status_code=404, detail=f"Agent not found: {name}")


# ============================================================================
# 健康检查
# ============================================================================


@router.get("/health", response_model=HealthResponse, tags=["系统"])
async def health_check(service: AgentService = Depends(get_agent_service)):
    """
    健康检查

    返回服务状态信息。
    """
    return HealthResponse(
        status="ok",
        version=__version__,
        environment=service.config.network.environment,
        agents=len(service.registry),
    )


# ============================================================================
# Agent 管理
# ============================================================================


@router.get("/agents", response_model=AgentListResponse, tags=["Agent"])
async def list_agents(service: AgentService = Depends(get_agent_service)):
    """列出所有 Agent"""
    agents = [AgentSummary(**item) for item in service.list_agents()]
    return AgentListResponse(success=True, agents=agents, total=len(agents))


@router.post("/agents", response_model=AgentInfo, status_code=201, tags=["Agent"])
def create_agent(
    request: CreateAgentRequest, service: AgentService = Depends(get_agent_service)
):
    """
    创建 Agent

    - **name**: Agent 名称（唯一）
    - **type**: trading / sentiment
    - **config**: 覆盖默认配置（可选）
    """
    try:
        info = service.create_agent(request.type, request.name, request.config)
    except AgentExistsError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except (UnknownAgentTypeError, ValueError, TypeError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    return AgentInfo(**info)


@router.get("/agents/{name}", response_model=AgentInfo, tags=["Agent"])
async def get_agent(name: str, service: AgentService = Depends(get_agent_service)):
    """获取 Agent 详情"""
    try:
        agent = service.get_agent(name)
    except AgentNotFoundError:
        raise _not_found(name)
    return AgentInfo(**service.describe(agent))


@router.delete("/agents/{name}", response_model=GenericResponse, tags=["Agent"])
def delete_agent(name: str, service: AgentService = Depends(get_agent_service)):
    """移除 Agent（停止其后台任务）"""
    if not service.remove_agent(name):
        raise _not_found(name)
    return GenericResponse(success=True, message=f"Agent removed: {name}")


# ============================================================================
# 对话
# ============================================================================


@router.post("/agents/{name}/chat", response_model=ChatResponse, tags=["对话"])
def chat(
    name: str, request: ChatRequest, service: AgentService = Depends(get_agent_service)
):
    """
    发送对话消息

    Agent 保留完整对话记忆，每次请求携带最近 10 条作为上下文。
    """
    try:
        result = service.chat(name, request.message)
    except AgentNotFoundError:
        raise _not_found(name)
    except Exception as e:
        logger.error(f"[API] /agents/{name}/chat 错误: {e}", exc_info=True)
        return ChatResponse(success=False, answer="", error=str(e))

    return ChatResponse(
        success=result.get("success", False),
        answer=result.get("answer", ""),
        error=result.get("error"),
    )


@router.get("/agents/{name}/history", response_model=HistoryResponse, tags=["对话"])
async def get_history(name: str, service: AgentService = Depends(get_agent_service)):
    """获取对话历史"""
    try:
        history = service.get_history(name)
    except AgentNotFoundError:
        raise _not_found(name)

    messages = [HistoryMessage(role=m["role"], content=m["content"]) for m in history]
    return HistoryResponse(
        success=True, name=name, messages=messages, total_messages=len(messages)
    )


# ============================================================================
# 动作
# ============================================================================


@router.post("/agents/{name}/actions/{action}", tags=["动作"])
def execute_action(
    name: str,
    action: str,
    request: ActionRequest,
    service: AgentService = Depends(get_agent_service),
) -> Dict[str, Any]:
    """
    执行 Agent 动作

    返回 {success, message?, ...data}。动作内部失败返回 success=false，
    未知动作返回 400。
    """
    try:
        result = service.execute_action(name, action, request.params)
    except AgentNotFoundError:
        raise _not_found(name)
    except (UnknownActionError, NotImplementedError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    return result.to_dict()


# ============================================================================
# 交易会话
# ============================================================================


@router.get("/transactions", response_model=TransactionListResponse, tags=["交易"])
async def list_transactions(
    pending: bool = Query(default=False, description="只返回待签名会话"),
    service: AgentService = Depends(get_agent_service),
):
    """列出交易会话"""
    sessions = [
        TransactionSessionInfo(**s.to_dict()) for s in service.list_transactions(pending)
    ]
    return TransactionListResponse(success=True, sessions=sessions, total=len(sessions))


@router.get(
    "/transactions/{session_id}", response_model=TransactionSessionInfo, tags=["交易"]
)
async def get_transaction(
    session_id: str, service: AgentService = Depends(get_agent_service)
):
    """获取交易会话"""
    session = service.get_transaction(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail=f"Session not found: {session_id}")
    return TransactionSessionInfo(**session.to_dict())


@router.post(
    "/transactions/{session_id}/status", response_model=GenericResponse, tags=["交易"]
)
async def mark_transaction(
    session_id: str,
    request: MarkTransactionRequest,
    service: AgentService = Depends(get_agent_service),
):
    """更新交易会话状态（由钱包签名后回写）"""
    try:
        found = service.mark_transaction(session_id, request.status)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not found:
        raise HTTPException(status_code=404, detail=f"Session not found: {session_id}")
    return GenericResponse(success=True, message=f"Session {session_id}: {request.status}")


# ============================================================================
# 链上查询
# ============================================================================


def _gateway_call(path: str, func, *args) -> Dict[str, Any]:
    try:
        return {"success": True, "data": func(*args)}
    except GatewayRequestError as e:
        logger.error(f"[API] {path} 错误: {e}", exc_info=True)
        raise HTTPException(status_code=502, detail=str(e))


@router.get("/chain/network", tags=["链上"])
def get_network(service: AgentService = Depends(get_agent_service)):
    """网络配置（本地配置 + Gateway 返回的链参数）"""
    return _gateway_call("/chain/network", service.get_network)


@router.get("/chain/accounts/{address}", tags=["链上"])
def get_account(address: str, service: AgentService = Depends(get_agent_service)):
    """账户信息"""
    return _gateway_call("/chain/accounts", service.get_account, address)


@router.get("/chain/accounts/{address}/tokens/{token_id}", tags=["链上"])
def get_token_balance(
    address: str, token_id: str, service: AgentService = Depends(get_agent_service)
):
    """账户 ESDT 余额"""
    return _gateway_call("/chain/accounts/tokens", service.get_token_balance, address, token_id)


@router.get("/chain/tokens/{token_id}", tags=["链上"])
def get_token(token_id: str, service: AgentService = Depends(get_agent_service)):
    """Token 定义"""
    return _gateway_call("/chain/tokens", service.get_token_details, token_id)
