# -*- coding: utf-8 -*-
"""
API 数据模型

定义请求和响应的 Pydantic 模型。
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


# ============================================================================
# 请求模型
# ============================================================================


class CreateAgentRequest(BaseModel):
    """创建 Agent 请求"""

    name: str = Field(..., description="Agent 名称（唯一）", min_length=1)
    type: str = Field(..., description="Agent 类型：trading / sentiment")
    config: Dict[str, Any] = Field(default_factory=dict, description="Agent 配置（可选）")

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Alpha Trader",
                "type": "trading",
                "config": {"risk_tolerance": "low", "max_slippage": 2},
            }
        }


class ChatRequest(BaseModel):
    """对话请求"""

    message: str = Field(..., description="用户消息", min_length=1)

    class Config:
        json_schema_extra = {"example": {"message": "Should I swap EGLD for MEX today?"}}


class ActionRequest(BaseModel):
    """动作执行请求"""

    params: Dict[str, Any] = Field(default_factory=dict, description="动作参数")

    class Config:
        json_schema_extra = {
            "example": {
                "params": {"from_token": "WEGLD-bd4d79", "to_token": "MEX-455c57", "amount": "1000"}
            }
        }


class MarkTransactionRequest(BaseModel):
    """钱包回写交易会话状态"""

    status: str = Field(..., description="pending / signed / sent / failed / cancelled")


# ============================================================================
# 响应模型
# ============================================================================


class HealthResponse(BaseModel):
    """健康检查响应"""

    status: str = Field(default="ok")
    version: str = Field(default="0.1.0")
    environment: str = Field(default="devnet")
    agents: int = Field(default=0, description="已注册 Agent 数量")
    timestamp: str = Field(default_factory=lambda: datetime.now().isoformat())


class AgentSummary(BaseModel):
    """Agent 列表项"""

    name: str
    type: str


class AgentListResponse(BaseModel):
    """Agent 列表响应"""

    success: bool = True
    agents: List[AgentSummary] = Field(default_factory=list)
    total: int = 0


class ActionSchema(BaseModel):
    """动作描述"""

    name: str
    description: str = ""
    parameters: Dict[str, Any] = Field(default_factory=dict)


class AgentInfo(BaseModel):
    """Agent 详情"""

    name: str
    type: str
    description: str = ""
    goals: List[str] = Field(default_factory=list)
    capabilities: List[str] = Field(default_factory=list)
    personality: str = ""
    actions: List[ActionSchema] = Field(default_factory=list)
    message_count: int = 0


class ChatResponse(BaseModel):
    """对话响应"""

    success: bool = Field(..., description="是否成功")
    answer: str = Field(default="", description="回复内容")
    error: Optional[str] = Field(default=None, description="错误信息")
    timestamp: str = Field(default_factory=lambda: datetime.now().isoformat())

    class Config:
        json_schema_extra = {
            "example": {
                "success": True,
                "answer": "EGLD liquidity looks healthy today.",
                "error": None,
                "timestamp": "2024-01-01T12:00:00",
            }
        }


class HistoryMessage(BaseModel):
    """历史消息"""

    role: str
    content: str


class HistoryResponse(BaseModel):
    """对话历史响应"""

    success: bool = True
    name: str
    messages: List[HistoryMessage] = Field(default_factory=list)
    total_messages: int = 0


class TransactionSessionInfo(BaseModel):
    """交易会话"""

    session_id: str
    transactions: List[Dict[str, Any]] = Field(default_factory=list)
    display_info: Dict[str, str] = Field(default_factory=dict)
    status: str = "pending"
    created_at: float
    updated_at: float


class TransactionListResponse(BaseModel):
    """交易会话列表"""

    success: bool = True
    sessions: List[TransactionSessionInfo] = Field(default_factory=list)
    total: int = 0


class GenericResponse(BaseModel):
    """通用响应"""

    success: bool
    message: Optional[str] = None
    error: Optional[str] = None
