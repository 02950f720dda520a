# -*- coding: utf-8 -*-
"""
链上辅助模块

- NetworkConfig: 网络配置
- ContractCallPayloadBuilder: 合约调用 payload
- TransactionSender / TransactionSessionQueue: 交易会话
"""

from .config import (
    ENVIRONMENTS,
    ContractsConfig,
    DAppConfig,
    NetworkConfig,
    api_endpoint,
)
from .payload import ContractCallPayloadBuilder, encode_arg
from .transactions import (
    SESSION_STATUSES,
    Transaction,
    TransactionDisplayInfo,
    TransactionSender,
    TransactionSession,
    TransactionSessionQueue,
)

__all__ = [
    # 配置
    "ENVIRONMENTS",
    "ContractsConfig",
    "DAppConfig",
    "NetworkConfig",
    "api_endpoint",
    # payload
    "ContractCallPayloadBuilder",
    "encode_arg",
    # 交易
    "SESSION_STATUSES",
    "Transaction",
    "TransactionDisplayInfo",
    "TransactionSender",
    "TransactionSession",
    "TransactionSessionQueue",
]
