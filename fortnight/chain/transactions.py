# -*- coding: utf-8 -*-
"""
交易会话

Agent 构建未签名交易后交给 TransactionSender。签名由钱包完成：
默认实现 TransactionSessionQueue 只把交易按会话排队，返回 session_id，
钱包（前端）通过会话拉取待签名交易并回写状态。
"""

import logging
import threading
import time
import uuid
from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Union

logger = logging.getLogger(__name__)

SESSION_STATUSES = ("pending", "signed", "sent", "failed", "cancelled")


@dataclass
class Transaction:
    """未签名交易"""

    receiver: str
    data: str = ""
    value: str = "0"
    gas_limit: int = 50_000
    chain_id: str = "D"
    sender: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class TransactionDisplayInfo:
    """钱包展示给用户的提示文案"""

    processing_message: str = ""
    error_message: str = ""
    success_message: str = ""


@dataclass
class TransactionSession:
    """一次 send 调用对应的交易会话"""

    session_id: str
    transactions: List[Transaction]
    display_info: TransactionDisplayInfo = field(default_factory=TransactionDisplayInfo)
    status: str = "pending"
    created_at: float = field(default_factory=time.time)
    updated_at: float = field(default_factory=time.time)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "session_id": self.session_id,
            "transactions": [tx.to_dict() for tx in self.transactions],
            "display_info": asdict(self.display_info),
            "status": self.status,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


class TransactionSender(ABC):
    """交易发送接口"""

    @abstractmethod
    def send(
        self,
        transactions: Union[Transaction, Sequence[Transaction]],
        display_info: Optional[TransactionDisplayInfo] = None,
    ) -> str:
        """提交交易，返回 session_id"""
        pass


class TransactionSessionQueue(TransactionSender):
    """
    内存交易会话队列

    使用示例：
        queue = TransactionSessionQueue()
        session_id = queue.send(Transaction(receiver="erd1...", data="ESDTTransfer@..."))
        queue.pending()                     # 待签名会话
        queue.mark(session_id, "signed")    # 钱包回写状态
    """

    def __init__(self):
        self._sessions: Dict[str, TransactionSession] = {}
        self._lock = threading.Lock()

    def send(
        self,
        transactions: Union[Transaction, Sequence[Transaction]],
        display_info: Optional[TransactionDisplayInfo] = None,
    ) -> str:
        if isinstance(transactions, Transaction):
            transactions = [transactions]
        if not transactions:
            raise ValueError("no transactions to send")

        session = TransactionSession(
            session_id=f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}",
            transactions=list(transactions),
            display_info=display_info if display_info is not None else TransactionDisplayInfo(),
        )
        with self._lock:
            self._sessions[session.session_id] = session

        logger.info(
            f"[TransactionQueue] 新会话 {session.session_id}，交易数: {len(session.transactions)}"
        )
        return session.session_id

    def get(self, session_id: str) -> Optional[TransactionSession]:
        """按 session_id 获取会话"""
        return self._sessions.get(session_id)

    def pending(self) -> List[TransactionSession]:
        """所有待签名会话（按创建时间排序）"""
        with self._lock:
            sessions = [s for s in self._sessions.values() if s.status == "pending"]
        return sorted(sessions, key=lambda s: s.created_at)

    def list(self) -> List[TransactionSession]:
        """所有会话"""
        with self._lock:
            return sorted(self._sessions.values(), key=lambda s: s.created_at)

    def mark(self, session_id: str, status: str) -> bool:
        """更新会话状态，会话不存在返回 False"""
        if status not in SESSION_STATUSES:
            raise ValueError(
                f"Invalid status: {status}. Valid statuses are: {', '.join(SESSION_STATUSES)}"
            )
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return False
            session.status = status
            session.updated_at = time.time()
        logger.info(f"[TransactionQueue] 会话 {session_id} 状态 -> {status}")
        return True

    def __len__(self) -> int:
        return len(self._sessions)
