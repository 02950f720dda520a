# -*- coding: utf-8 -*-
"""
Trading Agent

动作：
- swap: 风险与滑点检查后构建 ESDTTransfer 兑换交易
- add_liquidity / remove_liquidity: 流动性池合约调用
- analyze_market / suggest_trade: 由 LLM 生成分析与建议

交易只构建、不签名：统一交给 TransactionSender 排队，返回 session_id。
风险评估与滑点计算目前为随机桩实现，随机源可注入。
"""

import logging
import random
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from fortnight.actions import ActionResult, action
from fortnight.agents.base import BaseAgent
from fortnight.chain import (
    ContractCallPayloadBuilder,
    NetworkConfig,
    Transaction,
    TransactionDisplayInfo,
    TransactionSender,
    TransactionSessionQueue,
)
from fortnight.core import LLM
from fortnight.errors import ConfigurationError

from .config import CONTRACT_CALL_GAS_LIMIT, RISK_THRESHOLDS, TradingAgentConfig

logger = logging.getLogger(__name__)

RISK_FACTORS = ["Token liquidity", "Price volatility", "Market cap", "Trading volume"]

Amount = Union[str, int]


def parse_amount(amount: Amount) -> int:
    """
    解析金额（token 最小单位）

    只接受非负 int 或纯数字字符串；小数、bool 等一律拒绝，不做截断。
    """
    if isinstance(amount, int) and not isinstance(amount, bool):
        if amount >= 0:
            return amount
    elif isinstance(amount, str) and amount.isascii() and amount.isdigit():
        return int(amount)
    raise ValueError(
        f"Invalid amount: {amount!r}. Expected a non-negative integer in the token's smallest unit"
    )


@dataclass
class RiskAssessment:
    """风险评估结果，score 范围 [0, 10)"""

    score: float
    factors: List[str] = field(default_factory=list)


class TradingAgent(BaseAgent):
    """MultiversX 交易 Agent"""

    agent_type = "trading"

    def __init__(
        self,
        config: TradingAgentConfig,
        llm: Optional[LLM] = None,
        network: Optional[NetworkConfig] = None,
        sender: Optional[TransactionSender] = None,
        rng: Optional[random.Random] = None,
    ):
        super().__init__(config, llm=llm)
        self._network = network if network is not None else NetworkConfig()
        self._sender = sender if sender is not None else TransactionSessionQueue()
        self._rng = rng if rng is not None else random.Random()

    # ==================== 属性 ====================

    @property
    def risk_tolerance(self) -> str:
        return self._config.risk_tolerance

    @property
    def trading_strategy(self) -> str:
        return self._config.trading_strategy

    @property
    def max_slippage(self) -> float:
        return self._config.max_slippage

    @property
    def sender(self) -> TransactionSender:
        return self._sender

    # ==================== 动作 ====================

    @action(
        "swap",
        "Swap an amount of one token for another through the token-swap contract",
        parameters={
            "type": "object",
            "properties": {
                "from_token": {"type": "string", "description": "Token identifier to sell"},
                "to_token": {"type": "string", "description": "Token identifier to buy"},
                "amount": {"type": "string", "description": "Amount in the token's smallest unit"},
            },
            "required": ["from_token", "to_token", "amount"],
        },
        error_prefix="Error executing swap",
    )
    def swap(self, from_token: str, to_token: str, amount: Amount) -> ActionResult:
        value = parse_amount(amount)
        risk = self.assess_risk(from_token, to_token)
        if not self.is_within_risk_tolerance(risk):
            return ActionResult.fail(
                f"Swap does not meet risk criteria. Risk score: {risk.score}"
            )

        slippage = self.calculate_slippage(from_token, to_token, amount)
        if slippage > self.max_slippage:
            return ActionResult.fail(
                f"Slippage too high: {slippage}%. Maximum allowed: {self.max_slippage}%"
            )

        data = (
            ContractCallPayloadBuilder()
            .set_function("ESDTTransfer")
            .add_arg(from_token)
            .add_arg(value)
            .add_arg("swap")
            .add_arg(to_token)
            .build()
        )
        session_id = self._send(
            self._contract("token_swap"),
            data,
            TransactionDisplayInfo(
                processing_message="Processing swap transaction",
                error_message="An error has occurred during swap",
                success_message="Swap successful",
            ),
        )
        return ActionResult.ok(
            {"session_id": session_id}, "Swap transaction sent successfully"
        )

    @action(
        "add_liquidity",
        "Add liquidity for a token to the liquidity pool",
        parameters={
            "type": "object",
            "properties": {
                "token": {"type": "string"},
                "amount": {"type": "string"},
            },
            "required": ["token", "amount"],
        },
        error_prefix="Error adding liquidity",
    )
    def add_liquidity(self, token: str, amount: Amount) -> ActionResult:
        value = parse_amount(amount)
        data = (
            ContractCallPayloadBuilder()
            .set_function("ESDTTransfer")
            .add_arg(token)
            .add_arg(value)
            .add_arg("addLiquidity")
            .build()
        )
        session_id = self._send(
            self._contract("liquidity_pool"),
            data,
            TransactionDisplayInfo(
                processing_message="Adding liquidity",
                error_message="An error has occurred while adding liquidity",
                success_message="Liquidity added successfully",
            ),
        )
        return ActionResult.ok({"session_id": session_id}, "Liquidity added successfully")

    @action(
        "remove_liquidity",
        "Remove liquidity for a token from the liquidity pool",
        parameters={
            "type": "object",
            "properties": {
                "token": {"type": "string"},
                "amount": {"type": "string"},
            },
            "required": ["token", "amount"],
        },
        error_prefix="Error removing liquidity",
    )
    def remove_liquidity(self, token: str, amount: Amount) -> ActionResult:
        value = parse_amount(amount)
        data = (
            ContractCallPayloadBuilder()
            .set_function("removeLiquidity")
            .add_arg(token)
            .add_arg(value)
            .build()
        )
        session_id = self._send(
            self._contract("liquidity_pool"),
            data,
            TransactionDisplayInfo(
                processing_message="Removing liquidity",
                error_message="An error has occurred while removing liquidity",
                success_message="Liquidity removed successfully",
            ),
        )
        return ActionResult.ok(
            {"session_id": session_id}, "Liquidity removed successfully"
        )

    @action(
        "analyze_market",
        "Analyze current market conditions for a token",
        parameters={
            "type": "object",
            "properties": {"token": {"type": "string"}},
            "required": ["token"],
        },
        error_prefix="Error analyzing market",
    )
    def analyze_market(self, token: str) -> ActionResult:
        analysis = self.ask(
            f"You are a DeFi market analyst. Analyze the current market conditions for {token} and provide insights.",
            f"Provide a detailed market analysis for {token} including price trends, volume, and potential risks and opportunities.",
            fallback="Could not generate market analysis.",
        )
        return ActionResult.ok({"analysis": analysis})

    @action(
        "suggest_trade",
        "Suggest trades for a portfolio based on the agent's strategy",
        parameters={
            "type": "object",
            "properties": {
                "portfolio": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {
                            "token": {"type": "string"},
                            "amount": {"type": "number"},
                            "value": {"type": "number"},
                        },
                    },
                }
            },
            "required": ["portfolio"],
        },
        error_prefix="Error suggesting trades",
    )
    def suggest_trade(self, portfolio: List[Dict[str, Any]]) -> ActionResult:
        portfolio_text = "\n".join(
            f"{item['token']}: {item['amount']} (Value: ${item['value']})"
            for item in portfolio
        )
        suggestions = self.ask(
            f"You are a DeFi trading advisor with a {self.trading_strategy} strategy and "
            f"{self.risk_tolerance} risk tolerance. Suggest optimal trades for the user's portfolio.",
            f"Here is my current portfolio:\n{portfolio_text}\n\n"
            "What trades would you suggest to optimize my portfolio based on current market conditions?",
            fallback="Could not generate trade suggestions.",
        )
        return ActionResult.ok({"suggestions": suggestions})

    # ==================== 风险与滑点 ====================

    def assess_risk(self, from_token: str, to_token: str) -> RiskAssessment:
        """风险评估（随机桩）"""
        return RiskAssessment(score=self._rng.random() * 10, factors=list(RISK_FACTORS))

    def is_within_risk_tolerance(self, risk: RiskAssessment) -> bool:
        threshold = RISK_THRESHOLDS.get(self.risk_tolerance)
        if threshold is None:
            return False
        return risk.score < threshold

    def calculate_slippage(self, from_token: str, to_token: str, amount: Amount) -> float:
        """滑点百分比（随机桩，[0, 5)）"""
        return self._rng.random() * 5

    # ==================== 内部方法 ====================

    def _contract(self, key: str) -> str:
        address = getattr(self._network.contracts, key, "")
        if not address:
            raise ConfigurationError(f"{key} contract address is not configured")
        return address

    def _send(self, receiver: str, data: str, display_info: TransactionDisplayInfo) -> str:
        tx = Transaction(
            receiver=receiver,
            data=data,
            value="0",
            gas_limit=CONTRACT_CALL_GAS_LIMIT,
            chain_id=self._network.chain_id,
        )
        session_id = self._sender.send(tx, display_info)
        logger.info(f"[{self.name}] 交易已提交: {data.split('@', 1)[0]} -> {receiver}, session={session_id}")
        return session_id
