"""
Tests for the trading agent's actions and risk checks.
"""

import httpx
import pytest
from conftest import fixed_rng
from hypothesis import given, settings
from hypothesis import strategies as st

from fortnight.agents.trading import (
    RISK_THRESHOLDS,
    RiskAssessment,
    TradingAgent,
    TradingAgentConfig,
    parse_amount,
)
from fortnight.chain import NetworkConfig, TransactionSessionQueue
from fortnight.errors import UnknownActionError


def hexs(text: str) -> str:
    return text.encode().hex()


@pytest.fixture
def make_agent(llm, network, queue):
    def factory(*rng_values, **config):
        return TradingAgent(
            TradingAgentConfig.from_dict("Trader", config),
            llm=llm,
            network=network,
            sender=queue,
            rng=fixed_rng(*rng_values),
        )

    return factory


# ============================================================================
# Configuration
# ============================================================================


def test_defaults():
    config = TradingAgentConfig.from_dict("Trader")

    assert config.description == "A trading agent for MultiversX DeFi"
    assert config.goals == ["Execute trades with optimal timing", "Minimize slippage", "Maximize returns"]
    assert config.capabilities == ["Token swaps", "Liquidity provision", "Market analysis"]
    assert config.personality == "Professional, cautious, and data-driven"
    assert config.risk_tolerance == "medium"
    assert config.trading_strategy == "balanced"
    assert config.max_slippage == 3


@pytest.mark.parametrize(
    "overrides",
    [
        {"risk_tolerance": "extreme"},
        {"trading_strategy": "yolo"},
        {"max_slippage": -1},
        {"max_slippage": "3"},
    ],
)
def test_invalid_config_raises(overrides):
    with pytest.raises(ValueError):
        TradingAgentConfig.from_dict("Trader", overrides)


def test_injected_empty_queue_is_kept(llm, network):
    queue = TransactionSessionQueue()
    assert len(queue) == 0

    agent = TradingAgent(TradingAgentConfig(name="Trader"), llm=llm, network=network, sender=queue)

    assert agent.sender is queue


# ============================================================================
# swap
# ============================================================================


def test_swap_queues_transaction(make_agent, queue):
    agent = make_agent(0.125, 0.5)  # risk 1.25, slippage 2.5

    result = agent.execute_action(
        "swap", {"from_token": "WEGLD-bd4d79", "to_token": "MEX-455c57", "amount": "1000"}
    )

    assert result.success
    assert result.message == "Swap transaction sent successfully"
    session = queue.get(result.data["session_id"])
    tx = session.transactions[0]
    assert tx.receiver == "erd1swapcontract"
    assert tx.value == "0"
    assert tx.gas_limit == 60_000_000
    assert tx.chain_id == "D"
    assert tx.data == "@".join(
        ["ESDTTransfer", hexs("WEGLD-bd4d79"), "03e8", hexs("swap"), hexs("MEX-455c57")]
    )
    assert session.display_info.success_message == "Swap successful"


def test_swap_rejected_by_risk(make_agent, queue):
    agent = make_agent(0.75)  # risk 7.5 >= medium threshold

    result = agent.execute_action("swap", {"from_token": "A", "to_token": "B", "amount": 1})

    assert result.to_dict() == {
        "success": False,
        "message": "Swap does not meet risk criteria. Risk score: 7.5",
    }
    assert len(queue) == 0


def test_swap_rejected_by_slippage(make_agent, queue):
    agent = make_agent(0.125, 0.875)  # slippage 4.375 > 3

    result = agent.execute_action("swap", {"from_token": "A", "to_token": "B", "amount": 1})

    assert not result.success
    assert result.message == "Slippage too high: 4.375%. Maximum allowed: 3%"
    assert len(queue) == 0


def test_swap_without_contract_is_action_failure(llm, queue):
    agent = TradingAgent(
        TradingAgentConfig(name="Trader"),
        llm=llm,
        network=NetworkConfig(),
        sender=queue,
        rng=fixed_rng(0.0, 0.0),
    )

    result = agent.execute_action("swap", {"from_token": "A", "to_token": "B", "amount": 1})

    assert not result.success
    assert result.message.startswith("Error executing swap: ")
    assert "token_swap" in result.message


def test_swap_with_bad_amount_is_action_failure(make_agent):
    agent = make_agent(0.0, 0.0)

    result = agent.execute_action("swap", {"from_token": "A", "to_token": "B", "amount": "lots"})

    assert not result.success
    assert result.message.startswith("Error executing swap: ")


def test_swap_missing_parameter(make_agent):
    result = make_agent().execute_action("swap", {"from_token": "A"})

    assert not result.success
    assert result.message.startswith("Invalid parameters for swap")


@pytest.mark.parametrize("amount", [0.9, 1.5, True, False, -1, "1.5", "-3", "1e3", " 7", "abc", "", None])
def test_swap_rejects_non_integer_amounts(make_agent, queue, amount):
    agent = make_agent(0.0, 0.0)

    result = agent.execute_action("swap", {"from_token": "A", "to_token": "B", "amount": amount})

    assert not result.success
    assert result.message.startswith("Error executing swap: Invalid amount")
    assert len(queue) == 0


def test_swap_amount_rejected_before_risk_check(make_agent, queue):
    agent = make_agent()  # rng has no values: the stubs must not run

    result = agent.execute_action("swap", {"from_token": "A", "to_token": "B", "amount": 0.5})

    assert result.message.startswith("Error executing swap: Invalid amount")
    assert len(queue) == 0


@pytest.mark.parametrize("amount, expected", [("1000", 1000), ("0", 0), (0, 0), (10**30, 10**30)])
def test_parse_amount_accepts_integers(amount, expected):
    assert parse_amount(amount) == expected


@given(st.integers(min_value=0, max_value=10**40))
def test_parse_amount_accepts_any_digit_string(value):
    assert parse_amount(str(value)) == value


# ============================================================================
# Liquidity
# ============================================================================


def test_add_liquidity(make_agent, queue):
    result = make_agent().execute_action("add_liquidity", {"token": "WEGLD-bd4d79", "amount": "256"})

    assert result.success
    assert result.message == "Liquidity added successfully"
    tx = queue.get(result.data["session_id"]).transactions[0]
    assert tx.receiver == "erd1poolcontract"
    assert tx.data == f"ESDTTransfer@{hexs('WEGLD-bd4d79')}@0100@{hexs('addLiquidity')}"


def test_remove_liquidity(make_agent, queue):
    result = make_agent().execute_action("remove_liquidity", {"token": "WEGLD-bd4d79", "amount": 0})

    assert result.success
    assert result.message == "Liquidity removed successfully"
    tx = queue.get(result.data["session_id"]).transactions[0]
    assert tx.data == f"removeLiquidity@{hexs('WEGLD-bd4d79')}@00"
    assert tx.gas_limit == 60_000_000


@pytest.mark.parametrize(
    "action, prefix",
    [("add_liquidity", "Error adding liquidity"), ("remove_liquidity", "Error removing liquidity")],
)
@pytest.mark.parametrize("amount", [2.7, True, -5, "2.5", "ten"])
def test_liquidity_rejects_non_integer_amounts(make_agent, queue, action, prefix, amount):
    result = make_agent().execute_action(action, {"token": "WEGLD-bd4d79", "amount": amount})

    assert not result.success
    assert result.message.startswith(f"{prefix}: Invalid amount")
    assert len(queue) == 0


# ============================================================================
# LLM-backed actions
# ============================================================================


def test_analyze_market(make_agent, chat_server):
    chat_server.reply("EGLD looks stable.")

    result = make_agent().execute_action("analyze_market", {"token": "EGLD"})

    assert result.to_dict() == {"success": True, "analysis": "EGLD looks stable."}
    system, user = chat_server.last_messages
    assert system["content"].startswith("You are a DeFi market analyst.")
    assert "detailed market analysis for EGLD" in user["content"]


def test_analyze_market_fallback(make_agent, chat_server):
    chat_server.reply(None)

    result = make_agent().execute_action("analyze_market", {"token": "EGLD"})

    assert result.data["analysis"] == "Could not generate market analysis."


def test_analyze_market_error(make_agent, chat_server):
    chat_server.reply(httpx.Response(429, json={"error": {"message": "rate limited"}}))

    result = make_agent().execute_action("analyze_market", {"token": "EGLD"})

    assert not result.success
    assert result.message.startswith("Error analyzing market: ")
    assert "rate limited" in result.message


def test_suggest_trade(make_agent, chat_server):
    chat_server.reply("Rebalance into EGLD.")
    agent = make_agent(risk_tolerance="low", trading_strategy="conservative")

    result = agent.execute_action(
        "suggest_trade",
        {"portfolio": [{"token": "EGLD", "amount": 10, "value": 350}, {"token": "MEX", "amount": 5, "value": 1}]},
    )

    assert result.to_dict() == {"success": True, "suggestions": "Rebalance into EGLD."}
    system, user = chat_server.last_messages
    assert "conservative strategy and low risk tolerance" in system["content"]
    assert "EGLD: 10 (Value: $350)\nMEX: 5 (Value: $1)" in user["content"]


def test_suggest_trade_error_prefix(make_agent):
    result = make_agent().execute_action("suggest_trade", {"portfolio": [{"token": "EGLD"}]})

    assert not result.success
    assert result.message.startswith("Error suggesting trades: ")


def test_unknown_action(make_agent):
    with pytest.raises(UnknownActionError):
        make_agent().execute_action("bridge", {})


def test_declared_actions(make_agent):
    names = [a["name"] for a in make_agent().actions]

    assert sorted(names) == sorted(
        ["swap", "add_liquidity", "remove_liquidity", "analyze_market", "suggest_trade"]
    )


# ============================================================================
# Risk thresholds
# ============================================================================


@pytest.mark.parametrize(
    "tolerance, score, expected",
    [
        ("low", 2.99, True),
        ("low", 3.0, False),
        ("medium", 5.99, True),
        ("medium", 6.0, False),
        ("high", 8.99, True),
        ("high", 9.0, False),
    ],
)
def test_risk_threshold_boundaries(make_agent, tolerance, score, expected):
    agent = make_agent(risk_tolerance=tolerance)

    assert agent.is_within_risk_tolerance(RiskAssessment(score=score)) is expected


@given(
    tolerance=st.sampled_from(["low", "medium", "high"]),
    score=st.floats(min_value=0, max_value=10, exclude_max=True),
)
@settings(max_examples=100)
def test_risk_tolerance_property(tolerance, score):
    """
    A swap passes the risk check exactly when its score is strictly below
    the tolerance's threshold (3, 6, 9).
    """
    agent = TradingAgent(TradingAgentConfig(name="T", risk_tolerance=tolerance), llm=object())

    assert agent.is_within_risk_tolerance(RiskAssessment(score=score)) == (
        score < RISK_THRESHOLDS[tolerance]
    )


def test_stub_ranges(make_agent):
    agent = make_agent(0.999, 0.999)

    risk = agent.assess_risk("A", "B")
    slippage = agent.calculate_slippage("A", "B", "1")

    assert 0 <= risk.score < 10
    assert risk.factors == ["Token liquidity", "Price volatility", "Market cap", "Trading volume"]
    assert 0 <= slippage < 5
