"""
Tests for the HTTP API.

The global service is replaced through dependency_overrides with one wired
to the mocked chat-completion endpoint and a mocked gateway.
"""

import json

import httpx
import pytest
from conftest import fixed_rng
from fastapi.testclient import TestClient

from fortnight.chain import ContractsConfig, NetworkConfig
from fortnight.client import GatewayClient
from fortnight_api.config import APIConfig
from fortnight_api.main import app
from fortnight_api.service import AgentService, get_agent_service

PREFIX = "/api/v1"


def gateway_handler(request: httpx.Request) -> httpx.Response:
    if request.url.path == "/network/config":
        return httpx.Response(200, json={"data": {"config": {"erd_chain_id": "D"}}, "code": "successful"})
    if request.url.path == "/address/erd1abc":
        return httpx.Response(200, json={"data": {"account": {"nonce": 3}}, "code": "successful"})
    if request.url.path == "/address/erd1abc/esdt/MEX-455c57":
        return httpx.Response(200, json={"data": {"tokenData": {"balance": "42"}}, "code": "successful"})
    if request.url.path == "/tokens/MEX-455c57":
        return httpx.Response(200, json={"identifier": "MEX-455c57"})
    return httpx.Response(404, json={"data": None, "error": "not found", "code": "bad_request"})


@pytest.fixture
def service(llm):
    network = NetworkConfig.for_environment("devnet")
    network.contracts = ContractsConfig(token_swap="erd1swapcontract", liquidity_pool="erd1poolcontract")
    config = APIConfig(network=network)
    gateway = GatewayClient(
        network.gateway_url, network.api_url, transport=httpx.MockTransport(gateway_handler)
    )
    svc = AgentService(config=config, llm=llm, gateway=gateway)
    svc.initialize()
    yield svc
    svc.shutdown()


@pytest.fixture
def client(service):
    app.dependency_overrides[get_agent_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()


def create(client, name="Trader", agent_type="trading", config=None):
    return client.post(
        f"{PREFIX}/agents", json={"name": name, "type": agent_type, "config": config or {}}
    )


# ============================================================================
# System
# ============================================================================


def test_health(client):
    create(client)

    data = client.get(f"{PREFIX}/health").json()

    assert data["status"] == "ok"
    assert data["environment"] == "devnet"
    assert data["agents"] == 1


def test_root(client):
    assert client.get("/").json()["health"] == "/api/v1/health"


# ============================================================================
# Agents
# ============================================================================


def test_create_agent(client):
    response = create(client, config={"risk_tolerance": "low"})

    assert response.status_code == 201
    data = response.json()
    assert data["name"] == "Trader"
    assert data["type"] == "trading"
    assert data["description"] == "A trading agent for MultiversX DeFi"
    assert "swap" in [a["name"] for a in data["actions"]]
    assert data["message_count"] == 0


def test_create_duplicate_is_conflict(client):
    create(client)

    response = create(client, agent_type="sentiment", config={"auto_refresh": False})

    assert response.status_code == 409
    assert response.json()["detail"] == "Agent with name Trader already exists"


@pytest.mark.parametrize(
    "agent_type, config",
    [
        ("arbitrage", {}),
        ("trading", {"risk_tolerance": "reckless"}),
        ("sentiment", {"update_frequency": -1}),
        ("sentiment", {"auto_refresh": "false"}),
    ],
)
def test_create_invalid_is_bad_request(client, agent_type, config):
    response = create(client, agent_type=agent_type, config=config)

    assert response.status_code == 400


def test_create_requires_name(client):
    response = client.post(f"{PREFIX}/agents", json={"name": "", "type": "trading"})

    assert response.status_code == 422


def test_list_get_delete(client):
    create(client)
    create(client, name="Mood", agent_type="sentiment", config={"auto_refresh": False})

    listing = client.get(f"{PREFIX}/agents").json()
    assert listing["total"] == 2
    assert listing["agents"] == [
        {"name": "Trader", "type": "trading"},
        {"name": "Mood", "type": "sentiment"},
    ]

    assert client.get(f"{PREFIX}/agents/Mood").json()["type"] == "sentiment"
    assert client.delete(f"{PREFIX}/agents/Mood").json()["success"] is True
    assert client.get(f"{PREFIX}/agents/Mood").status_code == 404
    assert client.delete(f"{PREFIX}/agents/Mood").status_code == 404


# ============================================================================
# Chat
# ============================================================================


def test_chat_and_history(client, chat_server):
    create(client)
    chat_server.reply("EGLD is the native token.")

    response = client.post(f"{PREFIX}/agents/Trader/chat", json={"message": "What is EGLD?"})

    assert response.status_code == 200
    assert response.json()["success"] is True
    assert response.json()["answer"] == "EGLD is the native token."

    history = client.get(f"{PREFIX}/agents/Trader/history").json()
    assert history["total_messages"] == 2
    assert history["messages"] == [
        {"role": "user", "content": "What is EGLD?"},
        {"role": "assistant", "content": "EGLD is the native token."},
    ]


def test_chat_llm_failure_is_reported(client, chat_server):
    create(client)
    chat_server.reply(httpx.Response(500, json={"error": {"message": "upstream down"}}))

    response = client.post(f"{PREFIX}/agents/Trader/chat", json={"message": "Hi"})

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is False
    assert "upstream down" in data["error"]


def test_chat_unknown_agent(client):
    response = client.post(f"{PREFIX}/agents/Nobody/chat", json={"message": "Hi"})

    assert response.status_code == 404


# ============================================================================
# Actions and transactions
# ============================================================================


def test_swap_action_creates_pending_session(client, service):
    create(client)
    service.registry.get("Trader")._rng = fixed_rng(0.125, 0.5)

    response = client.post(
        f"{PREFIX}/agents/Trader/actions/swap",
        json={"params": {"from_token": "WEGLD-bd4d79", "to_token": "MEX-455c57", "amount": "1000"}},
    )

    data = response.json()
    assert data["success"] is True
    assert data["message"] == "Swap transaction sent successfully"
    session_id = data["session_id"]

    pending = client.get(f"{PREFIX}/transactions", params={"pending": True}).json()
    assert [s["session_id"] for s in pending["sessions"]] == [session_id]

    session = client.get(f"{PREFIX}/transactions/{session_id}").json()
    assert session["transactions"][0]["receiver"] == "erd1swapcontract"
    assert session["transactions"][0]["data"].startswith("ESDTTransfer@")

    marked = client.post(f"{PREFIX}/transactions/{session_id}/status", json={"status": "signed"})
    assert marked.json()["success"] is True
    assert client.get(f"{PREFIX}/transactions", params={"pending": True}).json()["total"] == 0
    assert client.get(f"{PREFIX}/transactions").json()["sessions"][0]["status"] == "signed"


def test_action_failure_is_ok_response(client, service):
    create(client)
    service.registry.get("Trader")._rng = fixed_rng(0.75)

    response = client.post(
        f"{PREFIX}/agents/Trader/actions/swap",
        json={"params": {"from_token": "A", "to_token": "B", "amount": "1"}},
    )

    assert response.status_code == 200
    assert response.json() == {
        "success": False,
        "message": "Swap does not meet risk criteria. Risk score: 7.5",
    }


def test_sentiment_action(client, chat_server):
    create(client, name="Mood", agent_type="sentiment", config={"auto_refresh": False})
    chat_server.reply(json.dumps({"overall_sentiment": "negative", "score": -0.4, "sources": []}))

    data = client.post(
        f"{PREFIX}/agents/Mood/actions/analyze_sentiment", json={"params": {"token": "MEX"}}
    ).json()

    assert data["success"] is True
    assert data["token"] == "MEX"
    assert data["overall_sentiment"] == "negative"
    assert data["score"] == -0.4


def test_unknown_action_is_bad_request(client):
    create(client)

    response = client.post(f"{PREFIX}/agents/Trader/actions/bridge", json={"params": {}})

    assert response.status_code == 400
    assert response.json()["detail"] == "Unknown action: bridge"


def test_action_on_unknown_agent(client):
    response = client.post(f"{PREFIX}/agents/Nobody/actions/swap", json={"params": {}})

    assert response.status_code == 404


def test_transaction_errors(client, service):
    assert client.get(f"{PREFIX}/transactions/missing").status_code == 404
    assert (
        client.post(f"{PREFIX}/transactions/missing/status", json={"status": "signed"}).status_code
        == 404
    )

    create(client)
    session_id = client.post(
        f"{PREFIX}/agents/Trader/actions/add_liquidity",
        json={"params": {"token": "WEGLD-bd4d79", "amount": "1"}},
    ).json()["session_id"]

    response = client.post(f"{PREFIX}/transactions/{session_id}/status", json={"status": "mined"})
    assert response.status_code == 400


# ============================================================================
# Chain queries
# ============================================================================


def test_chain_network(client):
    data = client.get(f"{PREFIX}/chain/network").json()

    assert data["success"] is True
    assert data["data"]["local"]["chain_id"] == "D"
    assert data["data"]["local"]["contracts"]["token_swap"] == "erd1swapcontract"
    assert data["data"]["gateway"] == {"erd_chain_id": "D"}


def test_chain_account_and_tokens(client):
    assert client.get(f"{PREFIX}/chain/accounts/erd1abc").json()["data"] == {"nonce": 3}
    assert client.get(f"{PREFIX}/chain/accounts/erd1abc/tokens/MEX-455c57").json()["data"] == {
        "balance": "42"
    }
    assert client.get(f"{PREFIX}/chain/tokens/MEX-455c57").json()["data"] == {
        "identifier": "MEX-455c57"
    }


def test_chain_gateway_error_is_bad_gateway(client):
    response = client.get(f"{PREFIX}/chain/accounts/erd1missing")

    assert response.status_code == 502
    assert "not found" in response.json()["detail"]
