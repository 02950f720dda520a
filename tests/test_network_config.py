"""
Tests for NetworkConfig environment handling.
"""

import pytest

from fortnight.chain import NetworkConfig, api_endpoint


@pytest.mark.parametrize(
    "env, api, chain_id, label",
    [
        ("devnet", "https://devnet-api.multiversx.com", "D", "xEGLD"),
        ("testnet", "https://testnet-api.multiversx.com", "T", "xEGLD"),
        ("mainnet", "https://api.multiversx.com", "1", "EGLD"),
    ],
)
def test_for_environment(env, api, chain_id, label):
    config = NetworkConfig.for_environment(env)

    assert config.environment == env
    assert config.api_url == api == api_endpoint(env)
    assert config.chain_id == chain_id
    assert config.egld_label == label


def test_mainnet_gateway_has_no_prefix():
    config = NetworkConfig.for_environment("mainnet")

    assert config.gateway_url == "https://gateway.multiversx.com"
    assert config.explorer_url == "https://explorer.multiversx.com"


def test_invalid_environment():
    with pytest.raises(ValueError, match="Invalid environment: localnet"):
        NetworkConfig.for_environment("localnet")


def test_defaults_are_devnet():
    config = NetworkConfig()

    assert config.environment == "devnet"
    assert config.chain_id == "D"
    assert config.contracts.token_swap == ""
    assert config.gas_limit == 50_000


def test_from_env(monkeypatch):
    monkeypatch.setenv("MULTIVERSX_ENV", "testnet")
    monkeypatch.setenv("MULTIVERSX_GATEWAY", "http://localhost:7950")
    monkeypatch.setenv("TOKEN_SWAP_CONTRACT", "erd1swap")
    monkeypatch.setenv("DAPP_NAME", "Fortnight")
    monkeypatch.delenv("LIQUIDITY_POOL_CONTRACT", raising=False)
    monkeypatch.delenv("MULTIVERSX_API", raising=False)

    config = NetworkConfig.from_env()

    assert config.environment == "testnet"
    assert config.chain_id == "T"
    assert config.api_url == "https://testnet-api.multiversx.com"
    assert config.gateway_url == "http://localhost:7950"
    assert config.contracts.token_swap == "erd1swap"
    assert config.contracts.liquidity_pool == ""
    assert config.dapp.name == "Fortnight"


def test_from_env_rejects_bad_environment(monkeypatch):
    monkeypatch.setenv("MULTIVERSX_ENV", "prod")

    with pytest.raises(ValueError):
        NetworkConfig.from_env()
