# -*- coding: utf-8 -*-
"""
MultiversX 网络配置

按环境（devnet / testnet / mainnet）提供默认地址，可通过环境变量覆盖。
"""

import os
from dataclasses import dataclass, field, replace
from typing import Dict

ENVIRONMENTS = ("devnet", "testnet", "mainnet")

_CHAIN_IDS: Dict[str, str] = {"devnet": "D", "testnet": "T", "mainnet": "1"}


def _prefixed(env: str, service: str) -> str:
    """mainnet 无前缀，其余环境为 https://<env>-<service>.multiversx.com"""
    if env == "mainnet":
        return f"https://{service}.multiversx.com"
    return f"https://{env}-{service}.multiversx.com"


def api_endpoint(env: str) -> str:
    """环境对应的 API 地址"""
    return _prefixed(env, "api")


@dataclass
class ContractsConfig:
    """dApp 使用的合约地址"""

    token_swap: str = ""
    liquidity_pool: str = ""


@dataclass
class DAppConfig:
    """dApp 元信息"""

    name: str = "MultiversX DeFi"
    description: str = "A comprehensive DeFi platform on MultiversX"
    url: str = "http://localhost:3000"


@dataclass
class NetworkConfig:
    """网络配置"""

    environment: str = "devnet"
    api_url: str = _prefixed("devnet", "api")
    gateway_url: str = _prefixed("devnet", "gateway")
    explorer_url: str = _prefixed("devnet", "explorer")
    chain_id: str = "D"
    egld_label: str = "xEGLD"
    decimals: int = 18
    gas_price: int = 1_000_000_000
    gas_limit: int = 50_000
    gas_per_data_byte: int = 1_500

    contracts: ContractsConfig = field(default_factory=ContractsConfig)
    dapp: DAppConfig = field(default_factory=DAppConfig)

    @classmethod
    def for_environment(cls, env: str) -> "NetworkConfig":
        """按环境生成默认配置"""
        if env not in ENVIRONMENTS:
            raise ValueError(
                f"Invalid environment: {env}. Valid environments are: {', '.join(ENVIRONMENTS)}"
            )
        return cls(
            environment=env,
            api_url=_prefixed(env, "api"),
            gateway_url=_prefixed(env, "gateway"),
            explorer_url=_prefixed(env, "explorer"),
            chain_id=_CHAIN_IDS[env],
            egld_label="EGLD" if env == "mainnet" else "xEGLD",
        )

    @classmethod
    def from_env(cls) -> "NetworkConfig":
        """从环境变量加载配置"""
        config = cls.for_environment(os.getenv("MULTIVERSX_ENV", "devnet"))

        config.api_url = os.getenv("MULTIVERSX_API", config.api_url)
        config.gateway_url = os.getenv("MULTIVERSX_GATEWAY", config.gateway_url)
        config.explorer_url = os.getenv("MULTIVERSX_EXPLORER", config.explorer_url)

        config.contracts = replace(
            config.contracts,
            token_swap=os.getenv("TOKEN_SWAP_CONTRACT", config.contracts.token_swap),
            liquidity_pool=os.getenv(
                "LIQUIDITY_POOL_CONTRACT", config.contracts.liquidity_pool
            ),
        )
        config.dapp = replace(
            config.dapp,
            name=os.getenv("DAPP_NAME", config.dapp.name),
            description=os.getenv("DAPP_DESCRIPTION", config.dapp.description),
            url=os.getenv("DAPP_URL", config.dapp.url),
        )
        return config
