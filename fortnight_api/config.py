# -*- coding: utf-8 -*-
"""
API 配置模块

集中管理 API 服务的所有配置项。
"""

import os
from dataclasses import dataclass, field
from typing import Optional

from fortnight.chain import NetworkConfig
from fortnight.core import LLM


@dataclass
class ServerConfig:
    """服务器配置"""

    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    workers: int = 1


@dataclass
class LLMConfig:
    """Chat Completion 配置"""

    base_url: str = LLM.DEFAULT_BASE_URL
    api_key: str = ""
    model: str = LLM.DEFAULT_MODEL
    timeout: float = 60.0


@dataclass
class APIConfig:
    """API 全局配置"""

    # 服务器配置
    server: ServerConfig = field(default_factory=ServerConfig)

    # LLM 配置
    llm: LLMConfig = field(default_factory=LLMConfig)

    # MultiversX 网络配置
    network: NetworkConfig = field(default_factory=NetworkConfig)

    # 启动时加载的 Agent 定义目录（为空则不加载）
    agent_definitions_dir: Optional[str] = None

    @classmethod
    def from_env(cls) -> "APIConfig":
        """从环境变量加载配置"""
        config = cls()

        # 服务器配置
        config.server.host = os.getenv("API_HOST", config.server.host)
        config.server.port = int(os.getenv("API_PORT", config.server.port))
        config.server.debug = os.getenv("API_DEBUG", "false").lower() == "true"
        config.server.workers = int(os.getenv("API_WORKERS", config.server.workers))

        # LLM 配置
        config.llm.base_url = os.getenv("LLM_BASE_URL", config.llm.base_url)
        config.llm.api_key = os.getenv("OPENAI_API_KEY", config.llm.api_key)
        config.llm.model = os.getenv("LLM_MODEL", config.llm.model)
        config.llm.timeout = float(os.getenv("LLM_TIMEOUT", config.llm.timeout))

        # 网络配置
        config.network = NetworkConfig.from_env()

        config.agent_definitions_dir = os.getenv("AGENT_DEFINITIONS_DIR") or None

        return config


# 全局配置实例
settings = APIConfig.from_env()
