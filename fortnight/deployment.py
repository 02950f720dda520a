# -*- coding: utf-8 -*-
"""
Agent 定义与部署描述文件

- agents/custom/<Name>.json: {name, type, config}，注册中心可加载
- deployments/<env>/<Name>.json: 静态部署描述，运行时不读取
"""

import json
import logging
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Union

from fortnight.agents import AGENT_TYPES
from fortnight.agents.sentiment.config import (
    DEFAULT_CAPABILITIES as SENTIMENT_CAPABILITIES,
    DEFAULT_DATA_SOURCES,
    DEFAULT_GOALS as SENTIMENT_GOALS,
    DEFAULT_PERSONALITY as SENTIMENT_PERSONALITY,
    DEFAULT_UPDATE_FREQUENCY,
)
from fortnight.agents.trading.config import (
    DEFAULT_CAPABILITIES as TRADING_CAPABILITIES,
    DEFAULT_GOALS as TRADING_GOALS,
    DEFAULT_MAX_SLIPPAGE,
    DEFAULT_PERSONALITY as TRADING_PERSONALITY,
)
from fortnight.chain import ENVIRONMENTS, api_endpoint

logger = logging.getLogger(__name__)

DEFAULT_AGENTS_DIR = Path("agents") / "custom"
DEFAULT_DEPLOYMENTS_DIR = Path("deployments")

PathLike = Union[str, Path]


def file_stem(name: str) -> str:
    """
    文件名去掉名称中的空白

    Raises:
        ValueError: 名称包含路径分隔符，或去掉空白后为空 / 只有点号
    """
    if "/" in name or "\\" in name:
        raise ValueError(f"Agent name must not contain path separators: {name}")
    stem = re.sub(r"\s+", "", name)
    if not stem.strip("."):
        raise ValueError(f"Invalid agent name: {name!r}")
    return stem


def default_agent_config(agent_type: str) -> Dict[str, Any]:
    """定义文件中写入的默认配置"""
    if agent_type == "trading":
        return {
            "description": "A custom trading agent for MultiversX DeFi",
            "goals": list(TRADING_GOALS),
            "capabilities": list(TRADING_CAPABILITIES),
            "personality": TRADING_PERSONALITY,
            "risk_tolerance": "medium",
            "trading_strategy": "balanced",
            "max_slippage": DEFAULT_MAX_SLIPPAGE,
        }
    if agent_type == "sentiment":
        return {
            "description": "A custom sentiment analysis agent for MultiversX DeFi",
            "goals": list(SENTIMENT_GOALS),
            "capabilities": list(SENTIMENT_CAPABILITIES),
            "personality": SENTIMENT_PERSONALITY,
            "data_sources": list(DEFAULT_DATA_SOURCES),
            "update_frequency": DEFAULT_UPDATE_FREQUENCY,
        }
    raise ValueError(f"Invalid agent type. Valid types are: {', '.join(AGENT_TYPES)}")


def definition_path(name: str, agents_dir: PathLike = DEFAULT_AGENTS_DIR) -> Path:
    return Path(agents_dir) / f"{file_stem(name)}.json"


def create_agent_definition(
    name: str, agent_type: str, agents_dir: PathLike = DEFAULT_AGENTS_DIR
) -> Path:
    """
    写入 Agent 定义文件

    Raises:
        ValueError: 名称为空、包含路径分隔符或类型非法
        FileExistsError: 定义文件已存在
    """
    if not name or not name.strip():
        raise ValueError("Agent name is required")
    config = default_agent_config(agent_type)

    path = definition_path(name, agents_dir)
    if path.exists():
        raise FileExistsError(f"Agent file {path.name} already exists")

    path.parent.mkdir(parents=True, exist_ok=True)
    definition = {"name": name, "type": agent_type, "config": config}
    path.write_text(json.dumps(definition, indent=2), encoding="utf-8")

    logger.info(f"已创建 Agent 定义: {path}")
    return path


def load_agent_definition(name: str, agents_dir: PathLike = DEFAULT_AGENTS_DIR) -> Dict[str, Any]:
    """读取 Agent 定义文件（不存在抛 FileNotFoundError）"""
    path = definition_path(name, agents_dir)
    if not path.exists():
        raise FileNotFoundError(f"Agent file {path.name} does not exist")
    return json.loads(path.read_text(encoding="utf-8"))


def build_deployment_config(
    name: str, agent_type: str, environment: str, now: Optional[datetime] = None
) -> Dict[str, Any]:
    """部署描述内容"""
    if environment not in ENVIRONMENTS:
        raise ValueError(
            f"Invalid environment. Valid environments are: {', '.join(ENVIRONMENTS)}"
        )
    now = now or datetime.now(timezone.utc)
    return {
        "name": name,
        "type": agent_type,
        "environment": environment,
        "timestamp": now.isoformat().replace("+00:00", "Z"),
        "config": {
            "api_endpoint": api_endpoint(environment),
            "update_frequency": 30,
            "auto_restart": True,
            "log_level": "info",
        },
    }


def deploy_agent(
    name: str,
    environment: str,
    agents_dir: PathLike = DEFAULT_AGENTS_DIR,
    output_dir: PathLike = DEFAULT_DEPLOYMENTS_DIR,
) -> Path:
    """
    写入部署描述文件 deployments/<env>/<Name>.json

    Raises:
        ValueError: 环境或名称非法
        FileNotFoundError: Agent 定义不存在
    """
    if environment not in ENVIRONMENTS:
        raise ValueError(
            f"Invalid environment. Valid environments are: {', '.join(ENVIRONMENTS)}"
        )
    definition = load_agent_definition(name, agents_dir)
    deployment = build_deployment_config(
        name, definition.get("type", "unknown"), environment
    )

    path = Path(output_dir) / environment / f"{file_stem(name)}.json"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(deployment, indent=2), encoding="utf-8")

    logger.info(f"已写入部署配置: {path}")
    return path
