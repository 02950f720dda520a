# -*- coding: utf-8 -*-
"""
异常定义

Agent 层的异常基类与注册中心、动作分发相关的异常。
客户端异常（LLM / Gateway）定义在 fortnight.client 中。
"""


class FortnightError(Exception):
    """Fortnight 异常基类"""

    pass


class ConfigurationError(FortnightError):
    """配置缺失或非法"""

    pass


class AgentExistsError(FortnightError):
    """同名 Agent 已存在"""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Agent with name {name} already exists")


class UnknownAgentTypeError(FortnightError):
    """未知的 Agent 类型"""

    def __init__(self, agent_type: str):
        self.agent_type = agent_type
        super().__init__(f"Unknown agent type: {agent_type}")


class UnknownActionError(FortnightError):
    """Agent 不支持的动作"""

    def __init__(self, action: str):
        self.action = action
        super().__init__(f"Unknown action: {action}")


class AgentNotFoundError(FortnightError):
    """Agent 不存在"""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Agent not found: {name}")
