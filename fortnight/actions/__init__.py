# -*- coding: utf-8 -*-
"""
动作模块

提供 Agent 动作声明与分发的基础设施。
"""

from .base import (
    Action,
    ActionResult,
    ActionSet,
    ActionSpec,
    action,
)

__all__ = [
    "Action",
    "ActionResult",
    "ActionSet",
    "ActionSpec",
    "action",
]
