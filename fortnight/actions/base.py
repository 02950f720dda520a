# -*- coding: utf-8 -*-
"""
动作（Action）基础设施

Agent 通过 @action 装饰器声明可执行的动作，由 ActionSet 统一分发。

使用示例：
    ```python
    from fortnight.actions import ActionResult, ActionSet, action

    class PriceAgent:
        @action(
            "get_price",
            "Return the latest price of a token",
            parameters={
                "type": "object",
                "properties": {"token": {"type": "string"}},
                "required": ["token"],
            },
        )
        def get_price(self, token: str) -> ActionResult:
            return ActionResult.ok({"token": token, "price": 1.0})

    actions = ActionSet.from_object(PriceAgent())
    result = actions.execute("get_price", {"token": "EGLD"})
    ```
"""

import inspect
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

logger = logging.getLogger(__name__)

ACTION_SPEC_ATTR = "__action_spec__"


# ============================================================================
# 动作执行结果
# ============================================================================


@dataclass
class ActionResult:
    """动作执行结果"""

    success: bool
    data: Any = None
    message: Optional[str] = None

    @classmethod
    def ok(cls, data: Any = None, message: Optional[str] = None) -> "ActionResult":
        return cls(success=True, data=data, message=message)

    @classmethod
    def fail(cls, message: str) -> "ActionResult":
        return cls(success=False, message=message)

    def to_dict(self) -> Dict[str, Any]:
        """展开为 {success, message?, ...data}"""
        d: Dict[str, Any] = {"success": self.success}
        if self.data is not None:
            payload = self.data.to_dict() if hasattr(self.data, "to_dict") else self.data
            if isinstance(payload, dict):
                d.update(payload)
            else:
                d["data"] = payload
        if self.message is not None:
            d["message"] = self.message
        return d

    def __str__(self) -> str:
        if not self.success:
            return f"Error: {self.message}"
        try:
            return json.dumps(self.to_dict(), ensure_ascii=False, indent=2, default=str)
        except (TypeError, ValueError):
            return str(self.data)


# ============================================================================
# 动作声明
# ============================================================================


@dataclass(frozen=True)
class ActionSpec:
    """动作元信息（由 @action 附加到方法上）"""

    name: str
    description: str
    parameters: Dict[str, Any] = field(default_factory=dict)
    error_prefix: str = ""


def action(
    name: str,
    description: str,
    parameters: Optional[Dict[str, Any]] = None,
    error_prefix: Optional[str] = None,
) -> Callable[[Callable], Callable]:
    """将 Agent 方法声明为可分发的动作"""

    def decorator(func: Callable) -> Callable:
        spec = ActionSpec(
            name=name,
            description=description,
            parameters=parameters or {"type": "object", "properties": {}},
            error_prefix=error_prefix or f"Error executing {name}",
        )
        setattr(func, ACTION_SPEC_ATTR, spec)
        return func

    return decorator


# ============================================================================
# 绑定后的动作
# ============================================================================


class Action:
    """绑定到具体 Agent 实例的动作"""

    def __init__(self, spec: ActionSpec, handler: Callable[..., Any]):
        self._spec = spec
        self._handler = handler

    @property
    def name(self) -> str:
        return self._spec.name

    @property
    def description(self) -> str:
        return self._spec.description

    @property
    def parameters(self) -> Dict[str, Any]:
        return self._spec.parameters

    def execute(self, **kwargs) -> ActionResult:
        """执行动作（不捕获异常）"""
        result = self._handler(**kwargs)
        return result if isinstance(result, ActionResult) else ActionResult.ok(result)

    def safe_execute(self, **kwargs) -> ActionResult:
        """安全执行：参数错误与执行异常均转换为失败结果"""
        try:
            inspect.signature(self._handler).bind(**kwargs)
        except TypeError as e:
            logger.error(f"[{self.name}] 参数错误: {e}, 接收到的参数: {list(kwargs.keys())}")
            return ActionResult.fail(f"Invalid parameters for {self.name}: {e}")

        try:
            logger.info(f"[{self.name}] 接收参数: {list(kwargs.keys())}")
            return self.execute(**kwargs)
        except Exception as e:
            logger.error(f"[{self.name}] 执行失败: {e}", exc_info=True)
            return ActionResult.fail(f"{self._spec.error_prefix}: {e}")

    def to_schema(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "parameters": self.parameters,
        }

    def __repr__(self) -> str:
        return f"Action({self.name})"


# ============================================================================
# 动作集
# ============================================================================


class ActionSet:
    """动作集管理器"""

    def __init__(self, actions: Optional[List[Action]] = None):
        self._actions: Dict[str, Action] = {}
        for item in actions or []:
            self.register(item)

    @classmethod
    def from_object(cls, obj: Any) -> "ActionSet":
        """收集对象上所有 @action 方法（按类定义顺序，子类覆盖父类）"""
        specs: Dict[str, Tuple[str, ActionSpec]] = {}
        for klass in reversed(type(obj).__mro__):
            for attr, value in vars(klass).items():
                spec = getattr(value, ACTION_SPEC_ATTR, None)
                if isinstance(spec, ActionSpec):
                    specs[spec.name] = (attr, spec)

        return cls([Action(spec, getattr(obj, attr)) for attr, spec in specs.values()])

    def register(self, item: Action) -> "ActionSet":
        """注册动作"""
        self._actions[item.name] = item
        return self

    def get(self, name: str) -> Optional[Action]:
        """获取动作"""
        return self._actions.get(name)

    def execute(self, name: str, params: Optional[Dict[str, Any]] = None) -> ActionResult:
        """
        执行动作

        Raises:
            KeyError: 动作不存在（由调用方转换为业务异常）
        """
        item = self._actions[name]
        return item.safe_execute(**(params or {}))

    def get_schemas(self) -> List[Dict[str, Any]]:
        """获取所有动作描述"""
        return [a.to_schema() for a in self._actions.values()]

    @property
    def names(self) -> List[str]:
        return list(self._actions.keys())

    def __iter__(self) -> Iterator[Action]:
        return iter(self._actions.values())

    def __len__(self) -> int:
        return len(self._actions)

    def __contains__(self, name: str) -> bool:
        return name in self._actions

    def __repr__(self) -> str:
        return f"ActionSet({self.names})"
