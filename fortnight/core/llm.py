# -*- coding: utf-8 -*-
"""
Agent 核心 LLM 模块

封装 ChatCompletionClient，为 Agent 提供简单易用的 LLM 调用接口。
注：对话历史管理由各 Agent 自行负责。

使用示例：
    ```python
    from fortnight.core import LLM, Message

    llm = LLM(api_key="sk-...")
    response = llm.chat([Message.system("You are a DeFi analyst."), Message.user("Hi")])
    print(response.content)
    ```
"""

import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from fortnight.client import ChatCompletionClient

logger = logging.getLogger(__name__)


# ============================================================================
# 数据类
# ============================================================================


@dataclass
class Message:
    """对话消息"""

    role: str
    content: str = ""
    name: Optional[str] = None

    def to_dict(self) -> Dict:
        """转换为字典"""
        d = {"role": self.role, "content": self.content}
        if self.name:
            d["name"] = self.name
        return d

    @classmethod
    def system(cls, content: str) -> "Message":
        return cls(role="system", content=content)

    @classmethod
    def user(cls, content: str) -> "Message":
        return cls(role="user", content=content)

    @classmethod
    def assistant(cls, content: str) -> "Message":
        return cls(role="assistant", content=content)


@dataclass
class LLMResponse:
    """LLM 响应结果"""

    content: Optional[str] = None
    finish_reason: Optional[str] = None
    usage: Optional[Dict[str, int]] = None
    raw_response: Any = None

    def __str__(self) -> str:
        return self.content or ""


# ============================================================================
# LLM 核心类
# ============================================================================


class LLM:
    """Agent 核心 LLM 调用类"""

    DEFAULT_MODEL = "gpt-4-turbo"
    DEFAULT_BASE_URL = ChatCompletionClient.DEFAULT_BASE_URL

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        api_key: str = "",
        model: str = DEFAULT_MODEL,
        timeout: float = 60.0,
        client: Optional[ChatCompletionClient] = None,
    ):
        self._base_url = base_url
        self._api_key = api_key
        self._model = model
        self._timeout = timeout
        self._client = client
        self._client_lock = threading.Lock()

    @property
    def client(self) -> ChatCompletionClient:
        with self._client_lock:
            if self._client is None:
                self._client = ChatCompletionClient(
                    base_url=self._base_url, api_key=self._api_key, timeout=self._timeout
                )
        return self._client

    @property
    def model(self) -> str:
        return self._model

    @model.setter
    def model(self, value: str):
        self._model = value

    def chat(
        self,
        messages: Union[str, Message, List[Union[Dict, Message]]],
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        response_format: Optional[str] = None,
        timeout: Optional[float] = None,
        **kwargs,
    ) -> LLMResponse:
        """发送对话请求（非流式）"""
        msg_list = self._to_msg_list(messages)

        response = self.client.chat_completion(
            model=model or self._model,
            messages=msg_list,
            temperature=temperature,
            max_tokens=max_tokens,
            response_format=response_format,
            timeout=timeout or self._timeout,
            **kwargs,
        )
        return self._parse_response(response)

    def _to_msg_list(
        self, messages: Union[str, Message, List[Union[Dict, Message]]]
    ) -> List[Dict]:
        """标准化消息格式"""
        if isinstance(messages, str):
            return [{"role": "user", "content": messages}]
        if isinstance(messages, Message):
            return [messages.to_dict()]
        return [m.to_dict() if isinstance(m, Message) else m for m in messages]

    def _parse_response(self, response: Dict[str, Any]) -> LLMResponse:
        """解析 Chat Completion 响应"""
        choices = response.get("choices") or []
        if not choices:
            return LLMResponse(raw_response=response)

        choice = choices[0]
        msg = choice.get("message") or {}

        usage = None
        raw_usage = response.get("usage") or {}
        if raw_usage.get("total_tokens", 0) > 0:
            usage = {
                "prompt_tokens": raw_usage.get("prompt_tokens", 0),
                "completion_tokens": raw_usage.get("completion_tokens", 0),
                "total_tokens": raw_usage["total_tokens"],
            }

        return LLMResponse(
            content=msg.get("content") or None,
            finish_reason=choice.get("finish_reason"),
            usage=usage,
            raw_response=response,
        )

    def close(self):
        if self._client:
            self._client.close()
            self._client = None

    def __enter__(self) -> "LLM":
        return self

    def __exit__(self, *args):
        self.close()

    def __repr__(self) -> str:
        return f"LLM(base_url={self._base_url!r}, model={self._model!r})"

