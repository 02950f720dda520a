# -*- coding: utf-8 -*-
"""
Chat Completion HTTP 客户端

调用 OpenAI 兼容的 `POST {base_url}/chat/completions` 接口。
不做重试：失败直接抛出 LLMClientError 子类，由上层转换为用户可见的结果。
"""

import logging
import threading
from typing import Any, Dict, List, Optional

import httpx

logger = logging.getLogger(__name__)


class LLMClientError(Exception):
    """LLM 客户端异常基类"""

    pass


class LLMConnectionError(LLMClientError):
    """连接异常"""

    pass


class LLMRequestError(LLMClientError):
    """请求异常"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class ChatCompletionClient:
    """
    Chat Completion 客户端

    使用示例:
        ```python
        client = ChatCompletionClient("https://api.openai.com/v1", api_key="sk-...")

        response = client.chat_completion(
            model="gpt-4-turbo",
            messages=[
                {"role": "system", "content": "You are a DeFi assistant."},
                {"role": "user", "content": "Hello"},
            ],
        )
        print(response["choices"][0]["message"]["content"])
        ```
    """

    # 默认接口地址
    DEFAULT_BASE_URL = "https://api.openai.com/v1"

    # 默认超时时间（秒）
    DEFAULT_TIMEOUT = 60.0

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        api_key: str = "",
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        初始化客户端

        Args:
            base_url: 接口根地址，如 "https://api.openai.com/v1"
            api_key: Bearer Token，可为空（本地代理）
            timeout: 默认请求超时时间（秒）
            transport: 自定义 httpx transport（测试时注入 MockTransport）
        """
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._timeout = timeout
        self._transport = transport
        self._http: Optional[httpx.Client] = None
        self._http_lock = threading.Lock()

    def _get_http(self) -> httpx.Client:
        """获取或创建 httpx 客户端"""
        with self._http_lock:
            if self._http is None:
                headers = {"Content-Type": "application/json"}
                if self._api_key:
                    headers["Authorization"] = f"Bearer {self._api_key}"
                self._http = httpx.Client(
                    base_url=self._base_url,
                    timeout=self._timeout,
                    headers=headers,
                    transport=self._transport,
                )
            return self._http

    def close(self):
        """关闭 HTTP 连接"""
        if self._http is not None:
            self._http.close()
            self._http = None

    def __enter__(self) -> "ChatCompletionClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    @staticmethod
    def _build_body(
        model: str,
        messages: List[Dict],
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        top_p: Optional[float] = None,
        stop: Optional[List[str]] = None,
        user: Optional[str] = None,
        seed: Optional[int] = None,
        response_format: Optional[str] = None,
    ) -> Dict[str, Any]:
        """构建请求体，只携带显式设置的可选参数"""
        body: Dict[str, Any] = {"model": model, "messages": messages}

        if temperature is not None:
            body["temperature"] = temperature
        if max_tokens is not None:
            body["max_tokens"] = max_tokens
        if top_p is not None:
            body["top_p"] = top_p
        if stop:
            body["stop"] = stop
        if user:
            body["user"] = user
        if seed is not None:
            body["seed"] = seed
        if response_format:
            body["response_format"] = {"type": response_format}

        return body

    def chat_completion(
        self,
        model: str,
        messages: List[Dict],
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        top_p: Optional[float] = None,
        stop: Optional[List[str]] = None,
        user: Optional[str] = None,
        seed: Optional[int] = None,
        response_format: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> Dict[str, Any]:
        """
        非流式对话

        Args:
            model: 模型名称，如 "gpt-4-turbo"
            messages: 对话消息，每条包含 role 和 content
            temperature: 温度参数 (0-2)
            max_tokens: 最大生成 token 数
            top_p: nucleus sampling
            stop: 停止词列表
            user: 用户标识
            seed: 随机种子
            response_format: "text" 或 "json_object"
            timeout: 请求超时时间（秒）

        Returns:
            接口返回的 JSON 字典

        Raises:
            LLMConnectionError: 网络异常
            LLMRequestError: 接口返回错误状态码或非法响应
        """
        body = self._build_body(
            model=model,
            messages=messages,
            temperature=temperature,
            max_tokens=max_tokens,
            top_p=top_p,
            stop=stop,
            user=user,
            seed=seed,
            response_format=response_format,
        )

        try:
            response = self._get_http().post(
                "/chat/completions", json=body, timeout=timeout or self._timeout
            )
        except httpx.RequestError as e:
            logger.error(f"ChatCompletion connection failed: {e}")
            raise LLMConnectionError(f"ChatCompletion connection failed: {e}") from e

        if response.status_code >= 400:
            message = self._error_message(response)
            logger.error(
                f"ChatCompletion request failed: {response.status_code}: {message}"
            )
            raise LLMRequestError(
                f"ChatCompletion request failed: {message}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise LLMRequestError(f"ChatCompletion returned invalid JSON: {e}") from e

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        """提取错误信息（兼容 OpenAI 错误格式）"""
        try:
            data = response.json()
        except ValueError:
            return response.text or f"HTTP {response.status_code}"

        error = data.get("error") if isinstance(data, dict) else None
        if isinstance(error, dict):
            return error.get("message") or f"HTTP {response.status_code}"
        if isinstance(error, str):
            return error
        return f"HTTP {response.status_code}"
