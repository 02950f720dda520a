"""
Shared fixtures.

The chat-completion endpoint is faked with httpx.MockTransport so agents run
through the real LLM -> ChatCompletionClient -> httpx stack.
"""

import json
import random
import threading
from typing import Any, Callable, Dict, List, Optional, Union
from unittest.mock import MagicMock

import httpx
import pytest

from fortnight.chain import ContractsConfig, NetworkConfig, TransactionSessionQueue
from fortnight.client import ChatCompletionClient
from fortnight.core import LLM

LLM_BASE_URL = "https://llm.test/v1"

Reply = Union[str, None, httpx.Response, Exception, Callable[[Dict[str, Any]], Any]]


def completion(content: Optional[str]) -> Dict[str, Any]:
    """A minimal chat-completion payload."""
    return {
        "id": "chatcmpl-test",
        "object": "chat.completion",
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": content},
                "finish_reason": "stop",
            }
        ],
        "usage": {"prompt_tokens": 10, "completion_tokens": 5, "total_tokens": 15},
    }


class ChatServer:
    """Scripted chat-completion endpoint that records every request body.

    Queued replies are consumed in order; once the queue is empty the
    ``default`` reply is used. A reply may be a string (message content),
    ``None`` (empty content), an ``httpx.Response``, an exception to raise
    from the transport, or a callable receiving the request body.
    """

    def __init__(self):
        self.requests: List[Dict[str, Any]] = []
        self.headers: List[httpx.Headers] = []
        self.urls: List[str] = []
        self.default: Reply = "ok"
        self._replies: List[Reply] = []
        self._lock = threading.Lock()

    def reply(self, *replies: Reply) -> "ChatServer":
        with self._lock:
            self._replies.extend(replies)
        return self

    def handler(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        with self._lock:
            self.requests.append(body)
            self.headers.append(request.headers)
            self.urls.append(str(request.url))
            reply = self._replies.pop(0) if self._replies else self.default

        if callable(reply) and not isinstance(reply, (httpx.Response, Exception)):
            reply = reply(body)
        if isinstance(reply, Exception):
            raise reply
        if isinstance(reply, httpx.Response):
            return reply
        return httpx.Response(200, json=completion(reply))

    @property
    def last_messages(self) -> List[Dict[str, Any]]:
        return self.requests[-1]["messages"]


@pytest.fixture
def chat_server() -> ChatServer:
    return ChatServer()


@pytest.fixture
def llm(chat_server):
    client = ChatCompletionClient(
        base_url=LLM_BASE_URL,
        api_key="sk-test",
        transport=httpx.MockTransport(chat_server.handler),
    )
    instance = LLM(base_url=LLM_BASE_URL, api_key="sk-test", client=client)
    yield instance
    instance.close()


@pytest.fixture
def network() -> NetworkConfig:
    config = NetworkConfig.for_environment("devnet")
    config.contracts = ContractsConfig(token_swap="erd1swapcontract", liquidity_pool="erd1poolcontract")
    return config


@pytest.fixture
def queue() -> TransactionSessionQueue:
    return TransactionSessionQueue()


def fixed_rng(*values: float) -> MagicMock:
    """A random.Random stand-in returning ``values`` in order."""
    rng = MagicMock(spec=random.Random)
    rng.random.side_effect = list(values)
    return rng


class Clock:
    """Manually advanced clock (epoch seconds)."""

    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture
def clock() -> Clock:
    return Clock()
