# -*- coding: utf-8 -*-
"""
对话记忆

按时间顺序保存 {role, content} 消息。存储不设上限，
每次请求只取最近 window 条作为上下文。
"""

from typing import Dict, Iterator, List

DEFAULT_CONTEXT_WINDOW = 10


class ConversationMemory:
    """Agent 对话记忆"""

    def __init__(self):
        self._messages: List[Dict[str, str]] = []

    def append(self, role: str, content: str) -> "ConversationMemory":
        """追加一条消息"""
        self._messages.append({"role": role, "content": content})
        return self

    def window(self, size: int = DEFAULT_CONTEXT_WINDOW) -> List[Dict[str, str]]:
        """最近 size 条消息（保持原顺序）"""
        if size <= 0:
            return []
        return [dict(m) for m in self._messages[-size:]]

    def clear(self):
        self._messages = []

    def to_list(self) -> List[Dict[str, str]]:
        return [dict(m) for m in self._messages]

    def __iter__(self) -> Iterator[Dict[str, str]]:
        return iter(self.to_list())

    def __len__(self) -> int:
        return len(self._messages)

    def __repr__(self) -> str:
        return f"ConversationMemory(size={len(self._messages)})"
