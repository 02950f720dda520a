# -*- coding: utf-8 -*-
"""
合约调用 payload 构建

格式：`<function>@<hex arg>@<hex arg>...`
"""

from typing import List, Union

Arg = Union[str, int, bytes]


def encode_arg(value: Arg) -> str:
    """参数编码：int 按大端最短偶数位 hex，str 按 UTF-8，bytes 原样"""
    if isinstance(value, bool):
        raise TypeError("boolean arguments are not supported")
    if isinstance(value, int):
        if value < 0:
            raise ValueError("negative integers are not supported")
        hex_str = format(value, "x")
        return hex_str if len(hex_str) % 2 == 0 else "0" + hex_str
    if isinstance(value, bytes):
        return value.hex()
    if isinstance(value, str):
        return value.encode("utf-8").hex()
    raise TypeError(f"unsupported argument type: {type(value).__name__}")


class ContractCallPayloadBuilder:
    """
    合约调用 payload 构建器

    使用示例：
        data = (
            ContractCallPayloadBuilder()
            .set_function("ESDTTransfer")
            .add_arg("WEGLD-bd4d79")
            .add_arg(1000)
            .add_arg("swap")
            .build()
        )
        # "ESDTTransfer@5745474c442d626434643739@03e8@73776170"
    """

    def __init__(self):
        self._function: str = ""
        self._args: List[str] = []

    def set_function(self, name: str) -> "ContractCallPayloadBuilder":
        self._function = name
        return self

    def add_arg(self, value: Arg) -> "ContractCallPayloadBuilder":
        self._args.append(encode_arg(value))
        return self

    def build(self) -> str:
        if not self._function:
            raise ValueError("contract function is not set")
        return "@".join([self._function, *self._args])
