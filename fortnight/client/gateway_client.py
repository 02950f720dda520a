# -*- coding: utf-8 -*-
"""
MultiversX Gateway 客户端

只读查询：网络配置、账户、ESDT 余额、Token 定义、合约 VM 查询。
交易签名与发送由钱包负责，不在此实现。
"""

import base64
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Union

import httpx

from fortnight.chain.payload import encode_arg

logger = logging.getLogger(__name__)


class GatewayRequestError(Exception):
    """Gateway 请求错误"""

    def __init__(self, message: str, error: str = ""):
        self.message = message
        self.error = error
        super().__init__(f"{message}: {error}" if error else message)


@dataclass
class QueryResult:
    """合约 VM 查询结果"""

    return_data: List[bytes] = field(default_factory=list)
    return_code: str = ""
    return_message: str = ""

    @property
    def ok(self) -> bool:
        return self.return_code == "ok"

    def int_at(self, index: int = 0) -> int:
        """按大端无符号整数解码第 index 个返回值"""
        if index >= len(self.return_data):
            return 0
        return int.from_bytes(self.return_data[index], "big")


class GatewayClient:
    """
    MultiversX Gateway / API 客户端

    使用示例：
        with GatewayClient("https://devnet-gateway.multiversx.com",
                           "https://devnet-api.multiversx.com") as client:
            account = client.get_account("erd1...")
            balance = client.get_token_balance("erd1...", "WEGLD-bd4d79")
    """

    DEFAULT_TIMEOUT = 30.0

    def __init__(
        self,
        gateway_url: str,
        api_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        初始化客户端

        Args:
            gateway_url: Gateway（Proxy）地址
            api_url: API 地址（Token 定义查询）
            timeout: 请求超时时间（秒）
            transport: 自定义 httpx transport（测试时注入）
        """
        self.gateway_url = gateway_url.rstrip("/")
        self.api_url = api_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport
        self._http: Optional[httpx.Client] = None

    def _get_http(self) -> httpx.Client:
        if self._http is None:
            self._http = httpx.Client(timeout=self._timeout, transport=self._transport)
        return self._http

    def close(self):
        """关闭连接"""
        if self._http is not None:
            self._http.close()
            self._http = None

    def __enter__(self) -> "GatewayClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    # ========================================================================
    # 请求辅助方法
    # ========================================================================

    def _request(self, method: str, url: str, **kwargs) -> Any:
        """发送请求并返回 JSON"""
        try:
            response = self._get_http().request(method, url, **kwargs)
        except httpx.RequestError as e:
            logger.error(f"Gateway request error: {method} {url}: {e}")
            raise GatewayRequestError(f"Gateway request error: {method} {url}", str(e)) from e

        try:
            payload = response.json()
        except ValueError:
            payload = None

        if response.status_code >= 400:
            error = ""
            if isinstance(payload, dict):
                error = payload.get("error") or payload.get("message") or ""
            logger.error(f"Gateway request failed: {response.status_code} {url}: {error}")
            raise GatewayRequestError(
                f"Gateway request failed with HTTP {response.status_code}", str(error)
            )
        if payload is None:
            raise GatewayRequestError(f"Gateway returned invalid JSON: {url}")
        return payload

    def _gateway(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        """Gateway 响应格式：{"data": ..., "error": "", "code": "successful"}"""
        payload = self._request(method, f"{self.gateway_url}{path}", **kwargs)
        code = payload.get("code", "successful")
        if code != "successful":
            raise GatewayRequestError(f"Gateway returned code {code}", payload.get("error", ""))
        return payload.get("data") or {}

    # ========================================================================
    # 查询接口
    # ========================================================================

    def get_network_config(self) -> Dict[str, Any]:
        """获取网络配置"""
        return self._gateway("GET", "/network/config").get("config", {})

    def get_account(self, address: str) -> Dict[str, Any]:
        """获取账户信息（nonce、余额等）"""
        return self._gateway("GET", f"/address/{address}").get("account", {})

    def get_token_balance(self, address: str, token_id: str) -> Dict[str, Any]:
        """获取账户的 ESDT 余额"""
        data = self._gateway("GET", f"/address/{address}/esdt/{token_id}")
        return data.get("tokenData", {})

    def get_token_details(self, token_id: str) -> Dict[str, Any]:
        """获取同质化 Token 定义"""
        return self._request("GET", f"{self.api_url}/tokens/{token_id}")

    def query_contract(
        self,
        contract_address: str,
        function: str,
        args: Sequence[Union[str, int, bytes]] = (),
    ) -> QueryResult:
        """
        查询智能合约（只读）

        Args:
            contract_address: 合约地址
            function: 合约函数名
            args: 参数（str 按 UTF-8 编码，int 按大端编码，bytes 原样）

        Returns:
            QueryResult
        """
        body = {
            "scAddress": contract_address,
            "funcName": function,
            "args": [encode_arg(a) for a in args],
        }
        data = self._gateway("POST", "/vm-values/query", json=body).get("data", {})
        return QueryResult(
            return_data=[base64.b64decode(item or "") for item in data.get("returnData") or []],
            return_code=data.get("returnCode", ""),
            return_message=data.get("returnMessage", ""),
        )

    def get_exchange_rate(
        self, contract_address: str, from_token: str, to_token: str
    ) -> int:
        """查询兑换合约的汇率（千分比，与合约 `getExchangeRate` 一致）"""
        result = self.query_contract(
            contract_address, "getExchangeRate", [from_token, to_token]
        )
        if not result.ok:
            raise GatewayRequestError(
                "getExchangeRate query failed", result.return_message or result.return_code
            )
        return result.int_at(0)
