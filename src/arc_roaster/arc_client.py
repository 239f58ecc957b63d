import json
from typing import Any

import httpx

from .errors import describe_error
from .sources import FetchResult
from .timeouts import bounded

BALANCE_OF_SELECTOR = '0x70a08231'


class ArcRPCError(RuntimeError):
    pass


async def rpc_call(client: httpx.AsyncClient, url: str, method: str, params: list[Any]) -> Any:
    payload = {'jsonrpc': '2.0', 'id': 1, 'method': method, 'params': params}
    try:
        response = await client.post(url, json=payload)
    except httpx.HTTPError as exc:
        raise ArcRPCError(f'RPC transport error: {describe_error(exc)}') from exc
    if not response.is_success:
        raise ArcRPCError(f'RPC HTTP {response.status_code}')
    try:
        data = response.json()
    except ValueError as exc:
        raise ArcRPCError('RPC returned a non-JSON body') from exc
    if not isinstance(data, dict):
        raise ArcRPCError('Unexpected RPC response format')
    error = data.get('error')
    if error:
        message = error.get('message') if isinstance(error, dict) else None
        raise ArcRPCError(f'RPC: {message or json.dumps(error)}')
    return data.get('result')


def parse_quantity(value: Any) -> int:
    if not isinstance(value, str):
        return 0
    try:
        return max(int(value, 16), 0)
    except ValueError:
        return 0


def balance_of_calldata(address: str) -> str:
    return BALANCE_OF_SELECTOR + address.lower().removeprefix('0x').rjust(64, '0')


class TxCountSource:
    name = 'arc_tx_count'

    def __init__(self, client: httpx.AsyncClient, rpc_url: str, timeout_s: float) -> None:
        self.client = client
        self.rpc_url = rpc_url
        self.timeout_s = timeout_s

    async def fetch(self, address: str) -> FetchResult[int]:
        try:
            result = await bounded(
                rpc_call(self.client, self.rpc_url, 'eth_getTransactionCount', [address, 'latest']),
                self.timeout_s,
            )
        except Exception as exc:
            return FetchResult.failure(exc)
        return FetchResult.success(parse_quantity(result))


class UsdcBalanceSource:
    name = 'arc_usdc_balance'

    def __init__(
        self,
        client: httpx.AsyncClient,
        rpc_url: str,
        token_address: str,
        timeout_s: float,
        decimals: int = 6,
    ) -> None:
        self.client = client
        self.rpc_url = rpc_url
        self.token_address = token_address
        self.timeout_s = timeout_s
        self.decimals = decimals

    async def fetch(self, address: str) -> FetchResult[float]:
        call = {'to': self.token_address, 'data': balance_of_calldata(address)}
        try:
            result = await bounded(
                rpc_call(self.client, self.rpc_url, 'eth_call', [call, 'latest']),
                self.timeout_s,
            )
            if not result or result == '0x':
                return FetchResult.success(0.0)
            raw = int(result, 16)
        except Exception as exc:
            return FetchResult.failure(exc)
        return FetchResult.success(max(raw, 0) / 10**self.decimals)
