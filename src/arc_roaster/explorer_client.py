from typing import Any

import httpx

from .schemas import RecentTx
from .sources import FetchResult
from .timeouts import bounded


class ExplorerError(RuntimeError):
    pass


class RecentTxSource:
    """Latest transactions for an address from the Etherscan-compatible Arcscan API."""

    name = 'arc_recent_txs'

    def __init__(
        self, client: httpx.AsyncClient, api_url: str, timeout_s: float, limit: int = 5
    ) -> None:
        self.client = client
        self.api_url = api_url
        self.timeout_s = timeout_s
        self.limit = limit

    async def _txlist(self, address: str) -> list[dict[str, Any]]:
        params = {
            'module': 'account',
            'action': 'txlist',
            'address': address,
            'sort': 'desc',
            'page': 1,
            'offset': self.limit,
        }
        resp = await self.client.get(self.api_url, params=params)
        if not resp.is_success:
            raise ExplorerError(f'Explorer HTTP {resp.status_code}')
        payload = resp.json()
        result = payload.get('result') if isinstance(payload, dict) else None
        if not isinstance(result, list):
            raise ExplorerError('Explorer response has no transaction list')
        return result

    async def fetch(self, address: str) -> FetchResult[list[RecentTx]]:
        try:
            items = await bounded(self._txlist(address), self.timeout_s)
            txs = [
                RecentTx(
                    hash=item.get('hash'),
                    timestamp=item.get('timeStamp'),
                    is_error=item.get('isError'),
                )
                for item in items[: self.limit]
            ]
        except Exception as exc:
            return FetchResult.failure(exc)
        return FetchResult.success(txs)
