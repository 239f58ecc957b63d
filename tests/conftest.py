import asyncio
import json

import httpx
import pytest
from fastapi.testclient import TestClient

from arc_roaster.main import create_app
from arc_roaster.settings import Settings

RPC_URL = 'https://rpc.arc.test'
EXPLORER_URL = 'https://explorer.arc.test/api'
LLM_URL = 'https://llm.test'
WALLET = '0x1111111111111111111111111111111111111111'

ROAST_TEXT = (
    'Ser, this wallet has 0 txs.\n\n'
    'Couldnt even claim free testnet money.\n\n'
    'Probably nothing.\n'
    'VERDICT: NGMI ON A NETWORK WHERE EVERYTHING IS FREE'
)


def make_settings(**overrides) -> Settings:
    values = {
        'ARC_RPC_URL': RPC_URL,
        'ARC_EXPLORER_API_URL': EXPLORER_URL,
        'ANTHROPIC_API_URL': LLM_URL,
        'ANTHROPIC_API_KEY': 'test-key',
        'LLM_PROVIDER': 'anthropic',
        'DD_API_KEY': None,
        'DD_SEND_LOGS': False,
        'DD_TRACE_ENABLED': False,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


class FakeUpstreams:
    """Routes outbound requests by host and records every call."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str]] = []
        self.tx_count: object = '0x0'
        self.balance: object = '0x'
        self.explorer_result: object = []
        self.llm_payload: object = {'content': [{'type': 'text', 'text': ROAST_TEXT}]}
        self.llm_status = 200
        self.llm_body: str | None = None
        self.rpc_status = 200
        self.rpc_error: dict | None = None
        self.rpc_delay = 0.0
        self.explorer_status = 200
        self.explorer_error: Exception | None = None
        self.balance_error: dict | None = None
        self.llm_requests: list[dict] = []

    def calls_to(self, kind: str) -> list[str]:
        return [name for k, name in self.calls if k == kind]

    async def handler(self, request: httpx.Request) -> httpx.Response:
        host = request.url.host
        if host == httpx.URL(RPC_URL).host:
            return await self._rpc(request)
        if host == httpx.URL(EXPLORER_URL).host:
            self.calls.append(('explorer', request.url.params.get('action', '')))
            if self.explorer_error is not None:
                raise self.explorer_error
            return httpx.Response(self.explorer_status, json={'status': '1', 'result': self.explorer_result})
        if host == httpx.URL(LLM_URL).host:
            self.calls.append(('llm', request.url.path))
            self.llm_requests.append(json.loads(request.content))
            if self.llm_body is not None:
                return httpx.Response(self.llm_status, text=self.llm_body)
            return httpx.Response(self.llm_status, json=self.llm_payload)
        raise AssertionError(f'unexpected request to {request.url}')

    async def _rpc(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        method = body['method']
        self.calls.append(('rpc', method))
        if method == 'eth_getTransactionCount':
            if self.rpc_delay:
                await asyncio.sleep(self.rpc_delay)
            if self.rpc_status != 200:
                return httpx.Response(self.rpc_status, text='bad gateway')
            if self.rpc_error is not None:
                return httpx.Response(200, json={'jsonrpc': '2.0', 'id': 1, 'error': self.rpc_error})
            return httpx.Response(200, json={'jsonrpc': '2.0', 'id': 1, 'result': self.tx_count})
        if method == 'eth_call':
            if self.balance_error is not None:
                return httpx.Response(200, json={'jsonrpc': '2.0', 'id': 1, 'error': self.balance_error})
            return httpx.Response(200, json={'jsonrpc': '2.0', 'id': 1, 'result': self.balance})
        raise AssertionError(f'unexpected rpc method {method}')

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def upstreams() -> FakeUpstreams:
    return FakeUpstreams()


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def client(upstreams, settings):
    app = create_app(settings, transport=upstreams.transport())
    with TestClient(app) as test_client:
        yield test_client
