import asyncio
import json
import logging

import httpx
import pytest

from arc_roaster.errors import InvalidInput, UpstreamUnavailable
from arc_roaster.service import RoastService
from conftest import WALLET, make_settings


def _roast(upstreams, settings, handler=None, address=WALLET):
    async def runner():
        transport = httpx.MockTransport(handler or upstreams.handler)
        async with httpx.AsyncClient(transport=transport) as client:
            return await RoastService(settings, client).roast(address)

    return asyncio.run(runner())


def test_best_effort_failures_are_logged(upstreams, caplog):
    upstreams.balance_error = {'message': 'execution reverted'}
    upstreams.explorer_status = 502

    with caplog.at_level(logging.WARNING, logger='arc_roaster.service'):
        result = _roast(upstreams, make_settings())

    assert result.usdc_balance == 0
    assert result.recent_txs == []
    sources = {r.source for r in caplog.records if getattr(r, 'event', None) == 'best_effort_fallback'}
    assert sources == {'arc_usdc_balance', 'arc_recent_txs'}


def test_invalid_address_raises_before_fetching(upstreams):
    with pytest.raises(InvalidInput):
        _roast(upstreams, make_settings(), address='0xnope')
    assert upstreams.calls == []


def test_rpc_error_message_is_surfaced(upstreams):
    upstreams.rpc_error = {'code': -32603, 'message': 'internal error'}

    with pytest.raises(UpstreamUnavailable, match='Cannot reach Arc RPC: RPC: internal error'):
        _roast(upstreams, make_settings())


def test_completed_roast_is_shipped_to_datadog(upstreams):
    shipped = []

    async def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == 'http-intake.logs.datadoghq.com':
            shipped.append((request.headers['DD-API-KEY'], json.loads(request.content)))
            return httpx.Response(202)
        return await upstreams.handler(request)

    settings = make_settings(DD_API_KEY='dd-key', DD_SEND_LOGS=True)
    result = _roast(upstreams, settings, handler=handler)

    assert result.roast
    key, records = shipped[0]
    assert key == 'dd-key'
    assert records[0]['message'] == 'wallet_roast_completed'
    assert records[0]['address'] == WALLET
    assert [step['step'] for step in records[0]['trace']] == [
        'arc_tx_count',
        'arc_enrichment',
        'roast_generation',
    ]


def test_datadog_failure_does_not_fail_roast(upstreams):
    async def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == 'http-intake.logs.datadoghq.com':
            return httpx.Response(403)
        return await upstreams.handler(request)

    settings = make_settings(DD_API_KEY='dd-key', DD_SEND_LOGS=True)
    result = _roast(upstreams, settings, handler=handler)

    assert result.roast


def test_fallback_sources_reach_the_shipped_trace(upstreams):
    shipped = []

    async def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == 'http-intake.logs.datadoghq.com':
            shipped.append(json.loads(request.content))
            return httpx.Response(202)
        return await upstreams.handler(request)

    upstreams.balance_error = {'message': 'execution reverted'}
    settings = make_settings(DD_API_KEY='dd-key', DD_SEND_LOGS=True)
    _roast(upstreams, settings, handler=handler)

    steps = {step['step']: step for step in shipped[0][0]['trace']}
    assert steps['arc_enrichment']['fallbacks'] == ['arc_usdc_balance']
    assert steps['arc_tx_count']['fallbacks'] == []


def test_prompt_uses_configured_chain_id(upstreams):
    _roast(upstreams, make_settings(ARC_CHAIN_ID=1234))

    prompt = upstreams.llm_requests[0]['messages'][0]['content']
    assert 'Arc Testnet (Chain 1234)' in prompt
