from datetime import UTC, datetime

import httpx

from .schemas import RoastResult, TraceStep
from .settings import Settings


async def send_roast_trace_log(
    client: httpx.AsyncClient,
    settings: Settings,
    result: RoastResult,
    trace: list[TraceStep],
) -> bool:
    """Ship a completed roast to Datadog log intake; returns False when shipping is disabled."""
    if not settings.dd_api_key or not settings.dd_send_logs:
        return False

    url = f'https://http-intake.logs.{settings.dd_site}/api/v2/logs'
    payload = {
        'ddsource': 'python',
        'service': settings.dd_service,
        'ddtags': f'env:{settings.dd_env},version:{settings.dd_version}',
        'hostname': 'arc-roaster',
        'timestamp': datetime.now(UTC).isoformat(),
        'message': 'wallet_roast_completed',
        'address': result.address,
        'tx_count': result.tx_count,
        'usdc_balance': result.usdc_balance,
        'recent_tx_count': len(result.recent_txs),
        'trace': [step.model_dump() for step in trace],
    }
    headers = {'Content-Type': 'application/json', 'DD-API-KEY': settings.dd_api_key}

    resp = await client.post(url, headers=headers, json=[payload], timeout=settings.rpc_timeout_seconds)
    resp.raise_for_status()
    return True
