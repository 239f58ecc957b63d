import asyncio
import logging

import httpx

from .arc_client import TxCountSource, UsdcBalanceSource
from .datadog_client import send_roast_trace_log
from .errors import UpstreamUnavailable, describe_error, validate_address
from .explorer_client import RecentTxSource
from .llm_client import RoastGenerator, build_generator
from .observability import TraceCollector
from .prompts import build_roast_prompt
from .schemas import RecentTx, RoastResult, WalletSnapshot
from .settings import Settings
from .sources import DataSource, FetchResult

logger = logging.getLogger(__name__)


class RoastService:
    """
    Orchestrates one roast:
      address → tx count (required) → balance + recent txs (best-effort) → prompt → generator
    No retries; each outbound call is bounded by its own timeout.
    """

    def __init__(
        self,
        settings: Settings,
        client: httpx.AsyncClient,
        tx_count: DataSource[int] | None = None,
        balance: DataSource[float] | None = None,
        recent_txs: DataSource[list[RecentTx]] | None = None,
        generator: RoastGenerator | None = None,
        tracer=None,
    ) -> None:
        self.settings = settings
        self.client = client
        self.tx_count = tx_count or TxCountSource(
            client, settings.arc_rpc_url, settings.rpc_timeout_seconds
        )
        self.balance = balance or UsdcBalanceSource(
            client,
            settings.arc_rpc_url,
            settings.arc_usdc_address,
            settings.rpc_timeout_seconds,
            decimals=settings.arc_usdc_decimals,
        )
        self.recent_txs = recent_txs or RecentTxSource(
            client,
            settings.arc_explorer_api_url,
            settings.explorer_timeout_seconds,
            limit=settings.arc_recent_tx_limit,
        )
        self.generator = generator or build_generator(settings, client)
        self.tracer = tracer

    def _best_effort(self, trace: TraceCollector, source: DataSource, result: FetchResult, default):
        if not result.ok:
            trace.fallback(source.name, result.error)
            logger.warning(
                'best-effort lookup failed, using default: %s',
                describe_error(result.error),
                extra={'event': 'best_effort_fallback', 'source': source.name},
            )
        return result.value_or(default)

    async def snapshot(self, address: str, trace: TraceCollector) -> WalletSnapshot:
        with trace.step('arc_tx_count'):
            counted = await self.tx_count.fetch(address)
            try:
                tx_count = counted.unwrap()
            except Exception as exc:
                raise UpstreamUnavailable(f'Cannot reach Arc RPC: {describe_error(exc)}') from exc

        with trace.step('arc_enrichment'):
            balance, recent = await asyncio.gather(
                self.balance.fetch(address),
                self.recent_txs.fetch(address),
            )
            usdc_balance = self._best_effort(trace, self.balance, balance, 0.0)
            recent_txs = self._best_effort(trace, self.recent_txs, recent, [])

        return WalletSnapshot(
            address=address,
            tx_count=tx_count,
            usdc_balance=usdc_balance,
            recent_txs=recent_txs,
        )

    async def roast(self, raw_address: object) -> RoastResult:
        address = validate_address(raw_address)
        trace = TraceCollector(self.settings, self.tracer)

        snapshot = await self.snapshot(address, trace)
        prompt = build_roast_prompt(
            snapshot.address,
            snapshot.tx_count,
            snapshot.usdc_balance,
            chain_id=self.settings.arc_chain_id,
        )

        with trace.step('roast_generation', detail=self.settings.llm_provider):
            roast = await self.generator.generate(prompt)

        result = RoastResult(**snapshot.model_dump(), roast=roast)
        logger.info(
            'roast completed: %s',
            [step.model_dump() for step in trace.as_list()],
            extra={'event': 'roast_completed', 'address': address},
        )
        try:
            await send_roast_trace_log(self.client, self.settings, result, trace.as_list())
        except Exception:
            logger.exception('datadog log shipping failed', extra={'event': 'datadog_log_failed'})
        return result
