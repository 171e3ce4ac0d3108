"""FundingReportService - runs the whole report across exchanges."""

from collections.abc import Callable
from decimal import Decimal

import structlog

from funding_report.accounting.equity import collect_equity
from funding_report.accounting.valuation import valuate_with_ticker
from funding_report.config import Settings, load_settings
from funding_report.exchanges.base import FundingExchangeAdapter
from funding_report.exchanges.factory import ExchangeFactory, exchange_id
from funding_report.funding.collector import FundingCollector, now_ms
from funding_report.funding.segmenter import select_current
from funding_report.models import CollectionMode, ExchangeId, Report
from funding_report.reporting.builder import ReportBuilder

logger = structlog.get_logger()

AdapterFactory = Callable[[str], FundingExchangeAdapter]


class FundingReportService:
    """Builds one funding report per call to ``run``.

    Exchanges are processed one after another, and positions within an
    exchange one after another, so each exchange's pacing is never
    exceeded. Every call creates and closes its own adapters.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        adapter_factory: AdapterFactory | None = None,
        clock_ms: Callable[[], int] = now_ms,
    ):
        self._settings = settings or load_settings()
        self._adapter_factory = adapter_factory
        self._clock_ms = clock_ms

    @property
    def settings(self) -> Settings:
        return self._settings

    def _exchanges(self) -> list[str]:
        if self._adapter_factory is not None:
            return list(self._settings.exchanges)
        enabled = []
        for name in self._settings.exchanges:
            if self._settings.credentials_for(name).configured:
                enabled.append(name)
            else:
                logger.warning("exchange_credentials_missing", exchange=name)
        return enabled

    def _create_adapter(self, name: str) -> FundingExchangeAdapter:
        if self._adapter_factory is not None:
            return self._adapter_factory(name)
        return ExchangeFactory.for_settings(name, self._settings)

    async def run(self) -> Report:
        """Compute the report. Raises on failures that make it meaningless."""
        builder = ReportBuilder(display_timezone=self._settings.display_timezone)
        for name in self._exchanges():
            adapter = self._create_adapter(name)
            try:
                await self._report_exchange(adapter, exchange_id(name), builder)
            except Exception as e:
                logger.error("report_failed", exchange=name, error=str(e))
                raise
            finally:
                await adapter.close()

        report = builder.build()
        logger.info(
            "report_complete",
            positions=len(report.position_records),
            exchanges=len(report.equity_overview),
            total_equity=str(report.total_equity),
        )
        return report

    async def _report_exchange(
        self,
        adapter: FundingExchangeAdapter,
        exchange: ExchangeId,
        builder: ReportBuilder,
    ) -> None:
        settings = self._settings
        await adapter.load_markets()
        positions = [p for p in await adapter.fetch_open_positions() if p.is_open]
        logger.info("open_positions_loaded", exchange=exchange.value, count=len(positions))

        collector = FundingCollector(
            adapter, max_pages=settings.max_pages, clock_ms=self._clock_ms
        )
        mode = settings.funding_mode
        if mode == CollectionMode.WINDOWED:
            window_start, window_end = collector.recent_window(settings.window_hours)
        else:
            window_start, window_end = collector.full_history_window(
                settings.lookback_days
            )

        unrealized_pnl_sum = Decimal(0)
        for position in positions:
            collection = await collector.collect(
                position.symbol, window_start, window_end, CollectionMode(mode)
            )
            events = select_current(
                collection.events, settings.cycle_policy, settings.gap_threshold_ms
            )
            valuation = await valuate_with_ticker(adapter, position)
            unrealized_pnl_sum += valuation.unrealized_pnl
            builder.add_position(
                exchange,
                position,
                events,
                valuation,
                funding_complete=collection.complete,
            )

        equity = await collect_equity(adapter, exchange, unrealized_pnl_sum)
        builder.set_equity(exchange, equity)
