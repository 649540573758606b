"""
Dependency Injection Container.

The only place where concrete objects are created and wired. State objects
(CandleStore, SignalRegistry) live here instead of in module globals, so
tests can build an isolated Container or override single dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from kumo.application.ports.market_data_provider import IMarketDataProvider
from kumo.application.use_cases.backfill_candles_usecase import BackfillCandlesUseCase
from kumo.application.use_cases.orderflow_usecase import OrderFlowUseCase
from kumo.application.use_cases.process_candle_usecase import ProcessCandleUseCase
from kumo.application.use_cases.signal_query_usecase import SignalQueryUseCase
from kumo.application.use_cases.status_logger import StatusLogger
from kumo.domain.services.ichimoku_calculator import IchimokuCalculator
from kumo.infrastructure.external.kraken_feed import KrakenFeedClient
from kumo.infrastructure.external.kraken_rest import KrakenRestClient
from kumo.infrastructure.messaging.event_bus import EventBus
from kumo.shared.config.settings import Settings
from kumo.state.candle_store import CandleStore
from kumo.state.signal_registry import SignalRegistry


@dataclass
class Container:
    """
    Lazily built singletons for one process.

    Every property creates its object on first access and caches it.
    """

    settings: Settings = field(default_factory=Settings)

    _event_bus: Optional[EventBus] = None
    _candle_store: Optional[CandleStore] = None
    _signal_registry: Optional[SignalRegistry] = None
    _ichimoku_calculator: Optional[IchimokuCalculator] = None
    _market_data_provider: Optional[IMarketDataProvider] = None
    _feed_client: Optional[KrakenFeedClient] = None
    _process_candle: Optional[ProcessCandleUseCase] = None
    _signal_query: Optional[SignalQueryUseCase] = None
    _status_logger: Optional[StatusLogger] = None

    # ==================== State ====================

    @property
    def event_bus(self) -> EventBus:
        if self._event_bus is None:
            self._event_bus = EventBus(self.settings.event_bus_max_queue_size)
        return self._event_bus

    @property
    def candle_store(self) -> CandleStore:
        if self._candle_store is None:
            self._candle_store = CandleStore(
                capacity=self.settings.max_candles_buffer,
                pairs=self.settings.tracked_pairs,
            )
        return self._candle_store

    @property
    def signal_registry(self) -> SignalRegistry:
        if self._signal_registry is None:
            self._signal_registry = SignalRegistry(self.settings.pair_aliases)
        return self._signal_registry

    # ==================== Domain Services ====================

    @property
    def ichimoku_calculator(self) -> IchimokuCalculator:
        if self._ichimoku_calculator is None:
            self._ichimoku_calculator = IchimokuCalculator()
        return self._ichimoku_calculator

    # ==================== Infrastructure ====================

    @property
    def market_data_provider(self) -> IMarketDataProvider:
        if self._market_data_provider is None:
            self._market_data_provider = KrakenRestClient(self.settings)
        return self._market_data_provider

    @property
    def feed_client(self) -> KrakenFeedClient:
        if self._feed_client is None:
            self._feed_client = KrakenFeedClient(self.event_bus, self.settings)
        return self._feed_client

    # ==================== Use Cases ====================

    @property
    def process_candle(self) -> ProcessCandleUseCase:
        if self._process_candle is None:
            self._process_candle = ProcessCandleUseCase(
                event_bus=self.event_bus,
                candle_store=self.candle_store,
                calculator=self.ichimoku_calculator,
                registry=self.signal_registry,
            )
        return self._process_candle

    @property
    def signal_query(self) -> SignalQueryUseCase:
        if self._signal_query is None:
            self._signal_query = SignalQueryUseCase(self.candle_store, self.signal_registry)
        return self._signal_query

    @property
    def status_logger(self) -> StatusLogger:
        if self._status_logger is None:
            self._status_logger = StatusLogger(
                self.signal_query,
                self.signal_registry,
                interval=self.settings.status_log_interval,
            )
        return self._status_logger

    def get_backfill_usecase(self) -> BackfillCandlesUseCase:
        """New instance per call; it holds no state of its own."""
        return BackfillCandlesUseCase(
            provider=self.market_data_provider,
            process_candle=self.process_candle,
            interval_minutes=self.settings.candle_interval_minutes,
        )

    def get_orderflow_usecase(self) -> OrderFlowUseCase:
        return OrderFlowUseCase(self.market_data_provider)

    # ==================== Lifecycle ====================

    def reset(self) -> None:
        """Drop every instance (tests)."""
        self._event_bus = None
        self._candle_store = None
        self._signal_registry = None
        self._ichimoku_calculator = None
        self._market_data_provider = None
        self._feed_client = None
        self._process_candle = None
        self._signal_query = None
        self._status_logger = None

    def override(self, name: str, instance: Any) -> None:
        """
        Replace a dependency (tests with fakes).

        Args:
            name: dependency name, e.g. 'market_data_provider'
            instance: object to use instead
        """
        attr_name = f"_{name}"
        if hasattr(self, attr_name):
            setattr(self, attr_name, instance)
        else:
            raise ValueError(f"Unknown dependency: {name}")


# ==================== Global Container ====================

_container: Optional[Container] = None


def get_container() -> Container:
    global _container
    if _container is None:
        _container = Container()
    return _container


def init_container(settings: Optional[Settings] = None) -> Container:
    """Create the process container with an explicit configuration."""
    global _container
    _container = Container(settings=settings or Settings())
    return _container
