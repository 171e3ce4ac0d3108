"""Exchange factory for creating adapter instances."""

from typing import Any

from funding_report.config import Settings
from funding_report.exchanges.base import FundingExchangeAdapter
from funding_report.models import ExchangeId

# Registry of exchange adapter classes, one per supported exchange
_adapter_registry: dict[ExchangeId, type[FundingExchangeAdapter]] = {}


def exchange_id(name: str | ExchangeId) -> ExchangeId:
    """Resolve an exchange name, case-insensitively."""
    if isinstance(name, ExchangeId):
        return name
    try:
        return ExchangeId(name.lower())
    except ValueError:
        known = ", ".join(e.value for e in ExchangeId)
        raise ValueError(f"Unknown exchange: '{name}'. Known: {known}") from None


def register_adapter(
    name: str | ExchangeId, adapter_class: type[FundingExchangeAdapter]
) -> None:
    """Register the adapter class serving an exchange."""
    _adapter_registry[exchange_id(name)] = adapter_class


def get_registered_adapters() -> list[str]:
    """Return names of exchanges that have an adapter registered."""
    return [e.value for e in _adapter_registry]


def load_adapters() -> None:
    """Import the built-in adapter modules, which register themselves."""
    import funding_report.exchanges.binance  # noqa: F401
    import funding_report.exchanges.bybit  # noqa: F401
    import funding_report.exchanges.mexc  # noqa: F401
    import funding_report.exchanges.phemex  # noqa: F401


class ExchangeFactory:
    """Factory for creating exchange adapter instances."""

    @staticmethod
    def create(name: str | ExchangeId, **kwargs: Any) -> FundingExchangeAdapter:
        """Create an exchange adapter by name.

        Raises:
            ValueError: If the exchange is unknown or has no adapter registered
        """
        exchange = exchange_id(name)
        adapter_class = _adapter_registry.get(exchange)
        if adapter_class is None:
            available = ", ".join(get_registered_adapters()) or "none"
            raise ValueError(
                f"No adapter registered for '{exchange.value}'. Available: {available}"
            )
        return adapter_class(**kwargs)

    @staticmethod
    def for_settings(name: str | ExchangeId, settings: Settings) -> FundingExchangeAdapter:
        """Create the built-in adapter for an exchange from application settings.

        Credentials and any pacing override are taken from ``settings``.
        """
        load_adapters()
        exchange = exchange_id(name)
        return ExchangeFactory.create(
            exchange,
            credentials=settings.credentials_for(exchange.value),
            request_interval=settings.request_interval_overrides.get(exchange.value),
        )

    @staticmethod
    def available() -> list[str]:
        """Return list of available exchange adapters."""
        return get_registered_adapters()
