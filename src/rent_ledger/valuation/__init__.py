"""Property valuation: provider connectors and confidence-weighted aggregation."""

from .aggregate import aggregate_valuations, default_confidence
from .providers import (
    ALL_PROVIDERS,
    VALUATION_SOURCES,
    ValuationProvider,
    fetch_all_estimates,
    get_available_providers,
)

__all__ = [
    "aggregate_valuations",
    "default_confidence",
    "ALL_PROVIDERS",
    "VALUATION_SOURCES",
    "ValuationProvider",
    "fetch_all_estimates",
    "get_available_providers",
]
