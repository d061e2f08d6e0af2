"""Valuation provider connectors."""

from __future__ import annotations

import logging
from typing import Iterable, Mapping

import httpx

from ...models import ValuationEstimate
from .attom import AttomProvider
from .base import ValuationProvider
from .county import CountyProvider
from .housecanary import HouseCanaryProvider
from .redfin import RedfinProvider
from .zillow import ZillowProvider

logger = logging.getLogger(__name__)

ALL_PROVIDERS: tuple[type[ValuationProvider], ...] = (
    ZillowProvider,
    RedfinProvider,
    HouseCanaryProvider,
    AttomProvider,
    CountyProvider,
)

# Sources a stored estimate may name; "manual" covers user-entered values
VALUATION_SOURCES: tuple[str, ...] = tuple(cls.name for cls in ALL_PROVIDERS) + ("manual",)


def get_available_providers(
    env: Mapping[str, str | None],
    client: httpx.Client,
) -> list[ValuationProvider]:
    """Construct every provider whose credentials are present in ``env``."""
    return [cls.from_env(env, client) for cls in ALL_PROVIDERS if cls.is_configured(env)]


def fetch_all_estimates(
    address: str,
    providers: Iterable[ValuationProvider],
) -> list[ValuationEstimate]:
    """Query each provider once; providers with no answer are skipped."""
    estimates: list[ValuationEstimate] = []
    for provider in providers:
        est = provider.fetch_estimate(address)
        if est is None:
            logger.info("[valuation:%s] No estimate for %r", provider.name, address)
            continue
        estimates.append(est)
    return estimates


__all__ = [
    "ALL_PROVIDERS",
    "VALUATION_SOURCES",
    "ValuationProvider",
    "ZillowProvider",
    "RedfinProvider",
    "HouseCanaryProvider",
    "AttomProvider",
    "CountyProvider",
    "get_available_providers",
    "fetch_all_estimates",
]
