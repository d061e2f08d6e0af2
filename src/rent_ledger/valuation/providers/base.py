"""Base interface for valuation providers."""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from typing import Any, Mapping

import httpx

from ...models import ValuationEstimate

logger = logging.getLogger(__name__)


def parse_number(val: Any) -> float | None:
    """Parse a positive number from 550000, '550000.0' or '$550,000'. None otherwise."""
    if val is None or isinstance(val, bool):
        return None
    if isinstance(val, (int, float)):
        return float(val) if val > 0 else None
    s = re.sub(r"[^\d.]", "", str(val))
    try:
        num = float(s) if s else 0
    except ValueError:
        return None
    return num if num > 0 else None


class ValuationProvider(ABC):
    """
    Abstract interface for property valuation sources.
    Providers receive an HTTP client from the caller and never read the
    process environment themselves.
    """

    #: Identifier for this provider (used as the estimate source)
    name: str = ""
    #: Environment variable holding the API key, or None when no key is needed
    env_key: str | None = None

    def __init__(self, client: httpx.Client, api_key: str = "") -> None:
        self.client = client
        self.api_key = api_key

    @classmethod
    def is_configured(cls, env: Mapping[str, str | None]) -> bool:
        """True if ``env`` carries what this provider needs."""
        if cls.env_key is None:
            return True
        return bool(env.get(cls.env_key))

    @classmethod
    def from_env(cls, env: Mapping[str, str | None], client: httpx.Client) -> "ValuationProvider":
        api_key = (env.get(cls.env_key) or "") if cls.env_key else ""
        return cls(client=client, api_key=api_key)

    def fetch_estimate(self, address: str) -> ValuationEstimate | None:
        """Fetch an estimate for ``address``. Failures are logged and return None."""
        try:
            return self._fetch(address)
        except httpx.HTTPError as e:
            logger.warning("[valuation:%s] Request failed for %r: %s", self.name, address, e)
        except (ValueError, KeyError, TypeError, IndexError, AttributeError) as e:
            logger.warning("[valuation:%s] Bad response for %r: %s", self.name, address, e)
        return None

    @abstractmethod
    def _fetch(self, address: str) -> ValuationEstimate | None:
        ...

    def _get_json(
        self,
        url: str,
        params: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any | None:
        """GET ``url`` and decode JSON; None (with a warning) on non-2xx."""
        resp = self.client.get(url, params=params, headers=headers)
        if not resp.is_success:
            logger.warning("[valuation:%s] HTTP %d from %s", self.name, resp.status_code, url)
            return None
        return resp.json()
