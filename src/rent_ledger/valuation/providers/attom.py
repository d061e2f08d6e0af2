"""ATTOM automated valuation model (AVM) provider."""

from __future__ import annotations

from datetime import datetime, timezone

from ...models import ValuationEstimate
from .base import ValuationProvider, parse_number

# AVM confidence score (0-100) assumed when the response omits it
DEFAULT_SCORE = 70


class AttomProvider(ValuationProvider):
    """AVM detail lookup. Confidence is the AVM score scaled to 0-1."""

    name = "attom"
    env_key = "ATTOM_API_KEY"
    base_url = "https://api.gateway.attomdata.com/propertyapi/v1.0.0"

    def _fetch(self, address: str) -> ValuationEstimate | None:
        data = self._get_json(
            f"{self.base_url}/attomavm/detail",
            params={"address": address},
            headers={"apikey": self.api_key, "Accept": "application/json"},
        )
        props = (data or {}).get("property") or []
        prop = props[0] if props else {}
        amount = (prop.get("avm") or {}).get("amount") or {}
        value = parse_number(amount.get("value"))
        if value is None:
            return None

        score = parse_number(amount.get("scr")) or DEFAULT_SCORE
        identifier = prop.get("identifier") or {}
        return ValuationEstimate(
            source=self.name,
            estimate=value,
            low=parse_number(amount.get("low")) or value,
            high=parse_number(amount.get("high")) or value,
            confidence=min(score, 100) / 100,
            details={"fips": identifier.get("fips"), "apn": identifier.get("apn")},
            fetched_at=datetime.now(timezone.utc),
        )
