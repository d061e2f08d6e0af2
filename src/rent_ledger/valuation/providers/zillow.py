"""Zillow (RapidAPI zillow-com1) Zestimate provider."""

from __future__ import annotations

from datetime import datetime, timezone

from ...models import ValuationEstimate
from .base import ValuationProvider, parse_number

HOST = "zillow-com1.p.rapidapi.com"


class ZillowProvider(ValuationProvider):
    """Zestimate via /propertyExtendedSearch. Range defaults to +/-6%."""

    name = "zillow"
    env_key = "ZILLOW_API_KEY"
    confidence = 0.90

    def _fetch(self, address: str) -> ValuationEstimate | None:
        data = self._get_json(
            f"https://{HOST}/propertyExtendedSearch",
            params={"location": address},
            headers={"x-rapidapi-key": self.api_key, "x-rapidapi-host": HOST},
        )
        props = (data or {}).get("props") or []
        prop = props[0] if props else {}
        zestimate = parse_number(prop.get("zestimate"))
        if zestimate is None:
            return None

        low_pct = parse_number(prop.get("zestimateLowPercent"))
        high_pct = parse_number(prop.get("zestimateHighPercent"))
        low = zestimate * (1 - low_pct / 100) if low_pct else zestimate * 0.94
        high = zestimate * (1 + high_pct / 100) if high_pct else zestimate * 1.06

        return ValuationEstimate(
            source=self.name,
            estimate=zestimate,
            low=low,
            high=high,
            confidence=self.confidence,
            rental_estimate=parse_number(prop.get("rentZestimate")),
            details={"zpid": prop.get("zpid"), "last_sold_price": prop.get("lastSoldPrice")},
            fetched_at=datetime.now(timezone.utc),
        )
