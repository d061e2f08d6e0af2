"""HouseCanary property value provider."""

from __future__ import annotations

from datetime import datetime, timezone

from ...models import ValuationEstimate
from .base import ValuationProvider, parse_number


class HouseCanaryProvider(ValuationProvider):
    name = "housecanary"
    env_key = "HOUSECANARY_API_KEY"
    confidence = 0.88
    base_url = "https://api.housecanary.com/v2"

    def _fetch(self, address: str) -> ValuationEstimate | None:
        data = self._get_json(
            f"{self.base_url}/property/value",
            params={"address": address},
            headers={"Authorization": f"Bearer {self.api_key}"},
        )
        prop = (data or {}).get("property") or {}
        val = prop.get("value") or {}
        value = parse_number(val.get("value"))
        if value is None:
            return None

        rental = prop.get("rental_value") or {}
        return ValuationEstimate(
            source=self.name,
            estimate=value,
            low=parse_number(val.get("low")) or value * 0.93,
            high=parse_number(val.get("high")) or value * 1.07,
            confidence=self.confidence,
            rental_estimate=parse_number(rental.get("value")),
            details={"forecast": prop.get("value_forecast")},
            fetched_at=datetime.now(timezone.utc),
        )
