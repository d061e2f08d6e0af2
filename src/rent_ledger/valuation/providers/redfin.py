"""Redfin (RapidAPI redfin-com) provider."""

from __future__ import annotations

from datetime import datetime, timezone

from ...models import ValuationEstimate
from .base import ValuationProvider, parse_number

HOST = "redfin-com.p.rapidapi.com"


class RedfinProvider(ValuationProvider):
    """First auto-complete match's price, +/-5%."""

    name = "redfin"
    env_key = "REDFIN_API_KEY"
    confidence = 0.85

    def _fetch(self, address: str) -> ValuationEstimate | None:
        data = self._get_json(
            f"https://{HOST}/properties/auto-complete",
            params={"location": address},
            headers={"x-rapidapi-key": self.api_key, "x-rapidapi-host": HOST},
        )
        sections = ((data or {}).get("payload") or {}).get("sections") or []
        rows = (sections[0].get("rows") or []) if sections else []
        if not rows:
            return None
        prop = rows[0]
        price = parse_number(prop.get("price"))
        if price is None:
            return None

        return ValuationEstimate(
            source=self.name,
            estimate=price,
            low=price * 0.95,
            high=price * 1.05,
            confidence=self.confidence,
            details={"url": prop.get("url"), "type": prop.get("type")},
            fetched_at=datetime.now(timezone.utc),
        )
