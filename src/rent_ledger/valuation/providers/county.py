"""Cook County assessor provider (open data, no API key).

Market value is approximated as ten times the certified assessed value,
since Cook County assesses residential property at 10% of market value.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone

from ...models import ValuationEstimate
from .base import ValuationProvider, parse_number

ASSESSMENT_DATASET = "https://datacatalog.cookcountyil.gov/resource/uzyt-m557.json"
ASSESSMENT_RATIO = 10

_ILLINOIS = re.compile(r"(,\s*IL\b)|(\bIllinois\b)", re.IGNORECASE)


def is_illinois_address(address: str) -> bool:
    return bool(_ILLINOIS.search(address or ""))


class CountyProvider(ValuationProvider):
    name = "county"
    env_key = None
    confidence = 0.70

    def _fetch(self, address: str) -> ValuationEstimate | None:
        if not is_illinois_address(address):
            return None
        street = address.split(",")[0].strip().upper().replace("'", "''")
        rows = self._get_json(
            ASSESSMENT_DATASET,
            params={"$where": f"property_address like '%{street}%'", "$limit": "1"},
        )
        if not isinstance(rows, list) or not rows:
            return None
        row = rows[0]
        assessed = parse_number(row.get("certified_total"))
        if assessed is None:
            return None

        market = assessed * ASSESSMENT_RATIO
        return ValuationEstimate(
            source=self.name,
            estimate=market,
            low=market * 0.9,
            high=market * 1.1,
            confidence=self.confidence,
            details={"pin": row.get("pin"), "assessed_value": assessed, "tax_year": row.get("tax_year")},
            fetched_at=datetime.now(timezone.utc),
        )
