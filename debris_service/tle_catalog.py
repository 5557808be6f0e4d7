"""
TLE Catalog Module

Fetches the public TLE catalog and parses it into records.

A fetch never fails from the caller's point of view: transport errors are
turned into a fallback result carrying the built-in debris catalog and the
failure reason. This keeps the app populated at the cost of data
trustworthiness, so the result is tagged and the source is logged.
"""

import asyncio
from typing import List, Optional

import requests

from config import FALLBACK_TLE_CATALOG, MAX_CATALOG_RECORDS, ServiceConfig
from debris_service.models import CatalogFetchResult, CatalogSource, TleRecord
from logging_config import get_logger

logger = get_logger(__name__)

LINES_PER_RECORD = 3


def parse_tle_text(tle_text: str, limit: int = MAX_CATALOG_RECORDS) -> List[TleRecord]:
    """
    Parse three-line TLE text into records.

    Lines are consumed in groups of name, line 1, line 2. Blank lines are
    ignored and a trailing group with fewer than three lines is dropped.

    Args:
        tle_text: Raw catalog text
        limit: Maximum number of records to return, in source order

    Returns:
        List of TleRecord
    """
    if limit <= 0:
        raise ValueError(f"limit must be positive, got {limit}")

    lines = [line.strip() for line in tle_text.strip().split('\n') if line.strip()]
    records = []

    for i in range(0, len(lines) - LINES_PER_RECORD + 1, LINES_PER_RECORD):
        records.append(TleRecord(name=lines[i], line1=lines[i + 1], line2=lines[i + 2]))

    logger.debug("tle_text_parsed", lines=len(lines), records=len(records))
    return records[:limit]


def fallback_records() -> List[TleRecord]:
    """Built-in debris records used when the live catalog is unavailable."""
    return [TleRecord(**entry) for entry in FALLBACK_TLE_CATALOG]


class CatalogClient:
    """HTTP client for the CelesTrak general perturbations endpoint"""

    def __init__(self, config: Optional[ServiceConfig] = None):
        self.config = config or ServiceConfig()

    def fetch_text_sync(self) -> str:
        """Single blocking GET of the catalog; raises on transport errors and non-200."""
        response = requests.get(
            self.config.catalog_url,
            params=self.config.catalog_params,
            timeout=self.config.fetch_timeout,
        )
        response.raise_for_status()
        logger.info("catalog_response", status=response.status_code, length=len(response.text))
        return response.text

    async def fetch_text(self) -> str:
        """Fetch the catalog text without blocking the event loop."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.fetch_text_sync)

    async def fetch(self) -> CatalogFetchResult:
        """
        Fetch and parse the catalog, substituting the fallback set on failure.

        Returns:
            CatalogFetchResult tagged LIVE or FALLBACK
        """
        logger.info("catalog_fetch_started", url=self.config.catalog_url)
        try:
            text = await self.fetch_text()
            records = parse_tle_text(text, limit=self.config.max_records)
        except Exception as e:
            reason = f"{type(e).__name__}: {e}"
            logger.warning("catalog_fallback", reason=reason)
            return CatalogFetchResult(
                source=CatalogSource.FALLBACK,
                records=fallback_records(),
                reason=reason,
            )

        logger.info("catalog_fetched", records=len(records))
        return CatalogFetchResult(source=CatalogSource.LIVE, records=records)
