"""Jupiter price passthrough. Failures read as 0 / empty, never raise."""

from __future__ import annotations

from typing import Any, Optional

import httpx
import structlog

from config.settings import settings

logger = structlog.get_logger()


class PriceService:
    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None):
        self.base_url = base_url or settings.JUPITER_PRICE_URL
        self.timeout = timeout if timeout is not None else settings.QUOTE_TIMEOUT_SECONDS

    async def _fetch(self, ids: list[str]) -> dict[str, Any]:
        async with httpx.AsyncClient() as client:
            resp = await client.get(self.base_url, params={"ids": ",".join(ids)}, timeout=self.timeout)
            resp.raise_for_status()
            return resp.json().get("data") or {}

    async def get_price(self, symbol: str) -> float:
        try:
            data = await self._fetch([symbol])
            entry = data.get(symbol) or {}
            return float(entry.get("price") or 0)
        except (httpx.HTTPError, ValueError, AttributeError, TypeError) as exc:
            logger.warning("price_fetch_failed", symbol=symbol, error=str(exc))
            return 0.0

    async def get_prices(self, symbols: list[str]) -> dict[str, Any]:
        symbols = [s.strip() for s in symbols if s.strip()]
        if not symbols:
            return {}
        try:
            return await self._fetch(symbols)
        except (httpx.HTTPError, ValueError, AttributeError) as exc:
            logger.warning("prices_fetch_failed", symbols=symbols, error=str(exc))
            return {}
