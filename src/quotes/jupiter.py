"""Jupiter aggregator adapter (Solana).

Two calls:
1. GET  /quote - route + expected output for an amount in base units
2. POST /swap  - unsigned, base64 VersionedTransaction for a user wallet

The swap call is best-effort: a quote without a transaction is still a
quote, and callers treat it as "cannot execute yet".
"""

from __future__ import annotations

from typing import Any, Optional

import httpx
import structlog

from config.settings import settings
from src.intent.models import SOLANA
from src.quotes.models import ChainFamily, Quote
from src.quotes.tokens import TokenTable

logger = structlog.get_logger()


class JupiterAdapter:
    """Quotes Solana swaps through the Jupiter v6 API."""

    family = ChainFamily.SOLANA
    provider = "jupiter"

    def __init__(
        self,
        tokens: Optional[TokenTable] = None,
        base_url: Optional[str] = None,
        slippage_bps: Optional[int] = None,
        timeout: Optional[float] = None,
        swap_timeout: Optional[float] = None,
    ):
        self.tokens = tokens or TokenTable.default()
        self.base_url = (base_url or settings.JUPITER_API_URL).rstrip("/")
        self.slippage_bps = slippage_bps if slippage_bps is not None else settings.JUPITER_SLIPPAGE_BPS
        self.timeout = timeout if timeout is not None else settings.QUOTE_TIMEOUT_SECONDS
        self.swap_timeout = swap_timeout if swap_timeout is not None else settings.SWAP_TX_TIMEOUT_SECONDS

    def resolve_mint(self, asset: str) -> str:
        """Table lookup, else the input is taken as a literal mint address."""
        info = self.tokens.lookup(SOLANA, asset)
        return info.address if info is not None else asset

    async def get_quote(
        self,
        from_asset: str,
        to_asset: str,
        amount_base_units: int,
        *,
        chain: str = SOLANA,
        user_address: Optional[str] = None,
    ) -> Optional[Quote]:
        input_mint = self.resolve_mint(from_asset)
        output_mint = self.resolve_mint(to_asset)
        params = {
            "inputMint": input_mint,
            "outputMint": output_mint,
            "amount": str(amount_base_units),
            "slippageBps": self.slippage_bps,
        }

        body = await self._request("GET", f"{self.base_url}/quote", params=params, timeout=self.timeout)
        if body is None:
            return None

        try:
            in_amount = int(body.get("inAmount", amount_base_units))
            out_amount = int(body["outAmount"])
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("jupiter_quote_malformed", error=str(exc), body=str(body)[:200])
            return None

        swap_transaction = None
        if user_address:
            swap_transaction = await self.get_swap_transaction(user_address, body)

        logger.info(
            "jupiter_quote",
            input_mint=input_mint,
            output_mint=output_mint,
            in_amount=in_amount,
            out_amount=out_amount,
            price_impact=body.get("priceImpactPct"),
            has_tx=swap_transaction is not None,
        )
        return Quote(
            family=self.family,
            provider=self.provider,
            input_asset=input_mint,
            output_asset=output_mint,
            in_amount=in_amount,
            out_amount=out_amount,
            route=body.get("routePlan"),
            raw=body,
            swap_transaction=swap_transaction,
        )

    async def get_swap_transaction(self, user_public_key: str, quote_response: dict[str, Any]) -> Optional[str]:
        """Request the unsigned swap transaction. Returns None on any failure."""
        body = await self._request(
            "POST",
            f"{self.base_url}/swap",
            json={
                "quoteResponse": quote_response,
                "userPublicKey": user_public_key,
                "wrapAndUnwrapSol": True,
            },
            timeout=self.swap_timeout,
        )
        if body is None:
            return None
        tx = body.get("swapTransaction")
        if not tx:
            logger.warning("jupiter_swap_missing_tx", body=str(body)[:200])
            return None
        return tx

    async def _request(self, method: str, url: str, timeout: float, **kwargs: Any) -> Optional[dict[str, Any]]:
        try:
            async with httpx.AsyncClient() as client:
                resp = await client.request(method, url, timeout=timeout, **kwargs)
                resp.raise_for_status()
                data = resp.json()
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "jupiter_api_error",
                url=url,
                status_code=exc.response.status_code,
                error=exc.response.text[:200],
            )
            return None
        except httpx.RequestError as exc:
            logger.warning("jupiter_request_error", url=url, error=str(exc))
            return None
        except ValueError as exc:
            logger.warning("jupiter_parse_error", url=url, error=str(exc))
            return None

        if not isinstance(data, dict):
            logger.warning("jupiter_unexpected_body", url=url, body=str(data)[:200])
            return None
        return data
