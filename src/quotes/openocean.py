"""OpenOcean aggregator adapter (EVM chains).

Quote only: EVM execution is a client-side call to the pool contract's
``executeSwap``, so nothing beyond the route and expected output is
fetched from the aggregator.
"""

from __future__ import annotations

import re
from typing import Any, Optional

import httpx
import structlog
from web3 import Web3

from config.settings import settings
from src.exceptions import UnsupportedChain
from src.intent.models import ETHEREUM, MONAD, SEPOLIA, normalize_chain
from src.quotes.models import ChainFamily, Quote
from src.quotes.tokens import TokenTable

logger = structlog.get_logger()

# Closed: numeric ids select real liquidity, so unknown names never default.
EVM_CHAIN_IDS: dict[str, int] = {
    ETHEREUM: 1,
    SEPOLIA: 11155111,
    MONAD: 143,
}

_HEX_ADDRESS = re.compile(r"^0x[0-9a-fA-F]{40}$")


def chain_id_for(chain: str) -> int:
    """Map an EVM chain name to its id. Raises UnsupportedChain."""
    name = normalize_chain(chain)
    try:
        return EVM_CHAIN_IDS[name]
    except KeyError:
        raise UnsupportedChain(f"Unsupported EVM chain: {chain!r}") from None


class OpenOceanAdapter:
    """Quotes EVM swaps through the OpenOcean v4 API."""

    family = ChainFamily.EVM
    provider = "openocean"

    def __init__(
        self,
        tokens: Optional[TokenTable] = None,
        base_url: Optional[str] = None,
        gas_price_wei: Optional[int] = None,
        slippage_pct: Optional[float] = None,
        timeout: Optional[float] = None,
    ):
        self.tokens = tokens or TokenTable.default()
        self.base_url = (base_url or settings.OPENOCEAN_API_URL).rstrip("/")
        self.gas_price_wei = gas_price_wei if gas_price_wei is not None else settings.OPENOCEAN_GAS_PRICE_WEI
        self.slippage_pct = slippage_pct if slippage_pct is not None else settings.OPENOCEAN_SLIPPAGE_PCT
        self.timeout = timeout if timeout is not None else settings.QUOTE_TIMEOUT_SECONDS

    def resolve_token(self, chain: str, asset: str) -> Optional[str]:
        """Checksummed address for a symbol or hex address; None if unknown."""
        info = self.tokens.lookup(chain, asset)
        if info is not None:
            return Web3.to_checksum_address(info.address)
        if _HEX_ADDRESS.match(asset):
            return Web3.to_checksum_address(asset)
        return None

    async def get_quote(
        self,
        from_asset: str,
        to_asset: str,
        amount_base_units: int,
        *,
        chain: str,
        user_address: Optional[str] = None,
    ) -> Optional[Quote]:
        chain_id = chain_id_for(chain)
        chain = normalize_chain(chain)

        in_token = self.resolve_token(chain, from_asset)
        out_token = self.resolve_token(chain, to_asset)
        if in_token is None or out_token is None:
            logger.warning(
                "openocean_token_unknown",
                chain=chain,
                from_asset=from_asset,
                to_asset=to_asset,
            )
            return None

        url = f"{self.base_url}/{chain_id}/quote"
        params = {
            "inTokenAddress": in_token,
            "outTokenAddress": out_token,
            "amountDecimals": str(amount_base_units),
            "gasPriceDecimals": str(self.gas_price_wei),
            "slippage": self.slippage_pct,
        }

        try:
            async with httpx.AsyncClient() as client:
                resp = await client.get(url, params=params, timeout=self.timeout)
                resp.raise_for_status()
                body = resp.json()
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "openocean_api_error",
                chain_id=chain_id,
                status_code=exc.response.status_code,
                error=exc.response.text[:200],
            )
            return None
        except httpx.RequestError as exc:
            logger.warning("openocean_request_error", chain_id=chain_id, error=str(exc))
            return None
        except ValueError as exc:
            logger.warning("openocean_parse_error", chain_id=chain_id, error=str(exc))
            return None

        return self._parse_quote(body, chain_id, in_token, out_token, amount_base_units)

    def _parse_quote(
        self,
        body: Any,
        chain_id: int,
        in_token: str,
        out_token: str,
        amount_base_units: int,
    ) -> Optional[Quote]:
        # OpenOcean wraps errors in a 200 with a non-200 "code"
        if not isinstance(body, dict) or body.get("code") != 200:
            logger.warning("openocean_quote_rejected", chain_id=chain_id, body=str(body)[:200])
            return None
        data = body.get("data") or {}
        try:
            out_amount = int(data["outAmount"])
            in_amount = int(data.get("inAmount", amount_base_units))
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("openocean_quote_malformed", chain_id=chain_id, error=str(exc))
            return None

        logger.info(
            "openocean_quote",
            chain_id=chain_id,
            in_token=in_token,
            out_token=out_token,
            in_amount=in_amount,
            out_amount=out_amount,
        )
        return Quote(
            family=self.family,
            provider=self.provider,
            input_asset=in_token,
            output_asset=out_token,
            in_amount=in_amount,
            out_amount=out_amount,
            route=data.get("path"),
            raw=body,
        )
