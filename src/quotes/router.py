"""Chain Router - picks the quoting adapter for a resolved intent."""

from __future__ import annotations

from typing import Optional, Union

import structlog

from config.settings import settings
from src.exceptions import UnsupportedChain
from src.intent.models import SOLANA, TradeIntent, normalize_chain
from src.quotes.models import QuoteAdapter
from src.quotes.openocean import EVM_CHAIN_IDS

logger = structlog.get_logger()


class ChainRouter:
    """Routes purely on ``intent.chain``.

    ``solana`` goes to the Solana adapter and every known EVM chain to
    the EVM adapter.  Unknown chains raise UnsupportedChain unless
    ``strict`` is off, in which case they fall back to the EVM adapter.
    """

    def __init__(
        self,
        solana: QuoteAdapter,
        evm: QuoteAdapter,
        strict: Optional[bool] = None,
    ):
        self.solana = solana
        self.evm = evm
        self.strict = settings.STRICT_CHAIN_ROUTING if strict is None else strict

    def route(self, target: Union[TradeIntent, str]) -> QuoteAdapter:
        raw_chain = target.chain if isinstance(target, TradeIntent) else target
        chain = normalize_chain(raw_chain)

        if chain == SOLANA:
            return self.solana
        if chain in EVM_CHAIN_IDS:
            return self.evm
        if self.strict:
            raise UnsupportedChain(f"No quote route for chain {raw_chain!r}")

        logger.warning("chain_route_fallback_evm", chain=raw_chain)
        return self.evm
