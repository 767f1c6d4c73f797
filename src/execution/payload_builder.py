"""Execution Payload Builder - merges an intent and a quote.

Pure: no network calls. Only swaps are executable; every other action is
acknowledged upstream but rejected here.
"""

from __future__ import annotations

from typing import Optional

from web3 import Web3

from config.settings import settings
from src.intent.models import Action, TradeIntent
from src.quotes.models import ChainFamily, Quote
from src.quotes.openocean import chain_id_for
from src.execution.models import (
    BuildResult,
    EvmContractCall,
    EvmExecutionPayload,
    SolanaExecutionPayload,
)


class PayloadBuilder:
    def __init__(
        self,
        pool_address: Optional[str] = None,
        min_out_slippage_bps: Optional[int] = None,
    ):
        self.pool_address = pool_address if pool_address is not None else settings.EVM_POOL_ADDRESS
        self.min_out_slippage_bps = (
            min_out_slippage_bps if min_out_slippage_bps is not None
            else settings.EVM_MIN_OUT_SLIPPAGE_BPS
        )

    def build(
        self,
        intent: TradeIntent,
        quote: Optional[Quote],
        *,
        user_address: Optional[str] = None,
    ) -> BuildResult:
        if intent.action is not Action.SWAP:
            return BuildResult(error=f"Action '{intent.action.value}' is not executable; only swaps are supported")
        if quote is None:
            return BuildResult(error="No quote available; nothing to execute")

        if quote.family is ChainFamily.SOLANA:
            return BuildResult(
                payload=SolanaExecutionPayload(quote=quote, swap_transaction=quote.swap_transaction)
            )
        return self._build_evm(intent, quote, user_address)

    def _build_evm(self, intent: TradeIntent, quote: Quote, user_address: Optional[str]) -> BuildResult:
        if not self.pool_address:
            return BuildResult(error="EVM pool contract is not configured")
        if not user_address:
            return BuildResult(error="An EVM wallet address is required to build the swap call")
        if not Web3.is_address(user_address):
            return BuildResult(error=f"Not an EVM wallet address: {user_address!r}")

        min_out = quote.out_amount * (10_000 - self.min_out_slippage_bps) // 10_000
        call = EvmContractCall(
            pool_address=self.pool_address,
            user=user_address,
            token_in=quote.input_asset,
            token_out=quote.output_asset,
            amount_in=quote.in_amount,
            amount_out_min=min_out,
        )
        return BuildResult(
            payload=EvmExecutionPayload(quote=quote, chain_id=chain_id_for(intent.chain), call=call)
        )
