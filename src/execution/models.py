"""Shared data structures for trade execution."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Union

from src.intent.models import TradeIntent
from src.quotes.models import ChainFamily, Quote


@dataclass(frozen=True, slots=True)
class EvmContractCall:
    """Parameters for the pool contract's ``executeSwap``."""

    pool_address: str
    user: str
    token_in: str
    token_out: str
    amount_in: int
    amount_out_min: int
    function: str = "executeSwap"

    def to_dict(self) -> dict[str, Any]:
        return {
            "pool_address": self.pool_address,
            "function": self.function,
            "user": self.user,
            "token_in": self.token_in,
            "token_out": self.token_out,
            "amount_in": str(self.amount_in),
            "amount_out_min": str(self.amount_out_min),
        }


@dataclass(frozen=True, slots=True)
class SolanaExecutionPayload:
    """Jupiter quote plus the serialized transaction the wallet signs."""

    quote: Quote
    swap_transaction: Optional[str] = None

    family = ChainFamily.SOLANA

    @property
    def executable(self) -> bool:
        return bool(self.swap_transaction)

    def to_dict(self) -> dict[str, Any]:
        return {
            "family": self.family.value,
            "quote": self.quote.to_dict(),
            "swapTransaction": self.swap_transaction,
        }


@dataclass(frozen=True, slots=True)
class EvmExecutionPayload:
    """OpenOcean quote plus the contract call built client-side."""

    quote: Quote
    chain_id: int
    call: EvmContractCall

    family = ChainFamily.EVM

    @property
    def executable(self) -> bool:
        return True

    def to_dict(self) -> dict[str, Any]:
        return {
            "family": self.family.value,
            "quote": self.quote.to_dict(),
            "chain_id": self.chain_id,
            "call": self.call.to_dict(),
        }


ExecutionPayload = Union[SolanaExecutionPayload, EvmExecutionPayload]


@dataclass(frozen=True, slots=True)
class BuildResult:
    """Outcome of PayloadBuilder.build: a payload or a reason there is none."""

    payload: Optional[ExecutionPayload] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.payload is not None


@dataclass(frozen=True, slots=True)
class PendingTrade:
    """The single in-flight trade awaiting confirmation. Replace, never mutate."""

    intent: TradeIntent
    payload: ExecutionPayload
    chain: str
    generation: int
