"""Quote structures shared by the chain adapters."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Protocol, runtime_checkable


class ChainFamily(Enum):
    SOLANA = "solana"
    EVM = "evm"


@dataclass(frozen=True, slots=True)
class Quote:
    """An aggregator's proposed route for a given input amount.

    ``raw`` is the untouched aggregator body; the pipeline only relies on
    the normalised fields. ``swap_transaction`` is a base64 unsigned
    transaction and only ever set for Solana.
    """

    family: ChainFamily
    provider: str
    input_asset: str
    output_asset: str
    in_amount: int
    out_amount: int
    route: Any = None
    raw: dict[str, Any] = field(default_factory=dict)
    swap_transaction: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "family": self.family.value,
            "provider": self.provider,
            "input_asset": self.input_asset,
            "output_asset": self.output_asset,
            "in_amount": str(self.in_amount),
            "out_amount": str(self.out_amount),
            "route": self.route,
        }


@runtime_checkable
class QuoteAdapter(Protocol):
    """Interface that every chain-family quoting adapter satisfies."""

    family: ChainFamily

    async def get_quote(
        self,
        from_asset: str,
        to_asset: str,
        amount_base_units: int,
        *,
        chain: str,
        user_address: Optional[str] = None,
    ) -> Optional[Quote]: ...
