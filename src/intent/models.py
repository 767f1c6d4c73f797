"""Canonical trade intent structures."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Optional, Union


class Action(Enum):
    """What the user asked for."""

    SWAP = "swap"
    BRIDGE = "bridge"
    STAKE = "stake"
    BALANCE = "balance"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: Any) -> "Action":
        """Lenient lookup; anything unrecognised is UNKNOWN."""
        if isinstance(value, Action):
            return value
        try:
            return cls(str(value or "").strip().lower())
        except ValueError:
            return cls.UNKNOWN


SOLANA = "solana"
ETHEREUM = "ethereum"
SEPOLIA = "sepolia"
MONAD = "monad"

KNOWN_CHAINS = (ETHEREUM, SOLANA, SEPOLIA, MONAD)


def normalize_chain(chain: Optional[str]) -> str:
    return (chain or "").strip().lower()


@dataclass(frozen=True, slots=True)
class TradeIntent:
    """Resolved, canonical intent. Never mutated after resolution."""

    action: Action
    from_asset: str = ""
    to_asset: str = ""
    amount: Decimal = Decimal(0)
    chain: str = ""
    reasoning: str = ""

    @property
    def is_actionable(self) -> bool:
        return self.action is not Action.UNKNOWN

    @classmethod
    def unresolved(cls, reasoning: str) -> "TradeIntent":
        return cls(action=Action.UNKNOWN, reasoning=reasoning)

    def to_dict(self) -> dict[str, Any]:
        return {
            "action": self.action.value,
            "from_token": self.from_asset,
            "to_token": self.to_asset,
            "amount": str(self.amount),
            "chain": self.chain,
            "reasoning": self.reasoning,
        }


@dataclass(slots=True)
class StructuredFields:
    """Form/API input that bypasses natural-language extraction."""

    action: str
    from_token: str = ""
    to_token: str = ""
    amount: Union[Decimal, float, int, str, None] = None
    chain: Optional[str] = None
    reasoning: str = ""
