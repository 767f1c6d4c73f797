"""Intent Resolver - turns raw user input into a canonical TradeIntent.

Two entry points share one normalisation path:
1. StructuredFields (swap form, /v1/trade/execute) - no collaborator call
2. Free text - regex fast path, else the LLM extractor

The resolver never raises: extractor failures come back as an UNKNOWN
intent whose reasoning carries the diagnostic, so callers can render a
message instead of crashing.
"""

from __future__ import annotations

import re
from typing import Any, Optional, Union

import structlog

from src.exceptions import IntentUnresolved
from src.intent.extractor import IntentExtractor
from src.intent.models import (
    ETHEREUM,
    MONAD,
    SOLANA,
    Action,
    StructuredFields,
    TradeIntent,
    normalize_chain,
)
from src.utils.amounts import parse_amount

logger = structlog.get_logger()

# "swap 1 sol to usdc", "bridge 0.5 eth -> usdc on sepolia"
_FAST_PATH = re.compile(
    r"^\s*(?P<action>swap|bridge|stake)\s+"
    r"(?P<amount>\d+(?:\.\d+)?|\.\d+)\s+"
    r"(?P<from>[A-Za-z0-9]+)\s+"
    r"(?:to|for|into|->)\s+"
    r"(?P<to>[A-Za-z0-9]+)"
    r"(?:\s+on\s+(?P<chain>[A-Za-z]+))?"
    r"\s*[.!]?\s*$",
    re.IGNORECASE,
)

_EVM_ADDRESS = re.compile(r"^0x[0-9a-fA-F]{40}$")
_BASE58_ADDRESS = re.compile(r"^[1-9A-HJ-NP-Za-km-z]{32,44}$")

# Native gas assets imply their chain when none was named.
NATIVE_ASSET_CHAINS = {"SOL": SOLANA, "ETH": ETHEREUM, "MON": MONAD}


def normalize_asset(value: Any) -> str:
    """Upper-case symbols; keep addresses verbatim (base58 is case-sensitive)."""
    text = str(value or "").strip()
    if _EVM_ADDRESS.match(text) or _BASE58_ADDRESS.match(text):
        return text
    return text.upper()


def default_chain(from_asset: str, solana_connected: bool) -> str:
    hinted = NATIVE_ASSET_CHAINS.get(from_asset)
    if hinted:
        return hinted
    return SOLANA if solana_connected else ETHEREUM


class IntentResolver:
    """Stateless resolver; one instance can serve every request."""

    def __init__(self, extractor: Optional[IntentExtractor] = None):
        self._extractor = extractor or IntentExtractor()

    async def resolve(
        self,
        raw: Union[str, StructuredFields],
        *,
        solana_connected: bool = False,
    ) -> TradeIntent:
        if isinstance(raw, StructuredFields):
            return self._from_fields(raw, solana_connected)

        text = (raw or "").strip()
        if not text:
            return TradeIntent.unresolved("Empty request.")

        fields = self._fast_path(text)
        if fields is not None:
            logger.debug("intent_fast_path", text=text)
            return self._from_fields(fields, solana_connected)

        try:
            data = await self._extractor.extract(text)
        except IntentUnresolved as exc:
            logger.warning("intent_unresolved", error=str(exc))
            return TradeIntent.unresolved(str(exc))
        except Exception as exc:
            logger.error("intent_extractor_crashed", error=str(exc))
            return TradeIntent.unresolved(f"Error parsing request: {exc}")

        return self._from_fields(
            StructuredFields(
                action=str(data.get("action") or ""),
                from_token=data.get("from_token") or "",
                to_token=data.get("to_token") or "",
                amount=data.get("amount"),
                chain=data.get("chain"),
                reasoning=str(data.get("reasoning") or ""),
            ),
            solana_connected,
        )

    @staticmethod
    def _fast_path(text: str) -> Optional[StructuredFields]:
        m = _FAST_PATH.match(text)
        if m is None:
            return None
        return StructuredFields(
            action=m.group("action"),
            from_token=m.group("from"),
            to_token=m.group("to"),
            amount=m.group("amount"),
            chain=m.group("chain"),
            reasoning=f"Parsed directly: {m.group('action').lower()} "
                      f"{m.group('amount')} {m.group('from').upper()} to {m.group('to').upper()}",
        )

    @staticmethod
    def _from_fields(fields: StructuredFields, solana_connected: bool) -> TradeIntent:
        action = Action.parse(fields.action)
        if action is Action.UNKNOWN:
            return TradeIntent.unresolved(
                fields.reasoning or f"Unsupported action: {fields.action!r}"
            )

        from_asset = normalize_asset(fields.from_token)
        to_asset = normalize_asset(fields.to_token)
        chain = normalize_chain(fields.chain) or default_chain(from_asset, solana_connected)

        return TradeIntent(
            action=action,
            from_asset=from_asset,
            to_asset=to_asset,
            amount=parse_amount(fields.amount),
            chain=chain,
            reasoning=fields.reasoning,
        )
