"""Intent-to-execution pipeline.

resolve -> validate -> route -> scale -> quote -> build

Every failure comes back as a PipelineResult with ``error`` and
``error_kind`` set; nothing here raises to the caller.  Validation runs
before routing, so UNKNOWN, non-swap, and non-positive swap intents never
reach an adapter.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Union

import structlog

from src.exceptions import IntentUnresolved, NotExecutable, QuoteUnavailable, UnsupportedChain
from src.execution.models import ExecutionPayload
from src.execution.payload_builder import PayloadBuilder
from src.intent.models import Action, StructuredFields, TradeIntent
from src.intent.resolver import IntentResolver
from src.quotes.router import ChainRouter
from src.quotes.tokens import TokenTable
from src.utils.amounts import to_base_units

logger = structlog.get_logger()


@dataclass(frozen=True, slots=True)
class PipelineResult:
    intent: TradeIntent
    payload: Optional[ExecutionPayload] = None
    error: Optional[str] = None
    error_kind: Optional[str] = None  # exception class name from src.exceptions

    @property
    def ok(self) -> bool:
        return self.payload is not None and self.error is None

    @property
    def executable(self) -> bool:
        return self.ok and self.payload.executable

    @property
    def summary(self) -> Optional[str]:
        if not self.ok:
            return None
        i = self.intent
        return (
            f"{i.action.value.upper()} {i.amount} {i.from_asset} -> {i.to_asset} "
            f"on {i.chain} via {self.payload.quote.provider}"
        )

    def to_dict(self) -> dict[str, Any]:
        if not self.ok:
            return {"success": False, "error": self.error, "error_kind": self.error_kind}
        return {
            "success": True,
            "intent": self.intent.to_dict(),
            "execution_payload": self.payload.to_dict(),
            "executable": self.executable,
            "summary": self.summary,
        }


def _fail(intent: TradeIntent, exc_type: type[Exception], message: str) -> PipelineResult:
    return PipelineResult(intent=intent, error=message, error_kind=exc_type.__name__)


class TradePipeline:
    """Stateless per request; holds only its collaborators."""

    def __init__(
        self,
        resolver: IntentResolver,
        router: ChainRouter,
        tokens: TokenTable,
        builder: PayloadBuilder,
    ):
        self.resolver = resolver
        self.router = router
        self.tokens = tokens
        self.builder = builder

    @classmethod
    def from_settings(cls) -> "TradePipeline":
        from src.quotes.jupiter import JupiterAdapter
        from src.quotes.openocean import OpenOceanAdapter

        tokens = TokenTable.from_settings()
        return cls(
            resolver=IntentResolver(),
            router=ChainRouter(solana=JupiterAdapter(tokens), evm=OpenOceanAdapter(tokens)),
            tokens=tokens,
            builder=PayloadBuilder(),
        )

    async def run(
        self,
        raw: Union[str, StructuredFields],
        *,
        user_address: Optional[str] = None,
        solana_connected: bool = False,
    ) -> PipelineResult:
        intent = await self.resolver.resolve(raw, solana_connected=solana_connected)
        return await self.execute(intent, user_address=user_address)

    async def execute(self, intent: TradeIntent, *, user_address: Optional[str] = None) -> PipelineResult:
        if intent.action is Action.UNKNOWN:
            return _fail(intent, IntentUnresolved, intent.reasoning or "Could not understand the request")
        if intent.action is not Action.SWAP:
            # Understood, but the builder only accepts swaps
            built = self.builder.build(intent, None)
            return _fail(intent, NotExecutable, built.error or "Not executable")
        if intent.amount <= 0:
            return _fail(intent, IntentUnresolved, f"Swap amount must be positive, got {intent.amount}")
        if not intent.from_asset or not intent.to_asset:
            return _fail(intent, IntentUnresolved, "Swap needs both a source and a target asset")

        try:
            adapter = self.router.route(intent)
            decimals = self.tokens.decimals_for(intent.chain, intent.from_asset)
            amount_base_units = to_base_units(intent.amount, decimals)
            if amount_base_units <= 0:
                return _fail(intent, IntentUnresolved, f"Swap amount {intent.amount} is below one base unit")
            quote = await adapter.get_quote(
                intent.from_asset,
                intent.to_asset,
                amount_base_units,
                chain=intent.chain,
                user_address=user_address,
            )
        except UnsupportedChain as exc:
            logger.warning("pipeline_unsupported_chain", chain=intent.chain, error=str(exc))
            return _fail(intent, UnsupportedChain, str(exc))

        if quote is None:
            logger.warning(
                "pipeline_quote_unavailable",
                chain=intent.chain,
                from_asset=intent.from_asset,
                to_asset=intent.to_asset,
            )
            return _fail(intent, QuoteUnavailable, f"No quote available for {intent.from_asset} -> {intent.to_asset} on {intent.chain}")

        try:
            built = self.builder.build(intent, quote, user_address=user_address)
        except UnsupportedChain as exc:
            return _fail(intent, UnsupportedChain, str(exc))
        if not built.ok:
            return _fail(intent, QuoteUnavailable, built.error or "No payload available")

        logger.info(
            "pipeline_payload_ready",
            chain=intent.chain,
            family=built.payload.family.value,
            executable=built.payload.executable,
        )
        return PipelineResult(intent=intent, payload=built.payload)
