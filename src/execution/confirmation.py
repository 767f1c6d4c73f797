"""Confirmation/signing state machine for the single pending trade.

    IDLE -> QUOTE_FETCHED -> AWAITING_CONFIRMATION -> SIGNING -> SETTLED | FAILED -> IDLE
                                   |
                                   +-- cancel() --> IDLE

Every execution needs an explicit confirm(); there is no auto-execute path.
Only one PendingTrade exists at a time: begin_request() discards the
current one (last intent wins) and bumps a generation counter, so a slow
pipeline run that finishes after a newer one started is dropped instead
of overwriting the newer trade.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional, Union

import structlog

from src.exceptions import SigningRejected
from src.execution.models import ExecutionPayload, PendingTrade
from src.execution.pipeline import PipelineResult, TradePipeline
from src.execution.signers import Signer
from src.intent.models import StructuredFields, TradeIntent
from src.quotes.models import ChainFamily

logger = structlog.get_logger()


class TradeState(Enum):
    IDLE = "idle"
    QUOTE_FETCHED = "quote_fetched"
    AWAITING_CONFIRMATION = "awaiting_confirmation"
    SIGNING = "signing"
    SETTLED = "settled"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class TradeSummary:
    """What the user is asked to approve."""

    action: str
    amount: str
    from_asset: str
    to_asset: str
    chain: str
    expected_out: int
    reasoning: str = ""

    @property
    def text(self) -> str:
        return (
            f"{self.action.upper()} {self.amount} {self.from_asset} -> {self.to_asset} "
            f"on {self.chain} (expected out: {self.expected_out} base units)"
        )


@dataclass(frozen=True, slots=True)
class SettlementResult:
    state: TradeState  # SETTLED or FAILED
    tx_id: Optional[str] = None
    error: Optional[str] = None
    superseded: bool = False

    @property
    def settled(self) -> bool:
        return self.state is TradeState.SETTLED


@dataclass(frozen=True, slots=True)
class SubmitOutcome:
    result: PipelineResult
    summary: Optional[TradeSummary] = None
    error: Optional[str] = None


class TradeSession:
    """Client-side holder of the one PendingTrade for a UI session."""

    def __init__(self, signers: Mapping[ChainFamily, Signer]):
        missing = set(ChainFamily) - set(signers)
        if missing:
            raise ValueError(f"No signer for chain families: {sorted(f.value for f in missing)}")
        self._signers = dict(signers)
        self._state = TradeState.IDLE
        self._pending: Optional[PendingTrade] = None
        self._generation = 0

    @property
    def state(self) -> TradeState:
        return self._state

    @property
    def pending(self) -> Optional[PendingTrade]:
        return self._pending

    @property
    def generation(self) -> int:
        return self._generation

    def _transition(self, new: TradeState) -> None:
        logger.debug("trade_state", old=self._state.value, new=new.value, generation=self._generation)
        self._state = new

    # --- request ---

    def begin_request(self) -> int:
        """Start a new pipeline run. Discards any pending trade."""
        self._generation += 1
        if self._pending is not None:
            logger.info("pending_trade_superseded", generation=self._pending.generation)
        self._pending = None
        # An in-flight signature keeps running but its result is superseded.
        self._transition(TradeState.IDLE)
        return self._generation

    def offer(
        self,
        generation: int,
        intent: TradeIntent,
        payload: ExecutionPayload,
    ) -> Optional[TradeSummary]:
        """Install a freshly built payload and surface it for approval.

        Returns None when the result is stale (a newer request started)
        or the payload has nothing to sign yet.
        """
        if generation != self._generation:
            logger.info("stale_quote_discarded", generation=generation, current=self._generation)
            return None
        if not payload.executable:
            logger.info("payload_not_executable", generation=generation, chain=intent.chain)
            return None

        self._pending = PendingTrade(
            intent=intent, payload=payload, chain=intent.chain, generation=generation
        )
        self._transition(TradeState.QUOTE_FETCHED)
        summary = TradeSummary(
            action=intent.action.value,
            amount=str(intent.amount),
            from_asset=intent.from_asset,
            to_asset=intent.to_asset,
            chain=intent.chain,
            expected_out=payload.quote.out_amount,
            reasoning=intent.reasoning,
        )
        self._transition(TradeState.AWAITING_CONFIRMATION)
        return summary

    async def submit(
        self,
        pipeline: TradePipeline,
        raw: Union[str, StructuredFields],
        *,
        user_address: Optional[str] = None,
        solana_connected: bool = False,
    ) -> SubmitOutcome:
        """UI send: begin request, run the pipeline, offer the result."""
        generation = self.begin_request()
        result = await pipeline.run(raw, user_address=user_address, solana_connected=solana_connected)
        if not result.ok:
            return SubmitOutcome(result=result, error=result.error)
        summary = self.offer(generation, result.intent, result.payload)
        if summary is None:
            if generation != self._generation:
                return SubmitOutcome(result=result, error="Superseded by a newer request")
            return SubmitOutcome(result=result, error="Quote found but no signable transaction yet")
        return SubmitOutcome(result=result, summary=summary)

    # --- resolution ---

    def cancel(self) -> None:
        """Discard the pending trade. No side effects."""
        if self._state is not TradeState.AWAITING_CONFIRMATION:
            logger.debug("cancel_ignored", state=self._state.value)
            return
        logger.info("pending_trade_cancelled", generation=self._generation)
        self._pending = None
        self._transition(TradeState.IDLE)

    async def confirm(self) -> SettlementResult:
        """Sign and submit the pending trade on its chain's path."""
        if self._state is not TradeState.AWAITING_CONFIRMATION or self._pending is None:
            raise SigningRejected(f"Nothing to confirm (state={self._state.value})")

        trade = self._pending
        signer = self._signers[trade.payload.family]
        self._transition(TradeState.SIGNING)

        result = SettlementResult(state=TradeState.FAILED, error="Signing was interrupted")
        try:
            tx_id = await signer.sign_and_submit(trade)
        except Exception as exc:
            # Wallet rejection text goes to the user verbatim
            message = str(exc) or type(exc).__name__
            logger.warning("trade_signing_failed", chain=trade.chain, error=message)
            result = SettlementResult(state=TradeState.FAILED, error=message)
        else:
            logger.info("trade_settled", chain=trade.chain, tx_id=tx_id)
            result = SettlementResult(state=TradeState.SETTLED, tx_id=tx_id)
        finally:
            # Cancellation included: the session never stays in SIGNING.
            # A newer request started mid-signing owns the state instead.
            if trade.generation == self._generation:
                self._transition(result.state)
                self._pending = None
                self._transition(TradeState.IDLE)

        if trade.generation != self._generation:
            return SettlementResult(
                state=result.state, tx_id=result.tx_id, error=result.error, superseded=True
            )
        return result
