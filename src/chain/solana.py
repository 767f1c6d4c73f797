"""Solana RPC passthroughs: balance reads and signature confirmation."""

from __future__ import annotations

import asyncio
from typing import Optional

import structlog
from solana.exceptions import SolanaRpcException
from solana.rpc.async_api import AsyncClient
from solana.rpc.commitment import Confirmed
from solana.rpc.core import RPCException, UnconfirmedTxError
from solders.pubkey import Pubkey
from solders.signature import Signature

from config.settings import settings
from src.exceptions import SigningRejected

logger = structlog.get_logger()

LAMPORTS_PER_SOL = 1_000_000_000


class SolanaRpc:
    """Thin async wrapper over solana-py's AsyncClient."""

    def __init__(self, rpc_url: Optional[str] = None):
        self.rpc_url = rpc_url or settings.SOLANA_RPC_URL

    async def get_balance(self, address: str) -> Optional[float]:
        """SOL balance of ``address``, or None when the RPC is unavailable.

        Raises:
            ValueError: If ``address`` is not a valid public key.
        """
        pubkey = Pubkey.from_string(address)
        try:
            async with AsyncClient(self.rpc_url) as client:
                resp = await client.get_balance(pubkey)
        except (SolanaRpcException, RPCException) as exc:
            logger.warning("solana_balance_failed", address=address, error=str(exc))
            return None
        return resp.value / LAMPORTS_PER_SOL

    async def confirm_signature(self, signature: str, timeout: Optional[float] = None) -> None:
        """One-shot wait for ``confirmed`` commitment.

        Raises:
            SigningRejected: On timeout, RPC error, or on-chain failure.
        """
        timeout = timeout if timeout is not None else settings.SOLANA_CONFIRM_TIMEOUT_SECONDS
        sig = Signature.from_string(signature)
        try:
            async with AsyncClient(self.rpc_url) as client:
                resp = await asyncio.wait_for(
                    client.confirm_transaction(sig, commitment=Confirmed),
                    timeout=timeout,
                )
        except asyncio.TimeoutError as exc:
            raise SigningRejected(
                f"Transaction {signature} not confirmed within {timeout:.0f}s"
            ) from exc
        except (UnconfirmedTxError, SolanaRpcException, RPCException) as exc:
            raise SigningRejected(f"Confirmation failed for {signature}: {exc}") from exc

        statuses = resp.value or []
        status = statuses[0] if statuses else None
        if status is not None and status.err is not None:
            raise SigningRejected(f"Transaction {signature} failed on-chain: {status.err}")
        logger.info("solana_tx_confirmed", signature=signature)
