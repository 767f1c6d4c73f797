"""Chain-specific signing paths used after user confirmation.

Key custody lives in the user's wallet; these signers only shape the
transaction and hand it to a wallet object implementing the protocols
below (browser bridge, hardware wallet, test double).
"""

from __future__ import annotations

import base64
import binascii
from typing import Any, Optional, Protocol, runtime_checkable

import structlog
from solders.transaction import VersionedTransaction
from web3 import Web3

from src.chain.evm import POOL_ABI
from src.chain.solana import SolanaRpc
from src.exceptions import SigningRejected
from src.execution.models import (
    EvmContractCall,
    EvmExecutionPayload,
    PendingTrade,
    SolanaExecutionPayload,
)

logger = structlog.get_logger()


def build_execute_swap_tx(call: EvmContractCall, chain_id: int) -> dict[str, Any]:
    """Unsigned ``executeSwap`` transaction for the user's wallet to sign."""
    pool = Web3().eth.contract(address=Web3.to_checksum_address(call.pool_address), abi=POOL_ABI)
    user = Web3.to_checksum_address(call.user)
    data = pool.encode_abi(
        call.function,
        args=[
            user,
            Web3.to_checksum_address(call.token_in),
            Web3.to_checksum_address(call.token_out),
            call.amount_in,
            call.amount_out_min,
        ],
    )
    return {"from": user, "to": pool.address, "data": data, "value": 0, "chainId": chain_id}


@runtime_checkable
class SolanaWallet(Protocol):
    async def sign_and_send(self, transaction: VersionedTransaction) -> str:
        """Sign and broadcast; return the base58 signature."""
        ...


@runtime_checkable
class EvmWallet(Protocol):
    async def send_transaction(self, tx: dict[str, Any]) -> str:
        """Sign and broadcast; return the 0x transaction hash."""
        ...


class Signer(Protocol):
    async def sign_and_submit(self, trade: PendingTrade) -> str: ...


def decode_transaction(blob: str) -> VersionedTransaction:
    try:
        return VersionedTransaction.from_bytes(base64.b64decode(blob, validate=True))
    except (binascii.Error, ValueError) as exc:
        raise SigningRejected(f"Invalid swap transaction: {exc}") from exc


class SolanaSigner:
    """Decode -> wallet sign-and-send -> wait for confirmation."""

    def __init__(self, wallet: SolanaWallet, rpc: SolanaRpc, confirm_timeout: Optional[float] = None):
        self.wallet = wallet
        self.rpc = rpc
        self.confirm_timeout = confirm_timeout

    async def sign_and_submit(self, trade: PendingTrade) -> str:
        payload = trade.payload
        if not isinstance(payload, SolanaExecutionPayload) or not payload.swap_transaction:
            raise SigningRejected("No signable Solana transaction for this trade")

        transaction = decode_transaction(payload.swap_transaction)
        signature = await self.wallet.sign_and_send(transaction)
        logger.info("solana_tx_sent", signature=signature, generation=trade.generation)
        await self.rpc.confirm_signature(signature, timeout=self.confirm_timeout)
        return signature


class EvmSigner:
    """Encode executeSwap and submit; hash acceptance is settlement."""

    def __init__(self, wallet: EvmWallet):
        self.wallet = wallet

    async def sign_and_submit(self, trade: PendingTrade) -> str:
        payload = trade.payload
        if not isinstance(payload, EvmExecutionPayload):
            raise SigningRejected("No EVM contract call for this trade")

        tx = build_execute_swap_tx(payload.call, payload.chain_id)
        tx_hash = await self.wallet.send_transaction(tx)
        if not tx_hash:
            raise SigningRejected("Wallet returned no transaction hash")
        logger.info("evm_tx_sent", tx_hash=tx_hash, chain_id=payload.chain_id, generation=trade.generation)
        return tx_hash
