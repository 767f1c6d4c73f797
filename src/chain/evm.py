"""EVM pool contract client: admin reads and owner-only writes.

The pool contract itself is owned elsewhere; only the ABI surface the
terminal needs is declared here.
"""

from __future__ import annotations

import asyncio
from typing import Any, Optional

import aiohttp
import structlog
from web3 import AsyncWeb3, Web3
from web3.exceptions import Web3Exception
from web3.providers import AsyncHTTPProvider

from config.settings import settings
from src.exceptions import ConfigError

logger = structlog.get_logger()

POOL_ABI: list[dict[str, Any]] = [
    {
        "name": "executeSwap",
        "type": "function",
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "user", "type": "address"},
            {"name": "tokenIn", "type": "address"},
            {"name": "tokenOut", "type": "address"},
            {"name": "amountIn", "type": "uint256"},
            {"name": "amountOut", "type": "uint256"},
        ],
        "outputs": [],
    },
    {"name": "pause", "type": "function", "stateMutability": "nonpayable", "inputs": [], "outputs": []},
    {"name": "unpause", "type": "function", "stateMutability": "nonpayable", "inputs": [], "outputs": []},
    {
        "name": "paused",
        "type": "function",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "bool"}],
    },
    {
        "name": "maxSwapAmount",
        "type": "function",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "uint256"}],
    },
    {
        "name": "owner",
        "type": "function",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "address"}],
    },
]


class PoolContract:
    """Reads pool state and sends owner-only pause/unpause transactions."""

    def __init__(
        self,
        rpc_url: Optional[str] = None,
        pool_address: Optional[str] = None,
        private_key: Optional[str] = None,
    ):
        self.rpc_url = rpc_url or settings.EVM_RPC_URL
        self.pool_address = pool_address if pool_address is not None else settings.EVM_POOL_ADDRESS
        self._private_key = private_key if private_key is not None else settings.AGENT_PRIVATE_KEY
        self._w3 = AsyncWeb3(AsyncHTTPProvider(self.rpc_url))

    def _contract(self):
        if not self.pool_address:
            raise ConfigError("EVM_POOL_ADDRESS is not configured")
        return self._w3.eth.contract(
            address=Web3.to_checksum_address(self.pool_address), abi=POOL_ABI
        )

    async def stats(self) -> Optional[dict[str, Any]]:
        """paused / maxSwapAmount / owner, read concurrently. None on failure."""
        try:
            contract = self._contract()
            is_paused, max_limit, owner = await asyncio.gather(
                contract.functions.paused().call(),
                contract.functions.maxSwapAmount().call(),
                contract.functions.owner().call(),
            )
        except ConfigError:
            raise
        except Exception as exc:
            logger.error("pool_stats_failed", pool=self.pool_address, error=str(exc))
            return None
        return {"isPaused": bool(is_paused), "maxLimit": str(max_limit), "owner": owner}

    async def toggle_pause(self, pause: bool) -> str:
        """Send pause()/unpause() from the agent key. Returns the tx hash.

        The call is simulated first so a revert (e.g. not owner, already
        paused) surfaces before anything is broadcast.
        """
        if not self._private_key:
            raise ConfigError("AGENT_PRIVATE_KEY is not configured")
        contract = self._contract()
        account = self._w3.eth.account.from_key(self._private_key)
        fn = contract.functions.pause() if pause else contract.functions.unpause()

        await fn.call({"from": account.address})
        nonce = await self._w3.eth.get_transaction_count(account.address)
        tx = await fn.build_transaction({"from": account.address, "nonce": nonce})
        signed = account.sign_transaction(tx)
        tx_hash = await self._w3.eth.send_raw_transaction(signed.raw_transaction)
        tx_hex = Web3.to_hex(tx_hash)
        logger.info("pool_pause_toggled", pool=self.pool_address, pause=pause, tx_hash=tx_hex)
        return tx_hex

    async def get_native_balance(self, address: str) -> Optional[float]:
        """Native balance in whole units (ETH/MON), or None when the RPC is unavailable.

        Raises:
            ValueError: If ``address`` is not a valid hex address.
        """
        checksummed = Web3.to_checksum_address(address)
        try:
            wei = await self._w3.eth.get_balance(checksummed)
        except (Web3Exception, aiohttp.ClientError, OSError, asyncio.TimeoutError) as exc:
            logger.warning("evm_balance_failed", address=address, rpc=self.rpc_url, error=str(exc))
            return None
        return float(Web3.from_wei(wei, "ether"))
