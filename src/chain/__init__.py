"""Chain read/write collaborators (RPC passthroughs)."""

from src.chain.evm import POOL_ABI, PoolContract
from src.chain.solana import SolanaRpc

__all__ = ["POOL_ABI", "PoolContract", "SolanaRpc"]
