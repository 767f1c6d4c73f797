"""Per-chain token tables: symbol -> (address, decimals).

The built-in table covers the assets the terminal exposes by default.
Deployments targeting other networks point TOKEN_TABLE_PATH at a JSON
file of the same shape::

    {"sepolia": {"USDC": {"address": "0x...", "decimals": 6}}}

Chains present in the file replace the built-in entries for that chain.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

import structlog

from config.settings import settings
from src.exceptions import ConfigError
from src.intent.models import ETHEREUM, MONAD, SEPOLIA, SOLANA

logger = structlog.get_logger()

NATIVE_EVM = "0xEeeeeEeeeEeEeeEeEeEeeEEEeeeeEeeeeeeeEEeE"

# Decimals assumed for assets missing from the table (literal addresses).
NATIVE_DECIMALS = {SOLANA: 9, ETHEREUM: 18, SEPOLIA: 18, MONAD: 18}


@dataclass(frozen=True, slots=True)
class TokenInfo:
    address: str
    decimals: int


DEFAULT_TOKENS: dict[str, dict[str, TokenInfo]] = {
    SOLANA: {
        "SOL": TokenInfo("So11111111111111111111111111111111111111112", 9),
        "USDC": TokenInfo("EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v", 6),
        "USDT": TokenInfo("Es9vMFrzaCERmJfrF4H2FYD4KCoNkY11McCe8BenwNYB", 6),
        "JUP": TokenInfo("JUPyiwrYJFskUPiHa7hkeR8VUtAeFoSYbKedZNsDvCN", 6),
        "BONK": TokenInfo("DezXAZ8z7PnrnRJjz3wXBoRgixCa6xjnB7YaB1pPB263", 5),
    },
    ETHEREUM: {
        "ETH": TokenInfo(NATIVE_EVM, 18),
        "WETH": TokenInfo("0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2", 18),
        "USDC": TokenInfo("0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48", 6),
        "USDT": TokenInfo("0xdAC17F958D2ee523a2206206994597C13D831ec7", 6),
        "DAI": TokenInfo("0x6B175474E89094C44Da98b954EedeAC495271d0F", 18),
    },
    SEPOLIA: {
        "ETH": TokenInfo(NATIVE_EVM, 18),
        "WETH": TokenInfo("0xfFf9976782d46CC05630D1f6eBAb18b2324d6B14", 18),
        "USDC": TokenInfo("0x1c7D4B196Cb0C7B01d743Fbc6116a902379C7238", 6),
    },
    MONAD: {
        "MON": TokenInfo(NATIVE_EVM, 18),
    },
}


class TokenTable:
    """Symbol lookup per chain. Symbols are matched upper-cased."""

    def __init__(self, chains: Mapping[str, Mapping[str, TokenInfo]]):
        self._chains = {
            chain.lower(): {sym.upper(): info for sym, info in tokens.items()}
            for chain, tokens in chains.items()
        }

    @classmethod
    def default(cls) -> "TokenTable":
        return cls(DEFAULT_TOKENS)

    @classmethod
    def from_json(cls, path: str | Path, base: Optional["TokenTable"] = None) -> "TokenTable":
        """Load a table from JSON, layered over ``base`` (built-ins by default)."""
        try:
            raw = json.loads(Path(path).read_text())
            overrides = {
                chain: {
                    sym: TokenInfo(address=str(entry["address"]), decimals=int(entry["decimals"]))
                    for sym, entry in tokens.items()
                }
                for chain, tokens in raw.items()
            }
        except (OSError, json.JSONDecodeError, KeyError, TypeError, ValueError, AttributeError) as e:
            raise ConfigError(f"Invalid token table {path}: {e}") from e

        merged = dict((base or cls.default())._chains)
        merged.update(overrides)
        logger.info("token_table_loaded", path=str(path), chains=sorted(overrides))
        return cls(merged)

    @classmethod
    def from_settings(cls) -> "TokenTable":
        if settings.TOKEN_TABLE_PATH:
            return cls.from_json(settings.TOKEN_TABLE_PATH)
        return cls.default()

    def lookup(self, chain: str, symbol: str) -> Optional[TokenInfo]:
        return self._chains.get(chain.lower(), {}).get(symbol.upper())

    def decimals_for(self, chain: str, asset: str) -> int:
        """Decimals for ``asset``; falls back to the chain's native decimals."""
        info = self.lookup(chain, asset)
        if info is not None:
            return info.decimals
        logger.warning("token_decimals_assumed", chain=chain, asset=asset)
        return NATIVE_DECIMALS.get(chain.lower(), 18)

    def symbols(self, chain: str) -> list[str]:
        return sorted(self._chains.get(chain.lower(), {}))
