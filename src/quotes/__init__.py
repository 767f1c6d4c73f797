from .jupiter import JupiterAdapter
from .models import ChainFamily, Quote, QuoteAdapter
from .openocean import EVM_CHAIN_IDS, OpenOceanAdapter, chain_id_for
from .router import ChainRouter
from .tokens import TokenInfo, TokenTable

__all__ = [
    "ChainFamily",
    "ChainRouter",
    "EVM_CHAIN_IDS",
    "JupiterAdapter",
    "OpenOceanAdapter",
    "Quote",
    "QuoteAdapter",
    "TokenInfo",
    "TokenTable",
    "chain_id_for",
]
