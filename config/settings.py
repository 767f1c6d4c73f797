"""Runtime configuration for the BitSwarp trade API and pipeline."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # === API ===
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 3000
    API_KEY_PREFIX: str = "bitswarp_sk_"
    CORS_ORIGINS: str = "*"  # comma-separated
    RATE_LIMIT_REQUESTS: int = 60  # per client per window; 0 disables
    RATE_LIMIT_WINDOW_SECONDS: float = 60.0

    # === Admin ===
    ADMIN_SECRET_KEY: str = ""  # empty = every admin call is rejected

    # === Intent extraction (Anthropic) ===
    ANTHROPIC_API_KEY: str = ""
    LLM_MODEL: str = "claude-3-haiku-20240307"
    LLM_TIMEOUT_SECONDS: float = 15.0

    # === Routing ===
    STRICT_CHAIN_ROUTING: bool = True  # False = unknown chains fall back to EVM
    TOKEN_TABLE_PATH: str = ""  # optional JSON override of the built-in token table

    # === Jupiter (Solana) ===
    JUPITER_API_URL: str = "https://quote-api.jup.ag/v6"
    JUPITER_PRICE_URL: str = "https://api.jup.ag/price/v2"
    JUPITER_SLIPPAGE_BPS: int = 50

    # === OpenOcean (EVM) ===
    OPENOCEAN_API_URL: str = "https://open-api.openocean.finance/v4"
    OPENOCEAN_GAS_PRICE_WEI: int = 5_000_000_000  # 5 gwei
    OPENOCEAN_SLIPPAGE_PCT: float = 1.0

    QUOTE_TIMEOUT_SECONDS: float = 10.0
    SWAP_TX_TIMEOUT_SECONDS: float = 30.0

    # === Solana ===
    SOLANA_RPC_URL: str = "https://api.mainnet-beta.solana.com"
    SOLANA_CONFIRM_TIMEOUT_SECONDS: float = 60.0

    # === EVM ===
    EVM_CHAIN: str = "sepolia"  # chain served by EVM_RPC_URL
    EVM_RPC_URL: str = "https://rpc.sepolia.org"
    EVM_POOL_ADDRESS: str = ""
    EVM_MIN_OUT_SLIPPAGE_BPS: int = 50
    AGENT_PRIVATE_KEY: str = ""

    model_config = {"env_file": ".env"}


settings = Settings()
