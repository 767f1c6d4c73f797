"""Credential and configuration validators."""

from src.exceptions import ConfigError


def validate_llm_credentials() -> None:
    """Raise ConfigError if the intent extractor has no API key."""
    from config.settings import settings
    if not settings.ANTHROPIC_API_KEY:
        raise ConfigError("ANTHROPIC_API_KEY is required for natural-language intents")


def validate_pool_contract() -> None:
    """Raise ConfigError if the EVM pool contract is not configured."""
    from config.settings import settings
    if not settings.EVM_POOL_ADDRESS:
        raise ConfigError("EVM_POOL_ADDRESS is required")


def validate_agent_wallet() -> None:
    """Raise ConfigError if admin chain writes cannot be signed."""
    from config.settings import settings
    validate_pool_contract()
    if not settings.AGENT_PRIVATE_KEY:
        raise ConfigError("AGENT_PRIVATE_KEY is required for pause/unpause")


def validate_admin() -> None:
    """Raise ConfigError if the admin routes have no shared secret."""
    from config.settings import settings
    if not settings.ADMIN_SECRET_KEY:
        raise ConfigError("ADMIN_SECRET_KEY is required for /admin routes")
