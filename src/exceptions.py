"""Custom exceptions for the BitSwarp trade pipeline."""


class BitSwarpError(Exception):
    """Base exception for all BitSwarp errors."""


class IntentUnresolved(BitSwarpError):
    """The intent extractor failed or returned an ambiguous intent."""


class NotExecutable(BitSwarpError):
    """The intent was understood but its action cannot be executed."""


class QuoteUnavailable(BitSwarpError):
    """An aggregator quote could not be obtained."""


class UnsupportedChain(BitSwarpError):
    """Chain name (or asset on that chain) has no route."""


class Unauthorized(BitSwarpError):
    """Missing or invalid API/admin key."""


class SigningRejected(BitSwarpError):
    """Wallet declined, broadcast failed, or confirmation timed out."""


class ConfigError(BitSwarpError):
    """Missing or invalid configuration."""
