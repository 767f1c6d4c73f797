"""Intent resolution: free text or form fields -> TradeIntent."""

from src.intent.extractor import IntentExtractor
from src.intent.models import Action, StructuredFields, TradeIntent
from src.intent.resolver import IntentResolver

__all__ = [
    "Action",
    "IntentExtractor",
    "IntentResolver",
    "StructuredFields",
    "TradeIntent",
]
