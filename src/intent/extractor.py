"""Natural-language trade intent extraction using Claude."""

from __future__ import annotations

import asyncio
import json
import re
from typing import Any, Optional

import anthropic
import structlog

from config.settings import settings
from src.exceptions import IntentUnresolved

logger = structlog.get_logger()


SYSTEM_PROMPT = """You extract crypto trading intents from chat messages for a multi-chain swap terminal.

Supported actions: swap, bridge, stake, balance, unknown.
Supported chains: ethereum, solana, sepolia, monad.

Rules:
1. Use token SYMBOLS as the user wrote them (SOL, USDC, ETH...). If the user pasted a token address, copy it verbatim.
2. amount is the quantity of from_token in human units (1.5 means 1.5 tokens, not lamports or wei).
3. Only set chain if the user named it or it is unambiguous from the tokens; otherwise use null.
4. If the message is not a trading request, or is too ambiguous to act on, use action "unknown" and explain why in reasoning.

Examples:
- "swap 2 sol for usdc" -> {"action": "swap", "from_token": "SOL", "to_token": "USDC", "amount": 2, "chain": "solana", ...}
- "what's the weather" -> {"action": "unknown", ...}

Respond ONLY with valid JSON in this exact format:
{
    "action": "swap|bridge|stake|balance|unknown",
    "from_token": "symbol or address or null",
    "to_token": "symbol or address or null",
    "amount": number or null,
    "chain": "ethereum|solana|sepolia|monad or null",
    "reasoning": "Brief explanation of your reading of the request"
}"""


class IntentExtractor:
    """Turns free text into a raw intent dict using Claude.

    Raises IntentUnresolved on any failure; the resolver decides how to
    surface it.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self._api_key = api_key if api_key is not None else settings.ANTHROPIC_API_KEY
        self._model = model or settings.LLM_MODEL
        self._timeout = timeout if timeout is not None else settings.LLM_TIMEOUT_SECONDS
        self._client: Optional[anthropic.AsyncAnthropic] = None

    def _get_client(self) -> anthropic.AsyncAnthropic:
        if self._client is None:
            self._client = anthropic.AsyncAnthropic(api_key=self._api_key)
        return self._client

    @staticmethod
    def _parse_response(response_text: str) -> dict[str, Any]:
        """Parse the model output, with or without markdown code fences.

        Raises:
            IntentUnresolved: If the response is not a JSON object.
        """
        json_match = re.search(r"```(?:json)?\s*\n?(.*?)\n?```", response_text, re.DOTALL)
        if json_match:
            json_str = json_match.group(1).strip()
        else:
            json_str = response_text.strip()

        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise IntentUnresolved(f"Malformed extractor response: {response_text[:200]}") from e
        if not isinstance(data, dict) or "action" not in data:
            raise IntentUnresolved(f"Extractor response missing action: {response_text[:200]}")
        return data

    async def extract(self, message: str) -> dict[str, Any]:
        """Extract a raw intent dict from a user message."""
        if not self._api_key:
            raise IntentUnresolved("Intent extraction is not configured (no API key)")

        prompt = f'Extract the trading intent from this message:\n\n"{message}"\n\nRespond with JSON only.'

        try:
            response = await asyncio.wait_for(
                self._get_client().messages.create(
                    model=self._model,
                    max_tokens=256,
                    system=SYSTEM_PROMPT,
                    messages=[{"role": "user", "content": prompt}],
                ),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError as e:
            raise IntentUnresolved(f"Intent extraction timed out after {self._timeout:.0f}s") from e
        except anthropic.APIError as e:
            logger.warning("intent_extractor_api_error", error=str(e))
            raise IntentUnresolved(f"Intent extraction failed: {e}") from e

        if not response.content:
            raise IntentUnresolved("Extractor returned an empty response")
        return self._parse_response(response.content[0].text)
