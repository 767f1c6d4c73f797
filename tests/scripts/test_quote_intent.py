from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from scripts.quote_intent import build_parser, format_result, run_once
from src.execution.models import SolanaExecutionPayload
from src.execution.pipeline import PipelineResult
from src.intent.models import Action, TradeIntent
from src.quotes.models import ChainFamily, Quote
from src.quotes.tokens import TokenTable


def _intent() -> TradeIntent:
    return TradeIntent(
        action=Action.SWAP, from_asset="SOL", to_asset="USDC", amount=Decimal(1), chain="solana",
        reasoning="Parsed directly: swap 1 SOL to USDC",
    )


def test_parser_flags():
    args = build_parser().parse_args(["swap 1 sol to usdc", "--user-address", "abc", "--solana-connected", "--json"])
    assert args.message == "swap 1 sol to usdc"
    assert args.user_address == "abc"
    assert args.solana_connected is True
    assert args.json is True


def test_format_result_quote_only():
    quote = Quote(
        family=ChainFamily.SOLANA, provider="jupiter", input_asset="a", output_asset="b",
        in_amount=1_000_000_000, out_amount=142_350_000,
    )
    result = PipelineResult(intent=_intent(), payload=SolanaExecutionPayload(quote=quote))

    text = format_result(result, TokenTable.default())

    assert "SWAP 1 SOL -> USDC on solana" in text
    assert "expected out: 142.35 USDC" in text
    assert "no (quote only)" in text


def test_format_result_failure():
    result = PipelineResult(intent=_intent(), error="No quote available", error_kind="QuoteUnavailable")
    assert format_result(result, TokenTable.default()) == "NOT EXECUTABLE [QuoteUnavailable]: No quote available"


@pytest.mark.asyncio
async def test_run_once_forwards_options():
    pipeline = MagicMock()
    expected = PipelineResult(intent=_intent(), error="x", error_kind="QuoteUnavailable")
    pipeline.run = AsyncMock(return_value=expected)

    result = await run_once(pipeline, "swap 1 sol to usdc", user_address="abc", solana_connected=True)

    assert result is expected
    pipeline.run.assert_awaited_once_with("swap 1 sol to usdc", user_address="abc", solana_connected=True)
