"""Tests for TradePipeline: validation order, routing, scaling, error kinds."""

from __future__ import annotations

from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.exceptions import UnsupportedChain
from src.execution.payload_builder import PayloadBuilder
from src.execution.pipeline import TradePipeline
from src.intent.models import Action, StructuredFields, TradeIntent
from src.intent.resolver import IntentResolver
from src.quotes.models import ChainFamily, Quote
from src.quotes.router import ChainRouter
from src.quotes.tokens import TokenTable

POOL = "0x5FbDB2315678afecb367f032d93F642f64180aa3"
USER = "0x70997970C51812dc3A010C7d01b50e0d17dc79C8"


def _quote(family: ChainFamily, tx=None) -> Quote:
    return Quote(
        family=family,
        provider="jupiter" if family is ChainFamily.SOLANA else "openocean",
        input_asset="in",
        output_asset="out",
        in_amount=1_000_000_000,
        out_amount=142_000_000,
        swap_transaction=tx,
    )


def _adapter(family: ChainFamily, quote=None, side_effect=None) -> MagicMock:
    adapter = MagicMock()
    adapter.family = family
    adapter.get_quote = AsyncMock(return_value=quote, side_effect=side_effect)
    return adapter


def _pipeline(solana=None, evm=None, strict=True, extractor=None) -> TradePipeline:
    solana = solana or _adapter(ChainFamily.SOLANA, _quote(ChainFamily.SOLANA, tx="AQAB"))
    evm = evm or _adapter(ChainFamily.EVM, _quote(ChainFamily.EVM))
    return TradePipeline(
        resolver=IntentResolver(extractor=extractor or MagicMock()),
        router=ChainRouter(solana=solana, evm=evm, strict=strict),
        tokens=TokenTable.default(),
        builder=PayloadBuilder(pool_address=POOL, min_out_slippage_bps=50),
    )


@pytest.mark.asyncio
async def test_swap_sol_to_usdc_end_to_end():
    solana = _adapter(ChainFamily.SOLANA, _quote(ChainFamily.SOLANA, tx="AQAB"))
    pipeline = _pipeline(solana=solana)

    result = await pipeline.run("swap 1 sol to usdc", user_address="9WzDXwBbmkg8ZTbNMqUxvQRAyrZzDsGYdLVL9zYtAWWM")

    assert result.ok
    assert result.executable
    assert result.intent.chain == "solana"
    args, kwargs = solana.get_quote.call_args
    assert args == ("SOL", "USDC", 1_000_000_000)
    assert kwargs["chain"] == "solana"

    data = result.to_dict()
    assert data["success"] is True
    assert data["execution_payload"]["family"] == "solana"
    assert data["execution_payload"]["swapTransaction"] == "AQAB"
    assert data["summary"] == "SWAP 1 SOL -> USDC on solana via jupiter"


@pytest.mark.asyncio
async def test_evm_swap_scales_by_token_decimals():
    evm = _adapter(ChainFamily.EVM, _quote(ChainFamily.EVM))
    pipeline = _pipeline(evm=evm)

    result = await pipeline.run(
        StructuredFields(action="swap", from_token="USDC", to_token="ETH", amount="2.5", chain="ethereum"),
        user_address=USER,
    )

    assert result.ok
    assert evm.get_quote.call_args.args[2] == 2_500_000
    assert result.payload.chain_id == 1


@pytest.mark.asyncio
async def test_unknown_intent_never_reaches_adapter():
    extractor = MagicMock()
    extractor.extract = AsyncMock(return_value={"action": "unknown", "reasoning": "Not a trade"})
    solana = _adapter(ChainFamily.SOLANA)
    evm = _adapter(ChainFamily.EVM)
    pipeline = _pipeline(solana=solana, evm=evm, extractor=extractor)

    result = await pipeline.run("tell me a joke")

    assert not result.ok
    assert result.error_kind == "IntentUnresolved"
    assert result.error == "Not a trade"
    solana.get_quote.assert_not_called()
    evm.get_quote.assert_not_called()


@pytest.mark.asyncio
@pytest.mark.parametrize("amount", [Decimal(0), Decimal("-1")])
async def test_non_positive_amount_never_reaches_adapter(amount):
    solana = _adapter(ChainFamily.SOLANA)
    pipeline = _pipeline(solana=solana)
    intent = TradeIntent(action=Action.SWAP, from_asset="SOL", to_asset="USDC", amount=amount, chain="solana")

    result = await pipeline.execute(intent)

    assert not result.ok
    assert result.error_kind == "IntentUnresolved"
    solana.get_quote.assert_not_called()


@pytest.mark.asyncio
async def test_dust_amount_below_one_base_unit_is_rejected():
    solana = _adapter(ChainFamily.SOLANA)
    intent = TradeIntent(action=Action.SWAP, from_asset="USDC", to_asset="SOL", amount=Decimal("0.0000001"), chain="solana")

    result = await _pipeline(solana=solana).execute(intent)

    assert result.error_kind == "IntentUnresolved"
    solana.get_quote.assert_not_called()


@pytest.mark.asyncio
@pytest.mark.parametrize("action", [Action.BRIDGE, Action.STAKE, Action.BALANCE])
async def test_non_swap_is_understood_but_not_executable(action):
    solana = _adapter(ChainFamily.SOLANA)
    intent = TradeIntent(action=action, from_asset="SOL", amount=Decimal(1), chain="solana")

    result = await _pipeline(solana=solana).execute(intent)

    assert not result.ok
    assert result.error_kind == "NotExecutable"
    assert "only swaps" in result.error
    solana.get_quote.assert_not_called()


@pytest.mark.asyncio
async def test_missing_quote_is_quote_unavailable():
    solana = _adapter(ChainFamily.SOLANA, quote=None)
    intent = TradeIntent(action=Action.SWAP, from_asset="FAKE", to_asset="USDC", amount=Decimal(1), chain="solana")

    result = await _pipeline(solana=solana).execute(intent)

    assert result.error_kind == "QuoteUnavailable"
    assert result.to_dict() == {"success": False, "error": result.error, "error_kind": "QuoteUnavailable"}


@pytest.mark.asyncio
async def test_unknown_chain_strict_is_unsupported():
    intent = TradeIntent(action=Action.SWAP, from_asset="ETH", to_asset="USDC", amount=Decimal(1), chain="dogechain")
    result = await _pipeline(strict=True).execute(intent)
    assert result.error_kind == "UnsupportedChain"


@pytest.mark.asyncio
async def test_adapter_unsupported_chain_is_reported():
    evm = _adapter(ChainFamily.EVM, side_effect=UnsupportedChain("Unsupported EVM chain: 'dogechain'"))
    intent = TradeIntent(action=Action.SWAP, from_asset="ETH", to_asset="USDC", amount=Decimal(1), chain="dogechain")

    result = await _pipeline(evm=evm, strict=False).execute(intent)

    assert result.error_kind == "UnsupportedChain"
    assert "dogechain" in result.error


@pytest.mark.asyncio
async def test_evm_without_user_address_is_quote_unavailable():
    intent = TradeIntent(action=Action.SWAP, from_asset="ETH", to_asset="USDC", amount=Decimal(1), chain="ethereum")
    result = await _pipeline().execute(intent)
    assert result.error_kind == "QuoteUnavailable"
    assert "wallet address" in result.error
