"""Tests for PayloadBuilder."""

from __future__ import annotations

from decimal import Decimal

import pytest

from src.exceptions import UnsupportedChain
from src.execution.models import EvmExecutionPayload, SolanaExecutionPayload
from src.execution.payload_builder import PayloadBuilder
from src.intent.models import Action, TradeIntent
from src.quotes.models import ChainFamily, Quote

POOL = "0x5FbDB2315678afecb367f032d93F642f64180aa3"
USER = "0x70997970C51812dc3A010C7d01b50e0d17dc79C8"


def _intent(action=Action.SWAP, chain="solana") -> TradeIntent:
    return TradeIntent(action=action, from_asset="SOL", to_asset="USDC", amount=Decimal(1), chain=chain)


def _quote(family=ChainFamily.SOLANA, out_amount=142_000_000, tx=None) -> Quote:
    return Quote(
        family=family,
        provider="jupiter" if family is ChainFamily.SOLANA else "openocean",
        input_asset="in",
        output_asset="out",
        in_amount=1_000_000_000,
        out_amount=out_amount,
        swap_transaction=tx,
    )


@pytest.mark.parametrize("action", [Action.BRIDGE, Action.STAKE, Action.BALANCE, Action.UNKNOWN])
def test_non_swap_is_rejected(action):
    result = PayloadBuilder(pool_address=POOL).build(_intent(action), _quote())
    assert not result.ok
    assert action.value in result.error


def test_missing_quote_is_rejected():
    result = PayloadBuilder(pool_address=POOL).build(_intent(), None)
    assert not result.ok
    assert "No quote" in result.error


def test_solana_payload_carries_swap_transaction():
    result = PayloadBuilder(pool_address=POOL).build(_intent(), _quote(tx="AQAB"))
    assert isinstance(result.payload, SolanaExecutionPayload)
    assert result.payload.swap_transaction == "AQAB"
    assert result.payload.executable


def test_solana_payload_without_transaction_is_not_executable():
    result = PayloadBuilder(pool_address=POOL).build(_intent(), _quote())
    assert result.ok
    assert not result.payload.executable


def test_evm_payload_applies_min_out_slippage():
    builder = PayloadBuilder(pool_address=POOL, min_out_slippage_bps=50)
    result = builder.build(_intent(chain="sepolia"), _quote(ChainFamily.EVM, out_amount=10_000), user_address=USER)

    payload = result.payload
    assert isinstance(payload, EvmExecutionPayload)
    assert payload.chain_id == 11155111
    assert payload.call.pool_address == POOL
    assert payload.call.user == USER
    assert payload.call.amount_in == 1_000_000_000
    assert payload.call.amount_out_min == 9_950


def test_evm_without_pool_is_rejected():
    result = PayloadBuilder(pool_address="").build(
        _intent(chain="ethereum"), _quote(ChainFamily.EVM), user_address=USER
    )
    assert not result.ok
    assert "pool" in result.error


def test_evm_without_user_is_rejected():
    result = PayloadBuilder(pool_address=POOL).build(_intent(chain="ethereum"), _quote(ChainFamily.EVM))
    assert not result.ok
    assert "wallet address" in result.error


def test_evm_unknown_chain_raises():
    with pytest.raises(UnsupportedChain):
        PayloadBuilder(pool_address=POOL).build(
            _intent(chain="dogechain"), _quote(ChainFamily.EVM), user_address=USER
        )


def test_build_is_pure():
    builder = PayloadBuilder(pool_address=POOL, min_out_slippage_bps=100)
    intent, quote = _intent(chain="ethereum"), _quote(ChainFamily.EVM)
    assert builder.build(intent, quote, user_address=USER) == builder.build(intent, quote, user_address=USER)


@pytest.mark.parametrize(
    "user",
    ["9WzDXwBbmkg8ZTbNMqUxvQRAyrZzDsGYdLVL9zYtAWWM", "0x1234", "0x70997970c51812DC3A010C7d01b50e0d17dc79c8"],
)
def test_evm_rejects_non_evm_user_address(user):
    result = PayloadBuilder(pool_address=POOL).build(
        _intent(chain="ethereum"), _quote(ChainFamily.EVM), user_address=user
    )
    assert not result.ok
    assert "Not an EVM wallet address" in result.error


def test_evm_accepts_lowercase_user_address():
    result = PayloadBuilder(pool_address=POOL).build(
        _intent(chain="ethereum"), _quote(ChainFamily.EVM), user_address=USER.lower()
    )
    assert result.ok
