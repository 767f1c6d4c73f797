"""Tests for SolanaRpc with solana-py's AsyncClient patched out."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from solana.rpc.core import RPCException
from solders.keypair import Keypair
from solders.signature import Signature

from src.chain.solana import SolanaRpc
from src.exceptions import SigningRejected

PUBKEY = str(Keypair().pubkey())
SIGNATURE = str(Signature.default())


def _client(**methods) -> MagicMock:
    client = MagicMock()
    client.__aenter__ = AsyncMock(return_value=client)
    client.__aexit__ = AsyncMock(return_value=False)
    for name, mock in methods.items():
        setattr(client, name, mock)
    return client


@pytest.mark.asyncio
async def test_get_balance_in_sol():
    client = _client(get_balance=AsyncMock(return_value=MagicMock(value=1_500_000_000)))
    with patch("src.chain.solana.AsyncClient", return_value=client):
        assert await SolanaRpc("http://rpc.test").get_balance(PUBKEY) == 1.5


@pytest.mark.asyncio
async def test_get_balance_invalid_address_raises_value_error():
    with pytest.raises(ValueError):
        await SolanaRpc("http://rpc.test").get_balance("not-a-key")


@pytest.mark.asyncio
async def test_get_balance_rpc_error_is_none():
    client = _client(get_balance=AsyncMock(side_effect=RPCException("node behind")))
    with patch("src.chain.solana.AsyncClient", return_value=client):
        assert await SolanaRpc("http://rpc.test").get_balance(PUBKEY) is None


@pytest.mark.asyncio
async def test_confirm_signature_ok():
    status = MagicMock(err=None)
    client = _client(confirm_transaction=AsyncMock(return_value=MagicMock(value=[status])))
    with patch("src.chain.solana.AsyncClient", return_value=client):
        await SolanaRpc("http://rpc.test").confirm_signature(SIGNATURE, timeout=5)
    client.confirm_transaction.assert_awaited_once()


@pytest.mark.asyncio
async def test_confirm_signature_onchain_error():
    status = MagicMock(err="InstructionError(0, Custom(6001))")
    client = _client(confirm_transaction=AsyncMock(return_value=MagicMock(value=[status])))
    with patch("src.chain.solana.AsyncClient", return_value=client):
        with pytest.raises(SigningRejected, match="failed on-chain"):
            await SolanaRpc("http://rpc.test").confirm_signature(SIGNATURE, timeout=5)


@pytest.mark.asyncio
async def test_confirm_signature_timeout():
    async def _never(*args, **kwargs):
        await asyncio.sleep(1)

    client = _client(confirm_transaction=AsyncMock(side_effect=_never))
    with patch("src.chain.solana.AsyncClient", return_value=client):
        with pytest.raises(SigningRejected, match="not confirmed"):
            await SolanaRpc("http://rpc.test").confirm_signature(SIGNATURE, timeout=0.01)
