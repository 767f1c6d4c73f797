"""Tests for OpenOceanAdapter against a mocked OpenOcean v4 API."""

from __future__ import annotations

import httpx
import pytest
import respx

from src.exceptions import UnsupportedChain
from src.quotes.models import ChainFamily
from src.quotes.openocean import OpenOceanAdapter, chain_id_for
from src.quotes.tokens import NATIVE_EVM

BASE_URL = "https://oo.test/v4"
USDC = "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"


def _adapter() -> OpenOceanAdapter:
    return OpenOceanAdapter(base_url=BASE_URL, gas_price_wei=1_000_000_000, slippage_pct=1.0, timeout=5)


def test_chain_ids():
    assert chain_id_for("ethereum") == 1
    assert chain_id_for(" Sepolia ") == 11155111
    assert chain_id_for("monad") == 143


def test_unknown_chain_raises():
    with pytest.raises(UnsupportedChain):
        chain_id_for("dogechain")


@respx.mock
@pytest.mark.asyncio
async def test_unknown_chain_raises_before_any_request():
    route = respx.get(url__startswith=BASE_URL)
    with pytest.raises(UnsupportedChain):
        await _adapter().get_quote("ETH", "USDC", 10**18, chain="dogechain")
    assert not route.called


@respx.mock
@pytest.mark.asyncio
async def test_quote_on_ethereum():
    route = respx.get(f"{BASE_URL}/1/quote").mock(
        return_value=httpx.Response(
            200,
            json={
                "code": 200,
                "data": {
                    "inAmount": "1000000000000000000",
                    "outAmount": "3150120000",
                    "path": {"routes": []},
                },
            },
        )
    )

    quote = await _adapter().get_quote("ETH", "USDC", 10**18, chain="ethereum")

    assert quote is not None
    assert quote.family is ChainFamily.EVM
    assert quote.provider == "openocean"
    assert quote.out_amount == 3_150_120_000
    assert quote.input_asset == NATIVE_EVM
    assert quote.output_asset == USDC
    assert quote.route == {"routes": []}

    params = route.calls.last.request.url.params
    assert params["inTokenAddress"] == NATIVE_EVM
    assert params["outTokenAddress"] == USDC
    assert params["amountDecimals"] == str(10**18)
    assert params["gasPriceDecimals"] == "1000000000"


@respx.mock
@pytest.mark.asyncio
async def test_non_200_code_gives_none():
    respx.get(f"{BASE_URL}/1/quote").mock(
        return_value=httpx.Response(200, json={"code": 400, "error": "insufficient liquidity"})
    )
    assert await _adapter().get_quote("ETH", "USDC", 10**18, chain="ethereum") is None


@respx.mock
@pytest.mark.asyncio
async def test_http_error_gives_none():
    respx.get(f"{BASE_URL}/11155111/quote").mock(return_value=httpx.Response(503))
    assert await _adapter().get_quote("ETH", "USDC", 10**18, chain="sepolia") is None


@respx.mock
@pytest.mark.asyncio
async def test_unknown_token_gives_none_without_request():
    route = respx.get(f"{BASE_URL}/1/quote")
    assert await _adapter().get_quote("ETH", "FAKE", 10**18, chain="ethereum") is None
    assert not route.called


def test_resolve_token_checksums_hex_addresses():
    assert _adapter().resolve_token("ethereum", USDC.lower()) == USDC
