#!/usr/bin/env python3
"""Dry-run the intent pipeline from the command line.

Resolves a request, fetches a live quote and prints the execution payload
that a wallet would be asked to sign. Nothing is signed or broadcast.

Usage:
    python scripts/quote_intent.py "swap 1 sol to usdc"
    python scripts/quote_intent.py "swap 0.1 eth to usdc on sepolia" --user-address 0xabc...
    python scripts/quote_intent.py "swap 1 sol to usdc" --user-address <pubkey> --json
"""

import argparse
import asyncio
import json
from typing import Any, Optional

import structlog

from src.utils.logging import configure_logging

configure_logging()

from src.execution.pipeline import PipelineResult, TradePipeline
from src.quotes.tokens import TokenTable
from src.utils.amounts import from_base_units

logger = structlog.get_logger()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Resolve and quote a trade intent (no signing)")
    parser.add_argument("message", help='Trade request, e.g. "swap 1 sol to usdc"')
    parser.add_argument("--user-address", default=None, help="Wallet address (Solana pubkey or 0x address)")
    parser.add_argument(
        "--solana-connected", action="store_true",
        help="Default to solana when the request names no chain",
    )
    parser.add_argument("--json", action="store_true", help="Print the raw result as JSON")
    return parser


def format_result(result: PipelineResult, tokens: TokenTable) -> str:
    intent = result.intent
    if not result.ok:
        return f"NOT EXECUTABLE [{result.error_kind}]: {result.error}"

    quote = result.payload.quote
    out_decimals = tokens.decimals_for(intent.chain, intent.to_asset)
    lines = [
        f"{intent.action.value.upper()} {intent.amount} {intent.from_asset} -> {intent.to_asset} on {intent.chain}",
        f"  provider:     {quote.provider}",
        f"  expected out: {from_base_units(quote.out_amount, out_decimals).normalize()} {intent.to_asset}",
        f"  signable:     {'yes' if result.executable else 'no (quote only)'}",
    ]
    if intent.reasoning:
        lines.append(f"  reasoning:    {intent.reasoning}")
    return "\n".join(lines)


async def run_once(
    pipeline: TradePipeline,
    message: str,
    user_address: Optional[str] = None,
    solana_connected: bool = False,
) -> PipelineResult:
    result = await pipeline.run(message, user_address=user_address, solana_connected=solana_connected)
    logger.info("quote_intent_done", ok=result.ok, error_kind=result.error_kind)
    return result


async def main() -> None:
    args = build_parser().parse_args()
    pipeline = TradePipeline.from_settings()
    result = await run_once(pipeline, args.message, args.user_address, args.solana_connected)
    if args.json:
        out: dict[str, Any] = result.to_dict()
        print(json.dumps(out, indent=2, default=str))
    else:
        print(format_result(result, pipeline.tokens))


if __name__ == "__main__":
    asyncio.run(main())
