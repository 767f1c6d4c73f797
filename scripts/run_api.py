#!/usr/bin/env python3
"""Serve the BitSwarp API.

Usage:
    python scripts/run_api.py
    python scripts/run_api.py --port 8080 --reload
"""

import argparse

import structlog
import uvicorn

from config.settings import settings
from config.validators import validate_admin, validate_agent_wallet, validate_llm_credentials
from src.exceptions import ConfigError
from src.utils.logging import configure_logging

configure_logging()

logger = structlog.get_logger()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run the BitSwarp trade API")
    parser.add_argument("--host", default=settings.API_HOST)
    parser.add_argument("--port", type=int, default=settings.API_PORT)
    parser.add_argument("--reload", action="store_true", help="Auto-reload on code changes (dev only)")
    return parser


def main() -> None:
    args = build_parser().parse_args()
    try:
        validate_admin()
    except ConfigError as e:
        logger.warning("admin_routes_disabled", reason=str(e))
    try:
        validate_llm_credentials()
    except ConfigError as e:
        logger.warning("intent_extractor_disabled", reason=str(e))
    try:
        validate_agent_wallet()
    except ConfigError as e:
        logger.warning("admin_pause_disabled", reason=str(e))
    logger.info("api_starting", host=args.host, port=args.port)
    uvicorn.run(
        "src.api.trade_api:create_app",
        factory=True,
        host=args.host,
        port=args.port,
        reload=args.reload,
    )


if __name__ == "__main__":
    main()
