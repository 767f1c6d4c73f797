"""FastAPI gateway for agents and the trading terminal.

Serve with ``scripts/run_api.py`` (uvicorn, factory mode).
"""

from __future__ import annotations

import secrets
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Optional

import structlog
from fastapi import Depends, FastAPI, Header, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from config.settings import settings
from src.api.rate_limit import RateLimiter
from src.api.registry import AgentIdentity, InMemoryKeyRegistry, KeyRegistry
from src.chain.evm import PoolContract
from src.chain.solana import SolanaRpc
from src.exceptions import ConfigError, Unauthorized
from src.execution.pipeline import TradePipeline
from src.intent.models import SOLANA, Action, StructuredFields, normalize_chain
from src.market.prices import PriceService

logger = structlog.get_logger()


# ---------------------------------------------------------------------------
# Request bodies
# ---------------------------------------------------------------------------

class RegisterRequest(BaseModel):
    name: str
    owner: str


class ExecuteRequest(BaseModel):
    action: str
    from_token: str
    to_token: str
    amount: Decimal
    chain: Optional[str] = None
    user_address: Optional[str] = None


class IntentRequest(BaseModel):
    message: str
    user_address: Optional[str] = None


class TogglePauseRequest(BaseModel):
    pause: bool


# ---------------------------------------------------------------------------
# Wiring
# ---------------------------------------------------------------------------

@dataclass
class ApiServices:
    pipeline: TradePipeline
    prices: PriceService
    solana: SolanaRpc
    pool: PoolContract
    registry: KeyRegistry = field(default_factory=InMemoryKeyRegistry)
    admin_key: str = ""
    limiter: RateLimiter = field(default_factory=RateLimiter)

    @classmethod
    def from_settings(cls) -> "ApiServices":
        return cls(
            pipeline=TradePipeline.from_settings(),
            prices=PriceService(),
            solana=SolanaRpc(),
            pool=PoolContract(),
            registry=InMemoryKeyRegistry(),
            admin_key=settings.ADMIN_SECRET_KEY,
            limiter=RateLimiter(),
        )


def _is_solana_address(address: Optional[str]) -> bool:
    return bool(address) and not address.startswith("0x")


def create_app(services: Optional[ApiServices] = None) -> FastAPI:
    services = services or ApiServices.from_settings()

    app = FastAPI(title="BitSwarp API", version="0.1.0")

    @app.middleware("http")
    async def rate_limit(request: Request, call_next):
        client = request.client.host if request.client else "unknown"
        if not services.limiter.allow(client):
            logger.warning("rate_limited", client=client, path=request.url.path)
            return JSONResponse(status_code=429, content={"success": False, "error": "Too many requests"})
        return await call_next(request)

    # Outermost: wraps the rate limiter
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(Unauthorized)
    async def unauthorized_handler(request: Request, exc: Unauthorized) -> JSONResponse:
        return JSONResponse(status_code=401, content={"success": False, "error": str(exc)})

    def require_agent(x_agent_key: Optional[str] = Header(default=None)) -> AgentIdentity:
        agent = services.registry.lookup(x_agent_key or "")
        if agent is None:
            raise Unauthorized("Valid x-agent-key required")
        return agent

    def require_admin(x_admin_key: Optional[str] = Header(default=None)) -> None:
        # Unset secret rejects everything
        if not services.admin_key or not x_admin_key or not secrets.compare_digest(
            x_admin_key, services.admin_key
        ):
            logger.warning("admin_auth_rejected")
            raise Unauthorized("Unauthorized admin access")

    # --- status ---

    @app.get("/")
    def root() -> dict[str, str]:
        return {"status": "BitSwarp API online", "timestamp": datetime.now(timezone.utc).isoformat()}

    @app.get("/health")
    def health() -> dict[str, bool]:
        return {"ok": True}

    # --- agents ---

    @app.post("/v1/agents/register")
    def register_agent(body: RegisterRequest) -> dict[str, Any]:
        api_key, _ = services.registry.register(body.name, body.owner)
        return {
            "success": True,
            "api_key": api_key,
            "message": "Welcome to the BitSwarp ecosystem. Keep your API key secure.",
        }

    # --- trade ---

    @app.post("/v1/trade/execute")
    async def execute_trade(body: ExecuteRequest, agent: AgentIdentity = Depends(require_agent)) -> dict[str, Any]:
        fields = StructuredFields(
            action=body.action,
            from_token=body.from_token,
            to_token=body.to_token,
            amount=body.amount,
            chain=body.chain,
        )
        result = await services.pipeline.run(
            fields,
            user_address=body.user_address,
            solana_connected=_is_solana_address(body.user_address),
        )
        logger.info("trade_execute", agent_id=agent.id, ok=result.ok, error_kind=result.error_kind)
        return result.to_dict()

    @app.post("/v1/trade/intent")
    async def trade_intent(body: IntentRequest, agent: AgentIdentity = Depends(require_agent)) -> dict[str, Any]:
        intent = await services.pipeline.resolver.resolve(
            body.message, solana_connected=_is_solana_address(body.user_address)
        )
        if intent.action is Action.UNKNOWN:
            return {"success": False, "error": intent.reasoning, "error_kind": "IntentUnresolved"}
        if intent.action is not Action.SWAP:
            return {
                "success": True,
                "intent": intent.to_dict(),
                "execution_payload": None,
                "executable": False,
                "message": intent.reasoning or f"{intent.action.value} acknowledged; only swaps execute",
            }

        result = await services.pipeline.execute(intent, user_address=body.user_address)
        logger.info("trade_intent", agent_id=agent.id, ok=result.ok, error_kind=result.error_kind)
        response = result.to_dict()
        if result.ok:
            response["message"] = intent.reasoning
        return response

    # --- market ---

    @app.get("/v1/market/price/{symbol}")
    async def market_price(symbol: str) -> dict[str, Any]:
        return {"success": True, "price": await services.prices.get_price(symbol)}

    @app.get("/v1/market/prices")
    async def market_prices(symbols: str = Query(default="", description="Comma-separated ids")) -> dict[str, Any]:
        return {"success": True, "data": await services.prices.get_prices(symbols.split(","))}

    # --- wallet ---

    @app.get("/v1/wallet/balance/{chain}/{address}")
    async def wallet_balance(chain: str, address: str) -> dict[str, Any]:
        chain = normalize_chain(chain)
        try:
            if chain == SOLANA:
                balance = await services.solana.get_balance(address)
                symbol = "SOL"
            elif chain == normalize_chain(settings.EVM_CHAIN):
                balance = await services.pool.get_native_balance(address)
                symbol = "MON" if chain == "monad" else "ETH"
            else:
                raise HTTPException(status_code=400, detail=f"Unsupported chain: {chain}")
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=f"Invalid address: {exc}") from exc
        if balance is None:
            return {"success": False, "error": "RPC unavailable"}
        return {"success": True, "balance": balance, "symbol": symbol}

    # --- admin ---

    @app.get("/admin/stats", dependencies=[Depends(require_admin)])
    async def admin_stats() -> dict[str, Any]:
        try:
            evm_stats = await services.pool.stats()
        except ConfigError as exc:
            logger.warning("admin_stats_unconfigured", error=str(exc))
            evm_stats = None
        return {
            "success": True,
            "chains": {"evm": evm_stats, "solana": {"status": "online"}},
        }

    @app.post("/admin/protocol/toggle-pause", dependencies=[Depends(require_admin)])
    async def toggle_pause(body: TogglePauseRequest) -> dict[str, Any]:
        try:
            tx_hash = await services.pool.toggle_pause(body.pause)
        except ConfigError as exc:
            raise HTTPException(status_code=503, detail=str(exc)) from exc
        except Exception as exc:
            logger.error("toggle_pause_failed", pause=body.pause, error=str(exc))
            raise HTTPException(status_code=502, detail=f"toggle_pause_failed: {exc}") from exc
        return {"success": True, "txHash": tx_hash}

    return app
