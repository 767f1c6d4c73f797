from src.execution.models import (
    BuildResult,
    EvmContractCall,
    EvmExecutionPayload,
    ExecutionPayload,
    PendingTrade,
    SolanaExecutionPayload,
)
from src.execution.payload_builder import PayloadBuilder
from src.execution.pipeline import PipelineResult, TradePipeline
from src.execution.signers import EvmSigner, SolanaSigner
from src.execution.confirmation import SettlementResult, TradeSession, TradeState, TradeSummary

__all__ = [
    "BuildResult",
    "EvmContractCall",
    "EvmExecutionPayload",
    "EvmSigner",
    "ExecutionPayload",
    "PayloadBuilder",
    "PendingTrade",
    "PipelineResult",
    "SettlementResult",
    "SolanaExecutionPayload",
    "SolanaSigner",
    "TradePipeline",
    "TradeSession",
    "TradeState",
    "TradeSummary",
]
