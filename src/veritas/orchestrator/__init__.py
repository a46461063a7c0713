# src/veritas/orchestrator/__init__.py
"""Orchestrator module for sequencing the validation stages."""

from veritas.reporting.summary import generate_data_quality_summary, get_status_message

from .models import (
    OrchestrationResult,
    OrchestrationState,
    PipelineState,
    ProgressUpdate,
    StageError,
)
from .progress import ProgressDispatcher
from .settings import OrchestratorSettings
from .validation_orchestrator import (
    ValidationOrchestrator,
    is_sufficient_for_analysis,
    orchestrate,
)

__all__ = [
    "OrchestrationResult",
    "OrchestrationState",
    "OrchestratorSettings",
    "PipelineState",
    "ProgressDispatcher",
    "ProgressUpdate",
    "StageError",
    "ValidationOrchestrator",
    "generate_data_quality_summary",
    "get_status_message",
    "is_sufficient_for_analysis",
    "orchestrate",
]
