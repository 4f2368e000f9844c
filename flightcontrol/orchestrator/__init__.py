"""Batch orchestration of repository build jobs."""

from flightcontrol.orchestrator.config import OrchestratorConfig
from flightcontrol.orchestrator.orchestrator import BuildOrchestrator, normalize_output

__all__ = [
    "BuildOrchestrator",
    "OrchestratorConfig",
    "normalize_output",
]
