"""Job layer package for notification pipeline orchestration."""

from .interfaces import NotifyExecutionResult, NotifyOrchestratorPort, NotifyRequest
from .notify_orchestrator import NotifyOrchestrator, NotifyOrchestratorConfig

__all__ = [
	"NotifyExecutionResult",
	"NotifyOrchestrator",
	"NotifyOrchestratorConfig",
	"NotifyOrchestratorPort",
	"NotifyRequest",
]
