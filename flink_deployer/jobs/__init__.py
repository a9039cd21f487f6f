"""Job layer package for update workflow orchestration."""

from .interfaces import UpdateExecutionResult, UpdateOrchestratorPort
from .savepoints import (
	SAVEPOINT_COMPLETED_PATTERN,
	SavepointCreator,
	SavepointLocator,
	job_savepoint_extract_path,
)
from .update_orchestrator import UpdateJobOrchestrator

__all__ = [
	"SAVEPOINT_COMPLETED_PATTERN",
	"SavepointCreator",
	"SavepointLocator",
	"UpdateExecutionResult",
	"UpdateJobOrchestrator",
	"UpdateOrchestratorPort",
	"job_savepoint_extract_path",
]
