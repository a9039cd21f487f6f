"""Domain models and errors shared across deployer layers."""

from .errors import (
	AmbiguousSavepointError,
	DeployerError,
	DeploymentError,
	InvalidArgumentError,
	JobConflictError,
	JobControlError,
	SavepointNotFoundError,
	SavepointStorageError,
)
from .models import (
	DeploymentRequest,
	FilesystemEntry,
	SavepointDescriptor,
	UpdateRequest,
	domain_split_arguments,
	domain_validate_deployment_inputs,
)
from .timeline import domain_build_stage_event

__all__ = [
	"AmbiguousSavepointError",
	"DeployerError",
	"DeploymentError",
	"DeploymentRequest",
	"FilesystemEntry",
	"InvalidArgumentError",
	"JobConflictError",
	"JobControlError",
	"SavepointDescriptor",
	"SavepointNotFoundError",
	"SavepointStorageError",
	"UpdateRequest",
	"domain_build_stage_event",
	"domain_split_arguments",
	"domain_validate_deployment_inputs",
]
