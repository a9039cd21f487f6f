"""API router package for endpoint composition."""

from .health import api_create_health_router
from .jobs import UpdateJobPayload, api_create_jobs_router, api_status_code_for_error

__all__ = ["UpdateJobPayload", "api_create_health_router", "api_create_jobs_router", "api_status_code_for_error"]
