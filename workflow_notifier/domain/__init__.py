"""Domain models and pure pipeline stages: parsing, aggregation and context."""

from .aggregation import STATUS_PRECEDENCE, domain_aggregate_overall_status
from .context import (
	CONTEXT_OPTIONAL_FIELDS,
	CONTEXT_REQUIRED_FIELDS,
	domain_build_workflow_context,
	domain_context_fields_from_github,
	domain_decode_github_context,
	domain_merge_context_fields,
)
from .errors import JobResultsParseError, NotifierError, NotifierValidationError
from .job_results import domain_build_job_result_set, domain_parse_job_results, domain_parse_status_kind
from .models import UNKNOWN_SENTINEL, JobResult, JobResultSet, StatusKind, WorkflowContext
from .timeline import StageEvent, StageStatus, StageTimeline

__all__ = [
	"CONTEXT_OPTIONAL_FIELDS",
	"CONTEXT_REQUIRED_FIELDS",
	"JobResult",
	"JobResultSet",
	"JobResultsParseError",
	"NotifierError",
	"NotifierValidationError",
	"STATUS_PRECEDENCE",
	"StageEvent",
	"StageStatus",
	"StageTimeline",
	"StatusKind",
	"UNKNOWN_SENTINEL",
	"WorkflowContext",
	"domain_aggregate_overall_status",
	"domain_build_job_result_set",
	"domain_build_workflow_context",
	"domain_context_fields_from_github",
	"domain_decode_github_context",
	"domain_merge_context_fields",
	"domain_parse_job_results",
	"domain_parse_status_kind",
]
