"""Adapter layer package for webhook delivery boundaries."""

from .exit_codes import NotifierExitCode, exit_code_for_exception
from .interfaces import DispatchResult, WebhookDispatcherPort
from .webhook_dispatcher import WEBHOOK_URL_INPUT_NAME, WebhookDispatcher
from .webhook_errors import (
	DispatchError,
	DispatchErrorKind,
	DispatchRejectedError,
	DispatchTimeoutError,
	DispatchTransportError,
)

__all__ = [
	"DispatchError",
	"DispatchErrorKind",
	"DispatchRejectedError",
	"DispatchResult",
	"DispatchTimeoutError",
	"DispatchTransportError",
	"NotifierExitCode",
	"WEBHOOK_URL_INPUT_NAME",
	"WebhookDispatcher",
	"WebhookDispatcherPort",
	"exit_code_for_exception",
]
