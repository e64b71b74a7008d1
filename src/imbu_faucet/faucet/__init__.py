"""Faucet components."""

from .address import AddressExtractor
from .messages import FaucetMessages
from .rate_limiter import RateLimiter, RateLimitResult
from .service import FaucetResult, FaucetService, RequestStatus
from .workflow import ProjectState, ProjectWorkflow, WorkflowCommand, WorkflowOutcome

__all__ = [
    "AddressExtractor",
    "FaucetMessages",
    "FaucetResult",
    "FaucetService",
    "ProjectState",
    "ProjectWorkflow",
    "RateLimitResult",
    "RateLimiter",
    "RequestStatus",
    "WorkflowCommand",
    "WorkflowOutcome",
]
