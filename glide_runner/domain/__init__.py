"""Domain models used across runner layer boundaries."""

from .models import (
    TERMINAL_JOB_STATES,
    FailureKind,
    Job,
    JobOutcome,
    JobState,
    PollOutcome,
    RunReport,
    RunSummary,
)
from .timeline import domain_build_stage_event

__all__ = [
    "TERMINAL_JOB_STATES",
    "FailureKind",
    "Job",
    "JobOutcome",
    "JobState",
    "PollOutcome",
    "RunReport",
    "RunSummary",
    "domain_build_stage_event",
]
