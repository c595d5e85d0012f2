"""Adapter layer package for log, timer and Schrodinger environment boundaries."""

from .interfaces import IntervalWaiterPort, LogMarkerMatcherPort
from .interval_waiter import EventIntervalWaiter
from .log_markers import (
	GLIDE_COMPLETION_MARKERS,
	GLIDE_ELAPSED_TIME_MARKER,
	GLIDE_FAILURE_MARKERS,
	SubstringMarkerMatcher,
)
from .schrodinger_environment import (
	environment_build,
	environment_license_file_path,
	environment_resolve_installation_path,
	environment_validate,
	environment_validate_installation,
)

__all__ = [
	"EventIntervalWaiter",
	"GLIDE_COMPLETION_MARKERS",
	"GLIDE_ELAPSED_TIME_MARKER",
	"GLIDE_FAILURE_MARKERS",
	"IntervalWaiterPort",
	"LogMarkerMatcherPort",
	"SubstringMarkerMatcher",
	"environment_build",
	"environment_license_file_path",
	"environment_resolve_installation_path",
	"environment_validate",
	"environment_validate_installation",
]
