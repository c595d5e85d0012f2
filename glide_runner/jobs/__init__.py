"""Job layer package for preparation, launch, completion polling and run summaries."""

from .completion_poller import LogCompletionPoller, job_failure_kind_for_poll
from .docking_preparation import (
	DockingCombination,
	DockingCombinationFile,
	job_load_docking_combinations,
	job_prepare_docking_jobs,
)
from .errors import (
	JobDirectoryError,
	JobPreparationError,
	JobRunAbortedError,
	JobRunnerError,
	SchrodingerEnvironmentError,
)
from .interfaces import CompletionPollerPort, JobLauncherPort, PollingPolicy
from .launcher import LAUNCH_OS_ERROR_EXIT_CODE, SubprocessJobLauncher
from .preparation import (
	InvalidJobDirectory,
	PreparationReport,
	job_is_glide_grid_script,
	job_log_preparation_summary,
	job_prepare_directories,
	job_prepare_directory,
	job_remove_elements_flag,
)
from .run_summary import RunSummaryAggregator
from .sequential_runner import SequentialJobRunner, job_log_run_summary

__all__ = [
	"CompletionPollerPort",
	"DockingCombination",
	"DockingCombinationFile",
	"InvalidJobDirectory",
	"JobDirectoryError",
	"JobLauncherPort",
	"JobPreparationError",
	"JobRunAbortedError",
	"JobRunnerError",
	"LAUNCH_OS_ERROR_EXIT_CODE",
	"LogCompletionPoller",
	"PollingPolicy",
	"PreparationReport",
	"RunSummaryAggregator",
	"SchrodingerEnvironmentError",
	"SequentialJobRunner",
	"SubprocessJobLauncher",
	"job_failure_kind_for_poll",
	"job_is_glide_grid_script",
	"job_load_docking_combinations",
	"job_log_preparation_summary",
	"job_log_run_summary",
	"job_prepare_directories",
	"job_prepare_directory",
	"job_prepare_docking_jobs",
	"job_remove_elements_flag",
]
