"""Job-layer contracts shared by batch orchestrators and the scheduler."""

from dataclasses import dataclass
from typing import Protocol

JOB_STATUS_SUCCESS = "success"
JOB_STATUS_PARTIAL_FAILURE = "partial_failure"
JOB_STATUS_FAILED = "failed"


def job_resolve_status(succeeded_count: int, failed_count: int) -> str:
    """Resolve the batch status from per-item outcome counts.

    Args:
        succeeded_count: Items processed without error.
        failed_count: Items whose processing raised.

    Returns:
        str: `success` when nothing failed (including an empty batch),
        `failed` when every item failed, `partial_failure` otherwise.

    Raises:
        ValueError: Raised when a count is negative.
    """

    if succeeded_count < 0 or failed_count < 0:
        raise ValueError("outcome counts must not be negative")
    if failed_count == 0:
        return JOB_STATUS_SUCCESS
    if succeeded_count == 0:
        return JOB_STATUS_FAILED
    return JOB_STATUS_PARTIAL_FAILURE


@dataclass(frozen=True)
class JobExecutionResult:
    """Outcome of one named batch job run.

    Attributes:
        job_name: Normalized job identifier.
        status: One of `success`, `partial_failure` or `failed`.
    """

    job_name: str
    status: str

    @property
    def job_succeeded(self) -> bool:
        """Return whether the run finished without any item failure."""

        return self.status == JOB_STATUS_SUCCESS


class JobOrchestratorPort(Protocol):
    """Port for orchestrators the CLI and scheduler can trigger by name."""

    def job_supported_names(self) -> tuple[str, ...]:
        """Return job names accepted by `job_execute`."""

    def job_execute(self, job_name: str) -> JobExecutionResult:
        """Run one named batch job to completion.

        Args:
            job_name: Job name, surrounding whitespace ignored.

        Returns:
            JobExecutionResult: Final batch status.

        Raises:
            ValueError: Raised when the job name is unsupported.
            RuntimeError: Raised when the batch cannot start.
        """
