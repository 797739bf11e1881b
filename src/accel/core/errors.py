from __future__ import annotations


class AccelError(Exception):
    """
    Base class for every error raised by accel.
    """


class BackendUnavailable(AccelError):
    """
    The backend could not be reached, read from or written to.
    """


class StepFailure(AccelError):
    """
    A motion step was rejected by the backend.
    """

    def __init__(self, message: str, *, motion: str | None = None) -> None:
        super().__init__(message)
        self.motion = motion


class CheckpointError(BackendUnavailable):
    """
    Persisting partial progress after a failed step did not succeed.

    The step error is the primary cause (``__cause__`` / ``step_error``);
    the failed write is kept on ``write_error``.
    """

    def __init__(self, *, reached: int, step_error: BaseException, write_error: BaseException) -> None:
        super().__init__(
            f"failed to checkpoint cursor at {reached} after step error "
            f"({type(step_error).__name__}: {step_error}): {write_error}"
        )
        self.reached = reached
        self.step_error = step_error
        self.write_error = write_error


class CatalogError(AccelError):
    """
    The motion catalog directory is missing a template, has mismatched files
    or a malformed version component.
    """


class DriverNotFound(AccelError, LookupError):
    """
    No registered driver matches the requested name or target url.
    """
