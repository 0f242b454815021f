"""antigravity-detect exception hierarchy.

All detection failures inherit from DetectionError. They are raised inside
a single detection attempt and recovered by the retry loop in
``ProcessPortDetector``; callers only ever see ``None`` when every attempt
has failed.
"""


class DetectionError(Exception):
    """Base exception for all detection failures."""


class ProcessNotFoundError(DetectionError):
    """Raised when no pid or CSRF token could be parsed from the process list."""


class NoListeningPortsError(DetectionError):
    """Raised when the target process has no loopback listening ports.

    Also covers the case where the port-listing command itself failed,
    since that failure degrades to an empty candidate list.
    """


class NoWorkingPortError(DetectionError):
    """Raised when every candidate port was probed and none answered 200."""


class CommandExecutionError(DetectionError):
    """Raised when an external command exits with a nonzero status.

    Attributes:
        command: The shell command that was run.
        returncode: Exit status, or None if the process never finished.
        stderr: Captured standard error text.
    """

    def __init__(
        self,
        message: str,
        *,
        command: str = "",
        returncode: int | None = None,
        stderr: str = "",
    ) -> None:
        super().__init__(message)
        self.command = command
        self.returncode = returncode
        self.stderr = stderr


class CommandTimeoutError(CommandExecutionError):
    """Raised when an external command exceeds its time bound and is killed."""


class CommandUnavailableError(CommandExecutionError):
    """Raised when the shell cannot find the invoked tool."""
