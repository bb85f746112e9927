class ExternalProcessError(Exception):
    """Base exception for external application failures."""


class ProcessLaunchError(ExternalProcessError):
    """Raised when the external process cannot be started."""


class ProcessTimeoutError(ExternalProcessError):
    """Raised when the external process exceeds its timeout and is killed."""


class ProcessCancelledError(ExternalProcessError):
    """Raised when the document branch is cancelled while the process runs."""


class ProcessExitError(ExternalProcessError):
    """Raised when the external process exits with a non-zero status.

    ``captured`` holds the output and metadata harvested before the status
    was checked, so callers can still use them.
    """

    def __init__(self, exit_code: int, stderr_tail: str = "", captured: object = None) -> None:
        message = f"External process exited with status {exit_code}"
        if stderr_tail:
            message += f": {stderr_tail}"
        super().__init__(message)
        self.exit_code = exit_code
        self.captured = captured


class MetadataFormatError(ExternalProcessError):
    """Raised when a metadata file cannot be written or read in the configured format."""
