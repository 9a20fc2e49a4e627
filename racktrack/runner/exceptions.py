class RunnerError(Exception):
    """Base exception for all external process errors."""


class NotFoundError(RunnerError):
    """Raised when an executable, script or argument path does not exist."""


class ProcessError(RunnerError):
    """Raised when an external process exits with a non-zero code."""

    def __init__(self, exit_code: int, stderr: str, command: str = "") -> None:
        self.exit_code = exit_code
        self.stderr = stderr
        self.command = command
        detail = f"\n{stderr.strip()}" if stderr.strip() else ""
        super().__init__(f"Process exited with code {exit_code}{detail}")


class ProcessTimeoutError(RunnerError, TimeoutError):
    """Raised when an external process exceeds its timeout and is terminated."""

    def __init__(self, timeout: float, command: str = "") -> None:
        self.timeout = timeout
        self.command = command
        super().__init__(f"Process timed out after {timeout}s")
