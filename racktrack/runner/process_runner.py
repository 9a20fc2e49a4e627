import subprocess
import time
from collections.abc import Sequence
from pathlib import Path

from racktrack.logging.logger import Log
from racktrack.runner.exceptions import (
    NotFoundError,
    ProcessError,
    ProcessTimeoutError,
    RunnerError,
)
from racktrack.runner.models import ProcessResult, ProcessSpec


class ProcessRunner:
    """Runs external scripts to completion and captures their output."""

    def __init__(self, default_timeout: float | None = None) -> None:
        self._default_timeout = default_timeout

    def run_script(
        self,
        executable: Path,
        script_path: Path,
        arg_paths: Sequence[Path] = (),
        timeout: float | None = None,
    ) -> ProcessResult:
        """Run `executable script_path *arg_paths`.

        Raises:
            NotFoundError: if any of the paths is missing. Nothing is spawned.
            ProcessError: if the process exits with a non-zero code.
            ProcessTimeoutError: if the process outlives the timeout.
        """
        spec = ProcessSpec(
            executable=executable,
            args=(script_path, *arg_paths),
            timeout=timeout,
        )
        return self.run(spec)

    def run(self, spec: ProcessSpec) -> ProcessResult:
        """Spawn the process described by spec and wait for it to exit.

        Exit code 0 is success regardless of stderr content.
        """
        self._ensure_paths_exist(spec)
        timeout = spec.timeout if spec.timeout is not None else self._default_timeout
        command = " ".join(spec.argv())
        Log.info(f"Running process: {command}")

        started = time.monotonic()
        try:
            completed = subprocess.run(
                spec.argv(),
                cwd=spec.cwd,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as exc:
            Log.error(f"Process timed out after {timeout}s: {command}")
            raise ProcessTimeoutError(timeout or 0.0, command) from exc
        except FileNotFoundError as exc:
            raise NotFoundError(f"Executable not found: {spec.executable}") from exc
        except OSError as exc:
            raise RunnerError(f"Failed to start process {command}: {exc}") from exc
        duration = time.monotonic() - started

        if completed.returncode != 0:
            Log.error(
                f"Process failed: {command}",
                exit_code=completed.returncode,
                duration=f"{duration:.2f}s",
            )
            raise ProcessError(completed.returncode, completed.stderr, command)

        if completed.stderr:
            Log.debug(f"Process stderr: {completed.stderr.strip()}")
        Log.info(f"Process finished: {command}", duration=f"{duration:.2f}s")
        return ProcessResult(
            stdout=completed.stdout,
            stderr=completed.stderr,
            exit_code=completed.returncode,
            duration_seconds=duration,
        )

    @staticmethod
    def _ensure_paths_exist(spec: ProcessSpec) -> None:
        if not spec.executable.exists():
            raise NotFoundError(f"Executable not found: {spec.executable}")
        for arg in spec.args:
            if not arg.exists():
                raise NotFoundError(f"Path not found: {arg}")
