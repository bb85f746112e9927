"""Runs one external process with concurrent stream handling.

stdin is fed by a writer task while two drainer tasks empty stdout and
stderr. All three run at the same time so that neither side can block on a
full pipe buffer; they are joined before the exit status is returned.
"""

import os
import shutil
import signal
import subprocess
import tempfile
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import IO, BinaryIO

from docimport.document.cancellation import CancelToken
from docimport.external.exceptions import (
    ProcessCancelledError,
    ProcessLaunchError,
    ProcessTimeoutError,
)
from docimport.logging.logger import Log

_POLL_SECONDS = 0.05
_CHUNK_SIZE = 64 * 1024


@dataclass
class ProcessResult:
    exit_code: int
    stdout: bytes
    stderr: bytes


def _write_stdin(source: BinaryIO, sink: IO[bytes]) -> None:
    try:
        shutil.copyfileobj(source, sink, _CHUNK_SIZE)
    except BrokenPipeError:
        Log.debug("External process closed stdin before all content was written")
    finally:
        try:
            sink.close()
        except BrokenPipeError:
            pass


def _drain(source: IO[bytes], max_memory: int) -> bytes:
    with tempfile.SpooledTemporaryFile(max_size=max_memory) as buffer:
        shutil.copyfileobj(source, buffer, _CHUNK_SIZE)
        source.close()
        buffer.seek(0)
        return buffer.read()


def _kill(process: subprocess.Popen[bytes]) -> None:
    """Kill the process and everything it spawned, so no descendant keeps the pipes open."""
    if os.name == "posix":
        try:
            os.killpg(process.pid, signal.SIGKILL)
        except ProcessLookupError:
            pass
    else:
        process.kill()
    process.wait()


def run_process(
    args: list[str],
    env: dict[str, str],
    stdin: BinaryIO | None,
    *,
    timeout_seconds: float | None = None,
    cancel_token: CancelToken | None = None,
    max_memory: int = 1024 * 1024,
) -> ProcessResult:
    """Run *args* to completion, feeding *stdin* when given.

    Raises:
        ProcessLaunchError: if the executable cannot be started.
        ProcessTimeoutError: if *timeout_seconds* elapses; the process is killed.
        ProcessCancelledError: if *cancel_token* is cancelled; the process is killed.
    """
    Log.debug(f"Launching external process: {args}")
    try:
        process = subprocess.Popen(
            args,
            stdin=subprocess.PIPE if stdin is not None else subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            env=env,
            start_new_session=True,
        )
    except (OSError, ValueError) as exc:
        raise ProcessLaunchError(f"Cannot launch '{args[0] if args else ''}': {exc}") from exc

    deadline = time.monotonic() + timeout_seconds if timeout_seconds is not None else None
    with ThreadPoolExecutor(max_workers=3, thread_name_prefix="external-io") as pool:
        writer = None
        if stdin is not None and process.stdin is not None:
            writer = pool.submit(_write_stdin, stdin, process.stdin)
        assert process.stdout is not None and process.stderr is not None
        stdout = pool.submit(_drain, process.stdout, max_memory)
        stderr = pool.submit(_drain, process.stderr, max_memory)

        while True:
            try:
                exit_code = process.wait(timeout=_POLL_SECONDS)
                break
            except subprocess.TimeoutExpired:
                pass
            if deadline is not None and time.monotonic() >= deadline:
                _kill(process)
                raise ProcessTimeoutError(
                    f"External process timed out after {timeout_seconds}s: {args[0]}"
                )
            if cancel_token is not None and cancel_token.cancelled:
                _kill(process)
                raise ProcessCancelledError(f"External process cancelled: {args[0]}")

        if writer is not None:
            writer.result()
        return ProcessResult(exit_code=exit_code, stdout=stdout.result(), stderr=stderr.result())
