"""
Asynchronous Git command runner.

GitRequestor runs one long Git command in a background thread and hands the
complete stdout buffer to a callback once the process exits. A cancel request
terminates the process; a cancelled request never invokes the callback.
"""

import logging
import subprocess
import threading
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)

DataReadyCallback = Callable[[bytes], None]


class GitRequestor:
    """Runs a Git command off the caller's thread."""

    def __init__(
        self,
        working_dir: str,
        on_data_ready: DataReadyCallback,
        git_binary: str = "git",
        kill_timeout: float = 5.0,
    ):
        self.working_dir = working_dir
        self.git_binary = git_binary
        self.kill_timeout = kill_timeout
        self._on_data_ready = on_data_ready
        self._lock = threading.Lock()
        self._proc: Optional[subprocess.Popen] = None
        self._thread: Optional[threading.Thread] = None
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def run(self, command: List[str]) -> None:
        """Start ``git <command>`` in a daemon thread."""
        if self._thread is not None:
            raise RuntimeError("GitRequestor instances run a single command")
        self._thread = threading.Thread(
            target=self._worker,
            args=(list(command),),
            name="git-requestor",
            daemon=True,
        )
        self._thread.start()

    def cancel(self) -> None:
        """Terminate the running process, if any."""
        with self._lock:
            self._cancelled = True
            proc = self._proc
        if proc is not None and proc.poll() is None:
            logger.debug(f"Terminating git process {proc.pid}")
            proc.terminate()
            threading.Thread(target=self._kill_if_stuck, daemon=True).start()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the worker exits. Returns False on timeout."""
        if self._thread is None:
            return True
        self._thread.join(timeout)
        return not self._thread.is_alive()

    def _worker(self, command: List[str]) -> None:
        try:
            proc = subprocess.Popen(
                [self.git_binary] + command,
                cwd=self.working_dir or None,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
            )
        except OSError as ex:
            logger.error(f"Failed to spawn git {command[0]}: {ex}")
            if not self._cancelled:
                self._on_data_ready(b"")
            return

        with self._lock:
            self._proc = proc
            cancelled = self._cancelled
        if cancelled:
            proc.terminate()

        out, err = proc.communicate()

        if proc.returncode != 0 and err:
            logger.warning(f"git {command[0]} exited with {proc.returncode}: {err.decode('utf-8', 'replace').strip()}")

        if self._cancelled:
            logger.info(f"git {command[0]} cancelled")
            return

        self._on_data_ready(out)

    def _kill_if_stuck(self) -> None:
        proc = self._proc
        if proc is None:
            return
        try:
            proc.wait(timeout=self.kill_timeout)
        except subprocess.TimeoutExpired:
            proc.kill()
