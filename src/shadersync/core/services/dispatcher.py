from __future__ import annotations

"""
External Compiler Dispatcher.

Launches one compiler process per submitted source and keeps a handle for
each of them so the caller can await their joint completion. Processes are
started at submission time and run concurrently without a cap; a small
thread pool only observes their termination. Compiler output goes to an
anonymous temporary file, so a chatty compiler can never block on a full
pipe while nobody is reading it.
"""

import logging
import subprocess
import tempfile
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import wait as wait_futures
from typing import IO, Any, Callable, List, Optional

from shadersync.domain.sync_models import CompileJob, CompileOutcome

logger = logging.getLogger(__name__)

OutcomeListener = Callable[[CompileOutcome], None]


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def build_compile_job(compiler_path: str, source: str, output: str) -> CompileJob:
    """Command shape: `<compiler> <source> -o <output>`."""
    return CompileJob(
        source=source,
        output=output,
        command=[compiler_path, source, "-o", output],
    )


class CompileDispatcher:
    """
    Tracks every compile task of a run.

    Listeners are invoked from the observing thread before the task's
    future resolves, so once `wait()` returns every listener has run.
    """

    def __init__(
            self,
            compiler_path: str,
            *,
            popen: Callable[..., Any] = subprocess.Popen,
    ):
        self.compiler_path = compiler_path
        self._popen = popen
        self._executor = ThreadPoolExecutor(thread_name_prefix="CompileWatcher")
        self._futures: List[Future] = []
        self._listeners: List[OutcomeListener] = []
        self._lock = threading.Lock()

    def __enter__(self) -> "CompileDispatcher":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.shutdown()

    def add_listener(self, listener: OutcomeListener) -> None:
        self._listeners.append(listener)

    @property
    def pending(self) -> int:
        with self._lock:
            return sum(1 for f in self._futures if not f.done())

    def submit(self, source: str, output: str) -> "Future[CompileOutcome]":
        """
        Launch the compiler for one source without waiting for it.

        Args:
            source: Shader source path.
            output: Artifact path the compiler must write.

        Returns:
            Future[CompileOutcome]: Resolves when the process has exited.
                                    Launch failures resolve immediately.
        """
        return self.submit_job(build_compile_job(self.compiler_path, source, output))

    def submit_job(self, job: CompileJob) -> "Future[CompileOutcome]":
        """Launch a prepared job; see `submit`."""
        logger.debug(f"Dispatching: {job.command_line}")

        log_file: Optional[IO[bytes]] = None
        started = time.monotonic()
        try:
            log_file = tempfile.TemporaryFile()
            process = self._popen(
                job.command,
                stdin=subprocess.DEVNULL,
                stdout=log_file,
                stderr=subprocess.STDOUT,
            )
        except OSError as e:
            if log_file is not None:
                log_file.close()
            outcome = CompileOutcome(
                job=job,
                ok=False,
                returncode=None,
                diagnostics=str(e),
                duration=time.monotonic() - started,
            )
            self._notify(outcome)
            future: Future = Future()
            future.set_result(outcome)
        else:
            future = self._executor.submit(self._watch, job, process, log_file, started)

        with self._lock:
            self._futures.append(future)
        return future

    def wait(self) -> List[CompileOutcome]:
        """
        Block until every submitted task has completed.

        Returns:
            List[CompileOutcome]: Outcomes in submission order.
        """
        with self._lock:
            futures = list(self._futures)
        wait_futures(futures)
        return [f.result() for f in futures]

    def shutdown(self) -> None:
        self._executor.shutdown(wait=True)

    # -------------------------------------------------------------------------
    # PRIVATE HELPERS
    # -------------------------------------------------------------------------

    def _watch(self, job: CompileJob, process: Any, log_file: IO[bytes], started: float) -> CompileOutcome:
        """Runs on the watcher pool: reap the process and collect its output."""
        try:
            returncode = process.wait()
            log_file.seek(0)
            diagnostics = log_file.read().decode("utf-8", errors="replace")
        except OSError as e:
            returncode = None
            diagnostics = f"Failed to collect compiler output: {e}"
        finally:
            log_file.close()

        outcome = CompileOutcome(
            job=job,
            ok=returncode == 0,
            returncode=returncode,
            diagnostics=diagnostics.strip(),
            duration=time.monotonic() - started,
        )
        self._notify(outcome)
        return outcome

    def _notify(self, outcome: CompileOutcome) -> None:
        for listener in list(self._listeners):
            try:
                listener(outcome)
            except Exception:
                logger.exception(f"Outcome listener failed for {outcome.job.source}")
