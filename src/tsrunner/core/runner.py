"""Test runner scheduling registered test sets onto one ordered run queue."""
from __future__ import annotations

import asyncio
import inspect
import logging
import sys
import traceback
from collections import deque
from typing import Any, Callable, Deque, List, Optional, Sequence

from tsrunner.reporting import ReportManager, Reporter, TerminalReporter

from .errors import CaseNotFoundError, ConfigurationError
from .models import RunError, TestCase, TestCaseResult, TestSet, TestSetResult

log = logging.getLogger(__name__)

ExitFn = Callable[[int], Any]

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_RUN_ERROR = 2


def _no_exit(_: int) -> None:
    return None


async def _invoke(hook: Optional[Callable[..., Any]], *args: Any) -> None:
    """Call ``hook`` with as many of ``args`` as it accepts and await its result."""

    if hook is None:
        return
    outcome = hook(*args[: _positional_arity(hook, len(args))])
    if inspect.isawaitable(outcome):
        await outcome


def _positional_arity(hook: Callable[..., Any], available: int) -> int:
    try:
        params = inspect.signature(hook).parameters.values()
    except (TypeError, ValueError):  # builtins without signatures
        return available
    count = 0
    for param in params:
        if param.kind is inspect.Parameter.VAR_POSITIONAL:
            return available
        if param.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD):
            count += 1
    return min(count, available)


def _format_exception(exc: BaseException) -> str:
    return "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)).rstrip()


class TestRunner:
    """Executes registered test sets strictly one after another.

    ``run`` only enqueues. A single worker task drains the queue in FIFO
    order, so a set never starts before the previous one has finished its
    environment tear-down. Once everything queued has been executed the
    results are summarized and ``exit_fn`` is called exactly once with the
    aggregate status.

    Inside a running event loop the first ``run`` call arms the drain for
    the next loop iteration, which picks up every set registered in the same
    synchronous burst. The loop has to stay alive until it finishes: a
    coroutine passed to ``asyncio.run`` should await :meth:`drain` rather than
    return right after registering. If the armed drain is cancelled with sets
    still queued a warning names them. Without a running loop call
    :meth:`close` once registration is complete.
    """

    __test__ = False

    def __init__(
        self,
        set_name: Optional[str] = None,
        case_name: Optional[str] = None,
        exit_fn: Optional[ExitFn] = None,
        *,
        reporters: Optional[Sequence[Reporter]] = None,
    ) -> None:
        self._set_name = set_name or None
        self._case_name = case_name or None
        self._exit_fn: ExitFn = exit_fn or _no_exit
        if reporters is None:
            reporters = [TerminalReporter()]
        self._reports = ReportManager(reporters)
        self._queue: Deque[TestSet] = deque()
        self._results: List[TestSetResult] = []
        self._errors: List[RunError] = []
        self._worker: Optional[asyncio.Task] = None
        self._drain_task: Optional[asyncio.Task] = None
        self._drain_armed = False
        self._exited = False

    @classmethod
    def from_argv(
        cls,
        argv: Optional[Sequence[str]] = None,
        exit_fn: Optional[ExitFn] = sys.exit,
        **kwargs: Any,
    ) -> "TestRunner":
        """Build a runner from ``-s/--set-name`` and ``-c/--case-name`` flags."""

        from tsrunner.cli.main import parse_filter_args

        args = list(argv) if argv is not None else sys.argv[1:]
        set_name, case_name = parse_filter_args(args)
        return cls(set_name, case_name, exit_fn, **kwargs)

    @property
    def set_name(self) -> Optional[str]:
        return self._set_name

    @property
    def case_name(self) -> Optional[str]:
        return self._case_name

    @property
    def results(self) -> List[TestSetResult]:
        return list(self._results)

    @property
    def errors(self) -> List[RunError]:
        return list(self._errors)

    @property
    def exited(self) -> bool:
        return self._exited

    def pending(self) -> List[TestSet]:
        return list(self._queue)

    def exit_status(self) -> int:
        if self._errors:
            return EXIT_RUN_ERROR
        if any(not result.passed for result in self._results):
            return EXIT_FAILED
        return EXIT_OK

    def run(self, test_set: TestSet) -> None:
        """Enqueue ``test_set`` behind everything registered before it."""

        self._queue.append(test_set)
        log.debug("Queued test set %s (%d pending)", test_set.name, len(self._queue))
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        if not self._drain_armed:
            self._drain_armed = True
            # The task first steps once the current registration burst yields.
            self._drain_task = loop.create_task(self.drain())
            self._drain_task.add_done_callback(self._drain_finished)
        elif self._exited:
            self._ensure_worker(loop)

    def _drain_finished(self, task: asyncio.Task) -> None:
        if task.cancelled():
            if self._queue:
                log.warning(
                    "Drain cancelled before these test sets ran: %s. "
                    "Await runner.drain() before the event loop shuts down.",
                    ", ".join(test_set.name for test_set in self._queue),
                )
            return
        exc = task.exception()
        if exc is not None:
            log.error("Drain failed: %s", exc, exc_info=exc)

    async def drain(self) -> int:
        """Run everything queued, then summarize and exit once.

        Returns the aggregate exit status.
        """

        self._drain_armed = True
        while self._queue or self._worker_running():
            await self._ensure_worker(asyncio.get_running_loop())
        if not self._exited:
            self._exited = True
            self._summarize_and_exit()
        return self.exit_status()

    def close(self) -> int:
        """Synchronous wrapper around :meth:`drain` for callers without a loop."""

        return asyncio.run(self.drain())

    def _worker_running(self) -> bool:
        return self._worker is not None and not self._worker.done()

    def _ensure_worker(self, loop: asyncio.AbstractEventLoop) -> asyncio.Task:
        if not self._worker_running():
            self._worker = loop.create_task(self._work())
        assert self._worker is not None
        return self._worker

    async def _work(self) -> None:
        while self._queue:
            test_set = self._queue.popleft()
            try:
                await self.execute(test_set)
            except ConfigurationError as exc:
                self._record_error(test_set, "configuration", exc)
            except Exception as exc:
                self._record_error(test_set, "environment", exc)

    def _record_error(self, test_set: TestSet, kind: str, exc: Exception) -> None:
        log.debug("Test set %s aborted (%s error): %s", test_set.name, kind, exc)
        error = RunError(set_name=test_set.name, kind=kind, message=str(exc))
        self._errors.append(error)
        self._reports.run_error(error, _format_exception(exc))

    async def execute(self, test_set: TestSet) -> None:
        """Apply the filters to ``test_set`` and run what remains.

        Raises :class:`CaseNotFoundError` when the case filter names a case the
        set does not have, and propagates environment hook failures.
        """

        if self._set_name and self._set_name != test_set.name:
            log.debug("Skipping test set %s (filter: %s)", test_set.name, self._set_name)
            return
        if not self._case_name:
            await self._run_test_set(test_set)
        else:
            await self._run_test_case(test_set, self._case_name)

    async def _run_test_set(self, test_set: TestSet) -> None:
        await self._run_cases(test_set, test_set.cases)

    async def _run_test_case(self, test_set: TestSet, case_name: str) -> None:
        test_case = test_set.find_case(case_name)
        if test_case is None:
            raise CaseNotFoundError(test_set.name, case_name)
        await self._run_cases(test_set, (test_case,))

    async def _run_cases(self, test_set: TestSet, cases: Sequence[TestCase]) -> None:
        environment = test_set.environment
        set_result = TestSetResult(name=test_set.name)
        self._reports.set_started(test_set)
        await _invoke(getattr(environment, "set_up", None))
        for test_case in cases:
            set_result.cases.append(await self._run_case(test_case, environment))
        try:
            await _invoke(getattr(environment, "tear_down", None))
        finally:
            self._results.append(set_result)

    async def _run_case(self, test_case: TestCase, environment: Any) -> TestCaseResult:
        self._reports.case_started(test_case)
        error: Optional[BaseException] = None
        try:
            await _invoke(test_case.set_up, environment)
            await _invoke(test_case.execute, environment)
        except Exception as exc:
            error = exc
        try:
            await _invoke(test_case.tear_down, environment)
        except Exception as exc:
            if error is None:
                error = exc
            else:
                log.error("Tear-down of %s also failed: %s", test_case.name, exc)
        if error is None:
            return TestCaseResult(name=test_case.name, success=True)
        details = _format_exception(error)
        log.debug("Test case %s failed: %s", test_case.name, error)
        self._reports.case_failed(test_case, details)
        return TestCaseResult(name=test_case.name, success=False, error=str(error) or type(error).__name__)

    def _summarize_and_exit(self) -> None:
        self._reports.summarize(self.results, self.errors)
        status = self.exit_status()
        log.debug("Exiting with status %d", status)
        self._exit_fn(status)
