"""Reporter interface definitions."""
from __future__ import annotations

from typing import TYPE_CHECKING, List, Sequence

if TYPE_CHECKING:  # pragma: no cover
    from tsrunner.core.models import RunError, TestCase, TestSet, TestSetResult


class Reporter:
    """Interface for output renderers."""

    def on_set_start(self, test_set: "TestSet") -> None:  # pragma: no cover - interface
        raise NotImplementedError

    def on_case_start(self, test_case: "TestCase") -> None:  # pragma: no cover
        raise NotImplementedError

    def on_case_failure(self, test_case: "TestCase", details: str) -> None:  # pragma: no cover
        raise NotImplementedError

    def on_run_error(self, error: "RunError", details: str) -> None:  # pragma: no cover
        raise NotImplementedError

    def on_complete(
        self, results: Sequence["TestSetResult"], errors: Sequence["RunError"]
    ) -> None:  # pragma: no cover
        raise NotImplementedError


class ReportManager:
    """Dispatches lifecycle callbacks to multiple reporters."""

    def __init__(self, reporters: Sequence[Reporter]) -> None:
        self._reporters = list(reporters)

    def set_started(self, test_set: "TestSet") -> None:
        for reporter in self._reporters:
            reporter.on_set_start(test_set)

    def case_started(self, test_case: "TestCase") -> None:
        for reporter in self._reporters:
            reporter.on_case_start(test_case)

    def case_failed(self, test_case: "TestCase", details: str) -> None:
        for reporter in self._reporters:
            reporter.on_case_failure(test_case, details)

    def run_error(self, error: "RunError", details: str) -> None:
        for reporter in self._reporters:
            reporter.on_run_error(error, details)

    def summarize(self, results: Sequence["TestSetResult"], errors: Sequence["RunError"]) -> None:
        for reporter in self._reporters:
            reporter.on_complete(results, errors)

    def reporters(self) -> List[Reporter]:
        return list(self._reporters)
