"""Terminal reporter rendering progress and summaries."""
from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Sequence

import click
from colorama import just_fix_windows_console

from .base import Reporter

if TYPE_CHECKING:  # pragma: no cover
    from tsrunner.core.models import RunError, TestCase, TestSet, TestSetResult


STATUS_LABELS = {
    True: ("PASS", "green"),
    False: ("FAIL", "red"),
}


class TerminalReporter(Reporter):
    """Human-readable reporter; progress to stdout, failures to stderr."""

    def __init__(self, *, use_color: bool = True) -> None:
        self._use_color = use_color
        if use_color:
            just_fix_windows_console()

    def on_set_start(self, test_set: "TestSet") -> None:
        click.echo(self._styled(f"Test set {test_set.name} starts.", "blue"))

    def on_case_start(self, test_case: "TestCase") -> None:
        click.echo(self._styled(f"Test case {test_case.name} starts.", "yellow"))

    def on_case_failure(self, test_case: "TestCase", details: str) -> None:
        click.echo(self._styled(f"Test case {test_case.name} raised:", "red"), err=True)
        click.echo(details, err=True)

    def on_run_error(self, error: "RunError", details: str) -> None:
        click.echo(
            self._styled(f"Test set {error.set_name} aborted by {error.kind} error:", "magenta"),
            err=True,
        )
        click.echo(details, err=True)

    def on_complete(self, results: Sequence["TestSetResult"], errors: Sequence["RunError"]) -> None:
        total = failed = 0
        for set_result in results:
            click.echo("")
            click.echo(self._styled(f"Test set {set_result.name} result:", "magenta"))
            for case_result in set_result.cases:
                label, color = STATUS_LABELS[case_result.success]
                click.echo(f"{self._styled(label, color)} {case_result.name}")
            total += len(set_result.cases)
            failed += set_result.failed_count
        passed = total - failed
        click.echo("")
        summary_color = "green" if passed == total and not errors else "red"
        click.echo(
            self._styled("Summary", summary_color)
            + f": sets={len(results)} cases={total} passed={passed} "
            f"failed={failed} errors={len(errors)}"
        )
        for error in errors:
            click.echo(self._styled(f"ERROR {error.set_name} ({error.kind}): {error.message}", "red"))

    def _styled(self, text: str, color: Optional[str]) -> str:
        if not self._use_color or not color:
            return text
        return click.style(text, fg=color)
