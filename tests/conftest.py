from __future__ import annotations

from typing import Callable, List, Optional

import pytest

from tsrunner.core import TestRunner
from tsrunner.reporting import TerminalReporter


@pytest.fixture
def exits() -> List[int]:
    """Statuses passed to the runner's exit callback."""

    return []


@pytest.fixture
def make_runner(exits: List[int]) -> Callable[..., TestRunner]:
    def _make(set_name: Optional[str] = None, case_name: Optional[str] = None) -> TestRunner:
        return TestRunner(
            set_name,
            case_name,
            exits.append,
            reporters=[TerminalReporter(use_color=False)],
        )

    return _make
