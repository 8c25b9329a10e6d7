"""Core dataclasses shared across tsrunner subsystems."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, List, Optional, Sequence, Tuple, Union

Outcome = Union[None, Awaitable[None]]
Hook = Callable[..., Outcome]  # zero args, or one arg (the environment)


@dataclass(frozen=True)
class Environment:
    """Shared set-level lifecycle hooks.

    Any object exposing ``set_up``/``tear_down`` attributes works in place of
    this class; both are looked up with ``getattr`` and may be absent.
    """

    set_up: Optional[Callable[[], Outcome]] = None
    tear_down: Optional[Callable[[], Outcome]] = None


@dataclass(frozen=True)
class TestCase:
    """A named unit of work with optional bracketing hooks."""

    __test__ = False  # keep pytest from collecting this class

    name: str
    execute: Hook
    set_up: Optional[Hook] = None
    tear_down: Optional[Hook] = None


@dataclass(frozen=True)
class TestSet:
    """A named, ordered group of cases sharing an optional environment."""

    __test__ = False

    name: str
    cases: Tuple[TestCase, ...] = tuple()
    environment: Optional[Any] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "cases", tuple(self.cases))
        seen = set()
        for case in self.cases:
            if case.name in seen:
                raise ValueError(f"Duplicate test case '{case.name}' in test set '{self.name}'")
            seen.add(case.name)

    def find_case(self, name: str) -> Optional[TestCase]:
        for case in self.cases:
            if case.name == name:
                return case
        return None

    def case_names(self) -> Sequence[str]:
        return tuple(case.name for case in self.cases)


@dataclass(frozen=True)
class TestCaseResult:
    """Outcome of executing a single test case."""

    __test__ = False

    name: str
    success: bool
    error: Optional[str] = None


@dataclass
class TestSetResult:
    """Outcome of one registered run of a test set."""

    __test__ = False

    name: str
    cases: List[TestCaseResult] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return all(case.success for case in self.cases)

    @property
    def failed_count(self) -> int:
        return sum(1 for case in self.cases if not case.success)


@dataclass(frozen=True)
class RunError:
    """An entry whose scheduling step raised instead of producing a result."""

    set_name: str
    kind: str  # "configuration" or "environment"
    message: str
