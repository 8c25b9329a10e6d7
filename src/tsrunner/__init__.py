"""tsrunner package initialization."""
from __future__ import annotations

from .core import (
    CaseNotFoundError,
    ConfigurationError,
    Environment,
    TestCase,
    TestCaseResult,
    TestRunner,
    TestSet,
    TestSetResult,
    TsRunnerError,
)
from .version import __version__

__all__ = [
    "__version__",
    "CaseNotFoundError",
    "ConfigurationError",
    "Environment",
    "TestCase",
    "TestCaseResult",
    "TestRunner",
    "TestSet",
    "TestSetResult",
    "TsRunnerError",
]
