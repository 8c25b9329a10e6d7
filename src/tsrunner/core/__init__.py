"""Core models and the scheduler exposed at the package level."""
from .errors import CaptureError, CaseNotFoundError, ConfigurationError, LoadError, TsRunnerError
from .models import Environment, RunError, TestCase, TestCaseResult, TestSet, TestSetResult
from .runner import EXIT_FAILED, EXIT_OK, EXIT_RUN_ERROR, TestRunner

__all__ = [
    "CaptureError",
    "CaseNotFoundError",
    "ConfigurationError",
    "EXIT_FAILED",
    "EXIT_OK",
    "EXIT_RUN_ERROR",
    "Environment",
    "LoadError",
    "RunError",
    "TestCase",
    "TestCaseResult",
    "TestRunner",
    "TestSet",
    "TestSetResult",
    "TsRunnerError",
]
