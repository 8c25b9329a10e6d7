"""Exception hierarchy for tsrunner."""
from __future__ import annotations


class TsRunnerError(Exception):
    """Base class for every error raised by tsrunner itself."""


class ConfigurationError(TsRunnerError):
    """Invalid run configuration (bad filter, malformed config file)."""


class CaseNotFoundError(ConfigurationError):
    """The case filter names a case that does not exist in the targeted set."""

    def __init__(self, set_name: str, case_name: str) -> None:
        super().__init__(f"Test case '{case_name}' not found in test set '{set_name}'")
        self.set_name = set_name
        self.case_name = case_name


class LoadError(TsRunnerError):
    """A test module could not be imported or does not expose ``register``."""


class CaptureError(TsRunnerError):
    """The capture helper gave up waiting for the renderer."""
