"""Reporting exports."""
from .base import ReportManager, Reporter
from .terminal import TerminalReporter

__all__ = [
    "ReportManager",
    "Reporter",
    "TerminalReporter",
]
