"""Reporters for scenario outcomes."""

from madhouse.reporters.console import ConsoleReporter
from madhouse.reporters.json import JSONReporter

__all__ = ["ConsoleReporter", "JSONReporter"]
