"""JSON reporter for machine-readable output."""

from __future__ import annotations

import json

from madhouse.core.outcome import ExecutionOutcome


class JSONReporter:
    """Formats an ExecutionOutcome as JSON."""

    def __init__(self, indent: int | None = 2) -> None:
        self.indent = indent

    def report(self, outcome: ExecutionOutcome) -> str:
        """Generate JSON report."""
        return json.dumps(outcome.to_dict(), indent=self.indent, default=str)
