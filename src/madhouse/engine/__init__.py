"""Engine module - runs scenarios step by step."""

from madhouse.engine.executor import ExecutionEngine
from madhouse.engine.selection import (
    DEFAULT_RETRY_LIMIT,
    Draw,
    RandomSelector,
    Selection,
    Selector,
)

__all__ = [
    "DEFAULT_RETRY_LIMIT",
    "Draw",
    "ExecutionEngine",
    "RandomSelector",
    "Selection",
    "Selector",
]
