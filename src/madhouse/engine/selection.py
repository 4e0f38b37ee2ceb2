"""Command selection policies for randomized runs."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, Protocol

from hypothesis import strategies as st
from hypothesis.strategies import SearchStrategy

from madhouse.core.wrapper import CommandWrapper

logger = logging.getLogger(__name__)

# Draws a value from a strategy, e.g. ``hypothesis.strategies.data().draw``
Draw = Callable[[SearchStrategy[Any]], Any]

DEFAULT_RETRY_LIMIT = 100


@dataclass
class Selection:
    """Result of one selection attempt.

    ``wrapper`` is None when every candidate was rejected; ``last_label``
    then names the last rejected candidate.
    """

    wrapper: CommandWrapper | None
    attempts: int
    last_label: str | None = None

    @property
    def found(self) -> bool:
        return self.wrapper is not None


class Selector(Protocol):
    """Protocol for per-step command selection.

    A selector picks one command whose precondition holds on ``state``.
    """

    def select(self, state: Any, draw: Draw) -> Selection:
        ...


class RandomSelector:
    """Uniform selection over the declared command strategies.

    Each attempt draws a strategy index uniformly, draws one command from
    that strategy and checks it. Rejected candidates are discarded and
    never applied. After ``retry_limit`` rejections the step gives up.
    """

    def __init__(
        self,
        strategies: Sequence[SearchStrategy[CommandWrapper]],
        retry_limit: int = DEFAULT_RETRY_LIMIT,
    ) -> None:
        if retry_limit < 1:
            raise ValueError("retry_limit must be at least 1")
        self.strategies = list(strategies)
        self.retry_limit = retry_limit

    def select(self, state: Any, draw: Draw) -> Selection:
        if not self.strategies:
            return Selection(wrapper=None, attempts=0)

        last_label: str | None = None
        for attempt in range(1, self.retry_limit + 1):
            index = draw(st.integers(min_value=0, max_value=len(self.strategies) - 1))
            candidate = draw(self.strategies[index])
            if candidate.check(state):
                return Selection(wrapper=candidate, attempts=attempt)
            last_label = candidate.label
            logger.debug("Rejected %s (attempt %d/%d)", last_label, attempt, self.retry_limit)

        return Selection(wrapper=None, attempts=self.retry_limit, last_label=last_label)
