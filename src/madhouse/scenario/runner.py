"""Scenario runner: binds composer, engine and configuration to Hypothesis.

Usage:
    from madhouse import scenario

    def test_counter():
        scenario(Ctx(), Increment, Decrement, Increment(amount=42), state=Counter)

or, with the builder:

    Scenario(Counter, Ctx()).add(Increment, Decrement).add(Increment(amount=42)).run()

Each Hypothesis example runs the whole scenario from a fresh state. A
precondition failure in normal mode rejects the example; an invariant
violation re-raises the assertion from apply() so Hypothesis shrinks it and
the test fails with that assertion.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from hypothesis import HealthCheck, Phase, given, note, reject, seed, settings
from hypothesis import strategies as st
from hypothesis.errors import Unsatisfiable

from madhouse.config import MadhouseConfig, get_config
from madhouse.core.outcome import ExecutionOutcome, FailureKind
from madhouse.engine.executor import ExecutionEngine
from madhouse.errors import (
    ErrorContext,
    NoEligibleCommandError,
    PreconditionNotMetError,
)
from madhouse.reporters.console import ConsoleReporter
from madhouse.scenario.composer import CommandProvider, ProviderSpec, SequenceComposer

logger = logging.getLogger(__name__)


class Scenario:
    """An ordered list of command providers plus the state and context they run on.

    Providers are command types (sampled fresh on every example) or command
    instances (used as-is). The list is fixed once ``run()`` is called.

    After a run, ``last_outcome`` holds the most recent non-rejected outcome;
    when the run failed that is the shrunk counterexample Hypothesis replayed.
    """

    def __init__(
        self,
        state_factory: Callable[[], Any],
        context: Any = None,
        name: str | None = None,
    ) -> None:
        self.state_factory = state_factory
        self.context = context
        self.name = name or getattr(state_factory, "__name__", "scenario")
        self.providers: list[CommandProvider] = []
        self.runs = 0
        self.rejected = 0
        self.last_outcome: ExecutionOutcome | None = None

    def add(self, *providers: ProviderSpec | CommandProvider) -> Scenario:
        """Append providers in order; returns self for chaining."""
        self.providers.extend(CommandProvider.coerce(p) for p in providers)
        return self

    def run(self, config: MadhouseConfig | None = None) -> None:
        """Run the scenario under Hypothesis.

        Raises:
            AssertionError: the (shrunk) invariant violation from apply().
            NoEligibleCommandError: randomized selection found nothing to run.
            PreconditionNotMetError: no sampled sequence satisfied its preconditions.
        """
        config = config or get_config()
        composer = SequenceComposer(self.providers, self.context)
        engine = ExecutionEngine(
            self.state_factory, self.context, retry_limit=config.retry_limit
        )
        logger.info(
            "Running scenario %s (%s mode, %d commands)",
            self.name,
            config.mode.value,
            len(composer),
        )

        if config.randomized:
            strategies = composer.strategies()

            @given(data=st.data())
            def run_case(data):
                self._verdict(engine.run_randomized(strategies, data.draw), config)

        else:

            @given(sequence=composer.sequence())
            def run_case(sequence):
                self._verdict(engine.run_sequence(sequence), config)

        run_case = _settings_for(config)(run_case)
        if config.seed is not None:
            run_case = seed(config.seed)(run_case)

        try:
            run_case()
        except Unsatisfiable as e:
            raise PreconditionNotMetError(
                f"No generated sequence for {self.name} satisfied its preconditions",
                cause=e,
                context=ErrorContext(scenario_name=self.name),
            ) from e
        except (AssertionError, NoEligibleCommandError):
            logger.warning(
                "Scenario %s failed after %d runs:\n%s",
                self.name,
                self.runs,
                ConsoleReporter.render(self.last_outcome) if self.last_outcome else "",
            )
            raise

    def _verdict(self, outcome: ExecutionOutcome, config: MadhouseConfig) -> None:
        """Translate one outcome into Hypothesis' vocabulary."""
        self.runs += 1
        if config.verbose:
            logger.info("%s", ConsoleReporter.render(outcome))

        failure = outcome.failure
        if failure is not None and failure.kind == FailureKind.PRECONDITION_NOT_MET:
            self.rejected += 1
            reject()

        self.last_outcome = outcome
        if failure is None:
            return

        note(ConsoleReporter.render(outcome))
        if failure.kind == FailureKind.NO_ELIGIBLE_COMMAND:
            raise NoEligibleCommandError(
                failure.detail,
                attempts=config.retry_limit,
                context=ErrorContext(
                    scenario_name=self.name,
                    step_index=failure.step_index,
                    label=failure.label,
                ),
            )

        # Re-raise the assertion from apply() so the test fails exactly as it would
        raise failure.error


def _settings_for(config: MadhouseConfig) -> settings:
    if config.max_shrink_iters:
        logger.debug(
            "max_shrink_iters=%d only enables shrinking; Hypothesis keeps its own budget",
            config.max_shrink_iters,
        )
    phases = tuple(Phase) if config.shrinking else tuple(p for p in Phase if p != Phase.shrink)
    return settings(
        max_examples=config.max_examples,
        phases=phases,
        deadline=None,
        database=None,
        report_multiple_bugs=False,
        suppress_health_check=[
            HealthCheck.too_slow,
            HealthCheck.filter_too_much,
            HealthCheck.data_too_large,
        ],
    )


def scenario(
    context: Any,
    *providers: ProviderSpec | CommandProvider,
    state: Callable[[], Any],
    name: str | None = None,
    config: MadhouseConfig | None = None,
) -> Scenario:
    """Declare and run a scenario in one call.

    Example:
        scenario(ctx, Increment, Decrement, Increment(amount=42), state=Counter)
    """
    built = Scenario(state, context, name=name).add(*providers)
    built.run(config)
    return built
