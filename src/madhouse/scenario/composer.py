"""Compose per-command strategies into scenario-level strategies."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Union

from hypothesis import strategies as st
from hypothesis.strategies import SearchStrategy

from madhouse.core.command import Command
from madhouse.core.wrapper import CommandWrapper
from madhouse.errors import ErrorContext, InvalidScenarioError

logger = logging.getLogger(__name__)

# A scenario entry: a Command subclass to sample from, or a fixed instance
ProviderSpec = Union[type[Command], Command]


def _wrap(value: Any) -> CommandWrapper:
    # Wrappers are single-use, so every draw gets its own
    if isinstance(value, CommandWrapper):
        return CommandWrapper(value.command)
    return CommandWrapper(value)


@dataclass(frozen=True)
class CommandProvider:
    """Where one scenario position gets its command from.

    Either "sample fresh from ``command_type.build(context)``" or
    "use exactly ``instance``".
    """

    command_type: type[Command]
    instance: Command | None = None

    @classmethod
    def fresh(cls, command_type: type[Command]) -> CommandProvider:
        return cls(command_type=command_type)

    @classmethod
    def fixed(cls, instance: Command) -> CommandProvider:
        return cls(command_type=type(instance), instance=instance)

    @classmethod
    def coerce(cls, spec: ProviderSpec | CommandProvider) -> CommandProvider:
        """Turn a bare type or instance into a provider."""
        if isinstance(spec, CommandProvider):
            return spec
        if isinstance(spec, type) and issubclass(spec, Command):
            return cls.fresh(spec)
        if isinstance(spec, Command):
            return cls.fixed(spec)
        raise InvalidScenarioError(
            f"Scenario entries must be Command subclasses or instances, got {spec!r}"
        )

    @property
    def name(self) -> str:
        if self.instance is not None:
            return self.instance.label()
        return self.command_type.__name__

    def strategy(self, context: Any) -> SearchStrategy[CommandWrapper]:
        """Strategy yielding a new CommandWrapper on every draw."""
        if self.instance is not None:
            return st.just(self.instance).map(CommandWrapper)

        strategy = self.command_type.build(context)
        if not isinstance(strategy, SearchStrategy):
            raise InvalidScenarioError(
                f"{self.command_type.__name__}.build() must return a hypothesis "
                f"strategy, got {type(strategy).__name__}",
                context=ErrorContext(label=self.command_type.__name__),
            )
        return strategy.map(_wrap)


class SequenceComposer:
    """Builds the strategies a scenario is sampled from.

    Normal mode uses ``sequence()``: one independently shrinkable strategy
    per position, in declared order. Randomized mode uses ``strategies()``:
    the per-position strategies themselves, for the engine to draw from.
    """

    def __init__(
        self,
        providers: Sequence[ProviderSpec | CommandProvider],
        context: Any,
    ) -> None:
        self.providers = [CommandProvider.coerce(p) for p in providers]
        self.context = context
        self._strategies: list[SearchStrategy[CommandWrapper]] | None = None

    def __len__(self) -> int:
        return len(self.providers)

    def strategies(self) -> list[SearchStrategy[CommandWrapper]]:
        """Per-provider strategies, built once per composer."""
        if self._strategies is None:
            self._strategies = [p.strategy(self.context) for p in self.providers]
            logger.debug(
                "Composed %d command strategies: %s",
                len(self._strategies),
                ", ".join(p.name for p in self.providers),
            )
        return list(self._strategies)

    def sequence(self) -> SearchStrategy[list[CommandWrapper]]:
        """Strategy of ordered sequences, one wrapper per declared position."""
        return st.tuples(*self.strategies()).map(list)
