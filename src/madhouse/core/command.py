"""Command, State and TestContext base classes."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from hypothesis.strategies import SearchStrategy


class State:
    """Marker base for the mutable subject under test.

    Subclassing is optional. The engine only needs a zero-argument factory
    that returns a fresh state; the state itself is opaque to it.
    """


class TestContext:
    """Marker base for data shared by every command of a scenario.

    Commands read from the context during build() and apply(); they must
    never mutate it.
    """

    # Keep pytest from collecting this class when imported into test modules
    __test__ = False


class Command(ABC):
    """One possible action against the state.

    Subclasses implement apply() and build(); check() and label() have
    defaults. Example::

        class Increment(Command):
            def __init__(self, amount: int) -> None:
                self.amount = amount

            def apply(self, state, context):
                state.value += self.amount
                assert state.value <= 100, f"counter overflow: {state.value}"

            def label(self) -> str:
                return f"INCREMENT({self.amount})"

            @classmethod
            def build(cls, context):
                return st.integers(1, 50).map(cls)

    ``apply`` may also be declared as ``apply(self, state)`` when the
    command never needs the context.
    """

    def check(self, state: Any) -> bool:
        """Return True when this command is legal against ``state``.

        Must be free of side effects; it can be called any number of times.
        """
        return True

    @abstractmethod
    def apply(self, state: Any, context: Any) -> None:
        """Mutate ``state`` in place and assert postconditions."""
        ...

    def label(self) -> str:
        """Human-readable label used for diagnostics only."""
        return type(self).__name__.upper()

    @classmethod
    @abstractmethod
    def build(cls, context: Any) -> SearchStrategy[Any]:
        """Return a strategy producing fully formed instances of this command."""
        ...

    def __repr__(self) -> str:
        return self.label()
