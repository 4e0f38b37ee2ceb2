"""madhouse Quick Start Example.

A counter that must never exceed 100, driven by two commands:
Increment (always legal) and Decrement (legal only when the counter is
large enough). madhouse samples command sequences, runs them, and shrinks
the first overflow it finds to a minimal counterexample.

Run with: python3 examples/quickstart/counter.py
Randomized mode: MADHOUSE=1 python3 examples/quickstart/counter.py
"""

from dataclasses import dataclass

from hypothesis import strategies as st

from madhouse import Command, State, TestContext, scenario


@dataclass
class Counter(State):
    value: int = 0


@dataclass(frozen=True)
class Ctx(TestContext):
    pass


class Increment(Command):
    def __init__(self, amount: int) -> None:
        self.amount = amount

    def apply(self, state: Counter, context: Ctx) -> None:
        state.value += self.amount
        assert state.value <= 100, f"Counter value exceeded maximum allowed: {state.value}"

    def label(self) -> str:
        return f"INCREMENT({self.amount})"

    @classmethod
    def build(cls, context: Ctx):
        return st.integers(min_value=1, max_value=50).map(cls)


class Decrement(Command):
    def __init__(self, amount: int) -> None:
        self.amount = amount

    def check(self, state: Counter) -> bool:
        return state.value >= self.amount

    def apply(self, state: Counter, context: Ctx) -> None:
        state.value -= self.amount

    def label(self) -> str:
        return f"DECREMENT({self.amount})"

    @classmethod
    def build(cls, context: Ctx):
        return st.integers(min_value=1, max_value=10).map(cls)


def test_counter():
    # Two sampled commands, a fixed Increment(42), then one more sampled Increment
    scenario(Ctx(), Increment, Decrement, Increment(amount=42), Increment, state=Counter)


if __name__ == "__main__":
    import logging

    logging.basicConfig(level=logging.INFO)
    try:
        test_counter()
    except AssertionError as e:
        print(f"\nMinimal counterexample found: {e}")
    else:
        print("\nNo invariant violation found")
