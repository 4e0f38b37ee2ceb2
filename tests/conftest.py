"""Pytest fixtures and a counter model for madhouse tests."""

from __future__ import annotations

from dataclasses import dataclass

import pytest
from hypothesis import strategies as st

from madhouse import Command, MadhouseConfig, Mode, State, TestContext, get_config


@dataclass
class Counter(State):
    """Counter state: starts at 0, must never exceed 100."""

    value: int = 0


@dataclass(frozen=True)
class Ctx(TestContext):
    """Read-only context shared by every command."""

    limit: int = 100


class Increment(Command):
    def __init__(self, amount: int) -> None:
        self.amount = amount

    def apply(self, state: Counter, context: Ctx) -> None:
        state.value += self.amount
        assert state.value <= context.limit, (
            f"Counter value exceeded maximum allowed: {state.value}"
        )

    def label(self) -> str:
        return f"INCREMENT({self.amount})"

    @classmethod
    def build(cls, context: Ctx):
        return st.integers(min_value=1, max_value=context.limit // 2).map(cls)


class Decrement(Command):
    def __init__(self, amount: int) -> None:
        self.amount = amount

    def check(self, state: Counter) -> bool:
        return state.value >= self.amount

    def apply(self, state: Counter) -> None:
        state.value -= self.amount

    def label(self) -> str:
        return f"DECREMENT({self.amount})"

    @classmethod
    def build(cls, context: Ctx):
        return st.integers(min_value=1, max_value=10).map(cls)


class Reset(Command):
    """Always legal; uses the default label."""

    def apply(self, state: Counter, context: Ctx) -> None:
        state.value = 0

    @classmethod
    def build(cls, context: Ctx):
        return st.just(cls())


class Blocked(Command):
    """Never legal. Applying it is a bug in the engine."""

    applied = 0

    def check(self, state: Counter) -> bool:
        return False

    def apply(self, state: Counter, context: Ctx) -> None:
        Blocked.applied += 1
        raise RuntimeError("Blocked.apply must never run")

    @classmethod
    def build(cls, context: Ctx):
        return st.just(cls())


class Crash(Command):
    """Raises a non-assertion error from apply()."""

    def apply(self, state: Counter, context: Ctx) -> None:
        raise ZeroDivisionError("boom")

    @classmethod
    def build(cls, context: Ctx):
        return st.just(cls())


@pytest.fixture(autouse=True)
def _reset_global_config(monkeypatch):
    """Keep the cached process config and MADHOUSE_* env vars out of tests."""
    for key in (
        "MADHOUSE",
        "MADHOUSE_MODE",
        "MADHOUSE_MAX_EXAMPLES",
        "MADHOUSE_MAX_SHRINK_ITERS",
        "MADHOUSE_RETRY_LIMIT",
        "MADHOUSE_SEED",
        "MADHOUSE_VERBOSE",
        "MADHOUSE_CONFIG",
    ):
        monkeypatch.delenv(key, raising=False)
    get_config.cache_clear()
    Blocked.applied = 0
    yield
    get_config.cache_clear()


@pytest.fixture
def ctx() -> Ctx:
    return Ctx()


@pytest.fixture
def normal_config() -> MadhouseConfig:
    return MadhouseConfig(mode=Mode.NORMAL, max_examples=50, seed=0)


@pytest.fixture
def randomized_config() -> MadhouseConfig:
    return MadhouseConfig(mode=Mode.RANDOMIZED, max_examples=50, seed=0)
