"""Scenario declaration: providers, composition and the Hypothesis runner."""

from madhouse.scenario.composer import CommandProvider, ProviderSpec, SequenceComposer
from madhouse.scenario.runner import Scenario, scenario

__all__ = [
    "CommandProvider",
    "ProviderSpec",
    "Scenario",
    "SequenceComposer",
    "scenario",
]
