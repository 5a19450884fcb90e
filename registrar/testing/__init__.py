from .scenario import SCENARIO_START, Expectation, ReadModelScenario, StateMatches

__all__ = [
    "Expectation",
    "ReadModelScenario",
    "SCENARIO_START",
    "StateMatches",
]
