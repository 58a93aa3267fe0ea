"""
Pytest fixtures for rl_algorithms tests.

Provides fixtures for:
- Network topologies and architectures
- Seeded learners and populations
- A small corridor environment
"""
import pytest
from typing import Any, Dict, List

from rl_algorithms.environments import BaseEnvironment
from rl_algorithms.evolution import Population
from rl_algorithms.networks import create_mlp_architecture
from rl_algorithms.players import QLearner


class CorridorEnvironment(BaseEnvironment):
    """
    One-dimensional corridor: start on the left, goal on the right.

    Action 0 moves left, action 1 moves right. Reaching the goal pays
    1.0 and ends the episode; every other step pays 0.0. The episode
    also ends after `max_steps`.
    """

    actions = 2

    def __init__(self, length: int = 5, max_steps: int = 50):
        super().__init__()
        self.length = length
        self.max_steps = max_steps
        self.position = 0
        self.steps = 0

    def observe(self) -> int:
        return self.position

    def observe_vector(self) -> List[float]:
        """One-hot encoding of the position."""
        vector = [0.0] * self.length
        vector[self.position] = 1.0
        return vector

    def step(self, action: int) -> float:
        if action == 1:
            self.position = min(self.position + 1, self.length - 1)
        else:
            self.position = max(self.position - 1, 0)

        self.steps += 1
        if self.position == self.length - 1:
            self.done = True
            return 1.0
        if self.steps >= self.max_steps:
            self.done = True
        return 0.0

    def reset(self) -> None:
        super().reset()
        self.position = 0
        self.steps = 0


@pytest.fixture
def corridor() -> CorridorEnvironment:
    """Return a fresh corridor of length 5."""
    return CorridorEnvironment(length=5)


@pytest.fixture
def small_topology() -> List[int]:
    """Return a small topology with one hidden layer."""
    return [4, 8, 2]


@pytest.fixture
def small_architecture(small_topology) -> Dict[str, Any]:
    """Return the architecture for the small topology."""
    return create_mlp_architecture(small_topology)


@pytest.fixture
def learner() -> QLearner:
    """Return a seeded two-action Q-learner."""
    return QLearner(actions=2, lr=0.1, gamma=0.1, seed=7)


@pytest.fixture
def population(small_topology) -> Population:
    """Return a seeded population of 5 agents."""
    return Population(agent_count=5, topology=small_topology, mutation_rate=0.5, seed=42)
