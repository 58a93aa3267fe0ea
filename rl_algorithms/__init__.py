"""
Reinforcement learning algorithms for discrete-action environments.

Two policy-improvement methods:
- QLearner: tabular Q-learning with a hard explore/exploit cut-over
- Population: neuro-evolution of network agents via fitness-proportionate
  selection, uniform crossover and point mutation

Example usage:
    from rl_algorithms import QLearner, Population

    learner = QLearner(actions=2, lr=1.0, gamma=0.1)
    pop = Population(agent_count=50, topology=[300, 2], mutation_rate=0.05)
"""
from .exceptions import (
    RLAlgorithmError,
    ConfigurationError,
    NonFiniteValueError,
    SelectionError,
)
from .environments import BaseEnvironment
from .players import BaseAgent, QLearner, EvolutionaryAgent
from .evolution import Population, EvolutionConfig, GenerationStats

__all__ = [
    # Errors
    'RLAlgorithmError',
    'ConfigurationError',
    'NonFiniteValueError',
    'SelectionError',

    # Environments
    'BaseEnvironment',

    # Agents
    'BaseAgent',
    'QLearner',
    'EvolutionaryAgent',

    # Evolution
    'Population',
    'EvolutionConfig',
    'GenerationStats',
]

__version__ = '0.1.0'
