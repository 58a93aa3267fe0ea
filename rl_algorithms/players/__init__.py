"""
Agent implementations.

All agents inherit from BaseAgent and implement `act`, which maps a
state to a discrete action index.
"""
from .base import BaseAgent, greedy_action
from .q_learner import QLearner
from .evolutionary import EvolutionaryAgent

__all__ = [
    'BaseAgent',
    'greedy_action',
    'QLearner',
    'EvolutionaryAgent',
]
