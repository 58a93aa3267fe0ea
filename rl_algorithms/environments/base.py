"""
Base environment abstraction.

Environments are driven by an external training loop: the loop
observes a state, asks an agent for an action, steps the environment
and feeds the reward back. The learning algorithms never call an
environment themselves, but their act/learn signatures are shaped
around this contract.
"""
from abc import ABC, abstractmethod
from typing import Any


class BaseEnvironment(ABC):
    """
    Abstract base class for discrete-action environments.

    Attributes:
        done: True once the episode has ended.
        actions: Number of discrete actions accepted by step().

    The state returned by observe() must be hashable and comparable by
    equality when used with QLearner, or convertible to a fixed-length
    numeric vector when used with evolved agents.

    Example:
        env = MyEnvironment()
        while not env.done:
            state = env.observe()
            action = learner.act(state)
            reward = env.step(action)
            learner.learn(state, env.observe(), action, reward)
    """

    actions: int = 0

    def __init__(self):
        self.done = False

    @abstractmethod
    def observe(self) -> Any:
        """
        Return the current state.

        Returns:
            The environment-defined state value.
        """
        pass

    @abstractmethod
    def step(self, action: int) -> float:
        """
        Apply an action and advance the environment by one step.

        Implementations set `done` when the episode ends.

        Args:
            action: Index in [0, actions).

        Returns:
            The reward for this step.
        """
        pass

    def reset(self) -> None:
        """Start a new episode. Override to restore the initial state."""
        self.done = False

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(actions={self.actions}, done={self.done})"
