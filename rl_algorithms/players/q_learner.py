"""
Tabular Q-learning agent.

Keeps a sparse table from state to per-action value estimates and
updates it with the one-step temporal difference rule. States can be
any hashable value; the table only grows, rows are created lazily the
first time a state is touched by `learn`.

Exploration uses a hard cut-over rather than per-step epsilon-greedy
blending: while epsilon is above `epsilon_threshold` every action is
random, once it has decayed to the threshold every action is greedy.
"""
import logging
import math
import random
from numbers import Integral
from typing import Any, Dict, Hashable, Optional

import numpy as np

from ..exceptions import ConfigurationError, NonFiniteValueError
from .base import BaseAgent, greedy_action

logger = logging.getLogger(__name__)


class QLearner(BaseAgent):
    """
    Q-learning agent with a lazily grown table.

    Update rule for a transition (s, a, r, s'):

        target = lr * (r + gamma * max_a' Q(s', a'))
        Q(s, a) = (1 - lr) * prior + target

    where prior is Q(s, a), or r itself the first time s is seen.
    Epsilon is multiplied by `epsilon_decay` after every update.

    Attributes:
        actions: Number of discrete actions.
        lr: Learning rate (0-1).
        gamma: Discount factor (0-1).
        epsilon: Current exploration rate.
        epsilon_threshold: Exploration floor; at or below it the agent exploits.
        q_table: Dict mapping state -> numpy array of `actions` values.
        steps: Number of learn() calls so far.

    Example:
        learner = QLearner(actions=2, lr=0.1, gamma=0.9, seed=0)

        while not env.done:
            state = env.observe()
            action = learner.act(state)
            reward = env.step(action)
            learner.learn(state, env.observe(), action, reward)
    """

    def __init__(
        self,
        actions: int,
        lr: float,
        gamma: float,
        epsilon: float = 1.0,
        epsilon_decay: float = 0.9,
        epsilon_threshold: float = 0.1,
        seed: Optional[int] = None,
    ):
        """
        Initialize a Q-learning agent.

        Args:
            actions: Number of discrete actions (>= 1).
            lr: Learning rate in [0, 1].
            gamma: Discount factor in [0, 1].
            epsilon: Initial exploration rate.
            epsilon_decay: Multiplicative decay applied after each update.
            epsilon_threshold: Exploration floor.
            seed: Optional random seed for reproducibility in testing.

        Raises:
            ConfigurationError: If any argument is out of range.
        """
        if isinstance(actions, bool) or not isinstance(actions, Integral) or actions < 1:
            raise ConfigurationError(f"actions must be a positive integer, got {actions!r}")
        for name, value in (('lr', lr), ('gamma', gamma), ('epsilon_decay', epsilon_decay)):
            if not 0.0 <= value <= 1.0:
                raise ConfigurationError(f"{name} must be in [0, 1], got {value}")

        self.actions = actions
        self.lr = lr
        self.gamma = gamma
        self.epsilon = epsilon
        self.epsilon_decay = epsilon_decay
        self.epsilon_threshold = epsilon_threshold

        self.q_table: Dict[Hashable, np.ndarray] = {}
        self.steps = 0

        self.seed = seed
        self._rng = random.Random(seed)

    @property
    def exploring(self) -> bool:
        """True while actions are still chosen at random."""
        return self.epsilon > self.epsilon_threshold

    def act(self, state: Hashable) -> int:
        """
        Select an action for a state.

        Random while exploring. Once exploiting, the action with the
        highest stored value, or a random one if the state is unseen.

        Raises:
            NonFiniteValueError: If the stored values contain NaN/inf.
        """
        if self.exploring:
            return self._rng.randrange(self.actions)

        values = self.q_table.get(state)
        if values is None:
            return self._rng.randrange(self.actions)

        return greedy_action(values)

    def learn(
        self,
        state: Hashable,
        next_state: Hashable,
        action: int,
        reward: float,
    ) -> None:
        """
        Apply the temporal difference update for one transition.

        Looking up `next_state` inserts a zero row for it if absent,
        even though it is only read.

        Args:
            state: State the action was taken in.
            next_state: State reached after the action.
            action: Index of the action taken.
            reward: Reward received.

        Raises:
            ConfigurationError: If action is not an index in range.
            NonFiniteValueError: If reward, a stored value or the
                updated value is not finite. The table entry and
                epsilon are left unchanged.
        """
        if (isinstance(action, bool) or not isinstance(action, Integral)
                or not 0 <= action < self.actions):
            raise ConfigurationError(
                f"action must be in [0, {self.actions}), got {action!r}"
            )
        if not math.isfinite(reward):
            raise NonFiniteValueError(f"reward must be finite, got {reward}")

        next_values = self._row(next_state)
        if not np.all(np.isfinite(next_values)):
            raise NonFiniteValueError(
                f"Stored values for next state are not finite: {next_values.tolist()}"
            )
        target = self.lr * (reward + self.gamma * float(next_values.max()))

        if state in self.q_table:
            prior = float(self.q_table[state][action])
        else:
            prior = reward

        new_value = (1.0 - self.lr) * prior + target
        if not math.isfinite(new_value):
            raise NonFiniteValueError(
                f"Update for action {action} overflowed: prior={prior}, target={target}"
            )

        values = self._row(state)
        old = float(values[action])
        values[action] = new_value

        was_exploring = self.exploring
        self.epsilon *= self.epsilon_decay
        self.steps += 1

        logger.debug(
            f"Q-update #{self.steps}: action={action} {old:.4f} -> {values[action]:.4f} "
            f"(reward={reward:.2f}, epsilon={self.epsilon:.4f})"
        )
        if was_exploring and not self.exploring:
            logger.info(
                f"Exploration finished after {self.steps} updates "
                f"(epsilon={self.epsilon:.4f}, states={len(self.q_table)})"
            )

    def q_values(self, state: Hashable) -> np.ndarray:
        """
        Return a copy of the action values for a state.

        Unseen states give zeros and are not inserted.
        """
        values = self.q_table.get(state)
        if values is None:
            return np.zeros(self.actions)
        return values.copy()

    def _row(self, state: Hashable) -> np.ndarray:
        """Get the row for a state, inserting zeros if it is absent."""
        values = self.q_table.get(state)
        if values is None:
            values = np.zeros(self.actions)
            self.q_table[state] = values
        return values

    def get_agent_type(self) -> str:
        """Return 'q_learning' as the agent type."""
        return 'q_learning'

    def get_config(self) -> Dict[str, Any]:
        """Return configuration including hyperparameters."""
        config = super().get_config()
        config.update({
            'actions': self.actions,
            'lr': self.lr,
            'gamma': self.gamma,
            'epsilon': self.epsilon,
            'epsilon_decay': self.epsilon_decay,
            'epsilon_threshold': self.epsilon_threshold,
            'seed': self.seed,
        })
        return config

    def reset_seed(self, seed: Optional[int] = None) -> None:
        """
        Reset the random number generator with a new seed.

        Args:
            seed: New random seed. If None, uses system entropy.
        """
        self.seed = seed
        self._rng = random.Random(seed)

    def __len__(self) -> int:
        return len(self.q_table)
