"""
Base agent abstraction for all agent types.

This module defines the interface that learning agents implement to be
driven by a training loop. The key method is `act`, which takes a state
and returns the index of the chosen discrete action.
"""
import sys
from abc import ABC, abstractmethod
from typing import Any, Dict

import numpy as np

from ..exceptions import NonFiniteValueError


def greedy_action(values: Any, tolerance: float = sys.float_info.epsilon) -> int:
    """
    Return the index of the largest value.

    Ties are broken in favour of the first index whose value is within
    `tolerance` of the maximum.

    Args:
        values: 1D sequence, numpy array or tensor of action values.
        tolerance: Absolute tolerance for treating values as equal.

    Returns:
        Index of the selected action.

    Raises:
        NonFiniteValueError: If values is empty or holds NaN/inf.
    """
    if hasattr(values, 'detach'):
        values = values.detach().cpu().numpy()
    values = np.asarray(values, dtype=np.float64).reshape(-1)

    if values.size == 0:
        raise NonFiniteValueError("Cannot pick an action from an empty value vector")

    if not np.all(np.isfinite(values)):
        raise NonFiniteValueError(f"Action values must be finite, got {values.tolist()}")

    best = values.max()
    return int(np.flatnonzero(best - values <= tolerance)[0])


class BaseAgent(ABC):
    """
    Abstract base class for all agent types.

    Agents map a state to a discrete action index. How the state is
    interpreted and how the agent improves is up to the subclass.

    Example:
        class ConstantAgent(BaseAgent):
            def act(self, state):
                return 0

            def get_agent_type(self):
                return 'constant'
    """

    @abstractmethod
    def act(self, state: Any) -> int:
        """
        Choose an action for the given state.

        Args:
            state: Environment state. Format depends on agent type.

        Returns:
            An action index.
        """
        pass

    @abstractmethod
    def get_agent_type(self) -> str:
        """
        Return the type identifier for this agent.

        Returns:
            A string identifying this agent type (e.g., 'q_learning').
        """
        pass

    def get_config(self) -> Dict[str, Any]:
        """
        Return agent configuration.

        Override to include additional configuration specific to
        your agent implementation.
        """
        return {
            'type': self.get_agent_type(),
        }

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.get_agent_type()})"
