"""
Neural network agent for neuro-evolution.

An agent that owns one network and acts greedily on its outputs.
It does no learning of its own; its parameters are recombined and
perturbed by the population it belongs to.
"""
from typing import Any, Dict, List, Optional

from .base import BaseAgent, greedy_action
from ..networks import DynamicNetwork, NetworkBuilder


class EvolutionaryAgent(BaseAgent):
    """
    An agent that picks the action with the highest network output.

    Attributes:
        network: The PyTorch network. Owned by this agent only.
        id: Identifier, unique within a population.
        generation: Generation this agent was created in.
        parent_ids: Ids of the agents it was bred from.
        mutation_history: Descriptions of mutations applied to it.

    Example:
        builder = NetworkBuilder()
        agent = EvolutionaryAgent(builder.from_topology([4, 8, 2]))
        action = agent.act([0.0, 1.0, 0.5, 0.2])
    """

    def __init__(
        self,
        network: DynamicNetwork,
        id: str = '',
        generation: int = 0,
        parent_ids: Optional[List[str]] = None,
        mutation_history: Optional[List[str]] = None,
    ):
        """
        Initialize an evolutionary agent.

        Args:
            network: Network mapping a state vector to action values.
            id: Optional identifier.
            generation: Generation number.
            parent_ids: Lineage; empty for the initial population.
            mutation_history: Mutations applied when this agent was created.
        """
        self.network = network
        self.id = id
        self.generation = generation
        self.parent_ids = parent_ids or []
        self.mutation_history = mutation_history or []

        # Inference only
        self.network.eval()

    def act(self, state: Any) -> int:
        """
        Forward a state vector and return the index of the maximum output.

        Ties go to the first maximum.

        Raises:
            ConfigurationError: If the state has the wrong length.
            NonFiniteValueError: If the output is empty or not finite.
        """
        output = self.network.predict(state)
        return greedy_action(output, tolerance=0.0)

    @property
    def topology(self) -> List[int]:
        return self.network.topology

    def clone(self) -> 'EvolutionaryAgent':
        """Return a copy with its own, unaliased network."""
        return EvolutionaryAgent(
            network=NetworkBuilder().clone_network(self.network),
            id=self.id,
            generation=self.generation,
            parent_ids=list(self.parent_ids),
            mutation_history=list(self.mutation_history),
        )

    def get_agent_type(self) -> str:
        """Return 'evolutionary' as the agent type."""
        return 'evolutionary'

    def get_config(self) -> Dict[str, Any]:
        config = super().get_config()
        config.update({
            'id': self.id,
            'generation': self.generation,
            'topology': self.topology,
            'parent_ids': list(self.parent_ids),
        })
        return config

    def __repr__(self) -> str:
        return f"EvolutionaryAgent(id={self.id}, topology={self.topology})"
