"""
Crossover operator for network evolution.

Combines two parent networks of identical topology into a child by
picking every weight and bias scalar independently from one parent or
the other. Recombination happens at scalar granularity, not per layer
or per row.
"""
from typing import Optional

import torch

from ..networks import DynamicNetwork, NetworkBuilder


class UniformCrossover:
    """
    Uniform scalar crossover for networks with identical topology.

    Each scalar of the child comes from parent A with probability
    `swap_probability`, otherwise from parent B. The child is built
    from fresh storage and never aliases either parent.

    Example:
        crossover = UniformCrossover(generator=torch.Generator().manual_seed(0))
        child = crossover.crossover(parent_a, parent_b)
    """

    def __init__(
        self,
        swap_probability: float = 0.5,
        generator: Optional[torch.Generator] = None,
    ):
        """
        Initialize the crossover operator.

        Args:
            swap_probability: Probability of taking a scalar from parent A.
            generator: Random source for the selection masks.
        """
        self.swap_probability = swap_probability
        self.generator = generator
        self._builder = NetworkBuilder()

    def crossover(
        self,
        parent_a: DynamicNetwork,
        parent_b: DynamicNetwork,
    ) -> DynamicNetwork:
        """
        Create offspring from two parent networks.

        Args:
            parent_a: First parent network.
            parent_b: Second parent network.

        Returns:
            Child network combining scalars from both parents.

        Raises:
            ValueError: If parents have different architectures.
        """
        if not self._check_compatible(parent_a, parent_b):
            raise ValueError("Parents must have identical architectures")

        # Clone parent A as base
        child = self._builder.clone_network(parent_a)

        with torch.no_grad():
            for child_param, param_a, param_b in zip(
                child.parameters(), parent_a.parameters(), parent_b.parameters()
            ):
                mask = torch.rand(
                    param_a.shape, generator=self.generator
                ) < self.swap_probability
                child_param.copy_(torch.where(mask, param_a, param_b))

        return child

    def _check_compatible(
        self,
        net_a: DynamicNetwork,
        net_b: DynamicNetwork,
    ) -> bool:
        """Check if two networks have compatible architectures."""
        state_a = net_a.state_dict()
        state_b = net_b.state_dict()

        if state_a.keys() != state_b.keys():
            return False

        for name in state_a:
            if state_a[name].shape != state_b[name].shape:
                return False

        return True
