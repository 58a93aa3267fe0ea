"""
Mutation operator for neuroevolution.

Point mutation keeps topology fixed and overwrites exactly one
parameter scalar per call: first weight-or-bias is chosen, then a
layer, then a position inside that layer's weight matrix or bias
vector. The new value is drawn uniformly from
[-mutation_range, mutation_range].
"""
import random
from typing import Any, Dict, Optional, Tuple

import torch

from ..networks import DynamicNetwork, NetworkBuilder


class PointMutator:
    """
    Single-point mutation operator.

    Attributes:
        mutation_range: Half-width of the interval new values are drawn from.
        rng: Random source for all choices.

    Example:
        mutator = PointMutator(mutation_range=0.01, rng=random.Random(0))
        child, info = mutator.mutate(parent_network)
        # info == {'kind': 'bias', 'layer': 0, 'index': (3,), ...}
    """

    KINDS = ('weight', 'bias')

    def __init__(
        self,
        mutation_range: float = 0.01,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize the point mutator.

        Args:
            mutation_range: New values are uniform in [-range, range].
            rng: Random source. A fresh unseeded one if None.
        """
        self.mutation_range = mutation_range
        self.rng = rng or random.Random()
        self._builder = NetworkBuilder()

    def mutate(
        self,
        network: DynamicNetwork,
        in_place: bool = False,
    ) -> Tuple[DynamicNetwork, Dict[str, Any]]:
        """
        Overwrite one randomly chosen weight or bias.

        Args:
            network: The network to mutate.
            in_place: If True, modify network in place.
                     If False, return a new mutated copy.

        Returns:
            Tuple of (mutated network, mutation info). The info dict has
            'kind', 'layer', 'index', 'old' and 'new'.
        """
        if not in_place:
            network = self._builder.clone_network(network)

        kind = self.rng.choice(self.KINDS)
        params = network.weights() if kind == 'weight' else network.biases()

        layer = self.rng.randrange(len(params))
        param = params[layer]

        flat_index = self.rng.randrange(param.numel())
        if param.dim() == 2:
            index = divmod(flat_index, param.shape[1])
        else:
            index = (flat_index,)
        value = self.rng.uniform(-self.mutation_range, self.mutation_range)

        with torch.no_grad():
            old = param[index].item()
            param[index] = value

        info = {
            'kind': kind,
            'layer': layer,
            'index': index,
            'old': old,
            'new': param[index].item(),
        }
        return network, info
