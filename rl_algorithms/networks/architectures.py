"""
Architecture specifications for layered feedforward networks.

Agents are described by a topology, the ordered list of layer sizes
from input to output. These helpers turn a topology into the JSON
architecture format understood by NetworkBuilder.
"""
from numbers import Integral
from typing import Any, Dict, List, Sequence

from ..exceptions import ConfigurationError


def validate_topology(topology: Sequence[int]) -> List[int]:
    """
    Check a topology and return it as a list of ints.

    Args:
        topology: Layer sizes, input first, output last.

    Returns:
        The topology as a new list.

    Raises:
        ConfigurationError: If there are fewer than two layers or
            any size is not a positive integer.
    """
    if topology is None:
        raise ConfigurationError("Topology must not be empty")

    sizes = list(topology)
    if len(sizes) < 2:
        raise ConfigurationError(
            f"Topology needs an input and an output size, got {sizes}"
        )

    for i, size in enumerate(sizes):
        if isinstance(size, bool) or not isinstance(size, Integral) or size < 1:
            raise ConfigurationError(
                f"Layer {i} size must be a positive integer, got {size!r}"
            )

    return [int(size) for size in sizes]


def create_mlp_architecture(
    topology: Sequence[int],
    activation: str = 'relu',
) -> Dict[str, Any]:
    """
    Create a fully connected architecture from a topology.

    Every consecutive pair of sizes becomes one linear layer. Hidden
    layers are followed by `activation`; the output layer is left
    linear so the raw outputs can be read as action values.

    Args:
        topology: Layer sizes, e.g. [300, 16, 2].
        activation: Activation function for hidden layers.

    Returns:
        JSON architecture specification.

    Example:
        arch = create_mlp_architecture([4, 8, 2])
        # linear_0 (4->8) -> act_0 -> output (8->2)
    """
    sizes = validate_topology(topology)

    layers = []
    last = len(sizes) - 2

    for i, (in_size, out_size) in enumerate(zip(sizes, sizes[1:])):
        if i == last:
            layers.append({
                'id': 'output',
                'type': 'linear',
                'in': in_size,
                'out': out_size,
            })
            break

        layers.append({
            'id': f'linear_{i}',
            'type': 'linear',
            'in': in_size,
            'out': out_size,
        })
        layers.append({
            'id': f'act_{i}',
            'type': 'activation',
            'fn': activation,
        })

    return {
        'name': f'MLP-{"-".join(map(str, sizes))}',
        'input_size': sizes[0],
        'output_size': sizes[-1],
        'topology': sizes,
        'layers': layers,
    }
