"""
Network builder for converting between JSON architectures and PyTorch models.

This module provides the network adapter used by evolved agents:
- Building PyTorch networks from JSON architecture specs or topologies
- Randomizing parameters from an explicit generator
- Read and write access to per-layer weights and biases
- Independent cloning (no shared parameter storage)
"""
import copy
from collections import OrderedDict
from typing import Any, Dict, List, Optional, Sequence

import torch
import torch.nn as nn

from ..exceptions import ConfigurationError
from .architectures import create_mlp_architecture


class DynamicNetwork(nn.Module):
    """
    A PyTorch network built from a JSON architecture specification.

    Only linear and activation layers are supported, which keeps the
    parameters of every layer to one weight matrix (rows = output
    units, columns = input units) and one bias vector.

    Attributes:
        architecture: The JSON architecture this network was built from.
        layers: OrderedDict of layer_id -> nn.Module.
    """

    def __init__(self, layers: 'OrderedDict[str, nn.Module]', architecture: Dict[str, Any]):
        super().__init__()
        self.architecture = architecture
        self._layers = nn.ModuleDict(layers)
        self._layer_order = list(layers.keys())

    def forward(self, x: torch.Tensor) -> torch.Tensor:
        """Forward pass through all layers in order."""
        for layer_id in self._layer_order:
            x = self._layers[layer_id](x)
        return x

    def predict(self, input_vector: Any) -> torch.Tensor:
        """
        Run inference on a single input vector.

        Args:
            input_vector: List, numpy array or tensor with `input_size`
                         values. Multi-dimensional inputs are flattened.

        Returns:
            A 1D tensor with `output_size` action values.

        Raises:
            ConfigurationError: If the input has the wrong number of values.
        """
        x = torch.as_tensor(input_vector, dtype=torch.float32).reshape(-1)
        if x.numel() != self.input_size:
            raise ConfigurationError(
                f"Expected {self.input_size} input values, got {x.numel()}"
            )

        with torch.no_grad():
            return self.forward(x.unsqueeze(0)).squeeze(0)

    def linear_layers(self) -> List[nn.Linear]:
        """Return the linear layers in forward order."""
        return [
            self._layers[layer_id]
            for layer_id in self._layer_order
            if isinstance(self._layers[layer_id], nn.Linear)
        ]

    def weights(self) -> List[torch.Tensor]:
        """Weight matrices per layer. These are the live parameters."""
        return [layer.weight for layer in self.linear_layers()]

    def biases(self) -> List[torch.Tensor]:
        """Bias vectors per layer. These are the live parameters."""
        return [layer.bias for layer in self.linear_layers()]

    @property
    def topology(self) -> List[int]:
        linears = self.linear_layers()
        if not linears:
            return []
        return [linears[0].in_features] + [layer.out_features for layer in linears]

    @property
    def input_size(self) -> int:
        return self.linear_layers()[0].in_features

    @property
    def output_size(self) -> int:
        return self.linear_layers()[-1].out_features


class NetworkBuilder:
    """
    Build PyTorch networks from JSON architecture specifications.

    Architecture Format:
        {
            "input_size": 4,
            "output_size": 2,
            "layers": [
                {"id": "linear_0", "type": "linear", "in": 4, "out": 8},
                {"id": "act_0", "type": "activation", "fn": "relu"},
                {"id": "output", "type": "linear", "in": 8, "out": 2}
            ]
        }

    Example:
        builder = NetworkBuilder()
        network = builder.from_topology([4, 8, 2])
        builder.randomize(network, generator=torch.Generator().manual_seed(0))
        twin = builder.clone_network(network)
    """

    # Supported activation functions
    ACTIVATIONS = {
        'sigmoid': nn.Sigmoid,
        'tanh': nn.Tanh,
        'relu': nn.ReLU,
        'leaky_relu': nn.LeakyReLU,
        'elu': nn.ELU,
        'softplus': nn.Softplus,
        'identity': nn.Identity,
    }

    def from_json(self, architecture: Dict[str, Any]) -> DynamicNetwork:
        """
        Build a PyTorch network from a JSON architecture specification.

        Args:
            architecture: Dictionary with 'input_size', 'output_size', and 'layers'.

        Returns:
            A DynamicNetwork instance.

        Raises:
            ConfigurationError: If architecture is invalid.
        """
        self._validate_architecture(architecture)

        layers = OrderedDict()

        for layer_spec in architecture['layers']:
            layer_id = layer_spec.get('id', f"layer_{len(layers)}")
            layers[layer_id] = self._build_layer(layer_spec)

        return DynamicNetwork(layers, architecture)

    def from_topology(self, topology: Sequence[int], activation: str = 'relu') -> DynamicNetwork:
        """Build a fully connected network from a list of layer sizes."""
        return self.from_json(create_mlp_architecture(topology, activation))

    def _build_layer(self, layer_spec: Dict[str, Any]) -> nn.Module:
        layer_type = layer_spec.get('type', '')

        if layer_type == 'linear':
            return nn.Linear(layer_spec['in'], layer_spec['out'])

        elif layer_type == 'activation':
            fn_name = layer_spec.get('fn', 'relu')
            if fn_name not in self.ACTIVATIONS:
                raise ConfigurationError(f"Unknown activation function: {fn_name}")
            return self.ACTIVATIONS[fn_name]()

        else:
            raise ConfigurationError(f"Unknown layer type: {layer_type}")

    def _validate_architecture(self, architecture: Dict[str, Any]) -> None:
        """Validate that an architecture specification is well-formed."""
        if not isinstance(architecture, dict):
            raise ConfigurationError("Architecture must be a dictionary")

        if 'layers' not in architecture:
            raise ConfigurationError("Architecture must have 'layers' key")

        if not isinstance(architecture['layers'], list):
            raise ConfigurationError("'layers' must be a list")

        expected_input = None
        has_linear = False
        for i, layer in enumerate(architecture['layers']):
            if not isinstance(layer, dict):
                raise ConfigurationError(f"Layer {i} must be a dictionary")
            if 'type' not in layer:
                raise ConfigurationError(f"Layer {i} must have 'type' key")
            if layer['type'] == 'linear':
                if expected_input is not None and layer['in'] != expected_input:
                    raise ConfigurationError(
                        f"Layer {i} expects {layer['in']} inputs but the "
                        f"previous layer produces {expected_input}"
                    )
                expected_input = layer['out']
                has_linear = True

        if not has_linear:
            raise ConfigurationError("Architecture must have at least one linear layer")

    def randomize(
        self,
        network: DynamicNetwork,
        generator: Optional[torch.Generator] = None,
    ) -> DynamicNetwork:
        """
        Draw fresh parameters for every linear layer.

        Values are uniform in [-1/sqrt(fan_in), 1/sqrt(fan_in)], the
        same range nn.Linear uses, but drawn from `generator` so runs
        can be reproduced.

        Returns:
            The same network, modified in place.
        """
        with torch.no_grad():
            for layer in network.linear_layers():
                bound = 1.0 / layer.in_features ** 0.5
                layer.weight.uniform_(-bound, bound, generator=generator)
                layer.bias.uniform_(-bound, bound, generator=generator)
        return network

    def clone_network(self, network: DynamicNetwork) -> DynamicNetwork:
        """
        Create a deep copy of a network with the same weights.

        The clone owns its own parameter storage; changing one network
        never affects the other.
        """
        new_network = self.from_json(copy.deepcopy(network.architecture))
        new_network.load_state_dict(
            {name: tensor.clone() for name, tensor in network.state_dict().items()}
        )
        return new_network

    def get_parameter_count(self, network: nn.Module) -> int:
        """Count the total number of trainable parameters."""
        return sum(p.numel() for p in network.parameters() if p.requires_grad)
