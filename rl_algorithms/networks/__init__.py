"""
Neural network adapter for evolved agents.

This module provides:
- NetworkBuilder: Convert between JSON architecture and PyTorch models
- DynamicNetwork: Layered network with weight/bias access and inference
- Architecture helpers for building networks from layer-size topologies
"""
from .builder import NetworkBuilder, DynamicNetwork
from .architectures import create_mlp_architecture, validate_topology

__all__ = [
    # Builder
    'NetworkBuilder',
    'DynamicNetwork',

    # Architectures
    'create_mlp_architecture',
    'validate_topology',
]
