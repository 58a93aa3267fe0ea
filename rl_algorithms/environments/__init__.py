"""
Environment contract consumed by training drivers.
"""
from .base import BaseEnvironment

__all__ = [
    'BaseEnvironment',
]
