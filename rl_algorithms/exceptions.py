"""
Error types raised by the learning algorithms.

RLAlgorithmError is the common base. The concrete errors also subclass
ValueError so callers that already guard against bad input keep
working, while still being able to tell the failure classes apart.
"""


class RLAlgorithmError(Exception):
    """Base class for errors raised by rl_algorithms."""


class ConfigurationError(RLAlgorithmError, ValueError):
    """Invalid construction or call arguments (sizes, rates, indices)."""


class NonFiniteValueError(RLAlgorithmError, ValueError):
    """A NaN/inf was met where a finite value is needed, or a maximum of nothing was requested."""


class SelectionError(RLAlgorithmError, ValueError):
    """Two distinct parents cannot be drawn from the population."""
