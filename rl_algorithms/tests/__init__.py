"""
Tests for rl_algorithms.

This package contains tests for:
- Network adapter construction, inference and cloning
- Q-learning updates and exploration schedule
- Evolutionary agents
- Selection, crossover and mutation operators
- Population generation replacement
"""
