"""
Neuroevolution module for evolving neural network agents.

Evolves the weights of fixed-topology networks with:
1. Fitness-proportionate selection of two distinct parents
2. Uniform crossover at the scalar level
3. Single-point mutation

Example usage:
    from rl_algorithms.evolution import Population

    pop = Population(agent_count=50, topology=[300, 2], mutation_rate=0.05, seed=0)

    for epoch in range(1000):
        scores = [run_episode(pop, i) for i in range(len(pop))]
        stats = pop.new_generation(scores)
        print(f"Gen {stats.generation}: best={stats.best_fitness:.3f}")
"""
from .selection import FitnessProportionateSelection
from .crossover import UniformCrossover
from .mutations import PointMutator
from .population import (
    Population,
    EvolutionConfig,
    GenerationStats,
)

__all__ = [
    # Selection
    'FitnessProportionateSelection',

    # Crossover
    'UniformCrossover',

    # Mutations
    'PointMutator',

    # Population
    'Population',
    'EvolutionConfig',
    'GenerationStats',
]
