"""
Population management for neuro-evolution.

Handles the lifecycle of a population of evolved agents:
- Initialization (random networks of one fixed topology)
- Acting (per-agent inference for an external driver)
- Evolution (selection, crossover, mutation)
- Generation replacement

Scoring is left to the driver: it runs each agent's episode, collects
one score per agent and hands the scores to `new_generation`.
"""
import logging
import math
import random
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

import torch

from ..exceptions import ConfigurationError, NonFiniteValueError
from ..networks import NetworkBuilder, validate_topology
from ..players.evolutionary import EvolutionaryAgent
from .crossover import UniformCrossover
from .mutations import PointMutator
from .selection import FitnessProportionateSelection

logger = logging.getLogger(__name__)


@dataclass
class EvolutionConfig:
    """Configuration for an evolution run."""

    # Population
    population_size: int = 50
    topology: List[int] = field(default_factory=lambda: [4, 8, 2])
    activation: str = 'relu'

    # Mutation
    mutation_rate: float = 0.05
    mutation_range: float = 0.01

    # Crossover
    crossover_rate: float = 0.5

    # Reproducibility
    seed: Optional[int] = None

    def validate(self) -> None:
        """
        Check the configuration.

        Raises:
            ConfigurationError: If any value is out of range.
        """
        if self.population_size < 2:
            raise ConfigurationError(
                f"Population needs at least 2 agents, got {self.population_size}"
            )
        validate_topology(self.topology)
        for name in ('mutation_rate', 'crossover_rate'):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ConfigurationError(f"{name} must be in [0, 1], got {value}")
        if self.mutation_range < 0:
            raise ConfigurationError(
                f"mutation_range must be non-negative, got {self.mutation_range}"
            )


@dataclass
class GenerationStats:
    """Statistics for a generation."""
    generation: int = 0
    best_fitness: float = 0.0
    avg_fitness: float = 0.0
    min_fitness: float = 0.0
    fitness_std: float = 0.0
    num_mutations: int = 0
    num_crossovers: int = 0


class Population:
    """
    Manages a population of evolving neural network agents.

    Handles the evolutionary cycle:
    1. Initialize N agents with random parameters
    2. Driver scores every agent
    3. Select two distinct parents per child (fitness-proportionate)
    4. Create offspring (uniform crossover + point mutation)
    5. Replace old generation
    6. Repeat

    Example:
        pop = Population(agent_count=50, topology=[300, 2], mutation_rate=0.05)

        for epoch in range(1000):
            scores = [run_episode(lambda s: pop.act(i, s)) for i in range(len(pop))]
            stats = pop.new_generation(scores)
            print(f"Gen {stats.generation}: best={stats.best_fitness:.3f}")
    """

    def __init__(
        self,
        agent_count: int,
        topology: Sequence[int],
        mutation_rate: float = 0.05,
        seed: Optional[int] = None,
        activation: str = 'relu',
        mutation_range: float = 0.01,
        crossover_rate: float = 0.5,
    ):
        """
        Initialize the population.

        Args:
            agent_count: Number of agents N (at least 2).
            topology: Layer sizes shared by every agent.
            mutation_rate: Probability that a child gets one point mutation.
            seed: Optional seed for every random draw of this population.
            activation: Activation for hidden layers.
            mutation_range: Mutated values are uniform in [-range, range].
            crossover_rate: Probability a child scalar comes from parent A.

        Raises:
            ConfigurationError: If the configuration is invalid.
        """
        self.config = EvolutionConfig(
            population_size=agent_count,
            topology=list(topology) if topology is not None else [],
            activation=activation,
            mutation_rate=mutation_rate,
            mutation_range=mutation_range,
            crossover_rate=crossover_rate,
            seed=seed,
        )
        self.config.validate()
        self.topology = validate_topology(self.config.topology)

        # Random sources
        self.rng = random.Random(seed)
        self.generator = torch.Generator()
        if seed is None:
            self.generator.seed()
        else:
            self.generator.manual_seed(seed)

        # Evolution operators
        self.selection = FitnessProportionateSelection(rng=self.rng)
        self.crossover = UniformCrossover(
            swap_probability=crossover_rate,
            generator=self.generator,
        )
        self.mutator = PointMutator(mutation_range=mutation_range, rng=self.rng)

        self._builder = NetworkBuilder()
        self.generation = 0
        self.stats_history: List[GenerationStats] = []
        self._agents: List[EvolutionaryAgent] = self._initialize_random()

        logger.info(
            f"Initialized {len(self._agents)} agents with topology {self.topology} "
            f"({self._builder.get_parameter_count(self._agents[0].network)} parameters each)"
        )

    @classmethod
    def from_config(cls, config: EvolutionConfig) -> 'Population':
        """Create a population from an EvolutionConfig."""
        return cls(
            agent_count=config.population_size,
            topology=config.topology,
            mutation_rate=config.mutation_rate,
            seed=config.seed,
            activation=config.activation,
            mutation_range=config.mutation_range,
            crossover_rate=config.crossover_rate,
        )

    def _initialize_random(self) -> List[EvolutionaryAgent]:
        """Create N agents with independently drawn parameters."""
        agents = []
        for i in range(self.config.population_size):
            network = self._builder.from_topology(self.topology, self.config.activation)
            self._builder.randomize(network, generator=self.generator)
            agents.append(EvolutionaryAgent(network=network, id=f"ind_{i:04d}"))
        return agents

    @property
    def agents(self) -> Tuple[EvolutionaryAgent, ...]:
        """The current generation, aligned with the score array."""
        return tuple(self._agents)

    def __len__(self) -> int:
        return len(self._agents)

    def __getitem__(self, index: int) -> EvolutionaryAgent:
        return self._agents[index]

    def act(self, agent_index: int, state) -> int:
        """
        Get an action from one agent of the current generation.

        Args:
            agent_index: Position of the agent, aligned with the score array.
            state: Numeric state vector.

        Returns:
            Action index in [0, output_size).

        Raises:
            IndexError: If agent_index is out of range.
        """
        if not 0 <= agent_index < len(self._agents):
            raise IndexError(
                f"Agent index {agent_index} out of range for population of {len(self._agents)}"
            )
        return self._agents[agent_index].act(state)

    def new_generation(self, scores: Sequence[float]) -> GenerationStats:
        """
        Replace the population with children bred from the current one.

        For every child two distinct parents are drawn by
        fitness-proportionate selection, recombined scalar by scalar,
        and the child gets one point mutation with probability
        `mutation_rate`. The population is only replaced once every
        child has been built, so a failure leaves it untouched.

        Args:
            scores: One score per agent, aligned with the population.
                   Higher is better; negative values are allowed.

        Returns:
            Statistics for the generation that was scored.

        Raises:
            ConfigurationError: If len(scores) != population size.
            NonFiniteValueError: If a score is NaN/inf.
            SelectionError: If two distinct parents cannot be drawn.
        """
        scores = self._validate_scores(scores)

        next_generation = self.generation + 1
        stats = GenerationStats(
            generation=self.generation,
            best_fitness=max(scores),
            avg_fitness=sum(scores) / len(scores),
            min_fitness=min(scores),
            fitness_std=self._std(scores),
        )

        children = []
        while len(children) < len(self._agents):
            index_a, index_b = self.selection.select_pair(scores)
            parent_a = self._agents[index_a]
            parent_b = self._agents[index_b]

            child_network = self.crossover.crossover(parent_a.network, parent_b.network)
            stats.num_crossovers += 1
            mutation_history = ['crossover']

            if self.rng.random() < self.config.mutation_rate:
                child_network, info = self.mutator.mutate(child_network, in_place=True)
                mutation_history.append(
                    f"point_{info['kind']}_L{info['layer']}_{info['index']}"
                )
                stats.num_mutations += 1

            child = EvolutionaryAgent(
                network=child_network,
                id=f"gen{next_generation}_ind_{len(children):04d}",
                generation=next_generation,
                parent_ids=[parent_a.id, parent_b.id],
                mutation_history=mutation_history,
            )
            logger.debug(
                f"{child.id}: parents={index_a},{index_b} history={mutation_history}"
            )
            children.append(child)

        # Replace population
        self._agents = children
        self.generation = next_generation
        self.stats_history.append(stats)

        logger.info(
            f"Generation {stats.generation}: best={stats.best_fitness:.3f} "
            f"avg={stats.avg_fitness:.3f} min={stats.min_fitness:.3f} "
            f"mutations={stats.num_mutations}"
        )
        return stats

    def best_agent(self, scores: Sequence[float]) -> EvolutionaryAgent:
        """Get the highest-scoring agent of the current generation."""
        scores = self._validate_scores(scores)
        best_index = max(range(len(scores)), key=lambda i: scores[i])
        return self._agents[best_index]

    def _validate_scores(self, scores: Sequence[float]) -> List[float]:
        """Convert scores to floats and check them against the population."""
        values = [float(s) for s in scores]

        if len(values) != len(self._agents):
            logger.warning(
                f"Rejected {len(values)} scores for population of {len(self._agents)}"
            )
            raise ConfigurationError(
                f"Expected {len(self._agents)} scores, got {len(values)}"
            )

        if not all(math.isfinite(v) for v in values):
            logger.warning(f"Rejected non-finite scores: {values}")
            raise NonFiniteValueError(f"Scores must be finite, got {values}")

        return values

    def _std(self, values: List[float]) -> float:
        """Calculate standard deviation."""
        if len(values) < 2:
            return 0.0
        mean = sum(values) / len(values)
        variance = sum((x - mean) * (x - mean) for x in values) / len(values)
        return variance ** 0.5
