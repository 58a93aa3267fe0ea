"""
Parent selection for the evolutionary trainer.

Selection works on a plain list of scores aligned with the population
and returns indices, so it does not care what an individual is.

Fitness-proportionate selection shifts the scores by their minimum
before using them as sampling weights. Scores may be negative, and the
worst individual ends up with weight zero. When every score is equal
the weights fall back to uniform.
"""
import math
import random
from typing import List, Optional, Sequence, Tuple

from ..exceptions import NonFiniteValueError, SelectionError


class FitnessProportionateSelection:
    """
    Roulette-wheel selection on min-shifted scores.

    Example:
        selection = FitnessProportionateSelection(random.Random(0))
        a, b = selection.select_pair([-2.0, 0.0, 0.0, 0.0, 5.0])
        assert a != b
    """

    def __init__(self, rng: Optional[random.Random] = None):
        """
        Initialize the selection strategy.

        Args:
            rng: Random source. A fresh unseeded one if None.
        """
        self.rng = rng or random.Random()

    def shifted_weights(self, scores: Sequence[float]) -> List[float]:
        """
        Turn scores into sampling weights.

        Args:
            scores: One score per candidate, higher is better.

        Returns:
            `score - min(scores)` per candidate, or all ones if the
            scores are all equal.

        Raises:
            SelectionError: If scores is empty.
            NonFiniteValueError: If a score is NaN/inf.
        """
        if len(scores) == 0:
            raise SelectionError("Cannot select from an empty population")

        values = [float(s) for s in scores]
        if not all(math.isfinite(v) for v in values):
            raise NonFiniteValueError(f"Scores must be finite, got {values}")

        lowest = min(values)
        if all(v == lowest for v in values):
            return [1.0] * len(values)

        return [v - lowest for v in values]

    def sample(
        self,
        scores: Sequence[float],
        exclude: Optional[int] = None,
    ) -> int:
        """
        Sample one index with probability proportional to shifted score.

        Args:
            scores: Scores for the whole population.
            exclude: Index to leave out; the shift is then computed
                    over the remaining scores only.

        Returns:
            Index into `scores`.

        Raises:
            SelectionError: If no candidate is left or the weights
                           do not sum to a positive finite value.
        """
        candidates = [i for i in range(len(scores)) if i != exclude]
        if not candidates:
            raise SelectionError("No candidates left to select from")

        weights = self.shifted_weights([scores[i] for i in candidates])
        total = sum(weights)
        if not 0 < total < math.inf:
            raise SelectionError(
                f"Selection weights must sum to a positive finite value, got {total}"
            )

        return self.rng.choices(candidates, weights=weights, k=1)[0]

    def select_pair(self, scores: Sequence[float]) -> Tuple[int, int]:
        """
        Select two distinct parent indices.

        The second parent is drawn from the population without the
        first, so an individual is never paired with itself.

        Raises:
            SelectionError: If there are fewer than two candidates.
        """
        if len(scores) < 2:
            raise SelectionError(
                f"Need at least 2 individuals to pick two parents, got {len(scores)}"
            )

        parent_a = self.sample(scores)
        parent_b = self.sample(scores, exclude=parent_a)
        return parent_a, parent_b
