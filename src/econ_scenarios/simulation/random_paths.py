"""
Random draw streams for scenario simulation.

The generator is the only source of randomness in the package. It is passed
explicitly to every simulation call, and a run seed is partitioned into
independent per-trial sub-streams with numpy's SeedSequence spawning:

- Same seed, same (n_trials, n_steps) => bit-identical draws
- Trial k draws from its own stream, so trials are uncorrelated and can be
  generated in any order
- PCG64 via np.random.default_rng

See: numpy.random.SeedSequence "Parallel random number generation"
"""

import numbers
from collections.abc import Sequence
from typing import Any

import numpy as np

from econ_scenarios.config.settings import SETTINGS
from econ_scenarios.models.errors import InvalidInput


def _require_count(name: str, n: int) -> int:
    if isinstance(n, bool) or not isinstance(n, numbers.Integral):
        raise InvalidInput(f"CRITICAL: {name} must be an integer, got {n!r}")
    if n < 0:
        raise InvalidInput(f"CRITICAL: {name} must be >= 0, got {n}")
    return int(n)


def _require_seed(seed: Any) -> None:
    values = seed if isinstance(seed, Sequence) and not isinstance(seed, str) else [seed]
    for value in values:
        if isinstance(value, bool) or not isinstance(value, numbers.Integral) or value < 0:
            raise InvalidInput(f"CRITICAL: seed must be a non-negative integer, got {seed!r}")


class RandomPathGenerator:
    """
    Seeded stream of standard-normal and uniform variates.

    Parameters
    ----------
    seed : int or Sequence[int], optional
        Run seed. None draws fresh OS entropy.

    Raises
    ------
    InvalidInput
        If the seed is negative or not an integer (or sequence of integers)

    Examples
    --------
    >>> gen = RandomPathGenerator(seed=42)
    >>> z = gen.normal_matrix(n_trials=100, n_steps=12)
    >>> z.shape
    (100, 12)
    """

    def __init__(
        self,
        seed: int | Sequence[int] | None = None,
        *,
        seed_sequence: np.random.SeedSequence | None = None,
    ):
        if seed_sequence is None:
            if seed is not None:
                _require_seed(seed)
            seed_sequence = np.random.SeedSequence(seed)
        self._seed_sequence = seed_sequence
        self._rng = np.random.default_rng(seed_sequence)

    @property
    def seed(self) -> int | Sequence[int] | None:
        """Entropy the stream was built from."""
        return self._seed_sequence.entropy

    def draw(self, n: int) -> np.ndarray:
        """
        Draw ``n`` independent standard-normal variates.

        Raises
        ------
        InvalidInput
            If n is negative
        """
        n = _require_count("n", n)
        return self._rng.standard_normal(n)

    def uniform(self, n: int) -> np.ndarray:
        """Draw ``n`` independent U[0, 1) variates."""
        n = _require_count("n", n)
        return self._rng.random(n)

    def spawn(self, n: int) -> list["RandomPathGenerator"]:
        """
        Split into ``n`` statistically independent child streams.

        Children depend only on the parent seed and how many children were
        spawned before, never on draws already taken from the parent.
        """
        n = _require_count("n", n)
        return [
            RandomPathGenerator(seed_sequence=child)
            for child in self._seed_sequence.spawn(n)
        ]

    def normal_matrix(self, n_trials: int, n_steps: int) -> np.ndarray:
        """
        Standard normals with one independent sub-stream per trial.

        Returns
        -------
        np.ndarray
            Shape (n_trials, n_steps); row k comes from the k-th trial stream
        """
        n_steps = _require_count("n_steps", n_steps)
        streams = self.spawn(n_trials)
        if not streams:
            return np.empty((0, n_steps))
        return np.vstack([stream.draw(n_steps) for stream in streams])

    def trial_streams(self, n_trials: int) -> list["RandomPathGenerator"]:
        """Per-trial sub-streams for callers that need several draw kinds per trial."""
        return self.spawn(n_trials)


def resolve_generator(
    generator: RandomPathGenerator | None,
    seed: int | None,
) -> RandomPathGenerator:
    """
    Use the explicit generator if given, else build one from ``seed``.

    With neither, the seed falls back to SETTINGS.simulation.seed
    (ECON_SCENARIOS_SEED), which is None unless configured.

    Raises
    ------
    InvalidInput
        If both a generator and a seed are supplied
    """
    if generator is not None:
        if seed is not None:
            raise InvalidInput("CRITICAL: pass either generator or seed, not both")
        return generator
    if seed is None:
        seed = SETTINGS.simulation.seed
    return RandomPathGenerator(seed)
