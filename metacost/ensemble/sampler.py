"""
Bootstrap resampling of datasets.
"""

from __future__ import annotations

import numpy as np
from sklearn.utils import check_random_state

from ..data.dataset import Dataset
from ..exceptions import ConfigurationError, EmptyDatasetError

__all__ = ["BootstrapSampler"]


class BootstrapSampler:
    """
    Draw training sets with replacement.

    Parameters
    ----------
    use_weights : bool, default=False
        If True, instances are drawn with probability proportional to their
        weight instead of uniformly.
    """

    def __init__(self, use_weights: bool = False):
        self.use_weights = use_weights

    def __repr__(self):
        return f"BootstrapSampler(use_weights={self.use_weights})"

    @staticmethod
    def bag_size(n_instances: int, bag_size_percent: int) -> int:
        """Number of draws for a bag: ``percent`` of ``n_instances``, at least 1."""
        if bag_size_percent <= 0:
            raise ConfigurationError(
                f"Bag size percentage must be positive, got {bag_size_percent}"
            )
        return max(1, int(np.floor(n_instances * bag_size_percent / 100.0 + 0.5)))

    def sample_indices(self, dataset: Dataset, target_size: int, random_state=None) -> np.ndarray:
        n = dataset.num_instances
        if n == 0:
            raise EmptyDatasetError("Cannot bootstrap an empty dataset")
        if target_size < 1:
            raise ConfigurationError(f"Sample size must be positive, got {target_size}")

        rng = check_random_state(random_state)
        if not self.use_weights:
            return rng.randint(0, n, size=target_size)

        total = dataset.weights.sum()
        if total <= 0:
            raise ValueError("Cannot sample by weight: all instance weights are zero")
        return rng.choice(n, size=target_size, replace=True, p=dataset.weights / total)

    def sample(self, dataset: Dataset, target_size: int, random_state=None) -> Dataset:
        """
        Draw ``target_size`` instances with replacement.

        ``random_state`` may be a seed or a ``RandomState``; a generator
        passed in is advanced, never reseeded, so consecutive calls on the
        same generator give different but reproducible samples.
        """
        return dataset.take(self.sample_indices(dataset, target_size, random_state))
