"""
Bagged ensemble of base learners with averaged class distributions.
"""

from __future__ import annotations

import warnings
from typing import Callable, List, Optional

import numpy as np
from joblib import Parallel, delayed
from sklearn.utils import check_random_state

from ..data.dataset import Dataset, Instance
from ..exceptions import (
    ConfigurationError,
    DimensionMismatchError,
    EmptyDatasetError,
    NotBuiltError,
)
from .sampler import BootstrapSampler

__all__ = ["BaggedEnsemble"]

MAX_INT = np.iinfo(np.int32).max


def _fit_member(dataset: Dataset, factory: Callable, sampler: BootstrapSampler,
                target_size: int, seed: int):
    """Draw one bag and train a fresh learner on it.

    Returns the learner and the number of classes present in its bag.
    """
    bag = sampler.sample(dataset, target_size, random_state=seed)

    learner = factory()
    # Seed the learner if it supports it
    if hasattr(learner, "random_state"):
        learner.random_state = int(seed)
    learner.train(bag)
    return learner, len(np.unique(bag.labels))


def _member_distributions(learner, dataset: Dataset) -> np.ndarray:
    if hasattr(learner, "predict_distributions"):
        return np.asarray(learner.predict_distributions(dataset), dtype=float)
    return np.array([learner.predict_distribution(inst) for inst in dataset], dtype=float)


def _check_shape(dist: np.ndarray, expected: tuple) -> np.ndarray:
    if dist.shape != expected:
        raise DimensionMismatchError(
            f"Member returned a distribution of shape {dist.shape}, expected {expected}"
        )
    return dist


class BaggedEnsemble:
    """
    Bootstrap aggregation over an arbitrary base learner.

    Every member is trained on its own bootstrap sample. Predictions are the
    unweighted mean of all members' distributions; members are not excluded
    for instances that were part of their own bag.

    Learners exposing a ``random_state`` attribute get it set to their
    bag's sub-seed before training. This replaces any ``random_state`` the
    factory configured, e.g. through ``sklearn_factory(est, random_state=...)``.

    Parameters
    ----------
    sampler : BootstrapSampler, optional
        Resampling strategy. Defaults to uniform sampling.
    n_jobs : int or None, default=None
        Number of joblib workers used to train members. ``None`` trains
        sequentially. Results do not depend on this value.
    verbose : bool, default=False
        Print progress.
    """

    def __init__(self, sampler: Optional[BootstrapSampler] = None,
                 n_jobs: Optional[int] = None, verbose: bool = False):
        self.sampler = sampler or BootstrapSampler()
        self.n_jobs = n_jobs
        self.verbose = verbose
        self.models_: List = []
        self.seeds_: Optional[np.ndarray] = None
        self.n_classes_: Optional[int] = None

    @property
    def models(self) -> List:
        return list(self.models_)

    @property
    def n_models(self) -> int:
        return len(self.models_)

    @property
    def seeds(self) -> Optional[np.ndarray]:
        return None if self.seeds_ is None else self.seeds_.copy()

    @property
    def is_built(self) -> bool:
        return len(self.models_) > 0

    def build(
        self,
        dataset: Dataset,
        base_factory: Callable,
        iterations: int = 10,
        bag_size_percent: int = 100,
        seed=1,
    ) -> "BaggedEnsemble":
        """
        Train ``iterations`` members, each on its own bootstrap sample.

        All per-member seeds are drawn up front from a single generator
        seeded with ``seed``, so the ensemble is identical whether members
        are trained sequentially or in parallel. Any exception raised while
        training a member propagates and leaves the ensemble empty.
        """
        self.models_, self.seeds_, self.n_classes_ = [], None, None

        if iterations < 1:
            raise ConfigurationError(f"Number of iterations must be positive, got {iterations}")
        if dataset.num_instances == 0:
            raise EmptyDatasetError("Cannot build an ensemble from an empty dataset")
        target_size = self.sampler.bag_size(dataset.num_instances, bag_size_percent)

        rng = check_random_state(seed)
        seeds = rng.randint(MAX_INT, size=iterations)

        if self.verbose:
            print(f"Bagging {iterations} models on {target_size} of "
                  f"{dataset.num_instances} instances each...")

        results = Parallel(n_jobs=self.n_jobs)(
            delayed(_fit_member)(dataset, base_factory, self.sampler, target_size, s)
            for s in seeds
        )

        for i, (_, n_present) in enumerate(results):
            if n_present < dataset.num_classes:
                warnings.warn(
                    f"Bag {i} contains {n_present} of {dataset.num_classes} classes.",
                    stacklevel=2,
                )

        self.models_ = [model for model, _ in results]
        self.seeds_ = seeds
        self.n_classes_ = dataset.num_classes
        return self

    def _check_built(self):
        if not self.models_:
            raise NotBuiltError("Ensemble has not been built")

    def predict_distribution(self, instance: Instance) -> np.ndarray:
        """Mean class distribution of all members for one instance."""
        self._check_built()
        total = np.zeros(self.n_classes_)
        for model in self.models_:
            dist = np.asarray(model.predict_distribution(instance), dtype=float)
            total += _check_shape(dist, total.shape)
        return total / len(self.models_)

    def predict_distributions(self, dataset: Dataset) -> np.ndarray:
        """Mean class distributions, shape (n_instances, n_classes)."""
        self._check_built()
        total = np.zeros((dataset.num_instances, self.n_classes_))
        for model in self.models_:
            total += _check_shape(_member_distributions(model, dataset), total.shape)
        return total / len(self.models_)
