"""
MetaCost: make any base learner cost-sensitive by relabelling.

Domingos (1999), "MetaCost: A general method for making classifiers
cost-sensitive", KDD-99.

A bagged ensemble of the base learner estimates class probabilities for
every training instance. Each instance is relabelled with the class of
minimum expected cost under those probabilities, and a single base
learner is trained on the relabelled data. Predictions come straight from
that final model.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

import numpy as np

from ..costs.cost_matrix import CostMatrix
from ..costs.loader import CostMatrixSource
from ..data.dataset import Dataset, Instance
from ..ensemble.bagging import BaggedEnsemble
from ..ensemble.sampler import BootstrapSampler
from ..exceptions import (
    ConfigurationError,
    DimensionMismatchError,
    NotBuiltError,
    UnsupportedClassTypeError,
)

__all__ = ["MetaCostConfig", "MetaCost"]


@dataclass(frozen=True)
class MetaCostConfig:
    iterations: int = 10
    bag_size_percent: int = 100
    seed: int = 1
    cost_source: Optional[CostMatrixSource] = None
    use_weights: bool = False
    n_jobs: Optional[int] = None

    def validate(self, require_source: bool = True):
        if int(self.iterations) != self.iterations or self.iterations < 1:
            raise ConfigurationError(
                f"Number of iterations must be a positive integer, got {self.iterations}"
            )
        if int(self.bag_size_percent) != self.bag_size_percent or self.bag_size_percent < 1:
            raise ConfigurationError(
                f"Bag size percentage must be a positive integer, got {self.bag_size_percent}"
            )
        if require_source and self.cost_source is None:
            raise ConfigurationError("No cost matrix supplied and no on-demand source configured")


class MetaCost:
    """
    Cost-sensitive relabelling meta-learner.

    Parameters
    ----------
    base_factory : callable
        Zero-argument factory returning fresh, untrained learners
        (``train`` / ``predict_distribution``).
    config : MetaCostConfig, optional
        Bagging parameters and the cost matrix source.
    final_factory : callable, optional
        Factory for the model trained on the relabelled data. Defaults to
        ``base_factory``.
    verbose : bool, default=False
        Print progress.

    Attributes
    ----------
    cost_matrix_ : CostMatrix
        The matrix used by the last successful build.
    relabeled_labels_ : np.ndarray
        Class indices assigned to the training instances.
    n_relabeled_ : int
        How many training labels were changed by relabelling.
    """

    def __init__(
        self,
        base_factory: Callable,
        config: Optional[MetaCostConfig] = None,
        final_factory: Optional[Callable] = None,
        verbose: bool = False,
    ):
        self.base_factory = base_factory
        self.config = config or MetaCostConfig()
        self.final_factory = final_factory
        self.verbose = verbose
        self._reset()

    def _reset(self):
        self.model_ = None
        self.cost_matrix_ = None
        self.relabeled_labels_ = None
        self.n_relabeled_ = None

    @property
    def is_built(self) -> bool:
        return self.model_ is not None

    def resolve_cost_matrix(self, dataset: Dataset, cost_matrix=None) -> CostMatrix:
        """Pick the explicit matrix or the configured source, and check its size."""
        if cost_matrix is not None:
            matrix = cost_matrix if isinstance(cost_matrix, CostMatrix) else CostMatrix(cost_matrix)
        elif self.config.cost_source is not None:
            matrix = self.config.cost_source.resolve(dataset)
        else:
            raise ConfigurationError("No cost matrix supplied and no on-demand source configured")

        if matrix.size != dataset.num_classes:
            raise DimensionMismatchError(
                f"Cost matrix is {matrix.size}x{matrix.size} but the dataset "
                f"has {dataset.num_classes} classes"
            )
        return matrix

    @staticmethod
    def relabel(dataset: Dataset, ensemble: BaggedEnsemble, cost_matrix: CostMatrix) -> Dataset:
        """
        Return a copy of ``dataset`` with each class set to its minimum
        expected cost class under the ensemble's distributions. Ties go to
        the lowest class index.
        """
        relabeled = dataset.copy()
        distributions = ensemble.predict_distributions(relabeled)
        for i, label in enumerate(cost_matrix.min_cost_classes(distributions)):
            relabeled.set_class_value(i, int(label))
        return relabeled

    def build(self, dataset: Dataset, cost_matrix=None) -> "MetaCost":
        """
        Train the cost-sensitive model.

        ``cost_matrix`` overrides the configured cost source. The caller's
        dataset is not modified. Any failure leaves the object unbuilt.
        """
        self._reset()
        config = self.config
        config.validate(require_source=cost_matrix is None)

        if not dataset.class_attribute.is_nominal:
            raise UnsupportedClassTypeError("Class attribute must be nominal!")
        matrix = self.resolve_cost_matrix(dataset, cost_matrix)

        ensemble = BaggedEnsemble(
            sampler=BootstrapSampler(use_weights=config.use_weights),
            n_jobs=config.n_jobs,
            verbose=self.verbose,
        )
        ensemble.build(
            dataset,
            self.base_factory,
            iterations=config.iterations,
            bag_size_percent=config.bag_size_percent,
            seed=config.seed,
        )

        relabeled = self.relabel(dataset, ensemble, matrix)
        new_labels = relabeled.labels
        n_changed = int(np.sum(relabeled.y != dataset.y))
        if self.verbose:
            print(f"Relabelled {n_changed} of {dataset.num_instances} training instances.")

        final = (self.final_factory or self.base_factory)()
        final.train(relabeled)

        self.model_ = final
        self.cost_matrix_ = matrix
        self.relabeled_labels_ = new_labels
        self.n_relabeled_ = n_changed
        return self

    def _check_built(self):
        if self.model_ is None:
            raise NotBuiltError("MetaCost: No model built yet.")

    def predict_distribution(self, instance: Instance) -> np.ndarray:
        self._check_built()
        return np.asarray(self.model_.predict_distribution(instance), dtype=float)

    def classify(self, instance: Instance) -> int:
        """Predicted class index, straight from the final model."""
        self._check_built()
        if hasattr(self.model_, "classify"):
            return int(self.model_.classify(instance))
        return int(np.argmax(self.model_.predict_distribution(instance)))

    def describe(self) -> str:
        """Short summary of the options, base learner and cost matrix."""
        if self.model_ is None:
            return "MetaCost: No model built yet."
        c = self.config
        lines = [
            "MetaCost cost sensitive classifier induction",
            f"Options: iterations={c.iterations} bag_size_percent={c.bag_size_percent} seed={c.seed}",
            f"Base learner: {self.model_!r}",
            f"Relabelled instances: {self.n_relabeled_} of {len(self.relabeled_labels_)}",
            "",
            "Cost Matrix",
        ]
        for row in self.cost_matrix_.as_array():
            lines.append(" ".join(f"{v:8g}" for v in row))
        return "\n".join(lines)
