"""
Base learner capability and a scikit-learn adapter.

Anything with ``train(dataset)`` and ``predict_distribution(instance)`` can
be plugged into the ensemble and the relabeller; a zero-argument factory
produces fresh, untrained learners.
"""

from __future__ import annotations

from typing import Callable, Optional, Protocol, runtime_checkable

import numpy as np
from sklearn.base import clone
from sklearn.utils.validation import has_fit_parameter

from ..data.dataset import Dataset, Instance
from ..exceptions import NotBuiltError

__all__ = ["Learner", "LearnerFactory", "SklearnLearner", "sklearn_factory"]


@runtime_checkable
class Learner(Protocol):
    def train(self, dataset: Dataset) -> None:
        ...

    def predict_distribution(self, instance: Instance) -> np.ndarray:
        ...


LearnerFactory = Callable[[], Learner]


class SklearnLearner:
    """
    Wrap a scikit-learn classifier as a ``Learner``.

    The estimator is cloned on every ``train`` call. Instance weights are
    passed as ``sample_weight`` when the estimator's ``fit`` accepts them.
    Probabilities are returned over all class values of the training
    schema, so a class absent from the training sample gets probability 0.

    Parameters
    ----------
    estimator : classifier
        Any estimator implementing ``fit`` and ``predict_proba``.
    random_state : int or None, default=None
        Forwarded to the clone when the estimator has a ``random_state``
        parameter.
    """

    def __init__(self, estimator, random_state: Optional[int] = None):
        if not hasattr(estimator, "predict_proba"):
            raise TypeError(
                f"{type(estimator).__name__} has no predict_proba method."
            )
        self.estimator = estimator
        self.random_state = random_state
        self.estimator_ = None
        self.n_classes_ = None

    def __repr__(self):
        return f"SklearnLearner({self.estimator!r})"

    @property
    def is_trained(self) -> bool:
        return self.estimator_ is not None

    def train(self, dataset: Dataset) -> None:
        est = clone(self.estimator)
        if self.random_state is not None and "random_state" in est.get_params():
            est.set_params(random_state=self.random_state)

        X, y = dataset.X, dataset.labels
        if has_fit_parameter(est, "sample_weight"):
            est.fit(X, y, sample_weight=dataset.weights)
        else:
            est.fit(X, y)

        self.estimator_ = est
        self.n_classes_ = dataset.num_classes

    def predict_distributions(self, dataset: Dataset) -> np.ndarray:
        return self.predict_proba(dataset.X)

    def predict_distribution(self, instance: Instance) -> np.ndarray:
        return self.predict_proba(instance.values.reshape(1, -1))[0]

    def classify(self, instance: Instance) -> int:
        return int(np.argmax(self.predict_distribution(instance)))

    def predict_proba(self, X: np.ndarray) -> np.ndarray:
        """Probabilities over all class indices for a feature matrix."""
        if self.estimator_ is None:
            raise NotBuiltError("Learner has not been trained")
        proba = self.estimator_.predict_proba(X)
        # Map estimator columns (seen classes only) back to class indices
        full = np.zeros((len(X), self.n_classes_))
        full[:, np.asarray(self.estimator_.classes_, dtype=int)] = proba
        return full


def sklearn_factory(estimator, random_state: Optional[int] = None) -> LearnerFactory:
    """Return a zero-argument factory of fresh ``SklearnLearner`` objects."""

    def factory() -> SklearnLearner:
        return SklearnLearner(estimator, random_state=random_state)

    return factory
