"""
In-memory dataset representation.

A ``Dataset`` is an ordered collection of instances sharing one schema.
Features are stored as a float matrix where nominal values are encoded as
integer indices and missing values are ``NaN``. The class column is kept
separately as integer indices into the class attribute's values.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence, Tuple, Union

import numpy as np

from ..exceptions import DimensionMismatchError

__all__ = ["MISSING", "Attribute", "Instance", "Dataset"]

MISSING = np.nan


@dataclass(frozen=True)
class Attribute:
    name: str
    values: Optional[Tuple[str, ...]] = None

    def __post_init__(self):
        if self.values is not None:
            object.__setattr__(self, "values", tuple(str(v) for v in self.values))

    @property
    def is_nominal(self) -> bool:
        return self.values is not None

    @property
    def num_values(self) -> int:
        return len(self.values) if self.values is not None else 0

    def index_of(self, label) -> int:
        if self.values is None:
            raise ValueError(f"Attribute '{self.name}' is numeric")
        try:
            return self.values.index(str(label))
        except ValueError:
            raise ValueError(
                f"Unknown value {label!r} for attribute '{self.name}'"
            ) from None


@dataclass
class Instance:
    """A single feature vector with its class label and weight."""

    values: np.ndarray
    label: float
    weight: float = 1.0

    def __post_init__(self):
        self.values = np.asarray(self.values, dtype=float)
        if self.weight < 0:
            raise ValueError(f"Instance weight must be nonnegative, got {self.weight}")

    def is_missing(self, index: int) -> bool:
        return bool(np.isnan(self.values[index]))

    @property
    def class_is_missing(self) -> bool:
        return bool(np.isnan(self.label))

    def copy(self) -> "Instance":
        return Instance(self.values.copy(), self.label, self.weight)


class Dataset:
    """
    Ordered instances sharing a schema.

    Parameters
    ----------
    attributes : sequence of Attribute
        Full schema, the class attribute included.
    X : array-like, shape (n_instances, n_features)
        Feature values, one column per non-class attribute in schema order.
    y : array-like, shape (n_instances,)
        Class value indices (``NaN`` for missing).
    weights : array-like, optional
        Nonnegative instance weights. Defaults to ones.
    class_index : int, default=-1
        Position of the class attribute inside ``attributes``.
    relation : str, default="dataset"
        Name of the dataset, used to look up cost files on demand.
    """

    def __init__(
        self,
        attributes: Sequence[Attribute],
        X,
        y,
        weights=None,
        class_index: int = -1,
        relation: str = "dataset",
    ):
        self.attributes: List[Attribute] = list(attributes)
        if not self.attributes:
            raise ValueError("A dataset needs at least a class attribute")
        self.class_index = class_index % len(self.attributes)
        self.relation = relation

        n_features = len(self.attributes) - 1
        X = np.asarray(X, dtype=float)
        if X.ndim == 1 and X.size == 0:
            X = X.reshape(0, n_features)
        if X.ndim != 2 or X.shape[1] != n_features:
            raise DimensionMismatchError(
                f"Expected {n_features} feature columns, got array of shape {X.shape}"
            )
        y = np.asarray(y, dtype=float).reshape(-1)
        if len(y) != len(X):
            raise DimensionMismatchError(
                f"X has {len(X)} rows but y has {len(y)} values"
            )
        if weights is None:
            weights = np.ones(len(X))
        weights = np.asarray(weights, dtype=float).reshape(-1)
        if len(weights) != len(X):
            raise DimensionMismatchError(
                f"X has {len(X)} rows but {len(weights)} weights were given"
            )
        if np.any(weights < 0):
            raise ValueError("Instance weights must be nonnegative")

        self.X = X
        self.y = y
        self.weights = weights

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------

    @classmethod
    def from_arrays(
        cls,
        X,
        y,
        class_values: Union[Sequence, None, bool] = None,
        weights=None,
        feature_names: Optional[Sequence[str]] = None,
        class_name: str = "class",
        relation: str = "dataset",
    ) -> "Dataset":
        """
        Build a dataset from plain arrays.

        ``y`` holds raw labels which are encoded against ``class_values``
        (the sorted unique labels when not given). Pass
        ``class_values=False`` to keep ``y`` as a numeric class.
        """
        X = np.asarray(X, dtype=float)
        if X.ndim == 1:
            X = X.reshape(-1, 1)
        y = np.asarray(y)

        if feature_names is None:
            feature_names = [f"x{i}" for i in range(X.shape[1])]
        features = [Attribute(str(name)) for name in feature_names]

        if class_values is False:
            class_attr = Attribute(class_name)
            codes = y.astype(float)
        else:
            if class_values is None:
                class_values = np.unique(y)
            labels = [str(v) for v in class_values]
            lookup = {v: i for i, v in enumerate(labels)}
            missing = [v for v in np.unique(y.astype(str)) if v not in lookup]
            if missing:
                raise ValueError(f"Labels {missing} are not among the class values {labels}")
            codes = np.array([lookup[str(v)] for v in y], dtype=float)
            class_attr = Attribute(class_name, tuple(labels))

        return cls(features + [class_attr], X, codes, weights=weights, relation=relation)

    # ------------------------------------------------------------------
    # Schema
    # ------------------------------------------------------------------

    @property
    def class_attribute(self) -> Attribute:
        return self.attributes[self.class_index]

    @property
    def feature_attributes(self) -> List[Attribute]:
        return [a for i, a in enumerate(self.attributes) if i != self.class_index]

    @property
    def num_classes(self) -> int:
        return self.class_attribute.num_values

    @property
    def num_instances(self) -> int:
        return len(self.y)

    @property
    def labels(self) -> np.ndarray:
        """Class indices as integers (missing labels are not allowed here)."""
        if np.any(np.isnan(self.y)):
            raise ValueError("Dataset contains instances with a missing class")
        return self.y.astype(int)

    def __len__(self) -> int:
        return self.num_instances

    # ------------------------------------------------------------------
    # Instances
    # ------------------------------------------------------------------

    def instance(self, i: int) -> Instance:
        return Instance(self.X[i].copy(), self.y[i], self.weights[i])

    def __iter__(self) -> Iterator[Instance]:
        for i in range(self.num_instances):
            yield self.instance(i)

    def set_class_value(self, i: int, label: int):
        if self.class_attribute.is_nominal and not 0 <= label < self.num_classes:
            raise ValueError(
                f"Class index {label} out of range for {self.num_classes} classes"
            )
        self.y[i] = label

    # ------------------------------------------------------------------
    # Copies
    # ------------------------------------------------------------------

    def copy(self) -> "Dataset":
        return Dataset(
            self.attributes,
            self.X.copy(),
            self.y.copy(),
            self.weights.copy(),
            class_index=self.class_index,
            relation=self.relation,
        )

    def take(self, indices) -> "Dataset":
        """Return a new dataset holding the given rows (repeats allowed)."""
        indices = np.asarray(indices, dtype=int)
        return Dataset(
            self.attributes,
            self.X[indices],
            self.y[indices],
            self.weights[indices],
            class_index=self.class_index,
            relation=self.relation,
        )

    def __repr__(self) -> str:
        return (
            f"Dataset(relation={self.relation!r}, instances={self.num_instances}, "
            f"features={len(self.attributes) - 1}, class={self.class_attribute.name!r})"
        )
