from __future__ import annotations

from typing import Optional, Sequence

import numpy as np

from ..exceptions import DimensionMismatchError

__all__ = ["CostMatrix"]


class CostMatrix:
    """
    Square misclassification cost table.

    Entry ``(i, j)`` is the cost of predicting class ``j`` when the true
    class is ``i``. The diagonal is usually zero but this is not enforced.

    Parameters
    ----------
    rows : array-like, shape (n_classes, n_classes)
        Nonnegative costs, row-major by actual class.
    """

    def __init__(self, rows):
        costs = np.array(rows, dtype=float)
        if costs.ndim != 2 or costs.shape[0] != costs.shape[1] or costs.size == 0:
            raise DimensionMismatchError(
                f"Cost matrix must be square and non-empty, got shape {costs.shape}"
            )
        if not np.all(np.isfinite(costs)):
            raise ValueError("Cost matrix entries must be finite")
        if np.any(costs < 0):
            raise ValueError("Cost matrix entries must be nonnegative")
        costs.setflags(write=False)
        self._costs = costs

    @classmethod
    def zero_one(cls, n_classes: int) -> "CostMatrix":
        """Unit cost for every error, zero for correct predictions."""
        return cls(np.ones((n_classes, n_classes)) - np.eye(n_classes))

    @property
    def size(self) -> int:
        return self._costs.shape[0]

    def as_array(self) -> np.ndarray:
        return self._costs.copy()

    def __getitem__(self, key):
        return self._costs[key]

    def __eq__(self, other) -> bool:
        if not isinstance(other, CostMatrix):
            return NotImplemented
        return self._costs.shape == other._costs.shape and np.array_equal(self._costs, other._costs)

    def __hash__(self):
        return hash(self._costs.tobytes())

    def __repr__(self) -> str:
        return f"CostMatrix({self._costs.tolist()})"

    def expected_costs(self, distribution: Sequence[float]) -> np.ndarray:
        """
        Expected cost of predicting each class under ``distribution``.

        ``result[j] = sum_i distribution[i] * cost[i, j]``.
        """
        p = np.asarray(distribution, dtype=float).reshape(-1)
        if len(p) != self.size:
            raise DimensionMismatchError(
                f"Distribution has {len(p)} entries, cost matrix has {self.size} classes"
            )
        return p @ self._costs

    def expected_costs_batch(self, distributions) -> np.ndarray:
        """Expected costs for each row of an (n_instances, n_classes) array."""
        P = np.asarray(distributions, dtype=float)
        if P.ndim != 2 or P.shape[1] != self.size:
            raise DimensionMismatchError(
                f"Distributions of shape {P.shape} do not match {self.size} classes"
            )
        return P @ self._costs

    def min_cost_classes(self, distributions) -> np.ndarray:
        """Index of the cheapest prediction per row (first minimum on ties)."""
        return np.argmin(self.expected_costs_batch(distributions), axis=1)

    def total_cost(self, y_true, y_pred, sample_weight: Optional[Sequence[float]] = None) -> float:
        """Summed cost of predicting ``y_pred`` for instances of class ``y_true``."""
        y_true = np.asarray(y_true, dtype=int)
        y_pred = np.asarray(y_pred, dtype=int)
        if y_true.shape != y_pred.shape:
            raise DimensionMismatchError("y_true and y_pred differ in length")
        costs = self._costs[y_true, y_pred]
        if sample_weight is not None:
            costs = costs * np.asarray(sample_weight, dtype=float)
        return float(costs.sum())
