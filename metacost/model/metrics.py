from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Dict, Optional
import numpy as np
import pandas as pd
from sklearn.metrics import confusion_matrix

from ..costs.cost_matrix import CostMatrix
from ..exceptions import DimensionMismatchError

# =============================================================================
# 1. Cost Functions
# =============================================================================

def _as_cost_matrix(cost_matrix) -> CostMatrix:
    return cost_matrix if isinstance(cost_matrix, CostMatrix) else CostMatrix(cost_matrix)


def cost_score(
    y_true: np.ndarray = None,
    y_pred: np.ndarray = None,
    cost_matrix=None,
    cm: np.ndarray = None,
    labels=None,
) -> float:
    """
    Compute the cost-sensitive gain (negative total cost).

    Formula: Gain = -sum_ij cm[i, j] * cost[i, j]

    Parameters
    ----------
    y_true, y_pred : array-like, optional
        True and predicted labels.
    cost_matrix : CostMatrix or array-like
        cost[i, j] is the cost of predicting class j for a sample of class i.
        Defaults to unit costs.
    cm : array-like, optional
        Confusion matrix (rows = true class). If provided, y_true and y_pred
        are ignored.
    labels : array-like, optional
        Class labels in cost matrix order, passed to ``confusion_matrix``.

    Returns
    -------
    float
        The total gain (always <= 0). Higher is better.
    """
    if cm is None:
        if y_true is None or y_pred is None:
            raise ValueError("Must provide either 'cm' or both 'y_true' and 'y_pred'.")
        cm = confusion_matrix(y_true, y_pred, labels=labels)
    cm = np.asarray(cm, dtype=float)

    costs = CostMatrix.zero_one(len(cm)) if cost_matrix is None else _as_cost_matrix(cost_matrix)
    if costs.size != len(cm):
        raise DimensionMismatchError(
            f"Confusion matrix has {len(cm)} classes, cost matrix has {costs.size}"
        )
    return -float(np.sum(cm * costs.as_array()))


def average_cost(y_true, y_pred, cost_matrix=None, labels=None) -> float:
    """Mean misclassification cost per sample."""
    n = len(y_true)
    return -cost_score(y_true, y_pred, cost_matrix, labels=labels) / n if n else 0.0


# =============================================================================
# 2. Metric Registry & Definitions
# =============================================================================

@dataclass(frozen=True)
class Metric:
    name: str
    func: Callable[..., float]
    display: str | None = None

REGISTRY: Dict[str, Metric] = {}

def register(metric: Metric):
    if metric.name in REGISTRY:
        raise ValueError(f"Metric '{metric.name}' already registered")
    REGISTRY[metric.name] = metric

def _safe_div(n, d):
    return n / d if d else 0.0

def _recalls(cm):
    return [_safe_div(cm[i, i], cm[i].sum()) for i in range(len(cm))]

# NOTE: every metric receives the confusion matrix and the cost matrix
register(Metric("accuracy", lambda cm, costs, **_: _safe_div(np.trace(cm), cm.sum()), "Accuracy"))
register(Metric("balanced accuracy", lambda cm, costs, **_: float(np.mean(_recalls(cm))), "Balanced Acc."))
register(Metric("total cost", lambda cm, costs, **_: -cost_score(cm=cm, cost_matrix=costs), "Total Cost"))
register(Metric(
    "average cost",
    lambda cm, costs, **_: _safe_div(-cost_score(cm=cm, cost_matrix=costs), cm.sum()),
    "Cost / sample"
))


# =============================================================================
# 3. Helper Functions
# =============================================================================

def compute_metrics_from_cm(
    cm: np.ndarray,
    cost_matrix=None,
    runtime: float = 0.0,
    **kwargs
) -> dict:
    """
    Calculate all registered metrics from a confusion matrix.

    Parameters
    ----------
    cm : np.ndarray
        Confusion matrix (rows = true class, columns = predicted class).
    cost_matrix : CostMatrix or array-like, optional
        Misclassification costs. Defaults to unit costs.
    runtime : float
        Fit time in seconds.
    **kwargs : dict
        Additional arguments passed to metric functions.

    Returns
    -------
    dict
        Dictionary of {metric_name: value}.
    """
    cm = np.asarray(cm, dtype=float)
    costs = CostMatrix.zero_one(len(cm)) if cost_matrix is None else _as_cost_matrix(cost_matrix)
    out = {"runtime": runtime}
    for m in REGISTRY.values():
        out[m.name] = m.func(cm=cm, costs=costs, **kwargs)
    return out


_EXCLUDE_NUMERIC = {"seed", "fold"}

def aggregate_metrics(df: pd.DataFrame, group: str = "model", decimals: Optional[int] = 2) -> pd.DataFrame:
    """
    Group results by model and return Mean ± Std string representations.
    """
    if df.empty:
        return df

    num_cols = [c for c in df.select_dtypes(include=[np.number]).columns
                if c not in _EXCLUDE_NUMERIC]

    means = df.groupby(group)[num_cols].mean()
    stds  = df.groupby(group)[num_cols].std()

    aggr = pd.DataFrame(index=means.index)
    for col in num_cols:
        aggr[col] = means[col].round(decimals).astype(str) + " ± " + stds[col].round(decimals).astype(str)

    aggr.reset_index(inplace=True)
    return aggr
