"""
Experiment runner: fit several models and score them under a cost matrix.
"""

from __future__ import annotations
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional
import numpy as np
import pandas as pd
from sklearn.base import BaseEstimator, clone
from sklearn.metrics import confusion_matrix

from ..costs.cost_matrix import CostMatrix
from ..model.metrics import compute_metrics_from_cm

__all__ = ["ModelSpec", "run_experiment"]

@dataclass
class ModelSpec:
    name: str
    estimator: BaseEstimator
    params: Optional[Dict[str, Any]] = None
    def clone(self):
        return ModelSpec(self.name, clone(self.estimator), self.params)

def _train_models(X_train, y_train, specs, verbose):
    trained = {}
    if verbose: print(f"TRAINING {len(specs)} models...")
    for spec in specs:
        model = clone(spec.estimator)
        if spec.params:
            model.set_params(**spec.params)
        start = time.perf_counter()
        model.fit(X_train, y_train)
        trained[spec.name] = (model, time.perf_counter() - start)
    return trained

def run_experiment(
    X_train: np.ndarray,
    y_train: np.ndarray,
    X_test: np.ndarray,
    y_test: np.ndarray,
    model_specs: List[ModelSpec],
    cost_matrix=None,
    *,
    labels=None,
    verbose: bool = True
) -> pd.DataFrame:
    """
    Train every model on the training split and score it on the test split.

    Parameters
    ----------
    cost_matrix : CostMatrix or array-like, optional
        Costs indexed in the order of ``labels``. Defaults to unit costs.
    labels : array-like, optional
        Class labels in cost matrix order. Defaults to the sorted union of
        training and test labels.

    Returns
    -------
    pd.DataFrame
        One row per model with the registered metrics and fit time.
    """
    if labels is None:
        labels = np.unique(np.concatenate([np.asarray(y_train), np.asarray(y_test)]))
    if cost_matrix is None:
        cost_matrix = CostMatrix.zero_one(len(labels))

    trained_models = _train_models(X_train, y_train, model_specs, verbose=verbose)
    metrics_rows = []

    if verbose: print(f"\nTESTING on {len(y_test)} samples...")

    for name, (model, fit_time) in trained_models.items():
        if verbose: print(f"  Evaluating {name}...", end=" ", flush=True)
        y_pred = model.predict(X_test)
        cm = confusion_matrix(y_test, y_pred, labels=labels)

        row = compute_metrics_from_cm(cm, cost_matrix, runtime=fit_time)
        row["model"] = name
        metrics_rows.append(row)
        if verbose: print("Done.")

    df = pd.DataFrame(metrics_rows)
    cols = ["model"] + [c for c in df.columns if c != "model"]
    return df[cols]
