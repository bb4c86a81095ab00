"""
Stratified cross-validation of cost-sensitive models.
"""

from __future__ import annotations

import numpy as np
import pandas as pd
from typing import List
from sklearn.model_selection import StratifiedKFold

from ..costs.cost_matrix import CostMatrix
from .tester import run_experiment, ModelSpec

__all__ = ["run_cv"]


def run_cv(
    X: np.ndarray,
    y: np.ndarray,
    model_specs: List[ModelSpec],
    cost_matrix=None,
    cv: int = 5,
    random_state: int = 42,
    verbose: bool = True,
) -> pd.DataFrame:
    """
    Orchestrate a stratified K-fold experiment.

    1. Splits samples into K stratified folds.
    2. For each fold, trains every model on K-1 folds and scores it on the
       held-out fold under ``cost_matrix``.
    3. Aggregates results into a single DataFrame with a 'fold' column.

    Parameters
    ----------
    X, y : array-like
        Features and labels.
    model_specs : list[ModelSpec]
        Models to evaluate.
    cost_matrix : CostMatrix or array-like, optional
        Costs in the order of ``np.unique(y)``. Defaults to unit costs.
    cv : int
        Number of folds.

    Returns
    -------
    pd.DataFrame
        Combined results suitable for statistical analysis.
    """
    X = np.asarray(X)
    y = np.asarray(y)
    labels = np.unique(y)

    if cost_matrix is None:
        cost_matrix = CostMatrix.zero_one(len(labels))

    # Handle case where the smallest class cannot populate every fold
    min_count = np.bincount(np.searchsorted(labels, y)).min()
    if min_count < cv:
        raise ValueError(
            f"Cannot perform {cv}-fold CV: the smallest class has only {min_count} samples."
        )

    skf = StratifiedKFold(n_splits=cv, shuffle=True, random_state=random_state)

    all_results = []

    for fold_idx, (train_idx, test_idx) in enumerate(skf.split(X, y), start=1):
        if verbose:
            print(f"\n=== Fold {fold_idx}/{cv} ===")
            print(f"  Train Samples: {len(train_idx)} | Test Samples: {len(test_idx)}")

        fold_results = run_experiment(
            X[train_idx],
            y[train_idx],
            X[test_idx],
            y[test_idx],
            model_specs=model_specs,
            cost_matrix=cost_matrix,
            labels=labels,
            verbose=False,
        )

        # Tag with fold index
        fold_results["fold"] = fold_idx
        all_results.append(fold_results)

        if verbose:
            print("  Fold Results (Average Cost):")
            print(fold_results.groupby("model")["average cost"].mean())

    final_df = pd.concat(all_results, ignore_index=True)
    return final_df
