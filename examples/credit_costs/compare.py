"""
Compare plain learners with their MetaCost versions on a credit-style
problem where accepting a bad payer costs five times more than refusing
a good one.

    python examples/credit_costs/compare.py [--save results.png]
"""
import argparse

import numpy as np
from sklearn.datasets import make_classification
from sklearn.naive_bayes import GaussianNB
from sklearn.tree import DecisionTreeClassifier

from metacost.costs import CostMatrix
from metacost.evaluation import ModelSpec, metric_grid, run_cv
from metacost.model import MetaCostClassifier
from metacost.model.metrics import aggregate_metrics

# rows: actual (bad, good), columns: predicted (bad, good)
COSTS = CostMatrix([[0, 5], [1, 0]])


def make_data(n_samples=1000, seed=0):
    X, y = make_classification(
        n_samples=n_samples, n_features=10, n_informative=4,
        weights=[0.3, 0.7], class_sep=0.7, flip_y=0.05, random_state=seed,
    )
    return X, y


def main():
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--save", default=None, help="Save the metric plot to this path")
    parser.add_argument("--folds", type=int, default=5)
    args = parser.parse_args()

    X, y = make_data()
    print(f"Class counts: {np.bincount(y)}")

    specs = [
        ModelSpec("tree", DecisionTreeClassifier(min_samples_leaf=5, random_state=0)),
        ModelSpec("metacost(tree)", MetaCostClassifier(
            DecisionTreeClassifier(min_samples_leaf=5), cost_matrix=COSTS, n_iterations=10)),
        ModelSpec("nb", GaussianNB()),
        ModelSpec("metacost(nb)", MetaCostClassifier(GaussianNB(), cost_matrix=COSTS)),
    ]

    results = run_cv(X, y, specs, COSTS, cv=args.folds)
    print("\n", aggregate_metrics(results)[["model", "average cost", "accuracy"]])

    metric_grid(
        results, ["average cost", "accuracy"],
        order=[s.name for s in specs], save_path=args.save, show=args.save is None,
    )


if __name__ == "__main__":
    main()
