import pytest
import pandas as pd
import numpy as np
from sklearn.datasets import make_classification

from metacost.data import Dataset
from metacost.exceptions import NotBuiltError


class ScriptedLearner:
    """
    Learner whose distribution is looked up from a table keyed on the
    first feature value. Training only records the data it saw.
    """

    def __init__(self, table, fail=False):
        self.table = table
        self.fail = fail
        self.trained_on = None

    def train(self, dataset):
        if self.fail:
            raise RuntimeError("scripted training failure")
        self.trained_on = dataset.copy()

    def predict_distribution(self, instance):
        if self.trained_on is None:
            raise NotBuiltError("not trained")
        return np.array(self.table[int(instance.values[0])], dtype=float)


class ScriptedFactory:
    """Zero-argument factory keeping every learner it created."""

    def __init__(self, table, fail_on=None):
        self.table = table
        self.fail_on = fail_on
        self.created = []

    def __call__(self):
        learner = ScriptedLearner(self.table, fail=len(self.created) == self.fail_on)
        self.created.append(learner)
        return learner


class FrequencyLearner:
    """Predicts the weighted class frequencies of its training sample."""

    def __init__(self):
        self.random_state = None
        self.dist_ = None

    def train(self, dataset):
        counts = np.bincount(dataset.labels, weights=dataset.weights, minlength=dataset.num_classes)
        self.dist_ = counts / counts.sum()

    def predict_distribution(self, instance):
        return self.dist_.copy()


@pytest.fixture
def scripted():
    """Returns the ScriptedFactory class."""
    return ScriptedFactory


@pytest.fixture
def frequency_learner():
    return FrequencyLearner


@pytest.fixture
def two_instance_kinds():
    """
    Four instances of two kinds: A (x=0) and B (x=1), two of each, with
    both classes present.
    """
    X = np.array([[0.0], [0.0], [1.0], [1.0]])
    y = np.array([0, 1, 0, 1])
    return Dataset.from_arrays(X, y, class_values=[0, 1], relation="toy")


@pytest.fixture
def three_class_data():
    """A 3-class synthetic classification problem as a Dataset."""
    X, y = make_classification(
        n_samples=150, n_features=5, n_informative=3, n_redundant=0,
        n_classes=3, n_clusters_per_class=1, random_state=0,
    )
    return Dataset.from_arrays(X, y, relation="synthetic")


@pytest.fixture
def imbalanced_xy():
    """Imbalanced, noisy binary problem as (X, y)."""
    return make_classification(
        n_samples=300, n_features=6, n_informative=3, weights=[0.8, 0.2],
        class_sep=0.6, flip_y=0.05, random_state=42,
    )


@pytest.fixture
def credit_frame():
    """Small frame with numeric, nominal and missing values."""
    return pd.DataFrame({
        "income": [1200.0, 560.0, np.nan, 3100.0, 870.0, 2400.0],
        "housing": ["own", "rent", "rent", None, "own", "free"],
        "weight": [1.0, 1.0, 2.0, 1.0, 0.5, 1.0],
        "label": ["good", "bad", "good", "good", "bad", "good"],
    })


@pytest.fixture
def cost_dir(tmp_path):
    """Directory with a cost file for the 'toy' relation."""
    d = tmp_path / "costs"
    d.mkdir()
    (d / "toy.cost").write_text("% toy costs\n2 2\n0 1\n5 0\n")
    return d
