import numpy as np
import pytest
from sklearn.tree import DecisionTreeClassifier

from metacost.costs import CostMatrix, CostMatrixSource
from metacost.data import Dataset
from metacost.ensemble import BaggedEnsemble
from metacost.exceptions import (
    ConfigurationError,
    CostMatrixNotFoundError,
    DimensionMismatchError,
    NotBuiltError,
    UnsupportedClassTypeError,
)
from metacost.model import MetaCost, MetaCostConfig, sklearn_factory

ASYMMETRIC = [[0, 1], [5, 0]]


def test_asymmetric_costs_relabel_both_kinds(two_instance_kinds, scripted):
    # A: [0.6, 0.4] -> costs [2.0, 0.6]; B: [0.3, 0.7] -> costs [3.5, 0.3]
    factory = scripted({0: [0.6, 0.4], 1: [0.3, 0.7]})
    mc = MetaCost(factory, MetaCostConfig(iterations=3)).build(two_instance_kinds, ASYMMETRIC)

    assert list(mc.relabeled_labels_) == [1, 1, 1, 1]
    assert mc.n_relabeled_ == 2
    final = factory.created[-1]
    assert list(final.trained_on.labels) == [1, 1, 1, 1]
    assert len(factory.created) == 4


def test_ties_go_to_lowest_class(two_instance_kinds, scripted):
    for _ in range(3):
        factory = scripted({0: [0.5, 0.5], 1: [0.5, 0.5]})
        mc = MetaCost(factory).build(two_instance_kinds, CostMatrix.zero_one(2))
        assert list(mc.relabeled_labels_) == [0, 0, 0, 0]


def test_equal_costs_reduce_to_argmax(scripted):
    table = {0: [0.2, 0.5, 0.3], 1: [0.7, 0.1, 0.2], 2: [0.1, 0.1, 0.8], 3: [0.3, 0.3, 0.4]}
    X = np.array([[0.0], [1.0], [2.0], [3.0]])
    data = Dataset.from_arrays(X, [0, 0, 1, 2], class_values=[0, 1, 2])
    costs = CostMatrix([[0, 3, 3], [3, 0, 3], [3, 3, 0]])

    ensemble = BaggedEnsemble().build(data, scripted(table), iterations=2)
    relabeled = MetaCost.relabel(data, ensemble, costs)

    expected = np.argmax(ensemble.predict_distributions(data), axis=1)
    assert np.array_equal(relabeled.labels, expected)
    assert list(relabeled.labels) == [1, 0, 2, 2]


def test_equal_costs_reduce_to_argmax_with_trees(three_class_data):
    factory = sklearn_factory(DecisionTreeClassifier(max_depth=2))
    ensemble = BaggedEnsemble().build(three_class_data, factory, iterations=5, seed=3)
    relabeled = MetaCost.relabel(three_class_data, ensemble, CostMatrix.zero_one(3))
    dists = ensemble.predict_distributions(three_class_data)
    chosen = dists[np.arange(len(dists)), relabeled.labels]
    assert np.allclose(chosen, dists.max(axis=1))


def test_build_is_deterministic(three_class_data):
    costs = [[0, 1, 4], [2, 0, 1], [8, 1, 0]]
    config = MetaCostConfig(iterations=5, bag_size_percent=80, seed=7)

    runs = [
        MetaCost(sklearn_factory(DecisionTreeClassifier()), config).build(three_class_data, costs)
        for _ in range(2)
    ]
    assert np.array_equal(runs[0].relabeled_labels_, runs[1].relabeled_labels_)


def test_original_dataset_untouched(three_class_data):
    X_before = three_class_data.X.copy()
    y_before = three_class_data.y.copy()
    costs = [[0, 50, 50], [1, 0, 1], [1, 1, 0]]

    mc = MetaCost(sklearn_factory(DecisionTreeClassifier()), MetaCostConfig(iterations=3))
    mc.build(three_class_data, costs)

    assert mc.n_relabeled_ > 0
    assert np.array_equal(three_class_data.y, y_before)
    assert np.array_equal(three_class_data.X, X_before)


def test_numeric_class_rejected(scripted):
    data = Dataset.from_arrays([[0.0], [1.0]], [0.5, 1.5], class_values=False)
    mc = MetaCost(scripted({0: [1.0], 1: [1.0]}))
    with pytest.raises(UnsupportedClassTypeError):
        mc.build(data, [[0]])


def test_cost_matrix_size_mismatch(two_instance_kinds, scripted):
    mc = MetaCost(scripted({0: [0.5, 0.5], 1: [0.5, 0.5]}))
    with pytest.raises(DimensionMismatchError):
        mc.build(two_instance_kinds, CostMatrix.zero_one(3))


def test_no_cost_source(two_instance_kinds, scripted):
    mc = MetaCost(scripted({0: [0.5, 0.5], 1: [0.5, 0.5]}))
    with pytest.raises(ConfigurationError):
        mc.build(two_instance_kinds)


@pytest.mark.parametrize("config", [
    MetaCostConfig(iterations=0),
    MetaCostConfig(bag_size_percent=0),
    MetaCostConfig(iterations=2.5),
])
def test_invalid_config(two_instance_kinds, scripted, config):
    mc = MetaCost(scripted({0: [0.5, 0.5], 1: [0.5, 0.5]}), config)
    with pytest.raises(ConfigurationError):
        mc.build(two_instance_kinds, ASYMMETRIC)


def test_cost_matrix_loaded_on_demand(two_instance_kinds, scripted, cost_dir):
    config = MetaCostConfig(iterations=2, cost_source=CostMatrixSource.on_demand(cost_dir))
    mc = MetaCost(scripted({0: [0.6, 0.4], 1: [0.3, 0.7]}), config).build(two_instance_kinds)
    assert mc.cost_matrix_ == CostMatrix(ASYMMETRIC)
    assert list(mc.relabeled_labels_) == [1, 1, 1, 1]


def test_on_demand_file_missing(tmp_path, two_instance_kinds, scripted):
    config = MetaCostConfig(cost_source=CostMatrixSource.on_demand(tmp_path))
    mc = MetaCost(scripted({0: [0.5, 0.5], 1: [0.5, 0.5]}), config)
    with pytest.raises(CostMatrixNotFoundError):
        mc.build(two_instance_kinds)


def test_explicit_matrix_overrides_source(two_instance_kinds, scripted, cost_dir):
    config = MetaCostConfig(iterations=2, cost_source=CostMatrixSource.on_demand(cost_dir))
    mc = MetaCost(scripted({0: [0.6, 0.4], 1: [0.3, 0.7]}), config)
    mc.build(two_instance_kinds, CostMatrix.zero_one(2))
    assert list(mc.relabeled_labels_) == [0, 0, 1, 1]


def test_classify_delegates_to_final_model(two_instance_kinds, scripted):
    base = scripted({0: [0.6, 0.4], 1: [0.3, 0.7]})
    final = scripted({0: [0.9, 0.1], 1: [0.2, 0.8]})
    mc = MetaCost(base, MetaCostConfig(iterations=2), final_factory=final)
    mc.build(two_instance_kinds, ASYMMETRIC)

    # The final model alone decides, without any cost adjustment
    assert mc.classify(two_instance_kinds.instance(0)) == 0
    assert mc.classify(two_instance_kinds.instance(2)) == 1
    assert np.allclose(mc.predict_distribution(two_instance_kinds.instance(0)), [0.9, 0.1])
    assert len(final.created) == 1
    assert list(final.created[0].trained_on.labels) == [1, 1, 1, 1]


def test_not_built(two_instance_kinds, scripted):
    mc = MetaCost(scripted({0: [0.5, 0.5], 1: [0.5, 0.5]}))
    assert not mc.is_built
    with pytest.raises(NotBuiltError):
        mc.classify(two_instance_kinds.instance(0))
    assert mc.describe() == "MetaCost: No model built yet."


def test_training_failure_leaves_nothing_callable(two_instance_kinds, scripted):
    mc = MetaCost(scripted({0: [0.6, 0.4], 1: [0.3, 0.7]}), MetaCostConfig(iterations=2))
    mc.build(two_instance_kinds, ASYMMETRIC)
    assert mc.is_built

    mc.base_factory = scripted({0: [0.6, 0.4], 1: [0.3, 0.7]}, fail_on=1)
    with pytest.raises(RuntimeError, match="scripted training failure"):
        mc.build(two_instance_kinds, ASYMMETRIC)
    assert not mc.is_built
    with pytest.raises(NotBuiltError):
        mc.classify(two_instance_kinds.instance(0))


def test_final_training_failure(two_instance_kinds, scripted):
    # Members 0 and 1 are the bags; the third learner is the final model
    factory = scripted({0: [0.6, 0.4], 1: [0.3, 0.7]}, fail_on=2)
    mc = MetaCost(factory, MetaCostConfig(iterations=2))
    with pytest.raises(RuntimeError):
        mc.build(two_instance_kinds, ASYMMETRIC)
    assert not mc.is_built


def test_describe(two_instance_kinds, scripted):
    mc = MetaCost(scripted({0: [0.6, 0.4], 1: [0.3, 0.7]}), MetaCostConfig(iterations=2))
    mc.build(two_instance_kinds, ASYMMETRIC)
    text = mc.describe()
    assert text.startswith("MetaCost cost sensitive classifier induction")
    assert "iterations=2" in text
    assert "Cost Matrix" in text
