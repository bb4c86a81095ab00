import numpy as np
import pandas as pd
import pytest

from metacost.data import Attribute, Dataset, Instance, from_frame, make_csv_loader
from metacost.exceptions import DimensionMismatchError


def test_from_arrays_encodes_labels():
    data = Dataset.from_arrays([[1.0], [2.0], [3.0]], ["b", "a", "b"])
    assert data.class_attribute.values == ("a", "b")
    assert data.num_classes == 2
    assert list(data.labels) == [1, 0, 1]
    assert np.array_equal(data.weights, np.ones(3))


def test_from_arrays_rejects_unknown_labels():
    with pytest.raises(ValueError):
        Dataset.from_arrays([[1.0], [2.0]], ["a", "c"], class_values=["a", "b"])


def test_numeric_class():
    data = Dataset.from_arrays([[1.0], [2.0]], [0.5, 1.5], class_values=False)
    assert not data.class_attribute.is_nominal
    assert data.num_classes == 0


def test_shape_validation():
    attrs = [Attribute("x"), Attribute("class", ("0", "1"))]
    with pytest.raises(DimensionMismatchError):
        Dataset(attrs, np.zeros((3, 2)), [0, 1, 0])
    with pytest.raises(DimensionMismatchError):
        Dataset(attrs, np.zeros((3, 1)), [0, 1])
    with pytest.raises(ValueError):
        Dataset(attrs, np.zeros((2, 1)), [0, 1], weights=[1.0, -1.0])


def test_copy_is_independent(two_instance_kinds):
    copy = two_instance_kinds.copy()
    copy.set_class_value(0, 1)
    copy.X[0, 0] = 42.0
    copy.weights[0] = 3.0
    assert two_instance_kinds.labels[0] == 0
    assert two_instance_kinds.X[0, 0] == 0.0
    assert two_instance_kinds.weights[0] == 1.0


def test_take_allows_repeats(two_instance_kinds):
    sub = two_instance_kinds.take([3, 3, 0])
    assert len(sub) == 3
    assert list(sub.labels) == [1, 1, 0]
    assert sub.relation == "toy"


def test_set_class_value_range(two_instance_kinds):
    with pytest.raises(ValueError):
        two_instance_kinds.set_class_value(0, 2)


def test_instances_and_missing_values():
    data = Dataset.from_arrays([[1.0, np.nan]], [0])
    inst = data.instance(0)
    assert isinstance(inst, Instance)
    assert inst.is_missing(1)
    assert not inst.is_missing(0)
    assert [i.label for i in data] == [0.0]


def test_from_frame_nominal_and_missing(credit_frame):
    data = from_frame(credit_frame, weight_col="weight", relation="credit")

    names = [a.name for a in data.feature_attributes]
    assert names == ["income", "housing"]
    housing = data.feature_attributes[1]
    assert housing.is_nominal
    assert set(housing.values) == {"free", "own", "rent"}

    # Missing numeric and nominal values become NaN, never zero
    assert np.isnan(data.X[2, 0])
    assert np.isnan(data.X[3, 1])

    assert data.class_attribute.values == ("bad", "good")
    assert np.array_equal(data.weights, credit_frame["weight"].to_numpy())
    assert data.relation == "credit"


def test_from_frame_class_order(credit_frame):
    data = from_frame(credit_frame, class_values=["good", "bad"])
    assert list(data.labels) == [0, 1, 0, 0, 1, 0]


def test_from_frame_errors(credit_frame):
    with pytest.raises(KeyError):
        from_frame(credit_frame, label_col="target")
    with pytest.raises(KeyError):
        from_frame(credit_frame, feature_cols=["age"])
    bad = credit_frame.copy()
    bad.loc[0, "label"] = None
    with pytest.raises(ValueError):
        from_frame(bad)


def test_csv_loader(tmp_path, credit_frame):
    path = tmp_path / "credit.csv"
    credit_frame.to_csv(path, index=False)

    loader = make_csv_loader(
        label_col="label",
        weight_col="weight",
        new_features={"log_income": lambda df: np.log1p(df.income)},
    )
    data = loader(path)

    assert data.relation == "credit"
    assert [a.name for a in data.feature_attributes] == ["income", "housing", "log_income"]
    assert len(data) == len(credit_frame)


def test_csv_loader_missing(tmp_path):
    loader = make_csv_loader()
    with pytest.raises(FileNotFoundError):
        loader(tmp_path / "missing.csv")

    path = tmp_path / "nolabel.csv"
    pd.DataFrame({"x": [1, 2]}).to_csv(path, index=False)
    with pytest.raises(ValueError):
        loader(path)
