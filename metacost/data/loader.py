from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, Optional, Sequence, Union

import numpy as np
import pandas as pd

from .dataset import Attribute, Dataset

__all__ = ["from_frame", "make_csv_loader"]


def _encode_nominal(series: pd.Series, categories: Optional[Sequence] = None):
    """Encode a column as integer codes, NaN for missing values."""
    cat = pd.Categorical(series, categories=categories)
    codes = cat.codes.astype(float)
    codes[codes < 0] = np.nan
    return codes, tuple(str(c) for c in cat.categories)


def from_frame(
    df: pd.DataFrame,
    label_col: str = "label",
    feature_cols: Optional[Sequence[str]] = None,
    class_values: Optional[Sequence] = None,
    weight_col: Optional[str] = None,
    relation: Optional[str] = None,
) -> Dataset:
    """
    Convert a DataFrame into a ``Dataset``.

    Args:
        df: Source frame.
        label_col: Name of the nominal class column.
        feature_cols: Columns to keep as features. Defaults to every column
            except the label and weight columns.
        class_values: Ordered class labels. Defaults to the sorted labels
            present in ``df``. Fixing the order keeps a cost matrix aligned
            with the class indices.
        weight_col: Optional column of nonnegative instance weights.
        relation: Dataset name (used for on-demand cost lookup).

    Returns:
        A ``Dataset`` whose class attribute is the last attribute.
    """
    if label_col not in df.columns:
        raise KeyError(f"Label column '{label_col}' not found")
    if weight_col is not None and weight_col not in df.columns:
        raise KeyError(f"Weight column '{weight_col}' not found")

    if feature_cols is None:
        exclude = {c for c in (label_col, weight_col) if c}
        feature_cols = [c for c in df.columns if c not in exclude]
    else:
        feature_cols = list(feature_cols)
        missing = [c for c in feature_cols if c not in df.columns]
        if missing:
            raise KeyError(f"Missing feature columns: {missing}")

    attributes = []
    columns = []
    for col in feature_cols:
        s = df[col]
        if pd.api.types.is_numeric_dtype(s) and not pd.api.types.is_bool_dtype(s):
            attributes.append(Attribute(str(col)))
            columns.append(s.to_numpy(dtype=float, na_value=np.nan))
        else:
            codes, values = _encode_nominal(s)
            attributes.append(Attribute(str(col), values))
            columns.append(codes)

    labels = df[label_col]
    if labels.isna().any():
        raise ValueError(f"Label column '{label_col}' contains missing values")
    if class_values is None:
        class_values = sorted(labels.unique())
    y, values = _encode_nominal(labels, categories=list(class_values))
    if np.isnan(y).any():
        unknown = sorted(set(labels[np.isnan(y)].astype(str)))
        raise ValueError(f"Labels {unknown} are not among the class values {list(values)}")
    attributes.append(Attribute(str(label_col), values))

    X = np.column_stack(columns) if columns else np.empty((len(df), 0))
    weights = None if weight_col is None else df[weight_col].to_numpy(dtype=float)

    return Dataset(attributes, X, y, weights=weights, relation=relation or "dataset")


def make_csv_loader(
    label_col: str = "label",
    feature_cols: Optional[Sequence[str]] = None,
    class_values: Optional[Sequence] = None,
    weight_col: Optional[str] = None,
    new_features: Optional[Dict[str, Callable[[pd.DataFrame], pd.Series]]] = None,
    **read_csv_kwargs,
) -> Callable[[Union[str, Path]], Dataset]:
    """
    Creates a factory function to load CSV files into Datasets.

    Args:
        label_col: Name of the nominal class column.
        feature_cols: List of columns to keep as input features.
        class_values: Ordered class labels (see ``from_frame``).
        weight_col: Optional column holding instance weights.
        new_features: Dictionary of {new_col_name: function(df) -> series}.
        **read_csv_kwargs: Arguments for pd.read_csv (e.g. sep=';').

    Returns:
        A function `load(path)` returning a Dataset named after the file stem.
    """

    def load(path: Union[str, Path]) -> Dataset:
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        df = pd.read_csv(path, **read_csv_kwargs)

        # Derived features
        if new_features:
            for new_col_name, func in new_features.items():
                df[new_col_name] = func(df)

        if label_col not in df.columns:
            raise ValueError(f"Label column '{label_col}' not found in {path.name}.")

        return from_frame(
            df,
            label_col=label_col,
            feature_cols=feature_cols,
            class_values=class_values,
            weight_col=weight_col,
            relation=path.stem,
        )

    return load
