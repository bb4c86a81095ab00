"""
Cost-sensitive classification by relabelling (MetaCost).
"""

from .costs import CostMatrix, CostMatrixSource, read_cost_matrix, write_cost_matrix
from .data import Attribute, Dataset, Instance, from_frame
from .ensemble import BaggedEnsemble, BootstrapSampler
from .exceptions import (
    ConfigurationError,
    CostMatrixNotFoundError,
    DimensionMismatchError,
    EmptyDatasetError,
    MetaCostError,
    NotBuiltError,
    UnsupportedClassTypeError,
)
from .model import MetaCost, MetaCostClassifier, MetaCostConfig, SklearnLearner, sklearn_factory

__version__ = "0.1.0"

__all__ = [
    "CostMatrix",
    "CostMatrixSource",
    "read_cost_matrix",
    "write_cost_matrix",
    "Attribute",
    "Dataset",
    "Instance",
    "from_frame",
    "BaggedEnsemble",
    "BootstrapSampler",
    "MetaCost",
    "MetaCostClassifier",
    "MetaCostConfig",
    "SklearnLearner",
    "sklearn_factory",
    "MetaCostError",
    "ConfigurationError",
    "CostMatrixNotFoundError",
    "DimensionMismatchError",
    "EmptyDatasetError",
    "NotBuiltError",
    "UnsupportedClassTypeError",
]
