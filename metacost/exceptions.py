"""
Exception hierarchy for the MetaCost package.

Errors raised by a base learner while it trains are not wrapped: they
propagate to the caller unchanged.
"""

from sklearn.exceptions import NotFittedError

__all__ = [
    "MetaCostError",
    "ConfigurationError",
    "CostMatrixNotFoundError",
    "UnsupportedClassTypeError",
    "DimensionMismatchError",
    "EmptyDatasetError",
    "NotBuiltError",
]


class MetaCostError(Exception):
    """Base class for all errors raised by this package."""


class ConfigurationError(MetaCostError, ValueError):
    """Invalid iteration count, bag size or cost matrix source."""


class CostMatrixNotFoundError(ConfigurationError):
    """An on-demand cost file could not be found."""


class UnsupportedClassTypeError(MetaCostError, ValueError):
    """The class attribute of a dataset is not nominal."""


class DimensionMismatchError(MetaCostError, ValueError):
    """A cost matrix, distribution or dataset disagree on the number of classes."""


class EmptyDatasetError(MetaCostError, ValueError):
    """An operation needs at least one instance."""


class NotBuiltError(MetaCostError, NotFittedError):
    """A model was queried before a successful build."""
