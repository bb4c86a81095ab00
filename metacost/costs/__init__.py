from .cost_matrix import CostMatrix
from .loader import (
    FILE_EXTENSION,
    CostMatrixSource,
    parse_cost_matrix,
    read_cost_matrix,
    write_cost_matrix,
)

__all__ = [
    "CostMatrix",
    "CostMatrixSource",
    "FILE_EXTENSION",
    "parse_cost_matrix",
    "read_cost_matrix",
    "write_cost_matrix",
]
