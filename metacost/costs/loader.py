"""
Reading and writing cost files, and resolving the cost matrix for a build.

Cost file format::

    % optional comment lines start with '%'
    2 2
    0 1
    5 0

The first data line gives the number of rows and columns, followed by one
line per actual class.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from ..data.dataset import Dataset
from ..exceptions import ConfigurationError, CostMatrixNotFoundError
from .cost_matrix import CostMatrix

__all__ = [
    "FILE_EXTENSION",
    "parse_cost_matrix",
    "read_cost_matrix",
    "write_cost_matrix",
    "CostMatrixSource",
]

FILE_EXTENSION = ".cost"


def parse_cost_matrix(text: str) -> CostMatrix:
    """Parse the textual cost file format."""
    lines = [
        line.strip() for line in text.splitlines()
        if line.strip() and not line.strip().startswith("%")
    ]
    if not lines:
        raise ValueError("Cost file contains no data")

    header = lines[0].split()
    if len(header) != 2:
        raise ValueError(f"Expected '<rows> <cols>' header, got: {lines[0]!r}")
    try:
        n_rows, n_cols = int(header[0]), int(header[1])
    except ValueError:
        raise ValueError(f"Non-integer size header: {lines[0]!r}") from None

    body = lines[1:]
    if len(body) != n_rows:
        raise ValueError(f"Header declares {n_rows} rows, found {len(body)}")

    rows = []
    for k, line in enumerate(body):
        parts = line.split()
        if len(parts) != n_cols:
            raise ValueError(f"Row {k} has {len(parts)} values, expected {n_cols}")
        try:
            rows.append([float(v) for v in parts])
        except ValueError:
            raise ValueError(f"Non-numeric cost in row {k}: {line!r}") from None

    return CostMatrix(rows)


def read_cost_matrix(path: Union[str, Path]) -> CostMatrix:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Cost file not found: {path}")
    return parse_cost_matrix(path.read_text())


def write_cost_matrix(
    matrix: CostMatrix, path: Union[str, Path], comment: Optional[str] = None
) -> Path:
    path = Path(path)
    lines = []
    if comment:
        lines.extend(f"% {c}" for c in comment.splitlines())
    lines.append(f"{matrix.size} {matrix.size}")
    for row in matrix.as_array():
        lines.append(" ".join(f"{v:g}" for v in row))
    path.write_text("\n".join(lines) + "\n")
    return path


@dataclass(frozen=True)
class CostMatrixSource:
    """
    Where the cost matrix of a build comes from.

    Either an explicit ``matrix``, or a ``directory`` searched for a file
    named after the dataset's relation plus ``FILE_EXTENSION``.
    """

    matrix: Optional[CostMatrix] = None
    directory: Optional[Path] = None

    def __post_init__(self):
        if (self.matrix is None) == (self.directory is None):
            raise ConfigurationError(
                "A cost matrix source needs exactly one of 'matrix' or 'directory'"
            )

    @classmethod
    def supplied(cls, matrix) -> "CostMatrixSource":
        if not isinstance(matrix, CostMatrix):
            matrix = CostMatrix(matrix)
        return cls(matrix=matrix)

    @classmethod
    def on_demand(cls, directory: Union[str, Path] = ".") -> "CostMatrixSource":
        directory = Path(directory)
        if not directory.is_dir():
            directory = directory.parent
        return cls(directory=directory)

    @property
    def is_on_demand(self) -> bool:
        return self.directory is not None

    def path_for(self, dataset: Dataset) -> Path:
        return self.directory / f"{dataset.relation}{FILE_EXTENSION}"

    def resolve(self, dataset: Dataset) -> CostMatrix:
        if self.matrix is not None:
            return self.matrix
        path = self.path_for(dataset)
        if not path.exists():
            raise CostMatrixNotFoundError(f"On-demand cost file doesn't exist: {path}")
        return read_cost_matrix(path)
