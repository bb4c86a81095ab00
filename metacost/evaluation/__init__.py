from .tester import run_experiment, ModelSpec
from .cross_validation import run_cv
from .visualization import (
    metric_box,
    metric_grid,
    plot_cost_matrix,
    save_confusion_matrix,
)

__all__ = [
    "run_experiment",
    "ModelSpec",
    "run_cv",
    "metric_box",
    "metric_grid",
    "plot_cost_matrix",
    "save_confusion_matrix",
]
