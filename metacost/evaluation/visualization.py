"""
Visualization utilities for cost-sensitive model evaluation.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import seaborn as sns
from matplotlib.axes import Axes

from ..costs.cost_matrix import CostMatrix

__all__ = [
    "set_style",
    "metric_box",
    "metric_grid",
    "plot_cost_matrix",
    "save_confusion_matrix",
]


def set_style(style: str = "ticks", font_scale: float = 1.1):
    """Set the seaborn plotting style."""
    sns.set_theme(style=style, font_scale=font_scale)


# Set default style on import
set_style()


def metric_box(
    df: pd.DataFrame,
    metric: str,
    *,
    x: str = "model",
    order: Optional[Sequence[str]] = None,
    title: Optional[str] = None,
    ax: Optional[Axes] = None,
    grid_ax: Optional[str] = None,
    palette: str = 'tab10',
    type: str = "box"
) -> Axes:
    """
    Draw a box-plot (or bar-plot) of a specific metric by model.
    """
    ax = ax or plt.gca()
    if type == "box":
        sns.boxplot(
            data=df, x=x, y=metric, order=order, hue=x,
            ax=ax, width=0.5, palette=palette, showfliers=False
        )
    else: # bar
        sns.barplot(
            data=df, x=x, y=metric, order=order, hue=x,
            ax=ax, palette=palette, errorbar='sd'
        )
    ax.set_xlabel("")
    ax.set_ylabel(metric)
    ax.set_title(title or metric)

    if grid_ax is not None:
        ax.grid(axis=grid_ax, alpha=0.3)

    plt.setp(ax.get_xticklabels(), rotation=45, ha='right')
    sns.despine()
    return ax


def metric_grid(
    df: pd.DataFrame,
    metrics: List[str],
    *,
    order: Optional[List[str]] = None,
    n_cols: int = 2,
    figsize: Optional[Tuple[int, int]] = None,
    suptitle: Optional[str] = None,
    save_path: Optional[str] = None,
    show: bool = True,
    **kwargs
):
    """
    Display multiple metrics in a grid of boxplots. Returns the figure.
    """
    n = len(metrics)
    n_cols = max(1, n_cols)
    n_rows = (n + n_cols - 1) // n_cols

    fig, axs = plt.subplots(
        n_rows,
        n_cols,
        figsize=figsize or (4 * n_cols, 4 * n_rows),
        sharex=True,
        layout="constrained",
    )
    axs_flat = axs.flatten() if isinstance(axs, (list, np.ndarray)) else [axs]

    for ax, metric in zip(axs_flat, metrics):
        metric_box(df, metric, order=order, ax=ax, **kwargs)

    # Hide unused axes
    for ax in axs_flat[len(metrics):]:
        ax.set_visible(False)

    if suptitle:
        fig.suptitle(suptitle)

    if save_path:
        plt.savefig(save_path, bbox_inches="tight")

    if show:
        plt.show()
    return fig


def plot_cost_matrix(
    cost_matrix,
    labels: Optional[Sequence[str]] = None,
    *,
    ax: Optional[Axes] = None,
    title: str = "Cost Matrix",
    cmap: str = "Reds",
) -> Axes:
    """Heatmap of a cost matrix (rows = actual class, columns = predicted)."""
    if not isinstance(cost_matrix, CostMatrix):
        cost_matrix = CostMatrix(cost_matrix)
    if labels is None:
        labels = [str(i) for i in range(cost_matrix.size)]

    ax = ax or plt.gca()
    sns.heatmap(cost_matrix.as_array(), annot=True, fmt="g", cmap=cmap, cbar=False, ax=ax,
                xticklabels=labels, yticklabels=labels)
    ax.set_xlabel("Predicted")
    ax.set_ylabel("Actual")
    ax.set_title(title)
    return ax


def save_confusion_matrix(
    cm: np.ndarray,
    labels: Optional[Sequence[str]] = None,
    save_path: Optional[str] = None,
    show: bool = True,
):
    """Plot and save a simple heatmap for a Confusion Matrix."""
    cm = np.asarray(cm)
    if labels is None:
        labels = [str(i) for i in range(len(cm))]
    fig, ax = plt.subplots(figsize=(4, 3), dpi=150)
    sns.heatmap(cm, annot=True, fmt="g", cmap="Blues", cbar=False, ax=ax,
                xticklabels=labels, yticklabels=labels)
    ax.set_xlabel("Predicted")
    ax.set_ylabel("True")

    if save_path:
        plt.savefig(save_path, bbox_inches="tight")
    if show:
        plt.show()
    return fig
