"""
Static matplotlib figures for the evaluation results.
"""

from typing import Mapping, Optional

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402

from ..ML.metrics import ConfusionMatrix  # noqa: E402


def plot_confusion_matrix(
    confusion: ConfusionMatrix,
    class_names: Optional[Mapping[int, str]] = None,
    normalize: bool = False,
    dataset: str = "testing",
):
    """Render the confusion matrix, optionally row-normalised (recall per cell)."""
    counts = confusion.matrix.astype(float)
    if normalize:
        rows = counts.sum(axis=1, keepdims=True)
        cm = np.divide(counts, rows, out=np.zeros_like(counts), where=rows != 0)
    else:
        cm = counts

    names = [
        class_names.get(code, str(code)) if class_names else str(code)
        for code in confusion.labels
    ]

    fig, ax = plt.subplots(figsize=(10, 8))
    im = ax.imshow(cm, interpolation="nearest", cmap=plt.cm.Blues)

    threshold = cm.max() / 2 if cm.size else 0
    for i in range(cm.shape[0]):
        for j in range(cm.shape[1]):
            ax.text(
                j,
                i,
                f"{cm[i, j]:.2f}" if normalize else f"{int(cm[i, j])}",
                ha="center",
                va="center",
                color="white" if cm[i, j] > threshold else "black",
            )

    ax.set_xticks(range(len(names)))
    ax.set_xticklabels(names, rotation=45, ha="right")
    ax.set_yticks(range(len(names)))
    ax.set_yticklabels(names)
    ax.set_xlabel("Predicted")
    ax.set_ylabel("Actual")
    ax.set_title(
        f"Confusion Matrix ({dataset}) - accuracy {confusion.accuracy():.3f}, "
        f"kappa {confusion.kappa():.3f}"
    )
    plt.colorbar(im, ax=ax, fraction=0.046, pad=0.04)
    plt.tight_layout()
    return fig, ax


def plot_feature_importances(importances: Mapping[str, float]):
    """Horizontal bar chart of predictor importances."""
    names = list(importances)
    values = [importances[name] for name in names]

    fig, ax = plt.subplots(figsize=(8, 5))
    ax.barh(names[::-1], values[::-1], color="seagreen")
    ax.set_xlabel("Impurity decrease")
    ax.set_title("CART predictor importance")
    ax.grid(alpha=0.3, axis="x")
    plt.tight_layout()
    return fig, ax
