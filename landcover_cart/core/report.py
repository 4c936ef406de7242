"""
Text and JSON reports of an analysis run.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Union

import pandas as pd

from ..ML.misclassification import summarize_errors

if TYPE_CHECKING:
    from .main import AnalysisResult

logger = logging.getLogger(__name__)


def _named(values: Dict[int, Any], result: "AnalysisResult") -> Dict[str, Any]:
    return {result.encoding.decode(code): value for code, value in values.items()}


def report_dict(result: "AnalysisResult") -> Dict[str, Any]:
    """JSON-serialisable summary of a run."""
    metrics = result.evaluation.metrics
    names = {code: result.encoding.decode(code) for code in result.evaluation.confusion.labels}
    return {
        "config_hash": result.config_hash,
        "unique_labels": list(result.encoding.labels),
        "encoding": result.encoding.to_dict(),
        "sizes": {
            "dataset": len(result.dataset),
            "training": len(result.splits.training),
            "testing": len(result.splits.testing),
            "misclassified": len(result.evaluation.misclassified),
            "misclassification_types": len(metrics["misclassification_types"]),
        },
        "training_points_per_class": result.training_counts,
        "confusion_matrix": {
            "labels": [names[code] for code in result.evaluation.confusion.labels],
            "matrix": result.evaluation.confusion.matrix.tolist(),
        },
        "accuracy": metrics["accuracy"],
        "kappa": metrics["kappa"],
        "producers_accuracy": _named(metrics["producers_accuracy"], result),
        "consumers_accuracy": _named(metrics["consumers_accuracy"], result),
        "misclassified_by_class": _named(metrics["misclassified_by_class"], result),
        "total_per_class": _named(metrics["total_per_class"], result),
        "misclassification_rates": _named(metrics["misclassification_rates"], result),
        "misclassification_types": metrics["misclassification_types"],
        "displayed_error_types": list(result.error_descriptors),
        "feature_importances": result.feature_importances,
    }


def format_report(result: "AnalysisResult") -> str:
    """Human readable report of a run."""
    metrics = result.evaluation.metrics
    confusion = result.evaluation.confusion
    names = {code: result.encoding.decode(code) for code in confusion.labels}
    accuracy_table = pd.DataFrame({
        "producers_accuracy": pd.Series(_named(metrics["producers_accuracy"], result)),
        "consumers_accuracy": pd.Series(_named(metrics["consumers_accuracy"], result)),
    })
    error_table = summarize_errors(
        result.evaluation.classified,
        result.evaluation.misclassified,
        encoding=result.encoding,
        target_column=result.model.class_property,
    )
    types = metrics["misclassification_types"]

    lines = [
        "=" * 60,
        "Land cover CART classification report",
        "=" * 60,
        f"Unique labels: {list(result.encoding.labels)}",
        f"Encoding: {result.encoding.to_dict()}",
        f"Training points per class: {result.training_counts}",
        f"Size of dataset: {len(result.dataset)}",
        f"Size of training set: {len(result.splits.training)}",
        f"Size of testing set: {len(result.splits.testing)}",
        "",
        "Confusion matrix (rows actual, columns predicted):",
        confusion.to_dataframe(names).to_string(),
        "",
        f"Overall accuracy: {metrics['accuracy']:.4f}",
        f"Kappa coefficient: {metrics['kappa']:.4f}",
        "",
        "Per-class accuracy:",
        accuracy_table.to_string(float_format=lambda v: f"{v:.4f}"),
        "",
        "Misclassification by class:",
        error_table.to_string(index=False, float_format=lambda v: f"{v:.4f}"),
        "",
        f"Misclassified points: {len(result.evaluation.misclassified)}",
        f"Misclassification types ({len(types)}):",
    ]
    lines.extend(f"  {descriptor}: {count}" for descriptor, count in types.items())
    if result.feature_importances:
        lines.append("")
        lines.append("Predictor importance:")
        lines.extend(f"  {name}: {value:.4f}" for name, value in result.feature_importances.items())
    return "\n".join(lines)


def print_report(result: "AnalysisResult") -> None:
    print(format_report(result))


def save_report(result: "AnalysisResult", path: Union[str, Path]) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(report_dict(result), f, indent=2)
    logger.info(f"Report saved to: {path}")
    return path
