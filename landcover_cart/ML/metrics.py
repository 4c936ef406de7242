"""
Confusion matrix and the accuracy statistics derived from it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Mapping, Optional, Sequence, Tuple

import numpy as np
import pandas as pd
from sklearn.metrics import confusion_matrix

from ..exceptions import ValidationError


def _safe_ratio(numerator: np.ndarray, denominator: np.ndarray) -> np.ndarray:
    """Element-wise ratio with 0.0 where the denominator is zero."""
    numerator = np.asarray(numerator, dtype=float)
    denominator = np.asarray(denominator, dtype=float)
    out = np.zeros_like(numerator, dtype=float)
    np.divide(numerator, denominator, out=out, where=denominator != 0)
    return out


@dataclass(frozen=True)
class ConfusionMatrix:
    """
    Square count matrix of (actual, predicted) pairs.

    Rows are actual classes and columns predicted classes, both ordered by
    ``labels`` (encoded class codes).
    """

    matrix: np.ndarray
    labels: Tuple[int, ...]

    def __post_init__(self):
        matrix = np.asarray(self.matrix)
        if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
            raise ValidationError(f"Confusion matrix must be square, got shape {matrix.shape}")
        if matrix.shape[0] != len(self.labels):
            raise ValidationError(
                f"Matrix size {matrix.shape[0]} does not match {len(self.labels)} labels"
            )
        if (matrix < 0).any():
            raise ValidationError("Confusion matrix counts must be non-negative")
        object.__setattr__(self, "matrix", matrix.astype(np.int64))
        object.__setattr__(self, "labels", tuple(int(label) for label in self.labels))

    @classmethod
    def from_labels(
        cls,
        actual: Sequence[int],
        predicted: Sequence[int],
        labels: Optional[Sequence[int]] = None,
    ) -> "ConfusionMatrix":
        """
        Count (actual, predicted) pairs.

        When ``labels`` is None the matrix covers every code observed in either
        sequence, sorted.
        """
        actual = np.asarray(actual, dtype=int)
        predicted = np.asarray(predicted, dtype=int)
        if actual.shape != predicted.shape:
            raise ValidationError("actual and predicted must have the same length")
        if labels is None:
            labels = np.unique(np.concatenate([actual, predicted]))
        labels = [int(label) for label in labels]
        if not labels:
            return cls(np.zeros((0, 0), dtype=np.int64), ())
        matrix = confusion_matrix(actual, predicted, labels=labels)
        return cls(matrix, tuple(labels))

    @classmethod
    def from_array(cls, matrix, labels: Optional[Sequence[int]] = None) -> "ConfusionMatrix":
        matrix = np.asarray(matrix)
        if labels is None:
            labels = range(matrix.shape[0])
        return cls(matrix, tuple(labels))

    # ------------------------------------------------------------------ #
    # Totals
    # ------------------------------------------------------------------ #
    @property
    def total(self) -> int:
        return int(self.matrix.sum())

    @property
    def correct(self) -> int:
        return int(np.trace(self.matrix))

    @property
    def row_sums(self) -> np.ndarray:
        return self.matrix.sum(axis=1)

    @property
    def col_sums(self) -> np.ndarray:
        return self.matrix.sum(axis=0)

    def index_of(self, code: int) -> int:
        try:
            return self.labels.index(int(code))
        except ValueError:
            raise ValidationError(f"Class {code} is not in the confusion matrix") from None

    # ------------------------------------------------------------------ #
    # Statistics
    # ------------------------------------------------------------------ #
    def accuracy(self) -> float:
        """Overall accuracy, trace / total. 0.0 for an empty matrix."""
        if self.total == 0:
            return 0.0
        return self.correct / self.total

    def expected_agreement(self) -> float:
        total = self.total
        if total == 0:
            return 0.0
        return float((self.row_sums * self.col_sums).sum()) / float(total * total)

    def kappa(self) -> float:
        """
        Cohen's kappa, (p_o - p_e) / (1 - p_e).

        When chance agreement is total (a single class everywhere) kappa is
        1.0 for perfect agreement and 0.0 otherwise.
        """
        if self.total == 0:
            return 0.0
        observed = self.accuracy()
        expected = self.expected_agreement()
        if np.isclose(expected, 1.0):
            return 1.0 if np.isclose(observed, 1.0) else 0.0
        return (observed - expected) / (1.0 - expected)

    def producers_accuracy(self) -> Dict[int, float]:
        """Recall per class, M[c][c] / row_sum(c)."""
        values = _safe_ratio(np.diag(self.matrix), self.row_sums)
        return dict(zip(self.labels, values.tolist()))

    def consumers_accuracy(self) -> Dict[int, float]:
        """Precision per class, M[c][c] / col_sum(c)."""
        values = _safe_ratio(np.diag(self.matrix), self.col_sums)
        return dict(zip(self.labels, values.tolist()))

    def to_dataframe(self, names: Optional[Mapping[int, str]] = None) -> pd.DataFrame:
        """Matrix as a DataFrame, indexed by class name when ``names`` is given."""
        axis = [names.get(code, str(code)) if names else code for code in self.labels]
        return pd.DataFrame(
            self.matrix,
            index=pd.Index(axis, name="actual"),
            columns=pd.Index(axis, name="predicted"),
        )
