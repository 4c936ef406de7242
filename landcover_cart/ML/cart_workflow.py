"""
CART training and evaluation workflow.

This module exposes small, composable helpers for the split / train /
evaluate steps of the land cover analysis so they can be reused outside the
full :class:`~landcover_cart.core.main.LandcoverCartAnalysis` pipeline.
"""

from __future__ import annotations

import hashlib
import json
import logging
import os
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Mapping, Optional, Sequence, Tuple

import joblib
import numpy as np
import pandas as pd
from pandas.api.types import is_bool_dtype, is_numeric_dtype
from sklearn.tree import DecisionTreeClassifier

from .encoding import LabelEncoding
from .metrics import ConfusionMatrix
from . import misclassification as errors
from ..exceptions import DataError, MLError, ValidationError

logger = logging.getLogger(__name__)

CART_PARAM_KEYS = (
    "criterion",
    "max_depth",
    "min_samples_split",
    "min_samples_leaf",
    "max_leaf_nodes",
)


# --------------------------------------------------------------------------- #
# Data containers
# --------------------------------------------------------------------------- #
@dataclass
class DatasetSplits:
    training: pd.DataFrame
    testing: pd.DataFrame
    train_indices: np.ndarray
    test_indices: np.ndarray


@dataclass(frozen=True)
class TrainedModel:
    """A fitted decision tree together with what is needed to apply it."""

    estimator: DecisionTreeClassifier
    predictors: Tuple[str, ...]
    class_property: str
    encoding: Optional[LabelEncoding] = None
    params: Mapping[str, object] = field(default_factory=dict)
    trained_at: str = ""
    n_training: int = 0

    @property
    def classes(self) -> Tuple[int, ...]:
        return tuple(int(c) for c in self.estimator.classes_)

    def predict(self, frame, output_column: str = "classification"):
        """Copy of ``frame`` with predicted class codes in ``output_column``."""
        classified = frame.copy()
        if len(frame) == 0:
            classified[output_column] = pd.Series(dtype=int)
            return classified
        X = _extract_features(frame, self.predictors)
        classified[output_column] = self.estimator.predict(X).astype(int)
        return classified


@dataclass
class EvaluationResult:
    classified: pd.DataFrame
    confusion: ConfusionMatrix
    misclassified: pd.DataFrame
    metrics: Dict[str, object]


# --------------------------------------------------------------------------- #
# Configuration
# --------------------------------------------------------------------------- #
def hash_config(config: Mapping[str, object]) -> str:
    """Create a stable hash for caching artifacts."""
    return hashlib.md5(json.dumps(config, sort_keys=True, default=str).encode("utf-8")).hexdigest()


def cart_params(ml_config: Mapping[str, object]) -> Dict[str, object]:
    """Pick the DecisionTreeClassifier arguments out of the ``ml.cart`` config section."""
    cart = dict(ml_config.get("cart") or {})
    unknown = sorted(set(cart) - set(CART_PARAM_KEYS))
    if unknown:
        raise ValidationError(f"Unknown CART parameters: {unknown}")
    params = {"criterion": "gini"}
    params.update({k: v for k, v in cart.items() if v is not None})
    return params


# --------------------------------------------------------------------------- #
# Data preparation
# --------------------------------------------------------------------------- #
def _extract_features(frame, predictors: Sequence[str]) -> np.ndarray:
    """
    Feature matrix in ``predictors`` order.

    Raises DataError for missing or non-numeric predictor columns.
    """
    missing = [p for p in predictors if p not in frame.columns]
    if missing:
        raise DataError(f"Missing predictor columns: {missing}")
    non_numeric = [
        p for p in predictors
        if not is_numeric_dtype(frame[p]) or is_bool_dtype(frame[p])
    ]
    if non_numeric:
        raise DataError(f"Predictor columns must be numeric: {non_numeric}")
    X = frame[list(predictors)].to_numpy(dtype=float)
    if np.isnan(X).any():
        raise DataError("Predictor values contain NaN; apply the missing predictor policy first")
    return X


def add_random_column(frame, seed: int = 42, random_column: str = "random"):
    """Copy of ``frame`` with a seeded uniform draw in [0, 1) per row."""
    if not isinstance(seed, (int, np.integer)) or isinstance(seed, bool):
        raise ValidationError(f"Split seed must be an integer, got {seed!r}")
    rng = np.random.default_rng(int(seed))
    with_random = frame.copy()
    with_random[random_column] = rng.random(len(frame))
    return with_random


def split_dataset(
    frame,
    train_fraction: float = 0.7,
    seed: int = 42,
    random_column: str = "random",
) -> DatasetSplits:
    """
    Random train/test partition by per-row threshold.

    Rows whose draw is below ``train_fraction`` go to training, the rest to
    testing. The split is not stratified, so the realised ratio only
    approximates ``train_fraction``. The same seed always reproduces the same
    partition of the same input.
    """
    if not 0 < train_fraction < 1:
        raise ValidationError(f"train_fraction must be in (0, 1), got {train_fraction}")

    with_random = add_random_column(frame, seed=seed, random_column=random_column)
    is_train = (with_random[random_column] < train_fraction).to_numpy()
    positions = np.arange(len(with_random))

    splits = DatasetSplits(
        training=with_random[is_train],
        testing=with_random[~is_train],
        train_indices=positions[is_train],
        test_indices=positions[~is_train],
    )
    logger.info(
        f"Split {len(frame)} records into {len(splits.training)} training "
        f"and {len(splits.testing)} testing (fraction={train_fraction}, seed={seed})"
    )
    return splits


# --------------------------------------------------------------------------- #
# Training
# --------------------------------------------------------------------------- #
def train_cart_model(
    training,
    predictors: Sequence[str],
    class_property: str = "landcover",
    encoding: Optional[LabelEncoding] = None,
    params: Optional[Mapping[str, object]] = None,
    seed: int = 42,
) -> TrainedModel:
    """
    Fit a CART classifier on the training partition.

    Expects ``training`` to hold every column in ``predictors`` (numeric,
    without nulls) plus the integer class column ``class_property``.
    """
    if len(training) == 0:
        raise MLError("Training set is empty; cannot fit classifier")
    if class_property not in training.columns:
        raise DataError(f"Missing class column: {class_property}")

    X = _extract_features(training, predictors)
    y = training[class_property].to_numpy(dtype=int)

    tree_params = {"criterion": "gini"}
    tree_params.update(params or {})
    tree_params.setdefault("random_state", seed)

    try:
        estimator = DecisionTreeClassifier(**tree_params)
        estimator.fit(X, y)
    except (TypeError, ValueError) as e:
        raise MLError(f"CART training failed: {e}") from e

    model = TrainedModel(
        estimator=estimator,
        predictors=tuple(predictors),
        class_property=class_property,
        encoding=encoding,
        params=dict(tree_params),
        trained_at=datetime.now().strftime("%Y%m%d_%H%M%S"),
        n_training=len(training),
    )
    logger.info(
        f"Classifier trained on {len(training)} records: depth={estimator.get_depth()}, "
        f"leaves={estimator.get_n_leaves()}"
    )
    return model


def feature_importances(model: TrainedModel) -> Dict[str, float]:
    """Impurity-based importance per predictor, largest first."""
    values = model.estimator.feature_importances_
    pairs = sorted(zip(model.predictors, values), key=lambda item: item[1], reverse=True)
    return {name: float(value) for name, value in pairs}


def save_model(model: TrainedModel, path: str) -> str:
    """Persist a trained model with joblib. Returns the path written."""
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    joblib.dump(model, path)
    logger.info("Model saved to %s", path)
    return path


def load_model(path: str) -> TrainedModel:
    if not os.path.exists(path):
        raise FileNotFoundError(f"Model not found at: {path}")
    model = joblib.load(path)
    if not isinstance(model, TrainedModel):
        raise MLError(f"{path} does not hold a trained CART model")
    return model


# --------------------------------------------------------------------------- #
# Evaluation
# --------------------------------------------------------------------------- #
def evaluate_model(
    model: TrainedModel,
    testing,
    output_column: str = "classification",
) -> EvaluationResult:
    """
    Classify the test partition and derive accuracy statistics.

    The confusion matrix covers the class codes observed in the test set,
    as actual or predicted.
    """
    target = model.class_property
    if target not in testing.columns:
        raise DataError(f"Missing class column: {target}")

    classified = model.predict(testing, output_column=output_column)
    confusion = ConfusionMatrix.from_labels(classified[target], classified[output_column])

    misclassified = errors.misclassified_points(
        classified,
        encoding=model.encoding,
        target_column=target,
        output_column=output_column,
    )
    totals = errors.total_per_class(classified, target)
    wrong = errors.misclassified_by_class(misclassified, target)

    metrics = {
        "n_testing": len(classified),
        "n_correct": confusion.correct,
        "accuracy": confusion.accuracy(),
        "kappa": confusion.kappa(),
        "producers_accuracy": confusion.producers_accuracy(),
        "consumers_accuracy": confusion.consumers_accuracy(),
        "total_per_class": totals,
        "misclassified_by_class": wrong,
        "misclassification_rates": errors.misclassification_rates(wrong, totals),
        "misclassification_types": errors.transition_histogram(misclassified),
    }
    logger.info(f"Overall accuracy: {metrics['accuracy']:.3f}, kappa: {metrics['kappa']:.3f}")

    return EvaluationResult(
        classified=classified,
        confusion=confusion,
        misclassified=misclassified,
        metrics=metrics,
    )
