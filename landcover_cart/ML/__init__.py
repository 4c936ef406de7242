"""
Machine learning utilities for landcover_cart.

Label encoding, the seeded train/test split, CART training, confusion matrix
statistics and misclassification analysis.
"""

from .encoding import (  # noqa: F401
    UNMAPPED,
    LabelEncoding,
    encode_dataset,
    drop_unmapped,
)
from .metrics import ConfusionMatrix  # noqa: F401
from .cart_workflow import (  # noqa: F401
    DatasetSplits,
    TrainedModel,
    EvaluationResult,
    cart_params,
    add_random_column,
    split_dataset,
    train_cart_model,
    feature_importances,
    save_model,
    load_model,
    evaluate_model,
)
from .misclassification import (  # noqa: F401
    describe_transition,
    transition_title,
    flag_errors,
    misclassified_points,
    transition_histogram,
    total_per_class,
    misclassified_by_class,
    misclassification_rates,
    select_transitions,
    encode_transitions,
    summarize_errors,
)

__all__ = [
    "UNMAPPED",
    "LabelEncoding",
    "encode_dataset",
    "drop_unmapped",
    "ConfusionMatrix",
    "DatasetSplits",
    "TrainedModel",
    "EvaluationResult",
    "cart_params",
    "add_random_column",
    "split_dataset",
    "train_cart_model",
    "feature_importances",
    "save_model",
    "load_model",
    "evaluate_model",
    "describe_transition",
    "transition_title",
    "flag_errors",
    "misclassified_points",
    "transition_histogram",
    "total_per_class",
    "misclassified_by_class",
    "misclassification_rates",
    "select_transitions",
    "encode_transitions",
    "summarize_errors",
]
