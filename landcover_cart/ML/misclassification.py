"""
Error analysis of classified test points.

A misclassified point is a test record whose predicted code differs from its
actual code. Each one is tagged with a transition descriptor
``"<actual> -> <predicted>"``; transitions are counted, a subset of them is
selected for display and given dense codes so they can be coloured.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence, Tuple

import pandas as pd

from .encoding import LabelEncoding
from ..exceptions import DataError

logger = logging.getLogger(__name__)

TRANSITION_SEPARATOR = " -> "


def _require(frame, columns: Sequence[str]) -> None:
    missing = [c for c in columns if c not in frame.columns]
    if missing:
        raise DataError(f"Missing columns for error analysis: {missing}")


def describe_transition(actual, predicted, encoding: Optional[LabelEncoding] = None) -> str:
    """Descriptor for one (actual, predicted) pair, by label name when ``encoding`` is given."""
    if encoding is not None:
        return f"{encoding.decode(actual)}{TRANSITION_SEPARATOR}{encoding.decode(predicted)}"
    return f"{int(actual)}{TRANSITION_SEPARATOR}{int(predicted)}"


def transition_title(descriptor: str) -> str:
    """Legend text for a descriptor, e.g. ``"Trees -> Shrubs"`` becomes ``"Trees as Shrubs"``."""
    actual, _, predicted = descriptor.partition(TRANSITION_SEPARATOR)
    return f"{actual} as {predicted}" if predicted else descriptor


def flag_errors(
    classified,
    target_column: str = "landcover",
    output_column: str = "classification",
    error_column: str = "error",
):
    """Copy of ``classified`` with ``error`` = 1 where prediction differs from actual, else 0."""
    _require(classified, [target_column, output_column])
    flagged = classified.copy()
    flagged[error_column] = (flagged[target_column] != flagged[output_column]).astype(int)
    return flagged


def misclassified_points(
    classified,
    encoding: Optional[LabelEncoding] = None,
    target_column: str = "landcover",
    output_column: str = "classification",
    type_column: str = "misclassification_type",
):
    """Misclassified rows of ``classified``, each tagged with its transition descriptor."""
    flagged = flag_errors(classified, target_column, output_column)
    errors = flagged[flagged["error"] == 1].copy()
    errors[type_column] = [
        describe_transition(a, p, encoding)
        for a, p in zip(errors[target_column], errors[output_column])
    ]
    logger.info(f"{len(errors)} of {len(classified)} test points are misclassified")
    return errors


def aggregate_histogram(frame, column: str) -> Dict:
    """Count of rows per distinct value of ``column``, keys sorted."""
    _require(frame, [column])
    counts = frame[column].value_counts(sort=False)
    return {key: int(counts[key]) for key in sorted(counts.index, key=str)}


def transition_histogram(misclassified, type_column: str = "misclassification_type") -> Dict[str, int]:
    return aggregate_histogram(misclassified, type_column)


def total_per_class(frame, target_column: str = "landcover") -> Dict[int, int]:
    return {int(k): v for k, v in aggregate_histogram(frame, target_column).items()}


def misclassified_by_class(misclassified, target_column: str = "landcover") -> Dict[int, int]:
    return total_per_class(misclassified, target_column)


def misclassification_rates(
    misclassified_counts: Dict[int, int],
    totals: Dict[int, int],
) -> Dict[int, float]:
    """
    Misclassified / total per actual class.

    Classes without misclassified points are reported as 0.0.
    """
    rates = {}
    for code, total in totals.items():
        if total <= 0:
            continue
        rates[code] = misclassified_counts.get(code, 0) / total
    unknown = set(misclassified_counts) - set(totals)
    if unknown:
        raise DataError(f"Misclassified classes missing from totals: {sorted(unknown)}")
    return rates


def select_transitions(
    misclassified,
    transitions: Optional[Sequence[Tuple[str, str]]] = None,
    encoding: Optional[LabelEncoding] = None,
    limit: Optional[int] = None,
    type_column: str = "misclassification_type",
) -> Tuple[object, List[str]]:
    """
    Keep the misclassified rows belonging to the transitions of interest.

    Parameters
    ----------
    misclassified : DataFrame
        Output of :func:`misclassified_points`.
    transitions : sequence of (actual, predicted), optional
        Label pairs to keep, in display order. Pairs naming a label absent
        from ``encoding`` are skipped. When None or empty, the most frequent
        observed transitions are kept.
    encoding : LabelEncoding, optional
        Encoding used to build the descriptors.
    limit : int, optional
        Maximum number of transitions kept.

    Returns
    -------
    (DataFrame, list of str)
        Selected rows and the descriptors in display order. Only descriptors
        that occur in the data are returned.
    """
    _require(misclassified, [type_column])
    observed = misclassified[type_column]

    if transitions:
        wanted = []
        for actual, predicted in transitions:
            if encoding is not None and (actual not in encoding or predicted not in encoding):
                logger.debug(f"Skipping transition with unknown label: {actual} -> {predicted}")
                continue
            descriptor = f"{actual}{TRANSITION_SEPARATOR}{predicted}"
            if descriptor not in wanted:
                wanted.append(descriptor)
        present = set(observed)
        ordered = [d for d in wanted if d in present]
    else:
        counts = observed.value_counts()
        # Ties broken by descriptor so the order does not depend on row order
        ordered = sorted(counts.index, key=lambda d: (-int(counts[d]), d))

    if limit is not None:
        ordered = ordered[:limit]

    selected = misclassified[observed.isin(ordered)].copy()
    logger.info(f"Selected {len(selected)} points across {len(ordered)} misclassification types")
    return selected, ordered


def encode_transitions(
    selected,
    descriptors: Sequence[str],
    type_column: str = "misclassification_type",
    code_column: str = "misclass_type",
):
    """
    Give each selected transition a dense code, in ``descriptors`` order.

    Returns
    -------
    (DataFrame, LabelEncoding)
    """
    _require(selected, [type_column])
    encoding = LabelEncoding(tuple(descriptors))
    encoded = selected.copy()
    encoded[code_column] = encoding.encode_series(encoded[type_column])
    return encoded, encoding


def summarize_errors(
    classified,
    misclassified,
    encoding: Optional[LabelEncoding] = None,
    target_column: str = "landcover",
) -> pd.DataFrame:
    """Per-class table of totals, misclassified counts and rates."""
    totals = total_per_class(classified, target_column)
    wrong = misclassified_by_class(misclassified, target_column)
    rates = misclassification_rates(wrong, totals)
    rows = []
    for code, total in totals.items():
        rows.append({
            "code": code,
            "label": encoding.decode(code) if encoding is not None else str(code),
            "total": total,
            "misclassified": wrong.get(code, 0),
            "rate": rates.get(code, 0.0),
        })
    return pd.DataFrame(rows, columns=["code", "label", "total", "misclassified", "rate"])
