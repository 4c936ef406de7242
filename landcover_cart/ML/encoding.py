"""
Dense integer encoding of categorical land cover labels.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Mapping, Tuple

import pandas as pd

from ..exceptions import DataError, EncodingError

logger = logging.getLogger(__name__)

UNMAPPED = -1


def _is_null(value) -> bool:
    return value is None or (not isinstance(value, str) and bool(pd.isna(value)))


@dataclass(frozen=True)
class LabelEncoding:
    """Bijection between observed label strings and codes ``0..K-1``."""

    labels: Tuple[str, ...]

    def __post_init__(self):
        if len(set(self.labels)) != len(self.labels):
            raise EncodingError(f"Duplicate labels in encoding: {self.labels}")

    @classmethod
    def fit(cls, labels: Iterable, order: str = "first_seen") -> "LabelEncoding":
        """
        Build the encoding from observed labels.

        Null labels are skipped. ``order="first_seen"`` numbers labels by first
        appearance, ``order="sorted"`` alphabetically.
        """
        seen: Dict[str, None] = {}
        for label in labels:
            if _is_null(label):
                continue
            seen.setdefault(str(label), None)

        distinct = list(seen)
        if order == "sorted":
            distinct = sorted(distinct)
        elif order != "first_seen":
            raise EncodingError(f"Unknown label order: {order}")
        return cls(tuple(distinct))

    @property
    def mapping(self) -> Dict[str, int]:
        return {label: code for code, label in enumerate(self.labels)}

    @property
    def codes(self) -> Tuple[int, ...]:
        return tuple(range(len(self.labels)))

    def __len__(self) -> int:
        return len(self.labels)

    def __contains__(self, label) -> bool:
        return self.encode(label) != UNMAPPED

    def encode(self, label) -> int:
        """Code for ``label``, or UNMAPPED (-1) when it was never observed."""
        if _is_null(label):
            return UNMAPPED
        return self.mapping.get(str(label), UNMAPPED)

    def decode(self, code: int) -> str:
        code = int(code)
        if not 0 <= code < len(self.labels):
            raise EncodingError(f"Unknown class code {code} (encoding has {len(self.labels)} classes)")
        return self.labels[code]

    def encode_series(self, labels: pd.Series) -> pd.Series:
        mapping = self.mapping
        return labels.map(
            lambda value: UNMAPPED if _is_null(value) else mapping.get(str(value), UNMAPPED)
        ).astype(int)

    def to_dict(self) -> Dict[str, int]:
        return self.mapping

    @classmethod
    def from_dict(cls, mapping: Mapping[str, int]) -> "LabelEncoding":
        """Rebuild an encoding saved with ``to_dict``."""
        ordered = sorted(mapping.items(), key=lambda item: item[1])
        if [code for _, code in ordered] != list(range(len(ordered))):
            raise EncodingError(f"Codes must be dense from 0: {dict(mapping)}")
        return cls(tuple(label for label, _ in ordered))


def encode_dataset(
    gdf,
    encoding: LabelEncoding,
    label_column: str = "dominant_landcover",
    target_column: str = "landcover",
):
    """Return a copy of ``gdf`` with the class code in ``target_column``."""
    if label_column not in gdf.columns:
        raise DataError(f"Missing label column: {label_column}")
    encoded = gdf.copy()
    encoded[target_column] = encoding.encode_series(encoded[label_column])
    return encoded


def drop_unmapped(gdf, target_column: str = "landcover", drop: bool = True):
    """
    Remove rows whose class code is UNMAPPED.

    With ``drop=False`` the presence of such rows raises DataError instead.
    """
    unmapped = gdf[target_column] == UNMAPPED
    n_unmapped = int(unmapped.sum())
    if n_unmapped == 0:
        return gdf
    if not drop:
        raise DataError(f"{n_unmapped} records have a label outside the encoding")
    logger.warning(f"Excluding {n_unmapped} records with an unmapped label")
    return gdf[~unmapped].reset_index(drop=True)
