"""
Sample table loading for landcover_cart.
"""

from .loader import (
    DEFAULT_BOUNDS,
    DEFAULT_YEAR,
    read_dataset,
    frame_to_geodataframe,
    filter_dataset,
    validate_columns,
    handle_missing_predictors,
    load_dataset,
)

__all__ = [
    'DEFAULT_BOUNDS',
    'DEFAULT_YEAR',
    'read_dataset',
    'frame_to_geodataframe',
    'filter_dataset',
    'validate_columns',
    'handle_missing_predictors',
    'load_dataset',
]
