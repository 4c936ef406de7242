"""
Landcover CART Library

Supervised land cover classification of labelled sample points with a CART
decision tree: filtering, label encoding, a seeded train/test split, accuracy
assessment, misclassification analysis and interactive maps of the results.
"""

__version__ = "0.1.0"
__author__ = "GIS Carbon AI Team"
__email__ = "muh.firdausiqbal@gmail.com"

# Core imports
from .core import LandcoverCartAnalysis, AnalysisResult
from .config import ConfigManager
from .exceptions import (
    LandcoverCartError,
    ConfigurationError,
    DataError,
    EncodingError,
    MLError,
    ValidationError,
    PaletteError,
)

# Export main classes
__all__ = [
    'LandcoverCartAnalysis',
    'AnalysisResult',
    'ConfigManager',
    'LandcoverCartError',
    'ConfigurationError',
    'DataError',
    'EncodingError',
    'MLError',
    'ValidationError',
    'PaletteError',
]
