"""
Utility modules for landcover_cart library.
"""

from .path_resolver import PathResolver
from .logging_utils import setup_logging

__all__ = [
    'PathResolver',
    'setup_logging',
]
