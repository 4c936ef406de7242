"""
Custom exceptions for the landcover_cart library.
"""


class LandcoverCartError(Exception):
    """Base exception for landcover_cart library."""
    pass


class ConfigurationError(LandcoverCartError):
    """Raised when configuration is invalid or missing."""
    pass


class DataError(LandcoverCartError):
    """Raised when loading or filtering the sample table fails."""
    pass


class EncodingError(LandcoverCartError):
    """Raised when a label or class code cannot be mapped."""
    pass


class MLError(LandcoverCartError):
    """Raised when training or applying the classifier fails."""
    pass


class ValidationError(LandcoverCartError):
    """Raised when a parameter is outside its allowed range."""
    pass


class PaletteError(LandcoverCartError):
    """Raised when a class code has no display colour."""
    pass
