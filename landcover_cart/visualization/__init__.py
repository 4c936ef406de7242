"""
Visualization of classification results: palettes, legends, folium maps,
the nearest-point query and static plots.
"""

from .palette import Palette  # noqa: F401
from .legend import (  # noqa: F401
    CLASS_LEGEND_TITLE,
    ERROR_LEGEND_TITLE,
    Legend,
    class_legend,
    error_legend,
)
from .query import DEFAULT_RADIUS_M, geodesic_distances, find_nearest  # noqa: F401
from .map_builder import style_points, add_point_layer, add_legend, build_map, save_map  # noqa: F401
from .plots import plot_confusion_matrix, plot_feature_importances  # noqa: F401

__all__ = [
    "Palette",
    "CLASS_LEGEND_TITLE",
    "ERROR_LEGEND_TITLE",
    "Legend",
    "class_legend",
    "error_legend",
    "DEFAULT_RADIUS_M",
    "geodesic_distances",
    "find_nearest",
    "style_points",
    "add_point_layer",
    "add_legend",
    "build_map",
    "save_map",
    "plot_confusion_matrix",
    "plot_feature_importances",
]
