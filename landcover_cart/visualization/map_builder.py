"""
Interactive folium map of classified and misclassified sample points.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional, Sequence, Union

import folium
from branca.element import Element
from folium import plugins

from .legend import Legend
from .palette import Palette

logger = logging.getLogger(__name__)

STYLE_COLUMN = "style"
POPUP_COLUMNS = (
    "plotid", "dominant_landcover", "landcover", "classification",
    "misclassification_type", "NDVI", "elevation_meters",
)


def style_points(
    gdf,
    palette: Palette,
    code_column: str = "landcover",
    point_size: float = 6,
    width: float = 0.5,
    style_column: str = STYLE_COLUMN,
):
    """
    Copy of ``gdf`` with a per-point style dict chosen by class code.

    Every code must have a palette colour; PaletteError is raised otherwise.
    """
    styled = gdf.copy()
    styled[style_column] = [
        {"pointSize": point_size, "color": palette.color_for(code), "width": width}
        for code in styled[code_column]
    ]
    return styled


def _popup_html(row, columns: Iterable[str]) -> str:
    lines = [
        f"<b>{column}</b>: {row[column]}"
        for column in columns
        if column in row.index
    ]
    return "<br>".join(lines)


def add_point_layer(
    fmap: folium.Map,
    styled,
    name: str,
    popup_columns: Sequence[str] = POPUP_COLUMNS,
    style_column: str = STYLE_COLUMN,
    show: bool = True,
) -> folium.FeatureGroup:
    """Add styled points as circle markers in their own toggleable layer."""
    group = folium.FeatureGroup(name=f"{name} ({len(styled)})", show=show)
    for _, row in styled.iterrows():
        style = row[style_column]
        point = row.geometry
        if point is None or point.is_empty:
            continue
        if point.geom_type != "Point":
            point = point.representative_point()
        folium.CircleMarker(
            location=[point.y, point.x],
            radius=style["pointSize"] / 2,
            color="black",
            weight=style.get("width", 0.5),
            fill=True,
            fill_color=style["color"],
            fill_opacity=0.9,
            popup=folium.Popup(_popup_html(row, popup_columns), max_width=300),
        ).add_to(group)
    group.add_to(fmap)
    return group


def add_legend(fmap: folium.Map, legend: Legend, offset_px: int = 0) -> None:
    fmap.get_root().html.add_child(Element(legend.to_html(offset_px=offset_px)))


def _center(gdf) -> list:
    if len(gdf) == 0:
        return [39.0, -98.0]
    min_x, min_y, max_x, max_y = gdf.total_bounds
    return [(min_y + max_y) / 2, (min_x + max_x) / 2]


def build_map(
    classified_styled,
    error_styled=None,
    legends: Sequence[Legend] = (),
    center: Optional[Sequence[float]] = None,
    zoom_start: int = 4,
) -> folium.Map:
    """
    Build the result map.

    Args:
        classified_styled: Test points styled by true class (see style_points)
        error_styled: Misclassified points styled by misclassification type
        legends: Legends to draw; legends sharing a corner are stacked
        center: [lat, lon] map centre, defaults to the centre of the points
        zoom_start: Initial zoom level

    Returns:
        folium.Map object
    """
    m = folium.Map(
        location=list(center) if center else _center(classified_styled),
        zoom_start=zoom_start,
        tiles="OpenStreetMap",
    )

    add_point_layer(m, classified_styled, "Classified points")
    if error_styled is not None:
        add_point_layer(m, error_styled, "Misclassification types")

    offsets = {}
    for legend in legends:
        offset = offsets.get(legend.position, 0)
        add_legend(m, legend, offset_px=offset)
        offsets[legend.position] = offset + 40 + 22 * len(legend.rows)

    folium.LayerControl(collapsed=False).add_to(m)
    plugins.Fullscreen().add_to(m)
    return m


def save_map(fmap: folium.Map, path: Union[str, Path]) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fmap.save(str(path))
    logger.info(f"Map saved to: {path}")
    return path
