"""
Test palettes, legends, point styling, maps and the nearest point query.
"""

import folium
import geopandas as gpd
import pandas as pd
import pytest
from shapely.geometry import Point

from landcover_cart.exceptions import PaletteError, ValidationError
from landcover_cart.ML import ConfusionMatrix, LabelEncoding
from landcover_cart.visualization import (
    CLASS_LEGEND_TITLE,
    ERROR_LEGEND_TITLE,
    Legend,
    Palette,
    build_map,
    class_legend,
    error_legend,
    find_nearest,
    plot_confusion_matrix,
    plot_feature_importances,
    save_map,
    style_points,
)

@pytest.fixture
def points():
    return gpd.GeoDataFrame(
        {
            "plotid": [10, 11, 12],
            "dominant_landcover": ["Water", "Trees", "Shrubs"],
            "landcover": [0, 1, 2],
        },
        geometry=[Point(-100.0, 40.0), Point(-101.0, 41.0), Point(-95.0, 35.0)],
        crs="EPSG:4326",
    )


@pytest.fixture
def encoding():
    return LabelEncoding(("Water", "Trees", "Shrubs"))


def test_palette_lookup():
    palette = Palette.from_colors(["red", "green"])
    assert palette.color_for(0) == "red"
    assert palette.color_for(1) == "green"
    for code in (-1, 2):
        with pytest.raises(PaletteError):
            palette.color_for(code)
    with pytest.raises(PaletteError):
        Palette.from_colors(["red"], n_classes=2)
    with pytest.raises(PaletteError):
        Palette(())


def test_palette_for_encoding(encoding):
    palette = Palette.for_encoding(
        encoding,
        {"Water": "mediumblue", "Trees": "springgreen"},
        fallback=["mediumblue", "orange"],
    )
    assert palette.colors == ("mediumblue", "springgreen", "orange")
    assert palette.name_for(2) == "Shrubs"
    with pytest.raises(PaletteError):
        Palette.for_encoding(encoding, {"Water": "mediumblue"})


def test_legends_are_independent(encoding):
    class_palette = Palette.for_encoding(encoding, fallback=["a", "b", "c"])
    error_palette = Palette.from_colors(["crimson", "gold"])
    classes = class_legend(class_palette)
    errors = error_legend(["Trees -> Shrubs", "Shrubs -> Trees"], error_palette)

    assert classes.title == CLASS_LEGEND_TITLE
    assert classes.labels() == ("Water", "Trees", "Shrubs")
    assert errors.title == ERROR_LEGEND_TITLE
    assert errors.rows == (("Trees as Shrubs", "crimson"), ("Shrubs as Trees", "gold"))
    assert classes.rows != errors.rows

    with pytest.raises(PaletteError):
        error_legend(["a -> b", "b -> c", "c -> d"], error_palette)


def test_legend_html():
    legend = Legend("Title <b>", (("Trees", "green"),), position="top-right")
    html = legend.to_html(offset_px=20)
    assert "top: 50px" in html
    assert "right: 30px" in html
    assert "Title &lt;b&gt;" in html
    with pytest.raises(ValidationError):
        Legend("x", (), position="middle")


def test_style_points(points, encoding):
    palette = Palette.from_colors(["blue", "green", "purple"])
    styled = style_points(points, palette)
    assert styled["style"].iloc[1] == {"pointSize": 6, "color": "green", "width": 0.5}
    assert "style" not in points.columns

    bad = points.assign(landcover=[0, 1, 5])
    with pytest.raises(PaletteError):
        style_points(bad, palette)


def test_build_and_save_map(tmp_path, points, encoding):
    palette = Palette.from_colors(["blue", "green", "purple"])
    styled = style_points(points, palette)
    legends = [class_legend(Palette.for_encoding(encoding, fallback=["blue", "green", "purple"]))]
    fmap = build_map(styled, styled.iloc[0:0], legends=legends)
    assert isinstance(fmap, folium.Map)

    path = save_map(fmap, tmp_path / "maps" / "map.html")
    html = path.read_text(encoding="utf-8")
    assert CLASS_LEGEND_TITLE in html


def test_find_nearest_exact_location(points):
    record = find_nearest(points, Point(-101.0, 41.0))
    assert record["plotid"] == 11
    assert record["dominant_landcover"] == "Trees"
    assert record["geometry"].equals(Point(-101.0, 41.0))


def test_find_nearest_within_radius(points):
    # about 4.3 km east of plot 10
    record = find_nearest(points, (-99.95, 40.0))
    assert record["plotid"] == 10


def test_find_nearest_outside_radius(points):
    # about 17 km from the closest plot
    assert find_nearest(points, (-100.2, 40.0)) is None
    assert find_nearest(points, (-100.2, 40.0), radius_m=20000)["plotid"] == 10


def test_find_nearest_empty_and_bad_radius(points):
    assert find_nearest(points.iloc[0:0], (-100.0, 40.0)) is None
    with pytest.raises(ValueError):
        find_nearest(points, (-100.0, 40.0), radius_m=0)


def test_confusion_plot():
    confusion = ConfusionMatrix.from_array([[5, 1], [2, 4]])
    fig, ax = plot_confusion_matrix(confusion, {0: "Water", 1: "Trees"})
    assert [t.get_text() for t in ax.get_yticklabels()] == ["Water", "Trees"]
    assert "0.750" in ax.get_title()
    fig.clf()


def test_find_nearest_skips_null_geometry():
    """Records without a location are never returned, whatever the query point."""
    gdf = gpd.GeoDataFrame(
        {"plotid": [1, 2]},
        geometry=[None, Point(10.0, 10.0)],
        crs="EPSG:4326",
    )
    assert find_nearest(gdf, (-100.0, 40.0)) is None
    assert find_nearest(gdf, (10.0, 10.0))["plotid"] == 2


def test_map_has_no_keyed_tiles(points):
    palette = Palette.from_colors(["blue", "green", "purple"])
    fmap = build_map(style_points(points, palette))
    assert "cartocdn" not in fmap.get_root().render().lower()


def test_feature_importance_plot():
    fig, ax = plot_feature_importances({"NDVI": 0.7, "elevation_meters": 0.3})
    # largest importance drawn on top
    assert [bar.get_width() for bar in ax.patches] == pytest.approx([0.3, 0.7])
    assert ax.get_title() == "CART predictor importance"
    fig.clf()
