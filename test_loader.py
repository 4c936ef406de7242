"""
Test loading and filtering of the sample table.
"""

import json

import geopandas as gpd
import pandas as pd
import pytest

from landcover_cart.data import (
    filter_dataset,
    frame_to_geodataframe,
    handle_missing_predictors,
    load_dataset,
    read_dataset,
)
from landcover_cart.exceptions import DataError


def _geo(lon, lat):
    return json.dumps({"type": "Point", "coordinates": [lon, lat]})


@pytest.fixture
def mixed_table():
    """Rows inside and outside the default bounds, for several years, with a duplicate plot."""
    return pd.DataFrame({
        "plotid": [1, 1, 2, 3, 4, 5],
        "image_year": [2018, 2018, 2018, 2017, 2018, 2018],
        "dominant_landcover": ["Trees", "Water", "Shrubs", "Trees", "Trees", "Water"],
        "NDVI": [0.7, 0.1, 0.4, 0.7, 0.6, -0.2],
        ".geo": [
            _geo(-100, 40),
            _geo(-100, 40),
            _geo(-90, 35),
            _geo(-100, 40),
            _geo(10, 50),    # Europe, outside the bounds
            _geo(-120, 45),
        ],
    })


def test_read_csv_with_geojson_column(samples_csv):
    gdf = read_dataset(samples_csv)
    assert isinstance(gdf, gpd.GeoDataFrame)
    assert ".geo" not in gdf.columns
    assert gdf.crs.to_epsg() == 4326
    assert (gdf.geometry.geom_type == "Point").all()
    assert len(gdf) == 120


def test_read_csv_with_lon_lat_columns(tmp_path):
    path = tmp_path / "lonlat.csv"
    pd.DataFrame({
        "plotid": [1, 2],
        "image_year": [2018, 2018],
        "longitude": [-100.0, -95.0],
        "latitude": [40.0, 38.0],
    }).to_csv(path, index=False)
    gdf = read_dataset(path)
    assert gdf.geometry.iloc[0].x == -100.0
    assert gdf.geometry.iloc[1].y == 38.0


def test_read_missing_file(tmp_path):
    with pytest.raises(DataError):
        read_dataset(tmp_path / "nope.csv")


def test_no_location_columns():
    with pytest.raises(DataError):
        frame_to_geodataframe(pd.DataFrame({"plotid": [1]}))


def test_invalid_geojson():
    with pytest.raises(DataError):
        frame_to_geodataframe(pd.DataFrame({"plotid": [1], ".geo": ["not json"]}))


def test_filter_bounds_year_and_duplicates(mixed_table):
    gdf = frame_to_geodataframe(mixed_table)
    filtered = filter_dataset(gdf, bounds=[-130, 24, -65, 50], year=2018)

    # plot 3 is the wrong year, plot 4 is outside the bounds, plot 1 is kept once
    assert list(filtered["plotid"]) == [1, 2, 5]
    # the first occurrence of a duplicated plot wins
    assert filtered.loc[filtered["plotid"] == 1, "dominant_landcover"].item() == "Trees"
    assert list(filtered.index) == [0, 1, 2]


def test_filter_can_be_disabled(mixed_table):
    gdf = frame_to_geodataframe(mixed_table)
    filtered = filter_dataset(gdf, bounds=None, year=None)
    assert len(filtered) == 5


def test_filter_empty_result(mixed_table):
    gdf = frame_to_geodataframe(mixed_table)
    filtered = filter_dataset(gdf, year=1990)
    assert filtered.empty


def test_filter_rejects_bad_bounds(mixed_table):
    gdf = frame_to_geodataframe(mixed_table)
    with pytest.raises(DataError):
        filter_dataset(gdf, bounds=[0, 0, 1])


def test_load_dataset(samples_csv):
    gdf = load_dataset(samples_csv, year=2018)
    assert len(gdf) == 120
    assert gdf["plotid"].is_unique


def test_missing_predictor_policies(mixed_table):
    gdf = frame_to_geodataframe(mixed_table)
    gdf.loc[2, "NDVI"] = None

    dropped = handle_missing_predictors(gdf, ["NDVI"], policy="drop")
    assert len(dropped) == len(gdf) - 1
    assert dropped["NDVI"].notna().all()

    with pytest.raises(DataError):
        handle_missing_predictors(gdf, ["NDVI"], policy="error")
    with pytest.raises(DataError):
        handle_missing_predictors(gdf, ["elevation_meters"])
