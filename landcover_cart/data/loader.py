"""
Loading and filtering of labelled land cover sample points.

The input is a table of plot samples, one row per plot and acquisition year,
carrying spectral predictors, elevation, a categorical ``dominant_landcover``
label and a point location. Tables exported from Earth Engine keep the
location as a GeoJSON string in a ``.geo`` column; plain tables can carry
``longitude``/``latitude`` columns instead.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional, Sequence, Union

import geopandas as gpd
import pandas as pd
from shapely.geometry import box, shape

from ..exceptions import DataError

logger = logging.getLogger(__name__)

DEFAULT_BOUNDS = (-130.0, 24.0, -65.0, 50.0)
DEFAULT_YEAR = 2018
VECTOR_SUFFIXES = {".geojson", ".json", ".gpkg", ".shp", ".fgb"}


# --------------------------------------------------------------------------- #
# Reading
# --------------------------------------------------------------------------- #
def _geometry_from_geojson(values: pd.Series):
    """Parse a column of GeoJSON strings (or dicts) into shapely geometries."""
    geometries = []
    for value in values:
        if value is None or (isinstance(value, float) and pd.isna(value)):
            geometries.append(None)
            continue
        try:
            geometries.append(shape(json.loads(value) if isinstance(value, str) else value))
        except (ValueError, TypeError, KeyError, AttributeError) as e:
            raise DataError(f"Invalid GeoJSON geometry: {value!r}") from e
    return geometries


def frame_to_geodataframe(
    df: pd.DataFrame,
    geometry_column: str = ".geo",
    lon_column: str = "longitude",
    lat_column: str = "latitude",
    crs: str = "EPSG:4326",
) -> gpd.GeoDataFrame:
    """
    Attach point geometries to a plain table.

    Parameters
    ----------
    df : pd.DataFrame
        Table read from CSV.
    geometry_column : str
        Column holding GeoJSON geometries. Used when present.
    lon_column, lat_column : str
        Coordinate columns, used when the GeoJSON column is absent.
    crs : str
        CRS of the coordinates.

    Returns
    -------
    gpd.GeoDataFrame
    """
    if geometry_column in df.columns:
        geometry = _geometry_from_geojson(df[geometry_column])
        data = df.drop(columns=[geometry_column])
        return gpd.GeoDataFrame(data, geometry=geometry, crs=crs)

    if lon_column in df.columns and lat_column in df.columns:
        geometry = gpd.points_from_xy(df[lon_column], df[lat_column])
        return gpd.GeoDataFrame(df.copy(), geometry=geometry, crs=crs)

    raise DataError(
        f"No location found: expected a '{geometry_column}' column or "
        f"'{lon_column}'/'{lat_column}' columns"
    )


def read_dataset(
    path: Union[str, Path],
    geometry_column: str = ".geo",
    lon_column: str = "longitude",
    lat_column: str = "latitude",
    crs: str = "EPSG:4326",
) -> gpd.GeoDataFrame:
    """
    Read the labelled sample table.

    CSV files are read with pandas and geolocated from ``geometry_column`` or
    the lon/lat columns. Vector formats and GeoParquet are read by geopandas.
    The result is always in EPSG:4326.
    """
    path = Path(path)
    if not path.exists():
        raise DataError(f"Dataset not found: {path}")

    suffix = path.suffix.lower()
    logger.info(f"Loading dataset from: {path}")
    try:
        if suffix in VECTOR_SUFFIXES:
            gdf = gpd.read_file(path)
        elif suffix == ".parquet":
            gdf = gpd.read_parquet(path)
        else:
            df = pd.read_csv(path)
            gdf = frame_to_geodataframe(df, geometry_column, lon_column, lat_column, crs)
    except (OSError, ValueError) as e:
        raise DataError(f"Cannot read dataset {path}: {e}") from e

    if gdf.crs is None:
        gdf = gdf.set_crs(crs)
    elif gdf.crs.to_epsg() != 4326:
        gdf = gdf.to_crs("EPSG:4326")

    logger.info(f"Loaded {len(gdf)} records")
    logger.debug(f"Columns: {list(gdf.columns)}")
    return gdf


# --------------------------------------------------------------------------- #
# Filtering
# --------------------------------------------------------------------------- #
def validate_columns(gdf: gpd.GeoDataFrame, columns: Sequence[str]) -> None:
    """Raise DataError naming every column of ``columns`` missing from ``gdf``."""
    missing = [c for c in columns if c not in gdf.columns]
    if missing:
        raise DataError(f"Missing columns in dataset: {missing}")


def filter_dataset(
    gdf: gpd.GeoDataFrame,
    bounds: Optional[Sequence[float]] = DEFAULT_BOUNDS,
    year: Optional[int] = DEFAULT_YEAR,
    year_column: str = "image_year",
    plot_id_column: str = "plotid",
) -> gpd.GeoDataFrame:
    """
    Keep rows inside ``bounds`` for ``year``, one row per plot.

    Parameters
    ----------
    gdf : gpd.GeoDataFrame
        Sample table in EPSG:4326.
    bounds : sequence of float, optional
        ``[min_lon, min_lat, max_lon, max_lat]``. None disables the spatial filter.
    year : int, optional
        Acquisition year to keep. None disables the year filter.
    year_column, plot_id_column : str
        Column names.

    Returns
    -------
    gpd.GeoDataFrame
        Filtered copy with a fresh index. Empty when nothing matches; callers
        must check its size before training.
    """
    required = [plot_id_column] + ([year_column] if year is not None else [])
    validate_columns(gdf, required)

    selected = gdf
    if bounds is not None:
        if len(bounds) != 4:
            raise DataError(f"Bounds must be [min_lon, min_lat, max_lon, max_lat], got {bounds}")
        region = box(*bounds)
        selected = selected[selected.geometry.intersects(region)]
    if year is not None:
        selected = selected[pd.to_numeric(selected[year_column], errors="coerce") == year]

    n_filtered = len(selected)
    selected = selected.drop_duplicates(subset=[plot_id_column], keep="first")
    selected = selected.reset_index(drop=True)

    logger.info(
        f"Filtered to {n_filtered} records (bounds={bounds}, year={year}); "
        f"{len(selected)} after removing duplicate '{plot_id_column}'"
    )
    if selected.empty:
        logger.warning("No records matched the spatial and year filter")
    return selected


def handle_missing_predictors(
    gdf: gpd.GeoDataFrame,
    predictors: Sequence[str],
    policy: str = "drop",
) -> gpd.GeoDataFrame:
    """
    Apply the missing predictor policy.

    ``"drop"`` removes rows with any null predictor, ``"error"`` raises
    DataError when such rows exist.
    """
    validate_columns(gdf, predictors)
    incomplete = gdf[list(predictors)].isna().any(axis=1)
    n_incomplete = int(incomplete.sum())
    if n_incomplete == 0:
        return gdf

    if policy == "error":
        raise DataError(f"{n_incomplete} records have missing predictor values")
    if policy != "drop":
        raise DataError(f"Unknown missing predictor policy: {policy}")

    logger.warning(f"Dropping {n_incomplete} records with missing predictor values")
    return gdf[~incomplete].reset_index(drop=True)


def load_dataset(
    path: Union[str, Path],
    bounds: Optional[Sequence[float]] = DEFAULT_BOUNDS,
    year: Optional[int] = DEFAULT_YEAR,
    year_column: str = "image_year",
    plot_id_column: str = "plotid",
    **read_kwargs,
) -> gpd.GeoDataFrame:
    """Read the sample table and apply the bounds, year and plot filters."""
    gdf = read_dataset(path, **read_kwargs)
    return filter_dataset(
        gdf,
        bounds=bounds,
        year=year,
        year_column=year_column,
        plot_id_column=plot_id_column,
    )
