"""
Point-of-interest lookup on the styled sample points.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Sequence, Tuple, Union

import numpy as np
from pyproj import Geod
from shapely.geometry import Point

logger = logging.getLogger(__name__)

DEFAULT_RADIUS_M = 9000.0
_GEOD = Geod(ellps="WGS84")

Coordinate = Union[Point, Sequence[float]]


def _lon_lat(point: Coordinate) -> Tuple[float, float]:
    if isinstance(point, Point):
        return float(point.x), float(point.y)
    lon, lat = point
    return float(lon), float(lat)


def geodesic_distances(gdf, point: Coordinate) -> np.ndarray:
    """Distance in metres on the WGS84 ellipsoid from ``point`` (lon, lat) to every record."""
    lon, lat = _lon_lat(point)
    if len(gdf) == 0:
        return np.zeros(0, dtype=float)
    geometry = gdf.geometry
    if geometry.crs is not None and geometry.crs.to_epsg() != 4326:
        geometry = geometry.to_crs("EPSG:4326")
    # Non-point geometries are measured from a point guaranteed to lie inside them
    if not (geometry.geom_type == "Point").all():
        geometry = geometry.representative_point()
    lons = geometry.x.to_numpy(dtype=float)
    lats = geometry.y.to_numpy(dtype=float)
    _, _, distances = _GEOD.inv(
        np.full(lons.shape, lon), np.full(lats.shape, lat), lons, lats
    )
    return np.asarray(distances, dtype=float)


def find_nearest(
    gdf,
    point: Coordinate,
    radius_m: float = DEFAULT_RADIUS_M,
) -> Optional[Dict[str, Any]]:
    """
    Attributes of the record nearest to ``point`` within ``radius_m``.

    Args:
        gdf: GeoDataFrame of records in EPSG:4326
        point: Query location as a shapely Point or (lon, lat)
        radius_m: Search radius in metres

    Returns:
        Dict of the record's columns (geometry included), or None when no
        record lies within the radius
    """
    if radius_m <= 0:
        raise ValueError(f"radius_m must be positive, got {radius_m}")

    distances = geodesic_distances(gdf, point)
    # Null or empty geometries have no position and can never match
    distances = np.where(np.isfinite(distances), distances, np.inf)
    if distances.size == 0:
        logger.info("No feature found near the clicked location.")
        return None

    nearest = int(np.argmin(distances))
    if distances[nearest] > radius_m:
        logger.info("No feature found near the clicked location.")
        return None

    record = gdf.iloc[nearest].to_dict()
    logger.debug(f"Nearest feature at {distances[nearest]:.1f} m")
    return record
