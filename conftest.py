"""
Shared fixtures: synthetic land cover sample tables.
"""

import json

import numpy as np
import pandas as pd
import pytest

PREDICTORS = ["NDVI", "SR_B1", "SR_B2", "SR_B3", "SR_B4", "SR_B5", "SR_B7", "elevation_meters"]

# Class name -> (NDVI centre, elevation centre)
CLASS_SIGNATURES = {
    "Water": (-0.3, 100.0),
    "Trees": (0.7, 900.0),
    "Shrubs": (0.35, 1500.0),
}


def make_samples(n_per_class=40, seed=0, year=2018, lon=-100.0, lat=40.0):
    """Labelled sample rows with a GeoJSON ``.geo`` column, like a table export."""
    rng = np.random.default_rng(seed)
    rows = []
    plot_id = 0
    for label, (ndvi, elevation) in CLASS_SIGNATURES.items():
        for _ in range(n_per_class):
            point_lon = lon + rng.uniform(-5, 5)
            point_lat = lat + rng.uniform(-5, 5)
            row = {
                "plotid": plot_id,
                "image_year": year,
                "dominant_landcover": label,
                "NDVI": ndvi + rng.normal(0, 0.05),
                "elevation_meters": elevation + rng.normal(0, 50),
                ".geo": json.dumps({"type": "Point", "coordinates": [point_lon, point_lat]}),
            }
            for band in PREDICTORS[1:-1]:
                row[band] = rng.uniform(0.0, 0.3)
            rows.append(row)
            plot_id += 1
    return pd.DataFrame(rows)


@pytest.fixture(autouse=True)
def no_config_env(monkeypatch):
    monkeypatch.delenv("LANDCOVER_CART_CONFIG", raising=False)


@pytest.fixture
def samples():
    return make_samples()


@pytest.fixture
def samples_csv(tmp_path, samples):
    path = tmp_path / "samples.csv"
    samples.to_csv(path, index=False)
    return path


@pytest.fixture
def sample_factory():
    return make_samples
