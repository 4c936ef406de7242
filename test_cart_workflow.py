"""
Test the split, training and evaluation helpers.
"""

import numpy as np
import pytest

from landcover_cart.exceptions import DataError, MLError, ValidationError
from landcover_cart.ML import (
    LabelEncoding,
    cart_params,
    encode_dataset,
    evaluate_model,
    feature_importances,
    load_model,
    save_model,
    split_dataset,
    train_cart_model,
)

PREDICTORS = ["NDVI", "SR_B1", "SR_B2", "SR_B3", "SR_B4", "SR_B5", "SR_B7", "elevation_meters"]


@pytest.fixture
def encoded(samples):
    encoding = LabelEncoding.fit(samples["dominant_landcover"])
    return encode_dataset(samples, encoding), encoding


def test_split_partitions_input(samples):
    splits = split_dataset(samples, train_fraction=0.7, seed=42)
    assert len(splits.training) + len(splits.testing) == len(samples)
    assert set(splits.training.index).isdisjoint(splits.testing.index)
    assert set(splits.training["plotid"]) | set(splits.testing["plotid"]) == set(samples["plotid"])
    assert (splits.training["random"] < 0.7).all()
    assert (splits.testing["random"] >= 0.7).all()
    assert "random" not in samples.columns


def test_split_is_reproducible(samples):
    first = split_dataset(samples, seed=42)
    second = split_dataset(samples, seed=42)
    other = split_dataset(samples, seed=7)
    np.testing.assert_array_equal(first.train_indices, second.train_indices)
    np.testing.assert_array_equal(first.test_indices, second.test_indices)
    assert not np.array_equal(first.train_indices, other.train_indices)


@pytest.mark.parametrize("fraction", [0, 1, 1.2, -0.1])
def test_split_rejects_fraction(samples, fraction):
    with pytest.raises(ValidationError):
        split_dataset(samples, train_fraction=fraction)


def test_split_requires_integer_seed(samples):
    with pytest.raises(ValidationError):
        split_dataset(samples, seed=1.5)


def test_cart_params():
    params = cart_params({"cart": {"criterion": "entropy", "max_depth": None, "min_samples_leaf": 2}})
    assert params == {"criterion": "entropy", "min_samples_leaf": 2}
    with pytest.raises(ValidationError):
        cart_params({"cart": {"n_estimators": 100}})


def test_train_and_evaluate(encoded):
    frame, encoding = encoded
    splits = split_dataset(frame, seed=42)
    model = train_cart_model(splits.training, PREDICTORS, encoding=encoding)
    assert set(model.classes) <= set(encoding.codes)
    assert model.n_training == len(splits.training)

    result = evaluate_model(model, splits.testing)
    confusion = result.confusion
    classified = result.classified
    assert confusion.total == len(splits.testing)
    assert confusion.correct == int((classified["landcover"] == classified["classification"]).sum())
    assert len(result.misclassified) == len(classified) - confusion.correct
    assert 0.0 <= result.metrics["accuracy"] <= 1.0
    assert -1.0 <= result.metrics["kappa"] <= 1.0
    # the synthetic classes are well separated on NDVI and elevation
    assert result.metrics["accuracy"] > 0.8
    assert sum(result.metrics["total_per_class"].values()) == len(splits.testing)


def test_feature_importances(encoded):
    frame, encoding = encoded
    model = train_cart_model(frame, PREDICTORS, encoding=encoding)
    importances = feature_importances(model)
    assert set(importances) == set(PREDICTORS)
    assert sum(importances.values()) == pytest.approx(1.0)
    assert list(importances.values()) == sorted(importances.values(), reverse=True)


def test_train_empty_set(encoded):
    frame, encoding = encoded
    with pytest.raises(MLError):
        train_cart_model(frame.iloc[0:0], PREDICTORS, encoding=encoding)


def test_train_missing_predictor(encoded):
    frame, encoding = encoded
    with pytest.raises(DataError):
        train_cart_model(frame, PREDICTORS + ["SR_B6"], encoding=encoding)


def test_train_nan_predictor(encoded):
    frame, encoding = encoded
    frame = frame.copy()
    frame.loc[0, "NDVI"] = np.nan
    with pytest.raises(DataError):
        train_cart_model(frame, PREDICTORS, encoding=encoding)


def test_train_missing_class_column(samples):
    with pytest.raises(DataError):
        train_cart_model(samples, PREDICTORS)


def test_model_persistence(tmp_path, encoded):
    frame, encoding = encoded
    model = train_cart_model(frame, PREDICTORS, encoding=encoding)
    path = save_model(model, str(tmp_path / "models" / "model.joblib"))
    loaded = load_model(path)
    assert loaded.predictors == model.predictors
    assert loaded.encoding == encoding
    np.testing.assert_array_equal(
        loaded.predict(frame)["classification"], model.predict(frame)["classification"]
    )
    with pytest.raises(FileNotFoundError):
        load_model(str(tmp_path / "missing.joblib"))
