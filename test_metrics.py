"""
Test the confusion matrix statistics.
"""

import numpy as np
import pytest

from landcover_cart.exceptions import ValidationError
from landcover_cart.ML import ConfusionMatrix


@pytest.fixture
def two_class():
    return ConfusionMatrix.from_array([[5, 1], [2, 4]])


def test_accuracy(two_class):
    assert two_class.total == 12
    assert two_class.correct == 9
    assert two_class.accuracy() == pytest.approx(0.75)


def test_producers_and_consumers_accuracy(two_class):
    assert two_class.producers_accuracy()[0] == pytest.approx(5 / 6)
    assert two_class.consumers_accuracy()[0] == pytest.approx(5 / 7)
    assert two_class.producers_accuracy()[1] == pytest.approx(4 / 6)
    assert two_class.consumers_accuracy()[1] == pytest.approx(4 / 5)


def test_kappa(two_class):
    # p_o = 0.75, p_e = (6*7 + 6*5) / 144 = 0.5
    assert two_class.expected_agreement() == pytest.approx(0.5)
    assert two_class.kappa() == pytest.approx(0.5)


def test_from_labels_matches_counts():
    actual = [0, 0, 1, 1, 2, 2, 2]
    predicted = [0, 1, 1, 1, 2, 0, 2]
    confusion = ConfusionMatrix.from_labels(actual, predicted)
    assert confusion.labels == (0, 1, 2)
    assert confusion.total == len(actual)
    assert confusion.correct == sum(a == p for a, p in zip(actual, predicted))
    assert confusion.matrix[2, 0] == 1
    assert 0.0 <= confusion.accuracy() <= 1.0
    assert -1.0 <= confusion.kappa() <= 1.0


def test_labels_cover_actual_and_predicted():
    confusion = ConfusionMatrix.from_labels([0, 0], [0, 3])
    assert confusion.labels == (0, 3)
    # class 3 is never actual: zero row gives 0.0 instead of a division error
    assert confusion.producers_accuracy()[3] == 0.0
    assert confusion.consumers_accuracy()[3] == 0.0


def test_single_class_kappa():
    assert ConfusionMatrix.from_labels([1, 1, 1], [1, 1, 1]).kappa() == 1.0


def test_empty_matrix():
    confusion = ConfusionMatrix.from_labels([], [])
    assert confusion.total == 0
    assert confusion.accuracy() == 0.0
    assert confusion.kappa() == 0.0


def test_dataframe_names(two_class):
    frame = two_class.to_dataframe({0: "Water", 1: "Trees"})
    assert list(frame.index) == ["Water", "Trees"]
    assert frame.loc["Trees", "Water"] == 2


@pytest.mark.parametrize("matrix", [
    [[1, 2, 3]],
    [[1, -1], [0, 1]],
])
def test_invalid_matrix(matrix):
    with pytest.raises(ValidationError):
        ConfusionMatrix.from_array(np.array(matrix))


def test_random_matrices_respect_bounds():
    rng = np.random.default_rng(5)
    for _ in range(20):
        actual = rng.integers(0, 4, size=50)
        predicted = rng.integers(0, 4, size=50)
        confusion = ConfusionMatrix.from_labels(actual, predicted)
        assert confusion.total == 50
        assert confusion.correct == int((actual == predicted).sum())
        assert 0.0 <= confusion.accuracy() <= 1.0
        assert -1.0 <= confusion.kappa() <= 1.0
