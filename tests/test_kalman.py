import math

import numpy as np
import pytest

from rfslam.kalman import Correction, KalmanFilter, gaussian_likelihood
from rfslam.process_model import GaussianState, StaticProcessModel


class RelativePositionModel:
    """Measures landmark position relative to the pose, with additive noise R."""

    def __init__(self, r):
        self.r = np.asarray(r, dtype=float)

    def measure(self, pose, landmark):
        h = np.eye(landmark.dim)
        expected = landmark.mean - np.asarray(pose, dtype=float)[: landmark.dim]
        s = h @ landmark.cov @ h.T + self.r
        return GaussianState(expected, s), h


class BlindModel:
    def measure(self, pose, landmark):
        return None


class GatedFilter(KalmanFilter):
    def calculate_innovation(self, z_exp, z_act):
        innov = z_act - z_exp
        if np.abs(innov).max() > 1.0:
            return None
        return innov


@pytest.fixture
def kf():
    return KalmanFilter(StaticProcessModel(np.eye(2) * 0.5), RelativePositionModel(np.eye(2)))


@pytest.fixture
def landmark():
    return GaussianState([3.0, 4.0], np.eye(2), time=2.0)


def test_gaussian_likelihood_at_mean_1d():
    lik, d2 = gaussian_likelihood([0.0], [[1.0]], [0.0])
    assert lik == pytest.approx(1.0 / math.sqrt(2 * math.pi))
    assert d2 == 0.0


def test_gaussian_likelihood_matches_scipy():
    from scipy.stats import multivariate_normal

    mean = np.array([1.0, -2.0])
    cov = np.array([[2.0, 0.3], [0.3, 1.0]])
    x = np.array([0.5, -1.0])
    lik, d2 = gaussian_likelihood(mean, cov, x)
    assert lik == pytest.approx(multivariate_normal(mean, cov).pdf(x))
    diff = x - mean
    assert d2 == pytest.approx(diff @ np.linalg.inv(cov) @ diff)


def test_gaussian_likelihood_size_mismatch():
    with pytest.raises(ValueError):
        gaussian_likelihood([0.0, 0.0], np.eye(2), [0.0])


def test_zero_innovation_keeps_mean_and_shrinks_cov(kf, landmark):
    pose = np.array([1.0, 1.0, 0.0])
    result = kf.correct(pose, [2.0, 3.0], landmark)
    assert isinstance(result, Correction)
    np.testing.assert_allclose(result.landmark.mean, landmark.mean)
    np.testing.assert_allclose(result.landmark.cov, np.eye(2) * 0.5)
    assert result.landmark.time == 2.0
    assert result.mahalanobis2 == 0.0


def test_update_moves_towards_measurement(kf, landmark):
    pose = np.zeros(3)
    result = kf.correct(pose, [5.0, 4.0], landmark)
    assert landmark.mean[0] < result.landmark.mean[0] < 5.0
    assert result.landmark.mean[1] == pytest.approx(4.0)
    np.testing.assert_allclose(result.landmark.cov, result.landmark.cov.T)
    lik, d2 = gaussian_likelihood([3.0, 4.0], np.eye(2) * 2, [5.0, 4.0])
    assert result.likelihood == pytest.approx(lik)
    assert result.mahalanobis2 == pytest.approx(d2)


def test_measurement_as_gaussian_state(kf, landmark):
    pose = np.zeros(3)
    a = kf.correct(pose, GaussianState([3.5, 4.5], np.eye(2)), landmark)
    b = kf.correct(pose, [3.5, 4.5], landmark)
    np.testing.assert_allclose(a.landmark.mean, b.landmark.mean)


def test_invalid_expected_measurement_returns_none(landmark):
    kf = KalmanFilter(StaticProcessModel(), BlindModel())
    assert kf.correct(np.zeros(3), [1.0, 1.0], landmark) is None
    assert kf.correct_many(np.zeros(3), [[1.0, 1.0]], landmark) is None


def test_rejected_innovation(landmark):
    kf = GatedFilter(StaticProcessModel(), RelativePositionModel(np.eye(2)))
    pose = np.zeros(3)
    assert kf.correct(pose, [10.0, 4.0], landmark) is None
    assert kf.correct(pose, [3.5, 4.0], landmark) is not None
    results = kf.correct_many(pose, [[10.0, 4.0], [3.5, 4.0]], landmark)
    assert results[0] is None
    assert results[1].landmark.mean[0] > landmark.mean[0]


def test_correct_many_matches_single(kf, landmark):
    pose = np.array([0.5, -0.5, 0.0])
    zs = [[2.0, 4.0], [3.0, 5.0], [2.5, 4.5]]
    many = kf.correct_many(pose, zs, landmark)
    assert len(many) == len(zs)
    for z, res in zip(zs, many):
        single = kf.correct(pose, z, landmark)
        np.testing.assert_allclose(res.landmark.mean, single.landmark.mean)
        np.testing.assert_allclose(res.landmark.cov, single.landmark.cov)
        assert res.likelihood == pytest.approx(single.likelihood)


def test_predict_grows_covariance(kf, landmark):
    predicted = kf.predict(landmark, 1.5)
    np.testing.assert_allclose(predicted.mean, landmark.mean)
    np.testing.assert_allclose(predicted.cov, landmark.cov + np.eye(2) * 0.5)
    assert predicted.time == pytest.approx(3.5)


def test_missing_models_raise(landmark):
    kf = KalmanFilter()
    with pytest.raises(RuntimeError):
        kf.predict(landmark)
    with pytest.raises(RuntimeError):
        kf.correct(np.zeros(3), [0.0, 0.0], landmark)