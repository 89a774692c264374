"""Extended Kalman filter for updating landmark estimates from a sensor pose."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Protocol, Sequence

import numpy as np

from .process_model import GaussianState, StaticProcessModel


class MeasurementModel(Protocol):
    """What the filter needs from a measurement model.

    ``measure`` returns the expected measurement, whose covariance is the
    innovation covariance S, together with the Jacobian H of the
    measurement with respect to the landmark. It returns None when no valid
    expected measurement can be produced.
    """

    def measure(
        self, pose: Any, landmark: GaussianState
    ) -> tuple[GaussianState, np.ndarray] | None: ...


@dataclass(frozen=True)
class Correction:
    """An updated landmark with the likelihood of the measurement that produced it."""

    landmark: GaussianState
    likelihood: float
    mahalanobis2: float


def _measurement_vector(measurement: Any) -> np.ndarray:
    if isinstance(measurement, GaussianState):
        return measurement.mean
    return np.asarray(measurement, dtype=float).reshape(-1)


def gaussian_likelihood(mean: Any, cov: Any, x: Any) -> tuple[float, float]:
    """Return the density of N(mean, cov) at ``x`` and the squared Mahalanobis distance.

    A density that cannot be represented (NaN) is reported as 0.
    """
    mean = np.asarray(mean, dtype=float).reshape(-1)
    cov = np.asarray(cov, dtype=float)
    x = _measurement_vector(x)
    if cov.shape != (mean.size, mean.size) or x.size != mean.size:
        raise ValueError("mean, covariance and point have inconsistent sizes")
    diff = x - mean
    d2 = float(diff @ np.linalg.solve(cov, diff))
    norm = math.sqrt((2.0 * math.pi) ** mean.size * float(np.linalg.det(cov)))
    with np.errstate(all="ignore"):
        likelihood = math.exp(-0.5 * d2) / norm if norm > 0 else float("nan")
    if math.isnan(likelihood):
        likelihood = 0.0
    return likelihood, d2


class KalmanFilter:
    """Predicts and corrects landmark estimates given a pose and measurements."""

    def __init__(
        self,
        process_model: StaticProcessModel | None = None,
        measurement_model: MeasurementModel | None = None,
    ) -> None:
        self.process_model = process_model
        self.measurement_model = measurement_model

    def predict(self, landmark: GaussianState, dt: float = 1.0) -> GaussianState:
        """Propagate a landmark estimate forward in time with the process model."""
        if self.process_model is None:
            raise RuntimeError("no process model is set")
        return self.process_model.static_step(landmark, dt)

    def calculate_innovation(self, z_exp: np.ndarray, z_act: np.ndarray) -> np.ndarray | None:
        """Return the innovation, or None to reject the update (e.g. an outlier)."""
        return z_act - z_exp

    def _expect(self, pose: Any, landmark: GaussianState):
        if self.measurement_model is None:
            raise RuntimeError("no measurement model is set")
        result = self.measurement_model.measure(pose, landmark)
        if result is None:
            return None
        expected, jacobian = result
        return expected, np.asarray(jacobian, dtype=float)

    def _gain(self, landmark: GaussianState, expected: GaussianState, h: np.ndarray):
        p = landmark.cov
        s_inv = np.linalg.inv(expected.cov)
        gain = p @ h.T @ s_inv
        p_updated = (np.eye(landmark.dim) - gain @ h) @ p
        p_updated = (p_updated + p_updated.T) / 2
        return gain, p_updated

    def correct(
        self, pose: Any, measurement: Any, landmark: GaussianState
    ) -> Correction | None:
        """Update ``landmark`` with one measurement.

        Returns None if no valid expected measurement exists or the
        innovation is rejected.
        """
        found = self._expect(pose, landmark)
        if found is None:
            return None
        expected, h = found
        z_act = _measurement_vector(measurement)
        innovation = self.calculate_innovation(expected.mean, z_act)
        if innovation is None:
            return None
        gain, p_updated = self._gain(landmark, expected, h)
        updated = GaussianState(landmark.mean + gain @ innovation, p_updated, landmark.time)
        likelihood, d2 = gaussian_likelihood(expected.mean, expected.cov, z_act)
        return Correction(updated, likelihood, d2)

    def correct_many(
        self, pose: Any, measurements: Sequence[Any], landmark: GaussianState
    ) -> list[Correction | None] | None:
        """Update ``landmark`` separately with each measurement.

        Returns None if no valid expected measurement exists; otherwise one
        entry per measurement, None where the innovation was rejected.
        """
        found = self._expect(pose, landmark)
        if found is None:
            return None
        expected, h = found
        gain, p_updated = self._gain(landmark, expected, h)
        results: list[Correction | None] = []
        for measurement in measurements:
            z_act = _measurement_vector(measurement)
            innovation = self.calculate_innovation(expected.mean, z_act)
            if innovation is None:
                results.append(None)
                continue
            updated = GaussianState(
                landmark.mean + gain @ innovation, p_updated, landmark.time
            )
            likelihood, d2 = gaussian_likelihood(expected.mean, expected.cov, z_act)
            results.append(Correction(updated, likelihood, d2))
        return results