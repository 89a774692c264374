"""Process models that propagate Gaussian states through time."""

from __future__ import annotations

import abc
import dataclasses
from dataclasses import dataclass
from typing import Any

import numpy as np


def _as_vector(value: Any) -> np.ndarray:
    return np.asarray(value, dtype=float).reshape(-1)


@dataclass(frozen=True)
class GaussianState:
    """A time-stamped random vector with a mean and a covariance."""

    mean: np.ndarray
    cov: np.ndarray | None = None
    time: float = 0.0

    def __post_init__(self) -> None:
        mean = _as_vector(self.mean)
        n = mean.size
        if self.cov is None:
            cov = np.zeros((n, n))
        else:
            cov = np.asarray(self.cov, dtype=float)
        if cov.shape != (n, n):
            raise ValueError(
                f"covariance of shape {cov.shape} does not match a mean of size {n}"
            )
        object.__setattr__(self, "mean", mean)
        object.__setattr__(self, "cov", cov)
        object.__setattr__(self, "time", float(self.time))

    @property
    def dim(self) -> int:
        return self.mean.size

    def sample(self, rng: np.random.Generator | None = None) -> "GaussianState":
        """Return a state whose mean is drawn from N(mean, cov); cov and time are kept."""
        rng = rng if rng is not None else np.random.default_rng()
        drawn = rng.multivariate_normal(self.mean, self.cov)
        return dataclasses.replace(self, mean=drawn)


class ProcessModel(abc.ABC):
    """x_k = g(x_{k-1}, u_k) + delta, with delta ~ N(0, Q)."""

    def __init__(self, noise: Any = None) -> None:
        self.noise = None if noise is None else np.asarray(noise, dtype=float)

    @property
    def noise_defined(self) -> bool:
        return self.noise is not None

    @abc.abstractmethod
    def step(self, state: GaussianState, control: Any, dt: float) -> GaussianState:
        """Return the state one time step of size ``dt`` after ``state``."""

    def sample(
        self,
        state: GaussianState,
        control: Any,
        dt: float,
        use_additive_noise: bool = True,
        use_input_noise: bool = False,
        rng: np.random.Generator | None = None,
    ) -> GaussianState:
        """Step the model, optionally perturbing the input and the result.

        With input noise the control (a GaussianState) is sampled first.
        With additive noise, if Q is defined and non-zero, the result is
        drawn from N(g(x, u), Q) and carries Q as its covariance.
        """
        rng = rng if rng is not None else np.random.default_rng()
        if use_input_noise:
            control = control.sample(rng)
        result = self.step(state, control, dt)
        if use_additive_noise and self.noise is not None and np.any(self.noise != 0):
            result = dataclasses.replace(result, cov=self.noise).sample(rng)
        return result


class StaticProcessModel(ProcessModel):
    """A model without inputs, for stationary landmarks; only the covariance grows."""

    def step(self, state: GaussianState, control: Any, dt: float) -> GaussianState:
        if self.noise is None:
            return dataclasses.replace(state)
        return GaussianState(state.mean.copy(), state.cov + self.noise, state.time + dt)

    def static_step(self, state: GaussianState, dt: float) -> GaussianState:
        """Step without any input."""
        return self.step(state, None, dt)


class OdometryModel2D(ProcessModel):
    """2d odometry model for poses (x, y, theta) driven by (dx, dy, dtheta).

    The position moves by the displacement rotated into the world frame by
    the previous heading, and the heading adds the rotational displacement.
    The covariance of the result is carried over unchanged.
    """

    def step(self, state: GaussianState, control: Any, dt: float) -> GaussianState:
        pose = state.mean
        if pose.size != 3:
            raise ValueError("a 2d pose has three components (x, y, theta)")
        u = control.mean if isinstance(control, GaussianState) else _as_vector(control)
        if u.size != 3:
            raise ValueError("2d odometry has three components (dx, dy, dtheta)")
        theta = pose[2]
        c, s = np.cos(theta), np.sin(theta)
        rot_t = np.array([[c, -s], [s, c]])
        position = pose[:2] + rot_t @ u[:2]
        new_mean = np.array([position[0], position[1], theta + u[2]])
        return GaussianState(new_mean, state.cov.copy(), state.time + dt)