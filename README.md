# rfslam

Components for building SLAM filters based on random finite sets, in plain
Python on top of NumPy and SciPy.

## Installation

```
pip install .
```

For running the tests:

```
pip install .[test]
pytest
```

## What is inside

| Module | Contents |
| --- | --- |
| `rfslam.ospa` | `OSPA`, `COLA` and `OSPAResult`: set-distance metrics built on an optimal assignment (SciPy's `linear_sum_assignment`) |
| `rfslam.process_model` | `GaussianState`, `ProcessModel`, `StaticProcessModel`, `OdometryModel2D` |
| `rfslam.trajectory` | `Trajectory`: an immutable chain of poses, each linked to the trajectory before it |
| `rfslam.kalman` | `KalmanFilter`, `Correction`, `gaussian_likelihood`: an extended Kalman filter for landmark estimates |

### Set metrics

`OSPA(set1, set2, cutoff, order, distance=None)` builds a square cost matrix
padded with the cutoff, with every distance capped at the cutoff, and solves
the optimal assignment. The default distance is the Euclidean norm of the
difference; any callable taking two elements can be given instead. Both sets
empty raises `ValueError`.

- `calc_error()` returns an `OSPAResult` with `error`, and the summed costs
  split into `distance` (pairs below the cutoff) and `cardinality` (pairs at
  the cutoff).
- `optimal_assignment()` gives the column assigned to each row of the padded
  matrix; `assignment_for(i)` gives `(j, cost)` for element `i` of the first
  set, or `None` if it is unassigned.
- `cost_matrix()` returns a copy of the padded matrix; `report()` returns a
  text listing of the assignment and the error.

`COLA` is the same with `calc_error()` returning the cardinalized value,
`OSPA error * n ** (1 / order) / cutoff`.

### Process models

`GaussianState(mean, cov=None, time=0.0)` is a frozen, time-stamped random
vector; a missing covariance is all zeros. `sample(rng)` draws a new mean.

- `ProcessModel(noise=None)` is the abstract base; `sample(state, control, dt,
  use_additive_noise=True, use_input_noise=False, rng=None)` steps the model,
  optionally sampling the control first and drawing the result from
  `N(g(x, u), Q)` when `Q` is set and non-zero.
- `StaticProcessModel` keeps the mean and adds `Q` to the covariance
  (advancing the time by `dt`); without `Q` it returns the state unchanged.
  `static_step(state, dt)` needs no control.
- `OdometryModel2D` moves a pose `(x, y, theta)` by a displacement
  `(dx, dy, dtheta)` expressed in the robot frame.

### Kalman filter

`KalmanFilter(process_model=None, measurement_model=None)` takes any
measurement model whose `measure(pose, landmark)` returns the expected
measurement as a `GaussianState` (its covariance being the innovation
covariance) together with the Jacobian with respect to the landmark, or
`None` when no valid expected measurement exists.

- `predict(landmark, dt=1.0)` uses the static process model.
- `correct(pose, measurement, landmark)` returns a `Correction` (updated
  landmark, measurement likelihood, squared Mahalanobis distance) or `None`.
- `correct_many(pose, measurements, landmark)` updates separately with each
  measurement.
- `calculate_innovation(z_exp, z_act)` can be overridden, e.g. to wrap angles
  or to reject outliers by returning `None`.

## Examples

Comparing an estimated map with ground truth:

```python
from rfslam.ospa import OSPA, COLA

truth = [(0.0, 0.0), (1.0, 0.0), (5.0, 5.0)]
estimate = [(0.1, 0.0), (1.2, 0.0)]

ospa = OSPA(truth, estimate, cutoff=1.0, order=1.0)
print(ospa.calc_error())
print(ospa.optimal_assignment())
print(ospa.report())

print(COLA(truth, estimate, cutoff=1.0, order=1.0).calc_error())
```

Propagating a pose with 2-D odometry and keeping its trajectory:

```python
import numpy as np
from rfslam.process_model import GaussianState, OdometryModel2D
from rfslam.trajectory import Trajectory

model = OdometryModel2D()
pose = GaussianState(np.array([0.0, 0.0, 0.0]))
odometry = GaussianState(np.array([1.0, 0.0, 0.1]))

trajectory = Trajectory(pose)
for _ in range(3):
    pose = model.step(pose, odometry, 1.0)
    trajectory = trajectory.extend(pose)

print([p.mean for p in trajectory.history()])
```

Updating a landmark with a direct position measurement:

```python
import numpy as np
from rfslam.kalman import KalmanFilter
from rfslam.process_model import GaussianState

R = np.eye(2) * 0.01

class RelativePosition:
    def measure(self, pose, landmark):
        expected = GaussianState(landmark.mean - pose, landmark.cov + R)
        return expected, np.eye(2)

kf = KalmanFilter(measurement_model=RelativePosition())
landmark = GaussianState(np.array([2.0, 1.0]), np.eye(2))
result = kf.correct(np.zeros(2), np.array([2.2, 0.9]), landmark)
print(result.landmark.mean, result.likelihood)
```

## What this package does not do

It supplies building blocks only. There is no complete SLAM filter, no
particle filter, no measurement model for a particular sensor, no reading of
datasets or configuration files, no logging of results, and no command-line
program.