"""Building blocks for random-finite-set SLAM: OSPA/COLA set metrics, process models, trajectories and an extended Kalman filter."""

__version__ = "0.1.0"

__all__ = [
    "kalman",
    "ospa",
    "process_model",
    "trajectory",
]