"""Trajectories of poses as shared, immutable linked histories."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, Iterator, TypeVar

P = TypeVar("P")


@dataclass(frozen=True)
class Trajectory(Generic[P]):
    """The latest pose together with a link to the trajectory before it.

    Extending a trajectory never changes it, so several trajectories
    (for example those of resampled particles) can share one history.
    """

    pose: P
    prev: "Trajectory[P] | None" = None

    def extend(self, pose: P) -> "Trajectory[P]":
        """Return a trajectory with ``pose`` as its latest pose."""
        return Trajectory(pose, self)

    def __iter__(self) -> Iterator[P]:
        """Yield the poses from the latest back to the first."""
        node: Trajectory[P] | None = self
        while node is not None:
            yield node.pose
            node = node.prev

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def history(self) -> list[P]:
        """All poses, oldest first."""
        poses = list(self)
        poses.reverse()
        return poses

    def __getattr__(self, name: str) -> Any:
        # Behave like the latest pose for attribute access.
        if name in ("pose", "prev"):
            raise AttributeError(name)
        return getattr(self.pose, name)