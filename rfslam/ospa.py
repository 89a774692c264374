"""Optimal sub-pattern assignment (OSPA) and cardinalized assignment (COLA) metrics."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Callable, Sequence

import numpy as np
from scipy.optimize import linear_sum_assignment


@dataclass(frozen=True)
class OSPAResult:
    """Metric value plus its distance and cardinality components.

    The components are sums of (cut-off) costs, before raising to the order
    and before averaging.
    """

    error: float
    distance: float
    cardinality: float


def _default_distance(a: Any, b: Any) -> float:
    return float(np.linalg.norm(np.asarray(a, dtype=float) - np.asarray(b, dtype=float)))


class OSPA:
    """OSPA metric between two sets, with cutoff ``c`` and order ``p``."""

    def __init__(
        self,
        set1: Sequence[Any],
        set2: Sequence[Any],
        cutoff: float,
        order: float,
        distance: Callable[[Any, Any], float] | None = None,
    ) -> None:
        self.cutoff = float(cutoff)
        self.order = float(order)
        dist = distance or _default_distance
        self._n1 = len(set1)
        self._n2 = len(set2)
        self._n = max(self._n1, self._n2)
        if self._n == 0:
            raise ValueError("both sets are empty")

        cost = np.full((self._n, self._n), self.cutoff)
        for i, a in enumerate(set1):
            for j, b in enumerate(set2):
                cost[i, j] = min(abs(dist(a, b)), self.cutoff)
        self._cost = cost

        _, cols = linear_sum_assignment(cost)
        self._soln = tuple(int(j) for j in cols)

    @property
    def size(self) -> int:
        """Dimension of the (square) cost matrix."""
        return self._n

    def calc_error(self) -> OSPAResult:
        """Compute the OSPA error and its components."""
        total = 0.0
        e_dist = 0.0
        e_card = 0.0
        for i, j in enumerate(self._soln):
            c_ij = float(self._cost[i, j])
            if c_ij == self.cutoff:
                e_card += c_ij
            else:
                e_dist += c_ij
            total += c_ij ** self.order
        error = (total / self._n) ** (1.0 / self.order)
        return OSPAResult(error, e_dist, e_card)

    def report(self) -> str:
        """Return a text listing of the optimal assignment and the error."""
        lines = ["Assignment Results:", ""]
        for i, j in enumerate(self._soln):
            c_ij = float(self._cost[i, j])
            if i >= self._n1:
                lines.append(f"n/a -- {j:03d} [{c_ij:f}]")
            elif j >= self._n2:
                lines.append(f"{i:03d} -- n/a [{c_ij:f}]")
            else:
                lines.append(f"{i:03d} -- {j:03d} [{c_ij:f}]")
        lines.append("")
        lines.append(f"Error: {self.calc_error().error:f}")
        return "\n".join(lines) + "\n"

    def optimal_assignment(self) -> tuple[int, ...]:
        """Column assigned to each row of the padded cost matrix."""
        return self._soln

    def assignment_for(self, index: int) -> tuple[int, float] | None:
        """Return ``(set2 index, cost)`` for an element of set 1, or None if unassigned."""
        if not 0 <= index < self._n1:
            return None
        j = self._soln[index]
        if j >= self._n2:
            return None
        return j, float(self._cost[index, j])

    def cost_matrix(self) -> np.ndarray:
        """A copy of the cut-off, padded cost matrix."""
        return self._cost.copy()


class COLA(OSPA):
    """Cardinalized optimal linear assignment metric."""

    def calc_error(self) -> OSPAResult:
        result = super().calc_error()
        cola = result.error * self._n ** (1.0 / self.order) / self.cutoff
        return dataclasses.replace(result, error=cola)