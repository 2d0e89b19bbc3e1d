"""Point values and the control-point arena used by manual curves."""
from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Any, Callable, Iterable, List, NamedTuple, Optional, Tuple

import pandas as pd

from ..constants import HIT_RADIUS


class DataPoint(NamedTuple):
    x: float
    y: float


def as_points(data: Any) -> List[DataPoint]:
    """Coerce frames, ``{"x", "y"}`` dicts or pairs into DataPoints.

    A DataFrame must carry ``x`` and ``y`` columns; rows are kept in frame
    order.
    """
    if data is None:
        return []
    if isinstance(data, pd.DataFrame):
        return [
            DataPoint(float(x), float(y))
            for x, y in zip(data["x"].to_numpy(), data["y"].to_numpy())
        ]
    out = []
    for p in data:
        if isinstance(p, dict):
            out.append(DataPoint(float(p["x"]), float(p["y"])))
        else:
            x, y = p
            out.append(DataPoint(float(x), float(y)))
    return out


def sorted_by_x(points: Iterable[DataPoint]) -> List[DataPoint]:
    return sorted(points, key=lambda p: p.x)


ScreenProjection = Callable[[DataPoint], Tuple[float, float]]


@dataclass(frozen=True)
class ControlPoints:
    """Immutable arena of user-placed points keyed by stable ids.

    Ids survive moves, so a point being dragged keeps its identity even
    when it crosses a neighbour in x. Insertion keeps x order; moves do
    not resort.
    """

    entries: Tuple[Tuple[int, DataPoint], ...] = ()
    next_id: int = 0

    @classmethod
    def from_points(cls, points: Iterable[Any]) -> "ControlPoints":
        pts = as_points(points)
        return cls(tuple(enumerate(pts)), len(pts))

    def __len__(self) -> int:
        return len(self.entries)

    def __bool__(self) -> bool:
        return bool(self.entries)

    @property
    def ids(self) -> Tuple[int, ...]:
        return tuple(pid for pid, _ in self.entries)

    @property
    def points(self) -> List[DataPoint]:
        """Points in stored order."""
        return [p for _, p in self.entries]

    def sorted_points(self) -> List[DataPoint]:
        return sorted_by_x(self.points)

    def get(self, point_id: int) -> DataPoint:
        for pid, p in self.entries:
            if pid == point_id:
                return p
        raise KeyError(point_id)

    def add(self, point: Any) -> Tuple["ControlPoints", int]:
        """Insert ``point`` after every entry with x <= point.x."""
        p = DataPoint(float(point[0]), float(point[1]))
        pid = self.next_id
        idx = len(self.entries)
        for i, (_, q) in enumerate(self.entries):
            if q.x > p.x:
                idx = i
                break
        entries = self.entries[:idx] + ((pid, p),) + self.entries[idx:]
        return ControlPoints(entries, pid + 1), pid

    def move(self, point_id: int, point: Any) -> "ControlPoints":
        p = DataPoint(float(point[0]), float(point[1]))
        if point_id not in self.ids:
            raise KeyError(point_id)
        entries = tuple(
            (pid, p if pid == point_id else q) for pid, q in self.entries
        )
        return ControlPoints(entries, self.next_id)

    def remove(self, point_id: int) -> "ControlPoints":
        if point_id not in self.ids:
            raise KeyError(point_id)
        entries = tuple((pid, q) for pid, q in self.entries if pid != point_id)
        return ControlPoints(entries, self.next_id)

    def nearest(
        self,
        target: Any,
        radius: float = HIT_RADIUS,
        to_screen: Optional[ScreenProjection] = None,
    ) -> Optional[int]:
        """Id of the closest point strictly within ``radius`` of ``target``.

        Distances are measured after ``to_screen`` when given, so the UI can
        hit-test in pixels; ``target`` must then already be in screen space.
        """
        project = to_screen or (lambda p: (p.x, p.y))
        tx, ty = float(target[0]), float(target[1])
        best_id = None
        best = radius
        for pid, p in self.entries:
            px, py = project(p)
            d = math.hypot(tx - px, ty - py)
            if d < best:
                best = d
                best_id = pid
        return best_id

    def to_list(self) -> List[dict]:
        return [{"x": p.x, "y": p.y} for p in self.points]


__all__ = [
    "DataPoint",
    "ControlPoints",
    "as_points",
    "sorted_by_x",
]
