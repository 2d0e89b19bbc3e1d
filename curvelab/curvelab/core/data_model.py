"""Series data model.

A SeriesModel wraps a pandas DataFrame of points, adding:
 - Regression settings and the last rendered curve
 - Operation log (the history hook: one record per committed edit)
 - Batched transactions so continuous edits (slider drags, point drags)
   collapse into a single record
"""
from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
import inspect
import uuid
from typing import Any, Callable, Dict, List, Optional

import pandas as pd

from ..analysis.freehand import fit_freehand_stroke
from . import state
from .points import DataPoint, as_points
from .settings import RegressionSettings

OperationRecord = Dict[str, Any]
Transition = Callable[..., state.RegressionUpdate]


@dataclass
class SeriesModel:
    name: str
    df: pd.DataFrame
    settings: RegressionSettings = field(default_factory=RegressionSettings)
    regression_points: List[DataPoint] = field(default_factory=list)
    operations: List[OperationRecord] = field(default_factory=list)
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    _batch: Optional[OperationRecord] = field(default=None, repr=False)

    @classmethod
    def from_points(cls, name: str, points: Any) -> "SeriesModel":
        pts = as_points(points)
        df = pd.DataFrame(pts, columns=["x", "y"], dtype=float)
        return cls(name=name, df=df)

    @classmethod
    def from_stroke(cls, polyline: Any, name: str = "Drawn Curve") -> Optional["SeriesModel"]:
        """New independent series from a freehand stroke; None if nothing fits."""
        pts = fit_freehand_stroke(polyline)
        if not pts:
            return None
        sm = cls.from_points(name, pts)
        sm.log("draw", points=len(pts))
        return sm

    @property
    def points(self) -> List[DataPoint]:
        return as_points(self.df)

    def log(self, op: str, **params):
        if self._batch is not None:
            self._batch["params"].update(params)
            self._batch["steps"] += 1
            return
        rec: OperationRecord = {
            "op": op,
            "params": params,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "rows": int(len(self.df)),
        }
        self.operations.append(rec)

    @contextmanager
    def transaction(self, label: str):
        """Record every edit inside the block as one ``label`` operation."""
        if self._batch is not None:
            yield self
            return
        self._batch = {"op": label, "params": {}, "steps": 0}
        try:
            yield self
        finally:
            batch, self._batch = self._batch, None
            if batch["steps"]:
                self.log(label, steps=batch["steps"], **batch["params"])

    # --- Regression transitions ---
    def apply(self, transition: Transition, op_name: str, *args, **params):
        """Run ``transition(settings, points, ...)``, keep its result, log it.

        Returns whatever the transition returned; the ``RegressionUpdate``
        carries the notification for the UI to show.
        """
        if "series_name" in inspect.signature(transition).parameters:
            params.setdefault("series_name", self.name)
        outcome = transition(self.settings, self.points, *args, **params)
        update = outcome[0] if isinstance(outcome, tuple) else outcome
        self.settings = update.settings
        self.regression_points = list(update.result.points)
        params.pop("series_name", None)
        self.log(op_name, **_loggable(args, params))
        return outcome

    def set_data(self, df: pd.DataFrame):
        """Replace the points and re-render the curve without notifying."""
        self.df = df.reset_index(drop=True)
        update = state.recompute(self.settings, self.points, self.name, notify=False)
        self.regression_points = list(update.result.points)
        self.log("set_data")
        return self

    # --- Serialization helpers ---
    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "data": self.df.to_dict(orient="list"),
            "regression": self.settings.to_dict(),
            "operations": self.operations,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "SeriesModel":
        sm = cls(
            name=d["name"],
            df=pd.DataFrame(d["data"]),
            settings=RegressionSettings.from_dict(d.get("regression", {})),
        )
        if "id" in d:
            sm.id = d["id"]
        sm.operations = d.get("operations", [])
        sm.regression_points = list(
            state.recompute(sm.settings, sm.points, notify=False).result.points
        )
        return sm


def _loggable(args, params) -> Dict[str, Any]:
    """JSON-friendly view of transition arguments for the operation log."""
    out: Dict[str, Any] = {}
    if args:
        out["args"] = [getattr(a, "value", a) for a in args]
    for k, v in params.items():
        out[k] = getattr(v, "value", v)
    return out


__all__ = ["SeriesModel", "OperationRecord"]
