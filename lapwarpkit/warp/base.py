from __future__ import annotations
from abc import ABC, abstractmethod
from typing import List, Sequence, Tuple
import numpy as np
from .points import ControlPoint

class Warper(ABC):
    """
    A 2D mapping defined by control-point correspondences.

    set_control_points() replaces every piece of derived state at once; warp()
    is read-only afterwards, so a configured warper can be queried freely.
    """
    def __init__(self):
        self.points: List[ControlPoint] = []

    @property
    def configured(self) -> bool:
        return len(self.points) > 0

    def set_control_points(self, points: Sequence[ControlPoint]):
        self.points = list(points)
        self._fit()

    configure = set_control_points

    @abstractmethod
    def _fit(self) -> None:
        """Recompute derived state from self.points."""

    @abstractmethod
    def warp(self, x: float, y: float) -> Tuple[float,float]:
        pass

    def warp_points(self, xy: np.ndarray) -> np.ndarray:
        """Vectorised warp over an (M,2) array; subclasses override with numpy."""
        xy = np.asarray(xy, dtype=np.float64).reshape(-1, 2)
        return np.array([self.warp(float(x), float(y)) for x, y in xy], dtype=np.float64).reshape(-1, 2)

def make_warper(kind: str, **opts) -> Warper:
    kind = kind.lower()
    if kind == "idw":
        from .idw import IDWWarper
        return IDWWarper()
    if kind == "rbf":
        from .rbf import RBFWarper
        return RBFWarper(mu=opts.get("mu", 1.0), image_size=opts.get("image_size"))
    if kind in ("nn", "regression"):
        from .nn import NNWarper
        keys = ("image_size", "hidden", "epochs", "lr", "batch_size", "seed")
        return NNWarper(**{k: opts[k] for k in keys if k in opts})
    raise ValueError(f"unknown warper '{kind}' (expected idw, rbf or nn)")
