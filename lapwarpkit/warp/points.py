from __future__ import annotations
import json, math
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Sequence, Tuple
import numpy as np
import yaml

@dataclass(frozen=True)
class ControlPoint:
    """A source -> target correspondence in continuous image coordinates."""
    src_x: float; src_y: float; tar_x: float; tar_y: float

    def __post_init__(self):
        for v in (self.src_x, self.src_y, self.tar_x, self.tar_y):
            if not math.isfinite(v):
                raise ValueError(f"control point coordinates must be finite, got {self}")

    @property
    def src(self) -> Tuple[float,float]:
        return (self.src_x, self.src_y)

    @property
    def tar(self) -> Tuple[float,float]:
        return (self.tar_x, self.tar_y)

    def inverted(self) -> "ControlPoint":
        return ControlPoint(self.tar_x, self.tar_y, self.src_x, self.src_y)

def points_to_arrays(points: Sequence[ControlPoint]) -> Tuple[np.ndarray, np.ndarray]:
    """Return (src, tar) as (N,2) float64 arrays."""
    src = np.array([[p.src_x, p.src_y] for p in points], dtype=np.float64).reshape(-1, 2)
    tar = np.array([[p.tar_x, p.tar_y] for p in points], dtype=np.float64).reshape(-1, 2)
    return src, tar

def _row_to_point(row) -> ControlPoint:
    if isinstance(row, dict):
        return ControlPoint(float(row["src_x"]), float(row["src_y"]), float(row["tar_x"]), float(row["tar_y"]))
    sx, sy, tx, ty = row
    return ControlPoint(float(sx), float(sy), float(tx), float(ty))

def load_points(path: str|Path) -> List[ControlPoint]:
    """
    Read a point file: a JSON or YAML list of [src_x, src_y, tar_x, tar_y] rows
    (or mappings with those keys). A top-level {"points": [...]} is accepted too.
    """
    path = Path(path)
    text = path.read_text()
    data = json.loads(text) if path.suffix.lower() == ".json" else yaml.safe_load(text)
    if isinstance(data, dict):
        data = data.get("points", [])
    return [_row_to_point(r) for r in (data or [])]

def save_points(path: str|Path, points: Iterable[ControlPoint]):
    path = Path(path)
    rows = [[p.src_x, p.src_y, p.tar_x, p.tar_y] for p in points]
    if path.suffix.lower() == ".json":
        path.write_text(json.dumps(rows, indent=2))
    else:
        path.write_text(yaml.safe_dump(rows))
