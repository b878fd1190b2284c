from __future__ import annotations
import math
import numpy as np
from typing import List
from ..errors import MissingBoundaryError
from .halfedge import HalfedgeMesh

def boundary_loop(mesh: HalfedgeMesh) -> List[int]:
    """Ordered vertices of the first boundary loop, or [] for a closed mesh."""
    start = next(mesh.boundary_halfedges(), None)
    if start is None: return []
    loop = []
    h = start
    while True:
        loop.append(mesh.to_vertex(h))
        h = mesh.next(h)
        if h == start: break
    return loop

def circle_mapping(n: int, radius: float=1.0) -> np.ndarray:
    """n points at angles 2*pi*i/n on a circle about (0.5, 0.5), z = 0."""
    theta = 2.0 * math.pi * np.arange(n) / max(n, 1)
    return np.stack([0.5 + radius*np.cos(theta), 0.5 + radius*np.sin(theta), np.zeros(n)], axis=1)

def square_mapping(n: int) -> np.ndarray:
    """n points spread evenly along the unit square's perimeter, starting at the origin."""
    out = np.zeros((n, 3))
    for i in range(n):
        s = 4.0 * i / n
        if s < 1.0:   out[i,:2] = (s, 0.0)
        elif s < 2.0: out[i,:2] = (1.0, s - 1.0)
        elif s < 3.0: out[i,:2] = (3.0 - s, 1.0)
        else:         out[i,:2] = (0.0, 4.0 - s)
    return out

SHAPES = ("circle", "square")

def boundary_positions(n: int, shape: str="circle", radius: float=1.0) -> np.ndarray:
    if shape == "circle": return circle_mapping(n, radius)
    if shape == "square": return square_mapping(n)
    raise ValueError(f"unknown boundary shape '{shape}' (expected circle or square)")

def map_boundary(mesh: HalfedgeMesh, shape: str="circle", radius: float=1.0) -> HalfedgeMesh:
    """Copy of `mesh` with its boundary loop laid out on a circle or a square."""
    loop = boundary_loop(mesh)
    if not loop:
        raise MissingBoundaryError("Boundary mapping: no boundary found.")
    pos = boundary_positions(len(loop), shape, radius)
    out = mesh.copy()
    for v, p in zip(loop, pos):
        out.set_point(v, p)
    return out
