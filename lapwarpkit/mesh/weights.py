from __future__ import annotations
import numpy as np
from typing import Callable, Dict, Tuple
from .halfedge import HalfedgeMesh

CROSS_EPS = 1e-8

def cot_at(a: np.ndarray, b: np.ndarray, c: np.ndarray) -> float:
    """Cotangent of the angle at c in triangle (a, b, c); 0 for degenerate triangles."""
    v1 = a - c; v2 = b - c
    cross = float(np.linalg.norm(np.cross(v1, v2)))
    if cross < CROSS_EPS: return 0.0
    return float(v1 @ v2) / cross

def uniform_weight(mesh: HalfedgeMesh, v: int, u: int) -> float:
    return 1.0

def cotangent_weight(mesh: HalfedgeMesh, v: int, u: int) -> float:
    """cot(alpha) + cot(beta) for the angles facing edge (v,u); one term on a border edge."""
    h = mesh.find_halfedge(v, u)
    if h is None: return 0.0
    w = 0.0
    for he in (h, mesh.opposite(h)):
        if mesh.is_boundary(he): continue
        opp = mesh.to_vertex(mesh.next(he))
        w += cot_at(mesh.point(v), mesh.point(u), mesh.point(opp))
    return w

WEIGHTS: Dict[str,Callable[[HalfedgeMesh,int,int],float]] = {
    "uniform": uniform_weight,
    "cotangent": cotangent_weight,
    "cot": cotangent_weight,
}

def edge_weights(mesh: HalfedgeMesh, kind: str="uniform") -> Dict[Tuple[int,int],float]:
    """Weight of every directed edge (v,u), evaluated on the mesh's current geometry."""
    try:
        fn = WEIGHTS[kind]
    except KeyError:
        raise ValueError(f"unknown edge weight '{kind}' (expected uniform or cotangent)") from None
    out = {}
    for v in mesh.vertices():
        for u in mesh.neighbors(v):
            if (u, v) in out: out[(v, u)] = out[(u, v)]
            else: out[(v, u)] = fn(mesh, v, u)
    return out

def one_ring(mesh: HalfedgeMesh, W: Dict[Tuple[int,int],float]):
    """Neighbour callback for the Laplacian solver: v -> [(u, w_vu), ...]."""
    def neighbors(v):
        return [(u, W[(v, u)]) for u in mesh.neighbors(v)]
    return neighbors
