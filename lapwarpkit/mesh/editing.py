from __future__ import annotations
import numpy as np
from typing import Iterable
from ..errors import IllPosedSystemError
from ..solve.laplacian import DirichletLaplacian
from .halfedge import HalfedgeMesh
from .weights import edge_weights, one_ring

class LaplacianEditor:
    """
    Laplacian surface editing with a fixed set of control vertices.

    The differential coordinate of every free vertex (position minus weighted
    one-ring average, measured on the rest mesh) is kept while the controls
    move. The system only depends on which vertices are controls, so repeated
    update() calls while dragging reuse one factorization per axis.
    """
    def __init__(self, mesh: HalfedgeMesh, control_indices: Iterable[int], weights: str="uniform"):
        self.rest = mesh.copy()
        n = mesh.n_vertices
        self.controls = sorted({int(i) for i in control_indices if 0 <= int(i) < n})
        if not self.controls:
            raise IllPosedSystemError("Laplacian surface editing: at least one control point is required.")
        W = edge_weights(mesh, weights)
        ring = one_ring(mesh, W)
        is_control = np.zeros(n, dtype=bool); is_control[self.controls] = True
        # isolated vertices have no differential coordinate and stay put
        self.free = [v for v in mesh.vertices() if not is_control[v] and mesh.neighbors(v)]
        source = {}
        P = mesh.points
        for v in self.free:
            nbrs = ring(v)
            deg = sum(w for _, w in nbrs)
            avg = sum((w * P[u] for u, w in nbrs), np.zeros(3))
            source[v] = deg * P[v] - avg
        rest = {v: P[v].copy() for v in self.controls}
        self.system = DirichletLaplacian(self.free, ring, rest, channels=3, source=source)

    def update(self, changed_points) -> HalfedgeMesh:
        """Solve for new control positions; `changed_points` is indexed by vertex."""
        changed = np.asarray(changed_points, dtype=np.float64).reshape(-1, 3)
        if changed.shape[0] < self.rest.n_vertices:
            raise ValueError(f"expected {self.rest.n_vertices} positions, got {changed.shape[0]}")
        self.system.set_fixed({v: changed[v] for v in self.controls})
        sol = self.system.solve()
        out = self.rest.copy()
        for i, v in enumerate(self.free):
            out.set_point(v, (sol[0][i], sol[1][i], sol[2][i]))
        for v in self.controls:
            out.set_point(v, changed[v])
        return out

def laplacian_edit(mesh: HalfedgeMesh, changed_points, control_indices: Iterable[int],
                   weights: str="uniform") -> HalfedgeMesh:
    return LaplacianEditor(mesh, control_indices, weights).update(changed_points)
