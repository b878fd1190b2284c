from __future__ import annotations
from ..errors import MissingBoundaryError
from ..solve.laplacian import DirichletLaplacian
from .boundary import boundary_loop, boundary_positions
from .halfedge import HalfedgeMesh
from .weights import edge_weights, one_ring

def parameterize(mesh: HalfedgeMesh, shape: str="circle", weights: str="uniform",
                 radius: float=1.0) -> HalfedgeMesh:
    """
    Tutte/Floater style embedding: the boundary loop is pinned to a circle or a
    square and every other vertex becomes the weighted average of its
    neighbours. Weights are measured on the input geometry. Result has z = 0.
    """
    loop = boundary_loop(mesh)
    if not loop:
        raise MissingBoundaryError("Parameterization: the mesh has no boundary loop.")
    W = edge_weights(mesh, weights)
    pos = boundary_positions(len(loop), shape, radius)
    out = mesh.copy()
    fixed = {}
    for v, p in zip(loop, pos):
        out.set_point(v, p)
        fixed[v] = p[:2]
    on_loop = set(loop)
    free = [v for v in mesh.vertices() if v not in on_loop]
    if not free:
        return out
    sol = DirichletLaplacian(free, one_ring(mesh, W), fixed, channels=2).solve()
    for i, v in enumerate(free):
        out.set_point(v, (sol[0][i], sol[1][i], 0.0))
    return out

def minimal_surface(mesh: HalfedgeMesh, weights: str="uniform") -> HalfedgeMesh:
    """
    Keep every boundary vertex where it is and solve the interior so each vertex
    is the weighted mean of its one ring. A closed mesh has nothing to hold it
    in place and is reported as ill-posed by the solver.
    """
    W = edge_weights(mesh, weights)
    fixed = {v: mesh.point(v).copy() for v in mesh.vertices() if mesh.is_boundary_vertex(v)}
    free = [v for v in mesh.vertices() if v not in fixed]
    out = mesh.copy()
    if not free:
        return out
    sol = DirichletLaplacian(free, one_ring(mesh, W), fixed, channels=3).solve()
    for i, v in enumerate(free):
        out.set_point(v, (sol[0][i], sol[1][i], sol[2][i]))
    return out
