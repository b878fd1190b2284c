from __future__ import annotations
import numpy as np
from typing import Dict, Iterator, List, Optional, Sequence, Tuple
from ..errors import MeshTopologyError

class HalfedgeMesh:
    """
    Array-based halfedge mesh for polygonal, manifold (possibly bordered) surfaces.

    Halfedge h runs from_vertex(h) -> to_vertex(h). Interior halfedges belong to
    a face; every edge without a twin gets a boundary halfedge (face -1) and
    boundary halfedges are chained with next() around each hole.
    """
    def __init__(self, points, faces: Sequence[Sequence[int]]):
        self.points = np.array(points, dtype=np.float64).reshape(-1, 3)
        self.faces = [list(map(int, f)) for f in faces]
        self._build()

    def _build(self):
        nv = len(self.points)
        src: List[int] = []; dst: List[int] = []; face: List[int] = []; nxt: List[int] = []
        lookup: Dict[Tuple[int,int],int] = {}
        for fi, f in enumerate(self.faces):
            if len(f) < 3:
                raise MeshTopologyError(f"face {fi} has fewer than 3 vertices")
            base = len(src)
            for k, a in enumerate(f):
                b = f[(k + 1) % len(f)]
                if not (0 <= a < nv and 0 <= b < nv):
                    raise MeshTopologyError(f"face {fi} references a missing vertex")
                if (a, b) in lookup:
                    raise MeshTopologyError(f"edge {a}->{b} is used twice (non-manifold or inconsistent orientation)")
                lookup[(a, b)] = len(src)
                src.append(a); dst.append(b); face.append(fi)
                nxt.append(base + (k + 1) % len(f))
        # boundary halfedges for edges seen from one side only
        out_boundary: Dict[int,int] = {}
        for (a, b) in list(lookup):
            if (b, a) not in lookup:
                h = len(src)
                lookup[(b, a)] = h
                src.append(b); dst.append(a); face.append(-1); nxt.append(-1)
                if b in out_boundary:
                    raise MeshTopologyError(f"vertex {b} lies on more than one boundary fan")
                out_boundary[b] = h
        for h in out_boundary.values():
            nxt[h] = out_boundary[dst[h]]
        self._src = np.asarray(src, dtype=np.intp); self._dst = np.asarray(dst, dtype=np.intp)
        self._face = np.asarray(face, dtype=np.intp); self._next = np.asarray(nxt, dtype=np.intp)
        self._lookup = lookup
        self._opp = np.array([lookup[(dst[h], src[h])] for h in range(len(src))], dtype=np.intp)
        ring: List[List[int]] = [[] for _ in range(nv)]
        for (a, b) in lookup:
            ring[a].append(b)
        self._ring = [sorted(r) for r in ring]
        self._boundary_vertex = np.zeros(nv, dtype=bool)
        self._boundary_vertex[list(out_boundary)] = True

    # --- mesh graph interface ---------------------------------------------------
    @property
    def n_vertices(self) -> int: return len(self.points)

    @property
    def n_halfedges(self) -> int: return len(self._src)

    def vertices(self) -> range: return range(self.n_vertices)
    def halfedges(self) -> range: return range(self.n_halfedges)

    def is_boundary(self, h: int) -> bool: return bool(self._face[h] < 0)
    def is_boundary_vertex(self, v: int) -> bool: return bool(self._boundary_vertex[v])
    def next(self, h: int) -> int: return int(self._next[h])
    def opposite(self, h: int) -> int: return int(self._opp[h])
    def to_vertex(self, h: int) -> int: return int(self._dst[h])
    def from_vertex(self, h: int) -> int: return int(self._src[h])
    def face(self, h: int) -> int: return int(self._face[h])

    def find_halfedge(self, u: int, v: int) -> Optional[int]:
        return self._lookup.get((u, v))

    def neighbors(self, v: int) -> List[int]:
        return self._ring[v]

    def point(self, v: int) -> np.ndarray:
        return self.points[v]

    def set_point(self, v: int, p):
        self.points[v] = np.asarray(p, dtype=np.float64)[:3]

    def copy(self) -> "HalfedgeMesh":
        other = object.__new__(HalfedgeMesh)
        other.__dict__.update(self.__dict__)
        other.points = self.points.copy()
        return other

    def boundary_halfedges(self) -> Iterator[int]:
        return (int(h) for h in np.flatnonzero(self._face < 0))
