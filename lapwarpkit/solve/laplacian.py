from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Hashable, Iterable, List, Mapping, Optional, Sequence, Tuple
import numpy as np
import scipy.sparse as sp
from scipy.sparse.csgraph import connected_components
from scipy.sparse.linalg import splu
from ..errors import FactorizationError, IllPosedSystemError
from ..runtime.report import SolveStats

Node = Hashable

class LaplacianSolver(ABC):
    """
    Weighted graph Laplacian restricted to the free nodes (Omega).

    Row i holds the weighted degree of node i on the diagonal and -w_ij for every
    free neighbour j; fixed neighbours only show up in the right-hand side,
    which subclasses build per channel in rhs().

    The matrix depends only on the topology and the weights, never on the fixed
    values, so one factorization per (version, channel) serves any number of
    solves. build_system() bumps the version, which retires older entries.

    floating="raise" rejects components of Omega that touch no fixed node;
    floating="anchor" pins the first node of each such component to
    anchor_value(), which fixes the free additive constant.
    """
    value_range: Optional[Tuple[float,float]] = None

    def __init__(self, floating: str="raise"):
        if floating not in ("raise", "anchor"):
            raise ValueError(f"floating must be 'raise' or 'anchor', got {floating!r}")
        self.floating = floating
        self.nodes: List[Node] = []
        self.index: Dict[Node,int] = {}
        self.A: Optional[sp.csc_matrix] = None
        self.anchors: List[int] = []
        self.version = 0
        self.rebuild_count = 0
        self.factorization_count = 0
        self.solution: Dict[Any,np.ndarray] = {}
        self._factors: Dict[Tuple[int,Any],Any] = {}
        self._stale = True
        self._solved = False

    # --- hooks -------------------------------------------------------------
    @abstractmethod
    def free_nodes(self) -> Iterable[Node]: ...

    @abstractmethod
    def neighbors(self, node: Node) -> Iterable[Tuple[Node,float]]: ...

    @abstractmethod
    def channels(self) -> Sequence[Any]: ...

    @abstractmethod
    def rhs(self, channel) -> np.ndarray: ...

    def anchor_value(self, node: Node, channel) -> float:
        return 0.0

    # --- state -------------------------------------------------------------
    @property
    def state(self) -> str:
        if self._stale: return "unbuilt"
        if self._solved: return "solved"
        if any(v == self.version for v, _ in self._factors): return "factorized"
        return "built"

    def invalidate(self):
        """Topology changed: the next solve rebuilds and refactorizes."""
        self._stale = True
        self._solved = False

    def build_system(self):
        nodes = list(dict.fromkeys(self.free_nodes()))
        index = {node: i for i, node in enumerate(nodes)}
        n = len(nodes)
        diag = np.zeros(n)
        grounded = np.zeros(n, dtype=bool)
        rows: List[int] = []; cols: List[int] = []; vals: List[float] = []
        for i, node in enumerate(nodes):
            for nb, w in self.neighbors(node):
                diag[i] += w
                j = index.get(nb)
                if j is None:
                    if w != 0: grounded[i] = True
                elif j != i:
                    rows.append(i); cols.append(j); vals.append(-w)

        anchors: List[int] = []
        if n:
            link = sp.coo_matrix((np.ones(len(rows)), (rows, cols)), shape=(n, n))
            ncomp, labels = connected_components(link, directed=False)
            reached = np.zeros(ncomp, dtype=bool)
            reached[labels[grounded]] = True
            floating = np.flatnonzero(~reached)
            if floating.size and self.floating == "raise":
                raise IllPosedSystemError(
                    f"{floating.size} component(s) of the free set reach no fixed node "
                    f"({int((~reached[labels]).sum())} of {n} nodes)")
            for c in floating:
                anchors.append(int(np.flatnonzero(labels == c)[0]))

        r = np.asarray(rows, dtype=np.intp); c = np.asarray(cols, dtype=np.intp); v = np.asarray(vals)
        if anchors:
            pinned = np.zeros(n, dtype=bool); pinned[anchors] = True
            keep = ~pinned[r]
            r, c, v = r[keep], c[keep], v[keep]
            diag[pinned] = 1.0
        idx = np.arange(n)
        A = sp.coo_matrix((np.concatenate([v, diag]), (np.concatenate([r, idx]), np.concatenate([c, idx]))),
                          shape=(n, n)).tocsc()
        A.sum_duplicates()

        self.nodes, self.index, self.A, self.anchors = nodes, index, A, anchors
        self.version += 1
        self.rebuild_count += 1
        self._factors = {k: f for k, f in self._factors.items() if k[0] == self.version}
        self._stale = False
        self._solved = False

    def factorize(self, channel):
        if self._stale:
            self.build_system()
        key = (self.version, channel)
        lu = self._factors.get(key)
        if lu is None:
            try:
                lu = splu(self.A, permc_spec="MMD_AT_PLUS_A")
            except RuntimeError as e:
                raise FactorizationError(f"factorization failed for channel {channel!r}: {e}") from e
            self._factors[key] = lu
            self.factorization_count += 1
        return lu

    def solve(self) -> Dict[Any,np.ndarray]:
        if self._stale:
            self.build_system()
        out: Dict[Any,np.ndarray] = {}
        for ch in self.channels():
            if not self.nodes:
                out[ch] = np.zeros(0); continue
            lu = self.factorize(ch)
            b = np.array(self.rhs(ch), dtype=np.float64)
            for i in self.anchors:
                b[i] = self.anchor_value(self.nodes[i], ch)
            x = lu.solve(b)
            if not np.all(np.isfinite(x)):
                raise FactorizationError(f"solve produced non-finite values for channel {ch!r}")
            if self.value_range is not None:
                x = np.clip(x, *self.value_range)
            out[ch] = x
        self.solution = out
        self._solved = True
        return out

    def stats(self) -> SolveStats:
        return SolveStats(unknowns=len(self.nodes), nnz=0 if self.A is None else int(self.A.nnz),
                          version=self.version, rebuild_count=self.rebuild_count,
                          factorization_count=self.factorization_count, channels=len(self.channels()))

class DirichletLaplacian(LaplacianSolver):
    """
    Laplacian over an explicit graph with fixed values on the constrained nodes.

    rhs_i = source_i + sum over fixed neighbours j of w_ij * fixed_j, so
    source=None gives the harmonic interpolant of the fixed values.
    """
    def __init__(self, free: Iterable[Node], neighbors: Callable[[Node],Iterable[Tuple[Node,float]]],
                 fixed: Mapping[Node,Sequence[float]], channels: int=1,
                 source: Optional[Mapping[Node,Sequence[float]]]=None, floating: str="raise"):
        super().__init__(floating=floating)
        self._free = list(free)
        self._neighbors = neighbors
        self.fixed = dict(fixed)
        self.source = dict(source) if source else {}
        self._channels = tuple(range(channels))

    def free_nodes(self): return self._free
    def neighbors(self, node): return self._neighbors(node)
    def channels(self): return self._channels

    def set_fixed(self, fixed: Mapping[Node,Sequence[float]]):
        """New boundary values; the topology and its factorization are kept."""
        self.fixed = dict(fixed)
        self._solved = False

    def set_source(self, source: Optional[Mapping[Node,Sequence[float]]]):
        self.source = dict(source) if source else {}
        self._solved = False

    def rhs(self, channel) -> np.ndarray:
        b = np.zeros(len(self.nodes))
        for i, node in enumerate(self.nodes):
            s = self.source.get(node)
            if s is not None: b[i] = s[channel]
            for nb, w in self._neighbors(node):
                if nb not in self.index:
                    b[i] += w * self.fixed[nb][channel]
        return b
