from __future__ import annotations
import numpy as np
from typing import Tuple
from .base import Warper
from .points import points_to_arrays

EPS = 1e-6  # squared-distance threshold for coincident points

class IDWWarper(Warper):
    """
    Inverse distance weighting (mu=2) with a local linear correction per point.

    Each control point i carries a 2x2 matrix T_i fitted so that the local
    affine map tar_i + T_i (p - src_i) agrees, in the weighted least-squares
    sense, with the displacements of the other control points.
    """
    def __init__(self):
        super().__init__()
        self.src = np.zeros((0,2)); self.tar = np.zeros((0,2))
        self.T = np.zeros((0,2,2))

    def _fit(self):
        self.src, self.tar = points_to_arrays(self.points)
        n = len(self.points)
        T = np.empty((n,2,2))
        for i in range(n):
            A = np.zeros((2,2)); B = np.zeros((2,2))
            for j in range(n):
                if i == j: continue
                d = self.src[j] - self.src[i]
                dist_sq = float(d @ d)
                if dist_sq < EPS: continue
                sigma = 1.0 / dist_sq
                q = self.tar[j] - self.tar[i]
                A += sigma * np.outer(d, d)
                B += sigma * np.outer(q, d)
            # too few independent neighbours: fall back to a pure translation
            if abs(np.linalg.det(A)) < EPS:
                T[i] = np.eye(2)
            else:
                T[i] = B @ np.linalg.inv(A)
        self.T = T

    def warp(self, x: float, y: float) -> Tuple[float,float]:
        if not self.configured: return (x, y)
        p = np.array([x, y], dtype=np.float64)
        diff = p - self.src
        dist_sq = np.einsum("ij,ij->i", diff, diff)
        hit = np.flatnonzero(dist_sq < EPS)
        if hit.size:
            tx, ty = self.tar[hit[0]]
            return (float(tx), float(ty))
        w = 1.0 / dist_sq
        w /= w.sum()
        local = self.tar + np.einsum("nij,nj->ni", self.T, diff)
        out = (w[:,None] * local).sum(axis=0)
        return (float(out[0]), float(out[1]))

    def warp_points(self, xy: np.ndarray) -> np.ndarray:
        xy = np.asarray(xy, dtype=np.float64).reshape(-1, 2)
        if not self.configured: return xy.copy()
        diff = xy[:,None,:] - self.src[None,:,:]                 # (M,N,2)
        dist_sq = np.einsum("mnk,mnk->mn", diff, diff)
        exact = dist_sq < EPS
        w = 1.0 / np.where(exact, 1.0, dist_sq)
        w /= w.sum(axis=1, keepdims=True)
        local = self.tar[None] + np.einsum("nij,mnj->mni", self.T, diff)
        out = np.einsum("mn,mnk->mk", w, local)
        rows = exact.any(axis=1)
        if rows.any():
            first = exact[rows].argmax(axis=1)
            out[rows] = self.tar[first]
        return out
