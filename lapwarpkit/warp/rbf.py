from __future__ import annotations
import numpy as np
from typing import Optional, Tuple
from .base import Warper
from .points import points_to_arrays

R_MIN = 1e-3
RIDGE = 1e-6

def _kernel(dist_sq, r, mu):
    return (dist_sq + r**2) ** (mu / 2.0)

def _nearest_radii(src: np.ndarray) -> np.ndarray:
    n = src.shape[0]
    if n < 2:
        return np.full(n, R_MIN)
    d = np.sqrt(((src[:,None,:] - src[None,:,:])**2).sum(-1))
    np.fill_diagonal(d, np.inf)
    return np.maximum(d.min(axis=1), R_MIN)

def fit_affine(src: np.ndarray, tar: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    Global affine part A p + b.
    N>=3: least squares on [x y 1]; N=1: translation; N=2: uniform scale + translation.
    """
    n = src.shape[0]
    A = np.eye(2); b = np.zeros(2)
    if n >= 3:
        M = np.concatenate([src, np.ones((n,1))], axis=1)
        params, *_ = np.linalg.lstsq(M, tar, rcond=None)   # (3,2)
        A = params[:2].T.copy(); b = params[2].copy()
    elif n == 1:
        b = tar[0] - src[0]
    elif n == 2:
        dp = src[1] - src[0]; dq = tar[1] - tar[0]
        scale = np.linalg.norm(dq) / (np.linalg.norm(dp) + 1e-6)
        A = np.eye(2) * scale
        b = tar[0] - A @ src[0]
    return A, b

class RBFWarper(Warper):
    """
    Affine map plus radial basis correction
    g_i(p) = (|p - p_i|^2 + r_i^2)^(mu/2), with r_i the distance from p_i to its
    nearest neighbour. The kernel system carries its own linear block
    (poly) on top of the fitted affine part, so the control points are hit
    exactly up to the ridge term.
    """
    def __init__(self, mu: float=1.0, image_size: Optional[Tuple[int,int]]=None):
        super().__init__()
        self.mu = float(mu)
        self.image_size = tuple(image_size) if image_size else None
        self.src = np.zeros((0,2)); self.r = np.zeros(0)
        self.A = np.eye(2); self.b = np.zeros(2)
        self.alpha = np.zeros((0,2)); self.poly = np.zeros((3,2))

    def set_image_size(self, width: int, height: int):
        self.image_size = (int(width), int(height))

    def _fit(self):
        src, tar = points_to_arrays(self.points)
        n = src.shape[0]
        self.src = src
        self.A, self.b = fit_affine(src, tar)
        self.r = _nearest_radii(src)
        if n == 0:
            self.alpha = np.zeros((0,2)); self.poly = np.zeros((3,2)); return
        d2 = ((src[:,None,:] - src[None,:,:])**2).sum(-1)
        G = _kernel(d2, self.r[None,:], self.mu)      # G[i,j] = g_j(p_i)
        P = np.concatenate([src, np.ones((n,1))], axis=1)   # [x, y, 1]
        L = np.block([[G + RIDGE*np.eye(n), P],
                      [P.T, np.zeros((3,3))]])
        residual = tar - (src @ self.A.T + self.b)
        V = np.concatenate([residual, np.zeros((3,2))], axis=0)
        sol, *_ = np.linalg.lstsq(L, V, rcond=None)
        self.alpha = sol[:n]
        self.poly = sol[n:]

    def _clamp(self, out: np.ndarray) -> np.ndarray:
        if self.image_size is None: return out
        w, h = self.image_size
        out[...,0] = np.clip(out[...,0], 0.0, w - 1)
        out[...,1] = np.clip(out[...,1], 0.0, h - 1)
        return out

    def warp_points(self, xy: np.ndarray) -> np.ndarray:
        xy = np.asarray(xy, dtype=np.float64).reshape(-1, 2)
        if not self.configured: return xy.copy()
        d2 = ((xy[:,None,:] - self.src[None,:,:])**2).sum(-1)     # (M,N)
        g = _kernel(d2, self.r[None,:], self.mu)
        out = xy @ self.A.T + self.b + g @ self.alpha + np.c_[xy, np.ones(len(xy))] @ self.poly
        return self._clamp(out)

    def warp(self, x: float, y: float) -> Tuple[float,float]:
        if not self.configured: return (x, y)
        out = self.warp_points(np.array([[x, y]]))[0]
        return (float(out[0]), float(out[1]))
