from __future__ import annotations
import numpy as np
from typing import Optional, Tuple
from .base import Warper
from .points import points_to_arrays

def _torch():
    try:
        import torch
    except ImportError as e:
        raise ImportError("NNWarper needs torch: pip install 'lapwarpkit[learned]'") from e
    return torch

class NNWarper(Warper):
    """
    Small MLP (2 -> hidden -> hidden -> 2, ReLU) fitted to the correspondences.
    Coordinates are normalised by the image size, or by the bounding box of the
    source points when no size is given. Deterministic for a fixed seed.
    """
    def __init__(self, image_size: Optional[Tuple[int,int]]=None, hidden: int=10, epochs: int=2000,
                 lr: float=1e-3, batch_size: int=16, seed: int=0):
        super().__init__()
        self.torch = _torch()
        self.image_size = tuple(image_size) if image_size else None
        self.hidden=hidden; self.epochs=epochs; self.lr=lr; self.batch_size=batch_size; self.seed=seed
        self.net = None
        self._origin = np.zeros(2); self._scale = np.ones(2)

    def set_image_size(self, width: int, height: int):
        self.image_size = (int(width), int(height))

    def _normalizer(self, src: np.ndarray):
        if self.image_size:
            return np.zeros(2), np.array(self.image_size, dtype=np.float64)
        lo, hi = src.min(axis=0), src.max(axis=0)
        return lo, np.maximum(hi - lo, 1.0)

    def _build(self):
        nn = self.torch.nn
        return nn.Sequential(nn.Linear(2, self.hidden), nn.ReLU(),
                             nn.Linear(self.hidden, self.hidden), nn.ReLU(),
                             nn.Linear(self.hidden, 2))

    def _fit(self):
        torch = self.torch
        src, tar = points_to_arrays(self.points)
        if src.shape[0] == 0:
            self.net = None; return
        self._origin, self._scale = self._normalizer(src)
        x = torch.tensor((src - self._origin) / self._scale, dtype=torch.float32)
        y = torch.tensor((tar - self._origin) / self._scale, dtype=torch.float32)

        torch.manual_seed(self.seed)
        gen = torch.Generator().manual_seed(self.seed)
        net = self._build()
        optim = torch.optim.Adam(net.parameters(), lr=self.lr)
        loss_fn = torch.nn.MSELoss()
        n = x.shape[0]
        for _ in range(self.epochs):
            perm = torch.randperm(n, generator=gen)
            for k in range(0, n, self.batch_size):
                idx = perm[k:k+self.batch_size]
                optim.zero_grad()
                loss = loss_fn(net(x[idx]), y[idx])
                loss.backward()
                optim.step()
        net.eval()
        self.net = net

    def warp_points(self, xy: np.ndarray) -> np.ndarray:
        xy = np.asarray(xy, dtype=np.float64).reshape(-1, 2)
        if self.net is None: return xy.copy()
        torch = self.torch
        with torch.no_grad():
            inp = torch.tensor((xy - self._origin) / self._scale, dtype=torch.float32)
            out = self.net(inp).numpy().astype(np.float64)
        return out * self._scale + self._origin

    def warp(self, x: float, y: float) -> Tuple[float,float]:
        out = self.warp_points(np.array([[x, y]]))[0]
        return (float(out[0]), float(out[1]))
