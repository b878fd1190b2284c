from __future__ import annotations
import numpy as np
from typing import List, Tuple, Union
from ..image.buffer import Image, PixelBuffer, as_array
from ..solve.laplacian import LaplacianSolver

NEIGHBORS = ((0,-1), (0,1), (-1,0), (1,0))

def _mask_array(mask) -> np.ndarray:
    m = np.asarray(mask) if isinstance(mask, np.ndarray) else as_array(mask)
    if m.ndim == 3: m = m[:,:,0]
    return m > 0

class SeamlessClone(LaplacianSolver):
    """
    Poisson image editing over a pixel grid.

    Omega is the set of target pixels covered by the (offset) mask, restricted to
    positions inside both images. Each colour channel is solved against the
    same 4-neighbour Laplacian, so moving the source content (set_source) or
    swapping the target (set_target) only rebuilds right-hand sides, while
    set_offset and set_mask change Omega and force a rebuild.
    """
    value_range = (0.0, 255.0)

    def __init__(self, source: PixelBuffer, target: PixelBuffer, mask: Union[PixelBuffer,np.ndarray],
                 offset: Tuple[int,int]=(0,0), mixed: bool=False):
        super().__init__(floating="anchor")
        self.src = as_array(source).astype(np.float64)
        self.tar = as_array(target).astype(np.float64)
        self.mask = _mask_array(mask)
        self.offset = (int(offset[0]), int(offset[1]))
        self.mixed = bool(mixed)
        self._omega = np.zeros(0, dtype=bool)

    # --- inputs ---------------------------------------------------------------
    def set_offset(self, dx: int, dy: int):
        if (int(dx), int(dy)) != self.offset:
            self.offset = (int(dx), int(dy))
            self.invalidate()

    def set_mask(self, mask):
        self.mask = _mask_array(mask)
        self.invalidate()

    def set_source(self, source: PixelBuffer):
        src = as_array(source).astype(np.float64)
        if src.shape != self.src.shape: self.invalidate()
        self.src = src
        self._solved = False

    def set_target(self, target: PixelBuffer):
        tar = as_array(target).astype(np.float64)
        if tar.shape != self.tar.shape: self.invalidate()
        self.tar = tar
        self._solved = False

    # --- topology -------------------------------------------------------------
    def free_nodes(self) -> List[Tuple[int,int]]:
        th, tw = self.tar.shape[:2]
        sh, sw = self.src.shape[:2]
        ox, oy = self.offset
        sy, sx = np.nonzero(self.mask)          # row-major, stable order
        ok = (sx < sw) & (sy < sh)
        tx, ty = sx + ox, sy + oy
        ok &= (tx >= 0) & (tx < tw) & (ty >= 0) & (ty < th)
        omega = np.zeros((th, tw), dtype=bool)
        omega[ty[ok], tx[ok]] = True
        self._omega = omega
        return [(int(x), int(y)) for x, y in zip(tx[ok], ty[ok])]

    def neighbors(self, node):
        x, y = node
        th, tw = self.tar.shape[:2]
        for dx, dy in NEIGHBORS:
            nx, ny = x + dx, y + dy
            if 0 <= nx < tw and 0 <= ny < th:
                yield (nx, ny), 1.0

    def channels(self): return (0, 1, 2)

    def anchor_value(self, node, channel) -> float:
        x, y = node
        return float(self.tar[y, x, channel])

    # --- right-hand side --------------------------------------------------------
    def rhs(self, channel) -> np.ndarray:
        n = len(self.nodes)
        if n == 0: return np.zeros(0)
        P = np.asarray(self.nodes, dtype=np.intp)
        tx, ty = P[:,0], P[:,1]
        th, tw = self.tar.shape[:2]
        sh, sw = self.src.shape[:2]
        ox, oy = self.offset
        src = self.src[:,:,channel]; tar = self.tar[:,:,channel]
        g_i = src[ty - oy, tx - ox]
        t_i = tar[ty, tx]
        b = np.zeros(n); guided = np.zeros(n); deg = np.zeros(n)
        for dx, dy in NEIGHBORS:
            nx, ny = tx + dx, ty + dy
            inb = (nx >= 0) & (nx < tw) & (ny >= 0) & (ny < th)
            cx = np.clip(nx, 0, tw - 1); cy = np.clip(ny, 0, th - 1)
            t_j = tar[cy, cx]
            snx, sny = nx - ox, ny - oy
            s_in = (snx >= 0) & (snx < sw) & (sny >= 0) & (sny < sh)
            g_j = np.where(s_in, src[np.clip(sny, 0, sh - 1), np.clip(snx, 0, sw - 1)], 0.0)
            if self.mixed:
                gs = g_i - g_j; gt = t_i - t_j
                v = np.where(np.abs(gs) > np.abs(gt), gs, gt)
            else:
                v = -g_j
            guided += np.where(inb, v, 0.0)
            deg += inb
            fixed = inb & ~self._omega[cy, cx]
            b += np.where(fixed, t_j, 0.0)
        if not self.mixed:
            guided += deg * g_i
        return b + guided

    def solve_image(self) -> Image:
        """Copy of the target with Omega replaced by the blended values."""
        sol = self.solve()
        out = self.tar.copy()
        if self.nodes:
            P = np.asarray(self.nodes, dtype=np.intp)
            for c in self.channels():
                out[P[:,1], P[:,0], c] = sol[c]
        return Image(np.rint(np.clip(out, 0, 255)).astype(np.uint8))

def paste(source: PixelBuffer, target: PixelBuffer, mask, offset: Tuple[int,int]=(0,0)) -> Image:
    """Copy the masked source pixels onto the target without blending."""
    src = as_array(source); out = as_array(target).copy()
    m = _mask_array(mask)
    sh, sw = src.shape[:2]; th, tw = out.shape[:2]
    ox, oy = offset
    sy, sx = np.nonzero(m)
    tx, ty = sx + ox, sy + oy
    ok = (sx < sw) & (sy < sh) & (tx >= 0) & (tx < tw) & (ty >= 0) & (ty < th)
    out[ty[ok], tx[ok]] = src[sy[ok], sx[ok]]
    return Image(out)
