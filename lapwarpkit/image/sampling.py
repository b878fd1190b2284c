from __future__ import annotations
import math
import numpy as np
from typing import Tuple
from .buffer import PixelBuffer

def bilinear_interpolate(x: float, y: float, src: PixelBuffer) -> Tuple[int,int,int]:
    """Four-corner interpolation of one pixel, coordinates clamped to the image."""
    w, h = src.width(), src.height()
    x = min(max(x, 0.0), w - 1.0)
    y = min(max(y, 0.0), h - 1.0)
    x0 = int(math.floor(x)); y0 = int(math.floor(y))
    x1 = min(x0 + 1, w - 1); y1 = min(y0 + 1, h - 1)
    dx = x - x0; dy = y - y0
    c00 = src.get_pixel(x0, y0); c01 = src.get_pixel(x0, y1)
    c10 = src.get_pixel(x1, y0); c11 = src.get_pixel(x1, y1)
    color = []
    for i in range(3):
        v = ((1-dx)*(1-dy)*c00[i] + (1-dx)*dy*c01[i] +
             dx*(1-dy)*c10[i] + dx*dy*c11[i])
        color.append(int(min(max(v, 0.0), 255.0)))
    return color[0], color[1], color[2]

def bilinear_sample(img: np.ndarray, xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
    """Vectorised bilinear_interpolate over HxWxC uint8 data; returns (M,C) uint8."""
    h, w = img.shape[:2]
    xs = np.clip(np.asarray(xs, dtype=np.float64), 0.0, w - 1.0)
    ys = np.clip(np.asarray(ys, dtype=np.float64), 0.0, h - 1.0)
    x0 = np.floor(xs).astype(np.intp); y0 = np.floor(ys).astype(np.intp)
    x1 = np.minimum(x0 + 1, w - 1); y1 = np.minimum(y0 + 1, h - 1)
    dx = (xs - x0)[:,None]; dy = (ys - y0)[:,None]
    data = img.astype(np.float64)
    val = ((1-dx)*(1-dy)*data[y0,x0] + (1-dx)*dy*data[y1,x0] +
           dx*(1-dy)*data[y0,x1] + dx*dy*data[y1,x1])
    return np.clip(val, 0.0, 255.0).astype(np.uint8)
