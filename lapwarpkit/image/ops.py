from __future__ import annotations
import numpy as np
from typing import Sequence
from .buffer import Image, PixelBuffer, as_array

def invert(image: PixelBuffer) -> Image:
    return Image(255 - as_array(image))

def mirror(image: PixelBuffer, horizontal: bool=True, vertical: bool=False) -> Image:
    data = as_array(image)
    if horizontal: data = data[:, ::-1]
    if vertical: data = data[::-1, :]
    return Image(data.copy())

def gray_scale(image: PixelBuffer) -> Image:
    data = as_array(image).astype(np.uint16)
    g = (data.sum(axis=2) // 3).astype(np.uint8)
    return Image(np.repeat(g[:,:,None], 3, axis=2))

def fisheye(image: PixelBuffer, background: Sequence[int]=(0,0,0)) -> Image:
    """
    Forward-splat every pixel through r -> 10*sqrt(r) around the centre.
    No inverse is used, so destination pixels nothing lands on stay blank.
    """
    src = as_array(image)
    h, w = src.shape[:2]
    out = Image.blank(w, h, background)
    cx, cy = w / 2.0, h / 2.0
    ys, xs = np.mgrid[0:h, 0:w]
    dx = xs - cx; dy = ys - cy
    r = np.sqrt(dx*dx + dy*dy)
    ratio = np.divide(np.sqrt(r) * 10.0, r, out=np.zeros_like(r), where=r > 0)
    nx = np.where(r > 0, cx + dx*ratio, cx).astype(np.int64)   # truncation toward zero
    ny = np.where(r > 0, cy + dy*ratio, cy).astype(np.int64)
    ok = (nx >= 0) & (nx < w) & (ny >= 0) & (ny < h)
    out.data[ny[ok], nx[ok]] = src[ys[ok], xs[ok]]
    return out
