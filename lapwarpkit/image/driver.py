from __future__ import annotations
import numpy as np
from typing import Sequence
from ..warp.base import Warper
from ..warp.points import ControlPoint
from .buffer import Image, PixelBuffer, as_array
from .sampling import bilinear_sample

def remap_image(image: PixelBuffer, inverse: Warper, background: Sequence[int]=(0,0,0)) -> Image:
    """
    Backward mapping: every destination pixel asks `inverse` where it comes from
    and takes a bilinear sample there. Pixels whose source lies outside the
    image keep `background`, so strongly non-linear maps can leave holes.
    """
    src = as_array(image)
    h, w = src.shape[:2]
    out = Image.blank(w, h, background)
    ys, xs = np.mgrid[0:h, 0:w]
    dst = np.stack([xs.ravel(), ys.ravel()], axis=1).astype(np.float64)
    mapped = inverse.warp_points(dst)
    sx, sy = mapped[:,0], mapped[:,1]
    ok = np.isfinite(sx) & np.isfinite(sy) & (sx >= 0) & (sx < w) & (sy >= 0) & (sy < h)
    if ok.any():
        flat = out.data.reshape(-1, 3)
        flat[ok] = bilinear_sample(src, sx[ok], sy[ok])
    return out

def warp_image(image: PixelBuffer, points: Sequence[ControlPoint], warper: Warper,
               background: Sequence[int]=(0,0,0)) -> Image:
    """
    Move every control point's source position to its target position.

    The warper is configured with the inverted correspondences so that it maps
    destination pixels back into the source image.
    """
    if not points:
        return Image(as_array(image).copy())
    if hasattr(warper, "set_image_size"):
        warper.set_image_size(image.width(), image.height())
    warper.set_control_points([p.inverted() for p in points])
    return remap_image(image, warper, background)
