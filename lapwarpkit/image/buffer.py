from __future__ import annotations
from pathlib import Path
from typing import Protocol, Sequence, Tuple
import cv2
import numpy as np

class PixelBuffer(Protocol):
    """What the algorithms need from an image: size and per-pixel RGB access."""
    def width(self) -> int: ...
    def height(self) -> int: ...
    def get_pixel(self, x: int, y: int) -> Tuple[int,int,int]: ...
    def set_pixel(self, x: int, y: int, rgb: Sequence[int]) -> None: ...

class Image:
    """HxWx3 uint8 buffer. Bounds are the caller's responsibility."""
    def __init__(self, data: np.ndarray):
        data = np.asarray(data)
        if data.ndim == 2:
            data = np.repeat(data[:,:,None], 3, axis=2)
        if data.ndim != 3 or data.shape[2] < 3:
            raise ValueError(f"expected an HxWx3 array, got shape {data.shape}")
        self.data = np.ascontiguousarray(data[:,:,:3], dtype=np.uint8)

    @classmethod
    def blank(cls, width: int, height: int, fill: Sequence[int]=(0,0,0)) -> "Image":
        data = np.empty((height, width, 3), dtype=np.uint8)
        data[:] = np.asarray(fill, dtype=np.uint8)
        return cls(data)

    @classmethod
    def load(cls, path: str|Path) -> "Image":
        bgr = cv2.imread(str(path), cv2.IMREAD_COLOR)
        if bgr is None:
            raise FileNotFoundError(f"cannot read image {path}")
        return cls(cv2.cvtColor(bgr, cv2.COLOR_BGR2RGB))

    def save(self, path: str|Path):
        if not cv2.imwrite(str(path), cv2.cvtColor(self.data, cv2.COLOR_RGB2BGR)):
            raise OSError(f"cannot write image {path}")

    def width(self) -> int: return self.data.shape[1]
    def height(self) -> int: return self.data.shape[0]

    def contains(self, x: int, y: int) -> bool:
        return 0 <= x < self.width() and 0 <= y < self.height()

    def get_pixel(self, x: int, y: int) -> Tuple[int,int,int]:
        r,g,b = self.data[y, x]
        return int(r), int(g), int(b)

    def set_pixel(self, x: int, y: int, rgb: Sequence[int]):
        self.data[y, x] = np.asarray(rgb[:3], dtype=np.uint8)

    def copy(self) -> "Image":
        return Image(self.data.copy())

    def __eq__(self, other):
        return isinstance(other, Image) and self.data.shape == other.data.shape and bool((self.data == other.data).all())

    def __repr__(self):
        return f"Image({self.width()}x{self.height()})"

def as_array(buf: PixelBuffer) -> np.ndarray:
    """HxWx3 uint8 view of any pixel buffer (copied through get_pixel when not an Image)."""
    if isinstance(buf, Image):
        return buf.data
    w, h = buf.width(), buf.height()
    out = np.empty((h, w, 3), dtype=np.uint8)
    for y in range(h):
        for x in range(w):
            out[y, x] = buf.get_pixel(x, y)[:3]
    return out
