from __future__ import annotations
import yaml
from pathlib import Path
from pydantic import BaseModel, Field
from typing import Literal, Optional, Tuple

class WarpSettings(BaseModel):
    method: Literal["idw","rbf","nn"] = "idw"
    mu: float = 1.0
    background: Tuple[int,int,int] = (0,0,0)
    hidden: int = 10
    epochs: int = 2000
    lr: float = 1e-3
    batch_size: int = 16
    seed: int = 0

class CloneSettings(BaseModel):
    mixed: bool = False
    offset: Tuple[int,int] = (0,0)

class MeshSettings(BaseModel):
    weights: Literal["uniform","cotangent"] = "uniform"
    boundary: Literal["circle","square"] = "circle"
    circle_radius: float = 1.0

class Settings(BaseModel):
    warp: WarpSettings = Field(default_factory=WarpSettings)
    clone: CloneSettings = Field(default_factory=CloneSettings)
    mesh: MeshSettings = Field(default_factory=MeshSettings)

def load_settings(path: Optional[str|Path]=None) -> Settings:
    """Read YAML settings; a missing or empty file gives the defaults."""
    if path is None or not Path(path).exists():
        return Settings()
    with open(path, "r") as f: cfg = yaml.safe_load(f) or {}
    return Settings.model_validate(cfg)
