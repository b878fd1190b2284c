from __future__ import annotations
import json
from pathlib import Path
import yaml
from ..errors import MeshTopologyError
from .halfedge import HalfedgeMesh

def load_mesh(path: str|Path) -> HalfedgeMesh:
    """Read {"points": [[x,y,z], ...], "faces": [[i,j,k,...], ...]} from JSON or YAML."""
    path = Path(path)
    text = path.read_text()
    data = json.loads(text) if path.suffix.lower() == ".json" else yaml.safe_load(text)
    if not isinstance(data, dict) or "points" not in data or "faces" not in data:
        raise MeshTopologyError(f"{path}: expected a mapping with 'points' and 'faces'")
    return HalfedgeMesh(data["points"], data["faces"])

def save_mesh(path: str|Path, mesh: HalfedgeMesh):
    path = Path(path)
    data = {"points": mesh.points.tolist(), "faces": [list(f) for f in mesh.faces]}
    if path.suffix.lower() == ".json":
        path.write_text(json.dumps(data))
    else:
        path.write_text(yaml.safe_dump(data, default_flow_style=None))
