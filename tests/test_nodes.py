import numpy as np
import pytest
from helpers import grid_mesh, ramp_image
from lapwarpkit.errors import MissingGeometryError
from lapwarpkit.image.buffer import Image
from lapwarpkit.runtime.nodes import NODES, run_node
from lapwarpkit.warp.points import ControlPoint

def test_registry_lists_every_node():
    for name in ("circle_boundary_mapping", "square_boundary_mapping", "harmonic_circle_boundary_mapping",
                 "harmonic_square_boundary_mapping", "min_surf", "laplacian_surface_editing",
                 "laplacian_surface_editing_cot", "image_warp", "seamless_clone"):
        assert name in NODES

def test_mesh_node_runs():
    out = run_node("min_surf", Input=grid_mesh(4, bump=1.0))
    assert np.allclose(out["Output"].points, grid_mesh(4).points)
    out = run_node("harmonic_square_boundary_mapping", Input=grid_mesh(4))
    assert (out["Output"].points[:, 2] == 0).all()

def test_editing_node_takes_named_inputs():
    m = grid_mesh(4)
    inputs = {"Original mesh": m, "Changed vertices": m.points + 1.0, "Control Points Indices": [0, 3, 12, 15]}
    out = run_node("laplacian_surface_editing_cot", **inputs)["Output"]
    assert np.allclose(out.points, m.points + 1.0)

def test_missing_geometry_and_unknown_node():
    with pytest.raises(MissingGeometryError):
        run_node("circle_boundary_mapping", Input=None)
    with pytest.raises(MissingGeometryError):
        run_node("min_surf")
    with pytest.raises(KeyError):
        run_node("no_such_node")
    with pytest.raises(TypeError):
        run_node("image_warp", Image=Image(ramp_image()))

def test_image_nodes():
    img = Image(ramp_image())
    out = run_node("image_warp", **{"Image": img, "Control Points": [], "Method": "rbf"})
    assert out["Image"] == img
    out = run_node("seamless_clone", Source=img, Target=img, Mask=np.full((10, 12), 255, np.uint8),
                   Offset=(0, 0), Mixed=False)
    assert out["Image"] == img
    moved = run_node("image_warp", **{"Image": img, "Control Points": [ControlPoint(6, 5, 6, 5)], "Method": "idw"})
    assert moved["Image"] == img
