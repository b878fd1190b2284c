from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Callable, Dict, Tuple
from ..errors import MissingGeometryError
from ..clone.seamless import SeamlessClone
from ..image.driver import warp_image
from ..mesh.boundary import map_boundary
from ..mesh.editing import laplacian_edit
from ..mesh.halfedge import HalfedgeMesh
from ..mesh.param import parameterize, minimal_surface
from ..warp.base import make_warper

@dataclass(frozen=True)
class NodeSpec:
    name: str
    inputs: Tuple[str,...]
    outputs: Tuple[str,...]
    fn: Callable[..., Any]
    geometry: Tuple[str,...] = ()

NODES: Dict[str,NodeSpec] = {}

def node(name: str, inputs: Tuple[str,...], outputs: Tuple[str,...], geometry: Tuple[str,...]=()):
    """Register `fn` as a pure compute node: named inputs in, named outputs out."""
    def deco(fn):
        NODES[name] = NodeSpec(name, tuple(inputs), tuple(outputs), fn, tuple(geometry))
        return fn
    return deco

def run_node(name: str, **inputs) -> Dict[str,Any]:
    try:
        spec = NODES[name]
    except KeyError:
        raise KeyError(f"unknown node '{name}'") from None
    for key in spec.geometry:
        if not isinstance(inputs.get(key), HalfedgeMesh):
            raise MissingGeometryError(f"{name}: need geometry input '{key}'.")
    missing = [k for k in spec.inputs if k not in inputs]
    if missing:
        raise TypeError(f"{name}: missing input(s) {', '.join(missing)}")
    result = spec.fn(*(inputs[k] for k in spec.inputs))
    if len(spec.outputs) == 1:
        result = (result,)
    return dict(zip(spec.outputs, result))

# --- registered nodes -----------------------------------------------------------

@node("circle_boundary_mapping", ("Input",), ("Output",), geometry=("Input",))
def circle_boundary_mapping(mesh):
    return map_boundary(mesh, "circle")

@node("square_boundary_mapping", ("Input",), ("Output",), geometry=("Input",))
def square_boundary_mapping(mesh):
    return map_boundary(mesh, "square")

@node("harmonic_circle_boundary_mapping", ("Input",), ("Output",), geometry=("Input",))
def harmonic_circle_boundary_mapping(mesh):
    return parameterize(mesh, "circle", "cotangent")

@node("harmonic_square_boundary_mapping", ("Input",), ("Output",), geometry=("Input",))
def harmonic_square_boundary_mapping(mesh):
    return parameterize(mesh, "square", "cotangent")

@node("min_surf", ("Input",), ("Output",), geometry=("Input",))
def min_surf(mesh):
    return minimal_surface(mesh)

EDIT_INPUTS = ("Original mesh", "Changed vertices", "Control Points Indices")

@node("laplacian_surface_editing", EDIT_INPUTS, ("Output",), geometry=("Original mesh",))
def laplacian_surface_editing(mesh, changed, controls):
    return laplacian_edit(mesh, changed, controls, "uniform")

@node("laplacian_surface_editing_cot", EDIT_INPUTS, ("Output",), geometry=("Original mesh",))
def laplacian_surface_editing_cot(mesh, changed, controls):
    return laplacian_edit(mesh, changed, controls, "cotangent")

@node("image_warp", ("Image", "Control Points", "Method"), ("Image",))
def image_warp(image, points, method):
    return warp_image(image, points, make_warper(method))

@node("seamless_clone", ("Source", "Target", "Mask", "Offset", "Mixed"), ("Image",))
def seamless_clone(source, target, mask, offset, mixed):
    return SeamlessClone(source, target, mask, offset, mixed).solve_image()
