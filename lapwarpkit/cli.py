from __future__ import annotations
import time, typer
from rich import print
from pathlib import Path
from typing import Optional
from .config import load_settings
from .errors import LapWarpError
from .image.buffer import Image
from .image.driver import warp_image
from .image.ops import fisheye as fisheye_op
from .clone.seamless import SeamlessClone, paste as paste_op
from .mesh.boundary import map_boundary
from .mesh.io import load_mesh, save_mesh
from .mesh.param import parameterize, minimal_surface
from .runtime.report import Report
from .warp.base import make_warper
from .warp.points import load_points

app = typer.Typer(add_completion=False, help="lapwarpkit CLI (lwk): image warping, Poisson cloning, mesh Laplacians")

def _finish(report: Report, as_json: bool):
    if as_json:
        typer.echo(report.model_dump_json())
    else:
        print(f"[green]{report.command}[/green] -> {report.output} ({report.seconds:.2f}s)")
        if report.solver:
            s = report.solver
            print(f"  unknowns={s.unknowns} nnz={s.nnz} factorizations={s.factorization_count}")

def _fail(e: Exception):
    print(f"[red]error:[/red] {e}")
    raise typer.Exit(code=1)

@app.command()
def warp(image: Path, points: Path, out: Path=typer.Option(Path("warped.png")),
         method: Optional[str]=typer.Option(None, help="idw, rbf or nn"),
         config: Optional[Path]=typer.Option(None), json: bool=typer.Option(False, "--json")):
    """
    Warp IMAGE so each control point's source moves onto its target.
    POINTS is a JSON/YAML list of [src_x, src_y, tar_x, tar_y].
    """
    cfg = load_settings(config).warp
    t0 = time.time()
    try:
        img = Image.load(image)
        pts = load_points(points)
        kind = method or cfg.method
        opts = dict(mu=cfg.mu, hidden=cfg.hidden, epochs=cfg.epochs, lr=cfg.lr,
                    batch_size=cfg.batch_size, seed=cfg.seed)
        warper = make_warper(kind, **opts)
        res = warp_image(img, pts, warper, background=cfg.background)
        res.save(out)
    except (LapWarpError, ValueError, OSError, ImportError) as e:
        _fail(e)
    _finish(Report(command="warp", output=str(out), size=(res.width(), res.height()),
                   seconds=time.time()-t0, extra={"method": kind, "points": len(pts)}), json)

@app.command()
def clone(source: Path, target: Path, mask: Path, out: Path=typer.Option(Path("cloned.png")),
          offset_x: Optional[int]=typer.Option(None), offset_y: Optional[int]=typer.Option(None),
          mixed: Optional[bool]=typer.Option(None, "--mixed/--no-mixed"),
          config: Optional[Path]=typer.Option(None), json: bool=typer.Option(False, "--json")):
    """
    Seamlessly clone the MASK region of SOURCE into TARGET at the given offset.
    """
    cfg = load_settings(config).clone
    ox = cfg.offset[0] if offset_x is None else offset_x
    oy = cfg.offset[1] if offset_y is None else offset_y
    use_mixed = cfg.mixed if mixed is None else mixed
    t0 = time.time()
    try:
        solver = SeamlessClone(Image.load(source), Image.load(target), Image.load(mask),
                               offset=(ox, oy), mixed=use_mixed)
        res = solver.solve_image()
        res.save(out)
    except (LapWarpError, OSError) as e:
        _fail(e)
    _finish(Report(command="clone", output=str(out), size=(res.width(), res.height()),
                   seconds=time.time()-t0, solver=solver.stats(),
                   extra={"mixed": use_mixed, "offset": [ox, oy]}), json)

@app.command()
def paste(source: Path, target: Path, mask: Path, out: Path=typer.Option(Path("pasted.png")),
          offset_x: int=0, offset_y: int=0, json: bool=typer.Option(False, "--json")):
    """Copy the MASK region of SOURCE into TARGET without blending."""
    t0 = time.time()
    try:
        res = paste_op(Image.load(source), Image.load(target), Image.load(mask), (offset_x, offset_y))
        res.save(out)
    except OSError as e:
        _fail(e)
    _finish(Report(command="paste", output=str(out), size=(res.width(), res.height()),
                   seconds=time.time()-t0), json)

@app.command()
def fisheye(image: Path, out: Path=typer.Option(Path("fisheye.png")), json: bool=typer.Option(False, "--json")):
    """Forward fisheye distortion; holes are left black."""
    t0 = time.time()
    try:
        res = fisheye_op(Image.load(image))
        res.save(out)
    except OSError as e:
        _fail(e)
    _finish(Report(command="fisheye", output=str(out), size=(res.width(), res.height()),
                   seconds=time.time()-t0), json)

MESH_OPS = ("boundary", "param", "minsurf")

@app.command()
def mesh(path: Path, op: str=typer.Option("param", help="boundary, param or minsurf"),
         out: Path=typer.Option(Path("mesh_out.yaml")), shape: Optional[str]=typer.Option(None, help="circle or square"),
         weights: Optional[str]=typer.Option(None, help="uniform or cotangent"),
         config: Optional[Path]=typer.Option(None), json: bool=typer.Option(False, "--json")):
    """
    Run a mesh Laplacian operation on a YAML/JSON mesh ({points, faces}).
    """
    cfg = load_settings(config).mesh
    shape = shape or cfg.boundary
    weights = weights or cfg.weights
    if op not in MESH_OPS:
        _fail(ValueError(f"unknown mesh op '{op}' (expected {', '.join(MESH_OPS)})"))
    t0 = time.time()
    try:
        m = load_mesh(path)
        if op == "boundary": res = map_boundary(m, shape, cfg.circle_radius)
        elif op == "param": res = parameterize(m, shape, weights, cfg.circle_radius)
        else: res = minimal_surface(m, weights)
        save_mesh(out, res)
    except (LapWarpError, ValueError, OSError) as e:
        _fail(e)
    _finish(Report(command=f"mesh {op}", output=str(out), seconds=time.time()-t0,
                   extra={"vertices": res.n_vertices, "shape": shape, "weights": weights}), json)

if __name__ == "__main__":
    app()
