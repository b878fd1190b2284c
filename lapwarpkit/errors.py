from __future__ import annotations

class LapWarpError(Exception):
    """Base class for failures the caller is expected to handle."""

class IllPosedSystemError(LapWarpError):
    """Omega has no reachable fixed node, no controls, or nothing to solve for."""

class MissingBoundaryError(IllPosedSystemError):
    """An operation needs a boundary loop and the mesh is closed."""

class FactorizationError(LapWarpError):
    """The sparse solver could not factorize or produced non-finite values."""

class MeshTopologyError(LapWarpError):
    """Mesh input that the halfedge structure cannot represent."""

class MissingGeometryError(LapWarpError):
    """A node received no geometry for a required input."""
