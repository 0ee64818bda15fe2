"""
Geometry kernel adapter using build123d.

Narrow interface over the B-rep kernel: primitives, booleans, transforms,
uniform scale and mesh export. Every failure inside build123d/OCC surfaces
as GeometryError. Solids passed into a boolean or transform are consumed;
callers must not reuse them as standalone parts afterwards.
"""

from enum import Enum
from functools import reduce
from pathlib import Path
from typing import Optional, Sequence, Tuple
import logging
import math
import operator

import numpy as np
from build123d import (
    Box,
    Cylinder,
    GeomType,
    Matrix,
    Mesher,
    Polygon,
    Pos,
    Rot,
    Shape,
    export_stl,
    extrude as bd_extrude,
)

from .errors import GeometryError


logger = logging.getLogger(__name__)

# Distance under which an edge is considered to lie on a solid's boundary
SEAM_TOLERANCE = 1e-4


class MeshAlgorithm(Enum):
    """Surface extraction profile used by render_to_file."""
    MARCHING_CUBES_OCTREE = "marching-cubes-octree"
    DUAL_CONTOUR = "dual-contour"


# Angular deflection (radians) per algorithm. dual-contour keeps sharp
# features by refining curved faces more aggressively.
ANGULAR_DEFLECTION = {
    MeshAlgorithm.MARCHING_CUBES_OCTREE: 0.5,
    MeshAlgorithm.DUAL_CONTOUR: 0.1,
}


def _check_positive(**dims: float) -> None:
    for name, value in dims.items():
        if not value > 0:
            raise GeometryError(f"{name} must be positive, got {value}")


def _check_rounding(rounding: float, limit: float) -> None:
    if rounding < 0:
        raise GeometryError(f"rounding must be >= 0, got {rounding}")
    if rounding > limit:
        raise GeometryError(f"rounding {rounding} exceeds limit {limit}")


def cylinder(height: float, radius: float, rounding: float = 0.0) -> Shape:
    """Cylinder along Z centred on the origin, optionally with rounded rims."""
    _check_positive(height=height, radius=radius)
    _check_rounding(rounding, min(radius, height / 2))
    try:
        part = Cylinder(radius=radius, height=height)
        if rounding > 0:
            rims = part.edges().filter_by(GeomType.CIRCLE)
            part = part.fillet(rounding, rims)
    except Exception as e:
        raise GeometryError(f"cylinder(h={height}, r={radius}) failed: {e}") from e
    return part


def box(extents: Sequence[float], rounding: float = 0.0) -> Shape:
    """Axis-aligned box centred on the origin."""
    length, width, height = extents
    _check_positive(length=length, width=width, height=height)
    _check_rounding(rounding, min(length, width, height) / 2)
    try:
        part = Box(length, width, height)
        if rounding > 0:
            part = part.fillet(rounding, part.edges())
    except Exception as e:
        raise GeometryError(f"box({length}, {width}, {height}) failed: {e}") from e
    return part


def extrude(profile: Sequence[Tuple[float, float]], height: float) -> Shape:
    """Extrude a closed 2D polygon along Z, centred on z=0."""
    _check_positive(height=height)
    if len(profile) < 3:
        raise GeometryError(f"profile needs at least 3 points, got {len(profile)}")
    try:
        sketch = Polygon(*profile, align=None)
        return bd_extrude(sketch, amount=height / 2, both=True)
    except Exception as e:
        raise GeometryError(f"extrude(h={height}) failed: {e}") from e


def _seam_edges(result: Shape, inputs: Sequence[Shape]):
    """Edges of ``result`` lying on the boundary of at least two inputs."""
    seams = []
    for edge in result.edges():
        point = edge.position_at(0.5)
        touching = sum(1 for s in inputs if s.distance_to(point) < SEAM_TOLERANCE)
        if touching >= 2:
            seams.append(edge)
    return seams


def union(*solids: Optional[Shape], blend: float = 0.0) -> Shape:
    """
    Boolean union of all non-empty solids.

    With ``blend > 0`` the seam edges created by the union are rounded with
    a fillet of that radius instead of being left sharp.
    """
    parts = [s for s in solids if s is not None]
    if not parts:
        raise GeometryError("union of zero solids")
    if blend < 0:
        raise GeometryError(f"blend must be >= 0, got {blend}")
    if len(parts) == 1:
        return parts[0]
    try:
        result = reduce(operator.add, parts)
    except Exception as e:
        raise GeometryError(f"union of {len(parts)} solids failed: {e}") from e

    if blend > 0:
        seams = _seam_edges(result, parts)
        if seams:
            try:
                result = result.fillet(blend, seams)
            except Exception as e:
                raise GeometryError(f"seam blend r={blend} failed: {e}") from e
        else:
            logger.debug("No seam edges found for blended union")
    return result


def difference(body: Shape, tools: Optional[Shape]) -> Shape:
    """Subtract ``tools`` from ``body``; an empty tool set leaves body as is."""
    if body is None:
        raise GeometryError("difference with empty body")
    if tools is None:
        return body
    try:
        return body - tools
    except Exception as e:
        raise GeometryError(f"difference failed: {e}") from e


def translation_matrix(x: float = 0.0, y: float = 0.0, z: float = 0.0) -> np.ndarray:
    m = np.eye(4)
    m[:3, 3] = (x, y, z)
    return m


def rotation_z_matrix(angle: float) -> np.ndarray:
    """Rotation about Z by ``angle`` radians."""
    c, s = math.cos(angle), math.sin(angle)
    m = np.eye(4)
    m[0, 0], m[0, 1] = c, -s
    m[1, 0], m[1, 1] = s, c
    return m


def transform(solid: Shape, matrix) -> Shape:
    """Apply a 4x4 affine matrix (rigid or uniformly scaled)."""
    m = np.asarray(matrix, dtype=float)
    if m.shape != (4, 4):
        raise GeometryError(f"transform needs a 4x4 matrix, got shape {m.shape}")
    try:
        return solid.transform_shape(Matrix([[float(v) for v in row] for row in m]))
    except Exception as e:
        raise GeometryError(f"transform failed: {e}") from e


def translate(solid: Shape, x: float = 0.0, y: float = 0.0, z: float = 0.0) -> Shape:
    return Pos(x, y, z) * solid


def rotate_z(solid: Shape, angle: float) -> Shape:
    """Rotate about Z by ``angle`` radians."""
    return Rot(0, 0, math.degrees(angle)) * solid


def scale(solid: Shape, factor: float) -> Shape:
    """Uniform scale about the origin."""
    _check_positive(factor=factor)
    try:
        return solid.scale(factor)
    except Exception as e:
        raise GeometryError(f"scale({factor}) failed: {e}") from e


def bounds(solid: Shape) -> Tuple[Tuple[float, float, float], Tuple[float, float, float]]:
    """Return ((xmin, ymin, zmin), (xmax, ymax, zmax))."""
    bb = solid.bounding_box()
    return (bb.min.X, bb.min.Y, bb.min.Z), (bb.max.X, bb.max.Y, bb.max.Z)


def extent(solid: Shape, axis: str = 'z') -> float:
    """Size of the bounding box along one axis."""
    index = 'xyz'.index(axis.lower())
    lo, hi = bounds(solid)
    return hi[index] - lo[index]


def volume(solid: Shape) -> float:
    return solid.volume


def render_to_file(
    solid: Shape,
    filename: Path,
    resolution: int,
    algorithm: MeshAlgorithm = MeshAlgorithm.MARCHING_CUBES_OCTREE,
) -> Path:
    """
    Mesh ``solid`` and write it to ``filename`` (.stl or .3mf).

    ``resolution`` divides the largest bounding box dimension to give the
    linear deflection of the tessellation.
    """
    if int(resolution) <= 0:
        raise ValueError(f"resolution must be a positive integer, got {resolution}")
    algorithm = MeshAlgorithm(algorithm)
    path = Path(filename)
    suffix = path.suffix.lower()
    if suffix not in ('.stl', '.3mf'):
        raise ValueError(f"Unsupported mesh format: {path.suffix}")

    bb = solid.bounding_box()
    largest = max(bb.size.X, bb.size.Y, bb.size.Z)
    linear = largest / int(resolution)
    angular = ANGULAR_DEFLECTION[algorithm]

    path.parent.mkdir(parents=True, exist_ok=True)
    try:
        if suffix == '.stl':
            export_stl(solid, str(path), tolerance=linear, angular_tolerance=angular)
        else:
            mesher = Mesher()
            mesher.add_shape(solid, linear_deflection=linear, angular_deflection=angular)
            mesher.write(str(path))
    except Exception as e:
        if path.exists():
            path.unlink()
        raise GeometryError(f"mesh export to {path} failed: {e}") from e

    logger.info(f"Mesh written: {path} ({algorithm.value}, deflection {linear:.4f})")
    return path
