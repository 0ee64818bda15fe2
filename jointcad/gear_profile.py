"""
Involute spur gear outline.

Builds the closed 2D outline of a standard spur gear (addendum = module,
dedendum = 1.25 module) as a counter-clockwise point list that the geometry
adapter can extrude.
"""

from dataclasses import dataclass
from typing import List, Tuple
import math

from .errors import GeometryError


@dataclass
class GearDimensions:
    """Standard circle radii of a spur gear."""
    teeth: int
    module: float
    pressure_angle: float  # radians

    @property
    def pitch_radius(self) -> float:
        return self.teeth * self.module / 2

    @property
    def base_radius(self) -> float:
        return self.pitch_radius * math.cos(self.pressure_angle)

    @property
    def outer_radius(self) -> float:
        return self.pitch_radius + self.module

    @property
    def root_radius(self) -> float:
        return self.pitch_radius - 1.25 * self.module


def _inv(angle: float) -> float:
    """Involute function."""
    return math.tan(angle) - angle


def _flank_half_angle(dims: GearDimensions, radius: float) -> float:
    """Half angular thickness of a tooth at ``radius``."""
    r = max(radius, dims.base_radius)
    alpha = math.acos(dims.base_radius / r)
    return math.pi / (2 * dims.teeth) + _inv(dims.pressure_angle) - _inv(alpha)


def involute_gear_outline(
    teeth: int,
    module: float,
    pressure_angle: float,
    facets: int = 8,
) -> List[Tuple[float, float]]:
    """
    Compute the gear outline.

    Args:
        teeth: number of teeth
        module: gear module in mm
        pressure_angle: pressure angle in radians
        facets: points per involute flank

    Returns:
        List of (x, y) points, counter-clockwise, not closed.

    Raises:
        GeometryError: if the parameters cannot produce a valid gear
    """
    if teeth < 3:
        raise GeometryError(f"gear needs at least 3 teeth, got {teeth}")
    if module <= 0:
        raise GeometryError(f"gear module must be positive, got {module}")
    if not 0 < pressure_angle < math.pi / 4:
        raise GeometryError(f"pressure angle out of range: {math.degrees(pressure_angle):.1f} deg")
    if facets < 2:
        raise GeometryError(f"facets must be >= 2, got {facets}")

    dims = GearDimensions(teeth, module, pressure_angle)
    if dims.root_radius <= 0:
        raise GeometryError(
            f"{teeth} teeth at module {module} leave no root circle "
            f"(root radius {dims.root_radius:.3f})"
        )
    tip_half = _flank_half_angle(dims, dims.outer_radius)
    if tip_half <= 0:
        raise GeometryError(f"{teeth} teeth at module {module} give pointed teeth")

    # Radii sampled along the flank, root -> tip
    start = max(dims.root_radius, dims.base_radius)
    radii = [start + (dims.outer_radius - start) * i / facets for i in range(facets + 1)]
    if dims.root_radius < dims.base_radius:
        radii.insert(0, dims.root_radius)

    pitch = 2 * math.pi / teeth
    points: List[Tuple[float, float]] = []
    for i in range(teeth):
        centre = i * pitch

        # Leading flank, root to tip
        for r in radii:
            a = centre - _flank_half_angle(dims, r)
            points.append((r * math.cos(a), r * math.sin(a)))
        # Trailing flank, tip to root
        for r in reversed(radii):
            a = centre + _flank_half_angle(dims, r)
            points.append((r * math.cos(a), r * math.sin(a)))

        # Root land midpoint towards the next tooth
        a = centre + pitch / 2
        points.append((dims.root_radius * math.cos(a), dims.root_radius * math.sin(a)))

    return points
