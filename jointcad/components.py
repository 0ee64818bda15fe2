"""
Component library - reusable joint parts.

Every component is a pure function ``(cfg, mode, ...) -> Optional[Shape]``.
BODY returns the nominal solid, HOLE the union of its cutting tools; modes a
component does not use return None. Kernel failures are re-raised with the
component's name attached.
"""

from enum import Enum
from functools import wraps
from typing import Callable, List, Optional
import math

from build123d import Shape

from . import geometry
from .config import JointConfig
from .errors import GeometryError
from .gear_profile import involute_gear_outline


class ComponentMode(Enum):
    """Which geometric contribution a component returns."""
    BODY = "body"
    HOLE = "hole"
    BOSS = "boss"
    CLEARANCE = "clearance"


# Points per involute flank
GEAR_FACETS = 8

# Cutting tools are made taller than the part so faces never coincide
THROUGH_FACTOR = 1.5


def component(name: str) -> Callable:
    """Tag GeometryErrors raised inside the wrapped component with ``name``."""
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except GeometryError as e:
                if e.component is None:
                    e.component = name
                raise
        wrapper.component_name = name
        return wrapper
    return decorator


def hole_ring(tool: Shape, count: int, radius: float, phase: float = 0.0) -> List[Shape]:
    """Place ``count`` copies of ``tool`` at ``radius``, angles 2*pi*i/count + phase."""
    if count < 0:
        raise GeometryError(f"hole count must be >= 0, got {count}")
    if count == 0:
        return []
    step = 2 * math.pi / count
    holes = []
    for i in range(count):
        angle = i * step + phase
        holes.append(geometry.translate(tool, radius * math.cos(angle), radius * math.sin(angle), 0))
    return holes


@component("base_mount")
def base_mount(cfg: JointConfig, mode: ComponentMode) -> Optional[Shape]:
    """Circular mounting plate with a shaft hole and a bolt circle."""
    if mode is ComponentMode.BODY:
        return geometry.cylinder(cfg.base_thickness, cfg.base_diameter / 2, cfg.rounding)

    if mode is ComponentMode.HOLE:
        depth = cfg.base_thickness * THROUGH_FACTOR
        center_hole = geometry.cylinder(depth, cfg.shaft_diameter / 2 + cfg.general_clearance)
        if not cfg.features.include_mounting_holes:
            return center_hole
        bolt_hole = geometry.cylinder(depth, cfg.base_hole_diameter / 2)
        bolt_holes = hole_ring(bolt_hole, cfg.base_hole_count, cfg.base_mount_radius)
        return geometry.union(center_hole, *bolt_holes)

    return None


@component("bearing_housing")
def bearing_housing(cfg: JointConfig, mode: ComponentMode) -> Optional[Shape]:
    """Cylindrical bearing housing with a mounting flange at the bottom."""
    housing_height = cfg.housing_height

    if mode is ComponentMode.BODY:
        body = geometry.cylinder(housing_height, cfg.housing_outer_diameter / 2, cfg.rounding)

        flange_height = cfg.housing_flange_height
        flange_radius = cfg.housing_outer_diameter / 2 + cfg.housing_wall_thickness
        flange = geometry.cylinder(flange_height, flange_radius, cfg.rounding)
        flange = geometry.translate(flange, z=-(housing_height - flange_height) / 2)

        # Seam blended with the material rounding radius
        return geometry.union(body, flange, blend=cfg.rounding)

    if mode is ComponentMode.HOLE:
        pocket = geometry.cylinder(cfg.bearing_thickness, cfg.bearing_od / 2 + cfg.bearing_clearance)
        pocket = geometry.translate(pocket, z=cfg.housing_flange_height / 2)
        through_hole = geometry.cylinder(
            housing_height * THROUGH_FACTOR,
            cfg.bearing_id / 2 + cfg.general_clearance,
        )
        return geometry.union(pocket, through_hole)

    return None


@component("drive_shaft")
def drive_shaft(cfg: JointConfig, mode: ComponentMode) -> Optional[Shape]:
    """Drive shaft; its cutting tool is the keyway slot along the +X side."""
    radius = cfg.shaft_diameter / 2

    if mode is ComponentMode.BODY:
        return geometry.cylinder(cfg.shaft_length, radius)

    if mode is ComponentMode.HOLE:
        if not cfg.features.include_keyways:
            return None
        slot = geometry.box((cfg.shaft_diameter, cfg.keyway_width, cfg.shaft_length * THROUGH_FACTOR))
        # Inner face of the slot sits keyway_depth below the surface
        return geometry.translate(slot, x=radius - cfg.keyway_depth + cfg.shaft_diameter / 2)

    return None


@component("gear")
def parametric_gear(cfg: JointConfig, mode: ComponentMode,
                    teeth: int, with_bore: bool = True) -> Optional[Shape]:
    """Involute spur gear; the cutting tool is the keyed bore."""
    if mode is ComponentMode.BODY:
        outline = involute_gear_outline(
            teeth, cfg.gear_module, cfg.gear_pressure_angle, facets=GEAR_FACETS,
        )
        return geometry.extrude(outline, cfg.gear_thickness)

    if mode is ComponentMode.HOLE:
        if not with_bore:
            return None
        depth = cfg.gear_thickness * THROUGH_FACTOR
        bore_radius = cfg.shaft_diameter / 2 + cfg.general_clearance
        bore = geometry.cylinder(depth, bore_radius)
        if not cfg.features.include_keyways:
            return bore

        # Hub slot reaches keyway_depth beyond the bore
        slot_length = bore_radius + cfg.keyway_depth
        slot = geometry.box((slot_length, cfg.keyway_width + cfg.general_clearance * 2, depth))
        slot = geometry.translate(slot, x=slot_length / 2)
        return geometry.union(bore, slot)

    return None


@component("cover_plate")
def cover_plate(cfg: JointConfig, mode: ComponentMode) -> Optional[Shape]:
    """Top cover with an inspection hole and four ventilation slots."""
    plate_radius = cfg.base_diameter / 2
    plate_thickness = cfg.cover_thickness

    if mode is ComponentMode.BODY:
        return geometry.cylinder(plate_thickness, plate_radius, cfg.rounding)

    if mode is ComponentMode.HOLE:
        depth = plate_thickness * THROUGH_FACTOR
        inspection_hole = geometry.cylinder(depth, plate_radius * 0.4)
        if not cfg.features.include_ventilation:
            return inspection_hole

        slot = geometry.box((plate_radius * 0.6, 3.0, depth), cfg.rounding)
        slot = geometry.translate(slot, y=plate_radius * 0.6)
        slots = [geometry.rotate_z(slot, i * math.pi / 2) for i in range(4)]
        return geometry.union(inspection_hole, *slots)

    return None


@component("counterbore_hole")
def counterbore_hole(cfg: JointConfig, mode: ComponentMode, depth: float) -> Optional[Shape]:
    """Bolt hole with a counterbore for the head at the top (+Z) end."""
    if mode is not ComponentMode.HOLE:
        return None

    bolt_hole = geometry.cylinder(depth, (cfg.bolt_diameter + cfg.bolt_clearance) / 2)

    cb_depth = cfg.bolt_head_height + 0.5
    counterbore = geometry.cylinder(cb_depth, (cfg.bolt_head_diameter + cfg.bolt_clearance) / 2)
    counterbore = geometry.translate(counterbore, z=(depth - cb_depth) / 2)

    return geometry.union(bolt_hole, counterbore)
