"""
Sub-assemblies and the main joint assembly.

Sub-assemblies subtract a component's cutting tools from its body. The main
assembly stacks the five sub-assemblies along Z at closed-form offsets and
unions them.
"""

from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, Dict, List, Tuple
import logging
import math

from build123d import Shape

from . import geometry
from .components import (
    ComponentMode,
    base_mount,
    bearing_housing,
    component,
    counterbore_hole,
    cover_plate,
    drive_shaft,
    hole_ring,
    parametric_gear,
)
from .config import JointConfig


logger = logging.getLogger(__name__)

SubAssembly = Callable[[JointConfig], Shape]

UPPER_BOLT_COUNT = 4
# Upper housing bolts are rotated away from the base mounting pattern
UPPER_BOLT_PHASE = math.pi / 4
UPPER_BOLT_RADIUS_RATIO = 0.8


# ---------------------------------------------------------------------------
# Sub-assemblies
# ---------------------------------------------------------------------------

def base_plate_assembly(cfg: JointConfig) -> Shape:
    """Base plate with shaft hole and mounting holes."""
    body = base_mount(cfg, ComponentMode.BODY)
    holes = base_mount(cfg, ComponentMode.HOLE)
    return geometry.difference(body, holes)


def bearing_assembly(cfg: JointConfig, upper_housing: bool = False) -> Shape:
    """
    Bearing housing with pocket and through hole.

    The upper housing additionally gets a ring of counterbored bolt holes,
    phased 45 degrees from the base mounting holes.
    """
    body = bearing_housing(cfg, ComponentMode.BODY)
    holes = bearing_housing(cfg, ComponentMode.HOLE)
    housing = geometry.difference(body, holes)

    if upper_housing:
        mount_radius = (cfg.housing_outer_diameter / 2 + cfg.housing_wall_thickness) * UPPER_BOLT_RADIUS_RATIO
        bolt_hole = counterbore_hole(cfg, ComponentMode.HOLE, cfg.housing_height)
        bolts = hole_ring(bolt_hole, UPPER_BOLT_COUNT, mount_radius, phase=UPPER_BOLT_PHASE)
        housing = geometry.difference(housing, geometry.union(*bolts))

    return housing


def lower_housing_assembly(cfg: JointConfig) -> Shape:
    return bearing_assembly(cfg, upper_housing=False)


def upper_housing_assembly(cfg: JointConfig) -> Shape:
    return bearing_assembly(cfg, upper_housing=True)


def gear_center_distance(cfg: JointConfig) -> float:
    """Centre distance between the input and output gears."""
    return (cfg.input_teeth + cfg.output_teeth) * cfg.gear_module / 2


def drive_train_assembly(cfg: JointConfig) -> Shape:
    """
    Keyed shaft carrying the input gear.

    The output gear sits on a separate shaft at gear_center_distance(); only
    the input gear is part of this sub-assembly.
    """
    shaft = geometry.difference(
        drive_shaft(cfg, ComponentMode.BODY),
        drive_shaft(cfg, ComponentMode.HOLE),
    )
    input_gear = geometry.difference(
        parametric_gear(cfg, ComponentMode.BODY, cfg.input_teeth, with_bore=True),
        parametric_gear(cfg, ComponentMode.HOLE, cfg.input_teeth, with_bore=True),
    )
    input_gear = geometry.translate(input_gear, z=cfg.shaft_length / 4)
    return geometry.union(shaft, input_gear)


def output_gear_assembly(cfg: JointConfig) -> Shape:
    """Output gear positioned in mesh with the input gear."""
    gear = parametric_gear(cfg, ComponentMode.BODY, cfg.output_teeth, with_bore=False)
    return geometry.translate(gear, x=gear_center_distance(cfg), z=cfg.shaft_length / 4)


def cover_assembly(cfg: JointConfig) -> Shape:
    """Cover plate with inspection hole and ventilation slots."""
    body = cover_plate(cfg, ComponentMode.BODY)
    holes = cover_plate(cfg, ComponentMode.HOLE)
    return geometry.difference(body, holes)


@component("mount_bracket")
def custom_mount_bracket(cfg: JointConfig) -> Shape:
    """Side bracket with one bolt hole, for attaching the base to a frame."""
    length = cfg.base_diameter * 0.4
    width = cfg.base_thickness * 2
    height = cfg.base_thickness

    bracket = geometry.box((length, width, height), cfg.rounding)
    hole = geometry.cylinder(height * 1.5, cfg.bolt_diameter / 2 + cfg.bolt_clearance)
    hole = geometry.translate(hole, x=length / 3)
    return geometry.difference(bracket, hole)


SUB_ASSEMBLIES: Dict[str, SubAssembly] = OrderedDict([
    ('base_plate', base_plate_assembly),
    ('lower_housing', lower_housing_assembly),
    ('upper_housing', upper_housing_assembly),
    ('drive_train', drive_train_assembly),
    ('cover_plate', cover_assembly),
])


# ---------------------------------------------------------------------------
# Main assembly
# ---------------------------------------------------------------------------

@dataclass
class StackLayout:
    """Z offsets of each sub-assembly centre."""
    base_plate: float
    lower_housing: float
    drive_train: float
    upper_housing: float
    cover_plate: float

    def items(self) -> List[Tuple[str, float]]:
        return [(name, getattr(self, name)) for name in SUB_ASSEMBLIES]


def stack_layout(cfg: JointConfig) -> StackLayout:
    """Closed-form Z offsets of every sub-assembly."""
    return StackLayout(
        base_plate=-cfg.base_thickness / 2,
        lower_housing=cfg.housing_height / 2,
        drive_train=cfg.bearing_thickness / 2,
        upper_housing=cfg.shaft_length - cfg.housing_height / 2,
        cover_plate=cfg.shaft_length + cfg.cover_thickness / 2,
    )


def stack_span(cfg: JointConfig) -> float:
    """Distance along Z from the base plate centre to the cover centre."""
    layout = stack_layout(cfg)
    return layout.cover_plate - layout.base_plate


def complete_joint_assembly(cfg: JointConfig) -> Shape:
    """Build and position all five sub-assemblies and union them."""
    layout = stack_layout(cfg)
    positioned = []
    for name, offset in layout.items():
        logger.debug(f"Building {name} at z={offset:.3f}")
        part = SUB_ASSEMBLIES[name](cfg)
        positioned.append(geometry.translate(part, z=offset))
    return geometry.union(*positioned)


def conditional_joint_assembly(cfg: JointConfig) -> Shape:
    """Assembly honouring the part-level feature flags of ``cfg``."""
    flags = cfg.features
    layout = stack_layout(cfg)

    wanted = ['base_plate']
    if flags.include_bearings:
        wanted += ['lower_housing', 'upper_housing']
    if flags.include_gears:
        wanted.append('drive_train')
    if flags.include_cover:
        wanted.append('cover_plate')

    positioned = []
    for name, offset in layout.items():
        if name not in wanted:
            continue
        part = SUB_ASSEMBLIES[name](cfg)
        positioned.append(geometry.translate(part, z=offset))
    return geometry.union(*positioned)
