"""
Fluent builder for joint configurations.

    joint = (JointBuilder()
             .with_material("ABS")
             .with_base_dimensions(100, 10)
             .with_gear_ratio(20, 60)
             .with_quality(400)
             .build())
"""

from typing import Optional
import logging

from build123d import Shape

from .assembly import complete_joint_assembly
from .config import STANDARD_MATERIALS, JointConfig, MaterialCatalog
from .errors import UnknownMaterialError


logger = logging.getLogger(__name__)


class JointBuilder:
    """Accumulates parameter changes on a default config, then builds."""

    def __init__(self, catalog: Optional[MaterialCatalog] = None,
                 strict_materials: bool = False,
                 base: Optional[JointConfig] = None):
        self.catalog = STANDARD_MATERIALS if catalog is None else catalog
        self.strict_materials = strict_materials
        if base is not None:
            self._config = base.copy()
        else:
            self._config = JointConfig()
            if 'PLA' in self.catalog:
                self._config.material = self.catalog['PLA']

    def with_material(self, name: str) -> 'JointBuilder':
        """Select a catalog material; unknown names are ignored unless strict."""
        try:
            self._config.material = self.catalog.get_material(name)
        except UnknownMaterialError:
            if self.strict_materials:
                raise
            logger.warning(f"Unknown material '{name}' ignored, keeping {self._config.material.name}")
        return self

    def with_base_dimensions(self, diameter: float, thickness: float) -> 'JointBuilder':
        self._config.base_diameter = diameter
        self._config.base_thickness = thickness
        return self

    def with_gear_ratio(self, input_teeth: int, output_teeth: int) -> 'JointBuilder':
        self._config.input_teeth = input_teeth
        self._config.output_teeth = output_teeth
        return self

    def with_shaft(self, diameter: float, length: float) -> 'JointBuilder':
        self._config.shaft_diameter = diameter
        self._config.shaft_length = length
        return self

    def with_bearing(self, od: float, id: float, thickness: float) -> 'JointBuilder':
        self._config.bearing_od = od
        self._config.bearing_id = id
        self._config.bearing_thickness = thickness
        return self

    def with_housing(self, wall_thickness: float,
                     flange_height: Optional[float] = None) -> 'JointBuilder':
        self._config.housing_wall_thickness = wall_thickness
        if flange_height is not None:
            self._config.housing_flange_height = flange_height
        return self

    def with_features(self, **flags: bool) -> 'JointBuilder':
        """Toggle feature flags by name, e.g. ``with_features(include_cover=False)``."""
        for name, value in flags.items():
            if not hasattr(self._config.features, name):
                raise AttributeError(f"unknown feature flag '{name}'")
            setattr(self._config.features, name, bool(value))
        return self

    def with_quality(self, resolution: int) -> 'JointBuilder':
        self._config.mesh_resolution = resolution
        return self

    def config(self) -> JointConfig:
        """The live configuration being accumulated."""
        return self._config

    def build(self) -> Shape:
        return complete_joint_assembly(self._config)
