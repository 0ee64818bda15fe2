"""
Configuration module for the parametric joint.

Holds the material catalog, the JointConfig parameter set and its YAML
persistence. Every component is a pure function of a JointConfig.
"""

import copy
from collections import abc
import hashlib
import json
import math
import random
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Dict, Iterator, List, Mapping, Optional, Any

import yaml

from .errors import UnknownMaterialError


# Ranges used when sampling random variants (破綻しない範囲)
PARAM_RANGES: Dict[str, Dict[str, float]] = {
    'base_diameter': {'min': 60.0, 'max': 120.0, 'description': 'base plate diameter'},
    'base_thickness': {'min': 5.0, 'max': 14.0, 'description': 'base plate thickness'},
    'shaft_diameter': {'min': 8.0, 'max': 16.0, 'description': 'drive shaft diameter'},
    'shaft_length': {'min': 40.0, 'max': 80.0, 'description': 'drive shaft length'},
    'housing_wall_thickness': {'min': 2.0, 'max': 6.0, 'description': 'bearing housing wall'},
    'gear_thickness': {'min': 5.0, 'max': 12.0, 'description': 'gear face width'},
    'input_teeth': {'min': 12, 'max': 30, 'description': 'input gear teeth'},
    'output_teeth': {'min': 24, 'max': 80, 'description': 'output gear teeth'},
}

COVER_THICKNESS_RATIO = 0.6

MM = {'unit': 'mm'}


@dataclass(frozen=True)
class MaterialConfig:
    """Printing material properties."""
    name: str
    shrinkage_factor: float
    min_wall_thickness: float
    general_rounding: float

    def to_dict(self) -> dict:
        return {
            'name': self.name,
            'shrinkage_factor': self.shrinkage_factor,
            'min_wall_thickness': self.min_wall_thickness,
            'general_rounding': self.general_rounding,
        }

    @classmethod
    def from_dict(cls, d: dict) -> 'MaterialConfig':
        return cls(
            name=d['name'],
            shrinkage_factor=float(d['shrinkage_factor']),
            min_wall_thickness=float(d['min_wall_thickness']),
            general_rounding=float(d['general_rounding']),
        )


class MaterialCatalog(abc.Mapping):
    """Read-only name -> MaterialConfig mapping."""

    def __init__(self, materials: Mapping[str, MaterialConfig]):
        self._materials = dict(materials)

    def __getitem__(self, name: str) -> MaterialConfig:
        return self._materials[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._materials)

    def __len__(self) -> int:
        return len(self._materials)

    def get_material(self, name: str) -> MaterialConfig:
        """Look up a material, raising UnknownMaterialError if missing."""
        try:
            return self._materials[name]
        except KeyError:
            raise UnknownMaterialError(name, sorted(self._materials)) from None

    def with_material(self, material: MaterialConfig) -> 'MaterialCatalog':
        """Return a new catalog with ``material`` added or replaced."""
        materials = dict(self._materials)
        materials[material.name] = material
        return MaterialCatalog(materials)


STANDARD_MATERIALS = MaterialCatalog({
    'PLA': MaterialConfig(
        name='PLA',
        shrinkage_factor=1.0 / 0.998,
        min_wall_thickness=1.2,
        general_rounding=0.5,
    ),
    'ABS': MaterialConfig(
        name='ABS',
        shrinkage_factor=1.0 / 0.995,
        min_wall_thickness=1.5,
        general_rounding=0.5,
    ),
    'PETG': MaterialConfig(
        name='PETG',
        shrinkage_factor=1.0 / 0.997,
        min_wall_thickness=1.2,
        general_rounding=0.4,
    ),
})


@dataclass
class FeatureFlags:
    """Optional features of the joint."""
    include_cover: bool = True
    include_mounting_holes: bool = True
    include_keyways: bool = True
    include_ventilation: bool = True
    include_bearings: bool = True
    include_gears: bool = True
    simplified_geometry: bool = False

    def to_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, d: dict) -> 'FeatureFlags':
        return cls(**{k: bool(v) for k, v in d.items() if k in cls.__dataclass_fields__})


@dataclass
class JointConfig:
    """
    Every dimension, material and quality parameter of one joint.

    All lengths in mm. Fields carrying ``unit: mm`` metadata are linear
    dimensions and take part in scaling.
    """
    # Material
    material: MaterialConfig = field(default_factory=lambda: STANDARD_MATERIALS['PLA'])

    # Base
    base_diameter: float = field(default=80.0, metadata=MM)
    base_thickness: float = field(default=8.0, metadata=MM)
    base_hole_count: int = 6
    base_hole_diameter: float = field(default=5.0, metadata=MM)
    base_mount_radius: float = field(default=30.0, metadata=MM)

    # Shaft
    shaft_diameter: float = field(default=12.0, metadata=MM)
    shaft_length: float = field(default=50.0, metadata=MM)
    keyway_width: float = field(default=3.0, metadata=MM)
    keyway_depth: float = field(default=1.5, metadata=MM)

    # Bearing
    bearing_od: float = field(default=32.0, metadata=MM)
    bearing_id: float = field(default=12.0, metadata=MM)
    bearing_thickness: float = field(default=10.0, metadata=MM)
    bearing_clearance: float = field(default=0.2, metadata=MM)

    # Housing
    housing_wall_thickness: float = field(default=4.0, metadata=MM)
    housing_flange_height: float = field(default=3.0, metadata=MM)

    # Gear
    gear_module: float = field(default=1.5, metadata=MM)
    input_teeth: int = 20
    output_teeth: int = 40
    gear_thickness: float = field(default=8.0, metadata=MM)
    gear_pressure_angle_deg: float = 20.0

    # Fastener
    bolt_diameter: float = field(default=3.0, metadata=MM)
    bolt_head_diameter: float = field(default=5.5, metadata=MM)
    bolt_head_height: float = field(default=2.0, metadata=MM)

    # Clearance
    bolt_clearance: float = field(default=0.3, metadata=MM)
    general_clearance: float = field(default=0.2, metadata=MM)

    # Quality
    mesh_resolution: int = 300

    features: FeatureFlags = field(default_factory=FeatureFlags)

    # --- derived dimensions ---

    @property
    def housing_outer_diameter(self) -> float:
        return self.bearing_od + 2 * self.housing_wall_thickness

    @property
    def housing_height(self) -> float:
        return self.bearing_thickness + self.housing_flange_height

    @property
    def cover_thickness(self) -> float:
        return self.base_thickness * COVER_THICKNESS_RATIO

    @property
    def gear_pressure_angle(self) -> float:
        """Pressure angle in radians."""
        return math.radians(self.gear_pressure_angle_deg)

    @property
    def gear_ratio(self) -> float:
        return self.output_teeth / self.input_teeth

    @property
    def rounding(self) -> float:
        """Material rounding radius, zero under simplified geometry."""
        if self.features.simplified_geometry:
            return 0.0
        return self.material.general_rounding

    # --- copying and scaling ---

    def copy(self) -> 'JointConfig':
        """Full value copy; nothing is shared with ``self``."""
        return copy.deepcopy(self)

    @classmethod
    def linear_fields(cls) -> List[str]:
        return [f.name for f in fields(cls) if f.metadata.get('unit') == 'mm']

    def scale_dimensions(self, factor: float) -> 'JointConfig':
        """Scale every linear dimension in place."""
        if factor <= 0:
            raise ValueError(f"scale factor must be positive, got {factor}")
        for name in self.linear_fields():
            setattr(self, name, getattr(self, name) * factor)
        return self

    def scaled(self, factor: float) -> 'JointConfig':
        return self.copy().scale_dimensions(factor)

    # --- serialization ---

    def to_dict(self) -> dict:
        d: Dict[str, Any] = {'material': self.material.to_dict()}
        for f in fields(self):
            if f.name in ('material', 'features'):
                continue
            d[f.name] = getattr(self, f.name)
        d['features'] = self.features.to_dict()
        return d

    @classmethod
    def from_dict(cls, d: dict,
                  catalog: Optional[MaterialCatalog] = None) -> 'JointConfig':
        """Create from dictionary; missing keys keep their defaults."""
        if catalog is None:
            catalog = STANDARD_MATERIALS
        kwargs: Dict[str, Any] = {}

        material = d.get('material')
        if isinstance(material, str):
            kwargs['material'] = catalog.get_material(material)
        elif isinstance(material, dict):
            if set(material) >= {'shrinkage_factor', 'min_wall_thickness', 'general_rounding'}:
                kwargs['material'] = MaterialConfig.from_dict(material)
            else:
                kwargs['material'] = catalog.get_material(material['name'])

        if 'features' in d and d['features'] is not None:
            kwargs['features'] = FeatureFlags.from_dict(d['features'])

        for f in fields(cls):
            if f.name in ('material', 'features') or f.name not in d:
                continue
            value = d[f.name]
            if f.type is int or f.type == 'int':
                kwargs[f.name] = int(value)
            else:
                kwargs[f.name] = float(value)
        return cls(**kwargs)

    def save(self, path: Path) -> None:
        """Save config to YAML file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            yaml.dump(self.to_dict(), f, allow_unicode=True,
                      default_flow_style=False, sort_keys=False)

    @classmethod
    def load(cls, path: Path,
             catalog: Optional[MaterialCatalog] = None) -> 'JointConfig':
        """Load config from YAML file."""
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}
        return cls.from_dict(data, catalog)

    def fingerprint(self) -> str:
        """Stable hash of every parameter, usable as a cache key."""
        payload = json.dumps(self.to_dict(), sort_keys=True)
        return hashlib.sha1(payload.encode('utf-8')).hexdigest()

    # --- random sampling ---

    def randomize_parameters(self, rng: Optional[random.Random] = None) -> None:
        """Randomize the tunable parameters within PARAM_RANGES."""
        rng = rng or random.Random()
        for name, ranges in PARAM_RANGES.items():
            if isinstance(getattr(self, name), int):
                setattr(self, name, rng.randint(int(ranges['min']), int(ranges['max'])))
            else:
                setattr(self, name, rng.uniform(ranges['min'], ranges['max']))


def default_config(material: str = 'PLA',
                   catalog: Optional[MaterialCatalog] = None) -> JointConfig:
    """Create the standard joint configuration."""
    if catalog is None:
        catalog = STANDARD_MATERIALS
    return JointConfig(material=catalog.get_material(material))


def get_config_path() -> Path:
    """Get default config file path."""
    return Path('config.yaml')
