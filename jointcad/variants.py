"""
Variant generation.

A VariantGenerator turns one base configuration plus N modifiers into N
independent configurations. No geometry is built here, so invalid variants
can be filtered with a ConstraintValidator first.
"""

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple
import logging
import random

from .config import STANDARD_MATERIALS, JointConfig, MaterialCatalog
from .constraints import ConstraintValidator
from .errors import NoVariationsError


logger = logging.getLogger(__name__)

ConfigModifier = Callable[[JointConfig], None]

# Fields resized by scale_variant (fasteners and clearances keep their size)
SCALED_FIELDS = (
    'base_diameter',
    'base_thickness',
    'shaft_diameter',
    'shaft_length',
    'bearing_od',
    'bearing_id',
    'bearing_thickness',
)


class VariantGenerator:
    def __init__(self, base: JointConfig):
        self.base = base
        self.variations: List[ConfigModifier] = []

    def add_variation(self, modifier: ConfigModifier) -> 'VariantGenerator':
        self.variations.append(modifier)
        return self

    def generate(self) -> List[JointConfig]:
        """One deep copy of the base per modifier, each modified once."""
        if not self.variations:
            raise NoVariationsError()

        configs = []
        for modifier in self.variations:
            cfg = self.base.copy()
            modifier(cfg)
            configs.append(cfg)
        logger.debug(f"Generated {len(configs)} variants")
        return configs


def scale_variant(factor: float, extra_fields: Tuple[str, ...] = ()) -> ConfigModifier:
    """Scale the base, shaft and bearing dimensions by ``factor``."""
    if factor <= 0:
        raise ValueError(f"scale factor must be positive, got {factor}")

    def modify(cfg: JointConfig) -> None:
        for name in SCALED_FIELDS + tuple(extra_fields):
            setattr(cfg, name, getattr(cfg, name) * factor)
    return modify


def material_variant(name: str, catalog: Optional[MaterialCatalog] = None) -> ConfigModifier:
    """Switch material; unknown names leave the material unchanged."""
    if catalog is None:
        catalog = STANDARD_MATERIALS

    def modify(cfg: JointConfig) -> None:
        if name in catalog:
            cfg.material = catalog[name]
        else:
            logger.warning(f"Unknown material '{name}' in variant, keeping {cfg.material.name}")
    return modify


def gear_ratio_variant(input_teeth: int, output_teeth: int) -> ConfigModifier:
    def modify(cfg: JointConfig) -> None:
        cfg.input_teeth = input_teeth
        cfg.output_teeth = output_teeth
    return modify


def random_variant(seed: Optional[int] = None) -> ConfigModifier:
    """Resample the tunable parameters within PARAM_RANGES."""
    def modify(cfg: JointConfig) -> None:
        cfg.randomize_parameters(random.Random(seed))
    return modify


@dataclass(frozen=True)
class SizeSpec:
    name: str
    scale: float
    input_teeth: int
    output_teeth: int


SIZE_SERIES = (
    SizeSpec('small', 0.7, 15, 30),
    SizeSpec('medium', 1.0, 20, 40),
    SizeSpec('large', 1.3, 25, 50),
)


def size_series(base: Optional[JointConfig] = None) -> Dict[str, JointConfig]:
    """Small/medium/large product line; the housing wall scales with the size."""
    generator = VariantGenerator(base if base is not None else JointConfig())
    for size in SIZE_SERIES:
        scale = scale_variant(size.scale, extra_fields=('housing_wall_thickness',))
        ratio = gear_ratio_variant(size.input_teeth, size.output_teeth)
        generator.add_variation(_chain(scale, ratio))
    return {size.name: cfg for size, cfg in zip(SIZE_SERIES, generator.generate())}


def _chain(*modifiers: ConfigModifier) -> ConfigModifier:
    def modify(cfg: JointConfig) -> None:
        for modifier in modifiers:
            modifier(cfg)
    return modify


def filter_valid(configs: List[JointConfig],
                 validator: Optional[ConstraintValidator] = None) -> List[JointConfig]:
    """Drop configurations with any constraint violation."""
    validator = validator or ConstraintValidator()
    valid = []
    for i, cfg in enumerate(configs):
        violations = validator.validate(cfg)
        if violations:
            logger.info(f"Variant {i} rejected: {'; '.join(str(v) for v in violations)}")
            continue
        valid.append(cfg)
    return valid
