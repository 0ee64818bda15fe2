"""
Constraint validation for joint configurations.

Design rules are checked against a JointConfig before any geometry is built.
Violations are collected as data; ``validate_strict`` turns a non-empty set
into a ValidationViolation for callers that cannot accept an invalid design.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional
import logging

from .config import JointConfig
from .errors import ValidationViolation
from .gear_profile import GearDimensions


logger = logging.getLogger(__name__)

MIN_GEAR_TEETH = 10


@dataclass(frozen=True)
class Violation:
    """One failed design rule."""
    rule: str
    message: str

    def __str__(self) -> str:
        return f"{self.rule}: {self.message}"

    def to_dict(self) -> dict:
        return {'rule': self.rule, 'message': self.message}


class Constraint(ABC):
    """A named design rule."""

    name: str = ""

    @abstractmethod
    def check(self, cfg: JointConfig) -> Optional[str]:
        """Return a violation message, or None when the rule holds."""


class MinimumWallThickness(Constraint):
    name = "Minimum Wall Thickness"

    def __init__(self, min_thickness: float = 1.0):
        self.min_thickness = min_thickness

    def check(self, cfg: JointConfig) -> Optional[str]:
        if cfg.housing_wall_thickness < self.min_thickness:
            return (f"housing wall thickness {cfg.housing_wall_thickness:.2f} "
                    f"below minimum {self.min_thickness:.2f}")
        return None


class BearingFit(Constraint):
    name = "Bearing Fit"

    def check(self, cfg: JointConfig) -> Optional[str]:
        housing_id = cfg.bearing_od + 2 * cfg.bearing_clearance
        housing_od = housing_id + 2 * cfg.housing_wall_thickness
        if housing_od > cfg.base_diameter:
            return (f"bearing housing ({housing_od:.2f}) exceeds "
                    f"base diameter ({cfg.base_diameter:.2f})")
        return None


class GearMesh(Constraint):
    """Both gears need enough teeth to mesh; reported once for the pair."""
    name = "Gear Mesh"

    def __init__(self, min_teeth: int = MIN_GEAR_TEETH):
        self.min_teeth = min_teeth

    def check(self, cfg: JointConfig) -> Optional[str]:
        problems = []
        for label, teeth in (("input", cfg.input_teeth), ("output", cfg.output_teeth)):
            if teeth < self.min_teeth:
                problems.append(f"{label} gear teeth ({teeth}) too few, minimum {self.min_teeth}")
        return "; ".join(problems) if problems else None


class MaterialWallThickness(Constraint):
    """Housing wall must be printable in the configured material."""
    name = "Material Wall Thickness"

    def check(self, cfg: JointConfig) -> Optional[str]:
        minimum = cfg.material.min_wall_thickness
        if cfg.housing_wall_thickness < minimum:
            return (f"housing wall thickness {cfg.housing_wall_thickness:.2f} "
                    f"below {cfg.material.name} minimum {minimum:.2f}")
        return None


class GearRim(Constraint):
    """Material between the input gear root circle and its keyed bore."""
    name = "Gear Rim"

    def __init__(self, walls: float = 2.0):
        self.walls = walls

    def check(self, cfg: JointConfig) -> Optional[str]:
        dims = GearDimensions(cfg.input_teeth, cfg.gear_module, cfg.gear_pressure_angle)
        bore_radius = cfg.shaft_diameter / 2 + cfg.general_clearance + cfg.keyway_depth
        rim = dims.root_radius - bore_radius
        required = self.walls * cfg.material.min_wall_thickness
        if rim < required:
            return f"input gear rim {rim:.2f} thinner than {required:.2f}"
        return None


class ShaftFitsBearing(Constraint):
    """Drive shaft must pass through the bearing bore."""
    name = "Shaft Fits Bearing"

    def check(self, cfg: JointConfig) -> Optional[str]:
        if cfg.shaft_diameter > cfg.bearing_id:
            return (f"shaft diameter {cfg.shaft_diameter:.2f} exceeds "
                    f"bearing bore {cfg.bearing_id:.2f}")
        return None


def default_constraints() -> List[Constraint]:
    return [MinimumWallThickness(), BearingFit(), GearMesh()]


def manufacturing_constraints() -> List[Constraint]:
    """Default rules plus the part-fit checks used to screen random variants."""
    return default_constraints() + [GearRim(), ShaftFitsBearing()]


class ValidationStatus(Enum):
    VALID = "valid"
    INVALID = "invalid"


@dataclass
class ValidationResult:
    """Summary of one validation run."""
    status: ValidationStatus
    violations: List[Violation] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return self.status == ValidationStatus.VALID

    @classmethod
    def from_violations(cls, violations: List[Violation]) -> 'ValidationResult':
        status = ValidationStatus.INVALID if violations else ValidationStatus.VALID
        return cls(status, list(violations))

    def to_dict(self) -> dict:
        return {
            'status': self.status.value,
            'violations': [v.to_dict() for v in self.violations],
        }


class ConstraintValidator:
    """Runs every registered rule; rules are independent of each other."""

    def __init__(self, constraints: Optional[List[Constraint]] = None):
        self.constraints: List[Constraint] = (
            list(constraints) if constraints is not None else default_constraints()
        )

    def add_constraint(self, constraint: Constraint) -> 'ConstraintValidator':
        self.constraints.append(constraint)
        return self

    def validate(self, cfg: JointConfig) -> List[Violation]:
        violations = []
        for constraint in self.constraints:
            message = constraint.check(cfg)
            if message is not None:
                violations.append(Violation(constraint.name, message))
        return violations

    def check(self, cfg: JointConfig) -> ValidationResult:
        return ValidationResult.from_violations(self.validate(cfg))

    def validate_strict(self, cfg: JointConfig) -> None:
        violations = self.validate(cfg)
        if violations:
            for v in violations:
                logger.error(f"Constraint violated - {v}")
            raise ValidationViolation(violations)
