import unittest

from jointcad.config import default_config
from jointcad.constraints import (
    BearingFit,
    ConstraintValidator,
    GearMesh,
    GearRim,
    MaterialWallThickness,
    MinimumWallThickness,
    ShaftFitsBearing,
    ValidationStatus,
    manufacturing_constraints,
)
from jointcad.errors import ValidationViolation


class TestConstraintValidator(unittest.TestCase):
    def setUp(self):
        self.cfg = default_config()
        self.validator = ConstraintValidator()

    def test_default_config_is_valid(self):
        self.assertEqual(self.validator.validate(self.cfg), [])
        self.assertTrue(self.validator.check(self.cfg).is_valid)

    def test_one_violation_per_rule(self):
        self.cfg.housing_wall_thickness = 0.5
        self.cfg.input_teeth = 5
        violations = self.validator.validate(self.cfg)
        self.assertEqual(len(violations), 2)
        self.assertEqual([v.rule for v in violations],
                         [MinimumWallThickness.name, GearMesh.name])

    def test_both_gears_reported_once(self):
        self.cfg.input_teeth = 5
        self.cfg.output_teeth = 8
        violations = self.validator.validate(self.cfg)
        self.assertEqual(len(violations), 1)
        self.assertIn('input', violations[0].message)
        self.assertIn('output', violations[0].message)

    def test_bearing_fit(self):
        self.cfg.base_diameter = 40.0
        message = BearingFit().check(self.cfg)
        self.assertIn('40.40', message)
        self.assertIn('40.00', message)

    def test_custom_minimum(self):
        self.assertIsNotNone(MinimumWallThickness(5.0).check(self.cfg))

    def test_strict_mode(self):
        self.cfg.base_diameter = 30.0
        with self.assertRaises(ValidationViolation) as ctx:
            self.validator.validate_strict(self.cfg)
        self.assertEqual(len(ctx.exception.violations), 1)
        self.assertIn('Bearing Fit', str(ctx.exception))

    def test_strict_mode_passes_valid_config(self):
        self.validator.validate_strict(self.cfg)

    def test_material_wall_thickness(self):
        validator = ConstraintValidator().add_constraint(MaterialWallThickness())
        self.cfg.housing_wall_thickness = 1.4
        self.assertEqual(validator.validate(self.cfg), [])
        self.cfg.material = default_config('ABS').material
        violations = validator.validate(self.cfg)
        self.assertEqual([v.rule for v in violations], [MaterialWallThickness.name])

    def test_gear_rim(self):
        self.assertIsNone(GearRim().check(self.cfg))
        self.cfg.input_teeth = 12
        self.assertIn('rim', GearRim().check(self.cfg))

    def test_shaft_fits_bearing(self):
        self.assertIsNone(ShaftFitsBearing().check(self.cfg))
        self.cfg.shaft_diameter = 15.67
        self.assertIn('bearing bore', ShaftFitsBearing().check(self.cfg))

    def test_manufacturing_rules_catch_oversized_bore(self):
        validator = ConstraintValidator(manufacturing_constraints())
        self.assertEqual(validator.validate(self.cfg), [])
        self.cfg.input_teeth = 12
        self.cfg.shaft_diameter = 15.67
        self.assertEqual(self.validator.validate(self.cfg), [])
        rules = [v.rule for v in validator.validate(self.cfg)]
        self.assertEqual(rules, [GearRim.name, ShaftFitsBearing.name])

    def test_result_summary(self):
        self.cfg.input_teeth = 5
        result = self.validator.check(self.cfg)
        self.assertEqual(result.status, ValidationStatus.INVALID)
        self.assertEqual(result.to_dict()['violations'][0]['rule'], 'Gear Mesh')


if __name__ == '__main__':
    unittest.main()
