import unittest
import logging

from jointcad import geometry
from jointcad.assembly import (
    SUB_ASSEMBLIES,
    complete_joint_assembly,
    conditional_joint_assembly,
    custom_mount_bracket,
    gear_center_distance,
    output_gear_assembly,
    stack_layout,
    stack_span,
)
from jointcad.config import default_config

logging.basicConfig(level=logging.INFO)


class TestStackLayout(unittest.TestCase):
    def test_default_offsets(self):
        layout = stack_layout(default_config())
        self.assertAlmostEqual(layout.base_plate, -4.0)
        self.assertAlmostEqual(layout.lower_housing, 6.5)
        self.assertAlmostEqual(layout.drive_train, 5.0)
        self.assertAlmostEqual(layout.upper_housing, 43.5)
        self.assertAlmostEqual(layout.cover_plate, 52.4)
        self.assertEqual([name for name, _ in layout.items()], list(SUB_ASSEMBLIES))

    def test_span_formula(self):
        for scale in (0.7, 1.0, 1.3):
            cfg = default_config().scaled(scale)
            expected = cfg.shaft_length + cfg.cover_thickness / 2 + cfg.base_thickness / 2
            self.assertAlmostEqual(stack_span(cfg), expected, places=9)

    def test_gear_center_distance(self):
        self.assertAlmostEqual(gear_center_distance(default_config()), 45.0)


class TestCompleteAssembly(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.cfg = default_config()
        cls.joint = complete_joint_assembly(cls.cfg)

    def test_vertical_bounds(self):
        cfg = self.cfg
        lo, hi = geometry.bounds(self.joint)
        self.assertAlmostEqual(hi[2], cfg.shaft_length + cfg.cover_thickness, places=3)
        bottom = min(-cfg.base_thickness, cfg.bearing_thickness / 2 - cfg.shaft_length / 2)
        self.assertAlmostEqual(lo[2], bottom, places=3)

    def test_footprint_is_base_plate(self):
        self.assertAlmostEqual(geometry.extent(self.joint, 'x'), self.cfg.base_diameter, places=2)

    def test_has_volume(self):
        self.assertGreater(geometry.volume(self.joint), 0)


class TestSubAssemblies(unittest.TestCase):
    def setUp(self):
        self.cfg = default_config()
        self.cfg.features.simplified_geometry = True

    def test_each_sub_assembly_builds(self):
        for name, build in SUB_ASSEMBLIES.items():
            with self.subTest(name=name):
                self.assertGreater(geometry.volume(build(self.cfg)), 0)

    def test_upper_housing_has_bolt_holes(self):
        lower = geometry.volume(SUB_ASSEMBLIES['lower_housing'](self.cfg))
        upper = geometry.volume(SUB_ASSEMBLIES['upper_housing'](self.cfg))
        self.assertLess(upper, lower)

    def test_output_gear_position(self):
        gear = output_gear_assembly(self.cfg)
        lo, hi = geometry.bounds(gear)
        self.assertAlmostEqual((lo[2] + hi[2]) / 2, self.cfg.shaft_length / 4, places=3)
        self.assertGreater((lo[0] + hi[0]) / 2, 40.0)

    def test_custom_mount_bracket(self):
        bracket = custom_mount_bracket(self.cfg)
        self.assertAlmostEqual(geometry.extent(bracket, 'x'), 32.0, places=3)

    def test_base_plate_without_bolt_holes(self):
        self.cfg.base_hole_count = 0
        plate = geometry.volume(SUB_ASSEMBLIES['base_plate'](self.cfg))
        self.cfg.base_hole_count = 6
        self.cfg.features.include_mounting_holes = False
        plain = geometry.volume(SUB_ASSEMBLIES['base_plate'](self.cfg))
        self.assertGreater(plate, 0)
        self.assertAlmostEqual(plate, plain, places=3)


class TestConditionalAssembly(unittest.TestCase):
    def test_base_only(self):
        cfg = default_config()
        cfg.features.simplified_geometry = True
        cfg.features.include_bearings = False
        cfg.features.include_gears = False
        cfg.features.include_cover = False
        joint = conditional_joint_assembly(cfg)
        lo, hi = geometry.bounds(joint)
        self.assertAlmostEqual(lo[2], -8.0, places=3)
        self.assertAlmostEqual(hi[2], 0.0, places=3)

    def test_without_cover(self):
        cfg = default_config()
        cfg.features.simplified_geometry = True
        cfg.features.include_cover = False
        _, hi = geometry.bounds(conditional_joint_assembly(cfg))
        self.assertAlmostEqual(hi[2], cfg.shaft_length, places=3)


if __name__ == '__main__':
    unittest.main()
