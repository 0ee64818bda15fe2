import unittest

from jointcad import geometry
from jointcad.builder import JointBuilder
from jointcad.config import STANDARD_MATERIALS, MaterialCatalog
from jointcad.errors import UnknownMaterialError


class TestJointBuilder(unittest.TestCase):
    def test_fluent_setters(self):
        builder = JointBuilder()
        same = (builder
                .with_material('ABS')
                .with_base_dimensions(100, 10)
                .with_gear_ratio(20, 60)
                .with_shaft(14, 60)
                .with_bearing(35, 15, 11)
                .with_housing(5, flange_height=4)
                .with_quality(400))
        self.assertIs(same, builder)
        cfg = builder.config()
        self.assertEqual(cfg.material, STANDARD_MATERIALS['ABS'])
        self.assertEqual((cfg.base_diameter, cfg.base_thickness), (100, 10))
        self.assertEqual((cfg.input_teeth, cfg.output_teeth), (20, 60))
        self.assertEqual((cfg.shaft_diameter, cfg.shaft_length), (14, 60))
        self.assertEqual((cfg.bearing_od, cfg.bearing_id, cfg.bearing_thickness), (35, 15, 11))
        self.assertEqual((cfg.housing_wall_thickness, cfg.housing_flange_height), (5, 4))
        self.assertEqual(cfg.mesh_resolution, 400)

    def test_unknown_material_ignored(self):
        builder = JointBuilder().with_material('PETG')
        with self.assertLogs('jointcad.builder', level='WARNING'):
            builder.with_material('PTEG')
        self.assertEqual(builder.config().material.name, 'PETG')

    def test_unknown_material_strict(self):
        with self.assertRaises(UnknownMaterialError):
            JointBuilder(strict_materials=True).with_material('PTEG')

    def test_empty_catalog_strict(self):
        builder = JointBuilder(catalog=MaterialCatalog({}), strict_materials=True)
        self.assertEqual(len(builder.catalog), 0)
        with self.assertRaises(UnknownMaterialError):
            builder.with_material('ABS')

    def test_features(self):
        cfg = JointBuilder().with_features(include_cover=False).config()
        self.assertFalse(cfg.features.include_cover)
        with self.assertRaises(AttributeError):
            JointBuilder().with_features(include_rocket=True)

    def test_base_config_is_copied(self):
        base = JointBuilder().config()
        builder = JointBuilder(base=base).with_gear_ratio(12, 36)
        self.assertEqual(base.input_teeth, 20)
        self.assertEqual(builder.config().input_teeth, 12)

    def test_build(self):
        joint = (JointBuilder()
                 .with_features(simplified_geometry=True)
                 .with_shaft(12, 60)
                 .build())
        _, hi = geometry.bounds(joint)
        self.assertAlmostEqual(hi[2], 60 + 4.8, places=3)


if __name__ == '__main__':
    unittest.main()
