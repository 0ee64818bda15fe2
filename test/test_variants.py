import unittest

from jointcad.config import STANDARD_MATERIALS, MaterialCatalog, default_config
from jointcad.constraints import ConstraintValidator, GearRim, manufacturing_constraints
from jointcad.errors import NoVariationsError
from jointcad.variants import (
    VariantGenerator,
    filter_valid,
    gear_ratio_variant,
    material_variant,
    random_variant,
    scale_variant,
    size_series,
)


class TestVariantGenerator(unittest.TestCase):
    def setUp(self):
        self.base = default_config()

    def test_no_variations(self):
        with self.assertRaises(NoVariationsError):
            VariantGenerator(self.base).generate()

    def test_one_config_per_modifier(self):
        variants = (VariantGenerator(self.base)
                    .add_variation(scale_variant(0.8))
                    .add_variation(scale_variant(1.2))
                    .add_variation(material_variant('ABS'))
                    .add_variation(gear_ratio_variant(15, 45))
                    .generate())
        self.assertEqual(len(variants), 4)
        self.assertAlmostEqual(variants[0].base_diameter, 64.0)
        self.assertAlmostEqual(variants[1].bearing_od, 38.4)
        self.assertEqual(variants[2].material, STANDARD_MATERIALS['ABS'])
        self.assertEqual((variants[3].input_teeth, variants[3].output_teeth), (15, 45))
        # only the modified fields change
        self.assertEqual(variants[0].housing_wall_thickness, 4.0)
        self.assertEqual(variants[3].base_diameter, 80.0)

    def test_variants_do_not_alias(self):
        variants = (VariantGenerator(self.base)
                    .add_variation(gear_ratio_variant(15, 45))
                    .add_variation(gear_ratio_variant(15, 45))
                    .generate())
        variants[0].features.include_cover = False
        variants[0].base_diameter = 1.0
        self.assertTrue(variants[1].features.include_cover)
        self.assertEqual(variants[1].base_diameter, 80.0)
        self.assertTrue(self.base.features.include_cover)
        self.assertEqual(self.base.input_teeth, 20)

    def test_unknown_material_keeps_current(self):
        variant, = VariantGenerator(self.base).add_variation(material_variant('WOOD')).generate()
        self.assertEqual(variant.material.name, 'PLA')

    def test_random_variant_is_seeded(self):
        a, b, c = (VariantGenerator(self.base)
                   .add_variation(random_variant(7))
                   .add_variation(random_variant(7))
                   .add_variation(random_variant(8))
                   .generate())
        self.assertEqual(a, b)
        self.assertNotEqual(a, c)

    def test_size_series(self):
        series = size_series()
        self.assertEqual(list(series), ['small', 'medium', 'large'])
        small = series['small']
        self.assertAlmostEqual(small.base_diameter, 56.0)
        self.assertAlmostEqual(small.housing_wall_thickness, 2.8)
        self.assertEqual((small.input_teeth, small.output_teeth), (15, 30))
        self.assertAlmostEqual(series['large'].shaft_length, 65.0)
        self.assertEqual(series['medium'].base_diameter, 80.0)

    def test_filter_valid(self):
        variants = (VariantGenerator(self.base)
                    .add_variation(gear_ratio_variant(20, 40))
                    .add_variation(gear_ratio_variant(5, 40))
                    .generate())
        valid = filter_valid(variants, ConstraintValidator())
        self.assertEqual(len(valid), 1)
        self.assertEqual(valid[0].input_teeth, 20)


class TestRandomScreening(unittest.TestCase):
    def test_screened_variants_fit_together(self):
        generator = VariantGenerator(default_config())
        for seed in range(40):
            generator.add_variation(random_variant(seed))
        valid = filter_valid(generator.generate(), ConstraintValidator(manufacturing_constraints()))
        self.assertLess(len(valid), 40)
        for cfg in valid:
            self.assertLessEqual(cfg.shaft_diameter, cfg.bearing_id)
            self.assertIsNone(GearRim().check(cfg))

    def test_empty_catalog_is_used_as_given(self):
        modifier = material_variant('ABS', MaterialCatalog({}))
        variant, = VariantGenerator(default_config()).add_variation(modifier).generate()
        self.assertEqual(variant.material.name, 'PLA')


if __name__ == '__main__':
    unittest.main()
