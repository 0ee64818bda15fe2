import tempfile
import unittest
from unittest import mock
from pathlib import Path

from jointcad.config import JointConfig
from jointcad.constraints import GearRim, ShaftFitsBearing
from jointcad.main import main, parse_args
from jointcad.geometry import MeshAlgorithm


class TestCommandLine(unittest.TestCase):
    def test_defaults(self):
        args = parse_args([])
        self.assertEqual(args.config, Path('config.yaml'))
        self.assertEqual(args.algorithm, MeshAlgorithm.MARCHING_CUBES_OCTREE)
        self.assertFalse(args.strict)

    def test_algorithm_choice(self):
        args = parse_args(['--algorithm', 'dual-contour'])
        self.assertEqual(args.algorithm, MeshAlgorithm.DUAL_CONTOUR)

    def test_list_components(self):
        self.assertEqual(main(['--list-components']), 0)

    def test_conflicting_modes(self):
        self.assertEqual(main(['--series', '--list-components']), 1)

    def test_dump_config(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / 'config.yaml'
            self.assertEqual(main(['--dump-config', '--config', str(path), '--material', 'PETG']), 0)
            cfg = JointConfig.load(path)
        self.assertEqual(cfg.material.name, 'PETG')

    def test_random_mode_screens_part_fit(self):
        with tempfile.TemporaryDirectory() as tmp, \
                mock.patch('jointcad.main.filter_valid', return_value=[]) as screen:
            code = main(['--random', '3', '--seed', '1',
                         '--config', str(Path(tmp) / 'missing.yaml'),
                         '--output-dir', tmp])
        self.assertEqual(code, 1)
        configs, validator = screen.call_args[0]
        self.assertEqual(len(configs), 3)
        rules = [c.name for c in validator.constraints]
        self.assertIn(GearRim.name, rules)
        self.assertIn(ShaftFitsBearing.name, rules)

    def test_unknown_material_fails(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / 'config.yaml'
            self.assertEqual(main(['--dump-config', '--config', str(path), '--material', 'WOOD']), 1)


if __name__ == '__main__':
    unittest.main()
