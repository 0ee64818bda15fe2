import tempfile
import unittest
from pathlib import Path

from jointcad.config import default_config
from jointcad.visualizer import envelopes, plot_stack_layout


class TestStackPlot(unittest.TestCase):
    def test_envelopes(self):
        sizes = envelopes(default_config())
        self.assertEqual(sizes['base_plate'], (80.0, 8.0))
        self.assertEqual(sizes['lower_housing'], (48.0, 13.0))
        self.assertAlmostEqual(sizes['cover_plate'][1], 4.8)

    def test_plot_written(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = plot_stack_layout(default_config(), Path(tmp) / 'plots' / 'stack.png')
            self.assertTrue(path.exists())
            self.assertGreater(path.stat().st_size, 0)


if __name__ == '__main__':
    unittest.main()
