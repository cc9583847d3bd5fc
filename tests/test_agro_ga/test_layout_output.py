"""
Tests for layout metrics, plotting and the command-line entry point.
"""

import io
import tempfile
import unittest
from contextlib import redirect_stdout
from pathlib import Path

import matplotlib
matplotlib.use('Agg')
import yaml

from agro_ga.data_models import Individual, PlantType, Point
from agro_ga.domains import (
    AnnulusDomain,
    CircleDomain,
    EllipseDomain,
    FrameDomain,
    RectangleDomain,
    RightTriangleDomain,
    SquareDomain,
)
from agro_ga.layout_metrics import LayoutMetrics, format_layout_report
from agro_ga.visualization_utils import domain_outline, save_layout_plot

import agro_cli


class TestLayoutMetrics(unittest.TestCase):
    """Test post-run layout analysis."""

    def setUp(self):
        self.domain = SquareDomain(side=10.0)

    def test_clean_layout(self):
        individual = Individual(genes=[
            Point(-2.0, 0.0, 1.0, PlantType.TOMATO),
            Point(2.0, 0.0, 1.0, PlantType.TOMATO),
            Point(0.0, 3.0, 0.5, PlantType.CORN),
        ])
        metrics = LayoutMetrics(self.domain).analyze_layout(individual)

        self.assertEqual(metrics['plant_count'], 3)
        self.assertEqual(metrics['counts_by_type'], {'Corn': 1, 'Tomato': 2})
        self.assertEqual(metrics['overlapping_pairs'], [])
        self.assertEqual(metrics['outside_count'], 0)
        self.assertAlmostEqual(metrics['min_clearance'], 2.0)
        self.assertGreater(metrics['coverage'], 0.0)

        report = format_layout_report(metrics)
        self.assertIn("VIOLATIONS: none", report)

    def test_violations(self):
        individual = Individual(genes=[
            Point(0.0, 0.0, 1.0),
            Point(1.0, 0.0, 1.0),
            Point(6.0, 0.0, 0.5),
        ])
        metrics = LayoutMetrics(self.domain).analyze_layout(individual)

        self.assertEqual(metrics['overlapping_pairs'], [(0, 1)])
        self.assertEqual(metrics['outside_indices'], [2])
        self.assertAlmostEqual(metrics['min_clearance'], -1.0)
        self.assertIn("Overlapping pairs: 1", format_layout_report(metrics))

    def test_single_plant(self):
        metrics = LayoutMetrics(self.domain).analyze_layout(Individual(genes=[Point(0, 0, 1)]))
        self.assertIsNone(metrics['min_clearance'])
        self.assertIn("n/a", format_layout_report(metrics))


class TestLayoutPlot(unittest.TestCase):
    """Test matplotlib rendering."""

    def test_outline_for_every_domain(self):
        domains = [
            CircleDomain(3.0), RectangleDomain(4.0, 2.0), SquareDomain(3.0),
            EllipseDomain(3.0, 1.0), RightTriangleDomain(3.0, 2.0),
            FrameDomain(1.0, 1.0, 3.0, 3.0), AnnulusDomain(1.0, 3.0),
        ]
        for domain in domains:
            self.assertGreaterEqual(len(domain_outline(domain)), 1)

    def test_save_layout_plot(self):
        individual = Individual(genes=[Point(2.0, 0.0, 0.5), Point(2.4, 0.0, 0.5)])
        with tempfile.TemporaryDirectory() as temp_dir:
            path = save_layout_plot(individual, AnnulusDomain(1.0, 3.0),
                                    Path(temp_dir) / "plots" / "layout.png")
            self.assertTrue(path.exists())
            self.assertGreater(path.stat().st_size, 0)


class TestCommandLine(unittest.TestCase):
    """Test agro_cli end to end."""

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.temp_path = Path(self.temp_dir.name)

    def tearDown(self):
        self.temp_dir.cleanup()

    def _write_config(self, config):
        path = self.temp_path / "run.yaml"
        path.write_text(yaml.dump(config))
        return str(path)

    def test_converged_run_writes_outputs(self):
        config_path = self._write_config({
            'domain': {'type': 'rectangle', 'parameters': {'width': 10.0, 'height': 6.0}},
            'plants': {'count': 4, 'radius': 0.5},
            'evolution': {'population_size': 20, 'generations': 100},
            'output': {'root': str(self.temp_path / "out"), 'name': 'bed', 'plot': True},
            'random_seed': 8,
        })
        with redirect_stdout(io.StringIO()) as stdout:
            status = agro_cli.main([config_path, '--quiet'])

        self.assertEqual(status, agro_cli.EXIT_CONVERGED)
        self.assertIn("VALID LAYOUT FOUND", stdout.getvalue())
        self.assertTrue((self.temp_path / "out" / "bed.csv").exists())
        self.assertTrue((self.temp_path / "out" / "bed_metadata.yaml").exists())
        self.assertTrue((self.temp_path / "out" / "bed.png").exists())

    def test_not_converged_exit_status(self):
        config_path = self._write_config({
            'domain': {'type': 'circle', 'parameters': {'radius': 1.0}},
            'plants': {'count': 3, 'radius': 1.0},
            'evolution': {'population_size': 6, 'generations': 3, 'max_attempts': 1},
            'random_seed': 8,
        })
        with redirect_stdout(io.StringIO()):
            status = agro_cli.main([config_path, '--quiet'])
        self.assertEqual(status, agro_cli.EXIT_NOT_CONVERGED)

    def test_invalid_config_exit_status(self):
        config_path = self._write_config({
            'domain': {'type': 'square', 'parameters': {'side': 2.0}},
            'plants': {'count': 2, 'radius': 1.5},
        })
        with redirect_stdout(io.StringIO()) as stdout:
            status = agro_cli.main([config_path])
        self.assertEqual(status, agro_cli.EXIT_ERROR)
        self.assertIn("Error:", stdout.getvalue())

    def test_list_domains(self):
        with redirect_stdout(io.StringIO()) as stdout:
            status = agro_cli.main(['--list-domains'])
        self.assertEqual(status, 0)
        self.assertIn("RIGHT TRIANGLE", stdout.getvalue())


if __name__ == '__main__':
    unittest.main()
