"""
Tests for evolution settings and run-config handling.
"""

import tempfile
import unittest
from pathlib import Path

import yaml

from agro_ga.cli import (
    ConfigValidationError,
    build_domain,
    build_settings,
    build_slots,
    load_run_config,
    validate_run_config,
)
from agro_ga.config import (
    ConfigurationError,
    EvolutionSettings,
    load_config,
    validate_settings,
)
from agro_ga.data_models import PlantType
from agro_ga.domains import AnnulusDomain, DomainConstraintError


class TestEvolutionSettings(unittest.TestCase):
    """Test settings defaults and validation."""

    def test_defaults(self):
        settings = EvolutionSettings()
        self.assertEqual(settings.population_size, 100)
        self.assertEqual(settings.generations, 800)
        self.assertEqual(settings.max_attempts, 3)
        self.assertEqual(settings.crossover_probability, 0.9)
        self.assertEqual(settings.mutation_probability, 0.02)
        self.assertEqual(settings.tournament_size, 3)
        self.assertEqual(settings.elite_count, 5)
        self.assertEqual(settings.domain_weight, 10000.0)
        self.assertEqual(settings.overlap_weight, 100.0)
        self.assertIsNone(settings.resolve_timeout(10))

    def test_validate_collects_all_issues(self):
        """Test that every problem is reported, not only the first."""
        settings = EvolutionSettings()
        settings.population_size = -1
        settings.mutation_probability = 2.0
        settings.overlap_strategy = "octree"

        issues = validate_settings(settings)
        self.assertEqual(len(issues), 3)
        self.assertTrue(any("population_size" in issue for issue in issues))

    def test_invalid_timeout(self):
        with self.assertRaises(ConfigurationError):
            EvolutionSettings(timeout_seconds=-1)
        with self.assertRaises(ConfigurationError):
            EvolutionSettings(timeout_seconds="soon")
        self.assertEqual(EvolutionSettings(timeout_seconds=2).resolve_timeout(5), 2.0)

    def test_elite_count_floor(self):
        self.assertEqual(EvolutionSettings(population_size=10).elite_count, 1)
        self.assertEqual(EvolutionSettings(population_size=10, elite_fraction=0.0).elite_count, 1)
        self.assertEqual(EvolutionSettings(population_size=100, elite_fraction=0.25).elite_count, 25)

    def test_elites_must_leave_room_for_offspring(self):
        """Test that elitism filling the whole population is rejected."""
        with self.assertRaises(ConfigurationError) as ctx:
            EvolutionSettings(population_size=10, elite_fraction=1.0)
        self.assertIn("elite_fraction", str(ctx.exception))
        with self.assertRaises(ConfigurationError):
            EvolutionSettings(population_size=1)

    def test_full_elite_fraction_without_elitism(self):
        settings = EvolutionSettings(population_size=10, elite_fraction=1.0, elitism=False)
        self.assertEqual(validate_settings(settings), [])
        self.assertEqual(EvolutionSettings(population_size=1, elitism=False).population_size, 1)

    def test_boolean_not_accepted_as_integer(self):
        with self.assertRaises(ConfigurationError):
            EvolutionSettings(population_size=True)

    def test_from_dict(self):
        settings = EvolutionSettings.from_dict({'population_size': 40, 'selection': 'rank'})
        self.assertEqual(settings.population_size, 40)
        self.assertEqual(settings.selection, 'rank')
        self.assertEqual(EvolutionSettings.from_dict(None), EvolutionSettings())

    def test_from_dict_rejects_unknown_keys(self):
        with self.assertRaises(ConfigurationError) as ctx:
            EvolutionSettings.from_dict({'populaton_size': 40})
        self.assertIn('populaton_size', str(ctx.exception))


class TestConfigFiles(unittest.TestCase):
    """Test YAML loading."""

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.temp_path = Path(self.temp_dir.name)

    def tearDown(self):
        self.temp_dir.cleanup()

    def test_load_missing_file(self):
        with self.assertRaises(ConfigurationError):
            load_config(str(self.temp_path / "missing.yaml"))

    def test_load_invalid_yaml(self):
        path = self.temp_path / "bad.yaml"
        path.write_text("evolution: [unclosed\n")
        with self.assertRaises(ConfigurationError):
            load_config(str(path))


class TestRunConfig(unittest.TestCase):
    """Test run configuration validation and building."""

    def setUp(self):
        self.config = {
            'domain': {'type': 'annulus', 'parameters': {'inner_radius': 1.0, 'outer_radius': 4.0}},
            'plants': {'count': 6, 'radius': 0.4, 'type': 'corn'},
            'evolution': {'population_size': 30},
            'random_seed': 12,
        }

    def test_valid_config(self):
        validate_run_config(self.config)

        domain = build_domain(self.config)
        slots = build_slots(self.config)
        settings = build_settings(self.config)

        self.assertIsInstance(domain, AnnulusDomain)
        self.assertEqual(len(slots), 6)
        self.assertEqual(slots[0].plant_type, PlantType.CORN)
        self.assertEqual(settings.population_size, 30)
        self.assertEqual(settings.random_seed, 12)

    def test_missing_domain(self):
        del self.config['domain']
        with self.assertRaises(ConfigValidationError):
            validate_run_config(self.config)

    def test_plants_or_inventory_required(self):
        del self.config['plants']
        with self.assertRaises(ConfigValidationError):
            validate_run_config(self.config)

    def test_plants_and_inventory_exclusive(self):
        self.config['inventory'] = [{'name': 'Roma', 'radius': 0.3, 'quantity': 2}]
        with self.assertRaises(ConfigValidationError):
            validate_run_config(self.config)

    def test_invalid_plant_count(self):
        self.config['plants']['count'] = 0
        with self.assertRaises(ConfigValidationError):
            validate_run_config(self.config)

    def test_output_requires_root(self):
        self.config['output'] = {'name': 'x'}
        with self.assertRaises(ConfigValidationError):
            validate_run_config(self.config)

    def test_unknown_plant_type(self):
        self.config['plants']['type'] = 'banana'
        with self.assertRaises(ConfigValidationError):
            build_slots(self.config)

    def test_bad_domain_parameters(self):
        self.config['domain']['parameters'] = {'inner_radius': 5.0, 'outer_radius': 4.0}
        with self.assertRaises(DomainConstraintError):
            build_domain(self.config)

    def test_inventory_config(self):
        del self.config['plants']
        self.config['inventory'] = [
            {'name': 'Roma', 'type': 'tomato', 'radius': 0.4, 'quantity': 2},
            {'name': 'Nantes', 'type': 'carrot', 'radius': 0.2, 'quantity': 3},
        ]
        validate_run_config(self.config)
        slots = build_slots(self.config)
        self.assertEqual([s.variety_name for s in slots], ['Roma'] * 2 + ['Nantes'] * 3)

    def test_load_run_config(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / "run.yaml"
            path.write_text(yaml.dump(self.config))
            self.assertEqual(load_run_config(str(path)), self.config)

            empty = Path(temp_dir) / "empty.yaml"
            empty.write_text("")
            with self.assertRaises(ConfigValidationError):
                load_run_config(str(empty))

        with self.assertRaises(FileNotFoundError):
            load_run_config("does/not/exist.yaml")


if __name__ == '__main__':
    unittest.main()
