"""
Tests for GA operations: population genesis, selection, crossover, and mutation.
"""

import unittest
import numpy as np

from agro_ga.data_models import Individual, PlantSlot, PlantType, Point
from agro_ga.domains import AnnulusDomain, RightTriangleDomain, SquareDomain
from agro_ga.population import (
    SamplingError,
    build_random_individual,
    create_population,
    sample_point,
)
from agro_ga.selection import (
    rank_select,
    roulette_select,
    select_elites,
    select_parent,
    tournament_select,
)
from agro_ga.crossover import uniform_crossover
from agro_ga.mutation import mutate


def _individual(xs, radius=0.5, fitness=None):
    individual = Individual(genes=[Point(float(x), 0.0, radius) for x in xs])
    if fitness is not None:
        individual.fitness = fitness
    return individual


class TestPopulation(unittest.TestCase):
    """Test rejection sampling and population genesis."""

    def setUp(self):
        self.rng = np.random.default_rng(42)
        self.domain = AnnulusDomain(inner_radius=2.0, outer_radius=4.0)
        self.slots = [
            PlantSlot(radius=0.3, plant_type=PlantType.TOMATO, variety_id=1, variety_name="Roma"),
            PlantSlot(radius=0.5, plant_type=PlantType.CORN, variety_id=2, variety_name="Sweet"),
        ]

    def test_sample_point_inside(self):
        for _ in range(200):
            x, y = sample_point(self.domain, self.rng)
            self.assertFalse(self.domain.is_point_outside(x, y))

    def test_sample_point_right_triangle(self):
        """Test sampling in a shape offset from the origin."""
        domain = RightTriangleDomain(base=3.0, height=2.0)
        for _ in range(100):
            x, y = sample_point(domain, self.rng)
            self.assertFalse(domain.is_point_outside(x, y))

    def test_sampling_gives_up(self):
        """Test that a hopeless domain raises SamplingError."""
        class NeverInside(SquareDomain):
            def is_point_outside(self, x, y):
                return True

        with self.assertRaises(SamplingError):
            sample_point(NeverInside(side=1.0), self.rng, max_tries=20)

    def test_individual_follows_slots(self):
        individual = build_random_individual(self.domain, self.slots, self.rng)

        self.assertEqual(len(individual), 2)
        self.assertFalse(individual.is_evaluated)
        for point, slot in zip(individual, self.slots):
            self.assertEqual(point.radius, slot.radius)
            self.assertEqual(point.plant_type, slot.plant_type)
            self.assertEqual(point.variety_name, slot.variety_name)
            self.assertFalse(self.domain.is_point_outside(point.x, point.y))

    def test_create_population(self):
        population = create_population(self.domain, self.slots, 15, self.rng)

        self.assertEqual(len(population), 15)
        self.assertEqual(len({id(ind.genes) for ind in population}), 15)
        with self.assertRaises(ValueError):
            create_population(self.domain, self.slots, 0, self.rng)

    def test_same_seed_same_population(self):
        a = create_population(self.domain, self.slots, 5, np.random.default_rng(9))
        b = create_population(self.domain, self.slots, 5, np.random.default_rng(9))
        self.assertEqual([ind.genes for ind in a], [ind.genes for ind in b])


class TestIndividual(unittest.TestCase):

    def test_copy_is_independent(self):
        original = _individual([0, 1, 2], fitness=-5.0)
        clone = original.copy()
        clone.replace_gene(0, Point(9.0, 9.0, 0.5))

        self.assertEqual(original[0].x, 0.0)
        self.assertEqual(clone.fitness, -5.0)
        self.assertIsNot(original.genes, clone.genes)

    def test_construction_copies_list(self):
        genes = [Point(0.0, 0.0, 1.0)]
        individual = Individual(genes=genes)
        genes.append(Point(1.0, 1.0, 1.0))
        self.assertEqual(len(individual), 1)

    def test_point_rejects_non_positive_radius(self):
        with self.assertRaises(ValueError):
            Point(0.0, 0.0, 0.0)
        with self.assertRaises(ValueError):
            Point(0.0, 0.0, -1.0)

    def test_point_rejects_non_finite_coordinates(self):
        for x, y in [(float("nan"), 0.0), (0.0, float("nan")), (float("inf"), 0.0), (0.0, float("-inf"))]:
            with self.assertRaises(ValueError):
                Point(x, y, 1.0)

    def test_moved_to_keeps_metadata(self):
        point = Point(1.0, 2.0, 0.4, PlantType.CARROT, 3, "Nantes")
        moved = point.moved_to(5.0, 6.0)
        self.assertEqual((moved.x, moved.y), (5.0, 6.0))
        self.assertEqual((moved.radius, moved.plant_type, moved.variety_id, moved.variety_name),
                         (0.4, PlantType.CARROT, 3, "Nantes"))


class TestSelection(unittest.TestCase):
    """Test parent selection operators."""

    def setUp(self):
        self.rng = np.random.default_rng(7)
        self.population = [_individual([i], fitness=-float(10 - i)) for i in range(10)]

    def test_tournament_full_size_picks_best(self):
        """Test a tournament over the whole population returns the best."""
        winner = tournament_select(self.population, self.rng, tournament_size=10)
        self.assertIs(winner, self.population[9])

    def test_tournament_size_capped(self):
        winner = tournament_select(self.population[:2], self.rng, tournament_size=5)
        self.assertIs(winner, self.population[1])

    def test_selection_favours_fitter(self):
        """Test that each strategy picks the best more often than the worst."""
        for strategy in (tournament_select, roulette_select, rank_select):
            counts = np.zeros(10, dtype=int)
            for _ in range(3000):
                chosen = strategy(self.population, self.rng, 3)
                counts[self.population.index(chosen)] += 1
            self.assertGreater(counts[9], counts[0], strategy.__name__)

    def test_roulette_handles_equal_fitness(self):
        population = [_individual([i], fitness=-3.0) for i in range(4)]
        chosen = roulette_select(population, self.rng)
        self.assertIn(chosen, population)

    def test_select_parent_dispatch(self):
        self.assertIn(select_parent("rank", self.population, self.rng), self.population)
        with self.assertRaises(ValueError):
            select_parent("lottery", self.population, self.rng)
        with self.assertRaises(ValueError):
            select_parent("tournament", [], self.rng)

    def test_select_elites(self):
        elites = select_elites(self.population, 3)

        self.assertEqual([e.fitness for e in elites], [-1.0, -2.0, -3.0])
        self.assertIsNot(elites[0], self.population[9])
        self.assertEqual(elites[0].genes, self.population[9].genes)


class TestCrossover(unittest.TestCase):
    """Test uniform crossover."""

    def setUp(self):
        self.rng = np.random.default_rng(42)
        self.parent_a = _individual([0, 1, 2, 3, 4, 5])
        self.parent_b = _individual([10, 11, 12, 13, 14, 15])

    def test_mask_matches_genes(self):
        """Test every child gene comes from the parent named by the mask."""
        for _ in range(20):
            child, mask = uniform_crossover(self.parent_a, self.parent_b, 1.0, self.rng)

            self.assertEqual(len(child), 6)
            self.assertEqual(len(mask), 6)
            for k, source in enumerate(mask):
                expected = self.parent_a[k] if source == "A" else self.parent_b[k]
                self.assertEqual(child[k], expected)

    def test_no_crossover_copies_a_parent(self):
        for _ in range(20):
            child, mask = uniform_crossover(self.parent_a, self.parent_b, 0.0, self.rng)
            self.assertIn(set(mask), ({"A"}, {"B"}))
            expected = self.parent_a if mask[0] == "A" else self.parent_b
            self.assertEqual(child.genes, expected.genes)

    def test_child_owns_its_genes(self):
        child, _ = uniform_crossover(self.parent_a, self.parent_b, 0.0, self.rng)
        self.assertIsNot(child.genes, self.parent_a.genes)
        self.assertIsNot(child.genes, self.parent_b.genes)
        self.assertFalse(child.is_evaluated)

    def test_parents_unchanged(self):
        before_a = list(self.parent_a.genes)
        before_b = list(self.parent_b.genes)
        uniform_crossover(self.parent_a, self.parent_b, 1.0, self.rng)
        self.assertEqual(self.parent_a.genes, before_a)
        self.assertEqual(self.parent_b.genes, before_b)

    def test_length_mismatch(self):
        with self.assertRaises(ValueError):
            uniform_crossover(self.parent_a, _individual([1, 2]), 1.0, self.rng)


class TestMutation(unittest.TestCase):
    """Test per-gene resampling mutation."""

    def setUp(self):
        self.rng = np.random.default_rng(42)
        self.domain = SquareDomain(side=4.0)
        self.individual = Individual(genes=[
            Point(0.0, 0.0, 0.3, PlantType.POTATO, 5, "Yukon"),
            Point(1.0, 1.0, 0.2, PlantType.WHEAT, 6, "Spelt"),
            Point(-1.0, 1.0, 0.4),
        ])

    def test_zero_probability(self):
        mutated, indices = mutate(self.individual, 0.0, self.domain, self.rng)
        self.assertEqual(indices, [])
        self.assertEqual(mutated.genes, self.individual.genes)
        self.assertIsNot(mutated, self.individual)

    def test_full_probability_resamples_all(self):
        """Test all genes move, stay inside and keep their metadata."""
        mutated, indices = mutate(self.individual, 1.0, self.domain, self.rng)

        self.assertEqual(indices, [0, 1, 2])
        for before, after in zip(self.individual, mutated):
            self.assertEqual(before.radius, after.radius)
            self.assertEqual(before.plant_type, after.plant_type)
            self.assertEqual(before.variety_name, after.variety_name)
            self.assertFalse(self.domain.is_point_outside(after.x, after.y))

    def test_input_not_modified(self):
        before = list(self.individual.genes)
        mutate(self.individual, 1.0, self.domain, self.rng)
        self.assertEqual(self.individual.genes, before)

    def test_mutation_rate(self):
        individual = Individual(genes=[Point(0.0, 0.0, 0.1)] * 1000)
        _, indices = mutate(individual, 0.1, self.domain, self.rng)
        self.assertTrue(50 < len(indices) < 150)


if __name__ == '__main__':
    unittest.main()
