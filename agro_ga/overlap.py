"""
Pairwise overlap penalty between plants.

Two plants i, j overlap when the distance between their centres is smaller
than r_i + r_j. Each overlapping unordered pair costs

    (r_i + r_j - d_ij)^2 * weight

Two strategies produce the candidate pairs:

- quadratic: every pair i < j, vectorised with numpy
- spatial: a uniform grid of cell size 2 * max radius; only pairs in
  neighbouring cells can overlap, so only those are checked

Both give the same total; the spatial hash pays off for large genomes.
"""

import math
from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

import numpy as np

from .data_models import Point

DEFAULT_OVERLAP_WEIGHT = 100.0
DEFAULT_SPATIAL_THRESHOLD = 80

OVERLAP_STRATEGIES = ("quadratic", "spatial", "auto")


def euclidean_distance(p: Point, q: Point) -> float:
    return math.hypot(p.x - q.x, p.y - q.y)


def pair_penalty(p: Point, q: Point, weight: float = DEFAULT_OVERLAP_WEIGHT) -> float:
    """
    Penalty of a single pair; zero when the plants touch or are apart.
    """
    required = p.radius + q.radius
    actual = euclidean_distance(p, q)
    if actual < required:
        gap = required - actual
        return gap * gap * weight
    return 0.0


@dataclass(frozen=True)
class OverlapSummary:
    """Total overlap penalty and number of overlapping pairs."""
    penalty: float
    pair_count: int


def _as_arrays(points: Sequence[Point]) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    xs = np.fromiter((p.x for p in points), dtype=float, count=len(points))
    ys = np.fromiter((p.y for p in points), dtype=float, count=len(points))
    rs = np.fromiter((p.radius for p in points), dtype=float, count=len(points))
    return xs, ys, rs


def _score_pairs(
    points: Sequence[Point],
    i_idx: np.ndarray,
    j_idx: np.ndarray,
    weight: float
) -> OverlapSummary:
    if len(i_idx) == 0:
        return OverlapSummary(penalty=0.0, pair_count=0)

    xs, ys, rs = _as_arrays(points)
    distances = np.hypot(xs[i_idx] - xs[j_idx], ys[i_idx] - ys[j_idx])
    required = rs[i_idx] + rs[j_idx]
    overlapping = distances < required

    gaps = required[overlapping] - distances[overlapping]
    penalty = float(np.sum(gaps * gaps) * weight)
    return OverlapSummary(penalty=penalty, pair_count=int(np.count_nonzero(overlapping)))


class QuadraticOverlap:
    """Exhaustive scan over all N(N-1)/2 unordered pairs."""

    name = "quadratic"

    def candidate_pairs(self, points: Sequence[Point]) -> Tuple[np.ndarray, np.ndarray]:
        return np.triu_indices(len(points), k=1)

    def calculate(self, points: Sequence[Point],
                  weight: float = DEFAULT_OVERLAP_WEIGHT) -> OverlapSummary:
        if len(points) < 2:
            return OverlapSummary(penalty=0.0, pair_count=0)
        i_idx, j_idx = self.candidate_pairs(points)
        return _score_pairs(points, i_idx, j_idx, weight)


class SpatialHashOverlap:
    """
    Grid-bucketed scan.

    Cells are 2 * max radius wide, so any overlapping pair lies in the same
    or an adjacent cell. Each unordered pair is emitted once (i < j).
    """

    name = "spatial"

    def _build_grid(self, points: Sequence[Point], cell_size: float) -> Dict[Tuple[int, int], List[int]]:
        grid: Dict[Tuple[int, int], List[int]] = {}
        for index, point in enumerate(points):
            cell = (math.floor(point.x / cell_size), math.floor(point.y / cell_size))
            grid.setdefault(cell, []).append(index)
        return grid

    def candidate_pairs(self, points: Sequence[Point]) -> Tuple[np.ndarray, np.ndarray]:
        if len(points) < 2:
            empty = np.empty(0, dtype=int)
            return empty, empty

        cell_size = 2.0 * max(p.radius for p in points)
        grid = self._build_grid(points, cell_size)

        i_list: List[int] = []
        j_list: List[int] = []
        for (cx, cy), members in grid.items():
            for dx in (-1, 0, 1):
                for dy in (-1, 0, 1):
                    neighbours = grid.get((cx + dx, cy + dy))
                    if not neighbours:
                        continue
                    for i in members:
                        for j in neighbours:
                            if i < j:
                                i_list.append(i)
                                j_list.append(j)

        return np.asarray(i_list, dtype=int), np.asarray(j_list, dtype=int)

    def calculate(self, points: Sequence[Point],
                  weight: float = DEFAULT_OVERLAP_WEIGHT) -> OverlapSummary:
        i_idx, j_idx = self.candidate_pairs(points)
        return _score_pairs(points, i_idx, j_idx, weight)


_STRATEGIES = {
    "quadratic": QuadraticOverlap(),
    "spatial": SpatialHashOverlap(),
}


def resolve_overlap_strategy(name: str, gene_count: int,
                             spatial_threshold: int = DEFAULT_SPATIAL_THRESHOLD):
    """
    Pick the overlap strategy for a genome size.

    Args:
        name: 'quadratic', 'spatial' or 'auto'
        gene_count: Number of genes per individual
        spatial_threshold: 'auto' switches to spatial above this many genes

    Returns:
        Strategy object with candidate_pairs and calculate

    Raises:
        ValueError: If name is unknown
    """
    if name == "auto":
        name = "spatial" if gene_count > spatial_threshold else "quadratic"
    if name not in _STRATEGIES:
        raise ValueError(
            f"Unknown overlap strategy '{name}' (expected one of: {', '.join(OVERLAP_STRATEGIES)})"
        )
    return _STRATEGIES[name]


def calculate_overlap(
    points: Sequence[Point],
    weight: float = DEFAULT_OVERLAP_WEIGHT,
    strategy: str = "auto",
    spatial_threshold: int = DEFAULT_SPATIAL_THRESHOLD
) -> float:
    """
    Total overlap penalty of a gene sequence.

    Returns 0.0 for fewer than two points.
    """
    resolved = resolve_overlap_strategy(strategy, len(points), spatial_threshold)
    return resolved.calculate(points, weight).penalty
