"""
Layout metrics and reporting.

Post-run analysis of a layout: plants per type, clearance between plant
edges, remaining overlaps, plants outside the domain and how much of the
domain the plant footprints cover.
"""

import math
from collections import Counter
from typing import Any, Dict, List

import numpy as np

from .data_models import Individual
from .domains import Domain


class LayoutMetrics:
    """Metrics calculator for a finished layout"""

    def __init__(self, domain: Domain):
        self.domain = domain

    def analyze_layout(self, individual: Individual) -> Dict[str, Any]:
        """
        Analyze a layout.

        Returns:
            Dictionary with 'plant_count', 'counts_by_type', 'outside_count',
            'outside_indices', 'overlapping_pairs', 'min_clearance',
            'mean_nearest_clearance', 'plant_area' and 'coverage'
        """
        genes = individual.genes
        outside = [
            idx for idx, point in enumerate(genes)
            if self.domain.is_point_outside(point.x, point.y)
        ]
        counts = Counter(point.plant_type.label for point in genes)
        plant_area = sum(math.pi * point.radius * point.radius for point in genes)

        metrics = {
            'plant_count': len(genes),
            'counts_by_type': dict(sorted(counts.items())),
            'outside_count': len(outside),
            'outside_indices': outside,
            'plant_area': plant_area,
            'coverage': plant_area / self.domain.area,
        }
        metrics.update(self._analyze_clearance(individual))
        return metrics

    def _analyze_clearance(self, individual: Individual) -> Dict[str, Any]:
        """Edge-to-edge clearances; negative values mean overlap"""
        n = len(individual)
        if n < 2:
            return {
                'overlapping_pairs': [],
                'min_clearance': None,
                'mean_nearest_clearance': None,
            }

        xs = np.array([p.x for p in individual.genes])
        ys = np.array([p.y for p in individual.genes])
        rs = np.array([p.radius for p in individual.genes])

        distances = np.hypot(xs[:, None] - xs[None, :], ys[:, None] - ys[None, :])
        clearance = distances - (rs[:, None] + rs[None, :])
        np.fill_diagonal(clearance, np.inf)

        i_idx, j_idx = np.triu_indices(n, k=1)
        pair_clearance = clearance[i_idx, j_idx]
        overlapping: List[tuple] = [
            (int(i), int(j)) for i, j, c in zip(i_idx, j_idx, pair_clearance) if c < 0
        ]

        return {
            'overlapping_pairs': overlapping,
            'min_clearance': float(pair_clearance.min()),
            'mean_nearest_clearance': float(clearance.min(axis=1).mean()),
        }


def format_layout_report(metrics: Dict[str, Any]) -> str:
    """Generate a human-readable layout report"""
    lines = []
    lines.append("=" * 60)
    lines.append("PLANT LAYOUT REPORT")
    lines.append("=" * 60)
    lines.append(f"Plants: {metrics['plant_count']}")
    lines.append(f"Coverage: {metrics['coverage'] * 100:.1f}% of domain area")
    lines.append("")

    lines.append("PLANTS BY TYPE:")
    for label, count in metrics['counts_by_type'].items():
        lines.append(f"  {label}: {count}")
    lines.append("")

    lines.append("CLEARANCE:")
    if metrics['min_clearance'] is None:
        lines.append("  n/a (fewer than two plants)")
    else:
        lines.append(f"  Minimum edge clearance: {metrics['min_clearance']:.3f}m")
        lines.append(f"  Mean nearest-neighbour clearance: {metrics['mean_nearest_clearance']:.3f}m")
    lines.append("")

    if metrics['overlapping_pairs'] or metrics['outside_count']:
        lines.append("VIOLATIONS:")
        lines.append(f"  Overlapping pairs: {len(metrics['overlapping_pairs'])}")
        lines.append(f"  Plants outside domain: {metrics['outside_count']}")
    else:
        lines.append("VIOLATIONS: none")

    lines.append("=" * 60)

    return "\n".join(lines)
