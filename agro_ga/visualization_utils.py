"""
Visualization utilities for plant layouts.

Draws the domain outline and every plant footprint with matplotlib. Plants
that overlap another plant or lie outside the domain are highlighted.
"""

from pathlib import Path
from typing import List, Optional, Tuple, Union

import matplotlib.pyplot as plt
import matplotlib.patches as patches

from .data_models import Individual, PlantType
from .domains import (
    AnnulusDomain,
    CircleDomain,
    Domain,
    EllipseDomain,
    FrameDomain,
    RectangleDomain,
    RightTriangleDomain,
    SquareDomain,
)
from .layout_metrics import LayoutMetrics

PLANT_COLORS = {
    PlantType.GENERIC: "tab:green",
    PlantType.TOMATO: "tab:red",
    PlantType.CORN: "gold",
    PlantType.POTATO: "tab:brown",
    PlantType.CARROT: "tab:orange",
    PlantType.WHEAT: "wheat",
    PlantType.ZUCCHINI: "tab:olive",
    PlantType.PUMPKIN: "darkorange",
}

VIOLATION_COLOR = "crimson"


def domain_outline(domain: Domain) -> List[patches.Patch]:
    """Unfilled patches tracing the domain boundary (inner boundary included)."""
    style = dict(fill=False, edgecolor="black", linewidth=1.5)

    if isinstance(domain, CircleDomain):
        return [patches.Circle((0, 0), domain.radius, **style)]
    if isinstance(domain, AnnulusDomain):
        return [
            patches.Circle((0, 0), domain.outer_radius, **style),
            patches.Circle((0, 0), domain.inner_radius, linestyle="--", **style),
        ]
    if isinstance(domain, EllipseDomain):
        return [patches.Ellipse((0, 0), 2 * domain.semi_width, 2 * domain.semi_height, **style)]
    if isinstance(domain, RightTriangleDomain):
        vertices = [(0, 0), (domain.base, 0), (0, domain.height)]
        return [patches.Polygon(vertices, closed=True, **style)]
    if isinstance(domain, FrameDomain):
        return [
            patches.Rectangle((-domain.outer_width / 2, -domain.outer_height / 2),
                              domain.outer_width, domain.outer_height, **style),
            patches.Rectangle((-domain.inner_width / 2, -domain.inner_height / 2),
                              domain.inner_width, domain.inner_height, linestyle="--", **style),
        ]
    if isinstance(domain, (RectangleDomain, SquareDomain)):
        box = domain.bounding_box
        return [patches.Rectangle((box.min_x, box.min_y), box.width, box.height, **style)]

    raise TypeError(f"No outline for domain type {type(domain).__name__}")


def plot_layout(
    individual: Individual,
    domain: Domain,
    ax: Optional[plt.Axes] = None,
    title: Optional[str] = None
) -> plt.Axes:
    """
    Plot a layout inside its domain.

    Args:
        individual: Layout to draw
        domain: Domain the layout belongs to
        ax: Axes to draw on (a new figure is created if None)
        title: Plot title (defaults to the domain description)

    Returns:
        The axes drawn on
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=(8, 8))

    for outline in domain_outline(domain):
        ax.add_patch(outline)

    metrics = LayoutMetrics(domain).analyze_layout(individual)
    flagged = set(metrics['outside_indices'])
    for i, j in metrics['overlapping_pairs']:
        flagged.update((i, j))

    labelled = set()
    for idx, point in enumerate(individual):
        color = PLANT_COLORS.get(point.plant_type, "tab:green")
        label = None
        if point.plant_type not in labelled:
            label = point.plant_type.label
            labelled.add(point.plant_type)

        edge = VIOLATION_COLOR if idx in flagged else "black"
        circle = plt.Circle((point.x, point.y), point.radius,
                            facecolor=color, edgecolor=edge, alpha=0.6,
                            linewidth=2.0 if idx in flagged else 0.8, label=label)
        ax.add_patch(circle)
        ax.plot(point.x, point.y, marker=".", color="black", markersize=2)

    box = domain.bounding_box
    margin = 0.05 * max(box.width, box.height)
    ax.set_xlim(box.min_x - margin, box.max_x + margin)
    ax.set_ylim(box.min_y - margin, box.max_y + margin)
    ax.set_aspect("equal")
    ax.set_title(title or domain.describe())
    ax.set_xlabel("x (m)")
    ax.set_ylabel("y (m)")
    if labelled:
        ax.legend(bbox_to_anchor=(1.05, 1), loc='upper left')
    ax.grid(True, alpha=0.3)

    return ax


def save_layout_plot(
    individual: Individual,
    domain: Domain,
    output_path: Union[str, Path],
    figsize: Tuple[int, int] = (10, 8),
    title: Optional[str] = None
) -> Path:
    """
    Render a layout plot to a PNG file.

    Returns:
        Path to the saved image
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    fig, ax = plt.subplots(figsize=figsize)
    try:
        plot_layout(individual, domain, ax=ax, title=title)
        fig.savefig(output_path, dpi=150, bbox_inches='tight')
    finally:
        plt.close(fig)

    return output_path
