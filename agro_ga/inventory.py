"""
Plant inventory: which varieties are planted and how many of each.

The inventory expands to the ordered list of PlantSlots that defines the
genome; gene k carries the radius and variety of slot k.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List

from .data_models import PlantSlot, PlantType


@dataclass(frozen=True)
class PlantVariety:
    """A named plant variety with its footprint radius (metres)."""
    variety_id: int
    plant_type: PlantType
    name: str
    radius: float

    def __post_init__(self):
        if self.radius <= 0:
            raise ValueError(f"Variety '{self.name}' radius must be positive, got {self.radius}")


@dataclass(frozen=True)
class InventoryEntry:
    variety: PlantVariety
    quantity: int

    def __post_init__(self):
        if self.quantity <= 0:
            raise ValueError(
                f"Quantity for variety '{self.variety.name}' must be positive, got {self.quantity}"
            )


@dataclass
class PlantInventory:
    """
    Ordered collection of inventory entries.

    Attributes:
        entries: Entries in insertion order; expansion preserves this order
    """
    entries: List[InventoryEntry] = field(default_factory=list)

    def add_entry(self, variety: PlantVariety, quantity: int) -> InventoryEntry:
        entry = InventoryEntry(variety=variety, quantity=quantity)
        self.entries.append(entry)
        return entry

    @property
    def total_population_size(self) -> int:
        """Number of plants, i.e. the genome length."""
        return sum(entry.quantity for entry in self.entries)

    @property
    def max_radius(self) -> float:
        if not self.entries:
            return 0.0
        return max(entry.variety.radius for entry in self.entries)

    def is_empty(self) -> bool:
        return not self.entries

    def expand_slots(self) -> List[PlantSlot]:
        """
        Expand the inventory into one slot per plant.

        Returns:
            List of PlantSlot, entry order preserved, quantity copies per entry
        """
        slots = []
        for entry in self.entries:
            variety = entry.variety
            slot = PlantSlot(
                radius=variety.radius,
                plant_type=variety.plant_type,
                variety_id=variety.variety_id,
                variety_name=variety.name
            )
            slots.extend([slot] * entry.quantity)
        return slots

    def counts_by_type(self) -> Dict[PlantType, int]:
        counts: Dict[PlantType, int] = {}
        for entry in self.entries:
            plant_type = entry.variety.plant_type
            counts[plant_type] = counts.get(plant_type, 0) + entry.quantity
        return counts

    @classmethod
    def from_config(cls, items: List[Dict[str, Any]]) -> "PlantInventory":
        """
        Build an inventory from a list of config dictionaries.

        Each item needs 'name', 'radius' and 'quantity'; 'type' (plant type
        name, default generic) and 'variety_id' (default: 1-based position)
        are optional.

        Args:
            items: List of variety dictionaries

        Returns:
            PlantInventory with one entry per item

        Raises:
            ValueError: If an item is missing a field or has invalid values
        """
        inventory = cls()
        for position, item in enumerate(items, start=1):
            if not isinstance(item, dict):
                raise ValueError(f"Inventory item {position} must be a mapping, got {type(item).__name__}")

            missing = [key for key in ("name", "radius", "quantity") if key not in item]
            if missing:
                raise ValueError(f"Inventory item {position} missing field(s): {', '.join(missing)}")

            variety = PlantVariety(
                variety_id=int(item.get("variety_id", position)),
                plant_type=PlantType.from_name(item.get("type", "generic")),
                name=str(item["name"]),
                radius=float(item["radius"])
            )
            inventory.add_entry(variety, int(item["quantity"]))
        return inventory


def uniform_slots(count: int, radius: float,
                  plant_type: PlantType = PlantType.GENERIC) -> List[PlantSlot]:
    """
    Slots for the single-radius case: count identical plants.

    Raises:
        ValueError: If count is not positive or radius is not positive
    """
    if count <= 0:
        raise ValueError(f"Plant count must be positive, got {count}")
    slot = PlantSlot(radius=radius, plant_type=plant_type, variety_name=plant_type.label)
    return [slot] * count
