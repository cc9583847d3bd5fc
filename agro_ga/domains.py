"""
Geometric domains for plant layouts.

Each domain is an immutable shape answering point-containment and
bounding-box queries. All shapes are closed sets: a point lying exactly on
a boundary (including the inner boundary of a frame or annulus) counts as
inside.

Shapes centred at the origin: circle, rectangle, square, ellipse, frame,
annulus. The right triangle has its right angle at the origin with the legs
along the positive axes.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Mapping, Optional


class DomainConstraintError(ValueError):
    """Raised when domain parameters describe an impossible shape."""

    def __init__(self, parameter: Optional[str], message: str):
        self.parameter = parameter
        if parameter:
            super().__init__(f"Invalid domain parameter '{parameter}': {message}")
        else:
            super().__init__(f"Invalid domain: {message}")


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned rectangle enclosing a domain."""
    min_x: float
    min_y: float
    width: float
    height: float

    @property
    def max_x(self) -> float:
        return self.min_x + self.width

    @property
    def max_y(self) -> float:
        return self.min_y + self.height


def _require_positive(name: str, value: float) -> None:
    if not math.isfinite(value) or value <= 0:
        raise DomainConstraintError(name, f"must be strictly positive (> 0), got {value}")


class Domain:
    """
    Base for all domain shapes.

    Subclasses implement is_point_outside, bounding_box, area and describe.
    """

    def is_point_outside(self, x: float, y: float) -> bool:
        raise NotImplementedError

    @property
    def bounding_box(self) -> BoundingBox:
        raise NotImplementedError

    @property
    def area(self) -> float:
        raise NotImplementedError

    def describe(self) -> str:
        raise NotImplementedError

    def is_valid_individual(self, individual) -> bool:
        """
        Check that every gene centre of an individual lies inside the domain.

        Args:
            individual: Individual (or any iterable of points with x, y)

        Returns:
            True if no gene is outside; stops at the first violation
        """
        for point in individual:
            if self.is_point_outside(point.x, point.y):
                return False
        return True


@dataclass(frozen=True)
class CircleDomain(Domain):
    radius: float
    _radius_sq: float = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        _require_positive("radius", self.radius)
        object.__setattr__(self, "_radius_sq", self.radius * self.radius)

    def is_point_outside(self, x: float, y: float) -> bool:
        return x * x + y * y > self._radius_sq

    @property
    def bounding_box(self) -> BoundingBox:
        return BoundingBox(-self.radius, -self.radius, 2 * self.radius, 2 * self.radius)

    @property
    def area(self) -> float:
        return math.pi * self._radius_sq

    def describe(self) -> str:
        return f"Circle {{ radius = {self.radius:.2f}m }}"


@dataclass(frozen=True)
class RectangleDomain(Domain):
    width: float
    height: float

    def __post_init__(self):
        _require_positive("width", self.width)
        _require_positive("height", self.height)

    def is_point_outside(self, x: float, y: float) -> bool:
        return abs(x) > self.width / 2.0 or abs(y) > self.height / 2.0

    @property
    def bounding_box(self) -> BoundingBox:
        return BoundingBox(-self.width / 2.0, -self.height / 2.0, self.width, self.height)

    @property
    def area(self) -> float:
        return self.width * self.height

    def describe(self) -> str:
        return f"Rectangle {{ width = {self.width:.2f}m, height = {self.height:.2f}m }}"


@dataclass(frozen=True)
class SquareDomain(Domain):
    side: float

    def __post_init__(self):
        _require_positive("side", self.side)

    def is_point_outside(self, x: float, y: float) -> bool:
        half = self.side / 2.0
        return abs(x) > half or abs(y) > half

    @property
    def bounding_box(self) -> BoundingBox:
        return BoundingBox(-self.side / 2.0, -self.side / 2.0, self.side, self.side)

    @property
    def area(self) -> float:
        return self.side * self.side

    def describe(self) -> str:
        return f"Square {{ side = {self.side:.2f}m }}"


@dataclass(frozen=True)
class EllipseDomain(Domain):
    """Ellipse given by its semi-axes along x (semi_width) and y (semi_height)."""
    semi_width: float
    semi_height: float

    def __post_init__(self):
        _require_positive("semi_width", self.semi_width)
        _require_positive("semi_height", self.semi_height)

    def is_point_outside(self, x: float, y: float) -> bool:
        nx = x / self.semi_width
        ny = y / self.semi_height
        return nx * nx + ny * ny > 1.0

    @property
    def bounding_box(self) -> BoundingBox:
        return BoundingBox(
            -self.semi_width, -self.semi_height,
            2 * self.semi_width, 2 * self.semi_height
        )

    @property
    def area(self) -> float:
        return math.pi * self.semi_width * self.semi_height

    def describe(self) -> str:
        return (f"Ellipse {{ semi-width = {self.semi_width:.2f}m, "
                f"semi-height = {self.semi_height:.2f}m }}")


@dataclass(frozen=True)
class RightTriangleDomain(Domain):
    base: float
    height: float

    def __post_init__(self):
        _require_positive("base", self.base)
        _require_positive("height", self.height)

    def is_point_outside(self, x: float, y: float) -> bool:
        if x < 0 or y < 0:
            return True
        return x / self.base + y / self.height > 1.0

    @property
    def bounding_box(self) -> BoundingBox:
        return BoundingBox(0.0, 0.0, self.base, self.height)

    @property
    def area(self) -> float:
        return self.base * self.height / 2.0

    def describe(self) -> str:
        return f"Right Triangle {{ base = {self.base:.2f}m, height = {self.height:.2f}m }}"


@dataclass(frozen=True)
class FrameDomain(Domain):
    """
    Rectangular band between an outer rectangle and a centred inner hole.

    The inner rectangle must be strictly smaller than the outer one in both
    dimensions.
    """
    inner_width: float
    inner_height: float
    outer_width: float
    outer_height: float

    def __post_init__(self):
        _require_positive("inner_width", self.inner_width)
        _require_positive("inner_height", self.inner_height)
        _require_positive("outer_width", self.outer_width)
        _require_positive("outer_height", self.outer_height)

        if self.inner_width >= self.outer_width or self.inner_height >= self.outer_height:
            raise DomainConstraintError(
                None,
                f"inner dimensions ({self.inner_width:.2f}x{self.inner_height:.2f}) must be "
                f"strictly smaller than outer dimensions "
                f"({self.outer_width:.2f}x{self.outer_height:.2f})"
            )

    def is_point_outside(self, x: float, y: float) -> bool:
        abs_x = abs(x)
        abs_y = abs(y)

        if abs_x > self.outer_width / 2.0 or abs_y > self.outer_height / 2.0:
            return True

        # Hole is open: its edge belongs to the frame
        return abs_x < self.inner_width / 2.0 and abs_y < self.inner_height / 2.0

    @property
    def bounding_box(self) -> BoundingBox:
        return BoundingBox(
            -self.outer_width / 2.0, -self.outer_height / 2.0,
            self.outer_width, self.outer_height
        )

    @property
    def area(self) -> float:
        return self.outer_width * self.outer_height - self.inner_width * self.inner_height

    def describe(self) -> str:
        return (f"Frame {{ inner width = {self.inner_width:.2f}m, "
                f"inner height = {self.inner_height:.2f}m, "
                f"outer width = {self.outer_width:.2f}m, "
                f"outer height = {self.outer_height:.2f}m }}")


@dataclass(frozen=True)
class AnnulusDomain(Domain):
    """Ring between two concentric circles, 0 < inner_radius < outer_radius."""
    inner_radius: float
    outer_radius: float
    _inner_sq: float = field(init=False, repr=False, compare=False)
    _outer_sq: float = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        _require_positive("inner_radius", self.inner_radius)
        _require_positive("outer_radius", self.outer_radius)

        if self.inner_radius >= self.outer_radius:
            raise DomainConstraintError(
                None,
                f"inner radius ({self.inner_radius:.2f}) must be strictly smaller "
                f"than outer radius ({self.outer_radius:.2f})"
            )

        object.__setattr__(self, "_inner_sq", self.inner_radius * self.inner_radius)
        object.__setattr__(self, "_outer_sq", self.outer_radius * self.outer_radius)

    def is_point_outside(self, x: float, y: float) -> bool:
        dist_sq = x * x + y * y
        return dist_sq > self._outer_sq or dist_sq < self._inner_sq

    @property
    def bounding_box(self) -> BoundingBox:
        r = self.outer_radius
        return BoundingBox(-r, -r, 2 * r, 2 * r)

    @property
    def area(self) -> float:
        return math.pi * (self._outer_sq - self._inner_sq)

    def describe(self) -> str:
        return (f"Annulus {{ inner radius = {self.inner_radius:.2f}m, "
                f"outer radius = {self.outer_radius:.2f}m }}")


class DomainType(Enum):
    """
    Registry of supported domain shapes.

    Each member carries the numeric menu id, the display label and the
    ordered names of the parameters needed to build the shape.
    """
    CIRCLE = (1, "CIRCLE", ("radius",))
    RECTANGLE = (2, "RECTANGLE", ("width", "height"))
    SQUARE = (3, "SQUARE", ("side",))
    ELLIPSE = (4, "ELLIPSE", ("semi_width", "semi_height"))
    RIGHT_TRIANGLE = (5, "RIGHT TRIANGLE", ("base", "height"))
    FRAME = (6, "FRAME", ("inner_width", "inner_height", "outer_width", "outer_height"))
    ANNULUS = (7, "ANNULUS", ("inner_radius", "outer_radius"))

    def __init__(self, menu_id: int, label: str, required_parameters: tuple):
        self.menu_id = menu_id
        self.label = label
        self.required_parameters = required_parameters

    def __str__(self) -> str:
        return self.label

    @classmethod
    def from_menu_id(cls, menu_id: int) -> Optional["DomainType"]:
        for domain_type in cls:
            if domain_type.menu_id == menu_id:
                return domain_type
        return None

    @classmethod
    def from_name(cls, name: str) -> "DomainType":
        """
        Resolve a domain type from a config name ("annulus", "right_triangle", ...).

        Raises:
            DomainConstraintError: If the name matches no domain type
        """
        key = str(name).strip().upper().replace("-", "_").replace(" ", "_")
        try:
            return cls[key]
        except KeyError:
            valid = ", ".join(t.name.lower() for t in cls)
            raise DomainConstraintError("type", f"unknown domain type '{name}' (expected one of: {valid})")

    def validate_parameters(self, params: Mapping[str, float]) -> Dict[str, float]:
        """
        Check an input mapping against this type's required parameters.

        Only presence and positivity are checked here; relational rules
        (inner < outer) are enforced by the shape itself.

        Args:
            params: Mapping of parameter name to value

        Returns:
            Dictionary with exactly the required parameters, as floats

        Raises:
            DomainConstraintError: If a parameter is missing, non-numeric or not positive
        """
        validated = {}
        for name in self.required_parameters:
            value = params.get(name)
            if value is None:
                raise DomainConstraintError(
                    name, f"missing parameter for the domain '{self.label}'"
                )
            try:
                value = float(value)
            except (TypeError, ValueError):
                raise DomainConstraintError(name, f"must be a number, got {value!r}")
            _require_positive(name, value)
            validated[name] = value
        return validated


_DOMAIN_CLASSES = {
    DomainType.CIRCLE: CircleDomain,
    DomainType.RECTANGLE: RectangleDomain,
    DomainType.SQUARE: SquareDomain,
    DomainType.ELLIPSE: EllipseDomain,
    DomainType.RIGHT_TRIANGLE: RightTriangleDomain,
    DomainType.FRAME: FrameDomain,
    DomainType.ANNULUS: AnnulusDomain,
}


def create_domain(domain_type: DomainType, params: Mapping[str, float]) -> Domain:
    """
    Build a domain from a registry entry and a parameter mapping.

    Args:
        domain_type: Registry entry selecting the shape
        params: Mapping of parameter name to value

    Returns:
        The constructed domain

    Raises:
        DomainConstraintError: If parameters are missing or describe an invalid shape
    """
    validated = domain_type.validate_parameters(params)
    return _DOMAIN_CLASSES[domain_type](**validated)


def list_domain_types() -> List[DomainType]:
    """Registry entries ordered by menu id."""
    return sorted(DomainType, key=lambda t: t.menu_id)
