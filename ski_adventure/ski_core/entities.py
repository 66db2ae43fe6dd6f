"""
Entities
========

The skier and the things that scroll past it.

Fish and the player are anchored at their centre; obstacles are anchored at
their top-left corner.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Tuple

from ski_adventure.ski_core.config_loader import SpeciesConfig


@dataclass(frozen=True)
class Box:
    """Axis-aligned bounding box in canvas pixels (y grows downward)."""
    left: float
    top: float
    right: float
    bottom: float

    def overlaps(self, other: "Box") -> bool:
        """Strict overlap test; touching edges do not count."""
        return (
            self.right > other.left
            and self.left < other.right
            and self.bottom > other.top
            and self.top < other.bottom
        )

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top

    def as_rect(self) -> Tuple[float, float, float, float]:
        """(x, y, w, h) tuple for drawing."""
        return (self.left, self.top, self.width, self.height)


@dataclass
class Player:
    """The skier. Only x changes after creation."""
    x: float
    y: float
    w: float
    h: float
    dx: float = 0.0

    @property
    def half_width(self) -> float:
        return self.w / 2

    @property
    def box(self) -> Box:
        return Box(self.x - self.w / 2, self.y - self.h / 2,
                   self.x + self.w / 2, self.y + self.h / 2)

    def move(self, canvas_width: float) -> None:
        """Apply horizontal velocity, then clamp to the canvas."""
        self.x += self.dx
        low = self.half_width
        high = canvas_width - self.half_width
        if self.x < low:
            self.x = low
        if self.x > high:
            self.x = high


@dataclass(eq=False)
class Entity(ABC):
    """Common fields of anything that scrolls down the slope."""
    x: float
    y: float
    w: float
    h: float
    sprite_key: str

    @property
    @abstractmethod
    def box(self) -> Box:
        """Bounding box derived from the entity's anchor."""

    def is_past(self, canvas_height: float) -> bool:
        """True once the whole box is below the bottom edge."""
        return self.box.top > canvas_height


@dataclass(eq=False)
class Fish(Entity):
    """A catchable fish, centre-anchored."""
    species: Optional[SpeciesConfig] = None

    @property
    def box(self) -> Box:
        return Box(self.x - self.w / 2, self.y - self.h / 2,
                   self.x + self.w / 2, self.y + self.h / 2)

    def __repr__(self) -> str:
        name = self.species.name if self.species else "?"
        return f"Fish({name} @ {self.x:.1f},{self.y:.1f})"


@dataclass(eq=False)
class Obstacle(Entity):
    """A tree or snowman, top-left anchored."""

    @property
    def box(self) -> Box:
        return Box(self.x, self.y, self.x + self.w, self.y + self.h)

    def is_past(self, canvas_height: float) -> bool:
        # Kept one extra box height below the edge before removal
        return self.y - self.h > canvas_height

    def __repr__(self) -> str:
        return f"Obstacle({self.sprite_key} @ {self.x:.1f},{self.y:.1f})"
