"""Domain records shared by the repository and the HTTP handlers."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Estate:
    """A rectangular estate; length runs along X, width along Y."""

    length: int
    width: int


@dataclass(frozen=True)
class Tree:
    """A tree planted at 1-based plot coordinates."""

    x: int
    y: int
    height: int


@dataclass(frozen=True)
class EstateTrees:
    """An estate together with every tree planted in it."""

    estate: Estate
    trees: tuple[Tree, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "trees", tuple(self.trees))


@dataclass(frozen=True)
class EstateStats:
    """Tree height statistics of one estate."""

    count: int
    max: int
    min: int
    median: float

    def to_dict(self) -> dict[str, int | float]:
        return {
            "count": self.count,
            "max": self.max,
            "min": self.min,
            "median": float(self.median),
        }


@dataclass(frozen=True)
class DronePlan:
    """Result of planning a drone patrol over an estate.

    The totals are filled in only when the whole route fits; when a maximum
    distance cuts the flight short they stay zero and the last achievable
    coordinates tell where the drone stops.
    """

    total_distance: int = 0
    total_vertical_distance: int = 0
    total_horizontal_distance: int = 0
    last_x: int = 0
    last_y: int = 0

    @property
    def last_position(self) -> tuple[int, int]:
        return (self.last_x, self.last_y)