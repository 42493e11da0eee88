"""Core data models for MaxRects rectangle packing."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any


@dataclass
class Rect:
    """An axis-aligned rectangle inside a container.

    The same type describes free regions, used regions and placement
    requests. A rect with ``height == 0`` returned from
    ``MaxRectsPacker.insert`` is the no-fit sentinel; see ``is_no_fit``.

    Attributes:
        x, y: Origin of the rect (any numeric unit, int or float).
        width: Extent along the x-axis.
        height: Extent along the y-axis.
        rotated: True if the piece was placed with width and height swapped
            relative to the requested orientation.
        payload: Opaque caller data carried along with the rect.
    """

    x: float = 0
    y: float = 0
    width: float = 0
    height: float = 0
    rotated: bool = False
    payload: Any = None

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def is_empty(self) -> bool:
        """True iff all four numeric fields are exactly zero."""
        return self.x == 0 and self.y == 0 and self.width == 0 and self.height == 0

    @property
    def is_no_fit(self) -> bool:
        """True for the sentinel returned when a placement failed."""
        return self.height == 0

    @classmethod
    def no_fit(cls) -> Rect:
        """Build the no-fit sentinel."""
        return cls()

    def clone(self) -> Rect:
        """Copy the rect. The payload is shared, not copied."""
        return Rect(
            x=self.x,
            y=self.y,
            width=self.width,
            height=self.height,
            rotated=self.rotated,
            payload=self.payload,
        )

    def is_in(self, other: Rect) -> bool:
        """Check whether this rect's bounds are a subset of ``other``'s."""
        return (
            self.x >= other.x
            and self.y >= other.y
            and self.right <= other.right
            and self.bottom <= other.bottom
        )

    def intersects(self, other: Rect) -> bool:
        """Separating-axis test on the open interiors of both rects."""
        return not (
            self.x >= other.right
            or self.right <= other.x
            or self.y >= other.bottom
            or self.bottom <= other.y
        )

    def same_bounds(self, other: Rect) -> bool:
        return (
            self.x == other.x
            and self.y == other.y
            and self.width == other.width
            and self.height == other.height
        )

    def to_dict(self) -> dict:
        d = {
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "rotated": self.rotated,
        }
        if self.payload is not None:
            d["payload"] = self.payload
        return d

    @classmethod
    def from_dict(cls, d: dict) -> Rect:
        return cls(
            x=d.get("x", 0),
            y=d.get("y", 0),
            width=d["width"],
            height=d["height"],
            rotated=d.get("rotated", False),
            payload=d.get("payload"),
        )

    def __repr__(self) -> str:
        flag = ", rotated" if self.rotated else ""
        return f"Rect(({self.x}, {self.y}) {self.width}x{self.height}{flag})"


class Heuristic(IntEnum):
    """Placement strategies, numbered by their historical ordinals."""

    BEST_SHORT_SIDE_FIT = 0
    BOTTOM_LEFT = 1
    CONTACT_POINT = 2
    BEST_LONG_SIDE_FIT = 3
    BEST_AREA_FIT = 4

    @classmethod
    def normalize(cls, value: Any) -> Heuristic:
        """
        Coerce a selector into a Heuristic.

        Accepts members, ordinals and names (``"bssf"``,
        ``"best_short_side_fit"``, ``"BottomLeft"``...). Anything outside the
        five defined strategies falls back to BEST_SHORT_SIDE_FIT.

        Example:
            >>> Heuristic.normalize(2)
            <Heuristic.CONTACT_POINT: 2>
            >>> Heuristic.normalize(42)
            <Heuristic.BEST_SHORT_SIDE_FIT: 0>
            >>> Heuristic.normalize("baf")
            <Heuristic.BEST_AREA_FIT: 4>
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower().replace("-", "_").replace(" ", "_")
            return _HEURISTIC_ALIASES.get(key, cls.BEST_SHORT_SIDE_FIT)
        if isinstance(value, int) and not isinstance(value, bool):
            try:
                return cls(value)
            except ValueError:
                return cls.BEST_SHORT_SIDE_FIT
        return cls.BEST_SHORT_SIDE_FIT

    @property
    def short_name(self) -> str:
        return _SHORT_NAMES[self]


_SHORT_NAMES = {
    Heuristic.BEST_SHORT_SIDE_FIT: "bssf",
    Heuristic.BOTTOM_LEFT: "bl",
    Heuristic.CONTACT_POINT: "cp",
    Heuristic.BEST_LONG_SIDE_FIT: "blsf",
    Heuristic.BEST_AREA_FIT: "baf",
}

_HEURISTIC_ALIASES: dict[str, Heuristic] = {}
for _h in Heuristic:
    _HEURISTIC_ALIASES[_h.name.lower()] = _h
    _HEURISTIC_ALIASES[_h.name.lower().replace("_", "")] = _h
    _HEURISTIC_ALIASES[_SHORT_NAMES[_h]] = _h
# Short CamelCase spellings without the "Best" prefix
_HEURISTIC_ALIASES.update({
    "shortsidefit": Heuristic.BEST_SHORT_SIDE_FIT,
    "longsidefit": Heuristic.BEST_LONG_SIDE_FIT,
    "areafit": Heuristic.BEST_AREA_FIT,
})
del _h
