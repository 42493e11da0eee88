"""
Placement heuristics for MaxRects packing.

Each heuristic is a pure function that scans the free rects of a container
and proposes where an incoming ``width x height`` piece should go:

    best_short_side_fit: smallest leftover on the short side, then long side
    bottom_left        : lowest top edge, then leftmost
    contact_point      : largest perimeter touching walls and placed rects
    best_long_side_fit : smallest leftover on the long side, then short side
    best_area_fit      : smallest free rect area, then short-side leftover

For every free rect the upright orientation is tried before the rotated one,
and comparisons are strict: on equal scores the first candidate found wins.

References:
    Jylänki, J. (2010).
    "A Thousand Ways to Pack the Bin - A Practical Approach to
    Two-Dimensional Rectangle Bin Packing."
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, Iterator, NamedTuple, Optional, Sequence, Tuple

from maxrects.core.models import Heuristic, Rect


class Candidate(NamedTuple):
    """
    A proposed placement and its scores.

    Attributes:
        rect: Position and consumed size of the piece (rotated when
            width/height are swapped relative to the request).
        primary: Main score of the heuristic.
        secondary: Tie-break score (0 for contact point).
        heuristic: Heuristic that produced the candidate.
    """

    rect: Rect
    primary: float
    secondary: float
    heuristic: Heuristic

    @property
    def sort_key(self) -> Tuple[float, float]:
        """Key where smaller is better for every heuristic."""
        if self.heuristic is Heuristic.CONTACT_POINT:
            return (-self.primary, self.secondary)
        return (self.primary, self.secondary)


@dataclass(frozen=True)
class SearchSpace:
    """Read-only view of a container handed to the heuristics."""

    container_width: float
    container_height: float
    free_rects: Sequence[Rect]
    used_rects: Sequence[Rect] = field(default_factory=tuple)


def _orientations(
    free: Rect, width: float, height: float, allow_rotate: bool,
) -> Iterator[Tuple[float, float]]:
    """Yield the (used_w, used_h) pairs that fit inside ``free``."""
    if free.width >= width and free.height >= height:
        yield width, height
    if allow_rotate and free.width >= height and free.height >= width:
        yield height, width


def _minimize(
    space: SearchSpace,
    width: float,
    height: float,
    allow_rotate: bool,
    heuristic: Heuristic,
    score: Callable[[Rect, float, float], Tuple[float, float]],
) -> Optional[Candidate]:
    best: Optional[Candidate] = None
    for free in space.free_rects:
        for used_w, used_h in _orientations(free, width, height, allow_rotate):
            primary, secondary = score(free, used_w, used_h)
            if best is None or primary < best.primary or (
                primary == best.primary and secondary < best.secondary
            ):
                best = Candidate(
                    Rect(free.x, free.y, used_w, used_h), primary, secondary, heuristic,
                )
    return best


def _leftovers(free: Rect, used_w: float, used_h: float) -> Tuple[float, float]:
    return abs(free.width - used_w), abs(free.height - used_h)


def best_short_side_fit(
    space: SearchSpace, width: float, height: float, allow_rotate: bool,
) -> Optional[Candidate]:
    """Minimize the shorter leftover side, then the longer one."""
    def score(free: Rect, used_w: float, used_h: float) -> Tuple[float, float]:
        horiz, vert = _leftovers(free, used_w, used_h)
        return min(horiz, vert), max(horiz, vert)

    return _minimize(
        space, width, height, allow_rotate, Heuristic.BEST_SHORT_SIDE_FIT, score,
    )


def best_long_side_fit(
    space: SearchSpace, width: float, height: float, allow_rotate: bool,
) -> Optional[Candidate]:
    """Minimize the longer leftover side, then the shorter one."""
    def score(free: Rect, used_w: float, used_h: float) -> Tuple[float, float]:
        horiz, vert = _leftovers(free, used_w, used_h)
        return max(horiz, vert), min(horiz, vert)

    return _minimize(
        space, width, height, allow_rotate, Heuristic.BEST_LONG_SIDE_FIT, score,
    )


def best_area_fit(
    space: SearchSpace, width: float, height: float, allow_rotate: bool,
) -> Optional[Candidate]:
    """
    Minimize the leftover area of the hosting free rect.

    The area term does not depend on orientation, so both orientations of
    the same free rect tie on it and the short-side leftover decides.
    """
    piece_area = width * height

    def score(free: Rect, used_w: float, used_h: float) -> Tuple[float, float]:
        horiz, vert = _leftovers(free, used_w, used_h)
        return free.width * free.height - piece_area, min(horiz, vert)

    return _minimize(
        space, width, height, allow_rotate, Heuristic.BEST_AREA_FIT, score,
    )


def bottom_left(
    space: SearchSpace, width: float, height: float, allow_rotate: bool,
) -> Optional[Candidate]:
    """Minimize the top edge of the placed piece (y + used_h), then x."""
    def score(free: Rect, used_w: float, used_h: float) -> Tuple[float, float]:
        return free.y + used_h, free.x

    return _minimize(
        space, width, height, allow_rotate, Heuristic.BOTTOM_LEFT, score,
    )


def common_interval_length(
    start1: float, end1: float, start2: float, end2: float,
) -> float:
    """Length of the overlap of [start1, end1] and [start2, end2], or 0."""
    if end1 < start2 or end2 < start1:
        return 0
    return min(end1, end2) - max(start1, start2)


def contact_point_score(
    x: float,
    y: float,
    width: float,
    height: float,
    container_width: float,
    container_height: float,
    used_rects: Iterable[Rect],
) -> float:
    """
    Perimeter length of a placement touching container walls or used rects.

    Args:
        x, y, width, height: Candidate placement.
        container_width, container_height: Container size.
        used_rects: Rects already committed to the container.

    Returns:
        Sum of touching edge lengths (higher is better).
    """
    score = 0
    if x == 0 or x + width == container_width:
        score += height
    if y == 0 or y + height == container_height:
        score += width

    for used in used_rects:
        if used.x == x + width or used.right == x:
            score += common_interval_length(used.y, used.bottom, y, y + height)
        if used.y == y + height or used.bottom == y:
            score += common_interval_length(used.x, used.right, x, x + width)
    return score


def contact_point(
    space: SearchSpace, width: float, height: float, allow_rotate: bool,
) -> Optional[Candidate]:
    """Maximize the contact score; the only heuristic that is not minimized."""
    best: Optional[Candidate] = None
    for free in space.free_rects:
        for used_w, used_h in _orientations(free, width, height, allow_rotate):
            score = contact_point_score(
                free.x, free.y, used_w, used_h,
                space.container_width, space.container_height, space.used_rects,
            )
            if best is None or score > best.primary:
                best = Candidate(
                    Rect(free.x, free.y, used_w, used_h), score, 0, Heuristic.CONTACT_POINT,
                )
    return best


HeuristicFn = Callable[[SearchSpace, float, float, bool], Optional[Candidate]]

HEURISTICS: Dict[Heuristic, HeuristicFn] = {
    Heuristic.BEST_SHORT_SIDE_FIT: best_short_side_fit,
    Heuristic.BOTTOM_LEFT: bottom_left,
    Heuristic.CONTACT_POINT: contact_point,
    Heuristic.BEST_LONG_SIDE_FIT: best_long_side_fit,
    Heuristic.BEST_AREA_FIT: best_area_fit,
}


def find_position(
    heuristic: Heuristic | int | str,
    space: SearchSpace,
    width: float,
    height: float,
    allow_rotate: bool,
) -> Optional[Candidate]:
    """
    Run the selected heuristic over a container.

    Args:
        heuristic: Heuristic member, ordinal or name (normalized).
        space: Free rects, used rects and size of the container.
        width, height: Requested piece size.
        allow_rotate: Whether the 90 degree orientation may be tried.

    Returns:
        The best Candidate, or None if the piece fits in no free rect in any
        allowed orientation. The candidate's ``rect.rotated`` flag is set.
    """
    fn = HEURISTICS[Heuristic.normalize(heuristic)]
    candidate = fn(space, width, height, allow_rotate)
    if candidate is not None:
        placed = candidate.rect
        placed.rotated = not (placed.width == width and placed.height == height)
    return candidate
