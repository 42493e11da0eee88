"""
Free-region bookkeeping for one container.

The free set holds every maximal unoccupied rectangle of the container.
Rectangles may overlap each other; pruning only removes the ones that are
fully contained in another.

    split(used)  — carve a committed rect out of every free rect it touches
    prune()      — drop free rects contained in another free rect
    add(rect)    — return an area to the free set (used by erase)

Order of the list matters for the heuristics: on equal scores the free rect
scanned first wins, so surviving rects keep their relative order and new
slabs are appended.
"""

from __future__ import annotations

from typing import Iterator, List

from maxrects.core.models import Rect


def split_free_rect(free: Rect, used: Rect) -> List[Rect]:
    """
    Residual slabs of ``free`` left around ``used``.

    The caller guarantees that the two rects intersect. Slabs are maximal:
    each spans the full width (top/bottom) or full height (left/right) of
    ``free``, so they overlap each other at the corners.

    Args:
        free: Free rect being cut.
        used: Rect just committed to the container.

    Returns:
        Zero to four new free rects, in top, bottom, left, right order.
    """
    slabs: List[Rect] = []

    # Top slab
    if free.y < used.y < free.bottom:
        slabs.append(Rect(free.x, free.y, free.width, used.y - free.y))

    # Bottom slab
    if used.bottom < free.bottom:
        slabs.append(Rect(free.x, used.bottom, free.width, free.bottom - used.bottom))

    # Left slab
    if free.x < used.x < free.right:
        slabs.append(Rect(free.x, free.y, used.x - free.x, free.height))

    # Right slab
    if used.right < free.right:
        slabs.append(Rect(used.right, free.y, free.right - used.right, free.height))

    return slabs


def prune_contained(rects: List[Rect]) -> int:
    """
    Remove, in place, every rect contained in another rect of the list.

    When two rects have identical bounds the earlier one is dropped.
    After the call no rect of the list ``is_in`` another.

    Returns:
        Number of rects removed.
    """
    removed = 0
    i = 0
    while i < len(rects):
        j = i + 1
        dropped_i = False
        while j < len(rects):
            if rects[i].is_in(rects[j]):
                del rects[i]
                removed += 1
                dropped_i = True
                break
            if rects[j].is_in(rects[i]):
                del rects[j]
                removed += 1
            else:
                j += 1
        if not dropped_i:
            i += 1
    return removed


class FreeRegionSet:
    """
    Free rects of one container, kept in scan order.

    A fresh set for a ``width x height`` container holds the single rect
    ``(0, 0, width, height)``.
    """

    __slots__ = ("_rects",)

    def __init__(self, width: float, height: float) -> None:
        self._rects: List[Rect] = [Rect(0, 0, width, height)]

    def __iter__(self) -> Iterator[Rect]:
        return iter(self._rects)

    def __len__(self) -> int:
        return len(self._rects)

    def __contains__(self, rect: object) -> bool:
        return any(r is rect for r in self._rects)

    @property
    def rects(self) -> tuple[Rect, ...]:
        """Snapshot of the current free rects (read-only view)."""
        return tuple(self._rects)

    def split(self, used: Rect) -> None:
        """Replace every free rect intersecting ``used`` by its residual slabs."""
        survivors: List[Rect] = []
        slabs: List[Rect] = []
        for free in self._rects:
            if free.intersects(used):
                slabs.extend(split_free_rect(free, used))
            else:
                survivors.append(free)
        self._rects = survivors + slabs

    def prune(self) -> int:
        """Drop contained free rects. Returns how many were removed."""
        return prune_contained(self._rects)

    def add(self, rect: Rect) -> None:
        """Append a free rect without pruning."""
        self._rects.append(rect)

    def has_containment(self) -> bool:
        """True if some free rect is contained in another one."""
        rects = self._rects
        for i, a in enumerate(rects):
            for b in rects[i + 1:]:
                if a.is_in(b) or b.is_in(a):
                    return True
        return False
