"""
MaxRects packer — one container, online and offline insertion.

Usage:
    packer = MaxRectsPacker(1024, 1024, allow_rotate=True)
    rect = packer.insert(64, 32, Heuristic.BEST_SHORT_SIDE_FIT)
    if rect.is_no_fit:
        ...  # open another container and retry
    print(f"{packer.occupancy:.1%}")

One ``insert`` call goes through:
    SCORE -> no fit: return the sentinel, nothing changes
          -> fit:    SPLIT free rects -> PRUNE -> APPEND to used -> RETURN

The packer is not thread-safe; serialize calls on one instance or give
every worker its own container.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, NamedTuple, Optional

from maxrects.algorithms.free_regions import FreeRegionSet
from maxrects.algorithms.heuristics import Candidate, SearchSpace, find_position
from maxrects.core.errors import InvalidArgumentError, RectNotFoundError
from maxrects.core.models import Heuristic, Rect

log = logging.getLogger(__name__)


class BatchResult(NamedTuple):
    """Outcome of ``MaxRectsPacker.insert_batch``."""

    placed: List[Rect]
    unplaced: List[Rect]


def _check_size(width: float, height: float, what: str) -> None:
    if width <= 0 or height <= 0:
        raise InvalidArgumentError(
            f"{what} width & height should be greater than 0, "
            f"got width={width}, height={height}"
        )


class MaxRectsPacker:
    """
    Packs rectangles into a single fixed-size container.

    Keeps the list of maximal free rects and the list of used rects. Every
    placement splits the free rects it overlaps and prunes the ones that
    became redundant.

    Attributes:
        container_width: Container extent along x.
        container_height: Container extent along y.
        allow_rotate: Whether pieces may be placed rotated by 90 degrees.
    """

    def __init__(
        self,
        container_width: float,
        container_height: float,
        allow_rotate: bool = False,
    ) -> None:
        _check_size(container_width, container_height, "container")
        self.container_width = container_width
        self.container_height = container_height
        self.allow_rotate = bool(allow_rotate)
        self._free = FreeRegionSet(container_width, container_height)
        self._used: List[Rect] = []

    # ── State access ─────────────────────────────────────────────────────

    @property
    def free_rects(self) -> tuple[Rect, ...]:
        return self._free.rects

    @property
    def used_rects(self) -> tuple[Rect, ...]:
        return tuple(self._used)

    @property
    def occupancy(self) -> float:
        """Fraction of the container area covered by used rects."""
        used_area = sum(rect.area for rect in self._used)
        return used_area / (self.container_width * self.container_height)

    def _search_space(self) -> SearchSpace:
        return SearchSpace(
            container_width=self.container_width,
            container_height=self.container_height,
            free_rects=self._free.rects,
            used_rects=tuple(self._used),
        )

    # ── Scoring ──────────────────────────────────────────────────────────

    def score(
        self,
        width: float,
        height: float,
        heuristic: Heuristic | int | str = Heuristic.BEST_SHORT_SIDE_FIT,
    ) -> Optional[Candidate]:
        """
        Score a piece without placing it.

        Returns:
            The best Candidate, or None if the piece does not fit.
        """
        _check_size(width, height, "piece")
        return find_position(heuristic, self._search_space(), width, height, self.allow_rotate)

    # ── Online insertion ─────────────────────────────────────────────────

    def try_insert(
        self,
        width: float,
        height: float,
        heuristic: Heuristic | int | str = Heuristic.BEST_SHORT_SIDE_FIT,
        payload: Any = None,
    ) -> Optional[Rect]:
        """
        Place a ``width x height`` piece.

        Args:
            width, height: Requested piece size, both > 0.
            heuristic: Placement heuristic; invalid selectors fall back to
                BEST_SHORT_SIDE_FIT.
            payload: Caller data attached to the placed rect.

        Returns:
            The committed Rect, or None if the piece fits nowhere. A failed
            attempt leaves the packer untouched.

        Raises:
            InvalidArgumentError: width or height is not positive.
        """
        candidate = self.score(width, height, heuristic)
        if candidate is None:
            log.debug("No fit for %sx%s (%s)", width, height, Heuristic.normalize(heuristic).name)
            return None

        rect = candidate.rect
        rect.payload = payload
        self._place(rect)
        log.debug("Placed %r, occupancy=%.4f", rect, self.occupancy)
        return rect

    def insert(
        self,
        width: float,
        height: float,
        heuristic: Heuristic | int | str = Heuristic.BEST_SHORT_SIDE_FIT,
        payload: Any = None,
    ) -> Rect:
        """
        Place a piece, returning the no-fit sentinel on failure.

        Same as ``try_insert`` except that a failed placement returns a Rect
        with ``height == 0`` (check ``rect.is_no_fit``).
        """
        rect = self.try_insert(width, height, heuristic, payload)
        if rect is None:
            return Rect.no_fit()
        return rect

    def _place(self, rect: Rect) -> None:
        self._free.split(rect)
        self._free.prune()
        self._used.append(rect)

    # ── Offline insertion ────────────────────────────────────────────────

    def insert_batch(
        self,
        requests: Iterable[Rect],
        heuristic: Heuristic | int | str = Heuristic.BEST_SHORT_SIDE_FIT,
    ) -> BatchResult:
        """
        Place a whole set of pieces, best-scoring piece first.

        At every step all remaining requests are scored and the one whose
        candidate has the smallest ``sort_key`` is committed. Stops when no
        remaining request fits.

        Args:
            requests: Rects whose width, height and payload describe the
                pieces. They are not modified.
            heuristic: Placement heuristic used for every piece.

        Returns:
            BatchResult with the placed rects (in placement order, payloads
            copied from the requests) and the requests left over.
        """
        pending = list(requests)
        for request in pending:
            _check_size(request.width, request.height, "piece")

        placed: List[Rect] = []
        while pending:
            best_index = -1
            best: Optional[Candidate] = None
            for i, request in enumerate(pending):
                candidate = self.score(request.width, request.height, heuristic)
                if candidate is None:
                    continue
                if best is None or candidate.sort_key < best.sort_key:
                    best = candidate
                    best_index = i

            if best is None:
                break

            request = pending.pop(best_index)
            rect = best.rect
            rect.payload = request.payload
            self._place(rect)
            placed.append(rect)

        log.debug("Batch placed %d, left %d", len(placed), len(pending))
        return BatchResult(placed=placed, unplaced=pending)

    # ── Removal ──────────────────────────────────────────────────────────

    def _find_used(self, rect: Rect) -> int:
        for i, used in enumerate(self._used):
            if used is rect:
                return i
        for i, used in enumerate(self._used):
            if used.same_bounds(rect):
                return i
        return -1

    def erase(self, rect: Rect) -> None:
        """
        Remove a used rect and give its area back to the free set.

        The rect is matched by identity first, then by equal bounds. Its
        bounds are always added back as a new free rect, followed by a
        prune pass; adjacent free rects are not merged.

        Raises:
            RectNotFoundError: ``rect`` is not a used rect of this packer.
        """
        index = self._find_used(rect)
        if index == -1:
            raise RectNotFoundError(f"{rect!r} is not placed in this container")

        used = self._used.pop(index)
        self._free.add(Rect(used.x, used.y, used.width, used.height))
        self._free.prune()
        log.debug("Erased %r, occupancy=%.4f", used, self.occupancy)

    def __repr__(self) -> str:
        return (
            f"MaxRectsPacker({self.container_width}x{self.container_height}, "
            f"used={len(self._used)}, free={len(self._free)}, "
            f"occupancy={self.occupancy:.1%})"
        )
