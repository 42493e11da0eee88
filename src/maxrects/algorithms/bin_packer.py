"""Multi-container packing on top of MaxRectsPacker."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from maxrects.algorithms.maxrects_packer import MaxRectsPacker
from maxrects.core.config import PackerConfig
from maxrects.core.models import Rect

log = logging.getLogger(__name__)


@dataclass
class Container:
    """One container (atlas page) and its packer."""

    container_id: int
    packer: MaxRectsPacker
    closed: bool = False

    @property
    def rects(self) -> tuple[Rect, ...]:
        return self.packer.used_rects

    @property
    def occupancy(self) -> float:
        return self.packer.occupancy

    def close(self) -> None:
        """Mark container as closed (no more pieces are offered to it)."""
        self.closed = True

    def __repr__(self) -> str:
        status = "CLOSED" if self.closed else "OPEN"
        return (
            f"Container(id={self.container_id}, status={status}, "
            f"pieces={len(self.packer.used_rects)}, "
            f"occupancy={self.occupancy:.1%})"
        )


@dataclass
class PackResult:
    """Containers produced by ``BinPacker.pack`` and the pieces left out."""

    containers: List[Container] = field(default_factory=list)
    rejected: List[Rect] = field(default_factory=list)

    @property
    def placed_count(self) -> int:
        return sum(len(c.rects) for c in self.containers)


class BinPacker:
    """
    Packs a stream of pieces into as many containers as needed.

    next_fit:  only the newest container is tried. When a piece does not
               fit, that container is closed and a fresh one is opened.
    first_fit: every open container is tried in creation order before a
               fresh one is opened.

    A piece that does not fit even an empty container is rejected.
    """

    def __init__(self, config: PackerConfig):
        self.config = config
        self.containers: list[Container] = []
        self._next_container_id = 0

    def pack(self, requests: Iterable[Rect]) -> PackResult:
        """
        Pack pieces in the given order.

        Args:
            requests: Rects whose width, height and payload describe the
                pieces to pack.

        Returns:
            PackResult with every container (all closed) and the rejected
            requests.
        """
        self.containers = []
        self._next_container_id = 0
        rejected: list[Rect] = []

        for request in requests:
            if self._place(request) is None:
                log.warning(
                    "Piece %sx%s does not fit an empty %sx%s container, skipping",
                    request.width, request.height,
                    self.config.container_width, self.config.container_height,
                )
                rejected.append(request)

        for container in self.containers:
            container.close()

        return PackResult(containers=list(self.containers), rejected=rejected)

    def fits_empty(self, width: float, height: float) -> bool:
        """Whether a piece fits an empty container in some allowed orientation."""
        cw, ch = self.config.container_width, self.config.container_height
        if width <= cw and height <= ch:
            return True
        return self.config.allow_rotate and height <= cw and width <= ch

    def _place(self, request: Rect) -> Optional[Rect]:
        if not self.fits_empty(request.width, request.height):
            return None

        heuristic = self.config.heuristic
        for container in self._candidates():
            rect = container.packer.try_insert(
                request.width, request.height, heuristic, request.payload,
            )
            if rect is not None:
                return rect
            if self.config.bin_selection == "next_fit":
                container.close()

        fresh = self._new_container()
        return fresh.packer.try_insert(
            request.width, request.height, heuristic, request.payload,
        )

    def _candidates(self) -> list[Container]:
        open_containers = [c for c in self.containers if not c.closed]
        if self.config.bin_selection == "next_fit":
            return open_containers[-1:]
        return open_containers

    def _new_container(self) -> Container:
        """Create a new container and add it to the list."""
        container = Container(
            container_id=self._next_container_id,
            packer=self.config.create_packer(),
        )
        self._next_container_id += 1
        self.containers.append(container)
        return container
