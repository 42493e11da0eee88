"""Dataset generation for packing experiments."""

import random
from typing import Callable

from maxrects.core.models import Rect


def generate_pieces(
    count: int = 300,
    min_side: int = 8,
    max_side: int = 128,
    seed: int | None = None,
) -> list[Rect]:
    """
    Generate random sprite-like pieces for experimentation.

    Args:
        count: Number of pieces to generate
        min_side: Smallest side length (inclusive)
        max_side: Largest side length (inclusive)
        seed: Random seed for reproducibility (default: None)

    Returns:
        List of request rects with integer sides; ``payload`` is the piece id
    """
    if min_side <= 0 or max_side < min_side:
        raise ValueError(f"Invalid side range [{min_side}, {max_side}]")

    rng = random.Random(seed)
    return [
        Rect(
            width=rng.randint(min_side, max_side),
            height=rng.randint(min_side, max_side),
            payload=i,
        )
        for i in range(count)
    ]


def random_order(pieces: list[Rect]) -> list[Rect]:
    """Shuffled copy of the pieces."""
    shuffled = pieces.copy()
    random.shuffle(shuffled)
    return shuffled


def area_sorted_order(pieces: list[Rect]) -> list[Rect]:
    """Sort pieces by area (largest first)."""
    return sorted(pieces, key=lambda r: r.area, reverse=True)


def long_side_sorted_order(pieces: list[Rect]) -> list[Rect]:
    """Sort pieces by longest side, then shortest side (largest first)."""
    return sorted(
        pieces,
        key=lambda r: (max(r.width, r.height), min(r.width, r.height)),
        reverse=True,
    )


def perimeter_sorted_order(pieces: list[Rect]) -> list[Rect]:
    """Sort pieces by perimeter (largest first)."""
    return sorted(pieces, key=lambda r: r.width + r.height, reverse=True)


# Map of ordering strategy names to functions
ORDERING_STRATEGIES: dict[str, Callable[[list[Rect]], list[Rect]]] = {
    "random": random_order,
    "area_sorted": area_sorted_order,
    "long_side_sorted": long_side_sorted_order,
    "perimeter_sorted": perimeter_sorted_order,
}


def get_ordering_strategy(name: str) -> Callable[[list[Rect]], list[Rect]]:
    """
    Get an ordering strategy function by name.

    Raises:
        ValueError: If strategy name is not recognized
    """
    if name not in ORDERING_STRATEGIES:
        raise ValueError(
            f"Unknown ordering strategy: {name}. "
            f"Available: {list(ORDERING_STRATEGIES.keys())}"
        )
    return ORDERING_STRATEGIES[name]
