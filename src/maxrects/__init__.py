"""
maxrects — MaxRects rectangle packing for sprite and texture atlases.

Public API:
    from maxrects import MaxRectsPacker, Heuristic, Rect
    from maxrects import BinPacker, PackerConfig, load_config
"""

from maxrects.algorithms.bin_packer import BinPacker, Container, PackResult
from maxrects.algorithms.heuristics import Candidate, find_position
from maxrects.algorithms.maxrects_packer import BatchResult, MaxRectsPacker
from maxrects.core.config import PackerConfig, load_config
from maxrects.core.errors import (
    InvalidArgumentError,
    LayoutError,
    PackingError,
    RectNotFoundError,
)
from maxrects.core.models import Heuristic, Rect

__version__ = "0.1.0"

__all__ = [
    "BatchResult",
    "BinPacker",
    "Candidate",
    "Container",
    "Heuristic",
    "InvalidArgumentError",
    "LayoutError",
    "MaxRectsPacker",
    "PackResult",
    "PackerConfig",
    "PackingError",
    "Rect",
    "RectNotFoundError",
    "find_position",
    "load_config",
]
