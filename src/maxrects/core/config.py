"""
Packer configuration.

A config describes one kind of container and how pieces are placed in it.
It can be built in code or loaded from a YAML file:

    # atlas.yaml
    container_width: 2048
    container_height: 2048
    allow_rotate: true
    heuristic: contact_point
    bin_selection: first_fit

    config = load_config("atlas.yaml")
    packer = config.create_packer()
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from maxrects.core.errors import ConfigError
from maxrects.core.models import Heuristic


class PackerConfig(BaseModel):
    """
    Container size and placement options.

    Attributes:
        container_width: Container extent along x (> 0).
        container_height: Container extent along y (> 0).
        allow_rotate: Allow pieces to be rotated by 90 degrees.
        heuristic: Placement heuristic; ordinals and names are accepted and
            anything unknown falls back to BEST_SHORT_SIDE_FIT.
        bin_selection: How ``BinPacker`` chooses among open containers.
    """

    model_config = ConfigDict(frozen=True)

    container_width: float = Field(gt=0, description="Container width")
    container_height: float = Field(gt=0, description="Container height")
    allow_rotate: bool = False
    heuristic: Heuristic = Heuristic.BEST_SHORT_SIDE_FIT
    bin_selection: Literal["next_fit", "first_fit"] = "next_fit"

    @field_validator("heuristic", mode="before")
    @classmethod
    def _normalize_heuristic(cls, value: Any) -> Heuristic:
        return Heuristic.normalize(value)

    @property
    def area(self) -> float:
        return self.container_width * self.container_height

    def create_packer(self):
        """Build an empty MaxRectsPacker for this container."""
        from maxrects.algorithms.maxrects_packer import MaxRectsPacker

        return MaxRectsPacker(
            self.container_width, self.container_height, self.allow_rotate,
        )

    def to_dict(self) -> dict:
        d = self.model_dump()
        d["heuristic"] = self.heuristic.name.lower()
        return d


def load_config(path: Path | str) -> PackerConfig:
    """
    Load a PackerConfig from a YAML file.

    Args:
        path: YAML file holding a mapping of PackerConfig fields.

    Returns:
        Validated PackerConfig.

    Raises:
        ConfigError: File missing, unreadable or not a YAML mapping.
        pydantic.ValidationError: A field has an invalid value.
    """
    path = Path(path)
    try:
        with path.open("r") as f:
            data = yaml.safe_load(f)
    except OSError as exc:
        raise ConfigError(f"Cannot read config {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"Config {path} must contain a mapping, got {type(data).__name__}")
    return PackerConfig(**data)


def save_config(config: PackerConfig, path: Path | str) -> None:
    """Write a PackerConfig to a YAML file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w") as f:
        yaml.safe_dump(config.to_dict(), f, sort_keys=False)
