"""Exceptions raised by the packing engine and its tooling."""


class PackingError(Exception):
    """Base class for all errors raised by maxrects."""


class InvalidArgumentError(PackingError, ValueError):
    """A piece or container dimension is not strictly positive."""


class RectNotFoundError(PackingError, LookupError):
    """A rect passed to ``erase`` does not belong to the packer's used set."""


class ConfigError(PackingError):
    """A configuration file is missing or not a YAML mapping."""


class LayoutError(PackingError):
    """Base class for layout validation failures."""


class OutOfBoundsError(LayoutError):
    """A placed rect extends outside the container."""


class OverlapError(LayoutError):
    """Two placed rects share interior area."""
