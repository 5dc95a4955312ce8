class PixelInfoError(Exception):
    """Base class for everything the core raises on purpose."""


class InvalidParameterError(PixelInfoError, ValueError):
    """A parameter was rejected before any pixel work started."""


class EmptyInputError(PixelInfoError, ValueError):
    """A fitting operation received no points to fit."""
