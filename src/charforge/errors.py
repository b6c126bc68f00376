"""CharForge error hierarchy.

All custom exceptions inherit from CharForgeError, enabling callers
to catch the base class for blanket error handling or specific
subclasses for targeted recovery.
"""


class CharForgeError(Exception):
    """Base exception for all CharForge errors."""


class OutOfBoundsError(CharForgeError):
    """Raised when a pixel coordinate falls outside a canvas."""


class InvalidEnumError(CharForgeError):
    """Raised for unrecognized build, height, direction, style, slot, or layout values."""


class MalformedColorError(CharForgeError):
    """Raised when a hex color string has the wrong length or non-hex characters."""


class BufferSizeMismatchError(CharForgeError):
    """Raised when ``width * height * 4`` disagrees with an RGBA buffer's length."""


class MalformedMetadataError(CharForgeError):
    """Raised when sprite, character, or palette metadata is missing or invalid."""


class TemplateInvalidError(CharForgeError):
    """Raised when a body template has bad dimensions, anchors, or slots."""


class LayerError(CharForgeError):
    """Raised when a layer-stack edit would break the stack's invariants."""


class ConfigError(CharForgeError):
    """Raised when recipe configuration loading or validation fails."""
