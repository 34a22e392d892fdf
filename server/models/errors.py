# server/models/errors.py
"""Engine error types."""


class BloomError(Exception):
    """Base class for engine errors surfaced to hosts."""


class InvalidModeError(BloomError, ValueError):
    """Raised when a spawn request names an unknown mode."""

    def __init__(self, tag):
        super().__init__(f"Unknown spawn mode: {tag!r}")
        self.tag = tag


class MalformedColorError(BloomError, ValueError):
    """Raised by the strict color parser; recovered to white by callers."""

    def __init__(self, value):
        super().__init__(f"Malformed hex color: {value!r}")
        self.value = value


class EngineDestroyedError(BloomError, RuntimeError):
    """Raised when an engine handle is used after destroy()."""
