"""Service-layer exceptions."""


class SaveLoadError(Exception):
    """Raised when a save payload is rejected."""


class EngineNotInitializedError(RuntimeError):
    """Raised when stepping or choosing before a story has been loaded."""
