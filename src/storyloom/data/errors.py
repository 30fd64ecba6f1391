"""Exceptions raised while reading story documents from disk."""


class DataError(Exception):
    """Base exception for story and config documents."""


class DataLoadError(DataError):
    """A story document is missing, unreadable or not JSON."""


class DataValidationError(DataError):
    """A story document parsed as JSON but has the wrong shape."""
