"""Data layer utilities for loading story graphs and game config."""

from .errors import DataError, DataLoadError, DataValidationError
from .paths import get_config_path, get_repo_root, get_stories_path

__all__ = [
    "DataError",
    "DataLoadError",
    "DataValidationError",
    "get_config_path",
    "get_repo_root",
    "get_stories_path",
]
