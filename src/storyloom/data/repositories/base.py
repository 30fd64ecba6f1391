"""Base repository implementation for JSON story documents."""
from __future__ import annotations

from pathlib import Path
from typing import Generic, TypeVar

from storyloom.data import paths
from storyloom.data.errors import DataValidationError
from storyloom.data.json_loader import load_json

T = TypeVar("T")


class RepositoryBase(Generic[T]):
    """Common caching and loading behavior for document repositories."""

    def __init__(self, filename: str, base_path: Path | str | None = None) -> None:
        self._filename = filename
        self._base_path = Path(base_path) if base_path is not None else None
        self._document: T | None = None

    def _get_file_path(self) -> Path:
        return paths.get_stories_path(self._base_path) / self._filename

    def _load_raw(self) -> dict[str, object]:
        file_path = self._get_file_path()
        raw = load_json(file_path)
        if not isinstance(raw, dict):
            raise DataValidationError(f"Expected top-level object in {file_path}")
        return raw

    def _build(self, raw: dict[str, object]) -> T:
        """Convert a raw dict into a typed document."""
        raise NotImplementedError

    def get(self) -> T:
        """Return the parsed document, loading it on first access."""
        if self._document is None:
            self._document = self._build(self._load_raw())
        return self._document

    def reload(self) -> T:
        """Drop the cached document and parse it again from disk."""
        self._document = None
        return self.get()

    @staticmethod
    def _require_mapping(value: object, context: str) -> dict[str, object]:
        if not isinstance(value, dict):
            raise DataValidationError(f"{context} must be an object/dict.")
        return value

    @staticmethod
    def _require_str(value: object, context: str) -> str:
        if not isinstance(value, str):
            raise DataValidationError(f"{context} must be a string.")
        return value

    @staticmethod
    def _require_list(value: object, context: str) -> list[object]:
        if not isinstance(value, list):
            raise DataValidationError(f"{context} must be a list.")
        return value
