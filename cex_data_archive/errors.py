from __future__ import annotations

from typing import Mapping


class InvalidKeyError(KeyError):
    """Raised when a key component is not one of its mapping's known names."""

    def __init__(self, mapping_name: str, mapping: Mapping[str, str], key: object) -> None:
        super().__init__(key)
        self.mapping_name = mapping_name
        self.mapping = mapping
        self.key = key

    def __str__(self) -> str:
        return f"Invalid key {self.key!r} for {self.mapping_name} (expected one of {sorted(self.mapping)})"


class PaginationError(RuntimeError):
    pass


class DownloadError(RuntimeError):
    pass


def validate_key(mapping_name: str, mapping: Mapping[str, str], key: object) -> str:
    try:
        return mapping[key]  # type: ignore[index]
    except (KeyError, TypeError):
        raise InvalidKeyError(mapping_name, mapping, key) from None
