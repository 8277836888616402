"""Exceptions raised while building or reading scene archives."""

from __future__ import annotations


class ArchiveError(RuntimeError):
    """Base class for every failure surfaced by the archive codec."""


class ArchiveIOError(ArchiveError):
    """Raised when the underlying container cannot be read or written."""


class ArchiveFormatError(ArchiveError):
    """Raised when the container, its JSON entries or a PNG payload are malformed."""


class FontProcessingError(ArchiveError):
    """Raised when a font cannot be parsed, subsetted, compressed or decompressed."""


class InvalidFormatError(ArchiveError):
    """Raised for unsupported pixel formats or image buffers that cannot be built."""


class ResourceNotFoundError(ArchiveError):
    """Raised when a command references a resource that is not available."""

    def __init__(self, resource_id: int, kind: str = "resource") -> None:
        super().__init__(f"Resource not found: {kind} {resource_id}")
        self.resource_id = resource_id
        self.kind = kind


class UnsupportedVersionError(ArchiveError):
    """Raised when the archive manifest declares an unknown format version."""

    def __init__(self, version: object) -> None:
        super().__init__(f"Unsupported version: {version}")
        self.version = version


class HashMismatchError(ArchiveError):
    """Raised when stored resource bytes do not match their manifest digest."""

    def __init__(self, path: str, expected: str, actual: str) -> None:
        super().__init__(
            f"Hash mismatch for {path}: expected {expected}, got {actual}"
        )
        self.path = path
        self.expected = expected
        self.actual = actual


__all__ = [
    "ArchiveError",
    "ArchiveFormatError",
    "ArchiveIOError",
    "FontProcessingError",
    "HashMismatchError",
    "InvalidFormatError",
    "ResourceNotFoundError",
    "UnsupportedVersionError",
]
