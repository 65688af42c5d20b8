from __future__ import annotations

from enum import Enum
from typing import Any, List, Optional, Sequence


class ErrorKind(str, Enum):
    MISSING_FRONT_MATTER = "MissingFrontMatter"
    UNTERMINATED_FRONT_MATTER = "UnterminatedFrontMatter"
    MALFORMED_FRONT_MATTER = "MalformedFrontMatter"
    VALIDATION_ERROR = "ValidationError"
    INVALID_DATE = "InvalidDate"
    TYPE_MISMATCH = "TypeMismatch"
    DUPLICATE_SLUG = "DuplicateSlug"
    UNREADABLE_FILE = "UnreadableFile"


class IngestError(Exception):
    """A problem with a single source file.

    These are collected per run rather than raised to the caller one at a time.
    """

    kind: ErrorKind

    def __init__(self, path: str, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = path
        self.message = message


class MissingFrontMatter(IngestError):
    kind = ErrorKind.MISSING_FRONT_MATTER

    def __init__(self, path: str) -> None:
        super().__init__(path, "missing front-matter: the file must start with a '---' line")


class UnterminatedFrontMatter(IngestError):
    kind = ErrorKind.UNTERMINATED_FRONT_MATTER

    def __init__(self, path: str) -> None:
        super().__init__(path, "unterminated front-matter: no closing '---' line was found")


class MalformedFrontMatter(IngestError):
    kind = ErrorKind.MALFORMED_FRONT_MATTER

    def __init__(self, path: str, detail: str) -> None:
        super().__init__(path, f"malformed front-matter: {detail}")
        self.detail = detail


class ValidationError(IngestError):
    kind = ErrorKind.VALIDATION_ERROR

    def __init__(self, path: str, field: str, problem: str = "is required") -> None:
        super().__init__(path, f"field '{field}' {problem}")
        self.field = field


class InvalidDate(IngestError):
    kind = ErrorKind.INVALID_DATE

    def __init__(self, path: str, field: str, value: Any) -> None:
        super().__init__(path, f"field '{field}' is not a valid date: {value!r}")
        self.field = field
        self.value = value


class TypeMismatch(IngestError):
    kind = ErrorKind.TYPE_MISMATCH

    def __init__(self, path: str, field: str, expected: str, actual: str) -> None:
        super().__init__(path, f"field '{field}' must be {expected}, got {actual}")
        self.field = field
        self.expected = expected
        self.actual = actual


class DuplicateSlug(IngestError):
    kind = ErrorKind.DUPLICATE_SLUG

    def __init__(self, slug: str, path_a: str, path_b: str) -> None:
        super().__init__(path_b, f"duplicate slug '{slug}' (also produced by {path_a})")
        self.slug = slug
        self.path_a = path_a
        self.path_b = path_b


class UnreadableFile(IngestError):
    kind = ErrorKind.UNREADABLE_FILE

    def __init__(self, path: str, detail: str) -> None:
        super().__init__(path, f"cannot read file: {detail}")


class ContentDirectoryError(Exception):
    """The content directory is missing or is not a directory."""


class ManifestBuildError(Exception):
    """Raised when a run collected one or more errors; no manifest is produced."""

    def __init__(self, errors: Sequence[IngestError]) -> None:
        self.errors: List[IngestError] = list(errors)
        count = len(self.errors)
        super().__init__(f"{count} error{'s' if count != 1 else ''} while building manifest")

    def first(self, kind: ErrorKind) -> Optional[IngestError]:
        return next((error for error in self.errors if error.kind == kind), None)
