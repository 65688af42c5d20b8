from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, List, Optional, Tuple

from postmanifest.models.errors import (
    IngestError,
    InvalidDate,
    TypeMismatch,
    ValidationError,
)
from postmanifest.models.post import PostRecord
from postmanifest.services.summary import extract_summary


KNOWN_FIELDS = frozenset({"title", "date", "draft", "tags"})


class PostValidationFailed(Exception):
    """Carries every problem found in one file's front-matter."""

    def __init__(self, errors: List[IngestError]) -> None:
        super().__init__("; ".join(str(error) for error in errors))
        self.errors = errors


def validate_post(
    metadata: Dict[str, Any],
    *,
    source_path: str,
    slug: str,
    body: str,
    body_line: int,
) -> PostRecord:
    errors: List[IngestError] = []

    title = _check_title(metadata, source_path, errors)
    timestamp = _check_date(metadata, source_path, errors)
    draft = _check_draft(metadata, source_path, errors)
    tags = _check_tags(metadata, source_path, errors)

    if errors:
        raise PostValidationFailed(errors)

    extra = {key: value for key, value in metadata.items() if key not in KNOWN_FIELDS}
    return PostRecord(
        source_path=source_path,
        slug=slug,
        title=title,
        date=timestamp,
        body=body,
        body_line=body_line,
        draft=draft,
        tags=tags,
        summary=extract_summary(metadata, body),
        extra=extra,
    )


def parse_date(value: Any) -> Optional[datetime]:
    """Accept YAML timestamps and dates, or ISO 8601 strings."""
    if isinstance(value, datetime):
        return value

    if isinstance(value, date):
        return datetime.combine(value, datetime.min.time())

    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text.endswith(("Z", "z")):
            text = f"{text[:-1]}+00:00"
        try:
            return datetime.fromisoformat(text)
        except ValueError:
            return None

    return None


def _type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "list"
    if isinstance(value, dict):
        return "mapping"
    return type(value).__name__


def _check_title(metadata: Dict[str, Any], path: str, errors: List[IngestError]) -> str:
    raw = metadata.get("title")
    if raw is None:
        errors.append(ValidationError(path, "title"))
        return ""
    if not isinstance(raw, str):
        errors.append(TypeMismatch(path, "title", "a string", _type_name(raw)))
        return ""
    title = raw.strip()
    if not title:
        errors.append(ValidationError(path, "title", "must not be empty"))
    return title


def _check_date(
    metadata: Dict[str, Any], path: str, errors: List[IngestError]
) -> datetime:
    raw = metadata.get("date")
    if raw is None:
        errors.append(ValidationError(path, "date"))
        return datetime.min
    timestamp = parse_date(raw)
    if timestamp is None:
        errors.append(InvalidDate(path, "date", raw))
        return datetime.min
    return timestamp


def _check_draft(metadata: Dict[str, Any], path: str, errors: List[IngestError]) -> bool:
    if "draft" not in metadata:
        return False
    raw = metadata["draft"]
    if not isinstance(raw, bool):
        errors.append(TypeMismatch(path, "draft", "a boolean", _type_name(raw)))
        return False
    return raw


def _check_tags(
    metadata: Dict[str, Any], path: str, errors: List[IngestError]
) -> Tuple[str, ...]:
    raw = metadata.get("tags")
    if raw is None:
        return ()
    if not isinstance(raw, list):
        errors.append(TypeMismatch(path, "tags", "a list of strings", _type_name(raw)))
        return ()

    tags: List[str] = []
    for index, item in enumerate(raw):
        if not isinstance(item, str):
            errors.append(TypeMismatch(path, f"tags[{index}]", "a string", _type_name(item)))
            continue
        tags.append(item)
    return tuple(tags)
