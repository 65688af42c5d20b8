from __future__ import annotations

import json
import logging
import math
import os
import tempfile
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from postmanifest.models.errors import (
    ContentDirectoryError,
    IngestError,
    ManifestBuildError,
    UnreadableFile,
    ValidationError,
)
from postmanifest.models.post import PostRecord
from postmanifest.services.front_matter import parse_front_matter
from postmanifest.services.slugs import find_duplicate_slugs, slugify_filename
from postmanifest.services.validator import PostValidationFailed, validate_post


logger = logging.getLogger(__name__)

FileResult = Union[PostRecord, List[IngestError]]


@dataclass(frozen=True, slots=True)
class Manifest:
    posts: Tuple[PostRecord, ...]
    tags: Dict[str, List[str]] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "count": len(self.posts),
            "posts": [_post_entry(post) for post in self.posts],
            "tags": {tag: list(slugs) for tag, slugs in self.tags.items()},
        }

    def to_json(self) -> str:
        return json.dumps(
            self.to_dict(), indent=2, sort_keys=True, ensure_ascii=False, allow_nan=False
        ) + "\n"


def discover_posts(content_dir: Path) -> List[Path]:
    if not content_dir.exists():
        raise ContentDirectoryError(f"Content directory does not exist: {content_dir}")
    if not content_dir.is_dir():
        raise ContentDirectoryError(f"Content path is not a directory: {content_dir}")
    return sorted(path for path in content_dir.rglob("*.md") if path.is_file())


def load_post(path: Path, content_dir: Path) -> PostRecord:
    """Run one file through parse, slug and validation; raises on the first stage that fails."""
    source_path = path.relative_to(content_dir).as_posix()
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise UnreadableFile(source_path, str(exc)) from exc

    parsed = parse_front_matter(text, source_path)

    slug = slugify_filename(path.name)
    slug_errors: List[IngestError] = []
    if not slug:
        slug_errors.append(
            ValidationError(source_path, "slug", "cannot be derived from the file name")
        )

    try:
        record = validate_post(
            parsed.metadata,
            source_path=source_path,
            slug=slug,
            body=parsed.body,
            body_line=parsed.body_line,
        )
    except PostValidationFailed as exc:
        raise PostValidationFailed(slug_errors + exc.errors) from None

    if slug_errors:
        raise PostValidationFailed(slug_errors)
    return record


def build_manifest(content_dir: Path, *, workers: Optional[int] = None) -> Manifest:
    """Ingest every post under ``content_dir``.

    All-or-nothing: any error in any file raises ``ManifestBuildError`` with
    every problem found during the run, and no manifest is returned.
    """
    content_dir = Path(content_dir)
    logger.debug("Discovering posts in %s", content_dir)
    paths = discover_posts(content_dir)

    logger.debug("Parsing and validating %d files", len(paths))
    if workers == 1:
        results = [_load_collecting(path, content_dir) for path in paths]
    else:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            results = list(executor.map(lambda path: _load_collecting(path, content_dir), paths))

    records: List[PostRecord] = []
    errors: List[IngestError] = []
    for result in results:
        if isinstance(result, PostRecord):
            records.append(result)
        else:
            errors.extend(result)

    logger.debug("Normalizing slugs for %d records", len(records))
    errors.extend(find_duplicate_slugs(records))

    if errors:
        for error in errors:
            logger.warning("%s", error)
        logger.info("Manifest build failed with %d error(s)", len(errors))
        raise ManifestBuildError(errors)

    logger.debug("Aggregating %d records", len(records))
    manifest = aggregate(records)
    logger.info(
        "Built manifest with %d posts (%d drafts)",
        len(manifest.posts),
        sum(1 for post in manifest.posts if post.draft),
    )
    return manifest


def aggregate(records: Sequence[PostRecord]) -> Manifest:
    ordered = sorted(records, key=lambda post: post.slug)
    ordered.sort(key=lambda post: post.sort_date, reverse=True)

    tags: Dict[str, List[str]] = {}
    for post in ordered:
        for tag in dict.fromkeys(post.tags):
            tags.setdefault(tag, []).append(post.slug)
    return Manifest(posts=tuple(ordered), tags=tags)


def write_manifest(manifest: Manifest, destination: Path) -> None:
    """Write the manifest so readers never observe a half-written file."""
    destination = Path(destination)
    destination.parent.mkdir(parents=True, exist_ok=True)
    handle, temp_name = tempfile.mkstemp(
        prefix=f".{destination.name}.", suffix=".tmp", dir=destination.parent
    )
    try:
        with os.fdopen(handle, "w", encoding="utf-8", newline="\n") as fp:
            fp.write(manifest.to_json())
        os.replace(temp_name, destination)
    except BaseException:
        Path(temp_name).unlink(missing_ok=True)
        raise


def _load_collecting(path: Path, content_dir: Path) -> FileResult:
    try:
        return load_post(path, content_dir)
    except PostValidationFailed as exc:
        return list(exc.errors)
    except IngestError as exc:
        return [exc]


def _post_entry(post: PostRecord) -> Dict[str, Any]:
    return {
        "slug": post.slug,
        "title": post.title,
        "date": post.date.isoformat(),
        "draft": post.draft,
        "tags": list(post.tags),
        "summary": post.summary,
        "source_path": post.source_path,
        "body": {"path": post.source_path, "line": post.body_line},
        "extra": _jsonable(dict(post.extra)),
    }


def _jsonable(value: Any) -> Any:
    if isinstance(value, float) and not math.isfinite(value):
        # YAML .nan and .inf have no JSON form.
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(key): _jsonable(item) for key, item in value.items()}
    if isinstance(value, (set, frozenset)):
        return sorted((_jsonable(item) for item in value), key=str)
    if isinstance(value, (list, tuple)):
        return [_jsonable(item) for item in value]
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return value
