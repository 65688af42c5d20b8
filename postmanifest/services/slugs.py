from __future__ import annotations

import re
from pathlib import PurePath
from typing import Dict, Iterable, List

from postmanifest.models.errors import DuplicateSlug
from postmanifest.models.post import PostRecord


_slug_pattern = re.compile(r"[^a-z0-9]+")


def slugify_filename(filename: str) -> str:
    """Derive a slug from a file name; returns "" when nothing usable is left."""
    stem = PurePath(filename).stem
    normalized = stem.strip().lower()
    normalized = _slug_pattern.sub("-", normalized)
    return normalized.strip("-")


def find_duplicate_slugs(records: Iterable[PostRecord]) -> List[DuplicateSlug]:
    claimed: Dict[str, str] = {}
    duplicates: List[DuplicateSlug] = []
    for record in records:
        owner = claimed.get(record.slug)
        if owner is None:
            claimed[record.slug] = record.source_path
            continue
        duplicates.append(DuplicateSlug(record.slug, owner, record.source_path))
    return duplicates
