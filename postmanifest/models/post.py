from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Tuple


@dataclass(frozen=True, slots=True)
class PostRecord:
    source_path: str
    slug: str
    title: str
    date: datetime
    body: str
    body_line: int
    draft: bool = False
    tags: Tuple[str, ...] = ()
    summary: str = ""
    extra: Mapping[str, Any] = field(default_factory=dict)

    @property
    def sort_date(self) -> datetime:
        """Timezone-aware date used for ordering; naive dates are read as UTC."""
        if self.date.tzinfo is None:
            return self.date.replace(tzinfo=timezone.utc)
        return self.date


@dataclass(frozen=True, slots=True)
class ParsedDocument:
    metadata: Dict[str, Any]
    body: str
    body_line: int
