from pathlib import Path

import pytest


def _make_post(title="Example", date="2025-12-09", draft=None, tags=None, body="Body text.\n", extra=""):
    lines = ["---", f"title: {title}", f"date: {date}"]
    if draft is not None:
        lines.append(f"draft: {draft}")
    if tags is not None:
        lines.append(f"tags: {tags}")
    if extra:
        lines.append(extra)
    lines.append("---")
    return "\n".join(lines) + "\n" + body


@pytest.fixture
def make_post():
    """Build post text with the given front-matter values written verbatim."""
    return _make_post


@pytest.fixture
def content_dir(tmp_path: Path) -> Path:
    root = tmp_path / "content"
    root.mkdir()
    return root


@pytest.fixture
def write_post(content_dir: Path):
    def _write(relative: str, text: str) -> Path:
        path = content_dir / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    return _write
