from __future__ import annotations

import os
from pathlib import Path


BASE_DIR = Path.cwd()
DEFAULT_CONTENT_DIR = BASE_DIR / "content"

CONTENT_DIR = Path(os.getenv("POSTMANIFEST_CONTENT_DIR", str(DEFAULT_CONTENT_DIR))).expanduser()

# Raw strings; the CLI parses and validates them like the matching options.
LOG_LEVEL = os.getenv("POSTMANIFEST_LOG_LEVEL", "WARNING")
WORKERS = os.getenv("POSTMANIFEST_WORKERS") or None
