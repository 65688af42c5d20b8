from __future__ import annotations

import logging
from typing import Any, Dict, List

import yaml
from frontmatter.default_handlers import YAMLHandler

from postmanifest.models.errors import (
    MalformedFrontMatter,
    MissingFrontMatter,
    UnterminatedFrontMatter,
)
from postmanifest.models.post import ParsedDocument


logger = logging.getLogger(__name__)

DELIMITER = "---"

_handler = YAMLHandler()


class _FrontMatterLoader(yaml.SafeLoader):
    """SafeLoader that keeps impossible timestamps such as ``2025-02-30`` as text.

    The validator then reports them as invalid dates against the right field.
    """

    def construct_lenient_timestamp(self, node: yaml.Node) -> Any:
        try:
            return self.construct_yaml_timestamp(node)
        except (ValueError, OverflowError):
            return self.construct_scalar(node)


_FrontMatterLoader.add_constructor(
    "tag:yaml.org,2002:timestamp", _FrontMatterLoader.construct_lenient_timestamp
)


def parse_front_matter(text: str, source_path: str) -> ParsedDocument:
    """Split a markdown file into its front-matter mapping and body.

    The opening ``---`` must be the very first line of the file. The body is
    everything after the closing ``---`` line, untouched.
    """
    lines = text.lstrip("\ufeff").splitlines(keepends=True)

    if not lines or not _is_delimiter(lines[0]):
        raise MissingFrontMatter(source_path)

    closing = _find_closing_delimiter(lines)
    if closing is None:
        raise UnterminatedFrontMatter(source_path)

    block = "".join(lines[1:closing])
    try:
        metadata = _handler.load(block, Loader=_FrontMatterLoader)
    except yaml.YAMLError as exc:
        raise MalformedFrontMatter(source_path, _describe_yaml_error(exc)) from exc
    except (ValueError, TypeError, OverflowError) as exc:
        # Raised by value constructors, e.g. a merge key pointing at a scalar.
        raise MalformedFrontMatter(source_path, str(exc)) from exc

    if metadata is None:
        metadata = {}
    if not isinstance(metadata, dict):
        raise MalformedFrontMatter(
            source_path, f"expected a mapping of fields, got {type(metadata).__name__}"
        )

    body = "".join(lines[closing + 1 :])
    metadata = _string_keys(metadata, source_path)
    logger.debug("Parsed front-matter of %s (%d fields)", source_path, len(metadata))
    return ParsedDocument(metadata=metadata, body=body, body_line=closing + 2)


def _string_keys(metadata: Dict[Any, Any], source_path: str) -> Dict[str, Any]:
    # Keys such as `2024: ...` load as ints; the validator only speaks strings.
    result: Dict[str, Any] = {}
    for key, value in metadata.items():
        name = str(key)
        if name in result:
            raise MalformedFrontMatter(
                source_path, f"field {name!r} is given more than once with different key types"
            )
        result[name] = value
    return result


def _is_delimiter(line: str) -> bool:
    return line.rstrip() == DELIMITER


def _find_closing_delimiter(lines: List[str]) -> int | None:
    for index in range(1, len(lines)):
        if _is_delimiter(lines[index]):
            return index
    return None


def _describe_yaml_error(exc: yaml.YAMLError) -> str:
    mark = getattr(exc, "problem_mark", None)
    problem = getattr(exc, "problem", None) or str(exc)
    if mark is not None:
        # The mark is relative to the block; the block starts on line 2.
        return f"{problem} (line {mark.line + 2})"
    return problem
