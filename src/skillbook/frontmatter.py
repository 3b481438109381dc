"""
YAML front-matter parsing for Markdown documents.
"""

import re
from typing import Any

import yaml

_FRONTMATTER_RE = re.compile(r"^---\s*\n(.*?)\n---\s*(?:\n(.*))?$", re.DOTALL)
_HEADING_RE = re.compile(r"^#{1,6}[ \t]+(.+?)[ \t]*#*[ \t]*$")
_FENCE_RE = re.compile(r"^\s*(```|~~~)")


class FrontmatterError(ValueError):
    """Error raised when the front-matter block is not a YAML mapping."""

    pass


def split_frontmatter(content: str) -> tuple[dict[str, Any], str]:
    """Split a Markdown document into (front-matter, body).

    Documents without a front-matter block return an empty dict and the
    whole content as body.

    Raises:
        FrontmatterError: If the block is not valid YAML or not a mapping.
    """
    content = content.lstrip("\ufeff")
    match = _FRONTMATTER_RE.match(content)
    if not match:
        return {}, content

    try:
        meta = yaml.safe_load(match.group(1)) or {}
    except yaml.YAMLError as e:
        raise FrontmatterError(f"invalid YAML front-matter: {e}") from e

    if not isinstance(meta, dict):
        raise FrontmatterError(
            f"front-matter must be a mapping, got {type(meta).__name__}"
        )
    return meta, match.group(2) or ""


def first_heading(body: str) -> str | None:
    """Return the text of the first Markdown heading in body, if any.

    Lines inside fenced code blocks are not headings.
    """
    fence: str | None = None
    for line in body.splitlines():
        fence_match = _FENCE_RE.match(line)
        if fence_match:
            marker = fence_match.group(1)
            if fence is None:
                fence = marker
            elif marker == fence:
                fence = None
            continue
        if fence is not None:
            continue
        match = _HEADING_RE.match(line)
        if match:
            return match.group(1)
    return None
