"""
Reference Resolver - extracts reference links from a document body.

Two link syntaxes are recognised:
- Markdown inline links:  [text](references/layers.md#entities "title")
- Wiki links:             [[references/layers#entities|alias]]

Only links that point to another document are yielded. External URLs,
in-page anchors (#section) and non-Markdown assets (images, scripts) are
skipped silently. Broken syntax (unterminated or empty target) is skipped
with a recorded warning so a single bad link never blocks the rest of the
body. Links inside fenced code blocks and inline code spans are ignored.

Extraction is lazy: extract_links() returns a generator that parses the
body line by line as it is consumed.
"""

import re
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import PurePosixPath

from .documents import ReferenceLink
from .logging import get_logger
from .sources import MARKDOWN_SUFFIXES

logger = get_logger(__name__)

_OPENER_RE = re.compile(r"\[\[|\]\(")
_WIKI_RE = re.compile(r"\[\[(?P<inner>[^\[\]\n]*)\]\]")
_INLINE_RE = re.compile(
    r"\]\((?P<target><[^>\n]*>|(?:[^()\s]|\([^()\s]*\))*)(?:\s+(?:\"[^\"\n]*\"|'[^'\n]*'))?\s*\)"
)
_FENCE_RE = re.compile(r"^\s*(```|~~~)")
_CODE_SPAN_RE = re.compile(r"`+[^`\n]*`+")
_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*:")


@dataclass(frozen=True)
class LinkWarning:
    """A malformed link skipped during extraction."""

    line: int
    column: int
    reason: str
    snippet: str

    def __str__(self) -> str:
        return f"line {self.line}, col {self.column}: {self.reason} ({self.snippet})"


class LinkExtractor:
    """Stateful extractor that records the warnings of every body it parses.

    Usage:
        extractor = LinkExtractor()
        links = list(extractor.extract(body))
        for w in extractor.warnings:
            ...
    """

    def __init__(self, source: str = "") -> None:
        self.source = source
        self.warnings: list[LinkWarning] = []

    def extract(self, body: str) -> Iterator[ReferenceLink]:
        """Yield the reference links of body in source order, duplicates kept."""
        fence: str | None = None
        for lineno, line in enumerate(body.splitlines(), start=1):
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
            # Blank out inline code spans, keeping columns stable
            line = _CODE_SPAN_RE.sub(lambda m: " " * len(m.group()), line)
            yield from self._scan_line(line, lineno)

    def _scan_line(self, line: str, lineno: int) -> Iterator[ReferenceLink]:
        pos = 0
        while True:
            opener = _OPENER_RE.search(line, pos)
            if opener is None:
                return

            if opener.group() == "[[":
                match = _WIKI_RE.match(line, opener.start())
            else:
                match = _INLINE_RE.match(line, opener.start())

            if match is None:
                self._warn(lineno, opener.start(), "unterminated link", line[opener.start():])
                pos = opener.end()
                continue

            pos = match.end()
            if opener.group() == "[[":
                raw = match.group("inner").split("|", 1)[0]
                link = self._to_link(raw, lineno, opener.start(), match.group(), wiki=True)
            else:
                raw = match.group("target").strip("<>")
                link = self._to_link(raw, lineno, opener.start(), match.group(), wiki=False)

            if link is not None:
                yield link

    def _to_link(
        self,
        raw: str,
        lineno: int,
        column: int,
        snippet: str,
        wiki: bool,
    ) -> ReferenceLink | None:
        raw = raw.strip()
        if not raw:
            self._warn(lineno, column, "empty link target", snippet)
            return None

        link = ReferenceLink.parse(raw)
        if not link.target:
            # A bare '#anchor' points inside the same document
            return None

        if wiki:
            return link

        if _SCHEME_RE.match(link.target) or link.target.startswith("//"):
            return None

        suffix = PurePosixPath(link.target).suffix.lower()
        if suffix and suffix not in MARKDOWN_SUFFIXES:
            return None

        return link

    def _warn(self, lineno: int, column: int, reason: str, snippet: str) -> None:
        warning = LinkWarning(
            line=lineno,
            column=column + 1,
            reason=reason,
            snippet=snippet[:60],
        )
        self.warnings.append(warning)
        logger.warning(
            "references.malformed_link",
            source=self.source or None,
            line=warning.line,
            column=warning.column,
            reason=reason,
        )


def extract_links(
    body: str,
    warnings: list[LinkWarning] | None = None,
    source: str = "",
) -> Iterator[ReferenceLink]:
    """Lazily extract the reference links of body.

    Args:
        body: Markdown text to scan.
        warnings: Optional list that receives a LinkWarning per skipped link.
        source: Optional document path, used only for log context.

    Returns:
        A generator of ReferenceLink in order of appearance, duplicates kept.
    """
    extractor = LinkExtractor(source=source)
    if warnings is not None:
        extractor.warnings = warnings
    return extractor.extract(body)
