"""
Trigger Matcher -- decides which documents a free-text query should trigger.

Matching only ever sees DocumentMetadata (name + description). Bodies are
never consulted, so the cost of ranking depends on metadata size only.

Policy:
- Query and description are lower-cased and split into runs of letters
  and digits (any script).
- Stop words are dropped from the query.
- A query token hits a description when it equals one of its tokens, or
  (for tokens of min_substring_length chars or more) is a substring of one.
- overlap = number of distinct query tokens with a hit.
- Candidates with overlap >= min_token_overlap are ranked by overlap
  (desc), then description length (shorter = more specific), then name.
"""

import re
from collections.abc import Iterable
from dataclasses import dataclass

from .config.schema import MatcherConfig
from .documents import DocumentMetadata
from .logging import get_logger

logger = get_logger(__name__)

_TOKEN_RE = re.compile(r"[^\W_]+")


def tokenize(text: str) -> list[str]:
    """Split text into lower-cased word tokens, in order."""
    return _TOKEN_RE.findall(text.lower())


@dataclass(frozen=True)
class MatchCandidate:
    """A ranked match with the numbers that decided its position."""

    name: str
    overlap: int
    description_length: int
    matched_tokens: tuple[str, ...] = ()

    @property
    def sort_key(self) -> tuple[int, int, str]:
        return (-self.overlap, self.description_length, self.name)


class TriggerMatcher:
    """Ranks documents against a query using their metadata only."""

    def __init__(self, config: MatcherConfig | None = None) -> None:
        self.config = config or MatcherConfig()
        self._stop_words = frozenset(self.config.stop_words)

    def query_tokens(self, query: str) -> list[str]:
        """Distinct, non stop-word tokens of query, in first-seen order."""
        seen: dict[str, None] = {}
        for token in tokenize(query):
            if token not in self._stop_words:
                seen.setdefault(token, None)
        return list(seen)

    def rank(
        self,
        query: str,
        metadata: Iterable[DocumentMetadata],
    ) -> list[MatchCandidate]:
        """Return the candidates clearing the overlap threshold, best first."""
        tokens = self.query_tokens(query)
        if not tokens:
            return []

        candidates: list[MatchCandidate] = []
        for meta in metadata:
            if meta.kind != "skill" and not self.config.include_references:
                continue
            matched = self._matched_tokens(tokens, meta.description)
            if len(matched) < self.config.min_token_overlap:
                continue
            candidates.append(
                MatchCandidate(
                    name=meta.name,
                    overlap=len(matched),
                    description_length=len(meta.description),
                    matched_tokens=tuple(matched),
                )
            )

        candidates.sort(key=lambda c: c.sort_key)
        if self.config.limit is not None:
            candidates = candidates[: self.config.limit]

        logger.debug(
            "matcher.ranked",
            query_tokens=tokens,
            candidates=[(c.name, c.overlap) for c in candidates],
        )
        return candidates

    def match(self, query: str, metadata: Iterable[DocumentMetadata]) -> list[str]:
        """Return the names of the candidates for query, best first.

        An empty list (not an error) means nothing cleared the threshold.
        """
        return [c.name for c in self.rank(query, metadata)]

    def _matched_tokens(self, query_tokens: list[str], description: str) -> list[str]:
        description_tokens = set(tokenize(description))
        matched = []
        for token in query_tokens:
            if token in description_tokens:
                matched.append(token)
            elif len(token) >= self.config.min_substring_length and any(
                token in d for d in description_tokens
            ):
                matched.append(token)
        return matched
