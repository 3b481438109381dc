"""
Disclosure Loader -- three-level progressive loading of documents.

Per session, every document moves forward through:

    UNLOADED -> METADATA_LOADED -> BODY_LOADED

- activate(name):  metadata is disclosed (idempotent)
- expand(name):    body is disclosed; requires activate() first
- resolve_reference(name, link): returns the target of a link found in an
  expanded document, without touching the target's level

Levels never regress and there is no deactivation. Each session owns its
own level map; the DocumentStore underneath is shared read-only.
"""

from enum import IntEnum

from .documents import Document, DocumentMetadata, ReferenceLink
from .errors import InvalidState, NotFound
from .logging import HumanLog, get_logger
from .matcher import TriggerMatcher
from .store import DocumentStore

logger = get_logger(__name__)


class LoadLevel(IntEnum):
    """How much of a document has been disclosed in a session."""

    UNLOADED = 0
    METADATA_LOADED = 1
    BODY_LOADED = 2


class DisclosureSession:
    """Tracks the LoadLevel of every document for one consumer."""

    def __init__(self, store: DocumentStore) -> None:
        self.store = store
        self._levels: dict[str, LoadLevel] = {name: LoadLevel.UNLOADED for name in store}
        self.log = logger.bind(component="disclosure")
        self.hlog = HumanLog(self.log)

    def level(self, name: str) -> LoadLevel:
        """Current LoadLevel of name.

        Raises:
            NotFound: If the document does not exist.
        """
        if name not in self._levels:
            raise NotFound(name, self.store.names())
        return self._levels[name]

    def levels(self) -> dict[str, LoadLevel]:
        """Snapshot of every document's LoadLevel."""
        return dict(self._levels)

    def activate(self, name: str) -> DocumentMetadata:
        """Disclose the metadata of name.

        Idempotent: a document already at METADATA_LOADED or beyond keeps
        its level.

        Raises:
            NotFound: If the document does not exist.
        """
        current = self.level(name)
        if current < LoadLevel.METADATA_LOADED:
            self._levels[name] = LoadLevel.METADATA_LOADED
            self.hlog.activate(name)
        return self.store.get(name).metadata

    def expand(self, name: str) -> str:
        """Disclose and return the body of name.

        Raises:
            NotFound: If the document does not exist.
            InvalidState: If name was never activated.
        """
        current = self.level(name)
        if current < LoadLevel.METADATA_LOADED:
            raise InvalidState(name, current, LoadLevel.METADATA_LOADED)

        document = self.store.get(name)
        if current < LoadLevel.BODY_LOADED:
            self._levels[name] = LoadLevel.BODY_LOADED
            self.hlog.expand(name, chars=len(document.body), links=len(document.links))
        return document.body

    def resolve_reference(self, name: str, link: ReferenceLink | str) -> Document:
        """Return the document a link of name points to.

        The target's LoadLevel is left unchanged; the caller decides whether
        to activate or expand it.

        Raises:
            NotFound: If name or the link target does not exist.
            InvalidState: If name's body has not been expanded.
        """
        current = self.level(name)
        if current < LoadLevel.BODY_LOADED:
            raise InvalidState(name, current, LoadLevel.BODY_LOADED)

        if isinstance(link, str):
            link = ReferenceLink.parse(link)

        target = self.store.resolve_link(link, relative_to=self.store.get(name))
        self.hlog.reference(name, target.name)
        return target

    def trigger(self, query: str, matcher: TriggerMatcher) -> list[str]:
        """Match query against metadata and activate every candidate.

        Returns:
            Names of the activated candidates, best first.
        """
        names = matcher.match(query, self.store.metadata())
        self.hlog.trigger(query, names)
        for name in names:
            self.activate(name)
        return names

    def __repr__(self) -> str:
        counts = {level.name: 0 for level in LoadLevel}
        for level in self._levels.values():
            counts[level.name] += 1
        return f"<DisclosureSession({counts})>"
