"""
Document Store - the authoritative set of documents, keyed by name.

The store is populated once by load_all() and is read-only afterwards.

Layout of a source:
    <root>/
        clean-architecture/
            SKILL.md                 -> skill document (front-matter required)
            references/layers.md     -> reference document
        skill-builder/
            SKILL.md
            references/structure.md
        README.md                    -> ignored (not below a skill directory)

Skill documents must declare `name` and `description` in their YAML
front-matter. Reference documents fall back to their relative path as name
and to their first heading as description.
"""

import posixpath
from collections.abc import Iterator
from pathlib import PurePosixPath

from .config.schema import StoreConfig
from .documents import Document, DocumentKind, DocumentMetadata, ReferenceLink
from .errors import DuplicateName, InvalidState, MalformedDocument, NotFound
from .frontmatter import FrontmatterError, first_heading, split_frontmatter
from .logging import HumanLog, get_logger
from .references import LinkExtractor, LinkWarning
from .sources import (
    DEFAULT_EXCLUDE_DIRS,
    MARKDOWN_SUFFIXES,
    DocumentSource,
    SourceFile,
    iter_source_files,
)

logger = get_logger(__name__)

RESERVED_FIELDS = ("name", "description")


class DocumentStore:
    """Immutable-after-load collection of documents."""

    DEFAULT_SKILL_FILE = "SKILL.md"

    def __init__(
        self,
        skill_file: str = DEFAULT_SKILL_FILE,
        exclude_dirs: list[str] | None = None,
    ) -> None:
        self.skill_file = skill_file
        self.exclude_dirs = DEFAULT_EXCLUDE_DIRS | set(exclude_dirs or [])
        self._documents: dict[str, Document] = {}
        self._by_path: dict[str, Document] = {}
        self._loaded = False
        self.problems: list[MalformedDocument] = []
        self.link_warnings: dict[str, list[LinkWarning]] = {}
        self.log = logger.bind(component="store")
        self.hlog = HumanLog(self.log)

    @classmethod
    def from_config(cls, config: StoreConfig) -> "DocumentStore":
        """Create an empty store from a StoreConfig."""
        return cls(skill_file=config.skill_file, exclude_dirs=config.exclude_dirs)

    # ── Loading ──────────────────────────────────────────────────────────

    def load_all(self, source: DocumentSource) -> list[MalformedDocument]:
        """Populate the store from a directory or a {path: text} mapping.

        Malformed documents are skipped and reported; the rest still load.

        Args:
            source: Directory path, or mapping of relative POSIX path -> text.

        Returns:
            The MalformedDocument errors of the skipped documents.

        Raises:
            DuplicateName: If two documents share a name. Nothing is loaded.
            InvalidState: If the store was already loaded.
            FileNotFoundError: If source is a path that is not a directory.
        """
        if self._loaded:
            raise InvalidState(
                "<store>", "loaded", "empty",
                message="DocumentStore is read-only once loaded; create a new store",
            )

        files = list(iter_source_files(source, self.exclude_dirs))
        skill_dirs = {f.parent for f in files if f.filename == self.skill_file}

        documents: dict[str, Document] = {}
        problems: list[MalformedDocument] = []
        link_warnings: dict[str, list[LinkWarning]] = {}

        for source_file in files:
            if source_file.filename == self.skill_file:
                kind: DocumentKind = "skill"
            elif _owning_dir(source_file.parent, skill_dirs) is not None:
                kind = "reference"
            else:
                self.log.debug("store.skip_unowned", path=source_file.path)
                continue

            try:
                document, warnings = self._parse(source_file, kind)
            except MalformedDocument as e:
                self.log.warning("store.malformed", path=e.path, reason=e.reason)
                problems.append(e)
                continue

            if warnings:
                link_warnings[document.path] = warnings

            existing = documents.get(document.name)
            if existing is not None:
                self.log.error(
                    "store.duplicate_name",
                    name=document.name,
                    paths=[existing.path, document.path],
                )
                raise DuplicateName(document.name, (existing.path, document.path))
            documents[document.name] = document

        self._documents = dict(sorted(documents.items()))
        self._by_path = {d.path: d for d in documents.values()}
        self.problems = problems
        self.link_warnings = link_warnings
        self._loaded = True

        self.hlog.store_loaded(
            skills=sum(1 for d in documents.values() if d.kind == "skill"),
            references=sum(1 for d in documents.values() if d.kind == "reference"),
            malformed=len(problems),
        )
        return list(problems)

    def _parse(
        self,
        source_file: SourceFile,
        kind: DocumentKind,
    ) -> tuple[Document, list[LinkWarning]]:
        if source_file.error is not None:
            raise MalformedDocument(source_file.path, f"unreadable: {source_file.error}")

        try:
            meta, body = split_frontmatter(source_file.text)
        except FrontmatterError as e:
            raise MalformedDocument(source_file.path, str(e)) from e

        if kind == "skill":
            name = _required_text(meta, "name", source_file.path)
            description = _required_text(meta, "description", source_file.path)
        else:
            name = _optional_text(meta, "name") or source_file.path
            description = _optional_text(meta, "description") or first_heading(body)
            if not description:
                raise MalformedDocument(
                    source_file.path,
                    "missing 'description' (no front-matter field and no heading)",
                )

        extractor = LinkExtractor(source=source_file.path)
        links = tuple(extractor.extract(body))

        document = Document(
            name=name,
            description=description,
            body=body,
            links=links,
            kind=kind,
            path=source_file.path,
            properties={k: v for k, v in meta.items() if k not in RESERVED_FIELDS},
        )
        return document, extractor.warnings

    # ── Lookup ───────────────────────────────────────────────────────────

    def get(self, name: str) -> Document:
        """Return the document called name.

        Raises:
            NotFound: If no document has that name.
        """
        try:
            return self._documents[name]
        except KeyError:
            raise NotFound(name, self.names()) from None

    def resolve_link(
        self,
        link: ReferenceLink,
        relative_to: Document | None = None,
    ) -> Document:
        """Return the document a reference link points to.

        Resolution order:
        1. Exact document name.
        2. Path relative to the linking document's directory.
        3. Path relative to the source root.
        4. Unique document whose file stem equals the target (wiki style).

        Raises:
            NotFound: If the target cannot be resolved.
        """
        target = link.target
        if target in self._documents:
            return self._documents[target]

        bases = []
        if relative_to is not None:
            bases.append(str(PurePosixPath(relative_to.path).parent))
        bases.append("")

        for base in bases:
            for candidate in _path_candidates(base, target):
                if candidate in self._by_path:
                    return self._by_path[candidate]

        stem_matches = [
            d for d in self._documents.values()
            if PurePosixPath(d.path).stem == target
        ]
        if len(stem_matches) == 1:
            return stem_matches[0]

        raise NotFound(target)

    def metadata(self, kind: DocumentKind | None = None) -> list[DocumentMetadata]:
        """Return the metadata of every document, sorted by name."""
        return [
            d.metadata for d in self._documents.values()
            if kind is None or d.kind == kind
        ]

    def names(self) -> list[str]:
        return list(self._documents)

    def documents(self) -> list[Document]:
        return list(self._documents.values())

    @property
    def loaded(self) -> bool:
        return self._loaded

    def __contains__(self, name: object) -> bool:
        return name in self._documents

    def __len__(self) -> int:
        return len(self._documents)

    def __iter__(self) -> Iterator[str]:
        return iter(self._documents)

    def __repr__(self) -> str:
        return f"<DocumentStore(documents={len(self._documents)}, loaded={self._loaded})>"


def _owning_dir(parent: str, skill_dirs: set[str]) -> str | None:
    """Return the nearest ancestor of parent (itself included) holding a skill file."""
    path = PurePosixPath(parent) if parent else None
    while path is not None:
        key = str(path)
        if key in skill_dirs:
            return key
        path = path.parent if str(path.parent) != "." else None
    return "" if "" in skill_dirs else None


def _path_candidates(base: str, target: str) -> list[str]:
    joined = posixpath.normpath(posixpath.join(base, target))
    if joined.startswith("..") or joined == ".":
        return []
    candidates = [joined]
    if not joined.lower().endswith(MARKDOWN_SUFFIXES):
        candidates.append(joined + ".md")
    return candidates


def _required_text(meta: dict, key: str, path: str) -> str:
    value = _optional_text(meta, key)
    if not value:
        raise MalformedDocument(path, f"missing required field '{key}'")
    return value


def _optional_text(meta: dict, key: str) -> str | None:
    value = meta.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        value = str(value)
    return value.strip() or None
