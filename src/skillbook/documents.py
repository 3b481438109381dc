"""
Document model - immutable records held by the DocumentStore.

A Document is split in two projections:
- DocumentMetadata: name + description, always cheap, used for matching.
- Document: metadata plus body and the reference links parsed from it.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Literal

DocumentKind = Literal["skill", "reference"]


@dataclass(frozen=True)
class ReferenceLink:
    """Pointer from a document body to another document.

    Attributes:
        target: Document name or path relative to the linking document.
        fragment: Optional anchor inside the target (without the '#').
    """

    target: str
    fragment: str | None = None

    @classmethod
    def parse(cls, raw: str) -> "ReferenceLink":
        """Build a link from 'target#fragment' text."""
        target, _, fragment = raw.strip().partition("#")
        return cls(target=target.strip(), fragment=fragment.strip() or None)

    def __str__(self) -> str:
        if self.fragment:
            return f"{self.target}#{self.fragment}"
        return self.target


@dataclass(frozen=True)
class DocumentMetadata:
    """Metadata projection of a document. Carries no body."""

    name: str
    description: str
    kind: DocumentKind = "skill"
    path: str = ""


@dataclass(frozen=True)
class Document:
    """A loaded document. Immutable after store construction."""

    name: str
    description: str
    body: str
    links: tuple[ReferenceLink, ...] = ()
    kind: DocumentKind = "skill"
    path: str = ""
    properties: Mapping[str, Any] = field(
        default_factory=lambda: MappingProxyType({}), compare=False, hash=False
    )

    def __post_init__(self) -> None:
        object.__setattr__(self, "properties", freeze(self.properties))

    @property
    def metadata(self) -> DocumentMetadata:
        return DocumentMetadata(
            name=self.name,
            description=self.description,
            kind=self.kind,
            path=self.path,
        )

    def __repr__(self) -> str:
        return (
            f"<Document(name='{self.name}', kind={self.kind}, "
            f"links={len(self.links)}, body_chars={len(self.body)})>"
        )


def freeze(value: Any) -> Any:
    """Return a read-only copy of a YAML value (mappings and lists, recursively)."""
    if isinstance(value, Mapping):
        return MappingProxyType({k: freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze(v) for v in value)
    if isinstance(value, (set, frozenset)):
        return frozenset(freeze(v) for v in value)
    return value


def thaw(value: Any) -> Any:
    """Return a plain, mutable copy of a value built by freeze()."""
    if isinstance(value, Mapping):
        return {k: thaw(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [thaw(v) for v in value]
    if isinstance(value, (set, frozenset)):
        return {thaw(v) for v in value}
    return value
