"""
skillbook - progressive disclosure of skill documents for AI agents.

Documents are disclosed in three levels: metadata (name + description),
then body, then referenced documents on demand.
"""

__version__ = "0.1.0"

from .disclosure import DisclosureSession, LoadLevel
from .documents import Document, DocumentMetadata, ReferenceLink
from .errors import (
    DuplicateName,
    InvalidState,
    MalformedDocument,
    NotFound,
    SkillbookError,
)
from .matcher import TriggerMatcher
from .references import LinkExtractor, LinkWarning, extract_links
from .store import DocumentStore

__all__ = [
    "__version__",
    "DisclosureSession",
    "Document",
    "DocumentMetadata",
    "DocumentStore",
    "DuplicateName",
    "InvalidState",
    "LinkExtractor",
    "LinkWarning",
    "LoadLevel",
    "MalformedDocument",
    "NotFound",
    "ReferenceLink",
    "SkillbookError",
    "TriggerMatcher",
    "extract_links",
]
