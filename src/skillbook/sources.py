"""
Document sources - turn a directory-like input into (relative path, text) pairs.

Two inputs are accepted:
- A directory on disk, walked recursively for Markdown files.
- A mapping of relative POSIX path -> text, used by host tools that already
  hold the files in memory (and by the tests).
"""

import os
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from .logging import get_logger

logger = get_logger(__name__)

MARKDOWN_SUFFIXES = (".md", ".markdown")

DEFAULT_EXCLUDE_DIRS = frozenset({
    ".git",
    "node_modules",
    "__pycache__",
    ".venv",
    "venv",
})

DocumentSource = str | os.PathLike | Mapping[str, str]


@dataclass(frozen=True)
class SourceFile:
    """Raw content of one Markdown file, before parsing."""

    path: str  # POSIX, relative to the source root
    text: str
    error: str | None = None  # set when the file could not be read

    @property
    def parent(self) -> str:
        parent = str(PurePosixPath(self.path).parent)
        return "" if parent == "." else parent

    @property
    def filename(self) -> str:
        return PurePosixPath(self.path).name


def iter_source_files(
    source: DocumentSource,
    exclude_dirs: frozenset[str] | set[str] = DEFAULT_EXCLUDE_DIRS,
) -> Iterator[SourceFile]:
    """Yield every Markdown file of source in a deterministic order.

    Files that cannot be read or decoded are still yielded, with an empty
    text and the failure in SourceFile.error.
    """
    if isinstance(source, Mapping):
        for path in sorted(source):
            if path.lower().endswith(MARKDOWN_SUFFIXES):
                yield SourceFile(path=_normalize(path), text=source[path])
        return

    root = Path(source)
    if not root.is_dir():
        raise FileNotFoundError(f"Document source is not a directory: {root}")

    for path in _walk(root, exclude_dirs):
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("source.read_error", path=str(path), error=str(e))
            yield SourceFile(
                path=path.relative_to(root).as_posix(), text="", error=str(e)
            )
            continue
        yield SourceFile(path=path.relative_to(root).as_posix(), text=text)


def _walk(root: Path, exclude_dirs: frozenset[str] | set[str]) -> Iterator[Path]:
    for dirpath, dirnames, filenames in os.walk(root):
        # Prune in place so os.walk does not descend into excluded dirs
        dirnames[:] = sorted(
            d for d in dirnames
            if d not in exclude_dirs and not d.startswith(".")
        )
        for filename in sorted(filenames):
            if filename.lower().endswith(MARKDOWN_SUFFIXES):
                yield Path(dirpath) / filename


def _normalize(path: str) -> str:
    return PurePosixPath(path.replace("\\", "/")).as_posix().lstrip("/")
