"""
Prompt rendering -- what an agent is shown at each disclosure level.

- read_properties(): the front-matter properties of a document as a dict.
- to_prompt(): the <available_skills> XML block (metadata level only).
- build_context(): metadata of activated documents plus bodies of the
  expanded ones, in the order an agent would receive them.
"""

from collections.abc import Iterable
from html import escape
from pathlib import Path
from typing import Any

from .disclosure import DisclosureSession, LoadLevel
from .documents import Document, thaw


def read_properties(document: Document) -> dict[str, Any]:
    """Return name, description and the remaining front-matter properties.

    The result is a fresh, mutable copy; the stored document is unaffected.
    """
    return {
        "name": document.name,
        "description": document.description,
        **thaw(document.properties),
    }


def to_prompt(documents: Iterable[Document], root: Path | None = None) -> str:
    """Render the <available_skills> block for the skill documents given.

    Args:
        documents: Documents to list; reference documents are skipped.
        root: If given, locations are absolute paths under root.

    Returns:
        XML text; an empty <available_skills/> element when there are none.
    """
    lines = ["<available_skills>"]
    count = 0
    for document in documents:
        if document.kind != "skill":
            continue
        location = str(root / document.path) if root is not None else document.path
        lines.extend([
            "<skill>",
            f"<name>{escape(document.name)}</name>",
            f"<description>{escape(document.description)}</description>",
            f"<location>{escape(location)}</location>",
            "</skill>",
        ])
        count += 1
    if count == 0:
        return "<available_skills/>"
    lines.append("</available_skills>")
    return "\n".join(lines)


def build_context(session: DisclosureSession) -> str:
    """Build the text an agent sees for the current session state.

    Returns:
        Context block, or "" when nothing has been activated.
    """
    parts: list[str] = []
    levels = session.levels()

    activated = [n for n, level in levels.items() if level >= LoadLevel.METADATA_LOADED]
    if activated:
        listing = "\n".join(
            f"- {name}: {session.store.get(name).description}" for name in activated
        )
        parts.append(f"# Available Skills\n\n{listing}")

    for name in activated:
        if levels[name] == LoadLevel.BODY_LOADED:
            parts.append(f"# Skill: {name}\n\n{session.store.get(name).body.strip()}")

    return "\n\n---\n\n".join(parts) if parts else ""
