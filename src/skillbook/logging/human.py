"""
Human Log -- formatter and helper for disclosure traceability logs.

Produces readable output so the user sees, step by step, which documents
were disclosed and at which level.

Example:
    Loaded 2 skills, 5 references

    Query "layered architecture" -> 1 match: clean-architecture
      activate clean-architecture
      expand clean-architecture (4210 chars, 3 links)
        ref clean-architecture -> clean-architecture/references/layers.md
"""

import logging
import sys

from .levels import HUMAN


class HumanFormatter:
    """Formats structured disclosure events as readable text.

    Each event type has its own format. Unknown events return None and are
    not printed.
    """

    def format_event(self, event: str, **kw) -> str | None:
        """Format one event.

        Args:
            event: Event name (e.g. "disclosure.expand")
            **kw: Event parameters

        Returns:
            Formatted text, or None if the event has no human format
        """
        match event:

            # ── STORE ────────────────────────────────────────────────────
            case "store.loaded":
                skills = kw.get("skills", "?")
                references = kw.get("references", "?")
                malformed = kw.get("malformed", 0)
                text = f"Loaded {skills} skills, {references} references"
                if malformed:
                    text += f" ({malformed} malformed skipped)"
                return text

            # ── DISCLOSURE ───────────────────────────────────────────────
            case "disclosure.trigger":
                query = kw.get("query", "")
                matches = kw.get("matches") or []
                if not matches:
                    return f'\nQuery "{_short(query)}" -> no matches'
                label = "match" if len(matches) == 1 else "matches"
                return f'\nQuery "{_short(query)}" -> {len(matches)} {label}: {", ".join(matches)}'

            case "disclosure.activate":
                return f"  activate {kw.get('name', '?')}"

            case "disclosure.expand":
                name = kw.get("name", "?")
                chars = kw.get("chars", "?")
                links = kw.get("links", 0)
                return f"  expand {name} ({chars} chars, {links} links)"

            case "disclosure.reference":
                source = kw.get("source", "?")
                target = kw.get("target", "?")
                return f"    ref {source} -> {target}"

            case _:
                return None


class HumanLogHandler(logging.Handler):
    """Logging handler that only processes HUMAN records and formats them.

    Writes to stderr so stdout stays clean for command output.
    """

    def __init__(self, stream=None) -> None:
        super().__init__(level=HUMAN)
        self.stream = stream or sys.stderr
        self.formatter_inst = HumanFormatter()

    def emit(self, record: logging.LogRecord) -> None:
        try:
            if record.levelno != HUMAN:
                return

            # structlog passes the event dict as the record message
            event_dict = record.msg if isinstance(record.msg, dict) else {}
            event = event_dict.get("event") or getattr(record, "event", None) or record.getMessage()
            kw = {k: v for k, v in event_dict.items() if k != "event"}

            formatted = self.formatter_inst.format_event(str(event), **kw)
            if formatted is not None:
                self.stream.write(formatted + "\n")
                self.stream.flush()
        except Exception:
            self.handleError(record)


class HumanLog:
    """Typed helper to emit HUMAN-level events.

    Usage:
        hlog = HumanLog(get_logger(__name__))
        hlog.activate("clean-architecture")
    """

    def __init__(self, logger) -> None:
        self._log = logger

    def store_loaded(self, skills: int, references: int, malformed: int) -> None:
        self._log.log(
            HUMAN, "store.loaded",
            skills=skills, references=references, malformed=malformed,
        )

    def trigger(self, query: str, matches: list[str]) -> None:
        self._log.log(HUMAN, "disclosure.trigger", query=query, matches=matches)

    def activate(self, name: str) -> None:
        self._log.log(HUMAN, "disclosure.activate", name=name)

    def expand(self, name: str, chars: int, links: int) -> None:
        self._log.log(HUMAN, "disclosure.expand", name=name, chars=chars, links=links)

    def reference(self, source: str, target: str) -> None:
        self._log.log(HUMAN, "disclosure.reference", source=source, target=target)


def _short(text: str, limit: int = 60) -> str:
    return text[:limit] + "..." if len(text) > limit else text
