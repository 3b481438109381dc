"""
HUMAN logging level -- readable disclosure traceability.

Custom level between INFO (20) and WARNING (30). It does not indicate
severity; it marks the high-level trace of what gets disclosed (skills
loaded, queries matched, documents activated and expanded) so the user can
follow it without technical noise.

Hierarchy:
    debug  (10) -> skipped files, link resolution details
    info   (20) -> system operations (config loaded, store built)
    human  (25) -> * what gets disclosed: trigger, activate, expand, reference
    warn   (30) -> non-fatal problems (malformed documents, broken links)
    error  (40) -> errors
"""

import logging

import structlog

# Custom level: between INFO (20) and WARNING (30)
HUMAN = 25
logging.addLevelName(HUMAN, "HUMAN")


# Inject the .human() method into Python's Logger class so structlog's stdlib
# BoundLogger can proxy to it
def _human_method(self, message, *args, **kwargs):
    if self.isEnabledFor(HUMAN):
        self._log(HUMAN, message, args, **kwargs)


logging.Logger.human = _human_method

# Register the level in structlog to avoid KeyError: 25
# (older structlog releases only expose the private names)
_level_to_name = getattr(structlog.stdlib, "LEVEL_TO_NAME", None) or structlog.stdlib._LEVEL_TO_NAME
_name_to_level = getattr(structlog.stdlib, "NAME_TO_LEVEL", None) or structlog.stdlib._NAME_TO_LEVEL
_level_to_name[HUMAN] = "human"
_name_to_level["human"] = HUMAN
