"""Exclude-list matcher: exact name lookup or anchored regular expressions."""

from __future__ import annotations

import re
from typing import Sequence

from ..exceptions import ConfigError

MATCH_MODES = ("exact", "pattern")


class ExcludeMatcher:
    """Recognizes names that are in the exclude list.

    In "exact" mode entries are literal names looked up in a set, so the dot in
    "a1.metal" matches only a dot. In "pattern" mode entries are regular
    expressions joined as ``(?:e1|e2|...)`` and matched with ``fullmatch``; a
    name must match one entry in full, never a substring or a prefix followed
    by a newline.
    """

    def __init__(self, entries: Sequence[str], mode: str = "exact"):
        if mode not in MATCH_MODES:
            raise ConfigError(f"Unknown match mode '{mode}'")
        for entry in entries:
            if not isinstance(entry, str) or not entry:
                raise ConfigError(f"Invalid exclude-list entry: {entry!r}")

        self.entries: tuple[str, ...] = tuple(entries)
        self.mode = mode
        self._names = frozenset(self.entries)
        self._pattern: re.Pattern[str] | None = None

        if mode == "pattern":
            for entry in self.entries:
                try:
                    re.compile(entry)
                except re.error as exc:
                    raise ConfigError(f"Invalid exclude-list pattern '{entry}': {exc}") from exc
            # An entry can compile alone yet fail inside the group, e.g. a global "(?i)" flag
            combined = "(?:%s)" % "|".join(self.entries)
            try:
                self._pattern = re.compile(combined)
            except re.error as exc:
                raise ConfigError(f"Invalid exclude-list pattern '{combined}': {exc}") from exc

    def matches(self, name: str) -> bool:
        if self._pattern is not None:
            return self._pattern.fullmatch(name) is not None
        return name in self._names
