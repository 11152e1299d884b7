"""Translation lookup and miss recording."""

from __future__ import annotations

import json
import pathlib
import sys
from typing import Any, Dict, List, Sequence

from .catalog import Catalog, merge_untranslated
from .structures import TextUnit


class TranslationStore:
    """Looks text units up in prioritised catalogs and records misses.

    A unit is either a string or a list of lines. List units are keyed by
    their lines joined with newlines and come back as a list again, so the
    caller's shape is always preserved.
    """

    def __init__(
        self,
        catalogs: Sequence[Catalog] = (),
        *,
        output_path: str | pathlib.Path | None = None,
        language: str | None = None,
        debug: bool = False,
    ) -> None:
        self.catalogs: List[Catalog] = list(catalogs)
        self.output_path = pathlib.Path(output_path) if output_path else None
        self.language = language
        self.debug = debug

        self._misses: Dict[str, None] = {}
        self.lookups = 0
        self.hits = 0

    @property
    def missing(self) -> List[str]:
        """Keys without a translation, in first-seen order."""

        return list(self._misses)

    def translate(self, unit: TextUnit) -> TextUnit:
        """Return the translation of ``unit`` or ``unit`` itself on a miss."""

        is_text = isinstance(unit, str)
        key = unit if is_text else "\n".join(unit)
        if not key:
            return unit

        self.lookups += 1
        for catalog in self.catalogs:
            translated = catalog.lookup(key)
            if translated is None:
                continue
            self.hits += 1
            self._log_debug(
                "catalog.hit", {"catalog": catalog.name, "msgid": key, "msgstr": translated}
            )
            return translated if is_text else translated.split("\n")

        if key not in self._misses:
            self._misses[key] = None
            self._log_debug("catalog.miss", {"msgid": key})
        return unit

    def save(self) -> int:
        """Merge recorded misses into the writable catalog.

        Returns the number of new entries; a store without an output path
        persists nothing. Read and write errors propagate to the caller.
        """

        if self.output_path is None:
            self._log_debug("catalog.save.skipped", "no output catalog configured")
            return 0

        added = merge_untranslated(
            self.output_path,
            self._misses,
            language=self.language,
        )
        self._log_debug(
            "catalog.save",
            {"path": str(self.output_path), "added": added, "missing": len(self._misses)},
        )
        return added

    def _log_debug(self, label: str, payload: Any) -> None:
        """Emit structured debug information when enabled."""

        if not self.debug:
            return
        if isinstance(payload, (dict, list)):
            message = json.dumps(payload, ensure_ascii=False, indent=2)
        else:
            message = str(payload)
        print(f"[treelingo][catalog-debug] {label}:\n{message}", file=sys.stderr)
