"""Translation catalog abstractions backed by gettext PO files."""

from __future__ import annotations

import pathlib
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, Mapping, Optional

import polib

from .errors import CatalogConfigurationError


class Catalog(ABC):
    """Read-only exact-match msgid to msgstr lookup."""

    name: str = "catalog"

    @abstractmethod
    def lookup(self, msgid: str) -> Optional[str]:
        """Return the translation for ``msgid`` or None when there is none."""

    def __contains__(self, msgid: object) -> bool:
        return isinstance(msgid, str) and self.lookup(msgid) is not None


class MemoryCatalog(Catalog):
    """A catalog held in a plain mapping (useful for testing)."""

    def __init__(self, entries: Mapping[str, str], *, name: str = "memory") -> None:
        self.name = name
        self._entries: Dict[str, str] = {
            msgid: msgstr for msgid, msgstr in entries.items() if msgstr
        }

    def lookup(self, msgid: str) -> Optional[str]:
        return self._entries.get(msgid)


class POCatalog(Catalog):
    """Catalog view over the translated entries of a ``polib.POFile``."""

    def __init__(self, pofile: polib.POFile, *, name: str | None = None) -> None:
        self.pofile = pofile
        self.name = name or pofile.fpath or "po"
        self._entries: Dict[str, str] = {}
        for entry in pofile.translated_entries():
            # The first entry for a msgid wins, whatever its msgctxt.
            self._entries.setdefault(entry.msgid, entry.msgstr)

    @classmethod
    def from_path(cls, path: str | pathlib.Path) -> "POCatalog":
        """Load a PO file; read and syntax errors propagate as ``OSError``."""

        # polib parses a string that is not an existing path as PO content.
        if not pathlib.Path(path).is_file():
            raise FileNotFoundError(f"Translation catalog not found: {path}")
        return cls(polib.pofile(str(path)), name=str(path))

    def lookup(self, msgid: str) -> Optional[str]:
        return self._entries.get(msgid)


def build_catalog(source: Any) -> Catalog:
    """Factory to create a catalog from a path, PO file, or mapping."""

    if isinstance(source, Catalog):
        return source
    if isinstance(source, polib.POFile):
        return POCatalog(source)
    if isinstance(source, Mapping):
        return MemoryCatalog(source)
    if isinstance(source, (str, pathlib.Path)):
        return POCatalog.from_path(source)
    raise CatalogConfigurationError(
        f"Unsupported translation catalog source of type {type(source).__name__}."
    )


def _default_metadata(language: str | None) -> Dict[str, str]:
    metadata = {
        "Project-Id-Version": "PACKAGE VERSION",
        "MIME-Version": "1.0",
        "Content-Type": "text/plain; charset=UTF-8",
        "Content-Transfer-Encoding": "8bit",
    }
    if language:
        metadata["Language"] = language
    return metadata


def merge_untranslated(
    path: str | pathlib.Path,
    msgids: Iterable[str],
    *,
    language: str | None = None,
) -> int:
    """Append untranslated msgids to the PO file at ``path``.

    Active entries are kept untouched; an obsolete entry for a missing msgid
    is revived with an empty translation. The file is created with standard
    headers when it does not exist yet. Returns the number of entries added.
    """

    destination = pathlib.Path(path)
    if destination.exists():
        po = polib.pofile(str(destination))
    else:
        po = polib.POFile()
        po.metadata = _default_metadata(language)

    known = {entry.msgid for entry in po if not entry.obsolete}
    obsolete: Dict[str, polib.POEntry] = {}
    for entry in po.obsolete_entries():
        obsolete.setdefault(entry.msgid, entry)

    added = 0
    for msgid in msgids:
        if not msgid or msgid in known:
            continue
        if msgid in obsolete:
            entry = obsolete.pop(msgid)
            entry.obsolete = False
            entry.msgstr = ""
        else:
            po.append(polib.POEntry(msgid=msgid, msgstr=""))
        known.add(msgid)
        added += 1

    destination.parent.mkdir(parents=True, exist_ok=True)
    po.save(str(destination))
    return added
