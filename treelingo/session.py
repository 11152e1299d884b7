"""High-level orchestration of a localization run."""

from __future__ import annotations

import pathlib
import time
from dataclasses import dataclass, field
from typing import Any, List, Mapping

from .catalog import Catalog, POCatalog, build_catalog
from .configuration import get_settings, normalise_language, split_catalog_paths
from .store import TranslationStore
from .walker import process


@dataclass
class LocalizationSummary:
    """Report returned after localizing a document."""

    catalogs: List[str]
    output_path: pathlib.Path | None
    language: str | None
    lookups: int
    hits: int
    misses: int
    added_entries: int
    elapsed_seconds: float
    missing: List[str] = field(default_factory=list)


def _setting(settings: Any, name: str) -> Any:
    return getattr(settings, name, None) if settings is not None else None


def build_store(
    attributes: Mapping[str, Any],
    settings: Any = None,
    *,
    debug: bool = False,
) -> TranslationStore:
    """Create a store from document attributes layered over settings.

    Catalog priority: the ``old-po`` attribute, then the listed catalogs,
    then ``<po-directory>/<language>.po`` when that file exists.
    """

    language = attributes.get("language") or _setting(settings, "TREELINGO_LANGUAGE")
    if isinstance(language, str):
        language = normalise_language(language)
    po_directory = attributes.get("po-directory") or _setting(
        settings, "TREELINGO_PO_DIRECTORY"
    )

    catalogs: List[Catalog] = []
    if attributes.get("old-po") is not None:
        catalogs.append(build_catalog(attributes["old-po"]))

    listed = attributes.get("po-catalogs") or _setting(settings, "TREELINGO_CATALOGS")
    for path in split_catalog_paths(listed):
        catalogs.append(POCatalog.from_path(path))

    language_catalog: pathlib.Path | None = None
    if po_directory and language:
        language_catalog = pathlib.Path(po_directory) / f"{language}.po"
        if language_catalog.exists():
            catalogs.append(POCatalog.from_path(language_catalog))

    output = attributes.get("po-output") or _setting(settings, "TREELINGO_OUTPUT")
    output_path = pathlib.Path(output) if output else language_catalog

    return TranslationStore(
        catalogs,
        output_path=output_path,
        language=language,
        debug=debug,
    )


class LocalizationSession:
    """Builds the store, translates the tree, and persists misses once."""

    def __init__(
        self,
        *,
        settings: Any = None,
        verbose: bool | None = None,
        debug: bool | None = None,
    ) -> None:
        self.settings = settings
        self.verbose = bool(
            verbose if verbose is not None else _setting(settings, "TREELINGO_VERBOSE")
        )
        self.debug = bool(
            debug if debug is not None else _setting(settings, "TREELINGO_DEBUG")
        )

    def run(self, root: Any) -> LocalizationSummary:
        start_time = time.time()

        attributes = getattr(root, "attributes", None) or {}
        store = build_store(attributes, self.settings, debug=self.debug)
        if self.verbose:
            print(
                f"Loaded {len(store.catalogs)} catalogs: "
                + (", ".join(catalog.name for catalog in store.catalogs) or "none")
            )

        process(root, store)
        added = store.save()

        summary = LocalizationSummary(
            catalogs=[catalog.name for catalog in store.catalogs],
            output_path=store.output_path,
            language=store.language,
            lookups=store.lookups,
            hits=store.hits,
            misses=len(store.missing),
            added_entries=added,
            elapsed_seconds=time.time() - start_time,
            missing=store.missing,
        )
        if self.verbose:
            print_summary(summary)
        return summary


def print_summary(summary: LocalizationSummary) -> None:
    """Output a friendly report once processing completes."""

    print("\nLocalization complete.")
    print(f"  Language:        {summary.language or 'unspecified'}")
    print(
        "  Text units:      "
        f"{summary.hits} translated / {summary.lookups} looked up "
        f"({summary.misses} distinct untranslated)"
    )
    if summary.output_path is not None:
        print(
            f"  Output catalog:  {summary.output_path} "
            f"({summary.added_entries} new entries)"
        )
    print(f"  Elapsed time:    {summary.elapsed_seconds:.2f} seconds")


def localize(
    root: Any,
    *,
    settings: Any = None,
    use_configuration: bool = False,
    verbose: bool | None = None,
    debug: bool | None = None,
) -> LocalizationSummary:
    """Localize ``root`` in one call, optionally reading layered settings."""

    if settings is None and use_configuration:
        settings = get_settings()
    session = LocalizationSession(settings=settings, verbose=verbose, debug=debug)
    return session.run(root)
