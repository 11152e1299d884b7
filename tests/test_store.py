from __future__ import annotations

import polib
import pytest

from treelingo.catalog import (
    MemoryCatalog,
    POCatalog,
    build_catalog,
    merge_untranslated,
)
from treelingo.errors import CatalogConfigurationError
from treelingo.store import TranslationStore


def _pofile(entries: list[polib.POEntry]) -> polib.POFile:
    po = polib.POFile()
    for entry in entries:
        po.append(entry)
    return po


def test_string_hit_returns_string(store):
    assert store.translate("Hello") == "こんにちは"


def test_sequence_hit_returns_sequence(store):
    assert store.translate(["Hello +", "Hello"]) == ["こんにちは +", "こんにちは"]


def test_string_miss_passes_through(store):
    assert store.translate("foo bar") == "foo bar"
    assert store.missing == ["foo bar"]


def test_sequence_miss_passes_through(store):
    lines = ["foo", "bar"]
    assert store.translate(lines) is lines
    assert store.missing == ["foo\nbar"]


def test_misses_are_recorded_once_in_first_seen_order(store):
    for text in ["b", "a", "b", "a", "c"]:
        store.translate(text)
    assert store.missing == ["b", "a", "c"]


def test_keys_are_not_normalised(store):
    assert store.translate("hello") == "hello"
    assert store.translate(" Hello") == " Hello"
    assert store.missing == ["hello", " Hello"]


def test_first_catalog_wins():
    store = TranslationStore(
        [
            MemoryCatalog({"Hello": "Bonjour"}, name="fr-override"),
            MemoryCatalog({"Hello": "Salut", "Bye": "Au revoir"}, name="fr"),
        ]
    )
    assert store.translate("Hello") == "Bonjour"
    assert store.translate("Bye") == "Au revoir"


def test_empty_unit_is_neither_looked_up_nor_recorded(store):
    assert store.translate("") == ""
    assert store.translate([]) == []
    assert store.missing == []
    assert store.lookups == 0


def test_counters(store):
    store.translate("Hello")
    store.translate("foo")
    store.translate("foo")
    assert (store.lookups, store.hits, len(store.missing)) == (3, 1, 1)


def test_memory_catalog_ignores_empty_translations():
    catalog = MemoryCatalog({"Hello": "", "Bye": "Tschüss"})
    assert catalog.lookup("Hello") is None
    assert "Bye" in catalog
    assert "Hello" not in catalog


def test_po_catalog_only_exposes_translated_entries():
    fuzzy = polib.POEntry(msgid="Fuzzy", msgstr="Flou", flags=["fuzzy"])
    obsolete = polib.POEntry(msgid="Old", msgstr="Vieux", obsolete=True)
    po = _pofile(
        [
            polib.POEntry(msgid="Hello", msgstr="Bonjour"),
            polib.POEntry(msgid="Empty", msgstr=""),
            fuzzy,
            obsolete,
        ]
    )
    catalog = POCatalog(po, name="fr.po")

    assert catalog.lookup("Hello") == "Bonjour"
    assert catalog.lookup("Empty") is None
    assert catalog.lookup("Fuzzy") is None
    assert catalog.lookup("Old") is None


def test_po_catalog_from_path(tmp_path):
    path = tmp_path / "ja.po"
    _pofile([polib.POEntry(msgid="Hello", msgstr="こんにちは")]).save(str(path))

    catalog = POCatalog.from_path(path)

    assert catalog.name == str(path)
    assert catalog.lookup("Hello") == "こんにちは"


def test_po_catalog_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        POCatalog.from_path(tmp_path / "missing.po")


def test_po_catalog_malformed_file_raises(tmp_path):
    path = tmp_path / "broken.po"
    path.write_text("this is not a catalog\n", encoding="utf-8")
    with pytest.raises(OSError):
        POCatalog.from_path(path)


def test_build_catalog_sources(tmp_path):
    path = tmp_path / "de.po"
    _pofile([polib.POEntry(msgid="Hello", msgstr="Hallo")]).save(str(path))
    memory = MemoryCatalog({"Hello": "Hallo"})

    assert build_catalog(memory) is memory
    assert isinstance(build_catalog({"Hello": "Hallo"}), MemoryCatalog)
    assert isinstance(build_catalog(polib.POFile()), POCatalog)
    assert build_catalog(str(path)).lookup("Hello") == "Hallo"
    assert build_catalog(path).lookup("Hello") == "Hallo"


def test_build_catalog_rejects_unknown_source():
    with pytest.raises(CatalogConfigurationError):
        build_catalog(42)


def test_save_without_output_path_is_a_no_op(store):
    store.translate("foo")
    assert store.save() == 0


def test_save_creates_catalog_with_untranslated_entries(tmp_path):
    path = tmp_path / "po" / "ja.po"
    store = TranslationStore([], output_path=path, language="ja")
    store.translate("foo bar")
    store.translate(["line one", "line two"])

    assert store.save() == 2

    po = polib.pofile(str(path))
    assert [entry.msgid for entry in po] == ["foo bar", "line one\nline two"]
    assert all(entry.msgstr == "" for entry in po)
    assert po.metadata["Language"] == "ja"


def test_save_merges_with_existing_entries(tmp_path):
    path = tmp_path / "ja.po"
    _pofile(
        [
            polib.POEntry(msgid="Hello", msgstr="こんにちは"),
            polib.POEntry(msgid="pending", msgstr=""),
        ]
    ).save(str(path))
    store = TranslationStore([POCatalog.from_path(path)], output_path=path)

    assert store.translate("Hello") == "こんにちは"
    store.translate("pending")
    store.translate("new text")

    assert store.save() == 1

    po = polib.pofile(str(path))
    assert [entry.msgid for entry in po] == ["Hello", "pending", "new text"]
    assert po.find("Hello").msgstr == "こんにちは"


def test_merge_untranslated_skips_duplicates_and_empty(tmp_path):
    path = tmp_path / "fr.po"
    assert merge_untranslated(path, ["a", "", "a", "b"], language="fr") == 2
    assert merge_untranslated(path, ["b", "c"]) == 1
    assert [entry.msgid for entry in polib.pofile(str(path))] == ["a", "b", "c"]


def test_save_revives_obsolete_entry_for_missing_text(tmp_path):
    path = tmp_path / "ja.po"
    _pofile([polib.POEntry(msgid="foo bar", msgstr="古い", obsolete=True)]).save(str(path))
    store = TranslationStore([POCatalog.from_path(path)], output_path=path)

    assert store.translate("foo bar") == "foo bar"
    assert store.save() == 1

    po = polib.pofile(str(path))
    assert [entry.msgid for entry in po if not entry.obsolete] == ["foo bar"]
    assert po.find("foo bar").msgstr == ""
    assert po.obsolete_entries() == []
