from __future__ import annotations

import pytest

from treelingo.catalog import MemoryCatalog
from treelingo.store import TranslationStore

JAPANESE_ENTRIES = {
    "Hello": "こんにちは",
    "Hello world": "こんにちは世界",
    "Chapter Title": "章タイトル",
    "Chapter2 Title": "章2タイトル",
    "Hello *bold*": "こんにちは *太字*",
    "Hello +\nHello": "こんにちは +\nこんにちは",
    "*bold*, _italic phrase_, `monospace phrase`": (
        "*太字*、_イタリックのフレーズ_、`モノスペースのフレーズ`"
    ),
}


@pytest.fixture
def catalog() -> MemoryCatalog:
    return MemoryCatalog(JAPANESE_ENTRIES, name="old-po")


@pytest.fixture
def store(catalog: MemoryCatalog) -> TranslationStore:
    return TranslationStore([catalog])
