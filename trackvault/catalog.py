"""A song catalog: records plus a name trie and attribute indexes."""

from __future__ import annotations

import struct
from collections.abc import Iterator
from pathlib import Path

from trackvault.freelist import FreeList
from trackvault.lists import IndexTable, LinkedLists
from trackvault.records import Record, RecordStore
from trackvault.setup_files import (
    INDEX_FILE,
    LISTS_FILE,
    LISTS_FREE_FILE,
    RECORDS_FILE,
    RECORDS_FREE_FILE,
    TAGS_FILE,
    TAGS_FREE_FILE,
    TRIE_FILE,
    TRIE_FREE_FILE,
)
from trackvault.trie import Trie

_SLOT_SIZE = struct.calcsize("<i")
_BITS_PER_SET = 64
_MASK = (1 << _BITS_PER_SET) - 1
GENRE_BASE = 0
INSTRUMENT_BASE = 64
TAG_BASE = 128


def _attribute_slots(record: Record) -> Iterator[int]:
    """Index-table slots of every bit set in the record's genres, instruments and tags."""
    for base, bits in (
        (GENRE_BASE, record.genres),
        (INSTRUMENT_BASE, record.instruments),
        (TAG_BASE, record.tags),
    ):
        bits &= _MASK
        slot = base
        while bits:
            if bits & 1:
                yield slot
            bits >>= 1
            slot += 1


class Catalog:
    """Songs stored on disk, searchable by name prefix and attribute bits.

    The directory must hold files prepared by ``setup_files.initialize``.
    """

    def __init__(self, directory):
        base = Path(directory)
        self.directory = base
        self._free_lists = []
        try:
            records_free = self._open_free_list(base / RECORDS_FREE_FILE)
            trie_free = self._open_free_list(base / TRIE_FREE_FILE)
            lists_free = self._open_free_list(base / LISTS_FREE_FILE)
            tags_free = self._open_free_list(base / TAGS_FREE_FILE)
            self.records = RecordStore(records_free, base / RECORDS_FILE)
            self.trie = Trie(trie_free, base / TRIE_FILE)
            self.lists = LinkedLists(lists_free, base / LISTS_FILE)
            self.tags = LinkedLists(tags_free, base / TAGS_FILE)
            self.index = IndexTable(base / INDEX_FILE)
        except BaseException:
            self.close()
            raise

    def _open_free_list(self, path: Path) -> FreeList:
        free_list = FreeList(path)
        self._free_lists.append(free_list)
        return free_list

    def search(self, record: Record) -> list[int]:
        """Ids of records matching the first non-empty text field as a prefix
        and carrying every attribute bit set on the query, in ascending order."""
        results: set[int] | None = None
        for text in (record.name, record.artist, record.album):
            if text:
                results = {
                    value
                    for head in self.trie.search_prefix(text)
                    for value in self.lists.values(head)
                }
                if not results:
                    return []
                break
        for slot in _attribute_slots(record):
            head = self.index.get(slot * _SLOT_SIZE)
            if head is None:
                return []
            members = self.tags.values(head)
            if results is None:
                results = set(members)
            else:
                results &= set(members)
                if not results:
                    return []
        return sorted(results or ())

    def _link_text(self, text: str, record_id: int) -> None:
        head = self.trie.find_exact(text)
        if head is None:
            self.trie.insert(text, self.lists.create(record_id))
        else:
            self.lists.append(head, record_id)

    def add(self, record: Record) -> int:
        """Store the record and index it; return its id."""
        for text in (record.name, record.artist, record.album):
            self.trie.find_exact(text)  # rejects unsupported characters early
        record_id = self.records.add(record)
        for text in (record.name, record.artist, record.album):
            self._link_text(text, record_id)
        for slot in _attribute_slots(record):
            position = slot * _SLOT_SIZE
            head = self.index.get(position)
            if head is None:
                self.index.set(position, self.tags.create(record_id))
            else:
                self.tags.append(head, record_id)
        return record_id

    def remove(self, record_id: int) -> bool:
        """Delete the record and drop it from every index.

        Raises KeyError for an id never issued; returns False if the record
        was already deleted.
        """
        record = self.records.get(record_id)
        if not self.records.delete(record_id):
            return False
        for text in (record.name, record.artist, record.album):
            head = self.trie.find_exact(text)
            if head is None:
                continue
            new_head = self.lists.remove(head, record_id)
            if new_head is None:
                self.trie.remove_branch(text)
            elif new_head != head:
                self.trie.set_value(text, new_head)
        for slot in _attribute_slots(record):
            position = slot * _SLOT_SIZE
            head = self.index.get(position)
            if head is None:
                continue
            new_head = self.tags.remove(head, record_id)
            if new_head != head:
                self.index.set(position, new_head)
        return True

    def close(self) -> None:
        for name in ("records", "trie", "lists", "tags", "index"):
            store = getattr(self, name, None)
            if store is not None:
                store.close()
        for free_list in self._free_lists:
            free_list.close()

    def __enter__(self) -> Catalog:
        return self

    def __exit__(self, *args) -> None:
        self.close()