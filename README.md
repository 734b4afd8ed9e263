# trackvault

trackvault keeps a catalogue of music tracks in a handful of fixed-layout
binary files. Each track is a `Record` with a name, an artist, an album and
three integer bit masks for genres, instruments and tags. Names, artists and
albums are indexed in a trie stored on disk, and every bit of the masks has
its own list of matching record ids, so a search can combine a text prefix
with any number of genre, instrument and tag bits.

Deleted records, trie nodes and list nodes are remembered in free lists and
their slots are reused by later additions.

## Installation

```
pip install .
```

## Preparing a catalogue directory

A catalogue lives in one directory, whose files must be prepared once before
use. From Python:

```python
from trackvault.setup_files import initialize

initialize("my-catalogue")   # returns the paths it wrote
```

or from the shell:

```
trackvault-init my-catalogue
```

Without an argument `trackvault-init` prepares the current directory. Running
it on an existing catalogue resets it to empty.

## Working with a catalogue

```python
from trackvault.catalog import Catalog
from trackvault.records import Record

with Catalog("my-catalogue") as catalog:
    new_id = catalog.add(Record(name="Beat It", artist="Michael Jackson",
                                album="Thriller", genres=0b1, tags=0b10))
    matches = catalog.search(Record(artist="michael"))   # [new_id]
    catalog.remove(new_id)
```

- `Catalog.add(record)` stores the record, indexes its name, artist, album
  and every set bit, and returns the id it was given.
- `Catalog.search(record)` takes a `Record` used as a query. The first of
  name, artist or album that is filled in is matched as a prefix; every bit
  set in the genre, instrument and tag masks narrows the result further. It
  returns the matching ids in ascending order; an empty list means nothing
  matched.
- `Catalog.remove(record_id)` deletes the record and drops it from every
  index. It raises `KeyError` for an id that was never issued and returns
  `False` if the record was already deleted.

Text rules:

- Name, artist and album may hold only letters and spaces. Spaces are
  ignored and letters are compared without regard to case; any other
  character makes `add` raise `ValueError`.
- Each text field may take at most 99 bytes of UTF-8.
- Only the lowest 64 bits of each mask are used.

## Building blocks

The pieces a `Catalog` is made of can be used on their own:

- `trackvault.freelist.FreeList` hands out integer ids and reuses released
  ones first (`allocate`, `release`, `is_valid`, `peek_deleted`, `deleted`).
- `trackvault.records.RecordStore` stores `Record` values by id (`add`,
  `get`, `delete`); `Record.to_bytes` and `Record.from_bytes` give the
  fixed on-disk layout.
- `trackvault.trie.Trie` is the on-disk trie of `TrieNode` values
  (`insert`, `find_exact`, `search_prefix`, `collect`, `set_value`,
  `remove_branch`).
- `trackvault.lists.LinkedLists` holds many linked lists of ints in one file
  (`create`, `append`, `values`, `remove`), and `trackvault.lists.IndexTable`
  holds the list head for each attribute bit.

## Inspecting the trie

```
trackvault-browse [TRIE_FILE]
```

reads the trie file (`trie.bin` in the current directory by default) and
shows the root node: `1` or `0` for whether a key ends there, the value it
holds, and for each letter the slot number of the child it leads to or
`empty`. It then reads the next letter from standard input and moves to that
child; letters without a child, and characters that are not letters, are
reported and the same node is shown again. Whitespace in the input is
skipped, and browsing stops when the input ends. From Python,
`trackvault.browse.browse(path, answers, out)` does the same with any
iterable of answers and any text stream, and returns the byte offsets of the
nodes shown.

## What it does not do

There is no command for adding, searching or deleting tracks: those are done
through the `Catalog` class in Python. Files are accessed directly without
locking, so one catalogue directory should be used by one process at a time.

## Running the tests

```
pip install .[test]
pytest
```