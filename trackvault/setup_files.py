"""Create or reset the files of an empty catalog."""

from __future__ import annotations

import argparse
import struct
from pathlib import Path

RECORDS_FILE = "registros.bin"
RECORDS_FREE_FILE = "excreg.bin"
TRIE_FILE = "trie.bin"
TRIE_FREE_FILE = "exctr.bin"
LISTS_FILE = "inter.bin"
LISTS_FREE_FILE = "excinter.bin"
TAGS_FILE = "tags.bin"
TAGS_FREE_FILE = "exctag.bin"
INDEX_FILE = "idxs.bin"

ALPHABET_SIZE = 26
INDEX_SLOTS = 192

_HEADER = struct.Struct("<ii")
_ROOT_NODE = struct.Struct(f"<?3xi{ALPHABET_SIZE}i")


def initialize(directory) -> list[Path]:
    """Write empty headers, the trie root and the index table; return the paths written."""
    base = Path(directory)
    base.mkdir(parents=True, exist_ok=True)
    contents = {
        RECORDS_FREE_FILE: _HEADER.pack(0, 0),
        LISTS_FREE_FILE: _HEADER.pack(0, 0),
        # the trie root occupies slot 0, so fresh node ids start at 1
        TRIE_FREE_FILE: _HEADER.pack(1, 0),
        TRIE_FILE: _ROOT_NODE.pack(False, -1, *([-1] * ALPHABET_SIZE)),
        TAGS_FREE_FILE: _HEADER.pack(0, 0),
        INDEX_FILE: struct.pack(f"<{INDEX_SLOTS}i", *([-1] * INDEX_SLOTS)),
    }
    written = []
    for name, data in contents.items():
        path = base / name
        path.write_bytes(data)
        written.append(path)
    for name in (RECORDS_FILE, LISTS_FILE, TAGS_FILE):
        (base / name).touch()
    return written


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Initialize catalog files.")
    parser.add_argument("directory", nargs="?", default=".")
    args = parser.parse_args(argv)
    initialize(args.directory)
    return 0