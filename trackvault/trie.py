"""A file-backed letter trie mapping names to integer values."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from pathlib import Path

from trackvault.freelist import FreeList
from trackvault.setup_files import ALPHABET_SIZE

EMPTY = -1
ROOT_OFFSET = 0
_LAYOUT = struct.Struct(f"<?3xi{ALPHABET_SIZE}i")
NODE_SIZE = _LAYOUT.size


def _empty_children() -> list[int]:
    return [EMPTY] * ALPHABET_SIZE


def _letter_indices(key: str) -> list[int]:
    """Map a key to child slots: spaces are skipped, letters fold case."""
    indices = []
    for char in key:
        if char == " ":
            continue
        index = (ord(char) | 0x20) - ord("a")
        if not 0 <= index < ALPHABET_SIZE:
            raise ValueError(f"unsupported character {char!r} in key {key!r}")
        indices.append(index)
    return indices


@dataclass
class TrieNode:
    """One node: whether a key ends here, its value and the child offsets."""

    is_leaf: bool = False
    value: int = EMPTY
    children: list[int] = field(default_factory=_empty_children)

    def has_children(self) -> bool:
        return any(child != EMPTY for child in self.children)

    def to_bytes(self) -> bytes:
        if len(self.children) != ALPHABET_SIZE:
            raise ValueError(f"a node has {ALPHABET_SIZE} children, got {len(self.children)}")
        return _LAYOUT.pack(self.is_leaf, self.value, *self.children)

    @classmethod
    def from_bytes(cls, data: bytes) -> TrieNode:
        if len(data) != NODE_SIZE:
            raise ValueError(f"a trie node takes {NODE_SIZE} bytes, got {len(data)}")
        is_leaf, value, *children = _LAYOUT.unpack(data)
        return cls(is_leaf, value, list(children))


class Trie:
    """Trie whose nodes live at byte offsets in a file; the root is at offset 0."""

    def __init__(self, free_list: FreeList, path):
        self.free_list = free_list
        self.path = Path(path)
        self._file = open(self.path, "r+b")

    def read_node(self, offset: int) -> TrieNode:
        self._file.seek(offset)
        data = self._file.read(NODE_SIZE)
        if len(data) != NODE_SIZE:
            raise ValueError(f"no trie node at offset {offset}")
        return TrieNode.from_bytes(data)

    def write_node(self, node: TrieNode, offset: int) -> None:
        self._file.seek(offset)
        self._file.write(node.to_bytes())

    def _walk(self, key: str) -> tuple[int, TrieNode] | None:
        offset = ROOT_OFFSET
        node = self.read_node(offset)
        for index in _letter_indices(key):
            child = node.children[index]
            if child == EMPTY:
                return None
            offset = child
            node = self.read_node(offset)
        return offset, node

    def set_value(self, key: str, value: int) -> bool:
        """Replace the value stored at the key's node; False if the path is missing."""
        found = self._walk(key)
        if found is None:
            return False
        offset, node = found
        node.value = value
        self.write_node(node, offset)
        return True

    def find_exact(self, key: str) -> int | None:
        """The value of a key that was inserted, or None."""
        found = self._walk(key)
        if found is None:
            return None
        _, node = found
        return node.value if node.is_leaf else None

    def search_prefix(self, key: str) -> list[int]:
        """Values of every key starting with the prefix, in alphabetical order."""
        found = self._walk(key)
        if found is None:
            return []
        offset, _ = found
        return self.collect(offset)

    def collect(self, offset: int) -> list[int]:
        """Values of every key in the subtree rooted at the offset."""
        node = self.read_node(offset)
        result = [node.value] if node.is_leaf else []
        for child in node.children:
            if child != EMPTY:
                result.extend(self.collect(child))
        return result

    def _allocate_offset(self) -> int:
        reused = self.free_list.deleted_count > 0
        item = self.free_list.allocate()
        # released entries are stored as byte offsets, fresh ids as slot numbers
        return item if reused else item * NODE_SIZE

    def insert(self, key: str, value: int) -> None:
        """Add the key, creating missing nodes, and store the value at its end."""
        indices = _letter_indices(key)
        offset = ROOT_OFFSET
        node = self.read_node(offset)
        for index in indices:
            child = node.children[index]
            if child == EMPTY:
                new_offset = self._allocate_offset()
                new_node = TrieNode()
                node.children[index] = new_offset
                self.write_node(new_node, new_offset)
                self.write_node(node, offset)
                offset, node = new_offset, new_node
            else:
                offset = child
                node = self.read_node(offset)
        node.is_leaf = True
        node.value = value
        self.write_node(node, offset)

    def remove_branch(self, key: str, offset: int = ROOT_OFFSET, index: int = 0) -> bool:
        """Unmark the key and prune nodes left without use.

        Starts at the node at ``offset`` with the key's character ``index``.
        Returns whether the starting node itself was left empty.
        """
        return self._remove(_letter_indices(key[index:]), offset, 0)

    def _remove(self, letters: list[int], offset: int, depth: int) -> bool:
        node = self.read_node(offset)
        if depth == len(letters):
            node.is_leaf = False
            node.value = EMPTY
            self.write_node(node, offset)
            return not node.has_children()
        slot = letters[depth]
        child = node.children[slot]
        if child == EMPTY:
            return False
        if not self._remove(letters, child, depth + 1):
            return False
        self.free_list.release(child)
        node.children[slot] = EMPTY
        self.write_node(node, offset)
        return not node.has_children() and not node.is_leaf

    def close(self) -> None:
        if not self._file.closed:
            self._file.close()