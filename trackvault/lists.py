"""File-backed singly linked lists of ints, and the fixed index table."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from pathlib import Path

from trackvault.freelist import FreeList

END = -1
_LAYOUT = struct.Struct("<ii")
NODE_SIZE = _LAYOUT.size
_INT = struct.Struct("<i")


@dataclass
class ListNode:
    """A value and the byte offset of the next node, or END."""

    value: int = END
    next: int = END

    def to_bytes(self) -> bytes:
        return _LAYOUT.pack(self.value, self.next)

    @classmethod
    def from_bytes(cls, data: bytes) -> ListNode:
        if len(data) != NODE_SIZE:
            raise ValueError(f"a list node takes {NODE_SIZE} bytes, got {len(data)}")
        return cls(*_LAYOUT.unpack(data))


class LinkedLists:
    """Many linked lists sharing one file, each identified by its head offset."""

    def __init__(self, free_list: FreeList, path):
        self.free_list = free_list
        self.path = Path(path)
        self._file = open(self.path, "r+b")

    def read_node(self, offset: int) -> ListNode:
        if offset < 0:
            raise ValueError(f"invalid list offset {offset}")
        self._file.seek(offset)
        data = self._file.read(NODE_SIZE)
        if len(data) != NODE_SIZE:
            raise ValueError(f"no list node at offset {offset}")
        return ListNode.from_bytes(data)

    def write_node(self, node: ListNode, offset: int) -> None:
        self._file.seek(offset)
        self._file.write(node.to_bytes())

    def _allocate_offset(self) -> int:
        reused = self.free_list.deleted_count > 0
        item = self.free_list.allocate()
        # released entries are stored as byte offsets, fresh ids as slot numbers
        return item if reused else item * NODE_SIZE

    def remove(self, head: int, value: int) -> int | None:
        """Unlink the first node holding the value.

        Returns the list's head afterwards: the old head if it was kept,
        the next node if the head was removed, None if the list is now empty.
        """
        node = self.read_node(head)
        if node.value == value:
            self.free_list.release(head)
            return None if node.next == END else node.next
        previous, current = head, node.next
        while current != END:
            node = self.read_node(current)
            if node.value == value:
                self.free_list.release(current)
                before = self.read_node(previous)
                before.next = node.next
                self.write_node(before, previous)
                break
            previous, current = current, node.next
        return head

    def values(self, head: int) -> list[int]:
        """The values of the list, from the head on."""
        result = []
        offset = head
        while offset != END:
            node = self.read_node(offset)
            result.append(node.value)
            offset = node.next
        return result

    def create(self, value: int) -> int:
        """Start a new list holding the value; return its head offset."""
        offset = self._allocate_offset()
        self.write_node(ListNode(value, END), offset)
        return offset

    def append(self, head: int, value: int) -> None:
        """Add the value at the end of the list starting at head."""
        tail_offset = head
        tail = self.read_node(tail_offset)
        while tail.next != END:
            tail_offset = tail.next
            tail = self.read_node(tail_offset)
        new_offset = self._allocate_offset()
        tail.next = new_offset
        self.write_node(ListNode(value, END), new_offset)
        self.write_node(tail, tail_offset)

    def close(self) -> None:
        if not self._file.closed:
            self._file.close()


class IndexTable:
    """A table of ints addressed by byte offset; -1 in the file means unset."""

    def __init__(self, path):
        self.path = Path(path)
        self._file = open(self.path, "r+b")

    def get(self, offset: int) -> int | None:
        """The stored value, or None when the slot is unset or missing."""
        self._file.seek(offset)
        data = self._file.read(_INT.size)
        if len(data) != _INT.size:
            return None
        value = _INT.unpack(data)[0]
        return None if value == END else value

    def set(self, offset: int, value: int | None) -> None:
        self._file.seek(offset)
        self._file.write(_INT.pack(END if value is None else value))

    def close(self) -> None:
        if not self._file.closed:
            self._file.close()