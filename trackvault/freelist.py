"""File-backed allocator of integer ids with a stack of released ids."""

from __future__ import annotations

import struct
from pathlib import Path

_INT = struct.Struct("<i")
_LAST_ID_POS = 0
_COUNT_POS = _INT.size


class FreeList:
    """Hands out ids, reusing released ones before issuing new ones.

    The file holds the next fresh id, then the number of released ids,
    then the released ids themselves, most recent last.
    """

    def __init__(self, path):
        self.path = Path(path)
        self._file = open(self.path, "r+b")

    def _read_int(self, position: int) -> int:
        self._file.seek(position)
        data = self._file.read(_INT.size)
        if len(data) < _INT.size:
            return -1
        return _INT.unpack(data)[0]

    def _write_int(self, position: int, value: int) -> None:
        self._file.seek(position)
        self._file.write(_INT.pack(value))

    @property
    def last_id(self) -> int:
        """The next id that has never been issued."""
        return self._read_int(_LAST_ID_POS)

    @last_id.setter
    def last_id(self, value: int) -> None:
        self._write_int(_LAST_ID_POS, value)

    @property
    def deleted_count(self) -> int:
        """How many released ids wait to be reused."""
        return self._read_int(_COUNT_POS)

    @deleted_count.setter
    def deleted_count(self, value: int) -> None:
        self._write_int(_COUNT_POS, value)

    def _slot(self, index: int) -> int:
        return (2 + index) * _INT.size

    def is_valid(self, item_id: int) -> bool:
        """Whether the id has been issued at some point."""
        return 0 <= item_id < self.last_id

    def peek_deleted(self) -> int | None:
        """The released id that would be reused next, or None."""
        count = self.deleted_count
        if count < 1:
            return None
        return self._read_int(self._slot(count - 1))

    def allocate(self) -> int:
        """Return a released id if there is one, else a fresh one."""
        count = self.deleted_count
        if count <= 0:
            item_id = self.last_id
            self.last_id = item_id + 1
            return item_id
        item_id = self._read_int(self._slot(count - 1))
        self.deleted_count = count - 1
        return item_id

    def release(self, item_id: int) -> bool:
        """Put an issued id back for reuse; ids never issued are ignored."""
        if not self.is_valid(item_id):
            return False
        count = self.deleted_count
        self._write_int(self._slot(count), item_id)
        self.deleted_count = count + 1
        return True

    def deleted(self) -> list[int]:
        """All released ids, oldest first."""
        return [self._read_int(self._slot(i)) for i in range(max(self.deleted_count, 0))]

    def close(self) -> None:
        if not self._file.closed:
            self._file.close()

    def __enter__(self) -> FreeList:
        return self

    def __exit__(self, *args) -> None:
        self.close()