"""Fixed-size song records stored in a flat binary file."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from pathlib import Path

from trackvault.freelist import FreeList

TEXT_SIZE = 100
_LAYOUT = struct.Struct(f"<i{TEXT_SIZE}s{TEXT_SIZE}s{TEXT_SIZE}sqqq?7x")
RECORD_SIZE = _LAYOUT.size


def _encode(text: str, field: str) -> bytes:
    data = text.encode("utf-8")
    if len(data) >= TEXT_SIZE:
        raise ValueError(f"{field} is longer than {TEXT_SIZE - 1} bytes")
    if b"\0" in data:
        raise ValueError(f"{field} contains a NUL character")
    return data


def _decode(data: bytes) -> str:
    return data.split(b"\0", 1)[0].decode("utf-8", errors="replace")


@dataclass
class Record:
    """A song with its title, artist, album and attribute bit sets."""

    id: int = 0
    name: str = ""
    artist: str = ""
    album: str = ""
    genres: int = 0
    instruments: int = 0
    tags: int = 0
    active: bool = True

    def to_bytes(self) -> bytes:
        return _LAYOUT.pack(
            self.id,
            _encode(self.name, "name"),
            _encode(self.artist, "artist"),
            _encode(self.album, "album"),
            self.genres,
            self.instruments,
            self.tags,
            self.active,
        )

    @classmethod
    def from_bytes(cls, data: bytes) -> Record:
        if len(data) != RECORD_SIZE:
            raise ValueError(f"a record takes {RECORD_SIZE} bytes, got {len(data)}")
        rid, name, artist, album, genres, instruments, tags, active = _LAYOUT.unpack(data)
        return cls(rid, _decode(name), _decode(artist), _decode(album),
                   genres, instruments, tags, active)


class RecordStore:
    """Records addressed by id; ids come from a FreeList."""

    def __init__(self, free_list: FreeList, path):
        self.free_list = free_list
        self.path = Path(path)
        self._file = open(self.path, "r+b")

    def get(self, record_id: int) -> Record:
        """Return the stored record; KeyError if the id was never issued."""
        if not self.free_list.is_valid(record_id):
            raise KeyError(record_id)
        self._file.seek(record_id * RECORD_SIZE)
        data = self._file.read(RECORD_SIZE)
        if len(data) != RECORD_SIZE:
            raise KeyError(record_id)
        return Record.from_bytes(data)

    def _write(self, record: Record) -> None:
        self._file.seek(record.id * RECORD_SIZE)
        self._file.write(record.to_bytes())

    def add(self, record: Record) -> int:
        """Store the record under a newly allocated id, which is returned and set on it."""
        data_check = record.to_bytes()  # validate before consuming an id
        del data_check
        record.id = self.free_list.allocate()
        self._write(record)
        return record.id

    def delete(self, record_id: int) -> bool:
        """Mark the record inactive and free its id; False if nothing was deleted."""
        if not self.free_list.is_valid(record_id):
            return False
        record = self.get(record_id)
        if not record.active:
            return False
        record.active = False
        self._write(record)
        self.free_list.release(record_id)
        return True

    def close(self) -> None:
        if not self._file.closed:
            self._file.close()