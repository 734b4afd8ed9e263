"""Step through the nodes of a trie file one letter at a time."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Iterable, Iterator
from typing import BinaryIO, TextIO

from trackvault.setup_files import ALPHABET_SIZE, TRIE_FILE
from trackvault.trie import EMPTY, NODE_SIZE, ROOT_OFFSET, TrieNode

PROMPT = "which character: "


def _read_node(file: BinaryIO, offset: int) -> TrieNode:
    file.seek(offset)
    data = file.read(NODE_SIZE)
    if len(data) != NODE_SIZE:
        raise ValueError(f"no trie node at offset {offset}")
    return TrieNode.from_bytes(data)


def _describe(node: TrieNode, out: TextIO) -> None:
    out.write(f"{int(node.is_leaf)}\n{node.value}\n")
    for index, child in enumerate(node.children):
        letter = chr(ord("a") + index)
        shown = "empty" if child == EMPTY else str(child // NODE_SIZE)
        out.write(f"{letter}: {shown}\n")


def browse(trie_path, answers: Iterable[str], out: TextIO) -> list[int]:
    """Show each node reached and follow the letters in ``answers``.

    Stops at a blank answer or when the answers run out. Returns the
    offsets of the nodes shown, in order.
    """
    visited = []
    replies = iter(answers)
    with open(trie_path, "rb") as file:
        offset = ROOT_OFFSET
        while True:
            node = _read_node(file, offset)
            visited.append(offset)
            _describe(node, out)
            out.write(PROMPT)
            answer = next(replies, "").strip()
            if not answer:
                break
            char = answer[0]
            index = ord(char.lower()) - ord("a")
            if not 0 <= index < ALPHABET_SIZE:
                out.write(f"\nnot a letter: {char!r}\n")
                continue
            child = node.children[index]
            if child == EMPTY:
                out.write(f"\nno child for {char!r}\n")
                continue
            offset = child
    return visited


def _typed_characters(stream: TextIO) -> Iterator[str]:
    for line in stream:
        yield from "".join(line.split())


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Browse the nodes of a trie file.")
    parser.add_argument("trie", nargs="?", default=TRIE_FILE)
    args = parser.parse_args(argv)
    try:
        browse(args.trie, _typed_characters(sys.stdin), sys.stdout)
    except (OSError, ValueError) as error:
        print(f"error: {error}", file=sys.stderr)
        return 1
    sys.stdout.write("\n")
    return 0