"""File-backed music catalogue with an on-disk trie index and attribute lists."""

__version__ = "0.1.0"
__all__ = ["__version__"]