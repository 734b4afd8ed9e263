import pytest

from trackvault.freelist import FreeList
from trackvault.setup_files import ALPHABET_SIZE, TRIE_FILE, TRIE_FREE_FILE, initialize
from trackvault.trie import EMPTY, NODE_SIZE, Trie, TrieNode


@pytest.fixture
def trie(tmp_path):
    initialize(tmp_path)
    free = FreeList(tmp_path / TRIE_FREE_FILE)
    tree = Trie(free, tmp_path / TRIE_FILE)
    yield tree
    tree.close()
    free.close()


def test_root_written_by_initialize_is_empty(trie):
    root = trie.read_node(0)
    assert root == TrieNode()
    assert root.children == [EMPTY] * ALPHABET_SIZE
    assert not root.is_leaf


def test_node_round_trip():
    node = TrieNode(True, 7, list(range(ALPHABET_SIZE)))
    data = node.to_bytes()
    assert len(data) == NODE_SIZE
    assert TrieNode.from_bytes(data) == node


def test_node_from_bytes_rejects_wrong_size():
    with pytest.raises(ValueError):
        TrieNode.from_bytes(b"\0" * (NODE_SIZE - 1))


def test_first_new_node_follows_root(trie):
    trie.insert("a", 5)
    assert trie.read_node(0).children[0] == NODE_SIZE


def test_insert_and_find_exact(trie):
    trie.insert("Beat It", 3)
    assert trie.find_exact("Beat It") == 3
    assert trie.find_exact("beatit") == 3
    assert trie.find_exact("BEAT IT") == 3


def test_find_exact_of_prefix_only_is_none(trie):
    trie.insert("thriller", 4)
    assert trie.find_exact("thrill") is None
    assert trie.find_exact("thrillers") is None


def test_search_prefix_alphabetical(trie):
    trie.insert("ab", 1)
    trie.insert("ac", 2)
    trie.insert("a", 3)
    assert trie.search_prefix("a") == [3, 1, 2]
    assert trie.search_prefix("ac") == [2]
    assert trie.search_prefix("b") == []


def test_shared_prefix_reuses_nodes(trie):
    trie.insert("abc", 1)
    before = trie.free_list.last_id
    trie.insert("abd", 2)
    assert trie.free_list.last_id == before + 1
    assert trie.search_prefix("ab") == [1, 2]


def test_set_value(trie):
    trie.insert("twist", 9)
    assert trie.set_value("twist", 11)
    assert trie.find_exact("twist") == 11
    assert not trie.set_value("missing", 1)


def test_invalid_character_raises(trie):
    with pytest.raises(ValueError):
        trie.insert("track 1", 1)
    with pytest.raises(ValueError):
        trie.find_exact("x@y")


def test_remove_branch_prunes_nodes(trie):
    trie.insert("abc", 1)
    assert trie.remove_branch("abc")
    assert trie.find_exact("abc") is None
    assert trie.search_prefix("a") == []
    assert trie.read_node(0).children == [EMPTY] * ALPHABET_SIZE


def test_remove_branch_keeps_longer_key(trie):
    trie.insert("abc", 1)
    trie.insert("ab", 2)
    assert not trie.remove_branch("ab")
    assert trie.find_exact("ab") is None
    assert trie.find_exact("abc") == 1


def test_remove_branch_keeps_shorter_key(trie):
    trie.insert("a", 1)
    trie.insert("ab", 2)
    trie.remove_branch("ab")
    assert trie.find_exact("a") == 1
    assert trie.find_exact("ab") is None


def test_remove_branch_missing_key(trie):
    trie.insert("abc", 1)
    assert not trie.remove_branch("xyz")
    assert trie.find_exact("abc") == 1