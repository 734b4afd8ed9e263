import pytest

from trackvault.catalog import Catalog
from trackvault.records import Record
from trackvault.setup_files import initialize

ARTISTS = ["Charlie Brown Jr", "Michael Jackson", "Twenty One Pilots", "Yun Li", "Eminem", "Charlie Brown Jr"]
SONGS = ["Senhor do Tempo", "Beat It", "Stressed Out", "Twist", "Till I Collapse", "Champanhe E Agua Benta"]
ALBUMS = ["Imunidade Musical", "Thriller", "Bluryface", "Bons Tempos", "The Eminem Show", "Tamo Ai Na Atividade"]


@pytest.fixture
def catalog(tmp_path):
    initialize(tmp_path)
    with Catalog(tmp_path) as cat:
        yield cat


def _song(i, **attrs):
    return Record(name=SONGS[i], artist=ARTISTS[i], album=ALBUMS[i], **attrs)


@pytest.fixture
def filled(catalog):
    ids = [catalog.add(_song(i, genres=1, instruments=1, tags=1)) for i in range(6)]
    return catalog, ids


def test_ids_are_distinct_and_records_stored(filled):
    catalog, ids = filled
    assert len(set(ids)) == 6
    assert catalog.records.get(ids[1]).name == "Beat It"


def test_search_by_artist_prefix(filled):
    catalog, ids = filled
    assert catalog.search(Record(artist="Charlie Brown Jr")) == sorted([ids[0], ids[5]])
    assert catalog.search(Record(artist="Michael")) == [ids[1]]


def test_search_name_ignores_case_and_spaces(filled):
    catalog, ids = filled
    assert catalog.search(Record(name="beatit")) == [ids[1]]
    assert catalog.search(Record(name="THRILLER")) == [ids[1]]


def test_search_unknown_prefix_is_empty(filled):
    catalog, _ = filled
    assert catalog.search(Record(name="zzz")) == []


def test_search_without_criteria_is_empty(filled):
    catalog, _ = filled
    assert catalog.search(Record()) == []


def test_search_by_attribute_bits(filled):
    catalog, ids = filled
    assert catalog.search(Record(genres=1)) == sorted(ids)
    assert catalog.search(Record(genres=1, instruments=1, tags=1)) == sorted(ids)


def test_unused_attribute_gives_nothing(filled):
    catalog, _ = filled
    assert catalog.search(Record(tags=1 << 5)) == []
    assert catalog.search(Record(name="Beat", genres=1 << 3)) == []


def test_text_and_attributes_intersect(catalog):
    first = catalog.add(_song(0, genres=1))
    last = catalog.add(_song(5, genres=3))
    assert catalog.search(Record(artist="Charlie", genres=1)) == sorted([first, last])
    assert catalog.search(Record(artist="Charlie", genres=2)) == [last]


def test_remove_drops_record_from_indexes(filled):
    catalog, ids = filled
    assert catalog.remove(ids[1]) is True
    assert catalog.search(Record(name="Beat")) == []
    assert catalog.search(Record(artist="Michael")) == []
    assert catalog.search(Record(album="Thriller")) == []
    assert ids[1] not in catalog.search(Record(genres=1))
    assert catalog.records.get(ids[1]).active is False


def test_remove_keeps_shared_names(filled):
    catalog, ids = filled
    catalog.remove(ids[0])
    assert catalog.search(Record(artist="Charlie Brown Jr")) == [ids[5]]
    catalog.remove(ids[5])
    assert catalog.search(Record(artist="Charlie")) == []


def test_removed_id_is_reused(filled):
    catalog, ids = filled
    catalog.remove(ids[3])
    new_id = catalog.add(_song(3))
    assert new_id == ids[3]
    assert catalog.search(Record(name="Twist")) == [new_id]


def test_remove_twice_returns_false(filled):
    catalog, ids = filled
    assert catalog.remove(ids[2]) is True
    assert catalog.remove(ids[2]) is False


def test_remove_unknown_id_raises(filled):
    catalog, _ = filled
    with pytest.raises(KeyError):
        catalog.remove(999)


def test_bad_characters_consume_no_id(catalog):
    with pytest.raises(ValueError):
        catalog.add(Record(name="AC/DC", artist="Band", album="Album"))
    rid = catalog.add(Record(name="Back", artist="Band", album="Album"))
    assert catalog.records.free_list.last_id == rid + 1
    assert catalog.search(Record(name="Back")) == [rid]


def test_same_text_in_two_fields(catalog):
    rid = catalog.add(Record(name="Echo", artist="Echo", album="Echo"))
    assert catalog.search(Record(name="Echo")) == [rid]
    assert catalog.remove(rid) is True
    assert catalog.search(Record(name="Echo")) == []


def test_data_persists_after_reopen(tmp_path):
    initialize(tmp_path)
    with Catalog(tmp_path) as cat:
        rid = cat.add(_song(4, tags=4))
    with Catalog(tmp_path) as cat:
        assert cat.search(Record(artist="Eminem")) == [rid]
        assert cat.search(Record(tags=4)) == [rid]


def test_missing_files_raise(tmp_path):
    with pytest.raises(FileNotFoundError):
        Catalog(tmp_path / "nothing")