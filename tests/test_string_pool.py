import pytest

from idlmeta.string_pool import StringPool


def _read_at(pool, offset):
    data = pool.data()
    end = data.index(0, offset)
    return data[offset:end].decode("utf-8")


def test_new_pool_is_empty():
    pool = StringPool()
    assert len(pool) == 0
    assert pool.data() == b""


def test_first_string_starts_at_zero():
    pool = StringPool()
    pool.add("Module")
    assert pool.offset("Module") == 0
    assert pool.data() == b"Module\x00"


@pytest.mark.parametrize("words", [["a"], ["alpha", "beta", "gamma"], ["x", "yy", "zzz", "wwww"]])
def test_strings_read_back_from_their_offsets(words):
    pool = StringPool()
    for word in words:
        pool.add(word)
    for word in words:
        assert _read_at(pool, pool.offset(word)) == word


def test_size_counts_terminators():
    pool = StringPool()
    words = ["one", "three", "seven"]
    for word in words:
        pool.add(word)
    assert len(pool) == sum(len(w.encode()) + 1 for w in words)
    assert len(pool.data()) == len(pool)


def test_duplicates_are_stored_once():
    pool = StringPool()
    pool.add("name")
    size = len(pool)
    first = pool.offset("name")
    pool.add("name")
    assert len(pool) == size
    assert pool.offset("name") == first


def test_empty_and_none_are_ignored():
    pool = StringPool()
    pool.add("")
    pool.add(None)
    assert len(pool) == 0
    assert "" not in pool


def test_contains():
    pool = StringPool()
    pool.add("present")
    assert "present" in pool
    assert "absent" not in pool


def test_unknown_string_maps_to_zero():
    pool = StringPool()
    pool.add("first")
    pool.add("second")
    assert pool.offset("missing") == 0
    assert pool.offset(None) == 0


def test_offsets_are_distinct_and_increasing():
    pool = StringPool()
    words = ["a", "bb", "ccc"]
    for word in words:
        pool.add(word)
    offsets = [pool.offset(w) for w in words]
    assert offsets == sorted(offsets)
    assert len(set(offsets)) == len(words)


def test_non_ascii_round_trip():
    pool = StringPool()
    pool.add("größe")
    pool.add("after")
    assert _read_at(pool, pool.offset("größe")) == "größe"
    assert _read_at(pool, pool.offset("after")) == "after"