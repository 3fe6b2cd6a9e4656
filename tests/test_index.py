import random

import pytest

from relalg.errors import KeyConflict, MalformedCondition, TypeMismatch
from relalg.index import KeyType, PrimaryIndex


def test_btree_ordered_inserts():
    index = PrimaryIndex('numbers', order=2)
    keys = list(range(500))
    random.Random(0).shuffle(keys)

    for k in keys:
        index.insert(KeyType((k,)), (k, str(k)))

    assert len(index) == 500
    assert index.depth() > 2
    assert [k.values[0] for k in index] == list(range(500))

    for k in range(500):
        assert index.get(KeyType((k,))) == (k, str(k))

    assert index.get(KeyType((500,))) is None
    assert KeyType((-1,)) not in index


def test_btree_conflict_leaves_tree():
    index = PrimaryIndex('t', order=2)
    for k in range(10):
        index.insert(KeyType((k,)), (k,))

    with pytest.raises(KeyConflict):
        index.insert(KeyType((3,)), (99,))

    assert len(index) == 10
    assert index.get(KeyType((3,))) == (3,)


def test_btree_range():
    index = PrimaryIndex('t', order=3)
    for k in reversed(range(100)):
        index.insert(KeyType((k,)), (k,))

    got = [k.values[0] for k, _ in index.range(KeyType((10,)), KeyType((20,)))]
    assert got == list(range(10, 21))

    assert [k.values[0] for k, _ in index.range(hi=KeyType((2,)))] == [0, 1, 2]
    assert [k.values[0] for k, _ in index.range(lo=KeyType((97,)))] == [97, 98, 99]


def test_composite_key_order():
    a = KeyType(('Star_Wars', 1977))
    b = KeyType(('Star_Wars', 1980))
    c = KeyType(('Rocky', 1985))

    assert c < a < b
    assert a == KeyType(('Star_Wars', 1977))
    assert str(a) == '{Star_Wars, 1977}'


def test_select_by_key(movie):
    found = movie.select(('Star_Wars', 1977))
    assert found.rows == (('Star_Wars', 1977, 124, 'sciFi', 'Fox', 12345),)
    assert found.schema.key_of(found.rows[0]) == KeyType(('Star_Wars', 1977))

    assert len(movie.select(KeyType(('Star_Wars', 1990)))) == 0


def test_select_by_scalar_key(session):
    exec_ = session.movieExec
    assert exec_.select(32355).rows[0][0] == 'Harrison_Ford'

    with pytest.raises(TypeMismatch):
        exec_.select(3.5)

    with pytest.raises(TypeMismatch):
        session.movie.select(('Star_Wars',))


def test_select_by_string_key(studio, session):
    fox = ('Fox', 'Los_Angeles', 7777)
    assert studio.select('Fox').rows == (fox,)
    assert studio.select_key(('Fox',)).rows == (fox,)
    assert studio.select_key('Fox').rows == (fox,)
    assert len(studio.select('Paramount')) == 0

    # whitespace makes it a condition, and conditions only compare numbers
    with pytest.raises(MalformedCondition):
        studio.select('name == Fox')

    with pytest.raises(TypeMismatch):
        session.movieExec.select('32355')


def test_derived_tables_start_unindexed(movie):
    derived = movie.project('title year')
    assert len(derived) == len(movie)
    assert len(derived.index) == 0
    assert len(derived.select(('Star_Wars', 1977))) == 0


def test_index_pretty_str(studio):
    text = studio.index_pretty_str()
    print(text)
    lines = text.splitlines()
    assert lines[2] == "{DreamWorks} -> ['DreamWorks', 'Universal_City', 9999]"
