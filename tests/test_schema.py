import pytest

from relalg.dtypes import Domain
from relalg.errors import (
    SchemaDefinitionError,
    SchemaMismatch,
    TypeMismatch,
    UnresolvedAttribute,
)
from relalg.index import KeyType
from relalg.schema import Column, Schema


movie_schema = Schema.from_strings(
    'title year length genre studioName producerNo',
    'String Integer Integer String String Integer',
    'title year',
)


def test_from_strings():
    print(movie_schema.pretty_str())
    assert len(movie_schema) == 6
    assert movie_schema.attributes[0] == 'title'
    assert movie_schema.domains[1] == Domain.INTEGER32
    assert movie_schema.key == ('title', 'year')
    assert movie_schema.key_positions == (0, 1)


@pytest.mark.parametrize('name,domain', [
    ('Long', Domain.INTEGER64),
    ('Integer', Domain.INTEGER32),
    ('Short', Domain.INTEGER16),
    ('Byte', Domain.INTEGER8),
    ('Double', Domain.FLOAT64),
    ('Float', Domain.FLOAT32),
    ('Character', Domain.CHARACTER),
    ('String', Domain.STRING),
    ('Integer64', Domain.INTEGER64),
    ('f32', Domain.FLOAT32),
    ('char', Domain.CHARACTER),
])
def test_domain_names(name, domain):
    assert Domain.parse(name) == domain


def test_bad_definitions():
    with pytest.raises(SchemaDefinitionError):
        Domain.parse('Boolean')

    with pytest.raises(SchemaDefinitionError):
        Schema.from_strings('a b', 'Integer', 'a')

    with pytest.raises(SchemaDefinitionError):
        Schema.from_strings('a a', 'Integer Integer', 'a')

    with pytest.raises(SchemaDefinitionError):
        Schema.from_strings('a b', 'Integer Integer', 'c')

    with pytest.raises(SchemaDefinitionError):
        Schema([('a', Domain.INTEGER32)], ())


def test_domain_accepts():
    assert Domain.INTEGER8.accepts(127)
    assert Domain.INTEGER8.accepts(-128)
    assert not Domain.INTEGER8.accepts(128)
    assert Domain.INTEGER64.accepts(2 ** 63 - 1)
    assert not Domain.INTEGER64.accepts(2 ** 63)
    assert not Domain.INTEGER32.accepts(True)
    assert not Domain.INTEGER32.accepts(1.0)

    assert Domain.FLOAT64.accepts(1e300)
    assert not Domain.FLOAT64.accepts(1)
    assert Domain.FLOAT32.accepts(1.5)
    assert Domain.FLOAT32.accepts(float('inf'))
    assert not Domain.FLOAT32.accepts(1e39)

    assert Domain.CHARACTER.accepts('F')
    assert not Domain.CHARACTER.accepts('FM')
    assert Domain.STRING.accepts('')
    assert not Domain.STRING.accepts(b'bytes')


def test_resolve_columns():
    assert movie_schema.resolve_column('genre') == 3
    assert movie_schema.resolve_column('nope') is None
    assert movie_schema.resolve_columns(['year', 'title']) == (1, 0)

    with pytest.raises(UnresolvedAttribute) as err:
        movie_schema.resolve_columns(['title', 'nope', 'nada'])

    assert err.value.names == ('nope', 'nada')


def test_compatible():
    same_domains = Schema.from_strings(
        'a b c d e f',
        'String Integer Integer String String Integer',
        'a',
    )
    assert movie_schema.compatible(same_domains)
    movie_schema.check_compatible(same_domains)

    shorter = Schema.from_strings('a b', 'String Integer', 'a')
    assert not movie_schema.compatible(shorter)
    with pytest.raises(SchemaMismatch) as err:
        movie_schema.check_compatible(shorter)

    assert err.value.position is None

    diverging = Schema.from_strings(
        'a b c d e f',
        'String Integer Long String String Integer',
        'a',
    )
    assert not movie_schema.compatible(diverging)
    with pytest.raises(SchemaMismatch) as err:
        movie_schema.check_compatible(diverging)

    assert err.value.position == 2


def test_type_check():
    row = ('Star_Wars', 1977, 124, 'sciFi', 'Fox', 12345)
    assert movie_schema.type_check(row)
    assert movie_schema.validate(list(row)) == row

    assert not movie_schema.type_check(('X',))
    assert not movie_schema.type_check(('Star_Wars', '1977', 124, 'sciFi', 'Fox', 12345))

    with pytest.raises(TypeMismatch) as err:
        movie_schema.validate(('Star_Wars', 1977, 124, 'sciFi', 'Fox', 2 ** 40))

    assert err.value.position == 5


def test_key_of():
    row = ('Star_Wars', 1977, 124, 'sciFi', 'Fox', 12345)
    assert movie_schema.key_of(row) == KeyType(('Star_Wars', 1977))


def test_project_key_policy():
    kept = movie_schema.project(['year', 'title', 'genre'])
    assert kept.attributes == ('year', 'title', 'genre')
    assert kept.key == ('title', 'year')

    replaced = movie_schema.project(['title', 'genre'])
    assert replaced.key == ('title', 'genre')


def test_disambiguate():
    studio = Schema.from_strings('name title title2', 'String String Integer', 'name title')
    renamed = studio.disambiguate(movie_schema.attributes)

    assert renamed.attributes == ('name', 'title2', 'title22')
    assert renamed.key == ('name', 'title2')
    assert renamed.domains == studio.domains

    # original untouched
    assert studio.attributes == ('name', 'title', 'title2')


def test_encode_roundtrip():
    meta = movie_schema.encode()
    assert Schema.from_like(meta) == movie_schema
    assert Schema.from_like(meta.to_dict()) == movie_schema
    assert Column.from_like(('x', 'Double')) == Column('x', Domain.FLOAT64)
