from __future__ import annotations

from relalg._ctx import Session
from relalg.table import Table


movie_rows: tuple[tuple, ...] = (
    ('Star_Wars', 1977, 124, 'sciFi', 'Fox', 12345),
    ('Star_Wars_2', 1980, 124, 'sciFi', 'Fox', 12345),
    ('Rocky', 1985, 200, 'action', 'Universal', 12125),
    ('Rambo', 1978, 100, 'action', 'Universal', 32355),
)


cinema_rows: tuple[tuple, ...] = (
    ('Galaxy_Quest', 1999, 104, 'comedy', 'DreamWorks', 67890),
    ('Star_Wars', 1977, 124, 'sciFi', 'Fox', 12345),
)


movie_star_rows: tuple[tuple, ...] = (
    ('Carrie_Fisher', 'Hollywood', 'F', '9/9/99'),
    ('Mark_Hamill', 'Brentwood', 'M', '8/8/88'),
    ('Harrison_Ford', 'Beverly_Hills', 'M', '7/7/77'),
)


stars_in_rows: tuple[tuple, ...] = (
    ('Carrie_Fisher', 'Star_Wars', 1977),
)


movie_exec_rows: tuple[tuple, ...] = (
    ('Mark_Hamill', 'Hollywood', 12345, 10000.00),
    ('Harrison_Ford', 'Beverly_Hills', 32355, 20000.50),
)


studio_rows: tuple[tuple, ...] = (
    ('Fox', 'Los_Angeles', 7777),
    ('Universal', 'Universal_City', 8888),
    ('DreamWorks', 'Universal_City', 9999),
)


def movie_db(session: Session | None = None) -> Session:
    '''
    Build the sample movie database: movie, cinema, movieStar, starsIn,
    movieExec and studio, all registered in (and named by) one session.

    '''
    session = session or Session()

    tables: list[tuple[Table, tuple[tuple, ...]]] = [
        (
            session.create_table(
                'movie',
                'title year length genre studioName producerNo',
                'String Integer Integer String String Integer',
                'title year',
            ),
            movie_rows,
        ),
        (
            session.create_table(
                'cinema',
                'title year length genre studioName producerNo',
                'String Integer Integer String String Integer',
                'title year',
            ),
            cinema_rows,
        ),
        (
            session.create_table(
                'movieStar',
                'name address gender birthdate',
                'String String Character String',
                'name',
            ),
            movie_star_rows,
        ),
        (
            session.create_table(
                'starsIn',
                'starName movieTitle movieYear',
                'String String Integer',
                'starName movieTitle movieYear',
            ),
            stars_in_rows,
        ),
        (
            session.create_table(
                'movieExec',
                'name address certNo fee',
                'String String Integer Double',
                'certNo',
            ),
            movie_exec_rows,
        ),
        (
            session.create_table(
                'studio',
                'name address presNo',
                'String String Integer',
                'name',
            ),
            studio_rows,
        ),
    ]

    for table, rows in tables:
        for row in rows:
            table.insert_or_raise(row)

    return session
