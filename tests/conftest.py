import pytest

from relalg._ctx import Session
from relalg._testing import movie_db


@pytest.fixture
def session(tmp_path) -> Session:
    return movie_db(Session(datadir=tmp_path))


@pytest.fixture
def movie(session):
    return session.movie


@pytest.fixture
def cinema(session):
    return session.cinema


@pytest.fixture
def studio(session):
    return session.studio
