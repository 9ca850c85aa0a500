import os

import pytest
import sqlalchemy as sa
import sqlalchemy.orm

from cursorpager.testing import created_tables, insert

from .util.models import Base, User, Article, user_row, article_row


@pytest.fixture(scope='function')
def engine() -> sa.engine.Engine:
    return sa.create_engine(DATABASE_URL)


@pytest.fixture(scope='function')
def connection(engine: sa.engine.Engine) -> sa.engine.Connection:
    with engine.connect() as conn:
        yield conn


@pytest.fixture(scope='function')
def session(connection: sa.engine.Connection) -> sa.orm.Session:
    with sa.orm.Session(bind=connection) as ssn:
        yield ssn


@pytest.fixture(scope='function')
def tables(connection: sa.engine.Connection):
    """ Empty tables """
    with created_tables(connection, Base):
        yield


@pytest.fixture(scope='function')
def ten_users(connection: sa.engine.Connection, tables):
    """ Users with ids 1..10, every one of them has 2 articles """
    insert(connection, User, *(user_row(n) for n in range(1, 11)))
    insert(connection, Article, *(
        article_row(user_id * 10 + n, user_id)
        for user_id in range(1, 11)
        for n in (1, 2)
    ))


# URL of the database to connect to
DATABASE_URL = os.getenv('DATABASE_URL', 'sqlite://')
