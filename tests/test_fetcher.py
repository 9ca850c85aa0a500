from typing import Optional

import pytest
import sqlalchemy as sa

from cursorpager import exc
from cursorpager.cursor import Cursor, CursorDirection
from cursorpager.fetcher import PageFetcher
from cursorpager.sort import SortSpec
from cursorpager.source import RawSource, ModelSource
from cursorpager.testing import stmt2sql, insert, ExpectedQueryCounter

from .util.models import User, users, user_row


NEXT, PREV = CursorDirection.NEXT, CursorDirection.PREV


@pytest.mark.parametrize(('sort', 'cursor', 'expected_query_lines'), [
    # First page
    (SortSpec('id', False), None, [
        'SELECT u.id, u.login, u.ctime',
        'FROM u ORDER BY u.id ASC',
        'LIMIT 4',
    ]),
    # Next page
    (SortSpec('id', False), Cursor(NEXT, 3), [
        'WHERE u.id > 3',
        'ORDER BY u.id ASC',
        'LIMIT 4',
    ]),
    # Prev page: reverse order inside, natural order outside
    (SortSpec('id', False), Cursor(PREV, 4), [
        'SELECT pagination.id, pagination.login, pagination.ctime',
        'FROM (SELECT u.id AS id, u.login AS login, u.ctime AS ctime',
        'WHERE u.id < 4',
        'ORDER BY u.id DESC',
        'LIMIT 4) AS pagination ORDER BY pagination.id ASC',
    ]),
    # Descending: first page
    (SortSpec('id', True), None, [
        'ORDER BY u.id DESC',
        'LIMIT 4',
    ]),
    # Descending: next page, inverted operator
    (SortSpec('id', True), Cursor(NEXT, 7), [
        'WHERE u.id < 7',
        'ORDER BY u.id DESC',
    ]),
    # Descending: prev page, inverted operator
    (SortSpec('id', True), Cursor(PREV, 7), [
        'WHERE u.id > 7',
        'ORDER BY u.id ASC',
        'LIMIT 4) AS pagination ORDER BY pagination.id DESC',
    ]),
    # Qualified column name
    (SortSpec('u.login', False), Cursor(NEXT, 'user-3'), [
        'WHERE u.login > user-3',
        'ORDER BY u.login ASC',
    ]),
])
def test_fetcher_sql(sort: SortSpec, cursor: Optional[Cursor], expected_query_lines: list[str]):
    """ Typical test: what SQL is generated """
    fetcher = PageFetcher(RawSource(sa.select(users)), sort, cursor, per_page=3)
    assert_statement_lines(fetcher.statement(), *expected_query_lines)


def test_fetcher_sql_replaces_order_and_limit():
    """ The statement's own ORDER BY and LIMIT are replaced """
    stmt = sa.select(users).where(users.c.login != 'admin').order_by(users.c.ctime.desc(), users.c.login).limit(100)
    fetcher = PageFetcher(RawSource(stmt), SortSpec('ctime', True), None, per_page=10)

    sql = assert_statement_lines(fetcher.statement(),
        'WHERE u.login != admin',
        'ORDER BY u.ctime DESC',
        'LIMIT 11',
    )
    assert 'u.login ASC' not in sql
    assert 'LIMIT 100' not in sql


@pytest.mark.parametrize(('cursor', 'rows', 'expected_ids', 'expected_has_more_pages'), [
    # No rows
    (None, [], [], False),
    (Cursor(PREV, 10), [], [], False),
    # Fewer rows than a page
    (None, [1, 2], [1, 2], False),
    # Exactly one page
    (None, [1, 2, 3], [1, 2, 3], False),
    (Cursor(NEXT, 3), [4, 5, 6], [4, 5, 6], False),
    (Cursor(PREV, 4), [1, 2, 3], [1, 2, 3], False),
    # One more row: the lookahead. It's the farthest from the boundary
    (None, [1, 2, 3, 4], [1, 2, 3], True),
    (Cursor(NEXT, 3), [4, 5, 6, 7], [4, 5, 6], True),
    (Cursor(PREV, 8), [4, 5, 6, 7], [5, 6, 7], True),
])
def test_fetcher_lookahead(cursor: Optional[Cursor], rows: list[int], expected_ids: list[int], expected_has_more_pages: bool):
    """ The lookahead row is removed """
    fetcher = PageFetcher(RawSource(sa.select(users)), SortSpec('id', False), cursor, per_page=3)
    page = fetcher.inspect_rows([{'id': id} for id in rows])

    assert [row['id'] for row in page.rows] == expected_ids
    assert page.has_more_pages == expected_has_more_pages
    assert page.per_page == 3


@pytest.mark.parametrize(('available_ids', 'expected_ids', 'expected_has_more_pages'), [
    # 5 rows ahead of the boundary
    (range(1, 11), [4, 5, 6], True),
    # exactly 3 rows ahead
    (range(1, 7), [4, 5, 6], False),
])
def test_fetcher_results(engine: sa.engine.Engine, connection: sa.engine.Connection, tables, available_ids, expected_ids: list[int], expected_has_more_pages: bool):
    """ Real data: one query per page """
    insert(connection, User, *(user_row(n) for n in available_ids))

    fetcher = PageFetcher(RawSource(sa.select(users)), SortSpec('id', False), Cursor(NEXT, 3), per_page=3)
    with ExpectedQueryCounter(engine, 1, 'Expected one query per page'):
        page = fetcher.fetch(connection)

    assert [row['id'] for row in page.rows] == expected_ids
    assert page.has_more_pages == expected_has_more_pages


def test_fetcher_query_error(connection: sa.engine.Connection):
    """ Database errors are reported """
    no_such_table = sa.table('no_such_table', sa.column('id'))
    fetcher = PageFetcher(RawSource(sa.select(no_such_table)), SortSpec('id', False), None, per_page=3)

    with pytest.raises(exc.QueryExecutionError) as e:
        fetcher.fetch(connection)

    assert isinstance(e.value.__cause__, sa.exc.SQLAlchemyError)


def test_fetcher_date_cursor():
    """ Date cursors are converted back into dates """
    fetcher = PageFetcher(RawSource(sa.select(users)), SortSpec('ctime', False), Cursor(NEXT, '2021-01-02 03:04:05'), per_page=3)
    assert_statement_lines(fetcher.statement(), 'WHERE u.ctime > 2021-01-02 03:04:05')

    # Garbage: a malformed cursor
    fetcher = PageFetcher(RawSource(sa.select(users)), SortSpec('ctime', False), Cursor(NEXT, 'yesterday'), per_page=3)
    with pytest.raises(exc.MalformedCursorError):
        fetcher.statement()


def test_fetcher_model_sql():
    """ Model source: the sub-query is loaded as model instances """
    fetcher = PageFetcher(ModelSource(User, load=['articles']), SortSpec('id', False), Cursor(PREV, 4), per_page=3)
    assert_statement_lines(fetcher.statement(),
        'WHERE u.id < 4',
        'ORDER BY u.id DESC',
        'LIMIT 4) AS pagination ORDER BY pagination.id ASC',
    )


def test_fetcher_invalid_column():
    """ Unknown columns are reported """
    with pytest.raises(exc.InvalidColumnError):
        PageFetcher(RawSource(sa.select(users)), SortSpec('nope', False), None, per_page=3).statement()

    with pytest.raises(exc.InvalidColumnError):
        PageFetcher(RawSource(sa.select(users)), SortSpec('a.id', False), None, per_page=3).statement()

    with pytest.raises(exc.InvalidColumnError):
        PageFetcher(ModelSource(User), SortSpec('nope', False), None, per_page=3).statement()

    with pytest.raises(exc.InvalidColumnError):
        PageFetcher(ModelSource(User), SortSpec('articles', False), None, per_page=3).statement()


def assert_statement_lines(stmt: sa.sql.ClauseElement, *expected_lines: str) -> str:
    """ Find the provided lines inside a statement or fail """
    sql = stmt2sql(stmt)

    for line in expected_lines:
        assert line.strip() in sql, f'{line!r} not found in {sql!r}'

    return sql
