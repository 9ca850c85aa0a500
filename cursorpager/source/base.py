from __future__ import annotations

from collections import abc
from typing import Any

import sqlalchemy as sa

from cursorpager.sort import OrderClause, SortSpec, order_clauses_from_statement
from cursorpager.typing import Row, SAExecutor


class QuerySource:
    """ The query to paginate, and the knowledge of how to run it

    This is the interface that the Page Fetcher talks to.
    Implementations: RawSource (SqlAlchemy Core statements), ModelSource (SqlAlchemy ORM models).
    """
    # The statement to paginate
    stmt: sa.sql.Select

    def __init__(self, stmt: sa.sql.Select):
        self.stmt = stmt

    __slots__ = 'stmt',

    def order_clauses(self) -> list[OrderClause]:
        """ Get the ORDER BY clauses that the statement already has """
        return order_clauses_from_statement(self.stmt)

    def default_identifier(self) -> str:
        """ Get the name of the column that identifies rows: the primary key """
        raise NotImplementedError

    def resolve_column(self, name: str) -> sa.sql.ColumnElement:
        """ Get the column to use in the range predicate

        Raises:
            exc.InvalidColumnError
        """
        raise NotImplementedError

    def row_key(self, name: str) -> str:
        """ Get the name under which the column's value is available in result rows """
        raise NotImplementedError

    def unordered(self) -> sa.sql.Select:
        """ Get the statement without any ORDER BY or LIMIT: the pagination will add its own """
        return self.stmt.order_by(None).limit(None)

    def wrap(self, inner: sa.sql.Select, sort: SortSpec) -> sa.sql.Select:
        """ Wrap the statement into a sub-query and re-order its rows in the natural order

        Used with backward pagination: `inner` selects rows in the reverse order;
        the wrapping statement presents them in the natural order.
        """
        raise NotImplementedError

    def finalize(self, stmt: sa.sql.Select) -> sa.sql.Select:
        """ Last modification before the statement is executed: e.g. loader options """
        return stmt

    def execute(self, executor: SAExecutor, stmt: sa.sql.Select) -> list[Row]:
        """ Run the statement, get the rows """
        raise NotImplementedError

    def row_value(self, row: Row, key: str) -> Any:
        """ Get a column value from a row """
        if isinstance(row, abc.Mapping):
            return row[key]
        else:
            return getattr(row, key)

    def serialize_row(self, row: Row) -> dict:
        """ Convert a row into a dict """
        raise NotImplementedError
