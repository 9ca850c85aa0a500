""" Page Fetcher: build the bounded query, run it, detect more pages """

from __future__ import annotations

import logging
import operator
from dataclasses import dataclass
from typing import Optional

import sqlalchemy as sa

from cursorpager import exc
from cursorpager.cursor import Cursor
from cursorpager.sainfo.columns import coerce_column_value
from cursorpager.settings import PagerSettings
from cursorpager.sort import SortSpec
from cursorpager.source import QuerySource
from cursorpager.typing import Row, SAExecutor


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Page:
    """ A fetched page """
    # Result rows, in the natural order. No more than `per_page` of them
    rows: list[Row]

    # Are there more rows beyond this page, in the direction of travel?
    has_more_pages: bool

    # The number of items per page
    per_page: int


class PageFetcher:
    """ Page Fetcher: loads one page of rows using keyset pagination

    We always load one more row than needed: the "lookahead" row.
    If it's there, there are more pages in the direction of travel.

    First page, or forward direction ("next"):

        SELECT ... WHERE id > :boundary ORDER BY id ASC LIMIT :per_page + 1

    Backward direction ("prev"): select rows right before the boundary in the reverse order,
    then put them back into the natural order:

        SELECT pagination.*
        FROM (SELECT ... WHERE id < :boundary ORDER BY id DESC LIMIT :per_page + 1) AS pagination
        ORDER BY pagination.id ASC

    With a descending sort, the operators are swapped.
    """
    # The query to paginate
    source: QuerySource

    # The pagination column
    sort: SortSpec

    # The decoded cursor; `None` for the first page
    cursor: Optional[Cursor]

    # The number of items per page
    per_page: int

    settings: PagerSettings

    def __init__(self, source: QuerySource, sort: SortSpec, cursor: Optional[Cursor], per_page: int, settings: Optional[PagerSettings] = None):
        self.source = source
        self.sort = sort
        self.cursor = cursor
        self.per_page = per_page
        self.settings = settings or PagerSettings()

    __slots__ = 'source', 'sort', 'cursor', 'per_page', 'settings'

    @property
    def backwards(self) -> bool:
        """ Are we moving to the previous items? """
        return self.cursor is not None and self.cursor.points_to_prev

    def statement(self) -> sa.sql.Select:
        """ Build the statement that loads the page """
        column = self.source.resolve_column(self.sort.column)
        stmt = self.source.unordered()

        # Range predicate: rows beyond the boundary
        if self.cursor is not None:
            op = OPERATORS[self.sort.op(points_to_next=self.cursor.points_to_next)]
            stmt = stmt.where(op(column, self._boundary_value(column)))

        # Order, limit. We will always load one more row to check if there's another page.
        # Moving backwards, rows nearest to the boundary come first: the reverse order
        stmt = (
            stmt
            .order_by(self.sort.order_by(column, reverse=self.backwards))
            .limit(self.per_page + 1)
        )

        # Moving backwards: wrap it, restore the natural order
        if self.backwards:
            stmt = self.source.wrap(stmt, self.sort)
        else:
            stmt = self.source.finalize(stmt)

        # Done
        return self.settings.customize_statement(stmt)

    def fetch(self, executor: SAExecutor) -> Page:
        """ Load the page

        Raises:
            exc.MalformedCursorError: cursor value does not fit the column
            exc.QueryExecutionError: the database has failed
        """
        stmt = self.statement()
        logger.debug('Fetching %d rows by %r: direction=%s, boundary=%r',
                     self.per_page, self.sort.column,
                     self.cursor.direction.value if self.cursor else None,
                     self.cursor.value if self.cursor else None)

        try:
            rows = self.source.execute(executor, stmt)
        except sa.exc.SQLAlchemyError as e:
            raise exc.QueryExecutionError(f'Failed to load the page: {e}') from e

        return self.inspect_rows(rows)

    def inspect_rows(self, rows: list[Row]) -> Page:
        """ Inspect the result set: detect the next page, remove the lookahead row """
        has_more_pages = len(rows) > self.per_page

        # We've loaded one extra row. Now remove it.
        # It's the one farthest from the boundary: the first row when moving backwards, the last row otherwise
        if has_more_pages:
            rows.pop(0 if self.backwards else -1)

        return Page(rows=rows, has_more_pages=has_more_pages, per_page=self.per_page)

    def _boundary_value(self, column: sa.sql.ColumnElement):
        assert self.cursor is not None
        try:
            return coerce_column_value(column, self.cursor.value)
        except ValueError as e:
            raise exc.MalformedCursorError(str(self.cursor.value), f'invalid value for "{self.sort.column}"') from e


# Comparison operators for the range predicate
OPERATORS = {
    '>': operator.gt,
    '<': operator.lt,
}
