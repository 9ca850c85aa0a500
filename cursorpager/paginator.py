from __future__ import annotations

import dataclasses
import json
from collections import abc
from typing import Any, Optional, NamedTuple, Union
from urllib.parse import urlencode

import sqlalchemy as sa

from cursorpager.cursor import Cursor, CursorDirection, encode_cursor, decode_cursor
from cursorpager.fetcher import Page, PageFetcher
from cursorpager.settings import PagerSettings
from cursorpager.sort import SortSpec, resolve_sort
from cursorpager.source import QuerySource
from cursorpager.typing import QueryParams, Row, SAExecutor, Scalar
from cursorpager.util.json import jsonable


class PageLinks(NamedTuple):
    """ Links to the prev/next pages """
    # Link to the previous page, if available
    prev: Optional[str]

    # Link to the next page, if available
    next: Optional[str]


class CursorPaginator(abc.Sequence):
    """ Cursor pagination for a query

    Example:
        paginator = CursorPaginator(
            RawSource(sa.select(users).order_by(users.c.id)),
            cursor=request.query_params.get('cursor'),
            per_page=10,
            path=request.url.path,
            query_params=request.query_params.multi_items(),
        )
        paginator.fetchall(connection)

        return paginator.to_dict()

    One instance serves one request: it loads exactly one page.
    """
    # The query to paginate
    source: QuerySource

    # Settings: page size, parameter names, etc
    settings: PagerSettings

    # The number of items per page
    per_page: int

    # The pagination column
    sort: SortSpec

    # Name of the pagination column in result rows. Also the key inside the cursor
    cursor_key: str

    # The decoded cursor; `None` for the first page
    cursor: Optional[Cursor]

    # Base path for page URLs
    path: str

    # Query parameters to keep in page URLs
    query_params: list[tuple[str, Any]]

    # The fetched page; `None` before fetchall()
    page: Optional[Page]

    def __init__(self,
                 source: QuerySource,
                 *,
                 cursor: Optional[str] = None,
                 per_page: Optional[int] = None,
                 cursor_column: Optional[str] = None,
                 path: str = '/',
                 query_params: QueryParams = (),
                 settings: Optional[PagerSettings] = None):
        """ Prepare pagination: pick the column, decode the cursor

        Args:
            source: The query to paginate
            cursor: The cursor string from the request, if any
            per_page: The number of items per page. Default: `settings.per_page`
            cursor_column: The column to paginate with. Default: the first sort column, or the primary key
            path: Base path for page URLs
            query_params: Request query parameters. All but the cursor are kept in page URLs
            settings: Pagination settings

        Raises:
            exc.MalformedCursorError: the cursor is invalid
            exc.InvalidColumnError: the pagination column is not found
            exc.AmbiguousSortColumnError: (only in strict mode)
        """
        self.settings = settings or PagerSettings()
        self.source = source
        self.per_page = self.settings.get_final_per_page(per_page)
        self.path = path.rstrip('/') if path != '/' else path
        self.query_params = _params_without(query_params, self.settings.cursor_name)

        # Pick the pagination column
        self.sort = resolve_sort(
            source.order_clauses(),
            cursor_column,
            source.default_identifier(),
            strict=self.settings.strict_sort_column,
        )
        self.cursor_key = source.row_key(self.sort.column)

        # No cursor: we are on the first page. This never changes.
        self._is_first_page = not cursor
        self.cursor = decode_cursor(cursor, self.cursor_key, pointer_name=self.settings.cursor_pointer_name)

        self.page = None

    def statement(self) -> sa.sql.Select:
        """ Get the statement that loads the page """
        return self._fetcher().statement()

    def fetchall(self, executor: SAExecutor) -> list[Row]:
        """ Load the page

        Args:
            executor: a Connection; or a Session (required for model sources)

        Raises:
            exc.QueryExecutionError: the database has failed
        """
        page = self._fetcher().fetch(executor)
        page = dataclasses.replace(page, rows=self.settings.customize_rows(page.rows))
        self.page = page
        return page.rows

    # region Page state

    @property
    def items(self) -> list[Row]:
        """ Rows of the page """
        return self._get_page().rows

    def has_more_pages(self) -> bool:
        """ Are there more items in the direction of travel? """
        return self._get_page().has_more_pages

    def is_first_page(self) -> bool:
        """ Is this the first page? (reached without a cursor) """
        return self._is_first_page

    @property
    def direction(self) -> CursorDirection:
        """ The direction of travel. The first page goes forward """
        return self.cursor.direction if self.cursor is not None else CursorDirection.NEXT

    def first_item(self) -> Optional[Scalar]:
        """ Get the cursor column value of the first row """
        items = self.items
        return self.source.row_value(items[0], self.cursor_key) if items else None

    def last_item(self) -> Optional[Scalar]:
        """ Get the cursor column value of the last row """
        items = self.items
        return self.source.row_value(items[-1], self.cursor_key) if items else None

    # endregion

    # region Cursors & links

    def next_cursor(self) -> Optional[str]:
        """ Get the cursor to the next page, if there is one """
        # Moving forward, and nothing's beyond? No next page.
        if self.direction == CursorDirection.NEXT and not self.has_more_pages():
            return None

        return self._encode_cursor(self.last_item(), points_to_next=True)

    def prev_cursor(self) -> Optional[str]:
        """ Get the cursor to the previous page, if there is one """
        # Moving backwards, and nothing's beyond? No prev page.
        if self.direction == CursorDirection.PREV and not self.has_more_pages():
            return None

        return self._encode_cursor(self.first_item(), points_to_next=False)

    def page_links(self) -> PageLinks:
        """ Get cursors to the previous and next pages """
        return PageLinks(prev=self.prev_cursor(), next=self.next_cursor())

    def url(self, cursor: str) -> str:
        """ Get the URL of a page: path, query parameters, and the cursor """
        query = urlencode([*self.query_params, (self.settings.cursor_name, cursor)], doseq=True)
        return self.path + ('&' if '?' in self.path else '?') + query

    def next_page_url(self) -> Optional[str]:
        """ Get the URL of the next page, if there is one """
        cursor = self.next_cursor()
        return self.url(cursor) if cursor is not None else None

    def prev_page_url(self) -> Optional[str]:
        """ Get the URL of the previous page, if there is one """
        cursor = self.prev_cursor()
        return self.url(cursor) if cursor is not None else None

    def page_urls(self) -> PageLinks:
        """ Get URLs of the previous and next pages """
        return PageLinks(prev=self.prev_page_url(), next=self.next_page_url())

    # endregion

    # region Serialization

    def to_dict(self) -> dict:
        """ Get the page as a JSON-serializable dict """
        return {
            'data': [self.source.serialize_row(row) for row in self.items],
            'path': self.path,
            'per_page': int(self.per_page),
            'next_cursor': _cast_cursor(self.next_cursor()),
            'prev_cursor': _cast_cursor(self.prev_cursor()),
            'next_page_url': self.next_page_url(),
            'prev_page_url': self.prev_page_url(),
        }

    def to_json(self, **kwargs) -> str:
        """ Get the page as JSON """
        return json.dumps(self.to_dict(), default=jsonable, **kwargs)

    # endregion

    # region Sequence

    def __len__(self) -> int:
        return len(self.items)

    def __getitem__(self, index: Union[int, slice]):
        return self.items[index]

    def __iter__(self):
        return iter(self.items)

    # endregion

    def _fetcher(self) -> PageFetcher:
        return PageFetcher(self.source, self.sort, self.cursor, self.per_page, self.settings)

    def _get_page(self) -> Page:
        # Not possible to inspect the page before it's loaded
        if self.page is None:
            raise RuntimeError(
                "The page is not loaded yet: items, cursors and links are only available after fetching. "
                "Call fetchall() first."
            )
        return self.page

    def _encode_cursor(self, value: Optional[Scalar], *, points_to_next: bool) -> Optional[str]:
        return encode_cursor(
            self.cursor_key, value, points_to_next,
            is_first_page=self._is_first_page,
            pointer_name=self.settings.cursor_pointer_name,
        )


def _params_without(query_params: QueryParams, name: str) -> list[tuple[str, Any]]:
    """ Get query parameters as a list of pairs, without the named one """
    items = query_params.items() if isinstance(query_params, abc.Mapping) else query_params
    return [(key, value) for key, value in items if key != name]


def _cast_cursor(value: Optional[str]) -> Optional[str]:
    return None if value is None else str(value)
