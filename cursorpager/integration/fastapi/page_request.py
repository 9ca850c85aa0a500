from __future__ import annotations

from collections import abc
from dataclasses import dataclass
from typing import Any, Optional

import fastapi

from cursorpager.paginator import CursorPaginator
from cursorpager.settings import PagerSettings
from cursorpager.source import QuerySource


@dataclass
class PageRequest:
    """ Pagination input, taken from the request """
    # The cursor string, if provided
    cursor: Optional[str]

    # The requested number of items per page, if provided
    per_page: Optional[int]

    # Current URL, without the query string
    path: str

    # Query parameters of the request
    query_params: list[tuple[str, str]]

    # Pagination settings
    settings: PagerSettings

    def paginator(self, source: QuerySource, **kwargs: Any) -> CursorPaginator:
        """ Make a paginator for this request

        Raises:
            exc.MalformedCursorError: the cursor is invalid
        """
        return CursorPaginator(
            source,
            cursor=self.cursor,
            per_page=self.per_page,
            path=self.path,
            query_params=self.query_params,
            settings=self.settings,
            **kwargs
        )


def page_request(settings: Optional[PagerSettings] = None) -> abc.Callable[..., PageRequest]:
    """ Make a dependency that gets pagination input from the request parameters

    Example:
        @app.get('/users')
        def users(page: PageRequest = Depends(page_request())):
            paginator = page.paginator(RawSource(sa.select(users)))
            paginator.fetchall(connection)
            return paginator.to_dict()

        /users?cursor=eyJpZCI6MywiX3BvaW50c1RvTmV4dEl0ZW1zIjp0cnVlfQ==
    """
    settings = settings or PagerSettings()

    def dependency(
            request: fastapi.Request,
            cursor: Optional[str] = fastapi.Query(
                None,
                alias=settings.cursor_name,
                title='Pagination. The cursor to the page. Omit to get the first page.',
            ),
            per_page: Optional[int] = fastapi.Query(
                None,
                title='Pagination. The number of items per page.',
            ),
    ) -> PageRequest:
        return PageRequest(
            cursor=cursor,
            per_page=per_page,
            path=str(request.url.replace(query='')),
            query_params=request.query_params.multi_items(),
            settings=settings,
        )

    return dependency
