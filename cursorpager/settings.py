from __future__ import annotations

import dataclasses
from typing import Optional, TYPE_CHECKING


if TYPE_CHECKING:
    import sqlalchemy as sa
    from .typing import Row


@dataclasses.dataclass
class PagerSettings:
    """ Settings for CursorPaginator

    This object defines additional behavior for pagination:
    page size, request parameter names, strictness, customization hooks.
    """
    # The number of items per page you get by default, if not specified
    per_page: int = 15

    # The max number of items per page, regardless of what's been requested
    max_per_page: Optional[int] = None

    # Name of the request parameter that carries the cursor
    cursor_name: str = 'cursor'

    # Name of the key inside the cursor that tells the direction
    cursor_pointer_name: str = '_pointsToNextItems'

    # Fail when the explicit cursor column is not sorted by the query.
    # By default, it is silently assumed to be sorted ascending
    strict_sort_column: bool = False

    # ### Callbacks for CursorPaginator

    def get_final_per_page(self, per_page: Optional[int]) -> int:
        """ Callback that fine-tunes the page size by applying default and max values """
        # Apply default
        if not per_page or per_page < 1:
            per_page = self.per_page

        # Apply max
        if self.max_per_page:
            per_page = min(per_page, self.max_per_page)

        # Done
        return per_page

    def customize_statement(self, stmt: sa.sql.Select) -> sa.sql.Select:
        """ Callback that customizes the page statement

        Used by: PageFetcher to customize the statement after the range predicate, ordering and limit were applied.
        In the backward direction, it is applied to the outer (wrapping) statement.

        Default behavior: none
        You can override this method for custom behavior
        """
        return stmt

    def customize_rows(self, rows: list[Row]) -> list[Row]:
        """ Callback that customizes fetched rows

        Used by: CursorPaginator right after the lookahead row was trimmed.

        Default behavior: none
        You can override this method for custom behavior
        """
        return rows
