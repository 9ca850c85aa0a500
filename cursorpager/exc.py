class BaseCursorPagerException(Exception):
    pass


class MalformedCursorError(BaseCursorPagerException):
    """ Invalid cursor provided by the User

    Reported when the token cannot be decoded into a cursor: bad base64, bad JSON, missing keys.
    This is a client error.
    """

    def __init__(self, cursor: str, reason: str):
        self.cursor = cursor
        self.reason = reason

        super().__init__(f'Malformed cursor: {reason}')


class InvalidColumnError(BaseCursorPagerException):
    """ Pagination mentioned an invalid column name

    Reported when the cursor column is not found on the statement or the SqlAlchemy model
    """

    def __init__(self, model: str, column_name: str, where: str):
        self.model = model
        self.column_name = column_name
        self.where = where

        super().__init__(f'Invalid column "{column_name}" for "{model}" specified in {where}')


class AmbiguousSortColumnError(BaseCursorPagerException):
    """ The explicit cursor column is not among the query's ORDER BY columns

    Only reported with `PagerSettings.strict_sort_column`.
    Otherwise, the column is silently assumed to be sorted ascending.
    """

    def __init__(self, column_name: str, sort_columns: list[str]):
        self.column_name = column_name
        self.sort_columns = sort_columns

        super().__init__(f'Cursor column "{column_name}" is not sorted by the query (sorted by: {sort_columns})')


class QueryExecutionError(BaseCursorPagerException):
    """ The database failed to execute the page query

    This class is used to augment SqlAlchemy errors: the original one is always chained
    """
