""" JSON tools: encode values that the json module can't handle """

import datetime
import decimal
import uuid
from typing import Any


def jsonable(value: Any) -> Any:
    """ `default=` handler for json.dumps()

    Date and time values are represented as text, never as timestamps:
    this way a cursor value is directly comparable to the column value.

    Example:
        datetime(2021, 1, 2, 3, 4, 5) -> '2021-01-02 03:04:05'
    """
    # NOTE: datetime is a subclass of date: check it first
    if isinstance(value, datetime.datetime):
        return value.isoformat(sep=' ')
    elif isinstance(value, (datetime.date, datetime.time)):
        return value.isoformat()
    elif isinstance(value, (uuid.UUID, decimal.Decimal)):
        return str(value)
    else:
        raise TypeError(f'Object of type {type(value).__name__} is not JSON serializable')
