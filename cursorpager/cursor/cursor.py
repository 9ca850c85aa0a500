from __future__ import annotations

import binascii
import json
from enum import Enum
from typing import Optional, NamedTuple

from cursorpager import exc
from cursorpager.typing import Scalar

from .encode import encode_opaque_cursor, decode_opaque_cursor


# Default name of the direction key inside the cursor
POINTER_NAME = '_pointsToNextItems'


class CursorDirection(Enum):
    NEXT = 'next'
    PREV = 'prev'


class Cursor(NamedTuple):
    """ A decoded cursor: the boundary value and the direction of travel

    The first page has no cursor at all: use `None`.
    """
    # Where to go from the boundary: to the next items, or to the previous ones
    direction: CursorDirection

    # Value of the cursor column of the boundary row
    value: Scalar

    @property
    def points_to_next(self) -> bool:
        return self.direction == CursorDirection.NEXT

    @property
    def points_to_prev(self) -> bool:
        return self.direction == CursorDirection.PREV

    def encode(self, column_name: str, *, pointer_name: str = POINTER_NAME) -> str:
        return encode_opaque_cursor({
            column_name: self.value,
            pointer_name: self.points_to_next,
        })

    @classmethod
    def decode(cls, cursor: str, column_name: str, *, pointer_name: str = POINTER_NAME) -> Cursor:
        """ Decode a cursor string

        Raises:
            exc.MalformedCursorError: the cursor is invalid
        """
        if not isinstance(cursor, str) or not cursor:
            raise exc.MalformedCursorError(cursor, 'empty cursor')

        try:
            data = decode_opaque_cursor(cursor)
        except (binascii.Error, ValueError) as e:  # JSONDecodeError and UnicodeDecodeError are ValueErrors
            raise exc.MalformedCursorError(cursor, 'cannot decode') from e

        if not isinstance(data, dict):
            raise exc.MalformedCursorError(cursor, 'not an object')
        if data.get(column_name) is None:
            raise exc.MalformedCursorError(cursor, f'no value for "{column_name}"')
        if not isinstance(data[column_name], (str, int, float)):
            raise exc.MalformedCursorError(cursor, f'invalid value for "{column_name}"')
        if not isinstance(data.get(pointer_name), bool):
            raise exc.MalformedCursorError(cursor, f'no direction in "{pointer_name}"')

        return cls(
            direction=CursorDirection.NEXT if data[pointer_name] else CursorDirection.PREV,
            value=data[column_name],
        )


def encode_cursor(column_name: str, value: Optional[Scalar], points_to_next: bool, *,
                  is_first_page: bool = False, pointer_name: str = POINTER_NAME) -> Optional[str]:
    """ Encode a cursor that points to the next or previous items, if such a cursor makes sense

    Returns:
        None when there's no boundary value, or when pointing back from the first page
    """
    if value is None:
        return None
    if not points_to_next and is_first_page:
        return None

    direction = CursorDirection.NEXT if points_to_next else CursorDirection.PREV
    return Cursor(direction, value).encode(column_name, pointer_name=pointer_name)


def decode_cursor(cursor: Optional[str], column_name: str, *, pointer_name: str = POINTER_NAME) -> Optional[Cursor]:
    """ Decode a cursor from the request, if provided

    Returns:
        None when there's no cursor (the first page)

    Raises:
        exc.MalformedCursorError: the cursor is invalid
    """
    if not cursor:
        return None
    return Cursor.decode(cursor, column_name, pointer_name=pointer_name)
