""" Cursor codec

A cursor is an opaque string: base64-encoded JSON object with the boundary value and the direction of travel:

    {"id":3,"_pointsToNextItems":true}  ->  eyJpZCI6MywiX3BvaW50c1RvTmV4dEl0ZW1zIjp0cnVlfQ==
"""

from .cursor import Cursor, CursorDirection, POINTER_NAME
from .cursor import encode_cursor, decode_cursor
from .encode import encode_opaque_cursor, decode_opaque_cursor
