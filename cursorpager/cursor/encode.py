from __future__ import annotations

import base64
import json

from cursorpager.util.json import jsonable


def encode_opaque_cursor(data: dict) -> str:
    """ Encode a dict of data as an opaque cursor: base64-encoded compact JSON """
    return base64.b64encode(json.dumps(data, separators=(',', ':'), default=jsonable).encode()).decode()


def decode_opaque_cursor(data: str) -> dict:
    """ Decode an opaque cursor into a data dict

    Raises:
        Exception: all sorts of errors related to bad cursor
    """
    decoded = base64.b64decode(data, validate=True)  # binascii.Error
    return json.loads(decoded)  # UnicodeDecodeError, json.decoder.JSONDecodeError
