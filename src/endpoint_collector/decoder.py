from __future__ import annotations

import requests

from .errors import DecodeError
from .values import PathValue, to_path_value


def decode(response: requests.Response, response_type: str = "json") -> PathValue:
    """Decode a response body. ``text`` never fails; ``json`` raises DecodeError.

    Bodies nested deeper than the interpreter can recurse are a DecodeError too.
    """
    if response_type == "text":
        return response.text

    try:
        payload = response.json()
    except (ValueError, RecursionError) as e:
        raise DecodeError(response_type, e) from e
    try:
        return to_path_value(payload)
    except (TypeError, RecursionError) as e:
        raise DecodeError(response_type, e) from e
