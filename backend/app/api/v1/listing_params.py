"""Turn a framework request into the plain parameter map the normalizer takes."""

from __future__ import annotations

from typing import Union

from fastapi import Request

RawQueryParams = dict[str, Union[str, list[str]]]


def raw_query_params(request: Request) -> RawQueryParams:
    """Every query parameter as one string, or a list when repeated.

    Usable as a FastAPI ``Depends()`` target.
    """
    params: RawQueryParams = {}
    for key in request.query_params.keys():
        if key in params:
            continue
        values = request.query_params.getlist(key)
        params[key] = values[0] if len(values) == 1 else values
    return params
