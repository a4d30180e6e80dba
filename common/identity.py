"""Resolve the calling user's id from request headers."""
from typing import Mapping

from fastapi import Request

from .config import get_settings
from .errors import Unauthenticated


def resolve_user_id(headers: Mapping[str, str]) -> int:
    header = get_settings().user_id_header
    raw = headers.get(header)
    if raw is None:
        # starlette headers are case-insensitive, plain dicts are not
        raw = headers.get(header.lower())
    if raw is None or not raw.strip():
        raise Unauthenticated(f"Missing {header} header")
    try:
        user_id = int(raw)
    except ValueError as exc:
        raise Unauthenticated(f"{header} must be a numeric id") from exc
    if user_id <= 0:
        raise Unauthenticated(f"{header} must be a positive id")
    return user_id


def get_current_user_id(request: Request) -> int:
    """FastAPI dependency flavour of :func:`resolve_user_id`."""
    try:
        return resolve_user_id(request.headers)
    except Unauthenticated as exc:
        raise exc.to_http_exception() from exc
