"""
Uniform JSON response wrapper.

Every API response is `{"error": "...", "data": ...}` with empty keys left
out, served with HTTP 200 whether the request succeeded or not. Clients read
the outcome from the body only.
"""

from __future__ import annotations

from typing import Any


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, (str, list, tuple, dict)):
        return len(value) == 0
    return False


def ok(data: Any) -> dict:
    if _is_empty(data):
        return {}
    return {"data": data}


def fail(error: BaseException | str) -> dict:
    message = str(error)
    if not message and isinstance(error, BaseException):
        message = type(error).__name__
    if not message:
        return {}
    return {"error": message}
