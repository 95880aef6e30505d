"""
Reply builder for consistent JSON responses.

A Reply is immutable; every setter returns a new Reply so replies are built
by chaining:

    reply('User not found').status(404).error(True)

Philosophy: every endpoint answers with the same envelope
(msg, error, path, timestamp, data, status, type).
"""
import json
import logging
import time
from typing import Any, Callable, Dict, Iterable, Optional, Union

from flask import Response, jsonify

logger = logging.getLogger(__name__)


class Reply:
    """Immutable response envelope."""

    __slots__ = ('_value',)

    def __init__(self, value: Dict[str, Any]):
        self._value = dict(value)

    def __repr__(self):
        return f"Reply({self._value!r})"

    def __eq__(self, other):
        if isinstance(other, Reply):
            return self._value == other._value
        return NotImplemented

    def _with(self, **changes) -> 'Reply':
        return Reply({**self._value, **changes})

    def value(self) -> Dict[str, Any]:
        """Reply as a plain dict, the JSON body sent to the client."""
        return dict(self._value)

    def inspect(self) -> str:
        return json.dumps(self._value)

    def map(self, callback: Callable[[Dict[str, Any]], Dict[str, Any]]) -> 'Reply':
        """Build a new reply from callback(value())."""
        return Reply(callback(self.value()))

    def status(self, status: int) -> 'Reply':
        return self._with(status=status)

    def error(self, error: bool) -> 'Reply':
        return self._with(error=error)

    def timestamp(self, timestamp: int) -> 'Reply':
        return self._with(timestamp=timestamp)

    def path(self, path: str) -> 'Reply':
        return self._with(path=path)

    def data(self, data: Union[Dict[str, Any], list]) -> 'Reply':
        return self._with(data=data)

    def type(self, type: str) -> 'Reply':
        return self._with(type=type)


def reply(content: Union[str, Reply] = '') -> Reply:
    """
    Start a reply from a message. An existing Reply is returned unchanged.

    Example:
        reply('Created').status(201).data({'id': 7})
    """
    if isinstance(content, Reply):
        return content
    return Reply({
        'msg': content or '',
        'error': False,
        'path': '/',
        'timestamp': int(time.time() * 1000),
        'data': {},
        'status': 200,
        'type': 'json'
    })


def to_response(content: Reply) -> tuple:
    """
    Render a reply with Flask.

    Returns:
        Tuple of (response, status_code) suitable for Flask return.
        'text' replies send msg as text/plain, everything else is JSON.
    """
    value = content.value()
    if value.get('type') == 'text':
        return Response(value.get('msg', ''), mimetype='text/plain'), value.get('status', 200)
    return jsonify(value), value.get('status', 200)


def error_reply(
    message: str,
    status: int = 400,
    error_code: Optional[str] = None
) -> Reply:
    """
    Create a standardized error reply.

    Args:
        message: User-friendly error message (required)
        status: HTTP status code (default: 400 Bad Request)
        error_code: Machine-readable error code (optional, sent in data)

    Returns:
        Reply with error flag set

    Common status codes:
        400 - Bad Request (missing required request fields)
        401 - Unauthorized (invalid or expired token)
        500 - Internal Server Error (handler raised)
    """
    built = reply(message).status(status).error(True)
    if error_code is not None:
        built = built.data({'error_code': error_code})

    logger.warning(f"Error reply: {status} - {message}")
    return built


def missing_fields_reply(source: str, keys: Iterable[str]) -> Reply:
    """
    Create the 400 reply for required request fields that are absent.

    Example:
        return missing_fields_reply('body', ['name', 'password'])
    """
    return error_reply(
        f"This endpoint require '{source}' with specific properties: {', '.join(keys)}",
        status=400
    )
