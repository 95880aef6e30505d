"""
Route path helpers.

Controllers and handlers declare paths loosely ('users', '/users/', './static')
and these helpers turn them into the canonical form used for URL rules.
"""

import re
from typing import Any, List

_EDGES = re.compile(r'^(\.*/*)(.+?)(/*)$')
_REPEATED_SLASHES = re.compile(r'/{2,}')
_EXPRESS_PARAM = re.compile(r'(?<=/):([A-Za-z_]\w*)')

_MISSING = object()


def normalize_path(*segments: str) -> str:
    """
    Join path segments into a normalized path.

    Leading dots and slashes and trailing slashes are removed, a single
    leading slash is added and repeated slashes are collapsed.

    Args:
        *segments: Path segments to join with '/'

    Returns:
        Normalized path, or '' when every segment is empty

    Example:
        normalize_path('users/', '/:id')   # '/users/:id'
        normalize_path('./static')         # '/static'
        normalize_path('/', '')            # '/'
    """
    path = '/'.join(segments)
    if not path:
        return ''
    path = _EDGES.sub(r'\2', path)
    return _REPEATED_SLASHES.sub('/', '/' + path)


def split_path(*segments: str) -> List[str]:
    """Non-empty segments of the normalized path."""
    return [part for part in normalize_path(*segments).split('/') if part]


def join_path(base: str, new_path: str, to_end: bool = True) -> str:
    """
    Join two paths, appending new_path to base (or prepending it when
    to_end is False). The result is normalized.
    """
    first, second = (base, new_path) if to_end else (new_path, base)
    return normalize_path(normalize_path(first), normalize_path(second))


def as_list(item: Any, default: Any = _MISSING) -> List[Any]:
    """
    Treat a single item, a list/tuple of items or None uniformly as a list.

    Args:
        item: Single value, sequence of values or None
        default: Value to return (wrapped in a list) when the result is empty

    Returns:
        List of values
    """
    if item is None:
        values = []
    elif isinstance(item, (list, tuple)):
        values = list(item)
    else:
        values = [item]

    if not values and default is not _MISSING:
        return [default]
    return values


def to_flask_rule(path: str) -> str:
    """Convert ':name' path segments into Flask '<name>' placeholders."""
    return _EXPRESS_PARAM.sub(r'<\1>', path)
