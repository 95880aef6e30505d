"""
Request-scoped objects handed to every handler.

A handler is called as handler(self, rec, options) where rec is the Flask
request and options is a MethodOptions instance built fresh per request.
"""

import logging
import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional, Union

import jwt

from pinup.exceptions import AuthDisabledError
from pinup.utils.paths import normalize_path

logger = logging.getLogger(__name__)

JWT_ALGORITHM = 'HS256'

_DURATION = re.compile(r'^\s*(\d+(?:\.\d+)?)\s*([a-z]*)\s*$', re.IGNORECASE)
_UNIT_SECONDS = {
    '': 1, 's': 1, 'sec': 1, 'secs': 1, 'second': 1, 'seconds': 1,
    'm': 60, 'min': 60, 'mins': 60, 'minute': 60, 'minutes': 60,
    'h': 3600, 'hr': 3600, 'hrs': 3600, 'hour': 3600, 'hours': 3600,
    'd': 86400, 'day': 86400, 'days': 86400,
    'w': 604800, 'week': 604800, 'weeks': 604800,
    'y': 31557600, 'year': 31557600, 'years': 31557600,
}


def parse_expires_in(value: Union[str, int, float, timedelta]) -> timedelta:
    """
    Turn a token lifetime into a timedelta.

    Numbers are seconds; strings take an optional unit ('90', '30m', '1h',
    '2 days').

    Raises:
        ValueError: if the string cannot be parsed
    """
    if isinstance(value, timedelta):
        return value
    if isinstance(value, (int, float)):
        return timedelta(seconds=value)

    match = _DURATION.match(str(value))
    if not match or match.group(2).lower() not in _UNIT_SECONDS:
        raise ValueError(f"Invalid token lifetime: {value!r}")
    amount, unit = match.groups()
    return timedelta(seconds=float(amount) * _UNIT_SECONDS[unit.lower()])


@dataclass
class AuthContext:
    """JWT state of one request, filled in by the auth decorator."""
    secret: Optional[str] = None
    expires_in: Union[str, int] = '1h'
    passed: Optional[bool] = None
    payload: Optional[Dict[str, Any]] = None

    @property
    def enabled(self) -> bool:
        return bool(self.secret)

    def sign(self, payload: Dict[str, Any], secret: Optional[str] = None, **options) -> str:
        """
        Sign payload as an HS256 token.

        An 'exp' claim is added from options['expires_in'] (or the configured
        lifetime) unless the payload already carries one.

        Args:
            payload: Claims to sign
            secret: Key to sign with instead of the configured secret
            **options: expires_in, algorithm, headers

        Returns:
            Encoded token

        Raises:
            AuthDisabledError: if no secret is available
        """
        key = secret or self.secret
        if not key:
            raise AuthDisabledError(
                "You cannot use auth properties because they are disabled. "
                "Set an auth secret in the Pinup config"
            )

        claims = dict(payload)
        if 'exp' not in claims:
            lifetime = parse_expires_in(options.get('expires_in') or self.expires_in or '1h')
            claims['exp'] = datetime.now(timezone.utc) + lifetime

        return jwt.encode(
            claims,
            key,
            algorithm=options.get('algorithm', JWT_ALGORITHM),
            headers=options.get('headers')
        )

    def verify(self, token: str, secret: Optional[str] = None) -> Dict[str, Any]:
        """
        Decode and verify a token.

        Raises:
            AuthDisabledError: if no secret is available
            jwt.InvalidTokenError: if the token is malformed, forged or expired
        """
        key = secret or self.secret
        if not key:
            raise AuthDisabledError(
                "You cannot use auth properties because they are disabled. "
                "Set an auth secret in the Pinup config"
            )
        return jwt.decode(token, key, algorithms=[JWT_ALGORITHM])


@dataclass
class MethodType:
    """Route descriptor: one handler bound to one HTTP method and path."""
    method: str
    name: str
    path: List[str]
    parent: Any
    action: Callable
    data: Dict[str, List[str]] = field(default_factory=dict)
    auth: bool = False

    @property
    def endpoint(self) -> str:
        """Handler path relative to its controller."""
        return normalize_path(*self.path)

    @property
    def full_path(self) -> str:
        return normalize_path(self.parent.full_path, *self.path)


@dataclass
class PinExtensions:
    """Helpers bound to the current request: res renders a reply, log writes a request log line."""
    res: Callable[..., Any]
    log: Callable[..., str]


@dataclass
class MethodOptions:
    route: MethodType
    pin: PinExtensions
    auth: AuthContext
    params: Dict[str, Any] = field(default_factory=dict)
    headers: Dict[str, Any] = field(default_factory=dict)
    query: Dict[str, Any] = field(default_factory=dict)
    body: Dict[str, Any] = field(default_factory=dict)
