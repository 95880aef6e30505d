"""
JWT authentication decorator for route protection.

    @pins.get('me')
    @auth()
    def me(self, rec, options):
        user = options.auth.payload['sub']

The token is read from a request data source (the Authorization header by
default) in the form '<prefix> <token>', e.g. 'Bearer eyJ...'.
"""

from functools import wraps
from typing import Optional
import logging

import jwt

from pinup.exceptions import AuthDisabledError
from pinup.response import error_reply
from pinup.utils.request_data import read_source

logger = logging.getLogger(__name__)

AUTH_ATTR = '__pinup_auth__'


def auth(
    error: bool = True,
    jwt_secret: Optional[str] = None,
    data_source: str = 'headers',
    data_name: str = 'authorization'
):
    """
    Decorator to require (or just attempt) JWT authentication.

    With error=True a missing token is answered with 400 and an invalid or
    expired one with 401. With error=False the handler always runs and
    options.auth.passed tells whether the token verified.

    Sets options.auth.payload to the decoded claims on success.

    Args:
        error: Reject requests that do not authenticate
        jwt_secret: Secret to verify with instead of the configured one
        data_source: Request data source holding the token
        data_name: Field name of the token in that source

    Raises:
        AuthDisabledError: if neither jwt_secret nor a configured secret exists
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(self, rec, options):
            holder = read_source(rec, data_source).get(data_name)
            context = options.auth

            if not (jwt_secret or context.enabled):
                raise AuthDisabledError(
                    "You cannot use auth properties because they are disabled. "
                    "Set an auth secret in the Pinup config"
                )

            if not holder and error:
                logger.warning(
                    f"Unauthenticated access attempt to {f.__name__} at {rec.path}"
                )
                return options.pin.res(error_reply(
                    f"This endpoint require '{data_source}' with specific properties: {data_name}",
                    status=400
                ))

            try:
                _, _, token = str(holder or '').partition(' ')
                context.payload = context.verify(token, jwt_secret)
                context.passed = True
            except jwt.InvalidTokenError as e:
                if error:
                    name = type(e).__name__
                    return options.pin.res(error_reply(
                        f"{e} [{name}]",
                        status=401,
                        error_code=name
                    ))
                context.payload = None
                context.passed = False

            logger.debug(
                f"Auth for {f.__name__}: {'passed' if context.passed else 'not passed'}"
            )
            return f(self, rec, options)

        setattr(decorated_function, AUTH_ATTR, True)
        return decorated_function

    return decorator
