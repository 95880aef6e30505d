"""
Required request field decorators.

    @pins.post('login')
    @need.body(['name', 'password', '?remember'])
    def login(self, rec, options):
        options.body['name']      # guaranteed present
        options.body.get('remember')

Keys prefixed with '?' are optional. A request missing any required key is
answered with 400 before the handler runs.
"""

from functools import wraps
import logging

from pinup.decorators.routing import DATA_ATTR
from pinup.response import missing_fields_reply
from pinup.utils.request_data import read_source

logger = logging.getLogger(__name__)


def _strip(key: str) -> str:
    return key[1:] if key.startswith('?') else key


def require_fields(source: str, keys):
    """
    Decorator that requires keys in the given request data source.

    Args:
        source: 'params', 'query', 'body' or 'headers'
        keys: Field names, '?name' for optional fields

    Returns:
        Decorator; the wrapped handler gets the found values merged into
        options.<source>
    """
    keys = list(keys)

    def decorator(f):
        @wraps(f)
        def decorated_function(self, rec, options):
            available = read_source(rec, source)
            missing = []
            found = {}

            for key in keys:
                name = _strip(key)
                value = available.get(name)
                if key.startswith('?'):
                    found[name] = value
                elif value is None or value == '':
                    missing.append(key)
                else:
                    found[name] = value

            if missing:
                logger.warning(
                    f"Request to {f.__name__} missing {source} fields: {', '.join(missing)}"
                )
                return options.pin.res(missing_fields_reply(source, missing))

            setattr(options, source, {**getattr(options, source), **found})
            return f(self, rec, options)

        data = dict(getattr(f, DATA_ATTR, {}))
        data[source] = keys
        setattr(decorated_function, DATA_ATTR, data)
        return decorated_function

    return decorator


class _Need:
    """need.params([...]), need.query([...]), need.body([...]), need.headers([...])."""

    def params(self, keys):
        return require_fields('params', keys)

    def query(self, keys):
        return require_fields('query', keys)

    def body(self, keys):
        return require_fields('body', keys)

    def headers(self, keys):
        return require_fields('headers', keys)


need = _Need()
